# src/propflow/core/pipeline/assign.py
"""
Primitiva de merge do Property Bag.

Política de merge (v1):
    - merge raso (shallow): apenas o primeiro nível de chaves
    - chave presente na contribuição → sobrescreve o acumulador
    - chave ausente na contribuição → preservada
    - contribuição None ou vazia → no-op

Diferente de `config.loader.overlay_sections`, aqui não há seções nem
checagem de tipos: valores são opacos para o pipeline.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional


def assign(props: Dict[str, Any], contribution: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Aplica uma contribuição sobre o Property Bag, in-place.

    O acumulador pertence exclusivamente à run corrente, por isso a
    mutação in-place é segura; o estado inicial do chamador nunca chega
    aqui sem ter sido copiado antes.

    Args:
        props: Property Bag acumulado (mutado).
        contribution: resultado de um Step.

    Returns:
        Dict[str, Any]: o próprio `props`, para encadeamento.

    Raises:
        TypeError: Se a contribuição não for Mapping nem None.
    """
    if contribution is None:
        return props
    if not isinstance(contribution, Mapping):
        raise TypeError(
            f"Step contribution must be a mapping or None, got: {type(contribution).__name__}"
        )
    props.update(contribution)
    return props
