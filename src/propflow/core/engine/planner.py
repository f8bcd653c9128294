# src/propflow/core/engine/planner.py
"""
Planejador de execução do pipeline.

Transforma a entrada do chamador (estado inicial + Steps) em uma
`StepSequence` validada, antes que qualquer Step seja executado.

Decisões arquiteturais:
    - Lista de Steps → sequência construída a partir das chaves reais do
      estado inicial
    - `StepSequence` pronta → verifica que o estado inicial contém
      as chaves que a sequência declarou como iniciais e aplica a política
      de produção duplicada dos settings
    - Erros de contrato são fatais e ocorrem sem efeitos colaterais

Limites explícitos:
    - Não executa Steps
    - Não reordena Steps (o modelo é estritamente linear)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Optional, Union

from propflow.core.config.settings import DEFAULT_SETTINGS, PipelineSettings
from propflow.core.errors import contract_missing_initial
from propflow.core.exceptions import ContractViolationError
from propflow.core.pipeline.contract import resolve_contract
from propflow.core.pipeline.sequence import StepSequence
from propflow.core.pipeline.types import sorted_keys

StepsLike = Union[StepSequence, Iterable[Any]]


def enforce_settings(sequence: StepSequence, settings: PipelineSettings) -> StepSequence:
    """
    Aplica a política de produção duplicada dos settings a uma sequência pronta.

    Uma sequência validada de forma permissiva não é aceita por settings
    estritos sem revalidação: o contrato é resolvido novamente com
    `allow_duplicate_produces=False`. Settings permissivos aceitam
    qualquer sequência, pois a política estrita é um subconjunto.

    Raises:
        ContractViolationError: Se a sequência tiver produção duplicada
            e os settings a proibirem.
    """
    if sequence.allow_duplicate_produces and not settings.allow_duplicate_produces:
        resolve_contract(sequence.initial_keys, sequence.steps, allow_duplicate_produces=False)
    return sequence


def plan_execution(
    initial: Mapping,
    steps: StepsLike,
    *,
    settings: Optional[PipelineSettings] = None,
) -> StepSequence:
    """
    Valida a entrada e produz a sequência a executar.

    Args:
        initial: estado inicial fornecido pelo chamador.
        steps: `StepSequence` ou iterável de Steps.
        settings: settings efetivos (defaults quando None).

    Returns:
        StepSequence: sequência validada contra o estado inicial.

    Raises:
        TypeError: Se `initial` não for Mapping.
        ContractViolationError: Requisito não garantido, produção duplicada
            proibida, ou chave inicial declarada ausente.
    """
    if not isinstance(initial, Mapping):
        raise TypeError(f"Initial state must be a mapping, got: {type(initial).__name__}")

    settings = settings or DEFAULT_SETTINGS

    if isinstance(steps, StepSequence):
        missing = sorted_keys(k for k in steps.initial_keys if k not in initial)
        if missing:
            raise ContractViolationError.from_payload(
                contract_missing_initial(missing=missing, declared=sorted_keys(steps.initial_keys))
            )
        return enforce_settings(steps, settings)

    return StepSequence(
        steps,
        initial_keys=initial.keys(),
        allow_duplicate_produces=settings.allow_duplicate_produces,
    )
