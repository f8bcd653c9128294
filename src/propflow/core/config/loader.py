# src/propflow/core/config/loader.py
"""
Loader de configuração do PropFlow.

A configuração efetiva é resolvida a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional; ignorado se não existir)

Formato:
    A configuração é organizada em seções de primeiro nível (`contract`,
    `trace`, ...), cada uma um dict de opções. O local sobrepõe opção a
    opção dentro de cada seção; não há merge além desse nível.

Decisões arquiteturais:
    - Uma seção que é dict de um lado e escalar do outro é conflito fatal
    - Seções `null` equivalem a ausentes
    - Nenhum input é mutado; o resultado é sempre um novo dict

Limites explícitos:
    - Não interpreta as opções (ver `settings.py`)
    - Não persiste configuração
"""

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    ConfigNotFoundError,
    ConfigTypeConflictError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)

PathLike = Union[str, Path]

_READERS: Dict[str, Callable[[Any], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def read_document(path: PathLike) -> Dict[str, Any]:
    """
    Lê um documento de configuração YAML/JSON.

    Arquivos vazios são interpretados como `{}`.

    Raises:
        ConfigNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se o root não for dict.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    with path.open("r", encoding="utf-8") as f:
        data = reader(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )
    return data


def overlay_sections(defaults: Dict[str, Any], local: Dict[str, Any]) -> Dict[str, Any]:
    """
    Sobrepõe `local` a `defaults`, seção a seção.

    Dentro de uma seção, cada opção do local substitui a do default;
    opções não citadas são preservadas. Valores de seção que não são
    dict (listas, escalares) são substituídos por inteiro.

    Raises:
        ConfigTypeConflictError: Se uma seção for dict de um lado e
            não-dict do outro.
    """
    effective = deepcopy(defaults)

    for name, section in local.items():
        if section is None:
            continue
        current = effective.get(name)
        if current is None:
            effective[name] = deepcopy(section)
            continue

        if isinstance(current, dict) != isinstance(section, dict):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na seção '{name}': "
                f"{type(current).__name__} vs {type(section).__name__}"
            )

        if isinstance(section, dict):
            current.update(deepcopy(section))
        else:
            effective[name] = deepcopy(section)

    return effective


def load_config(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva (defaults + local).

    Raises:
        ConfigNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for dict.
        ConfigTypeConflictError: Se uma seção mudar de forma no local.
    """
    effective = read_document(defaults_path)

    if local_path is not None and Path(local_path).exists():
        effective = overlay_sections(effective, read_document(local_path))

    return effective
