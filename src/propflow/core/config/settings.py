# src/propflow/core/config/settings.py
"""
Settings efetivos do PropFlow.

Traduz a configuração resolvida (dict) para um objeto imutável e tipado
consumido pelo modelo de contrato e pelo Engine.

Schema (v1):
    contract:
      allow_duplicate_produces: bool  (default: true)
    trace:
      enabled: bool                   (default: false)
      record_keys: bool               (default: true)

Seções desconhecidas são ignoradas. Tipos inválidos são erro.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidSettingError
from .hashing import compute_config_hash
from .loader import PathLike, load_config


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = config.get(name, {})
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise InvalidSettingError(
            f"Seção '{name}' deve ser dict, recebido: {type(section).__name__}"
        )
    return section


def _flag(section: Mapping[str, Any], path: str, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise InvalidSettingError(
            f"'{path}.{key}' deve ser bool, recebido: {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class PipelineSettings:
    """
    Settings imutáveis de execução.

    Campos:
        - allow_duplicate_produces: dois Steps podem garantir a mesma chave
          (última escrita vence em runtime)
        - trace_enabled: o Engine cria um RunTrace por run
        - trace_record_keys: eventos de Step incluem as chaves contribuídas
        - config_hash: hash da configuração de origem (None para defaults)
    """
    allow_duplicate_produces: bool = True
    trace_enabled: bool = False
    trace_record_keys: bool = True
    config_hash: Optional[str] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PipelineSettings":
        if not isinstance(config, dict):
            raise InvalidSettingError(
                f"Config deve ser dict, recebido: {type(config).__name__}"
            )

        contract = _section(config, "contract")
        trace = _section(config, "trace")

        return cls(
            allow_duplicate_produces=_flag(contract, "contract", "allow_duplicate_produces", True),
            trace_enabled=_flag(trace, "trace", "enabled", False),
            trace_record_keys=_flag(trace, "trace", "record_keys", True),
            config_hash=compute_config_hash(config),
        )


DEFAULT_SETTINGS = PipelineSettings()


def load_settings(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> PipelineSettings:
    """Carrega a configuração (defaults + local) e constrói PipelineSettings."""
    return PipelineSettings.from_config(
        load_config(defaults_path=defaults_path, local_path=local_path)
    )
