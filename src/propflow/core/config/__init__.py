# src/propflow/core/config/__init__.py
"""
Camada de configuração do PropFlow.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Sobreposição determinística do local sobre os defaults, por seção
    - Hash canônico para rastreabilidade
    - Tradução para `PipelineSettings` imutável

Limites explícitos:
    - Não executa pipeline
    - Não valida contratos de Steps
"""

from .errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigTypeConflictError,
    InvalidConfigRootTypeError,
    InvalidSettingError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import load_config, overlay_sections, read_document
from .settings import DEFAULT_SETTINGS, PipelineSettings, load_settings

__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigTypeConflictError",
    "DEFAULT_SETTINGS",
    "InvalidConfigRootTypeError",
    "InvalidSettingError",
    "PipelineSettings",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "load_config",
    "load_settings",
    "overlay_sections",
    "read_document",
]
