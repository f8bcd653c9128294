# src/propflow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do PropFlow.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção aqui representa erro de contrato ou de Step
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do PropFlow.

    Permite captura genérica de falhas de carregamento, merge e
    construção de settings, separada de violações de contrato.
    """


class ConfigNotFoundError(ConfigError):
    """
    Arquivo de configuração obrigatório (defaults) não encontrado.

    Limites explícitos:
        - Não tenta inferir ou criar defaults automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo não suportado pelo loader.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz da configuração não é um dicionário."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de forma entre seções durante a sobreposição de configuração.

    Exemplo de conflito:
        - base:     {"trace": {"enabled": true}}
        - override: {"trace": "off"}
    """


class InvalidSettingError(ConfigError):
    """Valor de configuração com tipo inválido para o PipelineSettings."""
