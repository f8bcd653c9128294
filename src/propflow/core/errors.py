"""
PropFlow — Canonical Error Structures (v1)

Este módulo define o padrão canônico de payloads de erro do PropFlow.
Erros de contrato e de configuração do engine fazem parte do contrato
operacional do sistema, devendo ser:

- explícitos
- serializáveis
- acionáveis

Falhas de Steps NÃO passam por este catálogo: elas propagam intactas
até o chamador de `run`.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PipeErrorPayload:
    """
    Payload canônico de erro do PropFlow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao autor do pipeline (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Contrato
CONTRACT_MISSING_REQUIRES = "CONTRACT_MISSING_REQUIRES"
CONTRACT_DUPLICATE_PRODUCES = "CONTRACT_DUPLICATE_PRODUCES"
CONTRACT_MISSING_INITIAL = "CONTRACT_MISSING_INITIAL"

# Engine
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def contract_missing_requires(
    *,
    step: str,
    index: int,
    missing: List[str],
    available: List[str],
    hint: str = "Declare a chave no estado inicial ou em `produces` de um Step anterior. Chaves em `may_produce` não satisfazem requisitos.",
) -> PipeErrorPayload:
    return PipeErrorPayload(
        type=CONTRACT_MISSING_REQUIRES,
        message=f"Step '{step}' (#{index}) requer chaves não garantidas: {', '.join(missing)}",
        details={
            "step": step,
            "index": index,
            "missing": missing,
            "available": available,
        },
        hint=hint,
    )


def contract_duplicate_produces(
    *,
    step: str,
    index: int,
    duplicated: List[str],
    first_producers: Dict[str, str],
    hint: str = "Remova a chave de um dos Steps ou habilite `contract.allow_duplicate_produces`.",
) -> PipeErrorPayload:
    return PipeErrorPayload(
        type=CONTRACT_DUPLICATE_PRODUCES,
        message=f"Step '{step}' (#{index}) redeclara chaves já garantidas: {', '.join(duplicated)}",
        details={
            "step": step,
            "index": index,
            "duplicated": duplicated,
            "first_producers": first_producers,
        },
        hint=hint,
    )


def contract_missing_initial(
    *,
    missing: List[str],
    declared: List[str],
    hint: str = "Forneça as chaves declaradas como iniciais na sequência ou reconstrua a sequência a partir do estado real.",
) -> PipeErrorPayload:
    return PipeErrorPayload(
        type=CONTRACT_MISSING_INITIAL,
        message=f"Estado inicial não contém chaves declaradas: {', '.join(missing)}",
        details={
            "missing": missing,
            "declared": declared,
        },
        hint=hint,
    )


def engine_configuration_error(
    *,
    message: str = "Configuração inválida para execução do pipeline",
    details: Optional[Dict[str, Any]] = None,
    hint: str = "Revise a sequência de Steps e o modo de execução escolhido antes de reexecutar.",
) -> PipeErrorPayload:
    return PipeErrorPayload(
        type=ENGINE_CONFIGURATION_ERROR,
        message=message,
        details=details or {},
        hint=hint,
    )
