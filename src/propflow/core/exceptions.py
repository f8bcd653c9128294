"""
PropFlow — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do PropFlow.

Objetivo:
- Permitir que o modelo de contrato e o Engine levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para PipeErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Exceções carregam apenas dados estruturados (serializáveis).
- Exceções de Steps nunca são convertidas para estes tipos.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import PipeErrorPayload


@dataclass(frozen=True, eq=False)
class PipeException(Exception):
    """Base class para exceções internas do PropFlow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - `type` é o código estável do catálogo em `errors.py`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    type: str = ""

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    @classmethod
    def from_payload(cls, payload: PipeErrorPayload) -> "PipeException":
        return cls(
            message=payload.message,
            details=dict(payload.details),
            hint=payload.hint,
            type=payload.type,
        )

    def to_payload(self) -> PipeErrorPayload:
        return PipeErrorPayload(
            type=self.type or self.__class__.__name__,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
        )


# ---------------------------------------------------------------------------
# Contrato
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ContractViolationError(PipeException, ValueError):
    """Sequência de Steps não satisfaz o próprio contrato (detectado antes da execução)."""


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class EngineConfigurationError(PipeException):
    """Modo de execução incompatível com a sequência fornecida."""
