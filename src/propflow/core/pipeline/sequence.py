# src/propflow/core/pipeline/sequence.py
"""
Sequência imutável e validada de Steps.

Uma `StepSequence` só existe se o seu contrato for válido: a validação
ocorre na construção, portanto uma violação é sempre uma falha de
construção e nunca de execução.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Iterable, Iterator, Tuple

from .contract import PipelineContract, resolve_contract
from .types import PipeStep, StepMode, as_step, sorted_keys


class StepSequence:
    """
    Sequência ordenada, de tamanho fixo e imutável de Steps.

    Args:
        steps: Steps em ordem de execução.
        initial_keys: chaves garantidas pelo estado inicial.
        allow_duplicate_produces: repassado a `resolve_contract`.

    Raises:
        ContractViolationError: Se algum Step exigir chave não garantida.
        TypeError: Se algum item não for chamável.
    """

    __slots__ = ("_steps", "_contract", "_allow_duplicate_produces")

    def __init__(
        self,
        steps: Iterable[Any],
        *,
        initial_keys: Iterable[str] = (),
        allow_duplicate_produces: bool = True,
    ) -> None:
        normalized: Tuple[PipeStep, ...] = tuple(as_step(s) for s in steps)
        contract = resolve_contract(
            initial_keys,
            normalized,
            allow_duplicate_produces=allow_duplicate_produces,
        )
        object.__setattr__(self, "_steps", normalized)
        object.__setattr__(self, "_contract", contract)
        object.__setattr__(self, "_allow_duplicate_produces", allow_duplicate_produces)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("StepSequence is immutable")

    @property
    def steps(self) -> Tuple[PipeStep, ...]:
        return self._steps

    @property
    def contract(self) -> PipelineContract:
        return self._contract

    @property
    def initial_keys(self) -> FrozenSet[str]:
        return self._contract.initial

    @property
    def allow_duplicate_produces(self) -> bool:
        """Política de produção duplicada com que a sequência foi validada."""
        return self._allow_duplicate_produces

    @property
    def guaranteed(self) -> FrozenSet[str]:
        return self._contract.guaranteed

    @property
    def is_sync(self) -> bool:
        """True quando nenhum Step declara modo ASYNC."""
        return all(s.mode is StepMode.SYNC for s in self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[PipeStep]:
        return iter(self._steps)

    def __getitem__(self, index: int) -> PipeStep:
        return self._steps[index]

    def __repr__(self) -> str:
        ids = ", ".join(s.id for s in self._steps)
        return f"StepSequence([{ids}], initial={sorted_keys(self.initial_keys)})"
