# src/propflow/core/pipeline/contract.py
"""
Modelo de contrato do pipeline do PropFlow.

Este módulo calcula, sem executar nenhum Step, o formato final garantido
do Property Bag para um conjunto de chaves iniciais e uma sequência
ordenada de Steps.

O cálculo é um fold da esquerda para a direita:
    - `available` começa com as chaves iniciais
    - cada Step tem seus `requires` verificados contra `available`
    - em seguida `available |= produces` (contribuição incondicional)

O conjunto garantido final é a conjunção das promessas de todos os
Steps: ele só é válido porque todo Step da sequência sempre executa
(sem skip, sem saída antecipada).

Decisões arquiteturais:
    - Chaves em `may_produce` nunca satisfazem requisitos
    - Sync e async são indistinguíveis neste nível
    - Produção duplicada é permitida por padrão (última escrita vence)

Invariantes:
    - A mesma entrada sempre produz o mesmo PipelineContract
    - Uma violação é detectada antes de qualquer execução
    - `guaranteed` independe da ordem; a satisfação de requisitos não

Limites explícitos:
    - Não executa Steps
    - Não inspeciona valores retornados em runtime
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Tuple

from ..errors import contract_duplicate_produces, contract_missing_requires
from ..exceptions import ContractViolationError
from .types import PipeStep, StepContract, as_step, sorted_keys


@dataclass(frozen=True)
class StageContract:
    """Visão estática de um Step dentro da sequência."""

    index: int
    step_id: str
    available_before: FrozenSet[str]
    guaranteed_after: FrozenSet[str]


@dataclass(frozen=True)
class PipelineContract:
    """
    Contrato resolvido de uma sequência de Steps.

    Campos:
        - initial: chaves declaradas do estado inicial
        - guaranteed: chaves presentes após a sequência completa
        - possible: `guaranteed` + todas as contribuições condicionais
        - stages: visão por Step (`StageContract`), na ordem de execução
    """

    initial: FrozenSet[str]
    guaranteed: FrozenSet[str]
    possible: FrozenSet[str]
    stages: Tuple[StageContract, ...] = ()

    @property
    def contributed(self) -> FrozenSet[str]:
        """Chaves garantidas introduzidas pelos Steps (não iniciais)."""
        return self.guaranteed - self.initial

    @property
    def conditional(self) -> FrozenSet[str]:
        """Chaves possíveis, mas não garantidas."""
        return self.possible - self.guaranteed


def contract_of(step: Any) -> StepContract:
    """Contrato declarado de um Step, independente do modo (sync/async)."""
    return as_step(step).contract


def unconditional_keys(step: Any) -> FrozenSet[str]:
    """Chaves que o Step sempre contribui. Callables sem declaração contribuem nada."""
    return contract_of(step).produces


def conditional_keys(step: Any) -> FrozenSet[str]:
    return contract_of(step).may_produce


def resolve_contract(
    initial_keys: Iterable[str],
    steps: Iterable[Any],
    *,
    allow_duplicate_produces: bool = True,
) -> PipelineContract:
    """
    Valida a sequência e resolve o seu contrato final.

    Args:
        initial_keys: chaves garantidas no estado inicial.
        steps: sequência ordenada de Steps (qualquer forma aceita por `as_step`).
        allow_duplicate_produces: quando False, dois Steps declarando a mesma
            chave incondicional invalidam a sequência.

    Returns:
        PipelineContract: contrato resolvido.

    Raises:
        ContractViolationError: requisito não garantido ou produção
            duplicada (quando proibida).
    """
    initial = frozenset(initial_keys)
    available = set(initial)
    possible = set(initial)
    producers: Dict[str, str] = {}
    stages = []

    for index, raw in enumerate(steps):
        step: PipeStep = as_step(raw)
        contract = step.contract

        missing = contract.requires - available
        if missing:
            raise ContractViolationError.from_payload(
                contract_missing_requires(
                    step=step.id,
                    index=index,
                    missing=sorted_keys(missing),
                    available=sorted_keys(available),
                )
            )

        if not allow_duplicate_produces:
            duplicated = sorted(k for k in contract.produces if k in producers)
            if duplicated:
                raise ContractViolationError.from_payload(
                    contract_duplicate_produces(
                        step=step.id,
                        index=index,
                        duplicated=duplicated,
                        first_producers={k: producers[k] for k in duplicated},
                    )
                )

        before = frozenset(available)
        for key in contract.produces:
            producers.setdefault(key, step.id)
        available |= contract.produces
        possible |= contract.possible

        stages.append(
            StageContract(
                index=index,
                step_id=step.id,
                available_before=before,
                guaranteed_after=frozenset(available),
            )
        )

    return PipelineContract(
        initial=initial,
        guaranteed=frozenset(available),
        possible=frozenset(possible),
        stages=tuple(stages),
    )


def guaranteed_keys(initial_keys: Iterable[str], steps: Iterable[Any]) -> FrozenSet[str]:
    return resolve_contract(initial_keys, steps).guaranteed


def missing_guarantees(contract: PipelineContract, props: Mapping[str, Any]) -> FrozenSet[str]:
    """
    Chaves garantidas pelo contrato que estão ausentes de um Property Bag.

    O Engine nunca chama esta função: um Step que não entrega o que
    prometeu é um bug do Step, não algo que a execução detecte. Ela existe
    para auditoria do lado do chamador e para testes.
    """
    return frozenset(k for k in contract.guaranteed if k not in props)
