# src/propflow/core/pipeline/types.py
"""
Tipos canônicos do pipeline do PropFlow.

Este módulo define as estruturas que descrevem um Step e o seu contrato
declarado, permitindo que o modelo de contrato raciocine sobre a
sequência sem executar nada.

Componentes principais:
    - StepMode     → enum de modo de execução (SYNC, ASYNC)
    - StepContract → par declarado (requires, produces) + may_produce
    - PipeStep     → Step concreto: callable + contrato + identidade
    - pipe_step    → decorator de declaração de contrato
    - as_step      → normalização de qualquer Step aceito para PipeStep

Invariantes:
    - Contratos são imutáveis (frozen) e baseados em frozenset
    - Uma chave nunca é simultaneamente incondicional e condicional
    - O modo não altera o contrato, apenas a forma de invocação

Limites explícitos:
    - Não executa Steps
    - Não valida sequências (ver `contract.py`)
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, FrozenSet, Iterable, Mapping, Optional, Union

Props = Mapping[str, Any]
Contribution = Optional[Mapping[str, Any]]
StepFn = Callable[[Props], Union[Contribution, Awaitable[Contribution]]]


class StepMode(str, Enum):
    """
    Modo de execução de um Step.

    O modo é puramente operacional: no nível de contrato, Steps
    síncronos e assíncronos são indistinguíveis. O Engine usa o modo
    apenas para saber se `run_sync` é aplicável à sequência.

    Tipos definidos:
        - SYNC: retorna a contribuição imediatamente
        - ASYNC: retorna um awaitable que resolve para a contribuição
    """
    SYNC = "sync"
    ASYNC = "async"


def _keyset(keys: Union[str, Iterable[str], None]) -> FrozenSet[str]:
    if keys is None:
        return frozenset()
    out = frozenset([keys]) if isinstance(keys, str) else frozenset(keys)
    for k in out:
        if not isinstance(k, str) or not k:
            raise ValueError(f"Property keys must be non-empty strings, got: {k!r}")
    return out


def sorted_keys(keys: Iterable[Any]) -> list:
    """
    Ordena chaves de forma determinística, inclusive com tipos mistos.

    O estado inicial e as contribuições em runtime não são restritos a
    chaves `str`; a ordenação agrupa por nome de tipo e depois por `str`.
    Para chaves exclusivamente `str` o resultado é o mesmo de `sorted`.
    """
    return sorted(keys, key=lambda k: (type(k).__name__, str(k)))


@dataclass(frozen=True)
class StepContract:
    """
    Contrato declarado de um Step.

    Campos:
        - requires: chaves lidas pelo Step (verificadas antes da execução)
        - produces: chaves sempre retornadas (contribuição incondicional)
        - may_produce: chaves retornadas sob alguma condição interna
          (contribuição condicional, nunca conta como garantia)

    Decisões arquiteturais:
        - `requires` é documentação verificável, não checagem em runtime
        - Uma chave em `requires` e `produces` é válida (read-modify-write)
        - Contrato vazio é válido (Step de validação/efeito colateral)

    Raises:
        ValueError: Se uma chave estiver em `produces` e `may_produce`.
    """
    requires: FrozenSet[str] = field(default_factory=frozenset)
    produces: FrozenSet[str] = field(default_factory=frozenset)
    may_produce: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "requires", _keyset(self.requires))
        object.__setattr__(self, "produces", _keyset(self.produces))
        object.__setattr__(self, "may_produce", _keyset(self.may_produce))

        overlap = self.produces & self.may_produce
        if overlap:
            raise ValueError(
                "Keys cannot be both unconditional and conditional: "
                + ", ".join(sorted(overlap))
            )

    @property
    def possible(self) -> FrozenSet[str]:
        return self.produces | self.may_produce


EMPTY_CONTRACT = StepContract()


@dataclass(frozen=True)
class PipeStep:
    """
    Step concreto do PropFlow: um callable acompanhado do seu contrato.

    Instâncias são chamáveis diretamente (`step(props)`), retornando o que
    a função retornar (mapping, None ou awaitable).

    Campos:
        - fn: função `(props) -> contribuição` (sync ou async)
        - contract: contrato declarado (`StepContract`)
        - id: identificador legível usado em erros e eventos
        - mode: modo de execução (inferido quando não declarado)
    """
    fn: StepFn
    contract: StepContract = EMPTY_CONTRACT
    id: str = ""
    mode: Optional[StepMode] = None

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise TypeError(f"Step function must be callable, got: {type(self.fn).__name__}")
        if not self.id:
            object.__setattr__(self, "id", _callable_name(self.fn))
        if not isinstance(self.mode, StepMode):
            object.__setattr__(self, "mode", _infer_mode(self.fn))

    @property
    def requires(self) -> FrozenSet[str]:
        return self.contract.requires

    @property
    def produces(self) -> FrozenSet[str]:
        return self.contract.produces

    @property
    def may_produce(self) -> FrozenSet[str]:
        return self.contract.may_produce

    def __call__(self, props: Props) -> Union[Contribution, Awaitable[Contribution]]:
        return self.fn(props)


def _callable_name(fn: Any) -> str:
    return getattr(fn, "__name__", None) or type(fn).__name__


def _infer_mode(fn: Any) -> StepMode:
    target = getattr(fn, "__call__", None) if not inspect.isfunction(fn) else fn
    if inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(target):
        return StepMode.ASYNC
    return StepMode.SYNC


def pipe_step(
    *,
    requires: Union[str, Iterable[str]] = (),
    produces: Union[str, Iterable[str]] = (),
    may_produce: Union[str, Iterable[str]] = (),
    step_id: Optional[str] = None,
    mode: Optional[StepMode] = None,
) -> Callable[[StepFn], PipeStep]:
    """
    Decorator que declara o contrato de uma função de Step.

    Exemplo:
        @pipe_step(produces="a")
        def assign_a(props):
            return {"a": True}

        @pipe_step(requires="a", may_produce="b")
        def maybe_assign_b(props):
            if props["a"]:
                return {"b": True}

    O modo é inferido (`async def` → ASYNC) quando não declarado.
    """
    contract = StepContract(requires=requires, produces=produces, may_produce=may_produce)

    def decorator(fn: StepFn) -> PipeStep:
        return PipeStep(
            fn=fn,
            contract=contract,
            id=step_id or _callable_name(fn),
            mode=mode or _infer_mode(fn),
        )

    return decorator


def as_step(obj: Any) -> PipeStep:
    """
    Normaliza um Step aceito pelo pipeline para `PipeStep`.

    Aceita:
        - PipeStep (retornado como está)
        - objetos que satisfazem o protocolo `Step` (atributos de contrato
          + `__call__`)
        - callables sem declaração (contrato vazio: não garantem nada)

    Raises:
        TypeError: Se o objeto não for chamável.
    """
    if isinstance(obj, PipeStep):
        return obj

    if not callable(obj):
        raise TypeError(f"Pipeline steps must be callable, got: {type(obj).__name__}")

    declared = getattr(obj, "contract", None)
    if isinstance(declared, StepContract):
        contract = declared
    else:
        contract = StepContract(
            requires=getattr(obj, "requires", ()) or (),
            produces=getattr(obj, "produces", ()) or (),
            may_produce=getattr(obj, "may_produce", ()) or (),
        )

    mode = getattr(obj, "mode", None)
    if not isinstance(mode, StepMode):
        mode = _infer_mode(obj)

    step_id = getattr(obj, "id", None)
    if not isinstance(step_id, str) or not step_id.strip():
        step_id = _callable_name(obj)

    return PipeStep(fn=obj, contract=contract, id=step_id, mode=mode)
