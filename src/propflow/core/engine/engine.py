# src/propflow/core/engine/engine.py
"""
Engine de execução do pipeline do PropFlow.

Regras de execução:
- O acumulador é uma cópia rasa do estado inicial (o objeto do chamador
  nunca é mutado).
- Cada Step recebe um snapshot somente leitura do acumulador corrente;
  nenhum Step observa contribuições de Steps posteriores.
- Se o retorno for awaitable, a run suspende até ele resolver. Este é o
  único ponto de suspensão; o próximo Step só é invocado depois.
- A contribuição é aplicada com `assign` (merge raso, lado direito vence).
- Falhas de Step não são capturadas, convertidas nem repetidas: a mesma
  exceção chega ao chamador e nenhum resultado parcial é retornado.

`run_sync` oferece a mesma semântica sem event loop para sequências
inteiramente síncronas.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Optional

from propflow.core.config.settings import DEFAULT_SETTINGS, PipelineSettings
from propflow.core.errors import engine_configuration_error
from propflow.core.exceptions import EngineConfigurationError
from propflow.core.pipeline.assign import assign
from propflow.core.pipeline.contract import PipelineContract
from propflow.core.pipeline.sequence import StepSequence
from propflow.core.pipeline.types import PipeStep, StepMode
from propflow.core.traceability.trace import RunTrace, create_trace

from .planner import StepsLike, enforce_settings, plan_execution


def _contributed_keys(result: Any, record_keys: bool) -> Optional[list]:
    if not record_keys:
        return None
    if isinstance(result, Mapping):
        return list(result.keys())
    return []


def _begin(trace: Optional[RunTrace], props: Dict[str, Any], sequence: StepSequence) -> None:
    if trace is not None:
        trace.run_started(initial_keys=props.keys(), step_ids=[s.id for s in sequence])


def _step_started(trace: Optional[RunTrace], index: int, step: PipeStep) -> None:
    if trace is not None:
        trace.step_started(index=index, step_id=step.id, mode=step.mode.value)


def _step_finished(
    trace: Optional[RunTrace], index: int, step: PipeStep, result: Any, record_keys: bool
) -> None:
    if trace is not None:
        trace.step_finished(index=index, step_id=step.id, keys=_contributed_keys(result, record_keys))


def _step_failed(trace: Optional[RunTrace], index: int, step: PipeStep, exc: BaseException) -> None:
    if trace is not None:
        trace.step_failed(index=index, step_id=step.id, exc=exc)


def _end(trace: Optional[RunTrace], props: Dict[str, Any]) -> None:
    if trace is not None:
        trace.run_finished(final_keys=props.keys())


async def _execute(
    sequence: StepSequence,
    props: Dict[str, Any],
    trace: Optional[RunTrace],
    record_keys: bool,
) -> Dict[str, Any]:
    _begin(trace, props, sequence)
    for index, step in enumerate(sequence):
        _step_started(trace, index, step)
        try:
            result = step(MappingProxyType(dict(props)))
            if inspect.isawaitable(result):
                result = await result
            assign(props, result)
        except BaseException as exc:
            _step_failed(trace, index, step, exc)
            raise
        _step_finished(trace, index, step, result, record_keys)
    _end(trace, props)
    return props


def _execute_sync(
    sequence: StepSequence,
    props: Dict[str, Any],
    trace: Optional[RunTrace],
    record_keys: bool,
) -> Dict[str, Any]:
    _begin(trace, props, sequence)
    for index, step in enumerate(sequence):
        _step_started(trace, index, step)
        try:
            result = step(MappingProxyType(dict(props)))
            if inspect.isawaitable(result):
                close = getattr(result, "close", None)
                if close is not None:
                    close()
                raise TypeError(
                    f"Step '{step.id}' (#{index}) returned an awaitable; use `run` instead of `run_sync`"
                )
            assign(props, result)
        except BaseException as exc:
            _step_failed(trace, index, step, exc)
            raise
        _step_finished(trace, index, step, result, record_keys)
    _end(trace, props)
    return props


def _require_sync(sequence: StepSequence) -> None:
    if sequence.is_sync:
        return
    async_steps = [
        {"index": i, "step_id": s.id} for i, s in enumerate(sequence) if s.mode is StepMode.ASYNC
    ]
    raise EngineConfigurationError.from_payload(
        engine_configuration_error(
            message="run_sync não aceita Steps assíncronos",
            details={"async_steps": async_steps},
            hint="Use `await run(...)` ou remova os Steps assíncronos da sequência.",
        )
    )


async def run(
    initial: Mapping,
    steps: StepsLike,
    *,
    settings: Optional[PipelineSettings] = None,
    trace: Optional[RunTrace] = None,
) -> Dict[str, Any]:
    """
    Executa a sequência sobre o estado inicial e retorna o Property Bag final.

    Steps síncronos e assíncronos podem ser misturados livremente.

    Args:
        initial: estado inicial (Mapping; copiado, nunca mutado).
        steps: `StepSequence` ou iterável de Steps.
        settings: settings efetivos (defaults quando None).
        trace: RunTrace opcional para registrar eventos da run.

    Returns:
        Dict[str, Any]: Property Bag final.

    Raises:
        ContractViolationError: Antes de qualquer Step executar.
        Exception: A falha original de qualquer Step, sem conversão.
    """
    settings = settings or DEFAULT_SETTINGS
    sequence = plan_execution(initial, steps, settings=settings)
    return await _execute(sequence, dict(initial), trace, settings.trace_record_keys)


def run_sync(
    initial: Mapping,
    steps: StepsLike,
    *,
    settings: Optional[PipelineSettings] = None,
    trace: Optional[RunTrace] = None,
) -> Dict[str, Any]:
    """
    Versão síncrona de `run` para sequências sem Steps assíncronos.

    Raises:
        ContractViolationError: Antes de qualquer Step executar.
        EngineConfigurationError: Se algum Step for declarado ASYNC.
        TypeError: Se um Step não declarado retornar um awaitable.
    """
    settings = settings or DEFAULT_SETTINGS
    sequence = plan_execution(initial, steps, settings=settings)
    _require_sync(sequence)
    return _execute_sync(sequence, dict(initial), trace, settings.trace_record_keys)


class Engine:
    """
    Pipeline reutilizável: sequência validada uma vez, executada N vezes.

    O contrato é resolvido na construção a partir de `initial_keys`; cada
    chamada a `run`/`run_sync` verifica apenas que o estado inicial
    contém essas chaves. Runs são independentes entre si (cada uma possui
    seu próprio acumulador) e podem executar concorrentemente.

    Quando `settings.trace_enabled`, cada run recebe um RunTrace novo,
    exposto em `last_trace` (a última run iniciada).
    """

    def __init__(
        self,
        steps: StepsLike,
        *,
        initial_keys=(),
        settings: Optional[PipelineSettings] = None,
    ):
        self.settings: PipelineSettings = settings or DEFAULT_SETTINGS
        if isinstance(steps, StepSequence):
            self.sequence: StepSequence = enforce_settings(steps, self.settings)
        else:
            self.sequence = StepSequence(
                steps,
                initial_keys=initial_keys,
                allow_duplicate_produces=self.settings.allow_duplicate_produces,
            )
        self.last_trace: Optional[RunTrace] = None

    @property
    def contract(self) -> PipelineContract:
        return self.sequence.contract

    def _trace_for_run(self, trace: Optional[RunTrace]) -> Optional[RunTrace]:
        if trace is None and self.settings.trace_enabled:
            trace = create_trace(config_hash=self.settings.config_hash)
        if trace is not None:
            self.last_trace = trace
        return trace

    async def run(self, initial: Mapping, *, trace: Optional[RunTrace] = None) -> Dict[str, Any]:
        return await run(
            initial,
            self.sequence,
            settings=self.settings,
            trace=self._trace_for_run(trace),
        )

    def run_sync(self, initial: Mapping, *, trace: Optional[RunTrace] = None) -> Dict[str, Any]:
        return run_sync(
            initial,
            self.sequence,
            settings=self.settings,
            trace=self._trace_for_run(trace),
        )
