# src/propflow/__init__.py
"""
PropFlow — composição e execução de pipelines orientados a contrato.

Um pipeline é uma sequência linear de Steps que lêem um Property Bag
acumulado e contribuem novas propriedades. Antes de executar qualquer
coisa, o chamador sabe quais chaves estão garantidas ao final.

Exemplo:
    from propflow import pipe_step, run_sync

    @pipe_step(produces="a")
    def assign_a(props):
        return {"a": True}

    @pipe_step(requires="a", may_produce="b")
    def maybe_assign_b(props):
        if props["a"]:
            return {"b": True}

    run_sync({}, [assign_a, maybe_assign_b])  # {"a": True, "b": True}
"""

from .core.config import PipelineSettings, load_settings
from .core.engine import Engine, plan_execution, run, run_sync
from .core.exceptions import ContractViolationError, EngineConfigurationError, PipeException
from .core.pipeline import (
    PipeStep,
    PipelineContract,
    Step,
    StepContract,
    StepMode,
    StepSequence,
    as_step,
    assign,
    guaranteed_keys,
    missing_guarantees,
    pipe_step,
    resolve_contract,
)
from .core.traceability import RunTrace, create_trace

__version__ = "0.1.0"

__all__ = [
    "ContractViolationError",
    "Engine",
    "EngineConfigurationError",
    "PipeException",
    "PipeStep",
    "PipelineContract",
    "PipelineSettings",
    "RunTrace",
    "Step",
    "StepContract",
    "StepMode",
    "StepSequence",
    "as_step",
    "assign",
    "create_trace",
    "guaranteed_keys",
    "load_settings",
    "missing_guarantees",
    "pipe_step",
    "plan_execution",
    "resolve_contract",
    "run",
    "run_sync",
]
