"""
Rastreabilidade do PropFlow.

Expõe o `RunTrace`, Event Log em memória de uma run do pipeline.
"""

from .trace import (
    RUN_FINISHED,
    RUN_STARTED,
    STEP_FAILED,
    STEP_FINISHED,
    STEP_STARTED,
    RunTrace,
    create_trace,
)

__all__ = [
    "RUN_FINISHED",
    "RUN_STARTED",
    "STEP_FAILED",
    "STEP_FINISHED",
    "STEP_STARTED",
    "RunTrace",
    "create_trace",
]
