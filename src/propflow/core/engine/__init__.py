# src/propflow/core/engine/__init__.py
"""
Engine do PropFlow.

Componentes principais:
    - planner → valida a entrada e produz a StepSequence a executar
    - engine  → execução sequencial (async e sync) e acumulação do Property Bag

Invariantes:
    - Nenhum Step executa se a sequência violar o contrato
    - Steps executam um por vez, na ordem declarada, exatamente uma vez
    - Falhas de Step propagam intactas; não há resultado parcial
"""

from .engine import Engine, run, run_sync
from .planner import plan_execution

__all__ = ["Engine", "plan_execution", "run", "run_sync"]
