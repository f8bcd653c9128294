"""
# Pipeline Core — PropFlow

Este pacote define o **modelo de contrato** do PropFlow: o que é um Step,
como suas garantias são declaradas e como o formato final garantido de
uma sequência é calculado antes de qualquer execução.

## Componentes

- **types**
  - `StepMode`, `StepContract`, `PipeStep`, `pipe_step`, `as_step`

- **step**
  - `Step` (Protocol): contrato estrutural de Steps declarados

- **assign**
  - `assign`: merge raso do Property Bag (lado direito vence)

- **contract**
  - `resolve_contract`, `guaranteed_keys`, `missing_guarantees`
  - `PipelineContract`, `StageContract`

- **sequence**
  - `StepSequence`: sequência imutável validada na construção

## Invariantes

- Nenhum Step observa contribuições de Steps posteriores
- Somente contribuições incondicionais entram nas garantias
- Uma sequência inválida nunca é construída
"""

from .assign import assign
from .contract import (
    PipelineContract,
    StageContract,
    conditional_keys,
    contract_of,
    guaranteed_keys,
    missing_guarantees,
    resolve_contract,
    unconditional_keys,
)
from .sequence import StepSequence
from .step import Step
from .types import PipeStep, StepContract, StepMode, as_step, pipe_step

__all__ = [
    "PipeStep",
    "PipelineContract",
    "StageContract",
    "Step",
    "StepContract",
    "StepMode",
    "StepSequence",
    "as_step",
    "assign",
    "conditional_keys",
    "contract_of",
    "guaranteed_keys",
    "missing_guarantees",
    "pipe_step",
    "resolve_contract",
    "unconditional_keys",
]
