# src/propflow/core/pipeline/step.py
"""
Contrato canônico de Step do PropFlow.

Este módulo define o protocolo formal que um objeto deve satisfazer para
ser aceito como Step com contrato declarado, sem herdar de nenhuma classe
base e sem passar pelo decorator `pipe_step`.

Um Step é uma função do Property Bag acumulado para uma contribuição
(parcial ou vazia), produzida de forma síncrona ou assíncrona.

Princípios fundamentais:
    - Steps não conhecem o Engine nem outros Steps
    - Steps observam apenas o estado acumulado até aqui
    - Conformidade é garantida por duck typing (@runtime_checkable)

Limites explícitos:
    - Não contém lógica de validação de sequência
    - Não define políticas de execução
"""

from __future__ import annotations

from typing import AbstractSet, Protocol, runtime_checkable

from .types import Props, StepMode


@runtime_checkable
class Step(Protocol):
    """
    Contrato estrutural de um Step declarado.

    Atributos obrigatórios:
        - id: identificador legível do Step
        - requires: chaves que o Step lê
        - produces: chaves que o Step sempre retorna
        - may_produce: chaves que o Step pode retornar
        - mode: `StepMode.SYNC` ou `StepMode.ASYNC`

    Invariantes:
        - `__call__` recebe o Property Bag corrente (somente leitura)
        - O retorno é um mapping, None, ou um awaitable de um deles

    Callables sem estes atributos continuam aceitos pelo pipeline, com
    contrato vazio (ver `as_step`).
    """
    id: str
    requires: AbstractSet[str]
    produces: AbstractSet[str]
    may_produce: AbstractSet[str]
    mode: StepMode

    def __call__(self, props: Props):
        """Recebe o estado acumulado e retorna a contribuição do Step."""
        ...
