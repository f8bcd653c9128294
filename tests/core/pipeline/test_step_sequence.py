# tests/core/pipeline/test_step_sequence.py
"""
Testes da StepSequence: validação na construção e imutabilidade.
"""

import pytest

from propflow.core.exceptions import ContractViolationError
from propflow.core.pipeline.sequence import StepSequence
from propflow.core.pipeline.types import PipeStep, pipe_step


def test_sequence_normalizes_and_resolves(assign_a, maybe_assign_b):
    seq = StepSequence([assign_a, maybe_assign_b, lambda props: None])

    assert len(seq) == 3
    assert all(isinstance(s, PipeStep) for s in seq)
    assert seq[0] is assign_a
    assert seq.guaranteed == {"a"}
    assert seq.contract.possible == {"a", "b"}
    assert seq.initial_keys == frozenset()


def test_invalid_sequence_cannot_be_built(calls):
    @pipe_step(requires="x")
    def needs_x(props):
        calls.append("needs_x")

    with pytest.raises(ContractViolationError):
        StepSequence([needs_x])
    assert calls == []


def test_initial_keys_satisfy_requirements():
    @pipe_step(requires="x", produces="y")
    def step(props):
        return {"y": props["x"]}

    seq = StepSequence([step], initial_keys=["x"])
    assert seq.guaranteed == {"x", "y"}


def test_sequence_is_immutable(assign_a):
    seq = StepSequence([assign_a])
    with pytest.raises(AttributeError):
        seq.extra = 1
    assert isinstance(seq.steps, tuple)


def test_source_list_changes_do_not_leak(assign_a, use_b):
    steps = [assign_a]
    seq = StepSequence(steps)
    steps.append(use_b)
    assert len(seq) == 1


def test_is_sync(assign_a, async_increment):
    assert StepSequence([assign_a]).is_sync is True
    assert StepSequence([assign_a, async_increment], initial_keys=["x"]).is_sync is False


def test_same_step_may_appear_twice(assign_a):
    seq = StepSequence([assign_a, assign_a])
    assert [s.id for s in seq] == ["assign_a", "assign_a"]


def test_duplicate_produces_flag(assign_a):
    with pytest.raises(ContractViolationError):
        StepSequence([assign_a, assign_a], allow_duplicate_produces=False)
