# tests/core/pipeline/test_step_contract.py
"""
Testes do contrato declarado de um Step (StepContract).
"""

import pytest

from propflow.core.pipeline.types import StepContract, pipe_step


def test_strings_and_iterables_become_frozensets():
    contract = StepContract(requires="a", produces=["b", "c"], may_produce=("d",))

    assert contract.requires == frozenset({"a"})
    assert contract.produces == frozenset({"b", "c"})
    assert contract.may_produce == frozenset({"d"})
    assert contract.possible == frozenset({"b", "c", "d"})


def test_empty_contract_is_valid():
    contract = StepContract()
    assert not contract.requires and not contract.produces and not contract.may_produce


def test_read_modify_write_is_valid():
    contract = StepContract(requires="count", produces="count")
    assert contract.requires == contract.produces == frozenset({"count"})


def test_key_cannot_be_conditional_and_unconditional():
    with pytest.raises(ValueError):
        StepContract(produces="a", may_produce="a")


def test_decorator_rejects_contradictory_declaration():
    with pytest.raises(ValueError):
        pipe_step(produces=["a", "b"], may_produce="b")


@pytest.mark.parametrize("bad", ["", [""], [1], ["ok", None]])
def test_invalid_keys_are_rejected(bad):
    with pytest.raises(ValueError):
        StepContract(produces=bad)


@pytest.mark.parametrize("field", ["requires", "produces", "may_produce"])
def test_decorator_rejects_empty_key(field):
    with pytest.raises(ValueError):
        pipe_step(**{field: ""})
