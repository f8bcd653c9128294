# tests/core/pipeline/test_contract_resolution.py
"""
Testes do modelo de contrato (resolve_contract).

Este módulo valida o cálculo estático do formato final garantido de uma
sequência de Steps, sem executar nenhum deles.

Os testes asseguram que:
- apenas contribuições incondicionais entram em `guaranteed`
- contribuições condicionais aparecem apenas em `possible`
- Steps sync e async são indistinguíveis no contrato
- requisitos são verificados contra chaves iniciais + Steps anteriores
- produção duplicada é permitida por padrão e proibível por flag

Invariantes:
    - Uma violação é detectada sem que nenhum Step seja chamado
    - `guaranteed` não depende da ordem; satisfação de requisitos depende
"""

import pytest

from propflow.core.errors import CONTRACT_DUPLICATE_PRODUCES, CONTRACT_MISSING_REQUIRES
from propflow.core.exceptions import ContractViolationError
from propflow.core.pipeline.contract import (
    conditional_keys,
    guaranteed_keys,
    missing_guarantees,
    resolve_contract,
    unconditional_keys,
)
from propflow.core.pipeline.types import pipe_step


def _step(step_id, *, requires=(), produces=(), may_produce=(), calls=None):
    @pipe_step(step_id=step_id, requires=requires, produces=produces, may_produce=may_produce)
    def fn(props):
        if calls is not None:
            calls.append(step_id)
        return {k: True for k in produces}

    return fn


def test_unconditional_and_conditional_keys(assign_a, maybe_assign_b, use_b):
    assert unconditional_keys(assign_a) == {"a"}
    assert conditional_keys(assign_a) == frozenset()
    assert unconditional_keys(maybe_assign_b) == frozenset()
    assert conditional_keys(maybe_assign_b) == {"b"}
    assert unconditional_keys(use_b) == frozenset()


def test_bare_callables_contribute_nothing():
    assert unconditional_keys(lambda props: {"a": 1}) == frozenset()


def test_guaranteed_excludes_conditional(assign_a, maybe_assign_b, use_b):
    contract = resolve_contract([], [assign_a, maybe_assign_b, use_b])

    assert contract.guaranteed == {"a"}
    assert contract.possible == {"a", "b"}
    assert contract.conditional == {"b"}
    assert contract.contributed == {"a"}


def test_initial_keys_are_guaranteed():
    contract = resolve_contract({"x"}, [_step("s", requires="x", produces="y")])
    assert contract.initial == {"x"}
    assert contract.guaranteed == {"x", "y"}
    assert contract.contributed == {"y"}


def test_async_steps_contribute_like_sync(async_increment):
    assert guaranteed_keys(["x"], [async_increment]) == {"x", "y"}


def test_stages_describe_the_fold():
    s1 = _step("s1", produces="a")
    s2 = _step("s2", requires="a", produces="b")
    contract = resolve_contract([], [s1, s2])

    first, second = contract.stages
    assert (first.index, first.step_id) == (0, "s1")
    assert first.available_before == frozenset()
    assert first.guaranteed_after == {"a"}
    assert second.available_before == {"a"}
    assert second.guaranteed_after == {"a", "b"}


def test_missing_requirement_is_rejected_before_running(calls):
    needs_x = _step("needs_x", requires="x", produces="y", calls=calls)

    with pytest.raises(ContractViolationError) as info:
        resolve_contract([], [needs_x])

    err = info.value
    assert err.type == CONTRACT_MISSING_REQUIRES
    assert err.details["step"] == "needs_x"
    assert err.details["index"] == 0
    assert err.details["missing"] == ["x"]
    assert calls == []


def test_conditional_key_does_not_satisfy_requirement(maybe_assign_b, assign_a):
    needs_b = _step("needs_b", requires="b")
    with pytest.raises(ContractViolationError):
        resolve_contract([], [assign_a, maybe_assign_b, needs_b])


def test_order_matters_for_requirements():
    producer = _step("producer", produces="a")
    consumer = _step("consumer", requires="a")

    resolve_contract([], [producer, consumer])
    with pytest.raises(ContractViolationError) as info:
        resolve_contract([], [consumer, producer])
    assert info.value.details["available"] == []


def test_guaranteed_is_order_independent():
    a = _step("a", produces="a")
    b = _step("b", produces="b")
    assert guaranteed_keys([], [a, b]) == guaranteed_keys([], [b, a]) == {"a", "b"}


def test_duplicate_produces_allowed_by_default():
    first = _step("first", produces="v")
    second = _step("second", produces="v")
    assert resolve_contract([], [first, second]).guaranteed == {"v"}


def test_duplicate_produces_can_be_forbidden():
    first = _step("first", produces="v")
    second = _step("second", produces=["v", "w"])

    with pytest.raises(ContractViolationError) as info:
        resolve_contract([], [first, second], allow_duplicate_produces=False)

    assert info.value.type == CONTRACT_DUPLICATE_PRODUCES
    assert info.value.details["duplicated"] == ["v"]
    assert info.value.details["first_producers"] == {"v": "first"}


def test_violation_payload_is_serializable():
    with pytest.raises(ContractViolationError) as info:
        resolve_contract(["a"], [_step("s", requires=["a", "b"])])

    payload = info.value.to_payload().to_dict()
    assert payload["type"] == CONTRACT_MISSING_REQUIRES
    assert payload["details"]["missing"] == ["b"]
    assert payload["details"]["available"] == ["a"]
    assert payload["hint"]


def test_violation_is_a_value_error():
    with pytest.raises(ValueError):
        resolve_contract([], [_step("s", requires="nope")])


def test_violation_with_non_string_initial_keys():
    with pytest.raises(ContractViolationError) as info:
        resolve_contract([2, "a"], [_step("s", requires="b")])

    assert info.value.details["available"] == [2, "a"]
    assert info.value.details["missing"] == ["b"]


def test_missing_guarantees_audit():
    contract = resolve_contract([], [_step("s", produces=["a", "b"])])
    assert missing_guarantees(contract, {"a": 1, "b": 2}) == frozenset()
    assert missing_guarantees(contract, {"a": 1}) == {"b"}
