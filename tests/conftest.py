# tests/conftest.py
"""
Fixtures compartilhados para testes do PropFlow.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações YAML mínimas (defaults + local)
- Steps declarados simples e determinísticos
- um registro de chamadas para verificar ordem e efeitos colaterais

Decisões arquiteturais:
    - Steps são definidos localmente, sem lógica de domínio
    - Imports do core são feitos de forma lazy dentro das fixtures para
      que falhas de import apareçam com mensagens claras nos testes

Invariantes:
    - Nenhuma fixture executa pipeline
    - Nenhuma fixture realiza I/O (exceto via `tmp_path` nos testes)
"""

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def config_defaults_yaml() -> str:
    """
    YAML semelhante a um `propflow.defaults.yaml` real.

    Returns:
        str: Conteúdo YAML representando configuração padrão (defaults).
    """
    return """\
contract:
  allow_duplicate_produces: true
trace:
  enabled: false
  record_keys: true
"""


@pytest.fixture
def config_local_yaml() -> str:
    """YAML de override local: liga o trace e proíbe produção duplicada."""
    return """\
contract:
  allow_duplicate_produces: false
trace:
  enabled: true
"""


# =====================================================
# Pipeline fixtures
# =====================================================

@pytest.fixture
def calls() -> list:
    """Registro de chamadas de Steps, na ordem em que ocorreram."""
    return []


@pytest.fixture
def assign_a(calls):
    """Step que sempre produz `a`."""
    from propflow.core.pipeline.types import pipe_step

    @pipe_step(produces="a")
    def assign_a(props):
        calls.append("assign_a")
        return {"a": True}

    return assign_a


@pytest.fixture
def maybe_assign_b(calls):
    """Step que lê `a` e produz `b` apenas quando `a` é verdadeiro."""
    from propflow.core.pipeline.types import pipe_step

    @pipe_step(requires="a", may_produce="b")
    def maybe_assign_b(props):
        calls.append("maybe_assign_b")
        if props["a"]:
            return {"b": True}
        return None

    return maybe_assign_b


@pytest.fixture
def use_b(calls):
    """Step sem contribuição (apenas efeito colateral)."""
    from propflow.core.pipeline.types import pipe_step

    @pipe_step()
    def use_b(props):
        calls.append(("use_b", props.get("b")))

    return use_b


@pytest.fixture
def async_increment(calls):
    """Step assíncrono: `y = x + 1`."""
    from propflow.core.pipeline.types import pipe_step

    @pipe_step(requires="x", produces="y")
    async def increment(props):
        calls.append("increment")
        return {"y": props["x"] + 1}

    return increment
