# tests/core/config/test_settings.py
"""
Testes de PipelineSettings e do hash canônico de configuração.

Os testes asseguram que:
- defaults explícitos são aplicados quando seções estão ausentes
- tipos inválidos são rejeitados com InvalidSettingError
- o hash é estável e independente da ordem das chaves
- `load_settings` combina loader + construção de settings
"""

import hashlib
import json

import pytest

from propflow.core.config.errors import InvalidSettingError
from propflow.core.config.hashing import compute_config_hash
from propflow.core.config.settings import DEFAULT_SETTINGS, PipelineSettings, load_settings


def test_empty_config_uses_defaults():
    settings = PipelineSettings.from_config({})

    assert settings.allow_duplicate_produces is True
    assert settings.trace_enabled is False
    assert settings.trace_record_keys is True
    assert settings.config_hash == compute_config_hash({})


def test_default_settings_have_no_hash():
    assert DEFAULT_SETTINGS.config_hash is None


def test_sections_are_read():
    settings = PipelineSettings.from_config(
        {"contract": {"allow_duplicate_produces": False}, "trace": {"enabled": True, "record_keys": False}}
    )

    assert settings.allow_duplicate_produces is False
    assert settings.trace_enabled is True
    assert settings.trace_record_keys is False


def test_unknown_sections_are_ignored():
    settings = PipelineSettings.from_config({"engine": {"whatever": 1}})
    assert settings.trace_enabled is False


@pytest.mark.parametrize(
    "config",
    [
        {"trace": {"enabled": "yes"}},
        {"contract": {"allow_duplicate_produces": 1}},
        {"trace": ["enabled"]},
    ],
)
def test_invalid_types_raise(config):
    with pytest.raises(InvalidSettingError):
        PipelineSettings.from_config(config)


def test_hash_matches_canonical_json_and_ignores_key_order():
    a = {"trace": {"enabled": True, "record_keys": False}, "contract": {}}
    b = {"contract": {}, "trace": {"record_keys": False, "enabled": True}}

    expected = hashlib.sha256(
        json.dumps(a, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    ).hexdigest()

    assert compute_config_hash(a) == expected
    assert compute_config_hash(b) == expected
    assert len(expected) == 64


def test_hash_rejects_non_dict():
    with pytest.raises(TypeError):
        compute_config_hash([("trace", {})])  # type: ignore[arg-type]


def test_load_settings(tmp_path, config_defaults_yaml, config_local_yaml):
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(config_defaults_yaml, encoding="utf-8")
    local.write_text(config_local_yaml, encoding="utf-8")

    settings = load_settings(defaults_path=defaults, local_path=local)

    assert settings.allow_duplicate_produces is False
    assert settings.trace_enabled is True
    assert settings.config_hash is not None
