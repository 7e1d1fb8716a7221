# tests/core/settings/test_settings_merge.py
"""
Testes da política de deep-merge de settings.
"""

import pytest

from atlas_releaseconfig.core.config import ConfigTypeConflictError, deep_merge


def test_nested_dicts_merge_recursively():
    base = {"output": {"out_dir": "out", "formats": ["json"]}, "release_config": {"product": "p"}}
    override = {"output": {"out_dir": "elsewhere"}}
    assert deep_merge(base, override) == {
        "output": {"out_dir": "elsewhere", "formats": ["json"]},
        "release_config": {"product": "p"},
    }


def test_lists_are_replaced_not_concatenated():
    base = {"release_config": {"maps": ["a", "b"]}}
    override = {"release_config": {"maps": ["c"]}}
    assert deep_merge(base, override)["release_config"]["maps"] == ["c"]


def test_none_override_disables_value():
    base = {"output": {"graph": "out/graph.dot"}}
    assert deep_merge(base, {"output": {"graph": None}}) == {"output": {"graph": None}}


def test_inputs_are_not_mutated():
    base = {"output": {"formats": ["json"]}}
    override = {"output": {"formats": ["yaml"]}}
    deep_merge(base, override)
    assert base == {"output": {"formats": ["json"]}}
    assert override == {"output": {"formats": ["yaml"]}}


def test_type_conflict_reports_key_path():
    base = {"output": {"formats": ["json"]}}
    with pytest.raises(ConfigTypeConflictError) as exc:
        deep_merge(base, {"output": {"formats": "json"}})
    assert "output.formats" in str(exc.value)
