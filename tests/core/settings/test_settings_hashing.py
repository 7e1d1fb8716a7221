# tests/core/settings/test_settings_hashing.py
"""
Testes da identidade canônica (hash) dos settings.
"""

import pytest

from atlas_releaseconfig.core.config import compute_config_hash
from atlas_releaseconfig.core.config.hashing import canonical_json


def test_hash_ignores_key_order():
    a = {"output": {"out_dir": "out", "formats": ["json"]}, "release_config": {"product": "p"}}
    b = {"release_config": {"product": "p"}, "output": {"formats": ["json"], "out_dir": "out"}}
    assert compute_config_hash(a) == compute_config_hash(b)


def test_hash_changes_with_content():
    assert compute_config_hash({"a": 1}) != compute_config_hash({"a": 2})


def test_canonical_json_is_compact_and_sorted():
    assert canonical_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'


def test_non_dict_is_rejected():
    with pytest.raises(TypeError):
        compute_config_hash(["a"])
