# tests/core/registry/test_alias_table.py
"""
Testes da tabela de aliases.

- redeclaração idêntica é idempotente; conflitante é fatal
- cadeias A -> B -> C resolvem para C, com trace completo
- ciclos A -> B -> A são detectados
"""

import pytest

from atlas_releaseconfig.core.errors import AliasCycle, ConflictingAlias
from atlas_releaseconfig.core.registry import AliasTable


def test_identical_redeclaration_is_idempotent():
    t = AliasTable()
    t.declare("next", "trunk_staging", source="d0/map.yaml")
    t.declare("next", "trunk_staging", source="d1/map.yaml")
    assert len(t) == 1
    assert t.target_of("next") == "trunk_staging"


def test_conflicting_redeclaration_fails_with_both_targets():
    t = AliasTable()
    t.declare("next", "a", source="d0/map.yaml")
    with pytest.raises(ConflictingAlias) as exc:
        t.declare("next", "b", source="d1/map.yaml")
    details = exc.value.details
    assert details["existing_target"] == "a"
    assert details["new_target"] == "b"
    assert details["existing_source"] == "d0/map.yaml"


def test_resolve_follows_chain():
    t = AliasTable()
    t.declare("A", "B")
    t.declare("B", "C")
    assert t.resolve("A") == ("C", ["A", "B", "C"])
    assert t.resolve("C") == ("C", ["C"])
    assert t.items() == [("A", "B"), ("B", "C")]


def test_resolve_detects_cycle():
    t = AliasTable()
    t.declare("A", "B")
    t.declare("B", "A")
    with pytest.raises(AliasCycle) as exc:
        t.resolve("A")
    assert exc.value.details["trace"] == ["A", "B", "A"]
