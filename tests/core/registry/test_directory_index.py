# tests/core/registry/test_directory_index.py
"""
Testes do índice de raízes de contribuição.

Ranks são atribuídos na ordem de registro, o re-registro é um no-op e a
busca sobe pelos ancestrais até encontrar uma raiz registrada.
"""

from pathlib import Path

import pytest

from atlas_releaseconfig.core.errors import DirectoryNotFound
from atlas_releaseconfig.core.registry import DirectoryIndex


def test_register_assigns_increasing_ranks_and_is_idempotent(tmp_path):
    idx = DirectoryIndex()
    assert idx.register(tmp_path / "d0") == 0
    assert idx.register(tmp_path / "d1") == 1
    assert idx.register(tmp_path / "d0") == 0
    assert len(idx) == 2
    assert idx.directories == [tmp_path / "d0", tmp_path / "d1"]
    assert idx.directory_at(1) == tmp_path / "d1"


def test_rank_of_walks_up_to_nearest_registered_root(tmp_path):
    idx = DirectoryIndex()
    idx.register(tmp_path / "d0")
    idx.register(tmp_path / "d0" / "nested")

    assert idx.rank_of(tmp_path / "d0" / "flag_values" / "trunk" / "FOO.yaml") == 0
    assert idx.rank_of(str(tmp_path / "d0" / "nested" / "x.yaml")) == 1
    assert (tmp_path / "d0") in idx
    assert str(tmp_path / "d0") in idx


def test_rank_of_unknown_path_fails(tmp_path):
    idx = DirectoryIndex()
    idx.register(tmp_path / "d0")
    with pytest.raises(DirectoryNotFound) as exc:
        idx.rank_of(Path("/elsewhere/FOO.yaml"))
    assert exc.value.details["path"] == "/elsewhere/FOO.yaml"
