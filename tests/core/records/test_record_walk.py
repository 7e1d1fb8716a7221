# tests/core/records/test_record_walk.py
"""
Testes da varredura de records por convenção de diretório.

Garante ordem lexicográfica determinística, filtro por extensão e
tolerância a subdiretórios ausentes.
"""

from atlas_releaseconfig.core.records.walk import enumerate_release_configs, walk_record_files


def test_walk_is_sorted_recursive_and_filtered(tmp_path, write_yaml):
    root = tmp_path / "root"
    write_yaml(root / "flag_declarations" / "b" / "ZED.yaml", {"name": "ZED"})
    write_yaml(root / "flag_declarations" / "a" / "BAR.yaml", {"name": "BAR"})
    write_yaml(root / "flag_declarations" / "FOO.json", {"name": "FOO"})
    (root / "flag_declarations" / "README.md").write_text("ignored", encoding="utf-8")

    found = [p.relative_to(root).as_posix() for p in walk_record_files(root, "flag_declarations")]

    assert found == [
        "flag_declarations/FOO.json",
        "flag_declarations/a/BAR.yaml",
        "flag_declarations/b/ZED.yaml",
    ]


def test_walk_missing_subdir_yields_nothing(tmp_path):
    assert list(walk_record_files(tmp_path, "flag_values/trunk")) == []


def test_enumerate_release_configs(make_root):
    map_path = make_root("d0", releases=[{"name": "trunk"}, {"name": "next"}])
    assert sorted(enumerate_release_configs(map_path.parent)) == ["next", "trunk"]
