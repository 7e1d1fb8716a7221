# tests/e2e/test_resolution_e2e.py
"""
E2E: árvore de três raízes -> settings -> run_resolution -> artefatos + relatório.

Cenário:
- build/release        declara flags, `root`, `trunk_staging` e o alias `next`
- vendor/google_shared  sobrescreve valores de `trunk_staging` e cria `ap3a`
- vendor/google         contribui value sets e um valor redacted para `ap3a`

A raiz é descoberta via locais conhecidos (`maps: []`), e a resolução é
executada duas vezes para verificar determinismo byte a byte.
"""

import json

import pytest
import yaml

from atlas_releaseconfig import run_resolution
from atlas_releaseconfig.core.config import load_settings
from atlas_releaseconfig.core.release_configs import MAPS_ENV_VAR
from atlas_releaseconfig.report import REQUIRED_SECTIONS, generate_report_md


def _tree(tmp_path, write_yaml):
    top = tmp_path / "top"

    build = top / "build" / "release"
    write_yaml(build / "release_config_map.yaml", {
        "default_containers": ["system", "vendor"],
        "aliases": [{"name": "next", "target": "ap3a"}],
    })
    write_yaml(build / "flag_declarations" / "RELEASE_FOO.yaml",
               {"name": "RELEASE_FOO", "value": "off", "workflow": "LAUNCH"})
    write_yaml(build / "flag_declarations" / "RELEASE_ROOT_ONLY.yaml",
               {"name": "RELEASE_ROOT_ONLY", "value": False, "workflow": "MANUAL"})
    write_yaml(build / "release_configs" / "root.yaml", {"name": "root"})
    write_yaml(build / "flag_values" / "root" / "RELEASE_ROOT_ONLY.yaml",
               {"name": "RELEASE_ROOT_ONLY", "value": True})
    write_yaml(build / "release_configs" / "trunk_staging.yaml",
               {"name": "trunk_staging", "aconfig_value_sets": ["aconfig_value_set_trunk"]})

    shared = top / "vendor" / "google_shared" / "build" / "release"
    write_yaml(shared / "release_config_map.yaml", {"default_containers": ["system"]})
    write_yaml(shared / "flag_declarations" / "RELEASE_BAR.yaml", {"name": "RELEASE_BAR", "value": "bar0"})
    write_yaml(shared / "release_configs" / "trunk_staging.yaml", {"name": "trunk_staging"})
    write_yaml(shared / "flag_values" / "trunk_staging" / "RELEASE_FOO.yaml", {"name": "RELEASE_FOO", "value": "on"})
    write_yaml(shared / "release_configs" / "ap3a.yaml",
               {"name": "ap3a", "inherits": ["trunk_staging"], "prior_stages": ["trunk_staging"]})

    google = top / "vendor" / "google" / "release"
    write_yaml(google / "release_config_map.yaml", {"default_containers": ["vendor"]})
    write_yaml(google / "release_configs" / "ap3a.yaml",
               {"name": "ap3a", "aconfig_value_sets": ["aconfig_value_set_ap3a", "aconfig_value_set_trunk"]})
    write_yaml(google / "flag_values" / "ap3a" / "RELEASE_BAR.yaml",
               {"name": "RELEASE_BAR", "value": "hidden", "redacted": True})
    return top


def _settings_file(tmp_path, out_dir):
    path = tmp_path / "config" / "defaults.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump({
        "release_config": {"maps": [], "target_release": "next", "product": "aosp_arm64"},
        "output": {"out_dir": str(out_dir), "formats": ["json", "yaml"], "graph": str(out_dir / "graph.dot")},
    }), encoding="utf-8")
    return path


def test_three_root_resolution_e2e(tmp_path, write_yaml, monkeypatch):
    monkeypatch.delenv(MAPS_ENV_VAR, raising=False)
    top = _tree(tmp_path, write_yaml)

    out_a = tmp_path / "out_a"
    out_b = tmp_path / "out_b"
    result = run_resolution(load_settings(defaults_path=_settings_file(tmp_path, out_a)), top=top)
    again = run_resolution(load_settings(defaults_path=_settings_file(tmp_path, out_b)), top=top)

    target = result.bundle.release_config
    assert target.name == "ap3a"
    assert target.other_names == ("next",)
    assert target.inherits == ("root", "trunk_staging")
    assert target.ancestors == ("root", "trunk_staging")
    assert target.prior_stages == ("trunk_staging",)
    assert target.aconfig_value_sets == ("aconfig_value_set_trunk", "aconfig_value_set_ap3a")
    assert target.flag("RELEASE_FOO")["value"] == {"string_value": "on"}
    assert target.flag("RELEASE_ROOT_ONLY")["value"] == {"bool_value": True}
    assert target.flag("RELEASE_BAR") is None
    # apenas raízes que contribuíram para ap3a (ou declararam flags que ela atribui)
    assert target.directories == (
        str(top / "vendor" / "google_shared" / "build" / "release"),
        str(top / "vendor" / "google" / "release"),
    )

    # sem argumento de maps: um warning de carga
    assert len(result.context.warnings["load"]) == 1

    # determinismo byte a byte
    assert result.artifacts["json"].read_bytes() == again.artifacts["json"].read_bytes()

    data = json.loads(result.artifacts["json"].read_text(encoding="utf-8"))
    assert [rc["name"] for rc in data["other_release_configs"]] == ["root", "trunk_staging"]

    graph = result.graph_path.read_text(encoding="utf-8")
    assert '"ap3a" -> "trunk_staging"' in graph
    assert '"trunk_staging" -> "ap3a" [ style=dashed color="#81c995" ]' in graph

    md = generate_report_md(result.bundle)
    for section in REQUIRED_SECTIONS:
        assert section in md

    types = [e["event_type"] for e in result.manifest.events]
    assert types[-1] == "resolution_finished"
    assert types.count("output_recorded") == 3


@pytest.mark.parametrize("target", ["trunk_staging", "next", "ap3a"])
def test_every_declared_name_resolves(tmp_path, write_yaml, monkeypatch, target):
    monkeypatch.delenv(MAPS_ENV_VAR, raising=False)
    top = _tree(tmp_path, write_yaml)
    path = _settings_file(tmp_path, tmp_path / "out")
    text = path.read_text(encoding="utf-8").replace("target_release: next", f"target_release: {target}")
    path.write_text(text, encoding="utf-8")

    result = run_resolution(load_settings(defaults_path=path), top=top)
    expected = "trunk_staging" if target == "trunk_staging" else "ap3a"
    assert result.bundle.release_config.name == expected
