# tests/core/runner/test_run_resolution.py
"""
Testes de integração do runner (settings -> artefatos -> manifest).

Os testes asseguram que:
- todos os formatos solicitados são escritos e registrados no manifest
- o diagrama de herança é opcional
- o manifest registra inputs, eventos e o hash dos settings
- uma falha de resolução salva o manifest com `resolution_failed` e propaga
- uma falha de escrita remove as saídas já escritas (sem artefato parcial)
"""

import json

import pytest

try:
    from atlas_releaseconfig import __version__, run_resolution
    from atlas_releaseconfig.core.config import ResolutionSettings
    from atlas_releaseconfig.core.errors import ArtifactWriteError, UnknownRelease
    from atlas_releaseconfig.core.traceability import load_manifest
    from atlas_releaseconfig.runner import manifest_path_for
except Exception as e:  # pragma: no cover
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Falha ao importar o runner: {_IMPORT_ERR}")


def _settings(maps, out_dir, **overrides):
    data = {
        "release_config": {
            "maps": [str(p) for p in maps],
            "target_release": "child",
            "product": "aosp_arm64",
        },
        "output": {"out_dir": str(out_dir), "formats": ["json", "joblib"]},
    }
    data["release_config"].update(overrides.pop("release_config", {}))
    data["output"].update(overrides.pop("output", {}))
    return ResolutionSettings.from_dict(data, config_hash="hash-123")


def test_run_writes_artifacts_and_manifest(child_base_maps, tmp_path, fixed_ctx):
    _require_imports()
    out = tmp_path / "out"
    result = run_resolution(_settings(child_base_maps, out), context=fixed_ctx)

    assert result.bundle.release_config.name == "child"
    assert set(result.artifacts) == {"json", "joblib"}
    assert result.artifacts["json"] == out / "all_release_configs-aosp_arm64.json"
    assert result.artifacts["json"].is_file()
    assert result.artifacts["joblib"].is_file()
    assert result.graph_path is None

    data = json.loads(result.artifacts["json"].read_text(encoding="utf-8"))
    assert data["release_config"]["name"] == "child"

    manifest = load_manifest(manifest_path_for(out, "aosp_arm64"))
    assert manifest.run["run_id"] == "run-test-001"
    assert manifest.run["version"] == __version__
    assert manifest.inputs["config_hash"] == "hash-123"
    assert manifest.directories == [str(p.parent) for p in child_base_maps]
    assert str(child_base_maps[1].parent / "flag_values" / "child" / "FOO.yaml") in manifest.files_used
    assert manifest.outputs["artifact.json"] == str(result.artifacts["json"])

    types = [e["event_type"] for e in manifest.events]
    assert types[0] == "resolution_started"
    assert types[-1] == "resolution_finished"
    assert types.count("output_recorded") == 2


def test_run_writes_graph_when_requested(child_base_maps, tmp_path):
    _require_imports()
    out = tmp_path / "out"
    graph = tmp_path / "out" / "inheritance.dot"
    result = run_resolution(_settings(child_base_maps, out, output={"graph": str(graph)}))

    assert result.graph_path == graph
    assert graph.read_text(encoding="utf-8").startswith("digraph {")
    assert result.manifest.outputs["inheritance_graph"] == str(graph)


def test_failure_is_recorded_and_propagated(child_base_maps, tmp_path):
    _require_imports()
    out = tmp_path / "out"
    settings = _settings(child_base_maps, out, release_config={"target_release": "ghost"})

    with pytest.raises(UnknownRelease):
        run_resolution(settings)

    manifest = load_manifest(manifest_path_for(out, "aosp_arm64"))
    failed = manifest.events[-1]
    assert failed["event_type"] == "resolution_failed"
    assert failed["payload"]["type"] == "UnknownRelease"
    assert manifest.outputs == {}
    assert not (out / "all_release_configs-aosp_arm64.json").exists()


def test_write_failure_removes_written_outputs(child_base_maps, tmp_path):
    _require_imports()
    out = tmp_path / "out"
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    settings = _settings(child_base_maps, out, output={"graph": str(blocker / "inheritance.dot")})

    with pytest.raises(ArtifactWriteError) as exc:
        run_resolution(settings)
    assert exc.value.details["path"] == str(blocker / "inheritance.dot")

    manifest = load_manifest(manifest_path_for(out, "aosp_arm64"))
    failed = manifest.events[-1]
    assert failed["event_type"] == "resolution_failed"
    assert failed["payload"]["type"] == "ArtifactWriteError"
    assert failed["payload"]["removed_outputs"] == [
        str(out / "all_release_configs-aosp_arm64.json"),
        str(out / "all_release_configs-aosp_arm64.joblib"),
    ]
    assert manifest.outputs == {}
    assert not (out / "all_release_configs-aosp_arm64.json").exists()
    assert not (out / "all_release_configs-aosp_arm64.joblib").exists()
    assert blocker.read_text(encoding="utf-8") == "not a directory"
