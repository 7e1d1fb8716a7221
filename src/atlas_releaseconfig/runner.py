"""
src/atlas_releaseconfig/runner.py

Ponto de entrada programático de uma resolução completa.

Fluxo:
    1. ResolutionContext + manifest (sem eventos implícitos)
    2. read_release_config_maps (carga + geração)
    3. escrita de cada formato solicitado
    4. diagrama de herança (opcional)
    5. manifest `resolution_manifest-{product}.json` no out_dir

Regras:
- Qualquer `ReleaseConfigError` aborta a resolução; o manifest é salvo com
  um evento `resolution_failed` (payload do erro) e a exceção é propagada.
- Nenhum artefato parcial permanece após uma falha: falhas de carga ou merge
  ocorrem antes de qualquer escrita, e uma falha de escrita (`ArtifactWriteError`)
  remove as saídas já escritas (listadas em `removed_outputs` no payload).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from . import __version__
from .core.config import ResolutionSettings
from .core.context import ResolutionContext
from .core.errors import ReleaseConfigError
from .core.registry import ReleaseConfigsArtifact
from .core.release_configs import ReleaseConfigs, read_release_config_maps
from .core.traceability import (
    ResolutionManifest,
    add_event,
    create_manifest,
    record_inputs,
    record_output,
    save_manifest,
)


@dataclass
class ResolutionResult:
    configs: ReleaseConfigs
    bundle: ReleaseConfigsArtifact
    manifest: ResolutionManifest
    manifest_path: Path
    context: ResolutionContext
    artifacts: Dict[str, Path] = field(default_factory=dict)
    graph_path: Optional[Path] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def manifest_path_for(out_dir: Union[str, Path], product: str) -> Path:
    return Path(out_dir) / f"resolution_manifest-{product}.json"


def _discard_outputs(manifest: ResolutionManifest, written: Dict[str, Path]) -> List[str]:
    """Remove do disco e do manifest as saídas escritas antes de uma falha."""
    removed: List[str] = []
    for kind, path in written.items():
        if path.is_file():
            path.unlink()
        manifest.outputs.pop(kind, None)
        removed.append(str(path))
    return removed


def run_resolution(
    settings: ResolutionSettings,
    *,
    context: Optional[ResolutionContext] = None,
    top: Optional[Union[str, Path]] = None,
) -> ResolutionResult:
    """
    Executa uma resolução completa a partir de settings validados.

    Args:
        settings: Settings da resolução (ver `load_settings`).
        context: Contexto opcional; um novo é criado quando ausente.
        top: Topo da árvore para `default_map_paths` quando `maps` é vazio.

    Returns:
        ResolutionResult: Aggregate root, bundle, caminhos escritos e manifest.

    Raises:
        ReleaseConfigError: Qualquer falha de carga, merge ou escrita de artefato.
    """
    ctx = context or ResolutionContext.new(meta={"product": settings.product})
    out_dir = Path(settings.out_dir)
    manifest = create_manifest(
        run_id=ctx.run_id,
        started_at=_now(),
        version=__version__,
        config_hash=settings.config_hash,
        target_release=settings.target_release,
        product=settings.product,
        maps=settings.maps,
    )
    mpath = manifest_path_for(out_dir, settings.product)
    add_event(manifest, event_type="resolution_started", ts=_now())

    written: Dict[str, Path] = {}
    try:
        configs = read_release_config_maps(
            list(settings.maps),
            settings.target_release,
            allow_missing=settings.allow_missing,
            context=ctx,
            top=top,
        )
        artifacts: Dict[str, Path] = {}
        for fmt in settings.formats:
            path = configs.write_artifact(out_dir, settings.product, fmt)
            artifacts[fmt] = path
            written[f"artifact.{fmt}"] = path
            record_output(manifest, kind=f"artifact.{fmt}", path=path, ts=_now())

        graph_path: Optional[Path] = None
        if settings.graph_path:
            graph_path = configs.write_inheritance_graph(settings.graph_path)
            written["inheritance_graph"] = graph_path
            record_output(manifest, kind="inheritance_graph", path=graph_path, ts=_now())
    except ReleaseConfigError as e:
        payload = e.to_payload().to_dict()
        payload["removed_outputs"] = _discard_outputs(manifest, written)
        add_event(manifest, event_type="resolution_failed", ts=_now(), payload=payload)
        save_manifest(manifest, mpath)
        raise

    assert configs.artifact is not None  # for mypy
    record_inputs(
        manifest,
        files_used=set(configs.files_used).union(*(c.files_used for c in configs.releases.values())),
        directories=[str(d) for d in configs.directories.directories],
    )
    add_event(
        manifest,
        event_type="resolution_finished",
        ts=_now(),
        payload={
            "release": configs.artifact.release_config.name,
            "warnings": sum(len(v) for v in ctx.warnings.values()),
        },
    )
    save_manifest(manifest, mpath)

    return ResolutionResult(
        configs=configs,
        bundle=configs.artifact,
        manifest=manifest,
        manifest_path=mpath,
        context=ctx,
        artifacts=artifacts,
        graph_path=graph_path,
    )


__all__ = ["ResolutionResult", "run_resolution", "manifest_path_for"]
