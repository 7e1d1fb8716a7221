# src/atlas_releaseconfig/core/traceability/manifest.py
"""
Resolution Manifest (v1) — registro forense de uma resolução.

Campos:
    - run: run_id, started_at (UTC ISO), version
    - inputs: config_hash, target_release, product, maps
    - outputs: artefatos escritos (kind -> path)
    - files_used: records lidos (ordenados)
    - directories: raízes de contribuição em ordem de rank
    - events: Event Log ordenado

Decisões arquiteturais:
    - Nenhum evento é emitido implicitamente
    - A ordem do Event Log reflete a ordem de chamada
    - A persistência é JSON determinístico (chaves ordenadas, indent 2)
    - A API aceita o manifest como objeto ou dict

Limites explícitos:
    - Não executa a resolução
    - Não interpreta o conteúdo dos artefatos
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


@dataclass
class ResolutionManifest:
    run: Dict[str, Any]
    inputs: Dict[str, Any]
    outputs: Dict[str, str] = field(default_factory=dict)
    files_used: List[str] = field(default_factory=list)
    directories: List[str] = field(default_factory=list)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "outputs": dict(self.outputs),
            "files_used": list(self.files_used),
            "directories": list(self.directories),
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolutionManifest":
        if not isinstance(data, dict):
            raise TypeError(f"Manifest deve ser dict, recebido: {type(data).__name__}")
        return cls(
            run=dict(data.get("run") or {}),
            inputs=dict(data.get("inputs") or {}),
            outputs=dict(data.get("outputs") or {}),
            files_used=list(data.get("files_used") or []),
            directories=list(data.get("directories") or []),
            events=list(data.get("events") or []),
        )


def _get_manifest(manifest: Union[ResolutionManifest, Dict[str, Any]]) -> Tuple[ResolutionManifest, bool]:
    if isinstance(manifest, ResolutionManifest):
        return manifest, False
    return ResolutionManifest.from_dict(manifest), True


def _sync(original: Union[ResolutionManifest, Dict[str, Any]], m: ResolutionManifest, is_dict: bool) -> None:
    if is_dict and isinstance(original, dict):
        original.clear()
        original.update(m.to_dict())


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    version: str,
    config_hash: Optional[str],
    target_release: str,
    product: str,
    maps: Iterable[str] = (),
) -> ResolutionManifest:
    """Cria o manifest com outputs, arquivos e eventos vazios (sem evento implícito)."""
    return ResolutionManifest(
        run={
            "run_id": run_id,
            "started_at": _iso(started_at),
            "version": version,
        },
        inputs={
            "config_hash": config_hash,
            "target_release": target_release,
            "product": product,
            "maps": [str(m) for m in maps],
        },
    )


def add_event(
    manifest: Union[ResolutionManifest, Dict[str, Any]],
    *,
    event_type: str,
    ts: datetime,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Acrescenta exatamente um evento ao Event Log."""
    m, is_dict = _get_manifest(manifest)
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if payload is not None:
        ev["payload"] = payload
    m.events.append(ev)
    _sync(manifest, m, is_dict)


def record_output(
    manifest: Union[ResolutionManifest, Dict[str, Any]],
    *,
    kind: str,
    path: Union[str, Path],
    ts: datetime,
) -> None:
    """Registra um artefato escrito e emite `output_recorded`."""
    m, is_dict = _get_manifest(manifest)
    m.outputs[kind] = str(path)
    add_event(m, event_type="output_recorded", ts=ts, payload={"kind": kind, "path": str(path)})
    _sync(manifest, m, is_dict)


def record_inputs(
    manifest: Union[ResolutionManifest, Dict[str, Any]],
    *,
    files_used: Iterable[str],
    directories: Iterable[str],
) -> None:
    """Registra os records lidos (ordenados) e as raízes em ordem de rank."""
    m, is_dict = _get_manifest(manifest)
    m.files_used = sorted(set(files_used))
    m.directories = list(directories)
    _sync(manifest, m, is_dict)


def save_manifest(manifest: Union[ResolutionManifest, Dict[str, Any]], path: Union[str, Path]) -> None:
    m, _ = _get_manifest(manifest)
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(
        json.dumps(m.to_dict(), ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def load_manifest(path: Union[str, Path]) -> ResolutionManifest:
    """
    Raises:
        FileNotFoundError: Se o arquivo não existir.
        json.JSONDecodeError: Se o conteúdo não for JSON válido.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return ResolutionManifest.from_dict(data)


__all__ = [
    "ResolutionManifest",
    "create_manifest",
    "add_event",
    "record_output",
    "record_inputs",
    "save_manifest",
    "load_manifest",
]
