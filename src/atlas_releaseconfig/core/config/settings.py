# src/atlas_releaseconfig/core/config/settings.py
"""
Schema tipado dos settings de uma resolução.

Forma esperada (após deep-merge defaults + local):

    release_config:
      maps: [build/release/release_config_map.yaml, ...]   # [] => default_map_paths
      target_release: trunk_staging
      allow_missing: false
      product: aosp_arm64
    output:
      out_dir: out/release-config
      formats: [json]        # json | yaml | joblib
      graph: null            # caminho opcional do diagrama DOT

Decisões arquiteturais:
    - A validação acontece uma única vez, após o merge
    - Campos desconhecidos são ignorados (permitem extensões locais)
    - Formatos são validados contra o codec de artefatos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..records.codec import ARTIFACT_FORMATS
from .errors import InvalidSettingsError


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    raw = data.get(name) or {}
    if not isinstance(raw, dict):
        raise InvalidSettingsError(f"Seção '{name}' deve ser um mapa, recebido: {type(raw).__name__}")
    return raw


def _str(section: Dict[str, Any], key: str, where: str, *, default: Optional[str] = None) -> str:
    raw = section.get(key, default)
    if not isinstance(raw, str) or not raw:
        raise InvalidSettingsError(f"'{where}.{key}' deve ser uma string não vazia")
    return raw


def _str_list(section: Dict[str, Any], key: str, where: str, *, default: List[str]) -> Tuple[str, ...]:
    raw = section.get(key)
    if raw is None:
        return tuple(default)
    if not isinstance(raw, list) or not all(isinstance(x, str) and x for x in raw):
        raise InvalidSettingsError(f"'{where}.{key}' deve ser uma lista de strings")
    return tuple(raw)


@dataclass(frozen=True)
class ResolutionSettings:
    """Settings validados de uma resolução."""

    target_release: str
    product: str
    out_dir: str
    maps: Tuple[str, ...] = ()
    allow_missing: bool = False
    formats: Tuple[str, ...] = ("json",)
    graph_path: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
    config_hash: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, config_hash: Optional[str] = None) -> "ResolutionSettings":
        """
        Valida o dicionário de settings mesclado.

        Raises:
            InvalidSettingsError: Se algum campo obrigatório faltar ou tiver tipo inválido.
        """
        rc = _section(data, "release_config")
        out = _section(data, "output")

        allow_missing = rc.get("allow_missing", False)
        if not isinstance(allow_missing, bool):
            raise InvalidSettingsError("'release_config.allow_missing' deve ser bool")

        formats = _str_list(out, "formats", "output", default=["json"])
        unknown = sorted(set(formats) - set(ARTIFACT_FORMATS))
        if unknown:
            raise InvalidSettingsError(
                f"Formatos não suportados em 'output.formats': {unknown} "
                f"(suportados: {sorted(ARTIFACT_FORMATS)})"
            )

        graph = out.get("graph")
        if graph is not None and (not isinstance(graph, str) or not graph):
            raise InvalidSettingsError("'output.graph' deve ser uma string não vazia ou null")

        return cls(
            target_release=_str(rc, "target_release", "release_config"),
            product=_str(rc, "product", "release_config"),
            out_dir=_str(out, "out_dir", "output"),
            maps=_str_list(rc, "maps", "release_config", default=[]),
            allow_missing=allow_missing,
            formats=formats,
            graph_path=graph,
            raw=dict(data),
            config_hash=config_hash,
        )


__all__ = ["ResolutionSettings"]
