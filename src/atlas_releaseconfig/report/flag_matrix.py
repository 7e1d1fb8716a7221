"""
src/atlas_releaseconfig/report/flag_matrix.py

Relatório tabular dos valores de flags por release.

Regras:
- Derivado EXCLUSIVAMENTE do bundle gerado (objeto ou dict).
- Linhas: flags (ordem lexicográfica). Colunas: releases (alvo primeiro,
  demais em ordem lexicográfica). Células: valor renderizado.
- Flags ausentes de uma release (ex.: redacted) ficam vazias.
- Mesmo bundle => mesmo relatório.

Estrutura obrigatória do Markdown:
# Release Config Report

## Summary
## Target Release
## Flag Matrix
## Contribution Roots
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Union

import pandas as pd

from ..core.registry import ReleaseConfigsArtifact
from ..core.types import Value


REQUIRED_SECTIONS: List[str] = [
    "# Release Config Report",
    "## Summary",
    "## Target Release",
    "## Flag Matrix",
    "## Contribution Roots",
]

Bundle = Union[ReleaseConfigsArtifact, Mapping[str, Any]]


def _as_dict(bundle: Bundle) -> Dict[str, Any]:
    if isinstance(bundle, ReleaseConfigsArtifact):
        return bundle.to_dict()
    if not isinstance(bundle, Mapping) or "release_config" not in bundle:
        raise ValueError("A generated release configs bundle is required")
    return dict(bundle)


def _releases(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    target = data["release_config"]
    others = sorted(data.get("other_release_configs") or [], key=lambda rc: rc["name"])
    return [target] + others


def build_flag_matrix(bundle: Bundle) -> pd.DataFrame:
    """DataFrame flags x releases com os valores renderizados."""
    data = _as_dict(bundle)
    columns: Dict[str, Dict[str, str]] = {}
    for rc in _releases(data):
        columns[rc["name"]] = {
            fa["flag_declaration"]["name"]: Value.from_raw(fa.get("value")).render()
            for fa in rc.get("flag_artifacts") or []
        }
    df = pd.DataFrame(columns)
    df = df.sort_index().fillna("")
    df.index.name = "flag"
    return df


def _md_escape(text: Any) -> str:
    return str(text).replace("|", "\\|")


def _matrix_md(df: pd.DataFrame) -> List[str]:
    if df.empty:
        return ["No flags recorded in the bundle."]
    header = ["flag"] + [str(c) for c in df.columns]
    lines = [
        "| " + " | ".join(_md_escape(h) for h in header) + " |",
        "| " + " | ".join("---" for _ in header) + " |",
    ]
    for flag, row in df.iterrows():
        cells = [f"`{flag}`"] + [_md_escape(v) for v in row.tolist()]
        lines.append("| " + " | ".join(cells) + " |")
    return lines


def _joined(values: Any) -> str:
    items = list(values or [])
    return ", ".join(f"`{v}`" for v in items) if items else "_none_"


def generate_report_md(bundle: Bundle) -> str:
    """Gera o Markdown completo do relatório a partir do bundle."""
    data = _as_dict(bundle)
    target = data["release_config"]
    others = data.get("other_release_configs") or []
    maps = data.get("release_config_maps_map") or {}

    lines: List[str] = ["# Release Config Report\n"]

    lines.append("## Summary")
    lines.append(f"- **Target release**: `{target['name']}`")
    lines.append(f"- **Other names**: {_joined(target.get('other_names'))}")
    lines.append(f"- **Releases generated**: `{1 + len(others)}`")
    lines.append(f"- **Flags in target**: `{len(target.get('flag_artifacts') or [])}`")
    lines.append("")

    lines.append("## Target Release")
    lines.append(f"- **Inherits**: {_joined(target.get('inherits'))}")
    lines.append(f"- **Ancestors**: {_joined(target.get('ancestors'))}")
    lines.append(f"- **Prior stages**: {_joined(target.get('prior_stages'))}")
    lines.append(f"- **Aconfig value sets**: {_joined(target.get('aconfig_value_sets'))}")
    lines.append(f"- **Directories**: {_joined(target.get('directories'))}")
    lines.append("")

    lines.append("## Flag Matrix")
    lines.extend(_matrix_md(build_flag_matrix(data)))
    lines.append("")

    lines.append("## Contribution Roots")
    if maps:
        for root in sorted(maps):
            desc = maps[root] or {}
            containers = " ".join(desc.get("default_containers") or [])
            lines.append(f"- `{root}` (default containers: `{containers}`)")
    else:
        lines.append("No contribution roots recorded in the bundle.")
    lines.append("")

    return "\n".join(lines)


__all__ = ["REQUIRED_SECTIONS", "build_flag_matrix", "generate_report_md"]
