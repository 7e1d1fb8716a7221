"""
src/atlas_releaseconfig/render/graph.py

Diagrama de herança de releases em Graphviz DOT.

Regras:
- Uma linha de nó por release, exceto `root` (herdada implicitamente por todas).
- Arestas `"filha" -> "pai"` para cada herança declarada (exceto `root`).
- Um alias herdado gera uma aresta alias -> target e um nó oval (uma vez).
- Progressões (`prior_stages`) geram arestas tracejadas verdes.
- A release alvo tem fill azul claro; `trunk`, `trunk_staging` e releases
  com outro nome `next` / `*_next` têm fill verde claro.
- Corpo ordenado => mesma entrada, mesmo arquivo.

Pré-condição: o bundle já foi gerado (`generate_release_configs`).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Set, Union

from ..core.errors import ArtifactWriteError

if TYPE_CHECKING:
    from ..core.release_configs import ReleaseConfigs


HEADER: List[str] = [
    "digraph {",
    "graph [ ratio=.5 ]",
    "node [ shape=box style=filled fillcolor=white colorscheme=svg fontcolor=black ]",
]

TARGET_FILL = 'fillcolor="#d2e3fc" '
STAGE_FILL = 'fillcolor="#ceead6" '
PRIOR_STAGE_STYLE = 'style=dashed color="#81c995"'
STAGE_RELEASES = ("trunk", "trunk_staging")


def _fill_for(name: str, other_names: List[str], target: Optional[str]) -> str:
    if name == target:
        return TARGET_FILL
    if name in STAGE_RELEASES:
        return STAGE_FILL
    for n in other_names:
        if n == "next" or n.endswith("_next"):
            return STAGE_FILL
    return ""


def render_inheritance_graph(configs: "ReleaseConfigs") -> str:
    """Gera o texto DOT do grafo de herança."""
    target = configs.artifact.release_config.name if configs.artifact is not None else None
    data: List[str] = []
    used_aliases: Set[str] = set()

    for config in configs.get_sorted_release_configs():
        if config.name == "root":
            continue
        inherits: List[str] = []
        for inherit in config.inherit_names:
            if inherit == "root":
                continue
            data.append(f'"{config.name}" -> "{inherit}"')
            inherits.append(inherit)
            alias_target = configs.aliases.target_of(inherit)
            if alias_target is not None and inherit not in used_aliases:
                used_aliases.add(inherit)
                data.append(f'"{inherit}" -> "{alias_target}"')
                data.append(f'"{inherit}" [ label="{inherit}\\ncurrently: {alias_target}" shape=oval ]')

        for prior in sorted(config.prior_stages):
            data.append(f'"{prior}" -> "{config.name}" [ {PRIOR_STAGE_STYLE} ]')

        label = config.name
        if inherits:
            label += "\\ninherits: " + " ".join(inherits)
        if config.other_names:
            label += "\\nother names: " + " ".join(config.other_names)
        fill = _fill_for(config.name, config.other_names, target)
        data.append(f'"{config.name}" [ label="{label}" {fill}]')

    data.sort()
    return "\n".join(HEADER + data + ["}"])


def write_inheritance_graph(configs: "ReleaseConfigs", out_file: Union[str, Path]) -> Path:
    """Escreve o diagrama DOT em `out_file`; falhas de I/O viram `ArtifactWriteError`."""
    path = Path(out_file)
    body = render_inheritance_graph(configs)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
    except OSError as e:
        raise ArtifactWriteError(
            f"Could not write inheritance graph {path}: {e}",
            details={"path": str(path), "cause": e.__class__.__name__},
        ) from e
    return path


__all__ = ["render_inheritance_graph", "write_inheritance_graph"]
