# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas ReleaseConfig.

Este módulo define fixtures reutilizáveis que materializam raízes de
contribuição em `tmp_path`:

    <tmp>/<nome>/release_config_map.yaml
    <tmp>/<nome>/flag_declarations/<FLAG>.yaml
    <tmp>/<nome>/release_configs/<release>.yaml
    <tmp>/<nome>/flag_values/<release>/<FLAG>.yaml

Decisões arquiteturais:
    - Records são escritos com `yaml.safe_dump` (mesmo formato de produção)
    - Cada teste recebe um diretório isolado
    - A fixture devolve o caminho do descriptor, pronto para
      `read_release_config_maps`

Limites explícitos:
    - Não valida records (isso é papel do loader)
    - Não executa a resolução automaticamente
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pytest
import yaml


def _write_yaml(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=True), encoding="utf-8")
    return path


@pytest.fixture
def write_yaml():
    """Escreve `data` como YAML em `path` (cria diretórios intermediários)."""
    return _write_yaml


@pytest.fixture
def make_root(tmp_path):
    """
    Factory de raízes de contribuição.

    Args (da factory):
        name: Nome do diretório da raiz sob `tmp_path`.
        default_containers: Containers default do descriptor.
        aliases: Mapa alias -> target.
        flags: Records de declaração (dicts com `name`).
        releases: Records de release (dicts com `name`).
        values: Mapa release -> {flag -> valor}. Um valor dict que contém
            `name` é escrito como record completo.

    Returns:
        Path: Caminho do `release_config_map.yaml` da raiz.
    """

    def _make(
        name: str,
        *,
        default_containers: Iterable[str] = ("system",),
        aliases: Optional[Dict[str, str]] = None,
        flags: Optional[List[Dict[str, Any]]] = None,
        releases: Optional[List[Dict[str, Any]]] = None,
        values: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> Path:
        root = tmp_path / name
        descriptor = {
            "default_containers": list(default_containers),
            "aliases": [{"name": k, "target": v} for k, v in sorted((aliases or {}).items())],
        }
        map_path = _write_yaml(root / "release_config_map.yaml", descriptor)

        for flag in flags or []:
            _write_yaml(root / "flag_declarations" / f"{flag['name']}.yaml", flag)
        for release in releases or []:
            _write_yaml(root / "release_configs" / f"{release['name']}.yaml", release)
        for release, assignments in (values or {}).items():
            for flag_name, value in assignments.items():
                if isinstance(value, dict) and "name" in value:
                    record = value
                else:
                    record = {"name": flag_name, "value": value}
                _write_yaml(root / "flag_values" / release / f"{flag_name}.yaml", record)
        return map_path

    return _make


@pytest.fixture
def fixed_ctx():
    """ResolutionContext determinístico (run_id e created_at fixos)."""
    from atlas_releaseconfig.core.context import ResolutionContext

    return ResolutionContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc).isoformat(),
        meta={"source": "pytest"},
    )


@pytest.fixture
def child_base_maps(make_root):
    """
    Cenário canônico de duas raízes:

    - d0 declara FOO (default "off") e as releases `base` e `child`
      (`child` herda `base`)
    - d1 contribui para `child` com FOO = "on"
    """
    d0 = make_root(
        "d0",
        flags=[{"name": "FOO", "value": "off", "workflow": "LAUNCH"}],
        releases=[{"name": "base"}, {"name": "child", "inherits": ["base"]}],
    )
    d1 = make_root(
        "d1",
        releases=[{"name": "child"}],
        values={"child": {"FOO": "on"}},
    )
    return [d0, d1]
