# src/atlas_releaseconfig/core/config/loader.py
"""
Loader de settings do Atlas ReleaseConfig.

Os settings de uma resolução são resolvidos a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional; ignorado se não existir)

Princípios fundamentais:
    - O override local sempre tem precedência sobre os defaults
    - A resolução usa `deep_merge` com política determinística
    - O hash dos settings efetivos acompanha o resultado (rastreabilidade)

Limites explícitos:
    - Não lê raízes de contribuição (ver `core.release_configs`)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .merge import deep_merge
from .settings import ResolutionSettings


PathLike = Union[str, Path]


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo de settings (YAML ou JSON) e valida o tipo raiz.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for dict.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de settings não encontrado: {path}")

    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Settings root deve ser dict, recebido: {type(data).__name__}"
        )
    return data


def load_config(*, defaults_path: PathLike, local_path: Optional[PathLike] = None) -> Dict[str, Any]:
    """Settings efetivos (dict puro): defaults com override local aplicado."""
    effective = _load_file(Path(defaults_path))
    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))
    return effective


def load_settings(*, defaults_path: PathLike, local_path: Optional[PathLike] = None) -> ResolutionSettings:
    """
    Carrega, mescla, valida e identifica (hash) os settings de uma resolução.

    Raises:
        ConfigError: Qualquer falha de carregamento, merge ou validação.
    """
    effective = load_config(defaults_path=defaults_path, local_path=local_path)
    return ResolutionSettings.from_dict(effective, config_hash=compute_config_hash(effective))


__all__ = ["load_config", "load_settings"]
