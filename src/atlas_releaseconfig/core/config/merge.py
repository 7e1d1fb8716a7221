# src/atlas_releaseconfig/core/config/merge.py
"""
Deep-merge de settings (defaults + override local).

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (ex.: `release_config.maps` é sempre
      substituída por inteiro, nunca concatenada)
    - escalar → sobrescrita direta
    - None no override → sobrescrita (desliga um valor opcional)
    - conflito de tipos → erro estrutural explícito, com o caminho da chave

Invariantes:
    - Nenhum input é mutado
    - A mesma entrada produz sempre a mesma saída
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Tuple

from .errors import ConfigTypeConflictError


def deep_merge(
    base: Dict[str, Any],
    override: Dict[str, Any],
    *,
    _path: Tuple[str, ...] = (),
) -> Dict[str, Any]:
    """
    Mescla `override` sobre `base`, retornando um novo dicionário.

    Raises:
        ConfigTypeConflictError: Se uma chave tiver tipos incompatíveis.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, value in override.items():
        key_path = _path + (str(key),)
        current = result.get(key)

        if key not in result or current is None or value is None:
            result[key] = deepcopy(value)
        elif isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value, _path=key_path)
        elif isinstance(value, list) and isinstance(current, list):
            result[key] = deepcopy(value)
        elif type(current) is not type(value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo em '{'.'.join(key_path)}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )
        else:
            result[key] = deepcopy(value)

    return result


__all__ = ["deep_merge"]
