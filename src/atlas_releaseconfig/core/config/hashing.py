# src/atlas_releaseconfig/core/config/hashing.py
"""
Identidade canônica dos settings de uma resolução.

O hash (SHA-256 de JSON canônico: chaves ordenadas, separadores
compactos, UTF-8) é registrado no manifest de resolução para associar cada
artefato gerado aos settings que o produziram.

Invariantes:
    - Settings estruturalmente equivalentes produzem o mesmo hash
    - O valor é sempre uma string hexadecimal de 64 caracteres
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict


def canonical_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Hash SHA-256 dos settings efetivos.

    Raises:
        TypeError: Se `config` não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(f"Settings para hashing devem ser dict, recebido: {type(config).__name__}")
    return hashlib.sha256(canonical_json(config).encode("utf-8")).hexdigest()


__all__ = ["canonical_json", "compute_config_hash"]
