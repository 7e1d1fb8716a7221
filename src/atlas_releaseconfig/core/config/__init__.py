# src/atlas_releaseconfig/core/config/__init__.py
"""
Camada de settings do Atlas ReleaseConfig.

Settings dizem *o que* resolver (raízes, release alvo, produto) e *onde*
escrever (diretório, formatos, diagrama). Não confundir com os records de
release config lidos das raízes de contribuição.

Componentes:
    - loader   → leitura de defaults + override local
    - merge    → deep-merge determinístico
    - hashing  → identidade canônica (SHA-256)
    - settings → schema tipado `ResolutionSettings`
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidSettingsError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import load_config, load_settings
from .merge import deep_merge
from .settings import ResolutionSettings

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "InvalidSettingsError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "load_config",
    "load_settings",
    "deep_merge",
    "ResolutionSettings",
]
