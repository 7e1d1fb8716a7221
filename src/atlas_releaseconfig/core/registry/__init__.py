# src/atlas_releaseconfig/core/registry/__init__.py
"""
Registros de estado acumulado da resolução.

Componentes:
    - flags       → FlagArtifact e FlagRegistry
    - aliases     → AliasTable
    - directories → DirectoryIndex (rank de precedência por raiz)
    - releases    → ReleaseConfig, contribuições e artefatos

Todo o estado é de propriedade de uma única instância de `ReleaseConfigs`
por resolução; nenhum registro é compartilhado entre resoluções.
"""

from .aliases import AliasTable
from .directories import DirectoryIndex
from .flags import (
    RELEASE_ACONFIG_VALUE_SETS,
    UNKNOWN_NAMESPACE,
    VALID_CONTAINERS,
    FlagArtifact,
    FlagRegistry,
    valid_container,
)
from .releases import (
    ReleaseConfig,
    ReleaseConfigArtifact,
    ReleaseConfigContribution,
    ReleaseConfigMap,
    ReleaseConfigsArtifact,
)

__all__ = [
    "AliasTable",
    "DirectoryIndex",
    "RELEASE_ACONFIG_VALUE_SETS",
    "UNKNOWN_NAMESPACE",
    "VALID_CONTAINERS",
    "FlagArtifact",
    "FlagRegistry",
    "valid_container",
    "ReleaseConfig",
    "ReleaseConfigArtifact",
    "ReleaseConfigContribution",
    "ReleaseConfigMap",
    "ReleaseConfigsArtifact",
]
