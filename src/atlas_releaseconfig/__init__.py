# src/atlas_releaseconfig/__init__.py
"""
Atlas ReleaseConfig — resolução determinística de release configs em camadas.

Este pacote raiz define o namespace público do Atlas ReleaseConfig: um
motor que agrega contribuições espalhadas por várias raízes de diretório
(declarações de flags, valores por release, aliases e herança) e produz,
para uma release nomeada, um artefato achatado com um valor concreto por
flag e proveniência completa.

Arquitetura em alto nível:
    - core.records      → codec de records/artefatos e varredura de arquivos
    - core.registry     → flags, aliases, ranks de diretório e releases
    - core.loader       → ingestão de uma raiz de contribuição
    - core.engine       → achatamento (herança, aliases, precedência)
    - core.release_configs → aggregate root e API pública
    - core.config       → settings (defaults + local, merge, hash)
    - core.traceability → manifest de resolução
    - render / report   → diagrama DOT e matriz de flags
    - runner            → resolução completa a partir de settings

Limites explícitos:
    - Não interpreta o efeito das flags
    - Não oferece CLI
"""

__version__ = "0.1.0"

from .core.release_configs import ReleaseConfigs, default_map_paths, read_release_config_maps
from .runner import ResolutionResult, run_resolution

__all__ = [
    "__version__",
    "ReleaseConfigs",
    "default_map_paths",
    "read_release_config_maps",
    "ResolutionResult",
    "run_resolution",
]
