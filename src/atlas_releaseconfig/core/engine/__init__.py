# src/atlas_releaseconfig/core/engine/__init__.py
"""
Merge engine do Atlas ReleaseConfig.

Este pacote contém a implementação responsável por **achatar** releases:
resolver herança (DAG de releases), aplicar contribuições por ordem de
precedência e montar o bundle de saída.

Componentes principais:
    - generate → anexação de aliases, geração memoizada e montagem do bundle

Invariantes:
    - Releases herdadas são geradas antes das herdeiras
    - Cada release é gerada no máximo uma vez por resolução
    - A mesma entrada produz sempre os mesmos artefatos

Limites explícitos:
    - Não lê nem escreve arquivos
"""

from .generate import (
    ROOT_RELEASE,
    assemble_bundle,
    attach_other_names,
    effective_inherits,
    generate_release_config,
    inherit_config,
)

__all__ = [
    "ROOT_RELEASE",
    "assemble_bundle",
    "attach_other_names",
    "effective_inherits",
    "generate_release_config",
    "inherit_config",
]
