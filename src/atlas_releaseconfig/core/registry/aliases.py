# src/atlas_releaseconfig/core/registry/aliases.py
"""
Tabela de aliases (nome → target).

Decisões arquiteturais:
    - Aliases são strings imutáveis em um mapa simples
    - Redeclarações idênticas são idempotentes; conflitantes são fatais
    - A resolução de cadeias detecta ciclos explicitamente

Invariantes:
    - `resolve` sempre termina: ou retorna o primeiro nome que não é alias,
      ou levanta `AliasCycle`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..errors import AliasCycle, ConflictingAlias


@dataclass
class AliasTable:
    _targets: Dict[str, str] = field(default_factory=dict, init=False, repr=False)
    _sources: Dict[str, Optional[str]] = field(default_factory=dict, init=False, repr=False)

    def declare(self, name: str, target: str, *, source: Optional[str] = None) -> None:
        """
        Registra `name → target`.

        Raises:
            ConflictingAlias: Se `name` já aponta para outro target.
        """
        old = self._targets.get(name)
        if old is not None and old != target:
            raise ConflictingAlias(
                f"Conflicting alias declarations: {old} vs {target}",
                details={
                    "alias": name,
                    "existing_target": old,
                    "new_target": target,
                    "existing_source": self._sources.get(name),
                    "new_source": source,
                },
            )
        if old is None:
            self._sources[name] = source
        self._targets[name] = target

    def target_of(self, name: str) -> Optional[str]:
        return self._targets.get(name)

    def resolve(self, name: str) -> Tuple[str, List[str]]:
        """
        Segue a cadeia de aliases a partir de `name`.

        Returns:
            Tuple[str, List[str]]: nome final (não-alias) e o trace de nomes
            visitados, incluindo `name` e o nome final.

        Raises:
            AliasCycle: Se algum nome for revisitado.
        """
        trace: List[str] = [name]
        seen: Set[str] = {name}
        while name in self._targets:
            name = self._targets[name]
            trace.append(name)
            if name in seen:
                raise AliasCycle(
                    f"Alias cycle detected: {' -> '.join(trace)}",
                    details={"trace": list(trace)},
                )
            seen.add(name)
        return name, trace

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[str]:
        return iter(self._targets)

    def items(self) -> List[Tuple[str, str]]:
        """Pares (alias, target) em ordem lexicográfica de alias."""
        return sorted(self._targets.items())


__all__ = ["AliasTable"]
