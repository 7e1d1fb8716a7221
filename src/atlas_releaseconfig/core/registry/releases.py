# src/atlas_releaseconfig/core/registry/releases.py
"""
Registro de releases: estado acumulado por release e artefatos resolvidos.

Este módulo define:
    - ReleaseConfigContribution → contribuição de uma raiz para uma release
    - ReleaseConfigMap          → descriptor carregado de uma raiz + contribuições
    - ReleaseConfig             → estado acumulado de uma release
    - ReleaseConfigArtifact     → artefato achatado de uma release
    - ReleaseConfigsArtifact    → bundle final (target + demais + descriptors)

Decisões arquiteturais:
    - Releases são criadas sob demanda na primeira contribuição
    - A lista de herança é deduplicada preservando a primeira ocorrência
    - `aconfig_flags_only` é um OR monotônico entre contribuições
    - O artefato é preenchido apenas pelo merge engine

Limites explícitos:
    - Não executa herança nem aplica valores (ver `engine.generate`)
    - Não lê arquivos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from ..types import (
    FlagDeclaration,
    FlagValue,
    ReleaseConfigContributionRecord,
    ReleaseConfigMapRecord,
)
from .flags import FlagArtifact


@dataclass(frozen=True)
class ReleaseConfigContribution:
    """Contribuição imutável de uma raiz (rank) para uma release."""

    path: str
    declaration_index: int
    record: ReleaseConfigContributionRecord
    flag_values: Tuple[FlagValue, ...] = ()

    @property
    def name(self) -> str:
        return self.record.name


@dataclass
class ReleaseConfigMap:
    """Descriptor de uma raiz e o que ela contribuiu (usado para diagnóstico)."""

    path: str
    record: ReleaseConfigMapRecord
    contributions: Dict[str, ReleaseConfigContribution] = field(default_factory=dict)
    flag_declarations: List[FlagDeclaration] = field(default_factory=list)


@dataclass(frozen=True)
class ReleaseConfigArtifact:
    """Artefato achatado de uma release: um valor concreto por flag."""

    name: str
    other_names: Tuple[str, ...] = ()
    flag_artifacts: Tuple[Dict[str, Any], ...] = ()  # FlagArtifact.to_dict(), ordenados por nome
    aconfig_value_sets: Tuple[str, ...] = ()
    inherits: Tuple[str, ...] = ()
    directories: Tuple[str, ...] = ()
    prior_stages: Tuple[str, ...] = ()
    ancestors: Tuple[str, ...] = ()

    def flag(self, name: str) -> Optional[Dict[str, Any]]:
        for fa in self.flag_artifacts:
            if fa["flag_declaration"]["name"] == name:
                return fa
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "other_names": list(self.other_names),
            "flag_artifacts": [dict(fa) for fa in self.flag_artifacts],
            "aconfig_value_sets": list(self.aconfig_value_sets),
            "inherits": list(self.inherits),
            "directories": list(self.directories),
            "prior_stages": list(self.prior_stages),
            "ancestors": list(self.ancestors),
        }


@dataclass(frozen=True)
class ReleaseConfigsArtifact:
    """Bundle final: release alvo, demais releases e descriptors por raiz."""

    release_config: ReleaseConfigArtifact
    other_release_configs: Tuple[ReleaseConfigArtifact, ...] = ()
    release_config_maps_map: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "release_config": self.release_config.to_dict(),
            "other_release_configs": [rc.to_dict() for rc in self.other_release_configs],
            "release_config_maps_map": {
                k: dict(v) for k, v in sorted(self.release_config_maps_map.items())
            },
        }


@dataclass
class ReleaseConfig:
    """
    Estado acumulado de uma release.

    Campos:
    - name: nome único da release
    - declaration_index: rank da primeira raiz que contribuiu
    - inherit_names: herança declarada (deduplicada, ordem da primeira ocorrência)
    - other_names: aliases que resolvem para esta release (derivado)
    - contributions: contribuições em ordem de carga (rank crescente)
    - prior_stages: predecessores de progressão (preenchido na geração)
    - aconfig_flags_only: OR monotônico das contribuições
    - files_used: records lidos para esta release
    - flag_artifacts / ancestors / artifact: preenchidos pelo merge engine
    """

    name: str
    declaration_index: int
    inherit_names: List[str] = field(default_factory=list)
    other_names: List[str] = field(default_factory=list)
    contributions: List[ReleaseConfigContribution] = field(default_factory=list)
    prior_stages: Set[str] = field(default_factory=set)
    aconfig_flags_only: bool = False
    files_used: Set[str] = field(default_factory=set)

    flag_artifacts: Dict[str, FlagArtifact] = field(default_factory=dict, repr=False)
    ancestors: Set[str] = field(default_factory=set)
    artifact: Optional[ReleaseConfigArtifact] = field(default=None, repr=False)

    def add_inherits(self, names: Iterable[str]) -> None:
        """Acrescenta nomes herdados ainda ausentes, preservando a ordem."""
        present = set(self.inherit_names)
        for inh in names:
            if inh not in present:
                self.inherit_names.append(inh)
                present.add(inh)

    def add_contribution(self, contribution: ReleaseConfigContribution) -> None:
        if contribution.record.aconfig_flags_only:
            self.aconfig_flags_only = True
        self.contributions.append(contribution)

    def flag_values(self) -> List[FlagValue]:
        """Todas as atribuições próprias, em ordem de aplicação."""
        return [fv for c in self.contributions for fv in c.flag_values]


__all__ = [
    "ReleaseConfigContribution",
    "ReleaseConfigMap",
    "ReleaseConfig",
    "ReleaseConfigArtifact",
    "ReleaseConfigsArtifact",
]
