# src/atlas_releaseconfig/core/loader.py
"""
Directory Loader — ingestão de uma raiz de contribuição.

Este módulo lê uma raiz de contribuição (diretório contendo um
`release_config_map`) e incorpora seu conteúdo ao estado compartilhado
da resolução: aliases, declarações de flags e contribuições de releases.

Layout esperado da raiz:
    release_config_map.{yaml,yml,json}
    flag_declarations/**/<FLAG>.yaml
    release_configs/**/<release>.yaml
    flag_values/<release>/**/<FLAG>.yaml

Decisões arquiteturais:
    - Cada etapa é fatal de forma independente (nenhum estado parcial é
      considerado válido após uma falha)
    - A ordem de leitura dos arquivos é lexicográfica (determinística)
    - Valores de flags são apenas coletados aqui; são aplicados sobre os
      artefatos no momento do merge, com proveniência = arquivo de valor

Invariantes:
    - Nomes de arquivo coincidem com o nome declarado no record
    - A flag reservada nunca é declarada nem atribuída por input
    - O default de uma flag nunca é redacted

Limites explícitos:
    - Não resolve herança nem aliases (ver `engine.generate`)
    - Não decide a ordem das raízes (ver `release_configs`)
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, List, Union

from .errors import (
    DefaultMustNotBeRedacted,
    DuplicateFlagDeclaration,
    InvalidContainer,
    InvalidContributionRoot,
    NameMismatch,
    ReservedFlagName,
)
from .records import load_record, walk_record_files
from .registry import (
    RELEASE_ACONFIG_VALUE_SETS,
    UNKNOWN_NAMESPACE,
    ReleaseConfig,
    ReleaseConfigContribution,
    ReleaseConfigMap,
    valid_container,
)
from .types import (
    FlagDeclaration,
    FlagValue,
    ReleaseConfigContributionRecord,
    ReleaseConfigMapRecord,
)

if TYPE_CHECKING:
    from .release_configs import ReleaseConfigs


class DirectoryLoader:
    """
    Incorpora uma raiz de contribuição ao `ReleaseConfigs` informado.

    Args:
        configs: Aggregate root que recebe o estado carregado.
        path: Caminho do `release_config_map` da raiz.
        rank: Rank de precedência da raiz.
    """

    def __init__(self, configs: "ReleaseConfigs", path: Union[str, Path], rank: int) -> None:
        self.configs = configs
        self.path = Path(path)
        self.root = self.path.parent
        self.rank = rank

    def load(self) -> ReleaseConfigMap:
        m = self._load_descriptor()
        self._fold_aliases(m)
        declared = self._load_flag_declarations(m)
        releases = self._load_release_configs(m)

        self.configs.maps[str(self.root)] = m
        ctx = self.configs.context
        if ctx is not None:
            ctx.log(
                stage="load",
                level="info",
                message=f"Loaded contribution root {self.root}",
                event="directory_loaded",
                path=str(self.root),
                rank=self.rank,
                flag_declarations=declared,
                release_configs=releases,
            )
        return m

    # -----------------------------
    # Etapa 1: descriptor
    # -----------------------------
    def _load_descriptor(self) -> ReleaseConfigMap:
        if not self.path.is_file():
            raise InvalidContributionRoot(
                f"{self.path} does not exist",
                details={"path": str(self.path)},
            )
        record = ReleaseConfigMapRecord.from_dict(load_record(self.path), source=str(self.path))
        if not record.default_containers:
            raise InvalidContributionRoot(
                f"Release config map {self.path} lacks default_containers",
                details={"path": str(self.path)},
            )
        for container in record.default_containers:
            if not valid_container(container):
                raise InvalidContributionRoot(
                    f"Release config map {self.path} has invalid container {container}",
                    details={"path": str(self.path), "container": container},
                )
        self.configs.files_used.add(str(self.path))
        return ReleaseConfigMap(path=str(self.path), record=record)

    # -----------------------------
    # Etapa 2: aliases
    # -----------------------------
    def _fold_aliases(self, m: ReleaseConfigMap) -> None:
        for alias in m.record.aliases:
            self.configs.aliases.declare(alias.name, alias.target, source=str(self.path))

    # -----------------------------
    # Etapa 3: declarações de flags
    # -----------------------------
    def _load_flag_declarations(self, m: ReleaseConfigMap) -> int:
        default_containers = m.record.default_containers or ()
        count = 0
        for fpath in walk_record_files(self.root, "flag_declarations"):
            source = str(fpath)
            decl = FlagDeclaration.from_dict(load_record(fpath), source=source)

            if decl.containers is not None:
                for container in decl.containers:
                    if not valid_container(container):
                        raise InvalidContainer(
                            f"Flag declaration {source} has invalid container {container}",
                            details={"path": source, "flag": decl.name, "container": container},
                        )
            decl = decl.with_defaults(containers=default_containers, namespace=UNKNOWN_NAMESPACE)
            m.flag_declarations.append(decl)

            if decl.name == RELEASE_ACONFIG_VALUE_SETS:
                raise ReservedFlagName(
                    f"{source}: {decl.name} is a reserved build flag",
                    details={"path": source, "flag": decl.name},
                )
            if decl.redacted:
                raise DefaultMustNotBeRedacted(
                    f"{decl.name} may not be redacted by default.",
                    details={"path": source, "flag": decl.name},
                )

            existing = self.configs.flags.get(decl.name)
            if existing is not None and existing.declaration != decl:
                raise DuplicateFlagDeclaration(
                    f"Duplicate definition of {decl.name}",
                    details={
                        "path": source,
                        "flag": decl.name,
                        "existing": existing.declaration.to_dict(),
                        "new": decl.to_dict(),
                    },
                )
            artifact = self.configs.flags.declare(decl, self.rank)

            self.configs.files_used.add(source)
            artifact.update_value(FlagValue(name=decl.name, value=decl.value, path=source))
            count += 1
        return count

    # -----------------------------
    # Etapa 4: contribuições de releases
    # -----------------------------
    def _load_release_configs(self, m: ReleaseConfigMap) -> int:
        count = 0
        for rpath in walk_record_files(self.root, "release_configs"):
            source = str(rpath)
            record = ReleaseConfigContributionRecord.from_dict(load_record(rpath), source=source)
            if rpath.stem != record.name:
                raise NameMismatch(
                    f"{source} incorrectly declares release config {record.name}",
                    details={"path": source, "name": record.name, "expected": rpath.stem},
                )

            config = self.configs.releases.get(record.name)
            if config is None:
                config = ReleaseConfig(name=record.name, declaration_index=self.rank)
                self.configs.releases[record.name] = config
            config.files_used.add(source)
            config.add_inherits(record.inherits)

            values = self._load_flag_values(config, record.name)

            contribution = ReleaseConfigContribution(
                path=source,
                declaration_index=self.rank,
                record=record,
                flag_values=tuple(values),
            )
            config.add_contribution(contribution)
            m.contributions[record.name] = contribution
            count += 1
        return count

    def _load_flag_values(self, config: ReleaseConfig, release: str) -> List[FlagValue]:
        values: List[FlagValue] = []
        for vpath in walk_record_files(self.root, f"flag_values/{release}"):
            source = str(vpath)
            value = FlagValue.from_dict(load_record(vpath), source=source)
            if vpath.stem != value.name:
                raise NameMismatch(
                    f"{source} incorrectly sets value for flag {value.name}",
                    details={"path": source, "flag": value.name, "expected": vpath.stem},
                )
            if value.name == RELEASE_ACONFIG_VALUE_SETS:
                raise ReservedFlagName(
                    f"{source}: {value.name} is a reserved build flag",
                    details={"path": source, "flag": value.name},
                )
            config.files_used.add(source)
            values.append(value)
        return values


__all__ = ["DirectoryLoader"]
