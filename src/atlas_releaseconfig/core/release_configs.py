# src/atlas_releaseconfig/core/release_configs.py
"""
ReleaseConfigs — aggregate root de uma resolução.

Este módulo define o `ReleaseConfigs`, dono de todo o estado de uma
resolução (flags, releases, aliases, ranks de diretório, descriptors e
arquivos usados), e as funções de entrada que carregam uma sequência de
raízes de contribuição e geram os artefatos.

Responsabilidades:
    - Registrar raízes na ordem fornecida pelo chamador (rank crescente)
    - Delegar a ingestão ao `DirectoryLoader`
    - Delegar o achatamento ao merge engine
    - Expor a API pública de consulta e escrita

Invariantes:
    - Nomes de flags e de releases são globalmente únicos
    - Ranks são estritamente crescentes na ordem de carga e são o único
      sinal de precedência
    - Uma raiz repetida na lista de entrada é ignorada

Limites explícitos:
    - Não decide quais raízes existem (ver `default_map_paths`)
    - Não interpreta o efeito das flags
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Union

from .context import ResolutionContext
from .engine import assemble_bundle, attach_other_names, generate_release_config
from .errors import InvalidContributionRoot, ReleaseConfigError, UnknownRelease
from .loader import DirectoryLoader
from .records import artifact_suffix, write_message
from .registry import (
    AliasTable,
    DirectoryIndex,
    FlagArtifact,
    FlagRegistry,
    ReleaseConfig,
    ReleaseConfigMap,
    ReleaseConfigsArtifact,
)
from ..render.graph import write_inheritance_graph as _write_inheritance_graph


PathLike = Union[str, Path]

MAP_FILENAME = "release_config_map.yaml"
MAP_FILENAMES = ("release_config_map.yaml", "release_config_map.yml", "release_config_map.json")
FALLBACK_RELEASE = "trunk_staging"
MAPS_ENV_VAR = "PRODUCT_RELEASE_CONFIG_MAPS"

# raízes conhecidas, relativas ao topo da árvore
DEFAULT_MAP_LOCATIONS = (
    "build/release",
    "vendor/google_shared/build/release",
    "vendor/google/release",
)


@dataclass
class ReleaseConfigs:
    """
    Estado completo de uma resolução.

    Campos:
    - flags: registro global de flags (declarações e defaults)
    - releases: releases por nome
    - aliases: tabela de aliases
    - directories: índice de raízes (rank)
    - maps: descriptors por diretório raiz
    - files_used: records lidos (descriptors e declarações)
    - allow_missing: permite fallback para `trunk_staging`
    - artifact: bundle gerado (após `generate_release_configs`)
    """

    allow_missing: bool = False
    context: Optional[ResolutionContext] = None

    flags: FlagRegistry = field(default_factory=FlagRegistry.with_reserved)
    releases: Dict[str, ReleaseConfig] = field(default_factory=dict)
    aliases: AliasTable = field(default_factory=AliasTable)
    directories: DirectoryIndex = field(default_factory=DirectoryIndex)
    maps: Dict[str, ReleaseConfigMap] = field(default_factory=dict)
    files_used: Set[str] = field(default_factory=set)
    artifact: Optional[ReleaseConfigsArtifact] = None

    # -----------------------------
    # Carga
    # -----------------------------
    def load_release_config_map(self, path: PathLike, rank: Optional[int] = None) -> ReleaseConfigMap:
        """
        Carrega uma raiz de contribuição a partir do seu descriptor.

        Se `rank` não for informado, o diretório do descriptor é registrado
        (ou reutilizado) no índice de diretórios.
        """
        p = Path(path)
        if rank is None:
            rank = self.directories.register(p.parent)
        return DirectoryLoader(self, p, rank).load()

    # -----------------------------
    # Consulta
    # -----------------------------
    def get_release_config(self, name: str) -> ReleaseConfig:
        """
        Resolve `name` (seguindo aliases) para uma release declarada.

        Raises:
            AliasCycle: Se a cadeia de aliases for cíclica.
            UnknownRelease: Se a release não existir (e não houver fallback).
        """
        final, trace = self.aliases.resolve(name)
        config = self.releases.get(final)
        if config is not None:
            return config
        if self.allow_missing and FALLBACK_RELEASE in self.releases:
            return self.releases[FALLBACK_RELEASE]
        raise UnknownRelease(
            f"Missing config {final}.  Trace={trace}",
            details={"name": name, "trace": trace},
        )

    def get_sorted_release_configs(self) -> List[ReleaseConfig]:
        return [self.releases[name] for name in sorted(self.releases)]

    def get_all_release_names(self) -> List[str]:
        names: List[str] = []
        for config in self.releases.values():
            names.append(config.name)
            names.extend(config.other_names)
        return sorted(names)

    def get_dir_index(self, path: PathLike) -> int:
        return self.directories.rank_of(path)

    def get_flag_value_directory(self, config: ReleaseConfig, flag: Union[str, FlagArtifact]) -> Path:
        """
        Diretório padrão para escrever um valor de `flag` em `config`.

        Retorna a raiz de maior rank entre: onde a flag foi declarada, onde a
        release foi declarada pela primeira vez e onde o valor corrente foi
        escrito pela última vez.
        """
        if isinstance(flag, str):
            flag = config.flag_artifacts.get(flag) or self.flags[flag]
        candidates = [flag.declaration_index, config.declaration_index]
        if flag.traces and flag.traces[-1].source is not None:
            candidates.append(self.get_dir_index(flag.traces[-1].source))
        return self.directories.directory_at(max(candidates))

    # -----------------------------
    # Geração
    # -----------------------------
    def generate_release_configs(self, target_release: str) -> ReleaseConfigsArtifact:
        """
        Gera todos os artefatos e monta o bundle para `target_release`.

        Raises:
            ReleaseConfigError: Qualquer falha de alias, herança ou valor.
        """
        attach_other_names(self)
        for config in self.get_sorted_release_configs():
            generate_release_config(self, config)

        target = self.get_release_config(target_release)
        self.artifact = assemble_bundle(self, target)
        if self.context is not None:
            self.context.log(
                stage="output",
                level="info",
                message=f"Selected release config {target.name} for {target_release}",
                event="target_selected",
                requested=target_release,
                release=target.name,
            )
        return self.artifact

    # -----------------------------
    # Escrita
    # -----------------------------
    def artifact_path(self, out_dir: PathLike, product: str, fmt: str) -> Path:
        return Path(out_dir) / f"all_release_configs-{product}{artifact_suffix(fmt)}"

    def write_artifact(self, out_dir: PathLike, product: str, fmt: str) -> Path:
        """
        Escreve `{out_dir}/all_release_configs-{product}.{fmt}`.

        Raises:
            UnsupportedArtifactFormat: Se `fmt` não for json, yaml ou joblib.
            ArtifactWriteError: Se o arquivo não puder ser escrito.
            ReleaseConfigError: Se o bundle ainda não tiver sido gerado.
        """
        path = self.artifact_path(out_dir, product, fmt)
        if self.artifact is None:
            raise ReleaseConfigError(
                "No release config has been generated yet",
                details={"path": str(path)},
                hint="Chame generate_release_configs antes de escrever artefatos.",
            )
        write_message(path, self.artifact.to_dict())
        if self.context is not None:
            self.context.log(
                stage="output",
                level="info",
                message=f"Wrote {path}",
                event="artifact_written",
                path=str(path),
                format=fmt,
            )
        return path

    def write_inheritance_graph(self, out_file: PathLike) -> Path:
        return _write_inheritance_graph(self, out_file)


# ---------------------------------------------------------------------------
# Entrada
# ---------------------------------------------------------------------------

def default_map_paths(top: Optional[PathLike] = None) -> List[Path]:
    """
    Descriptors conhecidos existentes sob `top` (default: cwd), seguidos das
    entradas da variável de ambiente `PRODUCT_RELEASE_CONFIG_MAPS`.
    """
    base = Path(top) if top is not None else Path.cwd()
    found: List[Path] = []
    for location in DEFAULT_MAP_LOCATIONS:
        candidate = base / location / MAP_FILENAME
        if candidate.is_file():
            found.append(candidate)
    for entry in os.environ.get(MAPS_ENV_VAR, "").split():
        found.append(Path(entry))
    return found


def _descriptor_in(directory: Path, given: Path) -> Path:
    # aceita qualquer extensão suportada; prioriza o arquivo informado
    if given.is_file():
        return given
    for fname in MAP_FILENAMES:
        candidate = directory / fname
        if candidate.is_file():
            return candidate
    return given


def read_release_config_maps(
    map_paths: Sequence[PathLike],
    target_release: str,
    *,
    allow_missing: bool = False,
    context: Optional[ResolutionContext] = None,
    top: Optional[PathLike] = None,
) -> ReleaseConfigs:
    """
    Carrega as raízes na ordem informada e gera os artefatos.

    Args:
        map_paths: Descriptors das raízes, do menor para o maior rank.
        target_release: Release (ou alias) alvo.
        allow_missing: Permite fallback para `trunk_staging`.
        context: Contexto da resolução (eventos e warnings).
        top: Topo da árvore para `default_map_paths` quando `map_paths` é vazio.

    Returns:
        ReleaseConfigs: Aggregate root com o bundle em `artifact`.

    Raises:
        InvalidContributionRoot: Se nenhum descriptor for informado nem encontrado.
        ReleaseConfigError: Qualquer falha de carga ou merge.
    """
    paths = [Path(p) for p in map_paths]
    if not paths:
        paths = default_map_paths(top)
        if not paths:
            raise InvalidContributionRoot(
                "No maps found",
                details={"searched": list(DEFAULT_MAP_LOCATIONS), "env": MAPS_ENV_VAR},
            )
        if context is not None:
            context.add_warning(
                stage="load",
                message="No map argument provided.  Using: " + " ".join(str(p) for p in paths),
            )

    configs = ReleaseConfigs(allow_missing=allow_missing, context=context)
    for path in paths:
        directory = path.parent
        if directory in configs.directories:
            continue
        rank = configs.directories.register(directory)
        configs.load_release_config_map(_descriptor_in(directory, path), rank)

    configs.generate_release_configs(target_release)
    return configs


__all__ = [
    "ReleaseConfigs",
    "read_release_config_maps",
    "default_map_paths",
    "DEFAULT_MAP_LOCATIONS",
    "FALLBACK_RELEASE",
]
