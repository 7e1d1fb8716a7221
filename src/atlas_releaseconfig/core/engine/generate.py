# src/atlas_releaseconfig/core/engine/generate.py
"""
Merge engine: achatamento determinístico de releases.

Este módulo transforma o estado carregado (flags, releases, aliases e
ranks de diretório) em artefatos achatados — um valor concreto por flag —
para cada release declarada, e monta o bundle de saída.

Fases:
    1. Anexação reversa de aliases (`attach_other_names`)
    2. Achatamento por release (`generate_release_config`), recursivo e
       memoizado, com pilha explícita de releases em andamento
    3. Montagem do bundle (`assemble_bundle`)

Princípios fundamentais:
    - O mesmo estado de entrada produz sempre os mesmos artefatos
    - Ciclos de herança são erros estruturais fatais
    - A precedência é decidida exclusivamente pelo rank das raízes

Decisões arquiteturais:
    - Cada release parte de um clone dos artefatos globais de flags
    - Releases herdadas são geradas antes de serem aplicadas (pós-ordem)
    - Heranças são aplicadas na ordem da lista: entradas posteriores
      sobrescrevem as anteriores
    - Contribuições próprias são aplicadas em ordem de rank, de modo que a
      atribuição de maior rank vence
    - Uma release `root`, quando existe, é herdada implicitamente por todas
      as demais

Invariantes:
    - Valor final de uma flag: atribuição própria de maior rank, senão valor
      herdado, senão default global
    - Cada release é gerada no máximo uma vez por aggregate root
    - `RELEASE_ACONFIG_VALUE_SETS` acumula os value sets sem duplicatas,
      preservando a primeira ocorrência

Limites explícitos:
    - Não lê arquivos
    - Não escreve artefatos (ver `release_configs.write_artifact`)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Set

from ..errors import (
    AconfigFlagsOnlyViolation,
    AliasShadowsRelease,
    DanglingAlias,
    FlagValueBeforeDeclaration,
    InheritanceCycle,
    RootNonManualFlag,
    UndefinedFlag,
    UnknownInheritedRelease,
)
from ..registry import (
    RELEASE_ACONFIG_VALUE_SETS,
    FlagArtifact,
    ReleaseConfig,
    ReleaseConfigArtifact,
    ReleaseConfigsArtifact,
)
from ..types import FlagValue, Tracepoint, Value, Workflow

if TYPE_CHECKING:
    from ..release_configs import ReleaseConfigs


ROOT_RELEASE = "root"


# ---------------------------------------------------------------------------
# Fase 1 — aliases
# ---------------------------------------------------------------------------

def attach_other_names(configs: "ReleaseConfigs") -> None:
    """
    Anexa cada alias ao `other_names` da release final de sua cadeia.

    Raises:
        AliasShadowsRelease: Se um alias tiver o nome de uma release.
        DanglingAlias: Se o target não for release nem alias, ou se a
            cadeia terminar em um nome não declarado.
        AliasCycle: Se a cadeia de aliases for cíclica.
    """
    releases = configs.releases
    other_names: Dict[str, List[str]] = {}

    for alias, target in configs.aliases.items():
        if alias in releases:
            raise AliasShadowsRelease(
                f"Alias {alias} is a declared release",
                details={"alias": alias, "target": target},
            )
        if target not in releases and target not in configs.aliases:
            raise DanglingAlias(
                f"Alias {alias} points to non-existing config {target}",
                details={"alias": alias, "target": target},
            )
        final, trace = configs.aliases.resolve(alias)
        if final not in releases:
            raise DanglingAlias(
                f"Alias {alias} resolves to non-existing config {final}",
                details={"alias": alias, "target": target, "trace": trace},
            )
        other_names.setdefault(final, []).append(alias)

    for name, config in releases.items():
        config.other_names = sorted(other_names.get(name, []))

    if configs.context is not None:
        configs.context.log(
            stage="aliases",
            level="info",
            message=f"Attached {len(configs.aliases)} aliases",
            event="aliases_attached",
            aliases=len(configs.aliases),
        )


# ---------------------------------------------------------------------------
# Fase 2 — achatamento
# ---------------------------------------------------------------------------

def effective_inherits(configs: "ReleaseConfigs", config: ReleaseConfig) -> List[str]:
    """Lista de herança efetiva: `root` implícito seguido da lista declarada."""
    inherits: List[str] = []
    if ROOT_RELEASE in configs.releases and config.name != ROOT_RELEASE:
        inherits.append(ROOT_RELEASE)
    for inh in config.inherit_names:
        if inh not in inherits:
            inherits.append(inh)
    return inherits


def _resolve_inherited(configs: "ReleaseConfigs", config: ReleaseConfig, name: str) -> ReleaseConfig:
    final, trace = configs.aliases.resolve(name)
    parent = configs.releases.get(final)
    if parent is None:
        raise UnknownInheritedRelease(
            f"Release config {config.name} inherits unknown release config {name}",
            details={"release": config.name, "inherits": name, "trace": trace},
        )
    return parent


def _value_set_tokens(value: Value) -> List[str]:
    return [v for v in value.string_value().split(" ") if v]


def _extend_traces(flag: FlagArtifact, traces: Iterable[Tracepoint]) -> None:
    for trace in traces:
        if trace not in flag.traces:
            flag.traces.append(trace)


def inherit_config(
    configs: "ReleaseConfigs",
    flags: Dict[str, FlagArtifact],
    parent: ReleaseConfig,
) -> None:
    """
    Aplica os valores de uma release ancestral já gerada sobre `flags`.

    Para o value set agregado, um valor não vazio do ancestral é prefixado
    ao nosso. Para as demais flags, o valor do ancestral só é herdado se ele
    atribuiu algo além do que o registro global já carrega.

    Tracepoints já presentes (herança em diamante) não são repetidos.

    Raises:
        UndefinedFlag: Se o ancestral tiver uma flag desconhecida por `flags`.
    """
    for name in sorted(parent.flag_artifacts):
        fa = parent.flag_artifacts[name]
        mine = flags.get(name)
        if mine is None:
            raise UndefinedFlag(
                f"Could not inherit flag {name} from {parent.name}",
                details={"flag": name, "release": parent.name},
            )
        if name == RELEASE_ACONFIG_VALUE_SETS:
            inherited = _value_set_tokens(fa.value)
            if inherited:
                _extend_traces(mine, fa.traces)
                mine.value = Value.string(" ".join(inherited + _value_set_tokens(mine.value)))
            continue

        base = len(configs.flags[name].traces)
        if len(fa.traces) > base:
            _extend_traces(mine, fa.traces[base:])
            mine.value = fa.value


def _apply_contributions(
    config: ReleaseConfig,
    flags: Dict[str, FlagArtifact],
) -> Set[int]:
    value_sets = flags[RELEASE_ACONFIG_VALUE_SETS]
    collected: List[str] = _value_set_tokens(value_sets.value)
    touched: Set[int] = set()
    is_root = config.name == ROOT_RELEASE

    for contrib in config.contributions:
        collected.extend(v for v in contrib.record.aconfig_value_sets if v)
        value_sets.update_value(
            FlagValue(
                name=RELEASE_ACONFIG_VALUE_SETS,
                value=Value.string(" ".join(collected)),
                path=contrib.path,
            )
        )
        touched.add(contrib.declaration_index)
        config.prior_stages.update(contrib.record.prior_stages)

        if config.aconfig_flags_only and contrib.flag_values:
            raise AconfigFlagsOnlyViolation(
                f"{config.name} is aconfig_flags_only, but contribution {contrib.path} sets build flags",
                details={"release": config.name, "path": contrib.path},
            )

        for fv in contrib.flag_values:
            fa = flags.get(fv.name)
            if fa is None:
                raise UndefinedFlag(
                    f"Setting value for undefined flag {fv.name} in {fv.path}",
                    details={"flag": fv.name, "path": fv.path, "release": config.name},
                )
            touched.add(fa.declaration_index)
            if fa.declaration_index > contrib.declaration_index:
                raise FlagValueBeforeDeclaration(
                    f"Setting value for flag {fv.name} not allowed in {fv.path}",
                    details={
                        "flag": fv.name,
                        "path": fv.path,
                        "declaration_rank": fa.declaration_index,
                        "contribution_rank": contrib.declaration_index,
                    },
                )
            if is_root and fa.declaration.workflow is not Workflow.MANUAL:
                raise RootNonManualFlag(
                    f"Setting value for non-MANUAL flag {fv.name} is not allowed in {fv.path}",
                    details={"flag": fv.name, "path": fv.path, "workflow": fa.declaration.workflow.value},
                )
            fa.update_value(fv)
            if fa.redacted:
                del flags[fv.name]

    deduped: List[str] = []
    for v in collected:
        if v not in deduped:
            deduped.append(v)
    value_sets.value = Value.string(" ".join(deduped))
    return touched


def generate_release_config(
    configs: "ReleaseConfigs",
    config: ReleaseConfig,
    *,
    active: Optional[Sequence[str]] = None,
) -> ReleaseConfigArtifact:
    """
    Gera (ou retorna, se memoizado) o artefato achatado de `config`.

    Args:
        configs: Aggregate root com o estado carregado.
        config: Release a gerar.
        active: Pilha de releases em geração (uso interno da recursão).

    Returns:
        ReleaseConfigArtifact: Artefato da release.

    Raises:
        InheritanceCycle: Se `config` já estiver na pilha de geração.
        UnknownInheritedRelease, UndefinedFlag, FlagValueBeforeDeclaration,
        RootNonManualFlag, AconfigFlagsOnlyViolation, AliasCycle.
    """
    if config.artifact is not None:
        return config.artifact

    stack: List[str] = list(active or ())
    if config.name in stack:
        cycle = stack[stack.index(config.name):] + [config.name]
        path = " -> ".join(cycle)
        raise InheritanceCycle(
            f"Inheritance cycle detected: {path}",
            details={"release": config.name, "cycle": cycle, "path": path},
        )
    stack.append(config.name)

    flags = configs.flags.clone()
    inherits = effective_inherits(configs, config)
    ancestors: Set[str] = set()

    for inh in inherits:
        parent = _resolve_inherited(configs, config, inh)
        generate_release_config(configs, parent, active=stack)
        inherit_config(configs, flags, parent)
        ancestors.add(parent.name)
        ancestors.update(parent.ancestors)

    touched = _apply_contributions(config, flags)

    config.flag_artifacts = flags
    config.ancestors = ancestors
    value_sets = _value_set_tokens(flags[RELEASE_ACONFIG_VALUE_SETS].value)
    config.artifact = ReleaseConfigArtifact(
        name=config.name,
        other_names=tuple(config.other_names),
        flag_artifacts=tuple(flags[name].to_dict() for name in sorted(flags)),
        aconfig_value_sets=tuple(value_sets),
        inherits=tuple(inherits),
        directories=tuple(str(configs.directories.directory_at(rank)) for rank in sorted(touched) if rank >= 0),
        prior_stages=tuple(sorted(config.prior_stages)),
        ancestors=tuple(sorted(ancestors)),
    )

    if configs.context is not None:
        configs.context.log(
            stage="generate",
            level="info",
            message=f"Generated release config {config.name}",
            event="release_generated",
            release=config.name,
            inherits=list(inherits),
            flags=len(flags),
        )
    return config.artifact


# ---------------------------------------------------------------------------
# Fase 3 — bundle
# ---------------------------------------------------------------------------

def assemble_bundle(configs: "ReleaseConfigs", target: ReleaseConfig) -> ReleaseConfigsArtifact:
    """Bundle: artefato alvo, demais releases (ordenadas) e descriptors por raiz."""
    others = tuple(
        c.artifact
        for c in configs.get_sorted_release_configs()
        if c.name != target.name and c.artifact is not None
    )
    maps = {root: m.record.to_dict() for root, m in configs.maps.items()}
    return ReleaseConfigsArtifact(
        release_config=generate_release_config(configs, target),
        other_release_configs=others,
        release_config_maps_map=maps,
    )


__all__ = [
    "ROOT_RELEASE",
    "attach_other_names",
    "effective_inherits",
    "inherit_config",
    "generate_release_config",
    "assemble_bundle",
]
