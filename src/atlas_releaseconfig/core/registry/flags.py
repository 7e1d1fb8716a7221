# src/atlas_releaseconfig/core/registry/flags.py
"""
Registro de flags (FlagArtifact) da resolução.

Este módulo define o `FlagArtifact` — estado acumulado de uma flag:
declaração, rank da raiz que a declarou, histórico ordenado de
proveniência (traces), valor corrente e status de redação — e o
`FlagRegistry`, que indexa artefatos por nome.

Decisões arquiteturais:
    - Cada atribuição de valor gera exatamente um `Tracepoint` (mais antigo primeiro)
    - Uma atribuição redacted marca o artefato e zera o valor (unspecified)
    - O registry global contém apenas declarações e seus defaults; valores
      por release são aplicados sobre clones durante a geração
    - A flag reservada `RELEASE_ACONFIG_VALUE_SETS` é pré-registrada com
      rank -1 para o bookkeeping dos aconfig value sets

Invariantes:
    - Artefatos nunca são removidos do registry global
    - O nome de uma atribuição sempre coincide com o nome da declaração

Limites explícitos:
    - Não lê arquivos
    - Não conhece releases nem herança
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from ..errors import NameMismatch
from ..types import FlagDeclaration, FlagValue, Tracepoint, Value, Workflow


RELEASE_ACONFIG_VALUE_SETS = "RELEASE_ACONFIG_VALUE_SETS"
UNKNOWN_NAMESPACE = "android_UNKNOWN"
VALID_CONTAINERS = frozenset({"all", "product", "system", "system_ext", "vendor"})


def valid_container(container: str) -> bool:
    return container in VALID_CONTAINERS


@dataclass
class FlagArtifact:
    """
    Estado acumulado de uma flag.

    Campos:
    - declaration: declaração normalizada (defaults da raiz aplicados)
    - declaration_index: rank da raiz que declarou a flag (-1 para reservadas)
    - traces: proveniência ordenada de cada atribuição
    - value: valor corrente
    - redacted: se o valor foi ocultado por alguma atribuição
    """

    declaration: FlagDeclaration
    declaration_index: int
    traces: List[Tracepoint] = field(default_factory=list)
    value: Value = field(default_factory=Value.unspecified)
    redacted: bool = False

    @property
    def name(self) -> str:
        return self.declaration.name

    def redact(self) -> None:
        self.redacted = True
        self.value = Value.unspecified()

    def update_value(self, flag_value: FlagValue) -> None:
        """
        Aplica uma atribuição de valor, registrando sua proveniência.

        Raises:
            NameMismatch: Se a atribuição for para outra flag.
        """
        if flag_value.name != self.name:
            raise NameMismatch(
                f"Attempt to set value for flag {self.name} from {flag_value.name}",
                details={"flag": self.name, "value_name": flag_value.name, "path": flag_value.path},
            )
        if flag_value.redacted:
            self.redact()
            self.traces.append(Tracepoint(source=flag_value.path, value=self.value))
            return
        self.traces.append(Tracepoint(source=flag_value.path, value=flag_value.value))
        self.value = flag_value.value

    def clone(self) -> "FlagArtifact":
        # Tracepoint e Value são imutáveis: basta copiar a lista
        return FlagArtifact(
            declaration=self.declaration,
            declaration_index=self.declaration_index,
            traces=list(self.traces),
            value=self.value,
            redacted=self.redacted,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "flag_declaration": self.declaration.to_dict(),
            "value": self.value.to_dict(),
            "traces": [t.to_dict() for t in self.traces],
        }


def _aconfig_value_sets_artifact() -> FlagArtifact:
    return FlagArtifact(
        declaration=FlagDeclaration(
            name=RELEASE_ACONFIG_VALUE_SETS,
            namespace=UNKNOWN_NAMESPACE,
            description="Aconfig value sets assembled by release-config",
            workflow=Workflow.MANUAL,
            containers=("system", "system_ext", "product", "vendor"),
            value=Value.unspecified(),
        ),
        declaration_index=-1,
    )


@dataclass
class FlagRegistry:
    """
    Registro de `FlagArtifact` indexado por nome de flag.

    Preserva a ordem de registro; `names()` retorna a ordem lexicográfica
    usada nos artefatos.
    """

    _artifacts: Dict[str, FlagArtifact] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def with_reserved(cls) -> "FlagRegistry":
        reg = cls()
        reserved = _aconfig_value_sets_artifact()
        reg._artifacts[reserved.name] = reserved
        return reg

    def declare(self, declaration: FlagDeclaration, declaration_index: int) -> FlagArtifact:
        """Registra a flag se ainda não existir; retorna o artefato corrente."""
        if declaration.name not in self._artifacts:
            self._artifacts[declaration.name] = FlagArtifact(
                declaration=declaration,
                declaration_index=declaration_index,
            )
        return self._artifacts[declaration.name]

    def get(self, name: str) -> Optional[FlagArtifact]:
        return self._artifacts.get(name)

    def __getitem__(self, name: str) -> FlagArtifact:
        return self._artifacts[name]

    def __contains__(self, name: object) -> bool:
        return name in self._artifacts

    def __len__(self) -> int:
        return len(self._artifacts)

    def __iter__(self) -> Iterator[FlagArtifact]:
        return iter(self._artifacts.values())

    def names(self) -> List[str]:
        return sorted(self._artifacts)

    def clone(self) -> Dict[str, FlagArtifact]:
        """Cópia independente dos artefatos, usada como ponto de partida de cada release."""
        return {name: fa.clone() for name, fa in self._artifacts.items()}


__all__ = [
    "RELEASE_ACONFIG_VALUE_SETS",
    "UNKNOWN_NAMESPACE",
    "VALID_CONTAINERS",
    "valid_container",
    "FlagArtifact",
    "FlagRegistry",
]
