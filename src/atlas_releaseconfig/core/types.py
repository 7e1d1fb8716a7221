# src/atlas_releaseconfig/core/types.py
"""
Tipos canônicos dos records de release config.

Este módulo define as estruturas imutáveis que representam os records
lidos das raízes de contribuição, bem como o valor tipado de uma flag.

Componentes principais:
    - ValueKind / Value  → valor tagged (unspecified, string, bool, obsolete)
    - Workflow           → enum de workflow de uma flag
    - Tracepoint         → proveniência de uma atribuição de valor
    - FlagDeclaration    → declaração de flag (flag_declarations/)
    - FlagValue          → atribuição de valor (flag_values/<release>/)
    - AliasRecord        → alias declarado no descriptor
    - ReleaseConfigMapRecord          → descriptor da raiz
    - ReleaseConfigContributionRecord → contribuição para uma release

Princípios fundamentais:
    - Tipos são imutáveis e serializáveis
    - `from_dict` valida tipos de campo e falha explicitamente
    - `to_dict` produz a forma canônica usada nos artefatos

Invariantes:
    - `Value` nunca é None: a ausência de valor é `ValueKind.UNSPECIFIED`
    - Enums possuem valores textuais estáveis

Limites explícitos:
    - Não lê arquivos (ver `records.codec`)
    - Não aplica defaults da raiz (ver `loader`)
    - Não contém regras de merge
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import RecordLoadError


class ValueKind(str, Enum):
    """Tags do valor de uma flag."""

    UNSPECIFIED = "unspecified"
    STRING = "string"
    BOOL = "bool"
    OBSOLETE = "obsolete"


# chave serializada de cada tag
_VALUE_KEYS: Dict[ValueKind, str] = {
    ValueKind.UNSPECIFIED: "unspecified_value",
    ValueKind.STRING: "string_value",
    ValueKind.BOOL: "bool_value",
    ValueKind.OBSOLETE: "obsolete",
}


@dataclass(frozen=True)
class Value:
    """
    Valor tagged de uma flag.

    Decisões arquiteturais:
        - A ausência de valor é representada explicitamente por
          `ValueKind.UNSPECIFIED`, nunca por None
        - A forma serializada é um mapa de uma única chave
          (ex.: {"string_value": "on"})
        - Na leitura, strings e bools "nus" são aceitos por conveniência

    Invariantes:
        - `data` é str para STRING, bool para BOOL e None nos demais casos
    """

    kind: ValueKind = ValueKind.UNSPECIFIED
    data: Union[str, bool, None] = None

    @classmethod
    def unspecified(cls) -> "Value":
        return cls(ValueKind.UNSPECIFIED, None)

    @classmethod
    def string(cls, text: str) -> "Value":
        return cls(ValueKind.STRING, text)

    @classmethod
    def boolean(cls, flag: bool) -> "Value":
        return cls(ValueKind.BOOL, bool(flag))

    @classmethod
    def obsolete(cls) -> "Value":
        return cls(ValueKind.OBSOLETE, None)

    @property
    def is_unspecified(self) -> bool:
        return self.kind is ValueKind.UNSPECIFIED

    def string_value(self) -> str:
        """Retorna o texto quando STRING; string vazia caso contrário."""
        if self.kind is ValueKind.STRING:
            return str(self.data)
        return ""

    def render(self) -> str:
        """Forma textual usada em relatórios (bool falso e unspecified são vazios)."""
        if self.kind is ValueKind.STRING:
            return str(self.data)
        if self.kind is ValueKind.BOOL:
            return "true" if self.data else ""
        if self.kind is ValueKind.OBSOLETE:
            return " #OBSOLETE"
        return ""

    def to_dict(self) -> Dict[str, Any]:
        key = _VALUE_KEYS[self.kind]
        if self.kind in (ValueKind.STRING, ValueKind.BOOL):
            return {key: self.data}
        return {key: True}

    @classmethod
    def from_raw(cls, raw: Any, *, source: Optional[str] = None) -> "Value":
        """Constrói um `Value` a partir da forma lida do record."""
        if raw is None:
            return cls.unspecified()
        if isinstance(raw, bool):
            return cls.boolean(raw)
        if isinstance(raw, str):
            return cls.string(raw)
        if isinstance(raw, Mapping) and len(raw) == 1:
            (key, payload), = raw.items()
            if key == "string_value" and isinstance(payload, str):
                return cls.string(payload)
            if key == "bool_value" and isinstance(payload, bool):
                return cls.boolean(payload)
            if key == "unspecified_value":
                return cls.unspecified()
            if key == "obsolete":
                return cls.obsolete()
        raise RecordLoadError(
            f"Invalid flag value: {raw!r}",
            details={"path": source, "value": repr(raw)},
        )


class Workflow(str, Enum):
    """Workflow de evolução de uma flag."""

    UNSPECIFIED = "UNSPECIFIED_workflow"
    LAUNCH = "LAUNCH"
    PREBUILT = "PREBUILT"
    MANUAL = "MANUAL"

    @classmethod
    def parse(cls, raw: Any, *, source: Optional[str] = None) -> "Workflow":
        if raw is None:
            return cls.UNSPECIFIED
        for member in cls:
            if raw == member.value or raw == member.name:
                return member
        raise RecordLoadError(
            f"Invalid workflow: {raw!r}",
            details={"path": source, "workflow": repr(raw)},
        )


@dataclass(frozen=True)
class Tracepoint:
    """Proveniência de uma atribuição: origem (path) e valor atribuído."""

    source: Optional[str]
    value: Value

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "value": self.value.to_dict()}


# ---------------------------------------------------------------------------
# Helpers de validação de campos
# ---------------------------------------------------------------------------

def _field_error(source: Optional[str], key: str, expected: str, raw: Any) -> RecordLoadError:
    return RecordLoadError(
        f"Field '{key}' must be {expected}, got {type(raw).__name__}",
        details={"path": source, "field": key},
    )


def _req_str(data: Mapping[str, Any], key: str, source: Optional[str]) -> str:
    raw = data.get(key)
    if not isinstance(raw, str) or not raw:
        raise _field_error(source, key, "a non-empty string", raw)
    return raw


def _opt_str(data: Mapping[str, Any], key: str, source: Optional[str]) -> Optional[str]:
    raw = data.get(key)
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise _field_error(source, key, "a string", raw)
    return raw


def _opt_bool(data: Mapping[str, Any], key: str, source: Optional[str]) -> bool:
    raw = data.get(key, False)
    if raw is None:
        return False
    if not isinstance(raw, bool):
        raise _field_error(source, key, "a bool", raw)
    return raw


def _str_tuple(data: Mapping[str, Any], key: str, source: Optional[str]) -> Optional[Tuple[str, ...]]:
    raw = data.get(key)
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(x, str) for x in raw):
        raise _field_error(source, key, "a list of strings", raw)
    return tuple(raw)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlagDeclaration:
    """
    Declaração de uma flag.

    `containers` e `namespace` podem chegar vazios (None) do record;
    o loader aplica os defaults da raiz antes do registro, de forma que a
    comparação de redeclarações ocorre sobre a declaração normalizada.
    """

    name: str
    namespace: Optional[str] = None
    description: str = ""
    workflow: Workflow = Workflow.UNSPECIFIED
    containers: Optional[Tuple[str, ...]] = None
    value: Value = field(default_factory=Value.unspecified)
    redacted: bool = False

    def with_defaults(
        self,
        *,
        containers: Tuple[str, ...],
        namespace: str,
    ) -> "FlagDeclaration":
        return replace(
            self,
            containers=self.containers if self.containers is not None else tuple(containers),
            namespace=self.namespace if self.namespace is not None else namespace,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "description": self.description,
            "workflow": self.workflow.value,
            "containers": list(self.containers or ()),
            "value": self.value.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, source: Optional[str] = None) -> "FlagDeclaration":
        return cls(
            name=_req_str(data, "name", source),
            namespace=_opt_str(data, "namespace", source),
            description=_opt_str(data, "description", source) or "",
            workflow=Workflow.parse(data.get("workflow"), source=source),
            containers=_str_tuple(data, "containers", source),
            value=Value.from_raw(data.get("value"), source=source),
            redacted=_opt_bool(data, "redacted", source),
        )


@dataclass(frozen=True)
class FlagValue:
    """Atribuição de valor a uma flag, com o path de origem."""

    name: str
    value: Value = field(default_factory=Value.unspecified)
    redacted: bool = False
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "value": self.value.to_dict()}
        if self.redacted:
            out["redacted"] = True
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, source: Optional[str] = None) -> "FlagValue":
        return cls(
            name=_req_str(data, "name", source),
            value=Value.from_raw(data.get("value"), source=source),
            redacted=_opt_bool(data, "redacted", source),
            path=source,
        )


@dataclass(frozen=True)
class AliasRecord:
    name: str
    target: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "target": self.target}


@dataclass(frozen=True)
class ReleaseConfigMapRecord:
    """Descriptor (`release_config_map`) de uma raiz de contribuição."""

    default_containers: Optional[Tuple[str, ...]] = None
    aliases: Tuple[AliasRecord, ...] = ()
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default_containers": list(self.default_containers or ()),
            "aliases": [a.to_dict() for a in self.aliases],
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, source: Optional[str] = None) -> "ReleaseConfigMapRecord":
        raw_aliases = data.get("aliases") or []
        if not isinstance(raw_aliases, list):
            raise _field_error(source, "aliases", "a list", raw_aliases)
        aliases: List[AliasRecord] = []
        for item in raw_aliases:
            if not isinstance(item, Mapping):
                raise _field_error(source, "aliases[]", "a mapping", item)
            aliases.append(AliasRecord(name=_req_str(item, "name", source), target=_req_str(item, "target", source)))
        return cls(
            default_containers=_str_tuple(data, "default_containers", source),
            aliases=tuple(aliases),
            description=_opt_str(data, "description", source) or "",
        )


@dataclass(frozen=True)
class ReleaseConfigContributionRecord:
    """Contribuição de uma raiz para uma release (`release_configs/<name>`)."""

    name: str
    inherits: Tuple[str, ...] = ()
    aconfig_value_sets: Tuple[str, ...] = ()
    aconfig_flags_only: bool = False
    prior_stages: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "inherits": list(self.inherits),
            "aconfig_value_sets": list(self.aconfig_value_sets),
            "aconfig_flags_only": self.aconfig_flags_only,
            "prior_stages": list(self.prior_stages),
        }

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], *, source: Optional[str] = None
    ) -> "ReleaseConfigContributionRecord":
        return cls(
            name=_req_str(data, "name", source),
            inherits=_str_tuple(data, "inherits", source) or (),
            aconfig_value_sets=_str_tuple(data, "aconfig_value_sets", source) or (),
            aconfig_flags_only=_opt_bool(data, "aconfig_flags_only", source),
            prior_stages=_str_tuple(data, "prior_stages", source) or (),
        )


__all__ = [
    "ValueKind",
    "Value",
    "Workflow",
    "Tracepoint",
    "FlagDeclaration",
    "FlagValue",
    "AliasRecord",
    "ReleaseConfigMapRecord",
    "ReleaseConfigContributionRecord",
]
