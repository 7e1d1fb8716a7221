# src/atlas_releaseconfig/core/errors.py
"""
Atlas ReleaseConfig — Canonical Errors (v1)

Este módulo define o catálogo fechado de falhas da resolução de release
configs. Toda falha de carregamento ou merge é fatal: nenhuma é
recuperada, re-tentada ou convertida em sucesso parcial.

Erros são considerados artefatos de diagnóstico e devem ser:

- explícitos (um tipo por violação)
- serializáveis (via `ErrorPayload`)
- acionáveis (carregam path, nome e valores conflitantes em `details`)

Regras:
- Todas as exceções herdam de `ReleaseConfigError`.
- `details` contém apenas dados estruturados (serializáveis).
- A mensagem é curta e humana; o contexto fica em `details`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro da resolução.

    Campos:
    - type: código estável do erro (nome da classe da exceção)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class ReleaseConfigError(Exception):
    """
    Exceção base para falhas de resolução de release configs.

    Decisões arquiteturais:
        - Toda falha de loader ou merge aborta a resolução inteira
        - Não existe modo de sucesso parcial
        - Falhas de colaboradores (I/O, records malformados) são encapsuladas
          em `RecordLoadError` e tratadas da mesma forma

    Invariantes:
        - `details` é sempre um dicionário (possivelmente vazio)
        - `str(exc)` retorna a mensagem humana
    """

    default_hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.hint = hint if hint is not None else self.default_hint

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> ErrorPayload:
        """Converte a exceção em `ErrorPayload` (serializável)."""
        return ErrorPayload(
            type=self.__class__.__name__,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
        )


# ---------------------------------------------------------------------------
# Loader / contribution roots
# ---------------------------------------------------------------------------

class InvalidContributionRoot(ReleaseConfigError):
    """Descriptor ausente, sem default_containers ou com container inválido."""

    default_hint = "Verifique o release_config_map da raiz de contribuição."


class InvalidContainer(ReleaseConfigError):
    """Declaração de flag referencia um container desconhecido."""


class ConflictingAlias(ReleaseConfigError):
    """Mesmo alias declarado com targets diferentes."""


class DuplicateFlagDeclaration(ReleaseConfigError):
    """Flag redeclarada com uma declaração materialmente diferente."""

    default_hint = "Remova a redeclaração ou torne-a idêntica à original."


class ReservedFlagName(ReleaseConfigError):
    """Uso de um nome de flag reservado para bookkeeping interno."""


class DefaultMustNotBeRedacted(ReleaseConfigError):
    """O valor default (declaração) de uma flag não pode ser redacted."""


class NameMismatch(ReleaseConfigError):
    """O nome declarado no record não corresponde ao nome do arquivo."""


class DirectoryNotFound(ReleaseConfigError):
    """Nenhuma raiz registrada contém o path informado."""


class RecordLoadError(ReleaseConfigError):
    """Falha de leitura ou record malformado (encapsula a causa)."""


# ---------------------------------------------------------------------------
# Aliases / releases
# ---------------------------------------------------------------------------

class AliasCycle(ReleaseConfigError):
    """Cadeia de aliases revisita um nome."""


class DanglingAlias(ReleaseConfigError):
    """Alias aponta para um nome que não é release nem alias."""


class AliasShadowsRelease(ReleaseConfigError):
    """Nome de alias colide com uma release declarada."""


class UnknownRelease(ReleaseConfigError):
    """Release solicitada não existe (após resolução de aliases)."""


# ---------------------------------------------------------------------------
# Merge engine
# ---------------------------------------------------------------------------

class InheritanceCycle(ReleaseConfigError):
    """Ciclo no grafo de herança entre releases."""


class UnknownInheritedRelease(ReleaseConfigError):
    """Nome herdado não resolve para uma release declarada."""


class UndefinedFlag(ReleaseConfigError):
    """Valor atribuído (ou herdado) para flag não declarada."""

    default_hint = "Declare a flag em flag_declarations/ de uma raiz de precedência igual ou menor."


class FlagValueBeforeDeclaration(ReleaseConfigError):
    """Valor atribuído em raiz de precedência menor que a da declaração."""


class RootNonManualFlag(ReleaseConfigError):
    """A release `root` só pode atribuir flags de workflow MANUAL."""


class AconfigFlagsOnlyViolation(ReleaseConfigError):
    """Release aconfig-only não aceita overrides de build flags."""


# ---------------------------------------------------------------------------
# Saída
# ---------------------------------------------------------------------------

class UnsupportedArtifactFormat(ReleaseConfigError):
    """Formato de artefato não suportado pelo codec."""


class ArtifactWriteError(ReleaseConfigError):
    """Falha de I/O ao escrever um artefato ou o diagrama de herança."""

    default_hint = "Verifique se o diretório de saída existe e é gravável."


__all__ = [
    "ErrorPayload",
    "ReleaseConfigError",
    "InvalidContributionRoot",
    "InvalidContainer",
    "ConflictingAlias",
    "DuplicateFlagDeclaration",
    "ReservedFlagName",
    "DefaultMustNotBeRedacted",
    "NameMismatch",
    "DirectoryNotFound",
    "RecordLoadError",
    "AliasCycle",
    "DanglingAlias",
    "AliasShadowsRelease",
    "UnknownRelease",
    "InheritanceCycle",
    "UnknownInheritedRelease",
    "UndefinedFlag",
    "FlagValueBeforeDeclaration",
    "RootNonManualFlag",
    "AconfigFlagsOnlyViolation",
    "UnsupportedArtifactFormat",
    "ArtifactWriteError",
]
