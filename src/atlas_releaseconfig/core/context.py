# src/atlas_releaseconfig/core/context.py
"""
ResolutionContext — Contexto canônico de uma resolução de release configs.

O ResolutionContext é o **único meio** de registro de eventos estruturados
e de warnings não fatais durante uma resolução. Loader, merge engine e
runner recebem o contexto explicitamente; não existe logger global.

Princípios fundamentais:
- Isolamento por resolução (cada resolução possui seu próprio contexto)
- Eventos são dicionários simples e serializáveis
- Warnings são agrupados por estágio (`stage`)

Estágios canônicos:
- load      → ingestão de raízes de contribuição
- aliases   → anexação reversa de aliases
- generate  → achatamento de releases
- output    → seleção do alvo e escrita de artefatos
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ResolutionContext:
    """
    Contexto de uma resolução.

    Campos canônicos:
    - run_id: identificador único da resolução
    - created_at: timestamp UTC de criação do contexto
    - meta: metadados livres (ex.: product, out_dir)
    - warnings: warnings por estágio
    - events: log estruturado de eventos
    """

    run_id: str
    created_at: str
    meta: Dict[str, Any] = field(default_factory=dict)

    warnings: Dict[str, List[str]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def new(cls, *, run_id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None) -> "ResolutionContext":
        return cls(
            run_id=run_id or uuid.uuid4().hex,
            created_at=_utc_now_iso(),
            meta=dict(meta or {}),
        )

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, stage: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "stage": stage,
            "level": level,
            "message": message,
            "timestamp": _utc_now_iso(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, stage: str, message: str) -> None:
        if stage not in self.warnings:
            self.warnings[stage] = []
        self.warnings[stage].append(message)
        self.log(stage=stage, level="warning", message=message)

    def events_named(self, event: str) -> List[Dict[str, Any]]:
        """Eventos cujo campo `event` coincide com o nome informado."""
        return [e for e in self.events if e.get("event") == event]


__all__ = ["ResolutionContext"]
