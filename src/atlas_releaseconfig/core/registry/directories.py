# src/atlas_releaseconfig/core/registry/directories.py
"""
Índice de raízes de contribuição (DirectoryIndex).

Atribui a cada raiz um rank estável na ordem de carga — o único sinal de
precedência da resolução — e resolve, para qualquer path, o rank da raiz
registrada mais próxima que o contém.

Invariantes:
    - Ranks são 0-based, estritamente crescentes na ordem de registro
    - Registrar novamente a mesma raiz não altera o índice
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from ..errors import DirectoryNotFound


PathLike = Union[str, Path]


@dataclass
class DirectoryIndex:
    _dirs: List[Path] = field(default_factory=list, init=False, repr=False)
    _ranks: Dict[Path, int] = field(default_factory=dict, init=False, repr=False)

    def register(self, path: PathLike) -> int:
        p = Path(path)
        if p in self._ranks:
            return self._ranks[p]
        rank = len(self._dirs)
        self._dirs.append(p)
        self._ranks[p] = rank
        return rank

    def rank_of(self, path: PathLike) -> int:
        """
        Rank da raiz registrada mais próxima que contém `path`.

        Raises:
            DirectoryNotFound: Se nenhum ancestral de `path` estiver registrado.
        """
        p = Path(path)
        for candidate in (p, *p.parents):
            if candidate in self._ranks:
                return self._ranks[candidate]
        raise DirectoryNotFound(
            f"Could not determine release config directory from {path}",
            details={"path": str(path)},
        )

    def directory_at(self, rank: int) -> Path:
        return self._dirs[rank]

    @property
    def directories(self) -> List[Path]:
        return list(self._dirs)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return Path(path) in self._ranks

    def __len__(self) -> int:
        return len(self._dirs)


__all__ = ["DirectoryIndex"]
