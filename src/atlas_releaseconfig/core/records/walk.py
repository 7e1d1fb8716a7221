# src/atlas_releaseconfig/core/records/walk.py
"""
Varredura de records por convenção de diretório.

Dada uma raiz de contribuição e o nome de um subdiretório convencional
(`flag_declarations`, `release_configs`, `flag_values/<release>`), produz
os arquivos de record encontrados abaixo dele.

Decisões arquiteturais:
    - A ordem de produção é a ordem lexicográfica dos paths (determinística)
    - Subdiretórios ausentes não são erro: simplesmente não produzem records
    - Apenas extensões suportadas pelo codec são consideradas
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Union

from .codec import RECORD_SUFFIXES


def walk_record_files(root: Union[str, Path], subdir: str) -> Iterator[Path]:
    base = Path(root) / subdir
    if not base.is_dir():
        return
    found: List[Path] = [
        p for p in base.rglob("*")
        if p.is_file() and p.suffix.lower() in RECORD_SUFFIXES
    ]
    yield from sorted(found, key=lambda p: p.as_posix())


def enumerate_release_configs(root: Union[str, Path]) -> List[str]:
    """Nomes (não ordenados semanticamente) das releases contribuídas por `root`."""
    return [p.stem for p in walk_record_files(root, "release_configs")]


__all__ = ["walk_record_files", "enumerate_release_configs"]
