# src/atlas_releaseconfig/core/records/__init__.py
"""
Colaboradores de I/O da resolução: codec de records/artefatos e varredura
de arquivos por convenção de diretório.

API pública exposta:
    - load_record / write_message / read_message → codec
    - walk_record_files / enumerate_release_configs → varredura

Limites explícitos:
    - Não contém regras de merge nem validações cruzadas entre diretórios
"""

from .codec import (
    ARTIFACT_FORMATS,
    RECORD_SUFFIXES,
    artifact_suffix,
    load_record,
    read_message,
    write_message,
)
from .walk import enumerate_release_configs, walk_record_files

__all__ = [
    "ARTIFACT_FORMATS",
    "RECORD_SUFFIXES",
    "artifact_suffix",
    "load_record",
    "read_message",
    "write_message",
    "enumerate_release_configs",
    "walk_record_files",
]
