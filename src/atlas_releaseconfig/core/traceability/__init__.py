# src/atlas_releaseconfig/core/traceability/__init__.py
"""
Rastreabilidade do Atlas ReleaseConfig — Resolution Manifest v1.

API pública exposta:
    - ResolutionManifest → estrutura canônica do manifest
    - create_manifest    → criação explícita
    - add_event          → registro explícito no Event Log
    - record_inputs      → records lidos e raízes usadas
    - record_output      → artefato escrito
    - save_manifest / load_manifest → persistência JSON determinística
"""

from .manifest import (
    ResolutionManifest,
    add_event,
    create_manifest,
    load_manifest,
    record_inputs,
    record_output,
    save_manifest,
)

__all__ = [
    "ResolutionManifest",
    "create_manifest",
    "add_event",
    "record_inputs",
    "record_output",
    "save_manifest",
    "load_manifest",
]
