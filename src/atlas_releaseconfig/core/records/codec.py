# src/atlas_releaseconfig/core/records/codec.py
"""
Codec canônico de records e artefatos.

Este módulo é responsável por ler records de contribuição a partir do
disco e por serializar artefatos resolvidos nos formatos de saída.

Formatos de leitura (v1):
    - YAML (.yaml, .yml)
    - JSON (.json)

Formatos de escrita (v1):
    - JSON (.json)     → chaves ordenadas, indentação 2
    - YAML (.yaml)     → forma textual legível, chaves ordenadas
    - joblib (.joblib) → forma binária

Decisões arquiteturais:
    - Toda falha de leitura ou parse é encapsulada em `RecordLoadError`
    - Arquivos vazios são interpretados como dicionários vazios
    - A escrita é determinística para o mesmo conteúdo (JSON/YAML)
    - Diretórios intermediários são criados automaticamente

Limites explícitos:
    - Não aplica regras de merge
    - Não valida semântica dos campos (ver `types.*.from_dict`)
    - Não percorre árvores de diretório (ver `records.walk`)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import joblib
import yaml  # PyYAML

from ..errors import ArtifactWriteError, RecordLoadError, UnsupportedArtifactFormat


RECORD_SUFFIXES = (".yaml", ".yml", ".json")

# formato lógico → extensão do arquivo de saída
ARTIFACT_FORMATS: Dict[str, str] = {
    "json": ".json",
    "yaml": ".yaml",
    "joblib": ".joblib",
}


def load_record(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Carrega um record (YAML ou JSON) e valida sua estrutura mínima.

    Decisões arquiteturais:
        - O arquivo é lido em escopo fechado (nenhum handle permanece aberto)
        - O conteúdo raiz deve ser um dicionário
        - Erros de I/O e de parse são encapsulados, preservando a causa

    Args:
        path: Caminho do record.

    Returns:
        Dict[str, Any]: Conteúdo do record.

    Raises:
        RecordLoadError: Se o arquivo não puder ser lido, tiver extensão
            não suportada, for malformado ou não tiver raiz dict.
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix not in RECORD_SUFFIXES:
        raise RecordLoadError(
            f"Unsupported record format: {p.suffix}",
            details={"path": str(p)},
        )

    try:
        with p.open("r", encoding="utf-8") as f:
            if suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise RecordLoadError(
            f"Could not load record {p}: {e}",
            details={"path": str(p), "cause": e.__class__.__name__},
        ) from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise RecordLoadError(
            f"Record root must be a mapping, got {type(data).__name__}: {p}",
            details={"path": str(p)},
        )

    return data


def write_message(path: Union[str, Path], data: Mapping[str, Any]) -> Path:
    """
    Serializa `data` em `path`, escolhendo o formato pela extensão.

    Raises:
        UnsupportedArtifactFormat: Se a extensão não for suportada.
        ArtifactWriteError: Em caso de falha de escrita (I/O).
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix not in ARTIFACT_FORMATS.values() and suffix != ".yml":
        raise UnsupportedArtifactFormat(
            f"Unsupported artifact format: {p.suffix}",
            details={"path": str(p), "supported": sorted(ARTIFACT_FORMATS)},
        )

    try:
        p.parent.mkdir(parents=True, exist_ok=True)

        if suffix == ".json":
            p.write_text(
                json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
        elif suffix in (".yaml", ".yml"):
            p.write_text(
                yaml.safe_dump(dict(data), sort_keys=True, allow_unicode=True),
                encoding="utf-8",
            )
        else:
            joblib.dump(dict(data), p)
    except OSError as e:
        if p.is_file():
            p.unlink()  # escrita parcial
        raise ArtifactWriteError(
            f"Could not write artifact {p}: {e}",
            details={"path": str(p), "cause": e.__class__.__name__},
        ) from e

    return p


def read_message(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Lê de volta um artefato escrito por `write_message` (qualquer formato).

    Raises:
        RecordLoadError: Se o arquivo não puder ser lido ou desserializado.
    """
    p = Path(path)
    if p.suffix.lower() != ".joblib":
        return load_record(p)

    try:
        data = joblib.load(p)
    except Exception as e:  # pickle corrompido pode levantar qualquer tipo
        raise RecordLoadError(
            f"Could not load artifact {p}: {e}",
            details={"path": str(p), "cause": e.__class__.__name__},
        ) from e

    if not isinstance(data, dict):
        raise RecordLoadError(
            f"Artifact root must be a mapping, got {type(data).__name__}: {p}",
            details={"path": str(p)},
        )
    return data


def artifact_suffix(fmt: str) -> str:
    """Retorna a extensão do formato lógico, ou falha se desconhecido."""
    try:
        return ARTIFACT_FORMATS[fmt]
    except KeyError:
        raise UnsupportedArtifactFormat(
            f"Unsupported artifact format: {fmt}",
            details={"format": fmt, "supported": sorted(ARTIFACT_FORMATS)},
        ) from None


__all__ = [
    "RECORD_SUFFIXES",
    "ARTIFACT_FORMATS",
    "load_record",
    "write_message",
    "read_message",
    "artifact_suffix",
]
