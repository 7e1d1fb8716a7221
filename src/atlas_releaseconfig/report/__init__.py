"""Relatórios derivados do bundle gerado (matriz de flags, Markdown)."""

from .flag_matrix import REQUIRED_SECTIONS, build_flag_matrix, generate_report_md

__all__ = ["REQUIRED_SECTIONS", "build_flag_matrix", "generate_report_md"]
