"""Renderizadores de diagnóstico (diagrama de herança em DOT)."""

from .graph import render_inheritance_graph, write_inheritance_graph

__all__ = ["render_inheritance_graph", "write_inheritance_graph"]
