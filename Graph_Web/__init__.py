"""Graph_Web package initialization."""

from __future__ import annotations

from .errors import (
    ConfigurationMismatchError,
    GraphWebError,
    NumericInstabilityError,
    SeedNotFoundError,
    StructuralError,
)
from .graph import Graph, GraphEdge, GraphNode
from .engine import LayoutDriver
from .layout import ForceDirectedLayout, create_layout

__all__ = [
    "Graph",
    "GraphNode",
    "GraphEdge",
    "ForceDirectedLayout",
    "create_layout",
    "LayoutDriver",
    "GraphWebError",
    "StructuralError",
    "SeedNotFoundError",
    "NumericInstabilityError",
    "ConfigurationMismatchError",
]
