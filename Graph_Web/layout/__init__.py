"""Layout algorithms operating on :class:`~Graph_Web.graph.model.Graph`."""

from .base import GraphLayout, available_layouts, create_layout, register_layout
from .force_directed import ForceDirectedLayout

__all__ = [
    "GraphLayout",
    "ForceDirectedLayout",
    "available_layouts",
    "create_layout",
    "register_layout",
]
