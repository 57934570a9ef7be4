"""Graph data structures and helpers."""

from .node import GraphEdge, GraphNode
from .model import Graph

__all__ = ["Graph", "GraphNode", "GraphEdge"]
