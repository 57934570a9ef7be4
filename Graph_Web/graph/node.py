from __future__ import annotations

import math
from typing import Any, KeysView


def _node_id(node: "GraphNode | str") -> str:
    return node.id if isinstance(node, GraphNode) else node


class GraphNode:
    """A vertex with an externally assigned id and a category tag.

    Neighbours are stored as ids and resolved through the owning
    :class:`~Graph_Web.graph.model.Graph`, so nodes never hold strong
    references to one another.
    """

    def __init__(self, node_id: str, category: str = "", **attributes: Any) -> None:
        self.id = node_id
        # neighbour ids in insertion order
        self._adjacent: dict[str, None] = {}
        self.distance = math.inf
        self.attributes: dict[str, Any] = {"type": category}
        self.attributes.update(attributes)

    @property
    def category(self) -> str:
        return self.attributes.get("type", "")

    @property
    def adjacent(self) -> KeysView[str]:
        return self._adjacent.keys()

    @property
    def degree(self) -> int:
        """Number of distinct neighbouring nodes."""
        return len(self._adjacent)

    def add_adjacent_node(self, node: "GraphNode | str") -> None:
        """Record ``node`` as a neighbour."""
        self._adjacent.setdefault(_node_id(node))

    def add_attributes(self, **attributes: Any) -> None:
        """Merge ``attributes`` into :attr:`attributes`."""
        self.attributes.update(attributes)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"GraphNode({self.id!r}, category={self.category!r})"


class GraphEdge:
    """Undirected connection between two node ids."""

    def __init__(
        self,
        edge_id: str,
        source: GraphNode | str,
        target: GraphNode | str,
        category: str = "",
        strength: float = 1.0,
        **attributes: Any,
    ) -> None:
        self.id = edge_id
        self.source = _node_id(source)
        self.target = _node_id(target)
        self.distance = math.inf
        self.attributes: dict[str, Any] = {"type": category, "strength": strength}
        self.attributes.update(attributes)

    @property
    def category(self) -> str:
        return self.attributes.get("type", "")

    @property
    def strength(self) -> float:
        return self.attributes.get("strength", 1.0)

    @property
    def endpoints(self) -> frozenset[str]:
        return frozenset((self.source, self.target))

    def other(self, node_id: str) -> str:
        """Return the endpoint opposite ``node_id``."""
        if node_id == self.source:
            return self.target
        if node_id == self.target:
            return self.source
        raise ValueError(f"{node_id!r} is not an endpoint of edge {self.id!r}")

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"GraphEdge({self.id!r}, {self.source!r}, {self.target!r})"


__all__ = ["GraphNode", "GraphEdge"]
