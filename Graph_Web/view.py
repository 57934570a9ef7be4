"""Render-facing snapshot and picking dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

import numpy as np

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .graph.model import Graph
    from .graph.node import GraphNode


@dataclass(frozen=True)
class LayoutSnapshot:
    """Read-only references to the buffers of one completed layout step."""

    frame: int
    positions: np.ndarray
    colors: np.ndarray
    sizes: np.ndarray
    edge_positions: np.ndarray
    edge_node_index: tuple[int, ...]


@dataclass(frozen=True)
class PickInfo:
    """A picked dense node index resolved back to the graph."""

    layer: Any
    index: int
    node: Optional["GraphNode"]
    position: Optional[np.ndarray]


def snapshot(graph: "Graph", frame: int = 0) -> LayoutSnapshot:
    """Capture the attached layout's current output for a render frame."""

    if graph.layout is None:
        empty = np.empty((0,))
        return LayoutSnapshot(frame, empty, empty, empty, empty, ())
    # the step holds the graph lock, so all buffers come from the same step
    with graph.lock:
        return LayoutSnapshot(
            frame=frame,
            positions=graph.get_node_position(),
            colors=graph.get_node_color(),
            sizes=graph.get_node_size(),
            edge_positions=graph.get_edge_position(),
            edge_node_index=tuple(graph.get_edge_node_index()),
        )


def resolve_pick(graph: "Graph", layer: Any, index: int) -> PickInfo:
    """Map a picked dense ``index`` to its node and current position.

    Picking geometry lives with the renderer; this only translates the
    index it reports. Out-of-range indices resolve to ``None`` fields.
    """

    node = graph.get_node_by_index(index)
    position = None
    if node is not None and graph.layout is not None:
        positions = graph.get_node_position()
        if 0 <= index < len(positions):
            position = positions[index]
    return PickInfo(layer=layer, index=index, node=node, position=position)


__all__ = ["LayoutSnapshot", "PickInfo", "snapshot", "resolve_pick"]
