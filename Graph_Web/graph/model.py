from __future__ import annotations

import logging
import math
import threading
import warnings
from collections import defaultdict, deque
from typing import TYPE_CHECKING, Dict, List, Optional

from ..config import Config
from ..errors import ConfigurationMismatchError, SeedNotFoundError, StructuralError
from .node import GraphEdge, GraphNode

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..layout.base import GraphLayout

logger = logging.getLogger(__name__)

# guards ``distance`` on node and edge objects shared across subgraphs
_DISTANCE_LOCK = threading.Lock()


class Graph:
    """Mutable node/edge store with dense index maps and an attached layout.

    Nodes and edges are owned by the id-keyed :attr:`nodes` and :attr:`edges`
    mappings. Dense indices (``0..n-1`` for nodes, ``0..m-1`` for edges) are
    derived lazily from insertion order and consumed by the layout kernel
    through :meth:`get_edge_node_index`.

    A subgraph produced by :meth:`generate_sub_graph` shares node and edge
    objects with its parent but owns an independent index space.
    """

    def __init__(self, *, parent_graph: Optional["Graph"] = None) -> None:
        self.nodes: Dict[str, GraphNode] = {}
        self.edges: Dict[str, GraphEdge] = {}
        # node id -> ids of incident edges, in insertion order
        self._incident: Dict[str, List[str]] = defaultdict(list)

        self._node_index_map: Dict[str, int] = {}
        self._node_map: Dict[int, GraphNode] = {}
        self._edge_index_map: Dict[str, int] = {}
        self._edge_id_map: Dict[int, str] = {}
        self._edge_node_index: List[int] = []
        self._indices_dirty = False

        self.parent_graph = parent_graph

        self.layout: Optional[GraphLayout] = None
        self.layout_running = False

        self.data_structure_changed = False
        self.data_changed = False

        self.lock = threading.RLock()
        self._step_lock = threading.Lock()
        # duplicate-id messages already warned about by this graph
        self._warned: set[str] = set()

    @property
    def is_sub_graph(self) -> bool:
        return self.parent_graph is not None

    @property
    def number_of_nodes(self) -> int:
        return len(self.nodes)

    @property
    def number_of_edges(self) -> int:
        return len(self.edges)

    # ---- Structure -----------------------------------------------------------

    def add_node(self, node: GraphNode) -> None:
        """Insert ``node`` unless a node with the same id already exists."""

        with self.lock:
            if node.id in self.nodes:
                self._duplicate("node", node.id)
                return
            self.nodes[node.id] = node
            self._mark_dirty()

    def add_edge(self, edge: GraphEdge) -> None:
        """Insert ``edge`` and link its endpoints as neighbours.

        Raises
        ------
        StructuralError
            If either endpoint is not a node of this graph.
        """

        with self.lock:
            if edge.id in self.edges:
                self._duplicate("edge", edge.id)
                return
            missing = [nid for nid in (edge.source, edge.target) if nid not in self.nodes]
            if missing:
                raise StructuralError(
                    f"edge {edge.id!r} references unknown node(s) {missing}"
                )
            self.nodes[edge.source].add_adjacent_node(edge.target)
            self.nodes[edge.target].add_adjacent_node(edge.source)
            self._insert_edge(edge)

    def _insert_edge(self, edge: GraphEdge) -> None:
        self.edges[edge.id] = edge
        self._incident[edge.source].append(edge.id)
        if edge.target != edge.source:
            self._incident[edge.target].append(edge.id)
        self._mark_dirty()

    def _duplicate(self, kind: str, item_id: str) -> None:
        message = f"duplicate {kind} id {item_id!r} ignored"
        if Config.strict_ids:
            raise StructuralError(message)
        if message not in self._warned:
            self._warned.add(message)
            warnings.warn(message, StructuralError, stacklevel=3)

    def _mark_dirty(self) -> None:
        self._indices_dirty = True
        self.data_structure_changed = True

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        return self.nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[GraphEdge]:
        return self.edges.get(edge_id)

    def incident_edges(self, node_id: str) -> List[GraphEdge]:
        """Return edges of this graph touching ``node_id``."""

        return [self.edges[eid] for eid in self._incident.get(node_id, ())]

    # ---- Dense indices -------------------------------------------------------

    def _ensure_indices(self) -> None:
        with self.lock:
            if not self._indices_dirty:
                return
            self._node_index_map = {nid: i for i, nid in enumerate(self.nodes)}
            self._node_map = {i: node for i, node in enumerate(self.nodes.values())}
            self._edge_index_map = {eid: i for i, eid in enumerate(self.edges)}
            self._edge_id_map = {i: eid for i, eid in enumerate(self.edges)}
            pairs: List[int] = []
            for edge in self.edges.values():
                i0 = self._node_index_map.get(edge.source)
                i1 = self._node_index_map.get(edge.target)
                if i0 is not None and i1 is not None:
                    pairs.extend((i0, i1))
            self._edge_node_index = pairs
            self._indices_dirty = False

    @property
    def node_index_map(self) -> Dict[str, int]:
        self._ensure_indices()
        return self._node_index_map

    @property
    def node_map(self) -> Dict[int, GraphNode]:
        self._ensure_indices()
        return self._node_map

    @property
    def edge_index_map(self) -> Dict[str, int]:
        self._ensure_indices()
        return self._edge_index_map

    @property
    def edge_id_map(self) -> Dict[int, str]:
        self._ensure_indices()
        return self._edge_id_map

    def get_node_index(self, node_id: str) -> Optional[int]:
        return self.node_index_map.get(node_id)

    def get_node_by_index(self, index: int) -> Optional[GraphNode]:
        """Return the node at dense ``index``; used to resolve picks."""

        return self.node_map.get(index)

    def get_edge_id_by_index(self, index: int) -> Optional[str]:
        return self.edge_id_map.get(index)

    def get_edge_node_index(self) -> List[int]:
        """Return the flat ``[n0, n1, n0, n1, ...]`` endpoint index buffer."""

        self._ensure_indices()
        return self._edge_node_index

    # ---- Layout control ------------------------------------------------------

    def set_layout(self, layout: "GraphLayout") -> None:
        """Install ``layout``. Sizing is checked when the layout is started."""

        with self.lock:
            self.layout = layout

    def _check_layout(self) -> None:
        layout = self.layout
        if layout is None:
            raise ConfigurationMismatchError("no layout attached to graph")
        expected = (self.number_of_nodes, self.number_of_edges)
        actual = (layout.number_of_nodes, layout.number_of_edges)
        if actual != expected:
            raise ConfigurationMismatchError(
                f"layout sized for {actual[0]} nodes/{actual[1]} edges but graph "
                f"has {expected[0]} nodes/{expected[1]} edges"
            )

    def start_layout(self) -> None:
        """Mark the layout as running after validating its buffer sizes."""

        with self.lock:
            self._check_layout()
            self.layout_running = True

    def pause_layout(self) -> None:
        """Stop stepping; takes effect no later than the next tick."""

        self.layout_running = False

    def reset_layout(self) -> None:
        """Re-initialise the attached layout's state."""

        with self._step_lock, self.lock:
            self._check_layout()
            self.layout.reset()
            self.data_changed = True

    def layout_step(self) -> bool:
        """Advance the layout by one step if running.

        A call that overlaps a step already in progress is skipped rather
        than re-entering the kernel.

        Returns
        -------
        bool
            ``True`` when a step completed.
        """

        if not self.layout_running:
            return False
        if not self._step_lock.acquire(blocking=False):
            logger.debug("layout step already in progress; tick skipped")
            return False
        try:
            with self.lock:
                if not self.layout_running:
                    return False
                self._check_layout()
                self.layout.step()
                self.data_changed = True
        finally:
            self._step_lock.release()
        return True

    def is_data_changed(self) -> bool:
        return self.data_changed

    def is_data_structure_changed(self) -> bool:
        return self.data_structure_changed

    def clear_changes(self) -> None:
        self.data_changed = False
        self.data_structure_changed = False

    # ---- Subgraph extraction -------------------------------------------------

    def _store_distances(
        self, node_distance: Dict[str, int], edge_distance: Dict[str, int]
    ) -> None:
        with _DISTANCE_LOCK:
            for node_id, node in self.nodes.items():
                node.distance = node_distance.get(node_id, math.inf)
            for edge_id, edge in self.edges.items():
                edge.distance = edge_distance.get(edge_id, math.inf)

    def _default_seed(self) -> str:
        best: Optional[GraphNode] = None
        for node in self.nodes.values():
            if node.category != Config.driver_category:
                continue
            if best is None or node.degree > best.degree:
                best = node
        if best is None:
            raise SeedNotFoundError(
                f"no node with category {Config.driver_category!r} to seed subgraph"
            )
        return best.id

    def generate_sub_graph(
        self, start_node_id: Optional[str] = None, num_hops: Optional[int] = None
    ) -> "Graph":
        """Return the ``num_hops`` neighbourhood of a seed node as a new graph.

        Parameters
        ----------
        start_node_id:
            Seed node. When omitted the highest-degree node whose category is
            :attr:`Config.driver_category` is used, ties going to the first
            node inserted.
        num_hops:
            Breadth-first radius. Defaults to :attr:`Config.default_num_hops`.

        Returns
        -------
        Graph
            A graph holding the same node and edge objects, with nodes
            indexed in breadth-first dequeue order and containing every edge
            whose endpoints are both within the radius.

        Raises
        ------
        SeedNotFoundError
            If no seed was given and none qualifies, or the given seed is not
            a node of this graph.
        """

        if num_hops is None:
            num_hops = Config.default_num_hops
        if num_hops < 0:
            raise ValueError("num_hops must be non-negative")

        with self.lock:
            if start_node_id is None:
                start_node_id = self._default_seed()
            root = self.nodes.get(start_node_id)
            if root is None:
                raise SeedNotFoundError(f"seed node {start_node_id!r} not in graph")

            # hop distances stay local until the traversal is done
            node_distance: Dict[str, int] = {root.id: 0}
            edge_distance: Dict[str, int] = {}

            sub = Graph(parent_graph=self)
            queue = deque([root])
            while queue:
                current = queue.popleft()
                hops = node_distance[current.id]
                if hops > num_hops:
                    break
                sub.nodes[current.id] = current

                for neighbour_id in current.adjacent:
                    if neighbour_id in self.nodes and neighbour_id not in node_distance:
                        node_distance[neighbour_id] = hops + 1
                        queue.append(self.nodes[neighbour_id])

                for edge_id in self._incident.get(current.id, ()):
                    edge = self.edges[edge_id]
                    if edge.id in sub.edges or edge.other(current.id) not in sub.nodes:
                        continue
                    edge_distance[edge.id] = hops
                    sub._insert_edge(edge)

            sub._mark_dirty()
            sub._ensure_indices()
            self._store_distances(node_distance, edge_distance)

        logger.debug(
            "subgraph from %s (%d hops): %d nodes, %d edges",
            start_node_id,
            num_hops,
            sub.number_of_nodes,
            sub.number_of_edges,
        )
        return sub

    # ---- Render accessors ----------------------------------------------------

    def _layout_or_raise(self) -> "GraphLayout":
        if self.layout is None:
            raise ConfigurationMismatchError("no layout attached to graph")
        return self.layout

    def get_node_position(self):
        return self._layout_or_raise().get_node_position()

    def get_node_color(self):
        return self._layout_or_raise().get_node_color()

    def get_node_size(self):
        return self._layout_or_raise().get_node_size()

    def get_edge_position(self):
        return self._layout_or_raise().get_edge_position()

    def get_edge_color(self):
        return self._layout_or_raise().get_edge_color()


__all__ = ["Graph"]
