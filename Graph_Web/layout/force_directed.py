from __future__ import annotations

"""Force-directed particle layout.

Each node is a particle with a mass derived from its degree. One
:meth:`ForceDirectedLayout.step` recomputes every pairwise distance and
direction, accumulates node-node repulsion (with a soft overlap penalty and
an axis-2 gravity term), adds edge spring forces, then integrates velocity
and position before re-centring the cloud on the origin. The pairwise work
is quadratic in node count.
"""

import logging
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

from ..config import Config
from ..errors import NumericInstabilityError
from .base import GraphLayout, register_layout

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..graph.model import Graph

logger = logging.getLogger(__name__)

# Axis that receives the constant-magnitude gravity term
GRAVITY_AXIS = 2


@register_layout("force_directed")
class ForceDirectedLayout(GraphLayout):
    """Damped spring/repulsion simulation over a fixed-size graph.

    Parameters
    ----------
    graph:
        Graph whose current node and edge counts size every buffer. Later
        mutation of ``graph`` is not reflected; starting the layout on a graph
        whose counts changed raises
        :class:`~Graph_Web.errors.ConfigurationMismatchError`.
    dof:
        Spatial dimensions per node, ``2`` or ``3``.
    **params:
        Overrides for any key of :attr:`Config.layout`.
    """

    def __init__(
        self,
        graph: "Graph",
        dof: int | None = None,
        layout_id: str | None = None,
        **params: Any,
    ) -> None:
        super().__init__(graph, layout_id)
        if dof is None:
            dof = Config.default_dof
        if dof not in (2, 3):
            raise ValueError("dof must be 2 or 3")
        unknown = set(params) - set(Config.layout)
        if unknown:
            raise TypeError(f"unknown layout parameter(s): {sorted(unknown)}")
        self.dof = dof
        self._params = {**Config.layout, **params}
        self.ka = float(self._params["ka"])
        self.kr2 = float(self._params["kr2"])
        self.ks = float(self._params["ks"])
        self.ks2 = float(self._params["ks2"])
        self.dt_max = float(self._params["dt_max"])
        self.anneal_after = int(self._params["anneal_after"])
        self.anneal_rate = float(self._params["anneal_rate"])
        self.damping = float(self._params["damping"])
        self.rest_length = float(self._params["rest_length"])

        n = graph.number_of_nodes
        m = graph.number_of_edges
        self._n = n
        self._m = m
        nodes = [graph.node_map[i] for i in range(n)]
        edges = [graph.edges[graph.edge_id_map[i]] for i in range(m)]

        self.edge_nodes = np.asarray(graph.get_edge_node_index(), dtype=np.intp).reshape(
            -1, 2
        )
        self.mass = np.array([self._initialize_node_mass(node) for node in nodes], dtype=float)
        self.color = np.array(
            [self._initialize_node_color(node) for node in nodes], dtype=float
        ).reshape(n, 4)
        self.size = np.full(n, float(self._params["node_size"]))
        self.edge_color = np.array(
            [self._initialize_edge_color(edge) for edge in edges], dtype=float
        ).reshape(m, 8)
        for arr in (self.mass, self.color, self.size, self.edge_color):
            arr.setflags(write=False)

        self.distance = np.zeros((n, n))
        self.direction = np.zeros((n, n, dof))
        self.acceleration = np.zeros((n, dof))

        self._initialize_state()

    # ---- Sizing --------------------------------------------------------------

    @property
    def number_of_nodes(self) -> int:
        return self._n

    @property
    def number_of_edges(self) -> int:
        return self._m

    # ---- Initialisation ------------------------------------------------------

    def _initialize_state(self) -> None:
        self.dt = float(self._params["dt"])
        self.current_step = 0
        position = self.randn(0.0, 2.0, (self._n, self.dof))
        if self.dof > 2:
            position[:, 2] *= 2.0
        self.velocity = self.randn(0.0, 1.0, (self._n, self.dof))
        self.acceleration.fill(0.0)
        self._publish(position)

    def _initialize_node_mass(self, node) -> float:
        if node.category == Config.device_category:
            return node.degree * 2.0
        return node.degree / 10.0

    def _initialize_node_color(self, node) -> list[float]:
        rgba = Config.node_colors.get(node.category, Config.default_node_color)
        return [c / 255.0 for c in rgba]

    def _initialize_edge_color(self, edge) -> list[float]:
        return list(Config.edge_colors.get(edge.category, Config.default_edge_color))

    def reset(self) -> None:
        """Resample positions and velocities and restart annealing."""

        self._initialize_state()

    # ---- Stepping ------------------------------------------------------------

    def step(self) -> None:
        """Advance the simulation by one discrete update."""

        if self.current_step > self.anneal_after and self.dt < self.dt_max:
            self.dt = min(self.dt * self.anneal_rate, self.dt_max)

        previous = self.position
        if self._n:
            self._pairwise(previous)
            self._process_node_interactions()
            self._process_edge_interactions()

            self.velocity += self.acceleration * self.dt
            self.velocity *= self.damping

            position = previous + self.velocity
            self._guard_finite(position, previous)
            position -= position.mean(axis=0)
            self._publish(position)
        self.current_step += 1

    def _pairwise(self, position: np.ndarray) -> None:
        """Fill :attr:`distance` and :attr:`direction` for every node pair.

        ``direction[i, j]`` is the unit vector from node ``j`` towards node
        ``i``. Coincident pairs keep a zero direction so they exert no force
        on each other.
        """

        diff = position[:, None, :] - position[None, :, :]
        dist = np.sqrt(np.einsum("ijk,ijk->ij", diff, diff))
        self.distance[...] = dist
        self.direction.fill(0.0)
        np.divide(diff, dist[..., None], out=self.direction, where=dist[..., None] > 0)

        coincident = (np.count_nonzero(dist == 0.0) - self._n) // 2
        if coincident:
            logger.warning(
                "%d coincident node pair(s) at step %d; pair forces skipped",
                coincident,
                self.current_step,
            )

    def _process_node_interactions(self) -> None:
        dist = self.distance
        boundary = dist - (self.size[:, None] + self.size[None, :])
        with np.errstate(divide="ignore", invalid="ignore"):
            repulsion = (self.kr2 / (dist * dist)) * self.mass[None, :]
        force = np.where(boundary > 0, repulsion, -self.ks2 * boundary)
        np.fill_diagonal(force, 0.0)

        acceleration = np.einsum("ij,ijk->ik", force, self.direction)
        if self.dof > GRAVITY_AXIS:
            acceleration[:, GRAVITY_AXIS] -= self.ka * self.direction[
                :, :, GRAVITY_AXIS
            ].sum(axis=1)
        self.acceleration[...] = acceleration

    def _process_edge_interactions(self) -> None:
        if not len(self.edge_nodes):
            return
        i0 = self.edge_nodes[:, 0]
        i1 = self.edge_nodes[:, 1]
        stretch = (self.rest_length - self.distance[i0, i1]) * self.ks
        # heavier neighbours pull harder
        f0 = stretch * self.mass[i1]
        f1 = stretch * self.mass[i0]
        np.add.at(self.acceleration, i0, f0[:, None] * self.direction[i0, i1])
        np.add.at(self.acceleration, i1, f1[:, None] * self.direction[i1, i0])

    def _guard_finite(self, position: np.ndarray, previous: np.ndarray) -> None:
        bad = ~np.isfinite(position).all(axis=1)
        if not bad.any():
            return
        message = (
            f"non-finite position for {int(bad.sum())} node(s) at step "
            f"{self.current_step}"
        )
        if Config.strict_numerics:
            raise NumericInstabilityError(message)
        logger.error("%s; rows restored from previous step", message)
        position[bad] = previous[bad]
        self.velocity[bad] = 0.0

    def _publish(self, position: np.ndarray) -> None:
        edge_position = position[self.edge_nodes]
        position.setflags(write=False)
        edge_position.setflags(write=False)
        # node and edge positions always swap together
        self._published = (position, edge_position)

    @property
    def position(self) -> np.ndarray:
        return self._published[0]

    @property
    def edge_position(self) -> np.ndarray:
        return self._published[1]

    def published(self) -> tuple[np.ndarray, np.ndarray]:
        """Return node and edge positions of the same completed step."""

        return self._published

    # ---- Accessors -----------------------------------------------------------

    def set_node_position(self, position: Sequence[Sequence[float]]) -> None:
        """Replace all node positions, e.g. to seed from an earlier layout."""

        arr = np.array(position, dtype=float)
        if arr.shape != (self._n, self.dof):
            raise ValueError(
                f"expected position shape {(self._n, self.dof)}, got {arr.shape}"
            )
        self._publish(arr)

    def net_force(self) -> np.ndarray:
        """Return a copy of the acceleration computed by the last step."""

        return self.acceleration.copy()

    def get_node_position(self) -> np.ndarray:
        return self.position

    def get_node_color(self) -> np.ndarray:
        return self.color

    def get_node_size(self) -> np.ndarray:
        return self.size

    def get_edge_position(self) -> np.ndarray:
        return self.edge_position

    def get_edge_color(self) -> np.ndarray:
        return self.edge_color


__all__ = ["ForceDirectedLayout", "GRAVITY_AXIS"]
