"""Shared layout interface, Gaussian sampling and the layout registry."""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, Type

import numpy as np

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..graph.model import Graph


class GraphLayout(ABC):
    """Base class for algorithms that embed a :class:`Graph` in space.

    Subclasses own dense per-node buffers sized when they are constructed and
    expose them to renderers through the ``get_*`` accessors. Accessors
    return read-only arrays reflecting the last completed :meth:`step`.
    """

    def __init__(self, graph: "Graph", layout_id: str | None = None) -> None:
        self.id = layout_id
        self.graph = graph

    @staticmethod
    def gauss_random() -> float:
        """Return one standard normal sample.

        Uses the polar method: pairs drawn uniformly from the square are
        rejected when they fall outside the unit disk or exactly on the
        origin. Samples come from the module-level :mod:`random` source.
        """

        while True:
            u = 2.0 * random.random() - 1.0
            v = 2.0 * random.random() - 1.0
            r = u * u + v * v
            if 0.0 < r <= 1.0:
                return v * math.sqrt(-2.0 * math.log(r) / r)

    def randn(
        self, mu: float = 0.0, std: float = 1.0, size: int | tuple[int, ...] | None = None
    ) -> float | np.ndarray:
        """Return a normal sample, or an array of ``size`` samples."""

        if size is None:
            return mu + self.gauss_random() * std
        out = np.empty(size, dtype=float)
        flat = out.reshape(-1)
        for i in range(flat.size):
            flat[i] = mu + self.gauss_random() * std
        return out

    # ---- Capability interface ------------------------------------------------

    @property
    @abstractmethod
    def number_of_nodes(self) -> int:
        """Node count the buffers were sized for."""

    @property
    @abstractmethod
    def number_of_edges(self) -> int:
        """Edge count the buffers were sized for."""

    @abstractmethod
    def step(self) -> None:
        """Advance the layout by one iteration."""

    @abstractmethod
    def reset(self) -> None:
        """Restore the freshly constructed state."""

    @abstractmethod
    def get_node_position(self) -> np.ndarray: ...

    @abstractmethod
    def get_node_color(self) -> np.ndarray: ...

    @abstractmethod
    def get_node_size(self) -> np.ndarray: ...

    @abstractmethod
    def get_edge_position(self) -> np.ndarray: ...

    @abstractmethod
    def get_edge_color(self) -> np.ndarray: ...


_LAYOUTS: Dict[str, Type[GraphLayout]] = {}


def register_layout(name: str) -> Callable[[Type[GraphLayout]], Type[GraphLayout]]:
    """Class decorator adding a layout implementation under ``name``."""

    def _register(cls: Type[GraphLayout]) -> Type[GraphLayout]:
        _LAYOUTS[name] = cls
        return cls

    return _register


def create_layout(name: str, graph: "Graph", **kwargs: Any) -> GraphLayout:
    """Instantiate the layout registered as ``name`` for ``graph``."""

    try:
        cls = _LAYOUTS[name]
    except KeyError:
        raise KeyError(
            f"unknown layout {name!r}; available: {sorted(_LAYOUTS)}"
        ) from None
    return cls(graph, **kwargs)


def available_layouts() -> list[str]:
    return sorted(_LAYOUTS)


__all__ = ["GraphLayout", "register_layout", "create_layout", "available_layouts"]
