import random
import sys
from copy import deepcopy
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from Graph_Web.config import Config
from Graph_Web.graph.model import Graph
from Graph_Web.graph.node import GraphEdge, GraphNode


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path):
    """Restore mutable ``Config`` state after each test."""

    saved = {
        key: deepcopy(value)
        for key, value in vars(Config).items()
        if not key.startswith("_") and not callable(value)
        and not isinstance(value, (staticmethod, classmethod))
    }
    Config.output_dir = str(tmp_path / "output")
    random.seed(1234)
    yield
    for key, value in saved.items():
        setattr(Config, key, value)


def _build_graph(nodes, edges):
    """Return a graph from ``[(id, type)]`` and ``[(id, src, dst)]`` tuples."""

    g = Graph()
    for nid, category in nodes:
        g.add_node(GraphNode(nid, category))
    for eid, src, dst in edges:
        g.add_edge(GraphEdge(eid, src, dst))
    return g


@pytest.fixture
def make_graph():
    """Factory building graphs from id/category and id/endpoint tuples."""

    return _build_graph


@pytest.fixture
def triangle_graph():
    """Driver A linked to riders B and C."""

    return _build_graph(
        [("A", "driver"), ("B", "rider"), ("C", "rider")],
        [("A_B", "A", "B"), ("A_C", "A", "C")],
    )


@pytest.fixture
def chain_graph():
    """Path 0-1-2-3-4-5 with a branch 2-6."""

    nodes = [(str(i), "driver" if i == 0 else "rider") for i in range(7)]
    edges = [(f"{i}_{i + 1}", str(i), str(i + 1)) for i in range(5)]
    edges.append(("2_6", "2", "6"))
    return _build_graph(nodes, edges)
