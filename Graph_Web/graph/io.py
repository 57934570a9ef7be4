"""File IO helpers for :mod:`Graph_Web.graph`."""

from __future__ import annotations

import json
from typing import Any

import networkx as nx

from .model import Graph
from .node import GraphEdge, GraphNode

_RESERVED_NODE_KEYS = {"id", "type"}
_RESERVED_EDGE_KEYS = {"id", "source", "target", "type", "strength"}


def load_graph(path: str) -> Graph:
    """Load a graph from the JSON file at ``path``."""
    with open(path) as f:
        data = json.load(f)
    return graph_from_dict(data)


def graph_from_dict(data: dict[str, Any]) -> Graph:
    """Build a :class:`Graph` from ``{"nodes": ..., "edges": [...]}``.

    ``nodes`` may be a list of objects carrying an ``id`` or a mapping of id
    to attributes. The ``type`` key becomes the category tag. Edges need
    ``source`` and ``target``; a missing ``id`` defaults to
    ``"<source>_<target>"``.
    """
    _validate_graph(data)
    graph = Graph()

    nodes = data["nodes"]
    if isinstance(nodes, dict):
        nodes = [{"id": nid, **(attrs or {})} for nid, attrs in nodes.items()]
    for record in nodes:
        extra = {k: v for k, v in record.items() if k not in _RESERVED_NODE_KEYS}
        graph.add_node(GraphNode(str(record["id"]), record.get("type", ""), **extra))

    for record in data["edges"]:
        source = str(record["source"])
        target = str(record["target"])
        extra = {k: v for k, v in record.items() if k not in _RESERVED_EDGE_KEYS}
        graph.add_edge(
            GraphEdge(
                str(record.get("id", f"{source}_{target}")),
                source,
                target,
                record.get("type", ""),
                float(record.get("strength", 1.0)),
                **extra,
            )
        )
    return graph


def to_networkx(graph: Graph) -> nx.MultiGraph:
    """Return an undirected ``networkx`` copy of ``graph`` for analysis.

    Node and edge attributes are copied; dense indices are stored as
    ``index``.
    """
    g = nx.MultiGraph()
    index = graph.node_index_map
    for node_id, node in graph.nodes.items():
        g.add_node(node_id, index=index[node_id], **node.attributes)
    for edge_id, edge in graph.edges.items():
        g.add_edge(edge.source, edge.target, key=edge_id, **edge.attributes)
    return g


def _validate_graph(data: dict[str, Any]) -> None:
    if "nodes" not in data or "edges" not in data:
        raise ValueError("Graph file must contain 'nodes' and 'edges'")
    if not isinstance(data["nodes"], (dict, list)):
        raise ValueError("'nodes' must be a dict or list")
    if not isinstance(data["edges"], list):
        raise ValueError("'edges' must be a list")
    if isinstance(data["nodes"], list):
        for node in data["nodes"]:
            if not isinstance(node, dict) or "id" not in node:
                raise ValueError("node entries must be objects with an 'id'")
    for edge in data["edges"]:
        if not isinstance(edge, dict):
            raise ValueError("edge entries must be objects")
        if "source" not in edge or "target" not in edge:
            raise ValueError("edge missing 'source' or 'target'")


__all__ = ["load_graph", "graph_from_dict", "to_networkx"]
