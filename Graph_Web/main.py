# main.py

"""Headless entry point: load a graph, run the layout, write positions."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any

import numpy as np

from Graph_Web.config import Config
from Graph_Web.engine.logging.logger import log_record
from Graph_Web.graph.io import load_graph
from Graph_Web.graph.model import Graph
from Graph_Web.layout.base import available_layouts, create_layout

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False) -> None:
    """Configure application logging and capture uncaught exceptions."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    def _log_excepthook(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).exception(
            "Uncaught exception", exc_info=(exc_type, exc, tb)
        )

    sys.excepthook = _log_excepthook


def frame_stats(layout) -> dict[str, Any]:
    """Summarise the layout state for a JSON line frame record."""

    position = layout.get_node_position()
    velocity = getattr(layout, "velocity", np.zeros_like(position))
    return {
        "step": layout.current_step,
        "dt": layout.dt,
        "kinetic": float(0.5 * np.sum(velocity * velocity)),
        "extent": float(np.abs(position).max()) if position.size else 0.0,
        "centroid": position.mean(axis=0).tolist() if position.size else [],
    }


@dataclass
class MainService:
    """Handle CLI parsing and a headless layout run."""

    argv: list[str] | None = None

    def run(self) -> dict[str, list[float]]:
        args = self._parse_args()
        _configure_logging(args.verbose)
        if args.config:
            Config.load_from_file(args.config)
        if args.output_dir:
            Config.output_dir = os.path.abspath(args.output_dir)

        graph = load_graph(args.graph)
        logger.info(
            "loaded %s: %d nodes, %d edges",
            args.graph,
            graph.number_of_nodes,
            graph.number_of_edges,
        )
        if args.sub_graph or args.start_node is not None:
            graph = self._extract(graph, args.start_node, args.num_hops)

        positions = self._run_layout(graph, args.layout, args.dof, args.steps)
        if args.output:
            with open(args.output, "w") as f:
                json.dump(positions, f, indent=2)
        return positions

    # ------------------------------------------------------------------
    def _parse_args(self) -> argparse.Namespace:
        parser = argparse.ArgumentParser(description="Run a graph layout headless")
        parser.add_argument("--graph", required=True, help="Path to graph JSON file")
        parser.add_argument("--config", default=None, help="Path to JSON configuration file")
        parser.add_argument(
            "--layout", default="force_directed", choices=available_layouts()
        )
        parser.add_argument("--dof", type=int, choices=[2, 3], default=None)
        parser.add_argument("--steps", type=int, default=500)
        parser.add_argument(
            "--sub-graph",
            action="store_true",
            help="Lay out only the neighbourhood of a seed node",
        )
        parser.add_argument("--start-node", default=None, help="Subgraph seed node id")
        parser.add_argument("--num-hops", type=int, default=None)
        parser.add_argument("--output", default=None, help="Write final positions here")
        parser.add_argument("--output-dir", default=None, help="Directory for frame logs")
        parser.add_argument("--verbose", action="store_true")
        return parser.parse_args(self.argv)

    # ------------------------------------------------------------------
    @staticmethod
    def _extract(graph: Graph, start_node: str | None, num_hops: int | None) -> Graph:
        sub = graph.generate_sub_graph(start_node_id=start_node, num_hops=num_hops)
        log_record(
            "subgraph",
            "extracted",
            value={
                "seed": start_node,
                "num_hops": num_hops if num_hops is not None else Config.default_num_hops,
                "nodes": sub.number_of_nodes,
                "edges": sub.number_of_edges,
            },
        )
        return sub

    # ------------------------------------------------------------------
    @staticmethod
    def _run_layout(
        graph: Graph, name: str, dof: int | None, steps: int
    ) -> dict[str, list[float]]:
        layout = create_layout(name, graph, dof=dof)
        graph.set_layout(layout)
        graph.start_layout()
        for frame in range(1, steps + 1):
            graph.layout_step()
            if Config.log_interval and frame % Config.log_interval == 0:
                log_record("layout", "frame", frame=frame, value=frame_stats(layout))
        graph.pause_layout()

        position = graph.get_node_position()
        return {
            node.id: position[index].tolist() for index, node in graph.node_map.items()
        }


def main() -> None:
    """Entry point for external callers."""
    MainService().run()


if __name__ == "__main__":
    main()
