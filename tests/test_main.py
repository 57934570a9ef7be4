import json
import sys
from pathlib import Path

import pytest

from Graph_Web.config import Config
from Graph_Web.main import MainService


@pytest.fixture
def graph_file(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(
        json.dumps(
            {
                "nodes": [
                    {"id": "A", "type": "driver"},
                    {"id": "B", "type": "rider"},
                    {"id": "C", "type": "rider"},
                    {"id": "D", "type": "rider"},
                ],
                "edges": [
                    {"source": "A", "target": "B"},
                    {"source": "A", "target": "C"},
                    {"source": "C", "target": "D"},
                ],
            }
        )
    )
    return path


@pytest.fixture(autouse=True)
def _keep_excepthook(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)


def test_cli_writes_one_position_per_node(graph_file, tmp_path):
    output = tmp_path / "positions.json"
    out_dir = tmp_path / "logs"
    positions = MainService(
        [
            "--graph", str(graph_file),
            "--dof", "2",
            "--steps", "200",
            "--output", str(output),
            "--output-dir", str(out_dir),
        ]
    ).run()
    assert set(positions) == {"A", "B", "C", "D"}
    assert all(len(p) == 2 for p in positions.values())
    assert json.loads(output.read_text()) == positions
    frames = (out_dir / "layout_log.jsonl").read_text().splitlines()
    assert [json.loads(f)["frame"] for f in frames] == [100, 200]


def test_cli_sub_graph(graph_file):
    positions = MainService(
        ["--graph", str(graph_file), "--start-node", "C", "--num-hops", "1", "--steps", "5"]
    ).run()
    assert set(positions) == {"A", "C", "D"}
    assert all(len(p) == 3 for p in positions.values())
    record = json.loads((Path(Config.output_dir) / "subgraph_log.jsonl").read_text())
    assert record["seed"] == "C"
    assert record["nodes"] == 3


def test_cli_applies_config_file(graph_file, tmp_path):
    conf = tmp_path / "conf.json"
    conf.write_text(json.dumps({"default_dof": 2, "log_files": {"layout": False}}))
    positions = MainService(
        ["--graph", str(graph_file), "--config", str(conf), "--steps", "100"]
    ).run()
    assert all(len(p) == 2 for p in positions.values())
    assert not (Path(Config.output_dir) / "layout_log.jsonl").exists()
