import json
from pathlib import Path

from Graph_Web.config import Config
from Graph_Web.engine.logging.logger import log_record


def test_record_appended_to_category_file():
    assert log_record("layout", "frame", frame=3, value={"dt": 10.0}, run="a")
    assert log_record("layout", "frame", frame=4)
    path = Path(Config.output_dir) / "layout_log.jsonl"
    lines = [json.loads(line) for line in path.read_text().splitlines()]
    assert lines == [
        {"label": "frame", "frame": 3, "dt": 10.0, "run": "a"},
        {"label": "frame", "frame": 4},
    ]


def test_disabled_category_dropped(tmp_path):
    Config.log_files["layout"] = False
    target = tmp_path / "explicit.jsonl"
    assert not log_record("layout", "frame", path=target)
    assert not target.exists()


def test_explicit_path(tmp_path):
    target = tmp_path / "nested" / "sub.jsonl"
    assert log_record("subgraph", "extracted", path=target)
    assert json.loads(target.read_text()) == {"label": "extracted"}
