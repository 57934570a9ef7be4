"""Lightweight JSON line logger for headless layout runs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ...config import Config


def log_record(
    category: str,
    label: str,
    *,
    frame: int | None = None,
    value: dict[str, Any] | None = None,
    path: Path | None = None,
    **extra: Any,
) -> bool:
    """Append a record to ``<output_dir>/<category>_log.jsonl``.

    Records for categories disabled in :attr:`Config.log_files` are dropped.

    Returns
    -------
    bool
        ``True`` if the record was written.
    """

    if not Config.is_log_enabled(category):
        return False
    if path is None:
        path = Path(Config.output_path(f"{category}_log.jsonl"))
    path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, Any] = {"label": label}
    if frame is not None:
        data["frame"] = frame
    if value is not None:
        data.update(value)
    if extra:
        data.update(extra)
    with path.open("a") as fh:
        fh.write(json.dumps(data) + "\n")
    return True
