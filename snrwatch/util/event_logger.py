"""Structured per-packet event logging (JSON lines)."""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any

from snrwatch.util.time import utc_now_str


class EventLogger:
    def __init__(self, log_path: Path):
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.run_id = f"run-{int(time.time() * 1000)}-pid{os.getpid()}"
        self.events_written = 0

    @classmethod
    def from_path(cls, path: str) -> "EventLogger":
        expanded = Path(path).expanduser()
        if not expanded.is_absolute():
            expanded = (Path.cwd() / expanded).absolute()
        return cls(expanded)

    def log(self, event: str, **fields: Any) -> None:
        record = {
            "ts": utc_now_str(),
            "run_id": self.run_id,
            "event": event,
            **fields,
        }
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, default=str) + "\n")
        self.events_written += 1
