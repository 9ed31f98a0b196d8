from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


def _now_iso() -> str:
    # ISO-ish without importing datetime (fast + good enough for logs)
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


@dataclass
class TelemetryLogger:
    """
    Append-only JSONL event log for floor runs.

    Does nothing until init() gives it a path. Fields passed to bind() are
    stamped on every later row (the run seed). When keep_in_memory
    is set the rows are also kept on the instance, which the tests use.
    """
    path: Optional[Path] = None
    enabled: bool = True
    keep_in_memory: bool = False
    rows: List[Dict[str, Any]] = field(default_factory=list)
    bound: Dict[str, Any] = field(default_factory=dict)
    _started_at: float = field(default_factory=time.time)

    def init(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Touch file (don't overwrite)
        self.path.touch(exist_ok=True)
        self.log("telemetry_init", file=str(self.path))

    def bind(self, **fields: Any) -> None:
        self.bound.update(fields)

    def log(self, event: str, **fields: Any) -> None:
        if not self.enabled:
            return
        if self.path is None and not self.keep_in_memory:
            return

        row: Dict[str, Any] = {
            "t": round(time.time() - self._started_at, 3),
            "ts": _now_iso(),
            "event": event,
            **self.bound,
            **fields,
        }

        if self.keep_in_memory:
            self.rows.append(row)

        if self.path is None:
            return

        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(row, ensure_ascii=False, default=str) + "\n")
        except OSError:
            # Telemetry must never break a floor.
            return

    def events(self, name: str) -> List[Dict[str, Any]]:
        return [row for row in self.rows if row["event"] == name]


def read_events(path: Path) -> List[Dict[str, Any]]:
    """Load a JSONL telemetry file back into rows (blank lines skipped)."""
    with path.open("r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


# global singleton (easy import everywhere)
telemetry = TelemetryLogger()
