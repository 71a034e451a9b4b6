from __future__ import annotations

"""Deployment event log.

CONTRACT
- Inputs: step name, action ("start" | "ok" | "fail"), extra fields
- Outputs:
  - Appends one JSON line per step transition to the configured log path
- Invariants:
  - Every line carries `ts_ms`, `step` and `action`
  - Every line carries `deploy_id` when the log was opened with one, so
    several deployments can share one file
- Failure:
  - Raises OSError if log path is not writable
"""

import json
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any


def new_deploy_id() -> str:
    return time.strftime("%Y%m%d-%H%M%S") + "-" + uuid.uuid4().hex[:6]


@dataclass
class EventLog:
    path: Path
    deploy_id: str | None = None

    def emit(self, **event: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        event.setdefault("ts_ms", int(time.time() * 1000))
        if self.deploy_id and "deploy_id" not in event:
            event["deploy_id"] = self.deploy_id
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")

    def step(self, step: str, action: str, **fields: Any) -> None:
        # Empty values (no detail, no message) are left out of the line.
        self.emit(step=step, action=action, **{k: v for k, v in fields.items() if v})
