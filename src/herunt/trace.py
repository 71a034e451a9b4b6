from __future__ import annotations

"""Operator-visible deployment trace.

CONTRACT
- Inputs: step markers and subprocess output chunks
- Outputs:
  - Ordered list of TraceEntry
  - Each entry forwarded to every registered sink as soon as it is recorded
- Invariants:
  - Entries are never reordered or dropped
  - The trace carries no control semantics; the runner never reads it back
- Failure:
  - Sink exceptions propagate to the caller
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Literal

from loguru import logger

TraceEvent = Literal["start", "ok", "fail", "note", "output"]


@dataclass(frozen=True)
class TraceEntry:
    event: TraceEvent
    step: str | None
    text: str
    ts_ms: int = field(default_factory=lambda: int(time.time() * 1000))


TraceSink = Callable[[TraceEntry], None]


@dataclass
class Trace:
    sinks: list[TraceSink] = field(default_factory=list)
    entries: list[TraceEntry] = field(default_factory=list)

    def add_sink(self, sink: TraceSink) -> None:
        self.sinks.append(sink)

    def _record(self, event: TraceEvent, step: str | None, text: str) -> None:
        entry = TraceEntry(event=event, step=step, text=text)
        self.entries.append(entry)
        for sink in self.sinks:
            sink(entry)

    def start(self, step: str, title: str) -> None:
        logger.info(f"[{step}] {title}")
        self._record("start", step, title)

    def ok(self, step: str, detail: str = "") -> None:
        logger.info(f"[{step}] OK {detail}".rstrip())
        self._record("ok", step, detail)

    def fail(self, step: str, message: str) -> None:
        logger.warning(f"[{step}] FAIL {message}")
        self._record("fail", step, message)

    def note(self, step: str | None, text: str) -> None:
        logger.info(f"[{step or '-'}] {text}")
        self._record("note", step, text)

    def output(self, step: str, chunk: str) -> None:
        self._record("output", step, chunk)

    def output_for(self, step: str) -> Callable[[str], None]:
        return lambda chunk: self.output(step, chunk)

    def events(self) -> list[tuple[TraceEvent, str | None]]:
        return [(e.event, e.step) for e in self.entries]
