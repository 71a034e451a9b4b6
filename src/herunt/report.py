from __future__ import annotations

"""Deployment report schema.

CONTRACT
- Inputs: DeploymentContext, PipelineOutcome
- Outputs:
  - DeployReport, written as indented JSON by write_report()
- Invariants:
  - schema_version int field on every model
  - Trace records keep the order they were emitted in
- Failure:
  - Raises ValidationError on schema mismatch, OSError on write errors
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from .config import DeploymentContext
from .results import PipelineOutcome


class TraceRecord(BaseModel):
    schema_version: int = 1
    event: Literal["start", "ok", "fail", "note", "output"]
    step: str | None = None
    text: str = ""
    ts_ms: int


class DeployReport(BaseModel):
    schema_version: int = 1
    status: Literal["SUCCESS", "FAILURE"]
    source_path: str
    dest_path: str
    new_app_region: str | None = None
    exclude_patterns: list[str] = Field(default_factory=list)
    error_kind: str | None = None
    message: str = ""
    failed_step: str | None = None
    completed_steps: list[str] = Field(default_factory=list)
    trace: list[TraceRecord] = Field(default_factory=list)


def build_report(ctx: DeploymentContext, outcome: PipelineOutcome) -> DeployReport:
    return DeployReport(
        status=outcome.status,
        source_path=str(ctx.source_path),
        dest_path=str(ctx.dest_path),
        new_app_region=ctx.new_app_region,
        exclude_patterns=ctx.sorted_excludes(),
        error_kind=outcome.kind.value if outcome.kind else None,
        message=outcome.message,
        failed_step=outcome.failed_step,
        completed_steps=list(outcome.completed_steps),
        trace=[
            TraceRecord(event=e.event, step=e.step, text=e.text, ts_ms=e.ts_ms)
            for e in outcome.trace
        ],
    )


def write_report(path: Path, ctx: DeploymentContext, outcome: PipelineOutcome) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    report = build_report(ctx, outcome)
    path.write_text(report.model_dump_json(indent=2) + "\n", encoding="utf-8")
    return path
