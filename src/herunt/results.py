from __future__ import annotations

"""Step and pipeline result types.

CONTRACT
- Inputs: step outcomes
- Outputs:
  - StepResult: Ok, or Fail(kind, message)
  - PipelineOutcome: Success, or Failure(kind, message, step) plus the trace
- Invariants:
  - A failed StepResult always carries an ErrorKind and a non-empty message
  - PipelineOutcome.ok is True only when every step returned Ok
- Failure:
  - StepResult.fail raises ValueError on an empty message
"""

from dataclasses import dataclass, field
from enum import Enum

from .trace import TraceEntry


class ErrorKind(str, Enum):
    TOOL_MISSING = "ToolMissing"
    TOOL_OUTDATED = "ToolOutdated"
    TOOL_VERSION_UNREADABLE = "ToolVersionUnreadable"
    NOT_AUTHENTICATED = "NotAuthenticated"
    INVALID_SOURCE = "InvalidSource"
    DEST_UNWRITABLE = "DestUnwritable"
    REPO_INIT_FAILED = "RepoInitFailed"
    APP_PROVISION_FAILED = "AppProvisionFailed"
    PULL_FAILED = "PullFailed"
    SYNC_FAILED = "SyncFailed"
    MARKER_WRITE_FAILED = "MarkerWriteFailed"
    COMMIT_FAILED = "CommitFailed"
    PUBLISH_FAILED = "PublishFailed"
    STEP_CRASHED = "StepCrashed"


@dataclass(frozen=True)
class StepResult:
    ok: bool
    kind: ErrorKind | None = None
    message: str = ""
    detail: str = ""  # extra text for the trace on success (app name, "skipped", ...)

    @classmethod
    def success(cls, detail: str = "") -> StepResult:
        return cls(ok=True, detail=detail)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> StepResult:
        if not message.strip():
            raise ValueError("A failed step needs a message")
        return cls(ok=False, kind=kind, message=message.strip())


@dataclass(frozen=True)
class PipelineOutcome:
    ok: bool
    kind: ErrorKind | None = None
    message: str = ""
    failed_step: str | None = None
    completed_steps: list[str] = field(default_factory=list)
    trace: list[TraceEntry] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "SUCCESS" if self.ok else "FAILURE"

    def describe(self) -> str:
        if self.ok:
            return "Deployment completed."
        kind = self.kind.value if self.kind else "Error"
        return f"{kind} at step '{self.failed_step}': {self.message}"
