"""Marker stamp and commit steps.

CONTRACT
- Inputs: DeploymentContext (dest_path, user, marker file name)
- Outputs (required):
  - <dest>/<marker_file> rewritten with the acting user and a timestamp
  - a new commit on the deployment branch
- Invariants:
  - The marker differs on every run, so each deployment has something to commit
  - "nothing to commit" from git is not an error
- Failure:
  - MarkerWriteFailed on filesystem errors
  - CommitFailed on any other git error
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from ..config import DeploymentContext
from ..results import ErrorKind, StepResult
from ..tools import Toolchain
from ..tools.git import is_nothing_to_commit
from ..trace import Trace


def _now() -> datetime:
    return datetime.now().astimezone()


def marker_text(user: str, when: datetime) -> str:
    return f"Deployed by {user} at {when.isoformat(timespec='microseconds')} using Herunt.\n"


@dataclass
class StampMarker:
    name: str = "stamp-marker"
    title: str = "Touching deployment-info file to ensure a change in Git"
    clock: Callable[[], datetime] = field(default=_now, repr=False)

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        marker = ctx.dest_path / ctx.tools.marker_file
        try:
            marker.write_text(marker_text(ctx.user, self.clock()), encoding="utf-8")
        except OSError as e:
            return StepResult.fail(
                ErrorKind.MARKER_WRITE_FAILED, f"Unable to write the deployment marker {marker}. {e}"
            )
        return StepResult.success()


@dataclass
class AddAndCommit:
    name: str = "commit"
    title: str = "Adding and committing new files to the repo"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        git = tools.git
        added = git.add_all(ctx.dest_path)
        if not added.ok:
            return StepResult.fail(
                ErrorKind.COMMIT_FAILED, f"Unable to add new files in dest. {added.diagnostics}"
            )
        res = git.commit(ctx.dest_path, ctx.tools.deploy_commit_message)
        if res.ok:
            return StepResult.success()
        if is_nothing_to_commit(res):
            return StepResult.success("nothing to commit")
        return StepResult.fail(
            ErrorKind.COMMIT_FAILED, f"Unable to commit new files in dest. {res.diagnostics}"
        )
