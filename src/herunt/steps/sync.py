"""Mirror the src folder into dest with rsync."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import DeploymentContext
from ..results import ErrorKind, StepResult
from ..tools import Toolchain
from ..trace import Trace


@dataclass
class SyncFiles:
    name: str = "sync"
    title: str = "Syncing src files to dest"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        res = tools.rsync.mirror(ctx.source_path, ctx.dest_path, ctx.sorted_excludes())
        if not res.ok:
            return StepResult.fail(
                ErrorKind.SYNC_FAILED, f"Unable to sync src files to dest. {res.diagnostics}"
            )
        return StepResult.success()
