"""Publish step: push the deployment branch to Heroku.

git's progress output is forwarded to the trace while the push runs. On
failure the message carries git's full diagnostics, unabridged.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config import DeploymentContext
from ..results import ErrorKind, StepResult
from ..tools import Toolchain
from ..trace import Trace


@dataclass
class Publish:
    name: str = "publish"
    title: str = "Deploying to Heroku"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        res = tools.git.push(
            ctx.dest_path, ctx.tools.remote, ctx.tools.branch, trace.output_for(self.name)
        )
        if not res.ok:
            diagnostics = res.diagnostics
            return StepResult.fail(
                ErrorKind.PUBLISH_FAILED,
                f"Error pushing to Heroku git repo (exit {res.returncode})."
                + (f"\n{diagnostics}" if diagnostics else ""),
            )
        return StepResult.success("Deployment completed")
