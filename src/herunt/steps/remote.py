"""Remote app and pull steps.

CONTRACT
- Inputs: DeploymentContext (dest_path, new_app_region, remote, branch)
- Outputs:
  - A Heroku app linked to dest (existing or newly created)
  - dest holds the latest deployed commit when the branch was pushed before
- Invariants:
  - An existing app is never re-created
  - Pull is skipped until the deployment branch has been pushed once
  - Merge conflicts are reported, never auto-resolved
- Failure:
  - AppProvisionFailed when `heroku create` fails
  - PullFailed on branch listing or pull errors
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from ..config import DeploymentContext
from ..results import ErrorKind, StepResult
from ..tools import Toolchain
from ..tools.parsing import (
    OutputParseError,
    parse_created_app_name,
    parse_info_app_name,
    parse_remote_branches,
)
from ..trace import Trace

UNKNOWN_APP = "[unknown app]"


@dataclass
class EnsureRemoteApp:
    name: str = "dest-app"
    title: str = "Checking for a Heroku app in dest"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        heroku = tools.heroku
        info = heroku.info(ctx.dest_path)
        if info.ok:
            app = parse_info_app_name(info.stdout) or UNKNOWN_APP
            return StepResult.success(f"Found Heroku app in dest: {app}")

        region = ctx.new_app_region
        trace.note(
            self.name,
            "No Heroku app found in dest, creating one"
            + (f" in region {region}" if region else ""),
        )
        created = heroku.create(ctx.dest_path, region)
        if not created.ok:
            return StepResult.fail(
                ErrorKind.APP_PROVISION_FAILED,
                f"Unable to create the Heroku app. {created.diagnostics}",
            )
        try:
            app = parse_created_app_name(created.stdout + "\n" + created.stderr)
        except OutputParseError as e:
            # The app exists now; only the name is unknown.
            logger.warning(f"heroku create succeeded but its output was not understood: {e}")
            app = UNKNOWN_APP
        return StepResult.success(f"Created {app}")


@dataclass
class PullLatest:
    name: str = "pull"
    title: str = "Pulling latest app changes from Heroku, if any"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        git = tools.git
        listing = git.remote_branches(ctx.dest_path)
        if not listing.ok:
            return StepResult.fail(
                ErrorKind.PULL_FAILED, f"Unable to determine repo status. {listing.diagnostics}"
            )
        branches = parse_remote_branches(listing.stdout, ctx.tools.remote)
        if ctx.tools.branch not in branches:
            return StepResult.success("nothing pushed yet, skipped")

        res = git.pull(ctx.dest_path, ctx.tools.remote, ctx.tools.branch)
        if not res.ok:
            return StepResult.fail(
                ErrorKind.PULL_FAILED,
                f"Can't pull from Heroku. Resolve this in {ctx.dest_path} and deploy again. "
                f"{res.diagnostics}",
            )
        return StepResult.success()
