"""Destination folder and working copy steps.

CONTRACT
- Inputs: DeploymentContext.dest_path
- Outputs (required):
  - dest exists as a folder
  - dest is the root of a git working copy on the deployment branch
- Invariants:
  - Both steps are no-ops when dest is already in that state
  - A dest nested inside some other repository gets its own repository
- Failure:
  - DestUnwritable when the folder can't be created or written
  - RepoInitFailed when git init / add / initial commit fails
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from loguru import logger

from ..config import DeploymentContext
from ..results import ErrorKind, StepResult
from ..tools import Toolchain
from ..trace import Trace
from ..util.paths import ensure_dir, same_path


@dataclass
class BootstrapDest:
    name: str = "check-dest"
    title: str = "Checking the dest folder"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        dest = ctx.dest_path
        if dest.is_dir():
            if not os.access(dest, os.W_OK | os.X_OK):
                return StepResult.fail(
                    ErrorKind.DEST_UNWRITABLE, f"The dest folder {dest} isn't writable."
                )
            return StepResult.success()
        if dest.exists():
            return StepResult.fail(
                ErrorKind.DEST_UNWRITABLE, f"The dest path {dest} exists but isn't a folder."
            )
        try:
            ensure_dir(dest)
        except OSError as e:
            return StepResult.fail(
                ErrorKind.DEST_UNWRITABLE, f"Unable to create the dest folder {dest}. {e}"
            )
        return StepResult.success("created")


@dataclass
class EnsureDestRepo:
    name: str = "dest-git"
    title: str = "Checking the dest folder is a Git repo root"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        dest = ctx.dest_path
        git = tools.git
        res = git.toplevel(dest)
        if res.ok and same_path(res.stdout.strip(), dest):
            return StepResult.success()

        if res.ok:
            logger.debug(f"{dest} is inside the repo at {res.stdout.strip()}; creating a nested repo")
        trace.note(self.name, "Dest folder isn't a Git repo root, setting it up")
        res = git.init(dest, ctx.tools.branch)
        if res.ok:
            res = git.add_all(dest)
        if res.ok:
            # Allow empty: a brand new dest has nothing to stage yet.
            res = git.commit(dest, ctx.tools.initial_commit_message, allow_empty=True)
        if not res.ok:
            return StepResult.fail(
                ErrorKind.REPO_INIT_FAILED,
                f"Unable to set up a Git repo in {dest} ({res.cmd} failed). {res.diagnostics}",
            )
        return StepResult.success("initialized")
