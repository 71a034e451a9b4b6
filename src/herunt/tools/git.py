"""git wrapper.

CONTRACT
- Inputs: CommandRunner, git executable name, working copy path
- Outputs: CmdResult per invocation
- Invariants:
  - Every call runs with cwd set to the working copy
  - No call prompts; git inherits the ambient credential helpers
- Failure:
  - Never raises on non-zero exit; callers inspect CmdResult
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..util.shell import CmdResult, CommandRunner, OutputSink

NOTHING_TO_COMMIT_MARKERS = ("nothing to commit", "nothing added to commit", "no changes added to commit")


@dataclass(frozen=True)
class Git:
    runner: CommandRunner
    cmd: str = "git"

    def _git(self, repo: Path, *args: str) -> CmdResult:
        return self.runner.run([self.cmd, *args], cwd=repo)

    def toplevel(self, path: Path) -> CmdResult:
        return self._git(path, "rev-parse", "--show-toplevel")

    def init(self, repo: Path, branch: str) -> CmdResult:
        res = self._git(repo, "init")
        if not res.ok:
            return res
        # Point the unborn HEAD at the deployment branch regardless of init.defaultBranch.
        return self._git(repo, "symbolic-ref", "HEAD", f"refs/heads/{branch}")

    def add_all(self, repo: Path) -> CmdResult:
        return self._git(repo, "add", "-A")

    def commit(self, repo: Path, message: str, *, allow_empty: bool = False) -> CmdResult:
        args = ["commit", "-m", message]
        if allow_empty:
            args.append("--allow-empty")
        return self._git(repo, *args)

    def remote_branches(self, repo: Path) -> CmdResult:
        return self._git(repo, "branch", "-r")

    def pull(self, repo: Path, remote: str, branch: str) -> CmdResult:
        return self._git(repo, "pull", "--no-rebase", remote, branch)

    def push(self, repo: Path, remote: str, branch: str, on_output: OutputSink) -> CmdResult:
        return self.runner.stream(
            [self.cmd, "push", remote, f"HEAD:{branch}"], on_output, cwd=repo
        )


def is_nothing_to_commit(res: CmdResult) -> bool:
    text = (res.stdout + "\n" + res.stderr).lower()
    return any(marker in text for marker in NOTHING_TO_COMMIT_MARKERS)
