"""Heroku CLI wrapper.

CONTRACT
- Inputs: CommandRunner, heroku executable name
- Outputs: CmdResult per invocation, plus parsed values via tools.parsing
- Invariants:
  - Authentication is read from the CLI's credential file, never from the CLI
  - `info` and `create` run inside the deployment working copy so the CLI
    resolves (or writes) the app's git remote there
- Failure:
  - Never raises on non-zero exit; callers inspect CmdResult
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..util.shell import CmdResult, CommandRunner


@dataclass(frozen=True)
class HerokuCli:
    runner: CommandRunner
    cmd: str = "heroku"

    def locate(self) -> str | None:
        return self.runner.which(self.cmd)

    def version(self) -> CmdResult:
        return self.runner.run([self.cmd, "--version"])

    def info(self, repo: Path) -> CmdResult:
        return self.runner.run([self.cmd, "info"], cwd=repo)

    def create(self, repo: Path, region: str | None = None) -> CmdResult:
        argv = [self.cmd, "create"]
        if region:
            argv += ["--region", region]
        return self.runner.run(argv, cwd=repo)


def netrc_has_session(text: str, hosts: tuple[str, ...]) -> bool:
    return any(host in text for host in hosts)
