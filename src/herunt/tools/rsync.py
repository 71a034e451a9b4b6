"""rsync wrapper.

CONTRACT
- Inputs: CommandRunner, rsync executable name, src/dest dirs, exclusions
- Outputs: CmdResult
- Invariants:
  - Source is passed with a trailing separator ("contents of src")
  - Mirror semantics: --delete removes dest files missing from src;
    excluded paths are neither copied nor deleted
- Failure:
  - Never raises on non-zero exit; callers inspect CmdResult
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..util.shell import CmdResult, CommandRunner


def mirror_args(src: Path, dest: Path, excludes: list[str]) -> list[str]:
    args = ["--recursive", "--links", "--times", "--delete"]
    args += [f"--exclude={pattern}" for pattern in excludes]
    args += [str(src).rstrip(os.sep) + os.sep, str(dest)]
    return args


@dataclass(frozen=True)
class Rsync:
    runner: CommandRunner
    cmd: str = "rsync"

    def locate(self) -> str | None:
        return self.runner.which(self.cmd)

    def mirror(self, src: Path, dest: Path, excludes: list[str]) -> CmdResult:
        return self.runner.run([self.cmd, *mirror_args(src, dest, excludes)])
