"""Source folder validation.

CONTRACT
- Inputs: DeploymentContext.source_path
- Outputs: Ok, or InvalidSource listing every unmet precondition
- Invariants:
  - Read-only
- Failure:
  - InvalidSource when src is missing, not a folder, has no recognized
    manifest, or has no process file
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import DeploymentContext, ToolSettings
from ..results import ErrorKind, StepResult
from ..tools import Toolchain
from ..trace import Trace


def source_problems(src: Path, settings: ToolSettings) -> list[str]:
    if not src.exists():
        return [f"The src folder {src} doesn't exist."]
    if not src.is_dir():
        return [f"The src path {src} isn't a folder."]
    problems = []
    if not any((src / name).is_file() for name in settings.manifest_files):
        problems.append(
            "The src folder doesn't contain an app manifest "
            f"({', '.join(settings.manifest_files)}). Is it an app?"
        )
    if not (src / settings.process_file).is_file():
        problems.append(
            f"The src folder doesn't contain a {settings.process_file}. "
            "Is it ready for Heroku deployment?"
        )
    return problems


@dataclass
class CheckSource:
    name: str = "check-src"
    title: str = "Checking the src folder"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        problems = source_problems(ctx.source_path, ctx.tools)
        if problems:
            return StepResult.fail(ErrorKind.INVALID_SOURCE, " ".join(problems))
        return StepResult.success(str(ctx.source_path))
