"""Preflight steps: Heroku CLI present, recent enough, and logged in.

None of these touch the source or destination folders. The checks only need
the tool settings (and the credential file), so `herunt doctor` calls the
module-level functions directly without a full deployment context.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import DeploymentContext, ToolSettings
from ..results import ErrorKind, StepResult
from ..tools import Toolchain
from ..tools.heroku import netrc_has_session
from ..tools.parsing import OutputParseError, parse_cli_version, parse_version
from ..trace import Trace


def check_cli_present(settings: ToolSettings, tools: Toolchain) -> StepResult:
    location = tools.heroku.locate()
    if location is None:
        return StepResult.fail(
            ErrorKind.TOOL_MISSING,
            f"Unable to invoke the Heroku CLI tool ('{settings.heroku_cmd}'). "
            "Is it installed and on your PATH?",
        )
    return StepResult.success(location)


def check_cli_version(settings: ToolSettings, tools: Toolchain) -> StepResult:
    res = tools.heroku.version()
    if not res.ok or not res.stdout.strip():
        return StepResult.fail(
            ErrorKind.TOOL_VERSION_UNREADABLE,
            f"Unable to check the Heroku CLI tool version. {res.diagnostics}",
        )
    try:
        installed = parse_cli_version(res.stdout)
    except OutputParseError as e:
        return StepResult.fail(
            ErrorKind.TOOL_VERSION_UNREADABLE,
            f"Unable to read the Heroku CLI tool version: {e}",
        )
    minimum = parse_version(settings.min_cli_version)
    if installed < minimum:
        return StepResult.fail(
            ErrorKind.TOOL_OUTDATED,
            f"The installed Heroku CLI tool ({installed}) is out of date. "
            f"Version {minimum} and above is required.",
        )
    return StepResult.success(str(installed))


def check_cli_auth(settings: ToolSettings, netrc_path: Path) -> StepResult:
    try:
        text = netrc_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        return StepResult.fail(
            ErrorKind.NOT_AUTHENTICATED,
            f"Can't read {netrc_path}. Unable to determine auth status. {e}",
        )
    if not netrc_has_session(text, settings.auth_hosts):
        return StepResult.fail(
            ErrorKind.NOT_AUTHENTICATED,
            "You don't appear to be authenticated. Try running 'heroku login'.",
        )
    return StepResult.success()


@dataclass
class CheckCliPresent:
    name: str = "cli-present"
    title: str = "Checking for the Heroku CLI tool"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        return check_cli_present(ctx.tools, tools)


@dataclass
class CheckCliVersion:
    name: str = "cli-version"
    title: str = "Checking Heroku CLI tool version"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        return check_cli_version(ctx.tools, tools)


@dataclass
class CheckCliAuth:
    name: str = "cli-auth"
    title: str = "Checking Heroku CLI tool auth status"

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
        return check_cli_auth(ctx.tools, ctx.netrc_path)
