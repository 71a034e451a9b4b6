"""herunt package.

Deploy a local app folder to Heroku through a git working copy:

    import herunt

    outcome = herunt.deploy("./app", "../app-deploy", new_app_region="eu")
    if not outcome.ok:
        print(outcome.describe())
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from .config import DeploymentConfig, DeploymentContext, ToolSettings, build_context
from .pipeline import run_pipeline
from .results import ErrorKind, PipelineOutcome, StepResult
from .steps import Step, default_steps
from .tools import Toolchain
from .trace import Trace, TraceEntry

__version__ = "0.1.0"


def deploy(
    src: str | Path,
    dest: str | Path,
    *,
    new_app_region: str | None = None,
    exclude: Iterable[str] | None = None,
    tools: Toolchain | None = None,
    settings: ToolSettings | None = None,
    steps: Sequence[Step] | None = None,
    trace: Trace | None = None,
    user: str | None = None,
    netrc_path: str | Path | None = None,
) -> PipelineOutcome:
    """Run the full deployment pipeline. Returns the outcome; never raises for step failures.

    Args:
        src: App folder to deploy (must hold a manifest and a Procfile)
        dest: Deployment working copy (created and git-initialized if needed)
        new_app_region: Region for `heroku create` when dest has no app yet
        exclude: Extra rsync exclude patterns, merged with the built-in ones
        user: Name stamped into the deployment marker (default: $USER)
        netrc_path: Credential file to inspect (default: ~/.netrc)

    Raises:
        ValueError: if the configuration itself is invalid

    Safe to call from code that is already running an event loop; the push
    then streams on a private loop in a worker thread.
    """
    cfg = DeploymentConfig(
        src=Path(src),
        dest=Path(dest),
        new_app_region=new_app_region,
        exclude=tuple(exclude or ()),
        tools=settings or (tools.settings if tools else ToolSettings()),
    )
    ctx = build_context(cfg, user=user, netrc_path=Path(netrc_path) if netrc_path else None)
    return run_pipeline(
        ctx,
        list(steps) if steps is not None else default_steps(),
        tools=tools or Toolchain(settings=ctx.tools),
        trace=trace,
    )


__all__ = [
    "DeploymentConfig",
    "DeploymentContext",
    "ErrorKind",
    "PipelineOutcome",
    "StepResult",
    "ToolSettings",
    "Toolchain",
    "Trace",
    "TraceEntry",
    "build_context",
    "default_steps",
    "deploy",
    "run_pipeline",
    "__version__",
]
