from __future__ import annotations

"""Pipeline runner.

CONTRACT
- Inputs: DeploymentContext, ordered list of Step, Toolchain, Trace
- Outputs (required):
  - PipelineOutcome (Success, or Failure with kind/message/step)
  - Trace entries: start + (ok | fail) per executed step
- Invariants:
  - Steps run strictly in order, one at a time
  - No step runs after the first failure
  - No retries and no runner-level timeouts
- Failure:
  - Returns Failure for the first failing step
  - An exception escaping a step becomes Failure(StepCrashed) for that step
"""

import traceback
from collections.abc import Sequence

from loguru import logger

from .config import DeploymentContext
from .results import ErrorKind, PipelineOutcome, StepResult
from .steps import Step
from .tools import Toolchain
from .trace import Trace
from .util.events import EventLog


def _run_step(step: Step, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult:
    try:
        return step.run(ctx, tools, trace)
    except Exception as e:
        logger.debug(traceback.format_exc())
        return StepResult.fail(ErrorKind.STEP_CRASHED, f"{type(e).__name__}: {e}")


def run_pipeline(
    ctx: DeploymentContext,
    steps: Sequence[Step],
    *,
    tools: Toolchain | None = None,
    trace: Trace | None = None,
    events: EventLog | None = None,
) -> PipelineOutcome:
    tools = tools or Toolchain(settings=ctx.tools)
    trace = trace or Trace()
    completed: list[str] = []

    trace.note(None, f"Using src folder {ctx.source_path}")
    trace.note(None, f"Deploying from app folder {ctx.dest_path}")

    for step in steps:
        trace.start(step.name, step.title)
        if events:
            events.step(step.name, "start")
        result = _run_step(step, ctx, tools, trace)
        if not result.ok:
            trace.fail(step.name, result.message)
            if events:
                events.step(step.name, "fail", kind=result.kind.value, message=result.message)
            return PipelineOutcome(
                ok=False,
                kind=result.kind,
                message=result.message,
                failed_step=step.name,
                completed_steps=completed,
                trace=list(trace.entries),
            )
        trace.ok(step.name, result.detail)
        if events:
            events.step(step.name, "ok", detail=result.detail)
        completed.append(step.name)

    return PipelineOutcome(ok=True, completed_steps=completed, trace=list(trace.entries))
