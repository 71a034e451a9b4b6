from __future__ import annotations

"""Step protocol definition.

CONTRACT
- Inputs: DeploymentContext, Toolchain, Trace
- Outputs:
  - run(): StepResult (Ok, or Fail(kind, message))
- Invariants:
  - Steps are idempotent: running against a destination already in the
    desired state only re-inspects it
  - Steps never read earlier steps' results; they re-inspect the environment
  - Expected failures are returned, never raised
- Failure:
  - Unexpected exceptions escape to the runner, which reports StepCrashed
"""

from typing import Protocol

from ..config import DeploymentContext
from ..results import StepResult
from ..tools import Toolchain
from ..trace import Trace


class Step(Protocol):
    name: str
    title: str

    def run(self, ctx: DeploymentContext, tools: Toolchain, trace: Trace) -> StepResult: ...
