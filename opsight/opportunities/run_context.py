"""
Run Context for opportunity generation.

RunContext is an in-memory context object. It is NOT persisted.

It carries:
- run_id: Unique identifier for a single generation run
- company_id: The company whose signals are being processed
- trigger_source: What initiated the run (api, cron, import, manual)
- step: Optional current step within the run
"""

from dataclasses import dataclass, field, replace
from typing import Literal
from uuid import UUID, uuid4


TriggerSource = Literal["api", "cron", "import", "manual"]


@dataclass(frozen=True)
class RunContext:
    """
    In-memory context for one generation run.

    Attributes:
        company_id: Identity of the company this run operates on
        trigger_source: What initiated the run
        run_id: Unique UUID for this run (auto-generated if not provided)
        step: Optional current step within the run
    """

    company_id: str
    trigger_source: TriggerSource = "api"
    run_id: UUID = field(default_factory=uuid4)
    step: str | None = None

    def with_step(self, step: str) -> "RunContext":
        """Return a copy of this context with the step set."""
        return replace(self, step=step)


def create_run_context(
    company_id: str,
    trigger_source: TriggerSource = "api",
    run_id: UUID | None = None,
    step: str | None = None,
) -> RunContext:
    """
    Factory function to create a RunContext.

    Generates a run_id if not provided.
    """
    return RunContext(
        company_id=str(company_id),
        trigger_source=trigger_source,
        run_id=run_id or uuid4(),
        step=step,
    )
