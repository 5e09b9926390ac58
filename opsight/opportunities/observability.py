"""
Observability utilities for opportunity engines.

Every engine entry point logs at least a start and an end event carrying
run_id, company_id, trigger_source, engine, operation and status.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Mapping

from .run_context import RunContext

logger = logging.getLogger("opsight.engines")

Status = Literal["start", "success", "failure"]


def log_engine_event(
    ctx: RunContext,
    engine: str,
    operation: str,
    status: Status,
    extra: Mapping[str, Any] | None = None,
    error_summary: str | None = None,
) -> None:
    """
    Log a structured engine event.

    The log payload always includes:
    - run_id, company_id, trigger_source (from RunContext)
    - engine, operation, status (from arguments)
    - step, if the context has one
    - error_summary, if provided
    - Any additional fields from extra

    Args:
        ctx: RunContext for this run
        engine: Name of the engine (e.g., "opportunities_engine")
        operation: Name of the operation (e.g., "generate_all")
        status: Current status ("start", "success", "failure")
        extra: Optional additional fields to include in the log
        error_summary: Short error description for failure status
    """
    payload: dict[str, Any] = {
        "run_id": str(ctx.run_id),
        "company_id": ctx.company_id,
        "trigger_source": ctx.trigger_source,
        "engine": engine,
        "operation": operation,
        "status": status,
    }

    if ctx.step:
        payload["step"] = ctx.step

    if error_summary:
        payload["error_summary"] = error_summary

    if extra:
        payload.update(extra)

    level = logging.ERROR if status == "failure" else logging.INFO
    logger.log(level, "engine_event", extra=payload)
