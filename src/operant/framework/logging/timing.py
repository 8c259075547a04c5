"""
Timed steps for the invocation lifecycle.

Three steps are timed in operant: ``operation.execute`` (runner),
``contract.validate`` (Contract) and ``execution.run`` (dispatcher worker).
Each produces ``<step>.start`` / ``<step>.end`` events, or ``<step>.error``
when an exception escapes, tagged with a span id. A step started inside
another one records the outer span as its parent, so a nested operation's
validation can be traced back to the call that triggered it.

    with log_step("contract.validate", contract="PostContract") as step:
        ...
        step.add_metric("valid", True)
"""

import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from operant.framework.logging.context import get_context, get_logger, push_context


@dataclass
class StepTimer:
    """Wall-clock span of one step plus the fields reported when it ends."""

    step: str
    parent_span_id: str | None = None
    span_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    started_at: float = field(default_factory=time.perf_counter)
    ended_at: float | None = None
    metrics: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        end = self.ended_at if self.ended_at is not None else time.perf_counter()
        return (end - self.started_at) * 1000

    def add_metric(self, key: str, value: Any) -> "StepTimer":
        """Attach a field to the ``.end`` event (e.g. ``valid``)."""
        self.metrics[key] = value
        return self

    def finish(self) -> "StepTimer":
        if self.ended_at is None:
            self.ended_at = time.perf_counter()
        return self

    def fields(self) -> dict[str, Any]:
        result: dict[str, Any] = {"span_id": self.span_id, "duration_ms": round(self.duration_ms, 2)}
        if self.parent_span_id:
            result["parent_span_id"] = self.parent_span_id
        result.update(self.metrics)
        return result


@contextmanager
def timed_block(step: str = "unnamed") -> Iterator[StepTimer]:
    """Time a block without logging or touching the log context."""
    timer = StepTimer(step=step, parent_span_id=get_context().span_id)
    try:
        yield timer
    finally:
        timer.finish()


@contextmanager
def log_step(event: str, log_start: bool = True, level: str = "info", **extra_metrics: Any) -> Iterator[StepTimer]:
    """
    Log *event* as a timed step.

    ``<event>.start`` goes out at DEBUG, ``<event>.end`` at *level* with
    ``duration_ms``. An exception is logged as ``<event>.error`` with its
    type and message and then re-raised unchanged. While the block runs the
    log context carries the step's ``span_id``.
    """
    log = get_logger("operant.timing")
    parent_span = get_context().span_id
    timer = StepTimer(step=event, parent_span_id=parent_span, metrics=dict(extra_metrics))
    token = push_context(span_id=timer.span_id, parent_span_id=parent_span, step=event)

    if log_start:
        log.debug(f"{event}.start", **{k: v for k, v in timer.fields().items() if k != "duration_ms"})
    try:
        yield timer
    except Exception as e:
        log.error(
            f"{event}.error",
            **timer.finish().fields(),
            status="error",
            error_type=type(e).__name__,
            error_message=str(e),
            exc_info=True,
        )
        raise
    finally:
        timer.finish()
        token.restore()

    getattr(log, level)(f"{event}.end", **timer.fields())
