"""
Dispatcher - deferred execution of registered operations.

The unit of work is ``(operation identifier, payload)``. A live Operation
instance never crosses the dispatch boundary; each execution resolves the
identifier and invokes the operation fresh, which is only safe because
operations are stateless.

Backends:
    sync   - runs inline in the submitting thread
    thread - runs on a ThreadPoolExecutor (``OPERANT_MAX_WORKERS`` workers)

The dispatcher owns delivery, so it records outcomes instead of raising
them: validation failures become ``invalid`` executions and domain errors
become ``failed`` executions.
"""

import copy
import threading
import traceback
from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable
from uuid import uuid4

from operant.core.errors import InvalidConfigError, ValidationError
from operant.core.settings import get_settings
from operant.framework.contracts import Contract
from operant.framework.logging import get_logger, log_step, push_context
from operant.framework.runner import OperationRunner, get_runner

log = get_logger(__name__)


class ExecutionStatus(str, Enum):
    """Execution lifecycle status."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    INVALID = "invalid"
    FAILED = "failed"


class InvocationProtocol(str, Enum):
    """Which invocation protocol the worker uses."""

    RUN = "run"
    CALL = "call"


@dataclass
class Execution:
    """Execution record."""

    id: str
    operation: str
    payload: Any
    protocol: InvocationProtocol
    status: ExecutionStatus
    created_at: datetime
    backend: str = "sync"
    started_at: datetime | None = None
    completed_at: datetime | None = None
    contract: Contract | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)
    error: str | None = None
    error_type: str | None = None

    @property
    def duration_seconds(self) -> float | None:
        """Duration in seconds if completed."""
        if self.started_at is None or self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def done(self) -> bool:
        return self.status not in (ExecutionStatus.PENDING, ExecutionStatus.RUNNING)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "operation": self.operation,
            "protocol": self.protocol.value,
            "status": self.status.value,
            "backend": self.backend,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "errors": self.errors,
            "error": self.error,
            "error_type": self.error_type,
        }


# =============================================================================
# Backends
# =============================================================================


@runtime_checkable
class ExecutionBackend(Protocol):
    """Runs a unit of work now or later."""

    name: str

    def submit(self, work: Callable[[], None]) -> Future | None:
        """Schedule *work*; return a Future when it runs asynchronously."""
        ...

    def shutdown(self, wait: bool = True) -> None:
        """Release backend resources."""
        ...


class SyncBackend:
    """Runs work inline in the submitting thread."""

    name = "sync"

    def submit(self, work: Callable[[], None]) -> Future | None:
        work()
        return None

    def shutdown(self, wait: bool = True) -> None:
        pass


class ThreadBackend:
    """Runs work on a thread pool."""

    name = "thread"

    def __init__(self, max_workers: int | None = None) -> None:
        self.max_workers = max_workers or get_settings().max_workers
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="operant")

    def submit(self, work: Callable[[], None]) -> Future | None:
        return self._executor.submit(work)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=False)


_BACKENDS: dict[str, Callable[[], ExecutionBackend]] = {
    "sync": SyncBackend,
    "thread": ThreadBackend,
}


def create_backend(name: str | None = None) -> ExecutionBackend:
    """Build a backend by name (defaults to ``OPERANT_DISPATCHER_BACKEND``)."""
    backend_name = (name or get_settings().dispatcher_backend).lower()
    factory = _BACKENDS.get(backend_name)
    if factory is None:
        raise InvalidConfigError(
            "dispatcher_backend",
            backend_name,
            f"Unknown dispatcher backend {backend_name!r} (available: {', '.join(sorted(_BACKENDS))})",
        )
    return factory()


# =============================================================================
# Dispatcher
# =============================================================================


class OperationDispatcher:
    """Dispatcher for deferred operation executions."""

    def __init__(
        self,
        backend: str | ExecutionBackend | None = None,
        runner: OperationRunner | None = None,
        retain: int | None = None,
    ) -> None:
        self._backend = backend if isinstance(backend, ExecutionBackend) else create_backend(backend)
        self._runner = runner or get_runner()
        self._retain = get_settings().retain_executions if retain is None else retain
        self._executions: dict[str, Execution] = {}
        self._futures: dict[str, Future] = {}
        self._lock = threading.Lock()

    @property
    def backend(self) -> ExecutionBackend:
        return self._backend

    def submit(
        self,
        operation: str,
        payload: Any,
        protocol: InvocationProtocol | str = InvocationProtocol.CALL,
    ) -> Execution:
        """
        Submit an operation for execution.

        The identifier is resolved immediately so unknown operations fail
        in the submitting thread.

        Raises:
            OperationNotFoundError: If operation is not registered
        """
        self._runner.resolve(operation)

        execution = Execution(
            id=str(uuid4()),
            operation=operation,
            payload=copy.deepcopy(payload) if isinstance(payload, Mapping) else payload,
            protocol=InvocationProtocol(protocol),
            status=ExecutionStatus.PENDING,
            created_at=datetime.now(UTC),
            backend=self._backend.name,
        )

        with self._lock:
            self._executions[execution.id] = execution
            if self._retain and len(self._executions) > self._retain:
                self._prune(self._retain)

        log.info(
            "execution.submitted",
            execution_id=execution.id,
            operation=operation,
            protocol=execution.protocol.value,
            backend=self._backend.name,
        )

        future = self._backend.submit(lambda: self._execute(execution))
        if future is not None:
            with self._lock:
                self._futures[execution.id] = future
        return execution

    def _execute(self, execution: Execution) -> None:
        token = push_context(execution_id=execution.id, backend=self._backend.name)
        execution.status = ExecutionStatus.RUNNING
        execution.started_at = datetime.now(UTC)
        try:
            with log_step("execution.run", operation=execution.operation):
                if execution.protocol is InvocationProtocol.CALL:
                    contract = self._runner.call(execution.operation, execution.payload)
                else:
                    contract = self._runner.run(execution.operation, execution.payload)
            execution.contract = contract
            execution.errors = contract.errors.to_dict()
            execution.status = ExecutionStatus.COMPLETED if contract.valid else ExecutionStatus.INVALID

        except ValidationError as e:
            execution.status = ExecutionStatus.INVALID
            execution.contract = e.contract
            execution.errors = e.errors
            execution.error = str(e)
            execution.error_type = type(e).__name__

        except Exception as e:
            execution.status = ExecutionStatus.FAILED
            execution.error = str(e)
            execution.error_type = type(e).__name__
            log.error(
                "execution.failed",
                error_type=type(e).__name__,
                error_message=str(e),
                error_stack=traceback.format_exc(),
            )

        finally:
            execution.completed_at = datetime.now(UTC)
            log.info(
                "execution.summary",
                status=execution.status.value,
                duration_ms=round(execution.duration_seconds * 1000, 2)
                if execution.duration_seconds is not None
                else None,
            )
            token.restore()

    def wait(self, execution_id: str, timeout: float | None = None) -> Execution:
        """
        Block until an execution finishes.

        Raises:
            KeyError: unknown execution id
            concurrent.futures.TimeoutError: still running after *timeout*
        """
        with self._lock:
            execution = self._executions[execution_id]
            future = self._futures.get(execution_id)
        if future is not None:
            future.result(timeout=timeout)
        return execution

    def get_execution(self, execution_id: str) -> Execution | None:
        """Get execution by ID."""
        with self._lock:
            return self._executions.get(execution_id)

    def list_executions(
        self,
        operation: str | None = None,
        status: ExecutionStatus | None = None,
        limit: int = 100,
    ) -> list[Execution]:
        """List executions with optional filters, newest first."""
        with self._lock:
            executions = list(self._executions.values())

        if operation:
            executions = [e for e in executions if e.operation == operation]
        if status:
            executions = [e for e in executions if e.status == status]

        executions.sort(key=lambda e: e.created_at, reverse=True)
        return executions[:limit]

    def prune(self, keep: int = 0) -> int:
        """
        Forget finished executions, keeping the newest *keep* of them.

        Pending and running executions are never dropped. Execution objects
        already handed out stay usable; only the dispatcher's lookup is lost.

        Returns:
            Number of executions removed.
        """
        with self._lock:
            return self._prune(keep)

    def _prune(self, keep: int) -> int:
        finished = [e for e in self._executions.values() if e.done]
        stale = finished[: max(len(finished) - keep, 0)]
        for execution in stale:
            del self._executions[execution.id]
            self._futures.pop(execution.id, None)
        if stale:
            log.debug("execution.pruned", removed=len(stale), kept=keep)
        return len(stale)

    def shutdown(self, wait: bool = True) -> None:
        self._backend.shutdown(wait=wait)
