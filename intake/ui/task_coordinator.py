from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from intake.application.errors import PatientValidationError, StorageError
from intake.ui.widgets.async_task import run_async

T = TypeVar("T")

STORAGE_HINT = "The action could not be performed. Please check the database connection."


class TaskState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureKind(StrEnum):
    VALIDATION = "validation"
    STORAGE = "storage"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class TaskFailure:
    kind: FailureKind
    message: str
    error: Exception


def classify_failure(exc: Exception) -> TaskFailure:
    if isinstance(exc, PatientValidationError):
        return TaskFailure(FailureKind.VALIDATION, str(exc), exc)
    if isinstance(exc, StorageError):
        return TaskFailure(FailureKind.STORAGE, f"{exc}\n{STORAGE_HINT}", exc)
    logging.getLogger(__name__).error("Background task failed", exc_info=(type(exc), exc, exc.__traceback__))
    return TaskFailure(FailureKind.UNEXPECTED, f"Unexpected error: {exc}\n{STORAGE_HINT}", exc)


class CoalescingSlot(Generic[T]):
    """Queue of depth one: a new entry replaces the waiting one."""

    def __init__(self) -> None:
        self._value: T | None = None
        self._filled = False

    @property
    def filled(self) -> bool:
        return self._filled

    def put(self, value: T) -> bool:
        replaced = self._filled
        self._value = value
        self._filled = True
        return replaced

    def take(self) -> T:
        if not self._filled:
            raise LookupError("slot is empty")
        value = self._value
        self._value = None
        self._filled = False
        return value  # type: ignore[return-value]

    def peek(self) -> T | None:
        return self._value


class TaskCoordinator:
    """Keeps the shell responsive while repository calls run in the background.

    At most one load is in flight. A load requested meanwhile is parked in a
    single overwrite slot and started as soon as the running one finishes.
    Mutations run independently; every task holds the busy flag until its
    ``finished`` signal.
    """

    def __init__(
        self,
        owner: Any,
        *,
        load: Callable[[str], Any],
        on_loaded: Callable[[Any], None],
        on_failure: Callable[[TaskFailure], None],
        set_busy: Callable[[bool], None],
    ) -> None:
        self.owner = owner
        self._load = load
        self._on_loaded = on_loaded
        self._on_failure = on_failure
        self._set_busy = set_busy
        self._busy_count = 0
        self._pending: CoalescingSlot[str] = CoalescingSlot()
        self._load_in_flight = False
        self._tasks: list[Any] = []
        self.load_state = TaskState.IDLE
        self.mutation_state = TaskState.IDLE

    @property
    def pending_query(self) -> str | None:
        return self._pending.peek() if self._pending.filled else None

    @property
    def load_in_flight(self) -> bool:
        return self._load_in_flight

    @property
    def busy(self) -> bool:
        return self._busy_count > 0

    def _acquire(self) -> None:
        self._busy_count += 1
        if self._busy_count == 1:
            self._set_busy(True)

    def _release(self) -> None:
        self._busy_count = max(0, self._busy_count - 1)
        if self._busy_count == 0:
            self._set_busy(False)

    def _track(self, task: Any) -> None:
        if task is not None:
            self._tasks.append(task)

    def _forget(self, task_holder: list[Any]) -> None:
        for task in task_holder:
            if task in self._tasks:
                self._tasks.remove(task)

    def request_load(self, query: str) -> None:
        if self._load_in_flight:
            if self._pending.put(query):
                logging.getLogger(__name__).debug("Pending load replaced by %r", query)
            return
        self._start_load(query)

    def _start_load(self, query: str) -> None:
        self._load_in_flight = True
        self.load_state = TaskState.RUNNING

        def _on_success(result: Any) -> None:
            self.load_state = TaskState.SUCCEEDED
            self._on_loaded(result)

        def _on_failure(failure: TaskFailure) -> None:
            self.load_state = TaskState.FAILED
            self._on_failure(failure)

        def _on_done() -> None:
            # Requests made from the handlers above were parked, not started.
            self._load_in_flight = False
            self.load_state = TaskState.IDLE
            if self._pending.filled:
                self._start_load(self._pending.take())

        self._run(lambda: self._load(query), _on_success, _on_failure, _on_done)

    def run_mutation(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[TaskFailure], None] | None = None,
    ) -> None:
        self.mutation_state = TaskState.RUNNING
        failure_handler = on_failure or self._on_failure

        def _on_success(result: Any) -> None:
            self.mutation_state = TaskState.SUCCEEDED
            on_success(result)

        def _on_failure(failure: TaskFailure) -> None:
            self.mutation_state = TaskState.FAILED
            failure_handler(failure)

        def _on_done() -> None:
            self.mutation_state = TaskState.IDLE

        self._run(fn, _on_success, _on_failure, _on_done)

    def run_task(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[TaskFailure], None] | None = None,
    ) -> None:
        """Run a one-off read (station catalog, cache refresh) under the busy flag."""
        self._run(fn, on_success, on_failure or self._on_failure)

    def _run(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[TaskFailure], None],
        on_done: Callable[[], None] | None = None,
    ) -> None:
        self._acquire()
        holder: list[Any] = []

        def _on_error(exc: Exception) -> None:
            on_failure(classify_failure(exc))

        def _on_finished() -> None:
            self._forget(holder)
            try:
                if on_done is not None:
                    on_done()
            finally:
                self._release()

        holder.append(
            run_async(
                self.owner,
                fn,
                on_success=on_success,
                on_error=_on_error,
                on_finished=_on_finished,
            )
        )
        self._track(holder[0])
