from __future__ import annotations

import logging
from pathlib import Path

from loginbench.credentials.types import Credential

from .types import InvalidTransitionError, Result, TaskState

LOG = logging.getLogger(__name__)


class TaskLogAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        return f"{self.extra['padded_index']}: {msg}", kwargs


class TaskContext:
    """
    Mutable record of one login attempt.

    Only the task that owns the context moves it through its states::

        CREATED -> DISPATCHED -> RUNNING -> SUCCEEDED | FAILED
        CREATED -> NOT_RUN

    Terminal states are final. ``finish_time`` is only ever set on success.
    """

    def __init__(
        self, index: int, credential: Credential, output_dir: Path | None = None
    ):
        self.index = index
        self.credential = credential
        self.padded_index = str(index).zfill(3)
        self.output_dir = (
            Path(output_dir) / f"iteration-{self.padded_index}"
            if output_dir is not None
            else None
        )
        self.state = TaskState.CREATED
        self.start_time: float | None = None
        self.finish_time: float | None = None
        self.failure_reason: str | None = None
        self.log = TaskLogAdapter(LOG, {"padded_index": self.padded_index})

    def __repr__(self) -> str:
        return f"TaskContext(index={self.index}, state={self.state.name})"

    @property
    def terminal(self) -> bool:
        return self.state.terminal

    def dispatch(self) -> None:
        self._move(TaskState.CREATED, TaskState.DISPATCHED)

    def start(self, now: float) -> None:
        self._move(TaskState.DISPATCHED, TaskState.RUNNING)
        self.start_time = now

    def succeed(self, now: float, started: float | None = None) -> None:
        self._move(TaskState.RUNNING, TaskState.SUCCEEDED)
        # The driver may start its own clock later than the scheduler did.
        if started is not None:
            self.start_time = started
        self.finish_time = now
        self.log.info("Success")

    def fail(self, reason: str) -> None:
        self._move(TaskState.RUNNING, TaskState.FAILED)
        self.failure_reason = reason or "unknown failure"
        self.log.error(self.failure_reason)

    def skip(self, reason: str) -> None:
        self._move(TaskState.CREATED, TaskState.NOT_RUN)
        self.failure_reason = reason
        self.log.debug(reason)

    def to_result(self) -> Result:
        return Result(self.index, self.start_time, self.finish_time, self.failure_reason)

    def _move(self, expected: TaskState, target: TaskState) -> None:
        if self.state is not expected:
            raise InvalidTransitionError(self.index, self.state, target)
        self.state = target
