from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from loginbench.config.types import ConfigError


class TaskState(Enum):
    CREATED = auto()
    DISPATCHED = auto()
    RUNNING = auto()
    SUCCEEDED = auto()
    FAILED = auto()
    NOT_RUN = auto()

    @property
    def terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({TaskState.SUCCEEDED, TaskState.FAILED, TaskState.NOT_RUN})

NOT_RUN_REASON = "not run: cancelled before dispatch"


@dataclass(frozen=True)
class Result:
    index: int
    start_time: float | None
    finish_time: float | None
    failure_reason: str | None

    @property
    def succeeded(self) -> bool:
        return self.failure_reason is None

    @property
    def duration(self) -> float | None:
        if self.start_time is None or self.finish_time is None:
            return None
        return self.finish_time - self.start_time


class SchedulerError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class InvalidTransitionError(Exception):
    def __init__(self, index: int, current: TaskState, target: TaskState):
        super().__init__(
            f"Task {index}: cannot move from {current.name} to {target.name}"
        )
        self.index = index
        self.current = current
        self.target = target
