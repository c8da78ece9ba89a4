from .cancellation import CancellationToken, Watchdog, install_signal_handlers
from .context import TaskContext
from .scheduler import Scheduler
from .types import (
    NOT_RUN_REASON,
    InvalidTransitionError,
    Result,
    SchedulerError,
    TaskState,
)

__all__ = [
    "CancellationToken",
    "Watchdog",
    "install_signal_handlers",
    "TaskContext",
    "Scheduler",
    "Result",
    "TaskState",
    "SchedulerError",
    "InvalidTransitionError",
    "NOT_RUN_REASON",
]
