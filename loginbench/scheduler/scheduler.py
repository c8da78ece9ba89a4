from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from pathlib import Path
from typing import Any, Awaitable, Callable

from loginbench.credentials import CredentialSelector
from loginbench.driver.types import SessionError, SessionTiming

from .cancellation import CancellationToken
from .context import TaskContext
from .types import NOT_RUN_REASON, Result, SchedulerError

LOG = logging.getLogger(__name__)

SessionFn = Callable[[TaskContext], Awaitable[Any]]


class Scheduler:
    """
    Runs ``task_count`` independent login tasks with at most ``pool_size`` of
    them running at once.

    A fixed set of workers pulls contexts in index order from a shared queue,
    so admission is FIFO while completion order is whatever the sessions make
    it. The cancellation token is checked before each admission only; a task
    that was already admitted always runs to the end. Contexts never admitted
    are marked NOT_RUN so the result list always covers every index.
    """

    def __init__(
        self,
        selector: CredentialSelector,
        *,
        token: CancellationToken | None = None,
        output_dir: str | Path | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.selector = selector
        self.token = token if token is not None else CancellationToken()
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.clock = clock
        self.contexts: list[TaskContext] = []
        self.running = 0
        self.peak_running = 0

    async def run(
        self, task_count: int, pool_size: int, session_fn: SessionFn
    ) -> list[Result]:
        _validate(task_count, pool_size)

        self.running = 0
        self.peak_running = 0
        self.contexts = [
            TaskContext(index, self.selector.pick(), self.output_dir)
            for index in range(task_count)
        ]
        pending = deque(self.contexts)
        workers = min(pool_size, task_count)
        LOG.info("Running %d logins with %d concurrent users", task_count, workers)

        async with asyncio.TaskGroup() as group:
            for n in range(workers):
                group.create_task(self._worker(pending, session_fn), name=f"worker-{n}")

        return [context.to_result() for context in self.contexts]

    async def _worker(self, pending: deque[TaskContext], session_fn: SessionFn) -> None:
        while pending:
            context = pending.popleft()
            if self.token.cancelled:
                context.skip(NOT_RUN_REASON)
                continue

            context.dispatch()
            await self._execute(context, session_fn)

    async def _execute(self, context: TaskContext, session_fn: SessionFn) -> None:
        context.start(self.clock())
        self.running += 1
        self.peak_running = max(self.peak_running, self.running)

        try:
            outcome = await session_fn(context)
        except SessionError as exc:
            context.fail(str(exc))
        except Exception as exc:
            context.fail(f"{type(exc).__name__}: {exc}")
        else:
            if isinstance(outcome, SessionTiming):
                context.succeed(outcome.finish_time, started=outcome.start_time)
            else:
                context.succeed(self.clock())
        finally:
            self.running -= 1


def _validate(task_count: int, pool_size: int) -> None:
    if task_count < 1:
        raise SchedulerError(f"Task count must be at least 1, got {task_count}")

    if pool_size < 1:
        raise SchedulerError(f"Pool size must be at least 1, got {pool_size}")
