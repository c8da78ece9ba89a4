from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from loginbench.scheduler.types import NOT_RUN_REASON, Result


@dataclass(frozen=True)
class AggregateStats:
    iteration_count: int
    success_count: int
    error_count: int
    not_run_count: int
    # None when there is nothing to divide by
    success_rate: float | None
    min_duration: float | None
    max_duration: float | None
    avg_duration: float | None


def aggregate(results: Sequence[Result]) -> AggregateStats:
    iteration_count = len(results)
    success_count = 0
    not_run_count = 0
    durations: list[float] = []

    for result in results:
        if result.succeeded:
            success_count += 1
            if result.duration is not None:
                durations.append(result.duration)
        elif result.failure_reason == NOT_RUN_REASON:
            not_run_count += 1

    success_rate = (
        100 * success_count / iteration_count if iteration_count > 0 else None
    )
    avg_duration = sum(durations) / len(durations) if durations else None

    return AggregateStats(
        iteration_count=iteration_count,
        success_count=success_count,
        error_count=iteration_count - success_count,
        not_run_count=not_run_count,
        success_rate=success_rate,
        min_duration=min(durations) if durations else None,
        max_duration=max(durations) if durations else None,
        avg_duration=avg_duration,
    )
