from __future__ import annotations

import csv
import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Sequence, TextIO

from loginbench.scheduler.types import Result

from .aggregate import AggregateStats, aggregate

LOG = logging.getLogger(__name__)

HEADER = ["Iteration", "Start time", "Finish Time", "Duration", "Failure reason"]
TIME_FORMAT = "%d %b %Y %H:%M:%S"
REPORT_NAME = "results.csv"
NOT_APPLICABLE = "n/a"


@dataclass(frozen=True)
class ReportRow:
    index: int
    start: str
    finish: str
    duration: float | None
    failure_reason: str | None


class ReportFormatError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


def format_timestamp(value: float | None) -> str:
    if value is None:
        return ""
    return datetime.fromtimestamp(value).strftime(TIME_FORMAT)


def write_report(results: Sequence[Result], path: str | Path) -> Path:
    """
    Write one CSV row per result, sorted by iteration index.

    Durations are written with ``repr`` so reading the file back yields the
    exact same float. A partially written file is removed if writing fails.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with path.open("w", encoding="utf-8", newline="") as fh:
            writer = csv.writer(fh)
            writer.writerow(HEADER)
            for result in sorted(results, key=lambda r: r.index):
                duration = result.duration if result.succeeded else None
                writer.writerow(
                    [
                        result.index,
                        format_timestamp(result.start_time),
                        format_timestamp(result.finish_time),
                        repr(duration) if duration is not None else "",
                        result.failure_reason or "",
                    ]
                )
    except (OSError, ValueError, csv.Error):
        path.unlink(missing_ok=True)
        raise

    return path


def read_report(path: str | Path) -> list[ReportRow]:
    rows: list[ReportRow] = []
    with Path(path).open("r", encoding="utf-8", newline="") as fh:
        reader = csv.reader(fh)
        header = next(reader, None)
        if header != HEADER:
            raise ReportFormatError(f"{path}: unexpected header {header}")

        for line_no, record in enumerate(reader, start=2):
            if len(record) != len(HEADER):
                raise ReportFormatError(
                    f"{path}:{line_no}: expected {len(HEADER)} fields, got {len(record)}"
                )
            index, start, finish, duration, reason = record
            try:
                rows.append(
                    ReportRow(
                        index=int(index),
                        start=start,
                        finish=finish,
                        duration=float(duration) if duration else None,
                        failure_reason=reason or None,
                    )
                )
            except ValueError as exc:
                raise ReportFormatError(f"{path}:{line_no}: {exc}") from exc

    return rows


def _seconds(value: float | None) -> str:
    return f"{value:.3f}s" if value is not None else NOT_APPLICABLE


def format_summary(stats: AggregateStats) -> list[str]:
    rate = (
        f"{stats.success_rate:.1f}%"
        if stats.success_rate is not None
        else NOT_APPLICABLE
    )
    return [
        f"  Total number of logins: {stats.iteration_count}",
        "",
        f"  Successful logins:      {stats.success_count}",
        f"  Failed logins:          {stats.error_count}",
        f"  Not run:                {stats.not_run_count}",
        f"  Success rate:           {rate}",
        "",
        f"  Average duration:       {_seconds(stats.avg_duration)}",
        f"  Minimum duration:       {_seconds(stats.min_duration)}",
        f"  Maximum duration:       {_seconds(stats.max_duration)}",
    ]


def print_summary(stats: AggregateStats, out: TextIO | None = None) -> None:
    out = out if out is not None else sys.stdout
    for line in format_summary(stats):
        print(line, file=out)


def save_results(
    results: Sequence[Result],
    output_dir: str | Path | None = None,
    *,
    out: TextIO | None = None,
) -> AggregateStats:
    """
    Aggregate, persist the report when an output directory is configured, and
    print the summary. A failed write is logged and never hides the summary.
    """
    out = out if out is not None else sys.stdout
    stats = aggregate(results)
    saved: Path | None = None

    if output_dir is not None:
        try:
            saved = write_report(results, Path(output_dir) / REPORT_NAME)
        except (OSError, ValueError, csv.Error) as exc:
            LOG.error("Error saving results - %s", exc)

    print_summary(stats, out)
    if saved is not None:
        print(f"Results saved to {saved}", file=out)

    return stats
