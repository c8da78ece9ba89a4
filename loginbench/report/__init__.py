from .aggregate import AggregateStats, aggregate
from .writer import (
    HEADER,
    NOT_APPLICABLE,
    REPORT_NAME,
    ReportFormatError,
    ReportRow,
    format_summary,
    print_summary,
    read_report,
    save_results,
    write_report,
)

__all__ = [
    "AggregateStats",
    "aggregate",
    "HEADER",
    "NOT_APPLICABLE",
    "REPORT_NAME",
    "ReportFormatError",
    "ReportRow",
    "format_summary",
    "print_summary",
    "read_report",
    "save_results",
    "write_report",
]
