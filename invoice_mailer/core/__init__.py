"""Core modules for the invoice bundling run."""

from .logging import configure_logging, get_logger
from .models import (
    Category,
    CompositeDocument,
    DestinationGroup,
    InvalidWindowError,
    RecordRef,
    RunResult,
    Source,
    TimeWindow,
    classify,
)
from .retry import RetryPolicy
from .run_log import LogSink, RunLog

__all__ = [
    "configure_logging",
    "get_logger",
    "Category",
    "CompositeDocument",
    "DestinationGroup",
    "InvalidWindowError",
    "RecordRef",
    "RunResult",
    "Source",
    "TimeWindow",
    "classify",
    "RetryPolicy",
    "LogSink",
    "RunLog",
]
