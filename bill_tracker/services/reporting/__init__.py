"""Import reporting package."""

from bill_tracker.services.reporting.interface import (
    CollectingReporter,
    ImportReporterInterface,
    LogReporter,
)

__all__ = [
    "CollectingReporter",
    "ImportReporterInterface",
    "LogReporter",
]
