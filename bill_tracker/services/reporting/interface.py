"""
Import Reporting Interface

Every import ends with exactly one ImportSummary handed to a reporter.
In a UI this is the alert the user sees; from the command line or in
tests it can be a log line or a list.
"""

from abc import ABC, abstractmethod

import structlog

from bill_tracker.models.bill import ImportSummary


class ImportReporterInterface(ABC):
    """Receives the terminal summary of each import."""

    @abstractmethod
    async def report(self, summary: ImportSummary) -> None:
        """
        Deliver the summary (success with a count, or failure with a reason).
        """
        pass


class LogReporter(ImportReporterInterface):
    """Reports summaries as structured log lines."""

    def __init__(self):
        self._logger = structlog.get_logger("bill_tracker.import")

    async def report(self, summary: ImportSummary) -> None:
        fields = {
            "import_id": str(summary.import_id),
            "filename": summary.filename,
            "imported_count": summary.imported_count,
            "processed_count": summary.processed_count,
            "skipped": {reason.value: n for reason, n in summary.skipped.items()},
        }
        if summary.success:
            self._logger.info("import_succeeded", message=summary.message, **fields)
        else:
            self._logger.warning("import_failed", message=summary.message, **fields)


class CollectingReporter(ImportReporterInterface):
    """Keeps every summary in memory (useful for tests and batch runs)."""

    def __init__(self):
        self.summaries: list[ImportSummary] = []

    async def report(self, summary: ImportSummary) -> None:
        self.summaries.append(summary)

    @property
    def last(self) -> ImportSummary:
        return self.summaries[-1]
