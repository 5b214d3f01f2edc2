"""
Main Orchestrator for Bill Tracker

This module ties together all the components and defines the
end-to-end flows for:
1. File import (file → type check → parse → save accepted bills → report)
2. Manual entry (stub → monthly schedule → save)
3. Bill actions (pay, update, delete)

DESIGN DECISION: The orchestrator enforces the boundaries:
- A bad line never aborts an import; only "nothing imported" is a failure
- Spreadsheet-binary files are refused before a single line is read
- Every import ends with exactly one summary for the user
- Every step is audited
"""

import asyncio
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union
from uuid import UUID, uuid4

from bill_tracker.audit import AuditLogger, configure_log_level, create_correlation_id
from bill_tracker.config import ImportSettings, RecurrenceSettings, get_settings
from bill_tracker.ingestion import (
    EmptyImportResultError,
    ImportResult,
    UnsupportedFileTypeError,
    check_file_type,
    parse_bills,
)
from bill_tracker.models.bill import (
    BillDraft,
    BillStatus,
    BillStub,
    ImportSummary,
)
from bill_tracker.queries import DashboardQuery
from bill_tracker.schedule import expand_schedule
from bill_tracker.services.reporting import ImportReporterInterface, LogReporter
from bill_tracker.services.storage import (
    BillStorageInterface,
    InMemoryAuditStorage,
    InMemoryBillStorage,
    JsonFileBillStorage,
    NotFoundError,
    StorageError,
)

DECODE_FAILED_MESSAGE = "The file is not UTF-8 text. Please export it as a UTF-8 CSV file."


def success_message(count: int) -> str:
    noun = "bill" if count == 1 else "bills"
    return f"{count} {noun} imported successfully!"


class ImportFlow:
    """
    Orchestrates a bill file import.

    Flow:
    1. Type check → refuse .xlsx/.xls before anything else
    2. Decode → bytes to text (UTF-8, BOM tolerated)
    3. Parse → delimiter, header, every line (synchronous, no awaits)
    4. Save → each accepted bill goes to the storage sink
    5. Report → one summary: success with a count, or failure

    Only two conditions fail an import: an unsupported file, and a file
    where no line produced a bill.
    """

    def __init__(
        self,
        bill_storage: BillStorageInterface,
        reporter: Optional[ImportReporterInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[ImportSettings] = None,
    ):
        self._bill_storage = bill_storage
        self._reporter = reporter or LogReporter()
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().importer

    async def import_path(
        self,
        path: Union[str, Path],
        correlation_id: Optional[UUID] = None,
    ) -> ImportSummary:
        """
        Import a file from disk.

        Reading the bytes is the only point where the flow waits before
        parsing; it runs in a worker thread. Spreadsheet files are refused
        without being read.
        """
        path = Path(path)
        try:
            check_file_type(path.name, self._settings)
        except UnsupportedFileTypeError:
            return await self.import_file(path.name, b"", correlation_id)

        content = await asyncio.to_thread(path.read_bytes)
        return await self.import_file(path.name, content, correlation_id)

    async def import_file(
        self,
        filename: Optional[str],
        content: Union[str, bytes],
        correlation_id: Optional[UUID] = None,
    ) -> ImportSummary:
        """
        Import already-loaded file content.

        Args:
            filename: Original file name (only used to refuse spreadsheets)
            content: The file content, as text or UTF-8 bytes

        Returns:
            The summary that was also sent to the reporter

        Raises:
            StorageError: If the storage sink fails while saving bills
        """
        correlation_id = correlation_id or create_correlation_id()
        import_id = uuid4()

        # Step 1: Refuse binary spreadsheets before parsing anything
        try:
            check_file_type(filename, self._settings)
        except UnsupportedFileTypeError as e:
            if self._audit_logger:
                await self._audit_logger.log_file_rejected(
                    import_id=import_id,
                    filename=filename,
                    reason=str(e),
                    correlation_id=correlation_id,
                )
            return await self._fail(import_id, filename, str(e))

        # Step 2: Decode
        if isinstance(content, bytes):
            try:
                text = content.decode("utf-8-sig")
            except UnicodeDecodeError:
                if self._audit_logger:
                    await self._audit_logger.log_import_failed(
                        import_id=import_id,
                        reason=DECODE_FAILED_MESSAGE,
                        processed=0,
                        correlation_id=correlation_id,
                    )
                return await self._fail(import_id, filename, DECODE_FAILED_MESSAGE)
        else:
            text = content.lstrip("\ufeff")

        if self._audit_logger:
            await self._audit_logger.log_import_started(
                import_id=import_id,
                filename=filename,
                size_bytes=len(text.encode("utf-8")),
                correlation_id=correlation_id,
            )

        # Step 3: Parse (synchronous from here until the first save)
        result = parse_bills(text, self._settings)
        summary = self._build_summary(import_id, filename, result)

        if self._audit_logger:
            for skipped in result.skipped:
                await self._audit_logger.log_row_skipped(
                    import_id=summary.import_id,
                    line_number=skipped.line_number,
                    reason=skipped.reason.value,
                    detail=skipped.detail,
                    correlation_id=correlation_id,
                )

        # Step 4: Hand accepted bills to storage
        for bill in result.bills:
            try:
                await self._bill_storage.save_bill(bill)
            except StorageError as e:
                if self._audit_logger:
                    await self._audit_logger.log_storage_error(
                        operation="save_bill",
                        error_message=str(e),
                        correlation_id=correlation_id,
                    )
                raise

        # Step 5: Report
        if self._audit_logger:
            if summary.success:
                await self._audit_logger.log_import_completed(
                    import_id=summary.import_id,
                    imported=summary.imported_count,
                    processed=summary.processed_count,
                    skipped={r.value: n for r, n in summary.skipped.items()},
                    correlation_id=correlation_id,
                )
            else:
                await self._audit_logger.log_import_failed(
                    import_id=summary.import_id,
                    reason=summary.message,
                    processed=summary.processed_count,
                    correlation_id=correlation_id,
                )

        await self._reporter.report(summary)
        return summary

    async def _fail(
        self,
        import_id: UUID,
        filename: Optional[str],
        message: str,
    ) -> ImportSummary:
        """Report an import that stopped before any line was parsed."""
        summary = ImportSummary(
            import_id=import_id,
            filename=filename,
            success=False,
            message=message,
        )
        await self._reporter.report(summary)
        return summary

    @staticmethod
    def _build_summary(
        import_id: UUID,
        filename: Optional[str],
        result: ImportResult,
    ) -> ImportSummary:
        try:
            result.raise_if_empty()
        except EmptyImportResultError as e:
            success, message = False, str(e)
        else:
            success, message = True, success_message(result.accepted_count)

        return ImportSummary(
            import_id=import_id,
            filename=filename,
            success=success,
            message=message,
            imported_count=result.accepted_count,
            processed_count=result.processed_count,
            skipped=result.skip_counts(),
            delimiter=result.delimiter,
            header_line=(
                result.header_index + 1 if result.header_index is not None else None
            ),
            bills=result.bills,
        )


class BillEntryFlow:
    """
    Orchestrates manual bill entry and the actions on a bill.

    A manual entry with repeat_count=1 creates one bill with the title as
    typed; a larger count creates one bill per month, titled
    "Title (i/N)".
    """

    def __init__(
        self,
        bill_storage: BillStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[RecurrenceSettings] = None,
    ):
        self._bill_storage = bill_storage
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().recurrence

    async def add_bill(
        self,
        title: str,
        value: Union[Decimal, str, float],
        due_date: Union[date, str],
        repeat_count: int = 1,
        correlation_id: Optional[UUID] = None,
    ) -> list[BillDraft]:
        """
        Create and save one bill, or a monthly series.

        Raises:
            pydantic.ValidationError: If title, value or date are invalid
            RecurrenceCountError: If repeat_count is out of range
            ValueError: If the series would run past year 9999
            StorageError: If saving fails
        """
        correlation_id = correlation_id or create_correlation_id()

        stub = BillStub(title=title, value=value, due_date=due_date)
        bills = expand_schedule(stub, repeat_count, max_count=self._settings.max_count)

        for bill in bills:
            await self._bill_storage.save_bill(bill)
            if self._audit_logger:
                await self._audit_logger.log_bill_saved(
                    bill_id=bill.id,
                    title=bill.title,
                    amount=str(bill.value),
                    correlation_id=correlation_id,
                )

        if self._audit_logger:
            await self._audit_logger.log_schedule_created(
                title=stub.title,
                count=len(bills),
                bill_ids=[bill.id for bill in bills],
                correlation_id=correlation_id,
            )

        return bills

    async def _get_or_raise(self, bill_id: UUID) -> BillDraft:
        bill = await self._bill_storage.get_bill_by_id(bill_id)
        if bill is None:
            raise NotFoundError(f"Bill {bill_id} not found")
        return bill

    async def pay_bill(
        self,
        bill_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> BillDraft:
        """Mark a bill as paid and return the updated bill."""
        correlation_id = correlation_id or create_correlation_id()

        bill = await self._get_or_raise(bill_id)
        paid = bill.model_copy(update={"status": BillStatus.PAID})
        await self._bill_storage.update_bill(paid)

        if self._audit_logger:
            await self._audit_logger.log_bill_paid(bill_id, correlation_id)
        return paid

    async def update_bill(
        self,
        bill: BillDraft,
        correlation_id: Optional[UUID] = None,
    ) -> BillDraft:
        """Replace a stored bill with an edited copy."""
        correlation_id = correlation_id or create_correlation_id()

        # Re-validate: edits may come from model_copy(update=...)
        bill = BillDraft.model_validate(bill.model_dump())
        await self._bill_storage.update_bill(bill)

        if self._audit_logger:
            await self._audit_logger.log_bill_updated(bill.id, correlation_id)
        return bill

    async def delete_bill(
        self,
        bill_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Delete one bill. Other installments of its series are untouched."""
        correlation_id = correlation_id or create_correlation_id()

        await self._bill_storage.delete_bill(bill_id)

        if self._audit_logger:
            await self._audit_logger.log_bill_deleted(bill_id, correlation_id)


def create_app_components(
    bill_storage: Optional[BillStorageInterface] = None,
    reporter: Optional[ImportReporterInterface] = None,
) -> tuple[ImportFlow, BillEntryFlow, DashboardQuery]:
    """
    Factory function to create all application components.

    Args:
        bill_storage: Storage to use. If None, one is built from
                      StorageSettings (memory or JSON file).
        reporter: Where import summaries go. Defaults to LogReporter.

    Returns:
        (import_flow, bill_entry_flow, dashboard_query)
    """
    settings = get_settings()
    configure_log_level(settings.app.log_level)

    if bill_storage is None:
        storage_settings = settings.storage
        if storage_settings.backend == "json":
            bill_storage = JsonFileBillStorage(storage_settings.json_path)
        else:
            bill_storage = InMemoryBillStorage()

    audit_logger = AuditLogger(InMemoryAuditStorage())

    import_flow = ImportFlow(
        bill_storage=bill_storage,
        reporter=reporter,
        audit_logger=audit_logger,
        settings=settings.importer,
    )
    bill_entry_flow = BillEntryFlow(
        bill_storage=bill_storage,
        audit_logger=audit_logger,
        settings=settings.recurrence,
    )
    dashboard_query = DashboardQuery(bill_storage)

    return import_flow, bill_entry_flow, dashboard_query
