"""
Pytest configuration and fixtures
"""

import pytest

from bill_tracker.audit import AuditLogger
from bill_tracker.config import ImportSettings, RecurrenceSettings
from bill_tracker.orchestrator import BillEntryFlow, ImportFlow
from bill_tracker.services.reporting import CollectingReporter
from bill_tracker.services.storage import InMemoryAuditStorage, InMemoryBillStorage


@pytest.fixture
def bill_storage():
    """Empty in-memory bill storage."""
    return InMemoryBillStorage()


@pytest.fixture
def audit_storage():
    """Empty in-memory audit log."""
    return InMemoryAuditStorage()


@pytest.fixture
def reporter():
    """Reporter that keeps every import summary."""
    return CollectingReporter()


@pytest.fixture
def import_flow(bill_storage, audit_storage, reporter):
    """ImportFlow wired to in-memory sinks with default settings."""
    return ImportFlow(
        bill_storage=bill_storage,
        reporter=reporter,
        audit_logger=AuditLogger(audit_storage),
        settings=ImportSettings(),
    )


@pytest.fixture
def entry_flow(bill_storage, audit_storage):
    """BillEntryFlow wired to in-memory storage."""
    return BillEntryFlow(
        bill_storage=bill_storage,
        audit_logger=AuditLogger(audit_storage),
        settings=RecurrenceSettings(),
    )
