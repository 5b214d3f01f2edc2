"""
Core Data Models for Bill Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce the bill invariants at runtime (non-empty title, finite
   non-negative value, real calendar due date)
2. Give every import row an explicit outcome instead of a silent skip
3. Be serializable for storage and logging

DESIGN DECISION: We use Pydantic v2 models everywhere. A row that cannot
produce a valid BillDraft is never half-filled with defaults; it becomes
a RowSkipped with a reason.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from bill_tracker.dates import normalize_date_string, parse_calendar_date


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class BillStatus(str, Enum):
    """
    Payment status of a bill.

    Imported and generated bills always start as PENDING.
    """
    PENDING = "pending"
    PAID = "paid"


class SkipReason(str, Enum):
    """
    Why an import row was not turned into a bill.

    Every rejection cause the row parser knows about has a value here,
    so the import summary can count them exhaustively.
    """
    MALFORMED_ROW = "malformed_row"              # fewer than 2 fields
    MISSING_FIELD = "missing_field"              # empty title, value or date
    VALUE_PARSE_FAILURE = "value_parse_failure"  # not a finite, non-negative number
    DATE_TOO_SHORT = "date_too_short"            # normalized date under 8 chars
    INVALID_DATE = "invalid_date"                # not a real calendar date


# =============================================================================
# CORE BILL MODELS
# =============================================================================

class BillDraft(BaseModel):
    """
    A fully validated bill, ready to be handed to storage.

    Produced by the importer and by the schedule expander.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique bill ID, never reused"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Display title"
    )
    value: Decimal = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Amount, currency agnostic"
    )
    due_date: date = Field(
        ...,
        description="Due date (no time of day)"
    )
    status: BillStatus = Field(
        default=BillStatus.PENDING,
        description="Payment status"
    )
    barcode: Optional[str] = Field(
        default=None,
        description="Bill barcode / typeable line, passed through uninterpreted"
    )

    @field_validator('barcode')
    @classmethod
    def empty_barcode_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class BillStub(BaseModel):
    """
    Input to the schedule expander: the fields a user types in by hand.

    The due date may be given as a date or as text in any format the
    importer understands ("2024-01-31", "31/01/2024", "2024/01/31").
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1)
    value: Decimal = Field(..., ge=0, allow_inf_nan=False)
    due_date: date

    @field_validator('due_date', mode='before')
    @classmethod
    def parse_text_date(cls, v):
        if isinstance(v, str):
            return parse_calendar_date(normalize_date_string(v))
        return v


class ColumnMapping(BaseModel):
    """
    Logical field -> physical column index.

    Built once per import by the header classifier, then read by every row.
    """
    model_config = ConfigDict(frozen=True)

    title: int = Field(default=0, ge=0)
    value: int = Field(default=1, ge=0)
    due_date: int = Field(default=2, ge=0)
    barcode: int = Field(default=3, ge=0)


# =============================================================================
# ROW OUTCOMES
# =============================================================================

class RowAccepted(BaseModel):
    """A data line that produced a bill."""

    outcome: Literal["accepted"] = "accepted"
    line_number: int = Field(..., ge=1, description="1-based line in the file")
    bill: BillDraft


class RowSkipped(BaseModel):
    """A data line that was rejected. Never fatal for the import."""

    outcome: Literal["skipped"] = "skipped"
    line_number: int = Field(..., ge=1, description="1-based line in the file")
    reason: SkipReason
    detail: str = Field(
        default="",
        description="Human-readable explanation"
    )


RowOutcome = Union[RowAccepted, RowSkipped]


# =============================================================================
# IMPORT SUMMARY
# =============================================================================

class ImportSummary(BaseModel):
    """
    The single terminal signal of an import.

    Either success with a count, or failure with a human-readable reason.
    """

    import_id: UUID = Field(default_factory=uuid4)
    finished_at: datetime = Field(default_factory=datetime.utcnow)
    filename: Optional[str] = None

    success: bool
    message: str = Field(
        ...,
        description="What to show the user"
    )

    imported_count: int = Field(default=0, ge=0)
    processed_count: int = Field(
        default=0,
        ge=0,
        description="Non-blank data lines that were parsed"
    )
    skipped: dict[SkipReason, int] = Field(default_factory=dict)

    # Detection details (None when parsing never started)
    delimiter: Optional[str] = None
    header_line: Optional[int] = Field(
        default=None,
        description="1-based line number of the detected header row"
    )

    bills: list[BillDraft] = Field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return sum(self.skipped.values())


# =============================================================================
# DASHBOARD
# =============================================================================

class DashboardStats(BaseModel):
    """Totals shown on the dashboard."""

    pending_count: int = Field(ge=0)
    paid_total: Decimal
    total_value: Decimal
    remaining_value: Decimal = Field(
        ...,
        description="Sum of pending bills"
    )
    percent_complete: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Share of the total value already paid"
    )
    leftover: Decimal = Field(
        ...,
        description="Income (monthly + extra) minus total value"
    )
