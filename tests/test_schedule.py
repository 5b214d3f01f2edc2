"""
Tests for monthly installment expansion.
"""

import pytest
from datetime import date
from decimal import Decimal

from bill_tracker.models.bill import BillStatus, BillStub
from bill_tracker.schedule import (
    MAX_REPEAT_COUNT,
    RecurrenceCountError,
    add_months,
    expand_schedule,
    installment_title,
)


class TestAddMonths:
    """Tests for calendar month arithmetic."""

    def test_same_day_next_month(self):
        assert add_months(date(2024, 3, 15), 1) == date(2024, 4, 15)

    def test_clamps_to_leap_february(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_clamps_to_common_february(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_clamp_does_not_carry_over(self):
        """Each installment is computed from the start date, not the previous one."""
        assert add_months(date(2024, 1, 31), 2) == date(2024, 3, 31)

    def test_year_rollover(self):
        assert add_months(date(2024, 11, 10), 3) == date(2025, 2, 10)

    def test_zero_months(self):
        assert add_months(date(2024, 5, 5), 0) == date(2024, 5, 5)

    def test_last_representable_month(self):
        assert add_months(date(9999, 11, 30), 1) == date(9999, 12, 30)

    def test_past_year_9999(self):
        with pytest.raises(ValueError, match="9999"):
            add_months(date(9999, 12, 1), 1)


class TestInstallmentTitle:
    """Tests for installment titles."""

    def test_single_bill_keeps_title(self):
        assert installment_title("Rent", 0, 1) == "Rent"

    def test_numbered_titles(self):
        assert installment_title("TV", 0, 10) == "TV (1/10)"
        assert installment_title("TV", 9, 10) == "TV (10/10)"


class TestExpandSchedule:
    """Tests for expand_schedule."""

    @pytest.fixture
    def stub(self):
        return BillStub(title="Gym", value=Decimal("89.90"), due_date=date(2024, 1, 31))

    def test_single_bill(self, stub):
        bills = expand_schedule(stub)
        assert len(bills) == 1
        assert bills[0].title == "Gym"
        assert bills[0].due_date == date(2024, 1, 31)
        assert bills[0].status == BillStatus.PENDING
        assert bills[0].barcode is None

    def test_monthly_series(self, stub):
        bills = expand_schedule(stub, count=4)
        assert [b.title for b in bills] == ["Gym (1/4)", "Gym (2/4)", "Gym (3/4)", "Gym (4/4)"]
        assert [b.due_date for b in bills] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]
        assert all(b.value == Decimal("89.90") for b in bills)

    def test_ids_are_distinct(self, stub):
        bills = expand_schedule(stub, count=12)
        assert len({b.id for b in bills}) == 12

    def test_maximum_count(self, stub):
        bills = expand_schedule(stub, count=MAX_REPEAT_COUNT)
        assert len(bills) == MAX_REPEAT_COUNT
        assert bills[-1].due_date == date(2053, 12, 31)

    @pytest.mark.parametrize("count", [0, -1, MAX_REPEAT_COUNT + 1])
    def test_rejects_out_of_range(self, stub, count):
        with pytest.raises(RecurrenceCountError):
            expand_schedule(stub, count=count)

    def test_custom_limit(self, stub):
        with pytest.raises(RecurrenceCountError) as exc_info:
            expand_schedule(stub, count=13, max_count=12)
        assert exc_info.value.max_count == 12

    def test_series_past_year_9999(self):
        stub = BillStub(title="Lease", value=Decimal("10"), due_date=date(9999, 6, 1))
        with pytest.raises(ValueError, match="outside years"):
            expand_schedule(stub, count=12)

    def test_count_error_is_value_error(self, stub):
        with pytest.raises(ValueError):
            expand_schedule(stub, count=0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
