"""Tests for the history grouping engine."""

from decimal import Decimal

from microspend.core.grouping import (
    date_section_label,
    group_expenses,
    total_amount,
)
from microspend.core.local_time import current_local_date, previous_local_date
from microspend.models.expense import Currency


TODAY = "2026-02-15"


class TestDateSectionLabel:
    """Tests for history section labels."""

    def test_today(self):
        """Test that today's key is labelled Today."""
        assert date_section_label(TODAY, today=TODAY) == "Today"

    def test_yesterday(self):
        """Test that the previous day is labelled Yesterday."""
        assert date_section_label("2026-02-14", today=TODAY) == "Yesterday"

    def test_other_date_is_formatted(self):
        """Test that older days get a calendar date."""
        assert date_section_label("2026-02-15", today="2026-03-01") == "Feb 15, 2026"

    def test_yesterday_across_year_boundary(self):
        """Test that Yesterday works on January 1st."""
        assert date_section_label("2025-12-31", today="2026-01-01") == "Yesterday"

    def test_defaults_to_system_clock(self):
        """Test that today comes from the system clock when not given."""
        today = current_local_date()
        assert date_section_label(today) == "Today"
        assert date_section_label(previous_local_date(today)) == "Yesterday"


class TestGroupExpenses:
    """Tests for grouping expenses by day."""

    def test_empty_input(self):
        """Test that no expenses gives no groups."""
        assert group_expenses([], today=TODAY) == []

    def test_today_and_yesterday_scenario(self, expense_factory):
        """Two today records and one yesterday record, in the real clock's today."""
        today = current_local_date()
        yesterday = previous_local_date(today)
        morning = expense_factory(f"{today}T09:00:00.000", amount=10)
        evening = expense_factory(f"{today}T18:00:00.000", amount=5)
        lunch = expense_factory(f"{yesterday}T12:00:00.000", amount=20)

        groups = group_expenses([morning, evening, lunch])

        assert [g.label for g in groups] == ["Today", "Yesterday"]
        assert groups[0].total == Decimal("15")
        assert groups[0].expenses == [morning, evening]
        assert groups[1].total == Decimal("20")
        assert groups[1].expenses == [lunch]

    def test_groups_sorted_newest_first(self, expense_factory):
        """Test that groups come newest day first with unique keys."""
        expenses = [
            expense_factory("2026-01-03T10:00:00.000"),
            expense_factory("2026-02-10T10:00:00.000"),
            expense_factory("2025-12-30T10:00:00.000"),
            expense_factory("2026-02-10T08:00:00.000"),
        ]
        groups = group_expenses(expenses, today=TODAY)

        keys = [g.date for g in groups]
        assert keys == ["2026-02-10", "2026-01-03", "2025-12-30"]
        assert len(set(keys)) == len(keys)

    def test_source_order_kept_within_group(self, expense_factory):
        """Expenses are not re-sorted by time inside a day."""
        late = expense_factory("2026-02-10T20:00:00.000", note="late")
        early = expense_factory("2026-02-10T07:00:00.000", note="early")
        middle = expense_factory("2026-02-10T12:00:00.000", note="middle")

        (group,) = group_expenses([late, early, middle], today=TODAY)
        assert [e.note for e in group.expenses] == ["late", "early", "middle"]

    def test_grouping_is_a_partition(self, expense_factory):
        """Test that every expense lands in exactly one matching group."""
        expenses = [
            expense_factory(f"2026-02-{day:02d}T{hour:02d}:00:00.000", amount=f"{day}.{hour}")
            for day in (3, 1, 2, 3, 1)
            for hour in (9, 17)
        ]
        groups = group_expenses(expenses, today=TODAY)

        flattened = [e for g in groups for e in g.expenses]
        assert sorted(e.id for e in flattened) == sorted(e.id for e in expenses)
        for group in groups:
            assert all(e.local_date == group.date for e in group.expenses)

    def test_totals_sum_to_overall_total(self, expense_factory):
        """Test that group totals add up to the overall total."""
        expenses = [
            expense_factory("2026-02-10T10:00:00.000", amount="0.10"),
            expense_factory("2026-02-10T11:00:00.000", amount="0.20"),
            expense_factory("2026-02-11T10:00:00.000", amount="3.333"),
            expense_factory("2026-02-12T10:00:00.000", amount="1000"),
        ]
        groups = group_expenses(expenses, today=TODAY)

        assert sum((g.total for g in groups), Decimal(0)) == total_amount(expenses)
        assert groups[-1].total == Decimal("0.30")

    def test_mixed_currencies_summed_numerically(self, expense_factory):
        """Test that mixed currencies are summed without conversion."""
        expenses = [
            expense_factory("2026-02-10T10:00:00.000", amount=5, currency=Currency.USD),
            expense_factory("2026-02-10T11:00:00.000", amount=100, currency=Currency.NPR),
        ]
        (group,) = group_expenses(expenses, today=TODAY)
        assert group.total == Decimal("105")

    def test_key_is_taken_verbatim_from_timestamp(self, expense_factory):
        """Just before midnight stays on its own day."""
        expense = expense_factory("2026-02-14T23:59:59.999")
        (group,) = group_expenses([expense], today=TODAY)
        assert group.date == "2026-02-14"
        assert group.label == "Yesterday"

    def test_older_dates_get_calendar_label(self, expense_factory):
        """Test the label of a day well in the past."""
        (group,) = group_expenses([expense_factory("2025-11-05T10:00:00.000")], today=TODAY)
        assert group.label == "Nov 5, 2025"


class TestTotalAmount:
    """Tests for summing amounts."""

    def test_empty(self):
        """Test that an empty list sums to zero."""
        assert total_amount([]) == Decimal(0)
