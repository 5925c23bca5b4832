"""
Tests for period windows and ledger aggregations.
"""
from datetime import date, datetime, timezone
from types import SimpleNamespace

from app.models.enums import TransactionType
from app.services import ledger


def _tx(type_, amount, on, budget_id=None):
    return SimpleNamespace(type=type_, amount=amount, date=on, budget_id=budget_id)


def _budget(id_, expense, savings, spent=0.0):
    return SimpleNamespace(id=id_, expense_allocation=expense, savings_allocation=savings, expense_spent=spent)


def test_week_starts_on_sunday():
    period = ledger.get_date_range_for_period("week", date(2024, 3, 13))
    assert period.start == date(2024, 3, 10)
    assert period.end == date(2024, 3, 16)


def test_month_range_covers_whole_month():
    period = ledger.get_date_range_for_period("month", date(2024, 2, 15))
    assert period == ledger.DateRange(date(2024, 2, 1), date(2024, 2, 29))


def test_semester_and_year_ranges():
    semester = ledger.get_date_range_for_period("semester", date(2024, 3, 5))
    assert semester == ledger.DateRange(date(2023, 10, 1), date(2024, 3, 31))

    year = ledger.get_date_range_for_period("year", date(2024, 3, 5))
    assert year == ledger.DateRange(date(2024, 1, 1), date(2024, 3, 31))


def test_previous_month_crosses_year_boundary():
    previous = ledger.get_previous_period_range("month", date(2024, 1, 20))
    assert previous == ledger.DateRange(date(2023, 12, 1), date(2023, 12, 31))


def test_local_today_uses_user_timezone():
    # 03:30 UTC on March 1st is still February 29th in Chicago
    now = datetime(2024, 3, 1, 3, 30, tzinfo=timezone.utc)
    assert ledger.local_today("America/Chicago", now) == date(2024, 2, 29)
    assert ledger.local_today("Europe/Berlin", now) == date(2024, 3, 1)


def test_local_today_falls_back_on_unknown_timezone():
    now = datetime(2024, 3, 1, 3, 30, tzinfo=timezone.utc)
    assert ledger.local_today("Mars/Olympus_Mons", now) == date(2024, 2, 29)


def test_is_date_in_range_accepts_datetimes():
    period = ledger.DateRange(date(2024, 5, 1), date(2024, 5, 31))
    assert ledger.is_date_in_range(datetime(2024, 5, 31, 23, 59), period)
    assert not ledger.is_date_in_range(date(2024, 6, 1), period)


def test_monthly_income_only_counts_income_in_range():
    period = ledger.get_date_range_for_period("month", date(2024, 5, 10))
    transactions = [
        _tx(TransactionType.income, 1500, date(2024, 5, 1)),
        _tx(TransactionType.income, 500, date(2024, 5, 31)),
        _tx(TransactionType.income, 999, date(2024, 4, 30)),
        _tx(TransactionType.expense, 200, date(2024, 5, 3)),
    ]
    assert ledger.monthly_income(transactions, period) == 2000


def test_budget_spend_totals_skips_untagged_expenses():
    period = ledger.get_date_range_for_period("month", date(2024, 5, 10))
    transactions = [
        _tx(TransactionType.expense, 40, date(2024, 5, 2), budget_id=1),
        _tx(TransactionType.expense, 60, date(2024, 5, 9), budget_id=1),
        _tx(TransactionType.expense, 25, date(2024, 5, 9), budget_id=2),
        _tx(TransactionType.expense, 80, date(2024, 5, 9)),
        _tx(TransactionType.expense, 70, date(2024, 4, 9), budget_id=2),
    ]
    assert ledger.budget_spend_totals(transactions, period) == {1: 100, 2: 25}


def test_totals_flags_over_allocation():
    budgets = [_budget(1, 1200, 0, spent=300), _budget(2, 500, 400, spent=50)]
    result = ledger.totals(budgets, 2000)

    assert result.total_expense_allocation == 1700
    assert result.total_savings_allocation == 400
    assert result.total_allocation == 2100
    assert result.total_expense_spent == 350
    assert result.remaining_to_allocate == -100
    assert result.is_over_allocated


def test_totals_with_no_budgets():
    result = ledger.totals([], 0.0)
    assert result.total_allocation == 0
    assert result.remaining_to_allocate == 0
    assert not result.is_over_allocated


def test_to_local_day_treats_naive_values_as_utc():
    # 01:00 UTC on November 1st is still October 31st in Chicago
    assert ledger.to_local_day(datetime(2026, 11, 1, 1, 0), "America/Chicago") == date(2026, 10, 31)
    aware = datetime(2026, 11, 1, 1, 0, tzinfo=timezone.utc)
    assert ledger.to_local_day(aware, "Asia/Tokyo") == date(2026, 11, 1)
