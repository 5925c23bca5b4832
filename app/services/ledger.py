"""
Ledger reader: pure aggregations over a user's transactions and budgets.

Nothing here touches the database; callers pass the rows they already read.
Periods are calendar windows expressed as inclusive local dates.
"""
import calendar
from collections import defaultdict
from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, Literal, Optional
from zoneinfo import ZoneInfo

from app.core.context import resolve_timezone
from app.models.enums import TransactionType

Period = Literal["week", "month", "semester", "year"]


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def contains(self, d) -> bool:
        if isinstance(d, datetime):
            d = d.date()
        return self.start <= d <= self.end


@dataclass
class BudgetTotals:
    monthly_income: float
    total_expense_allocation: float
    total_savings_allocation: float
    total_allocation: float
    total_expense_spent: float
    remaining_to_allocate: float
    is_over_allocated: bool

    def as_dict(self) -> dict:
        return asdict(self)


def to_local_day(dt: datetime, tz: Optional[str] = None) -> date:
    """Local calendar day of a UTC timestamp in the given IANA zone."""
    # naive datetimes are treated as UTC, same as the stored timestamps
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(ZoneInfo(resolve_timezone(tz))).date()


def local_today(tz: Optional[str] = None, now: Optional[datetime] = None) -> date:
    """Today's date in the given IANA zone (unknown zones use the default)."""
    return to_local_day(now or datetime.now(timezone.utc), tz)


def _month_start(d: date) -> date:
    return d.replace(day=1)


def _month_end(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def _add_months(d: date, months: int) -> date:
    month_index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(month_index, 12)
    day = min(d.day, calendar.monthrange(year, month + 1)[1])
    return date(year, month + 1, day)


def get_date_range_for_period(period: Period, reference_date: Optional[date] = None) -> DateRange:
    today = reference_date or date.today()

    if period == "week":
        # weeks start on Sunday
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return DateRange(start, start + timedelta(days=6))
    if period == "semester":
        return DateRange(_month_start(_add_months(today, -5)), _month_end(today))
    if period == "year":
        return DateRange(date(today.year, 1, 1), _month_end(today))
    return DateRange(_month_start(today), _month_end(today))


def get_previous_period_range(period: Period, reference_date: Optional[date] = None) -> DateRange:
    today = reference_date or date.today()

    if period == "week":
        return get_date_range_for_period("week", today - timedelta(days=7))
    if period == "semester":
        prev_end = _add_months(_month_start(today), -6)
        return DateRange(_month_start(_add_months(prev_end, -5)), _month_end(prev_end))
    if period == "year":
        return DateRange(date(today.year - 1, 1, 1), date(today.year - 1, 12, 31))
    return get_date_range_for_period("month", _add_months(_month_start(today), -1))


def is_date_in_range(d, period_range: DateRange) -> bool:
    return period_range.contains(d)


def current_month_range(tz: Optional[str] = None, today: Optional[date] = None) -> DateRange:
    return get_date_range_for_period("month", today or local_today(tz))


def monthly_income(transactions: Iterable, period_range: DateRange) -> float:
    return sum(
        float(t.amount)
        for t in transactions
        if t.type == TransactionType.income and period_range.contains(t.date)
    )


def budget_spend_totals(transactions: Iterable, period_range: DateRange) -> Dict[int, float]:
    """Expense totals keyed by budget_id. Untagged expenses are left out."""
    spent: Dict[int, float] = defaultdict(float)
    for t in transactions:
        if t.type != TransactionType.expense or t.budget_id is None:
            continue
        if period_range.contains(t.date):
            spent[t.budget_id] += float(t.amount)
    return dict(spent)


def totals(budgets: Iterable, income: float = 0.0) -> BudgetTotals:
    budgets = list(budgets)
    total_expense_allocation = sum(float(b.expense_allocation) for b in budgets)
    total_savings_allocation = sum(float(b.savings_allocation) for b in budgets)
    total_allocation = round(total_expense_allocation + total_savings_allocation, 2)
    total_expense_spent = sum(float(b.expense_spent) for b in budgets)
    remaining_to_allocate = round(income - total_allocation, 2)

    return BudgetTotals(
        monthly_income=income,
        total_expense_allocation=total_expense_allocation,
        total_savings_allocation=total_savings_allocation,
        total_allocation=total_allocation,
        total_expense_spent=total_expense_spent,
        remaining_to_allocate=remaining_to_allocate,
        is_over_allocated=remaining_to_allocate < 0,
    )
