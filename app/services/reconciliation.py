"""
Monthly reconciliation: move each budget's savings allocation into its linked
goal, zero the spend counter and stamp ``last_reset``.

A budget is pending when ``last_reset`` is empty or falls outside the current
calendar month in the user's timezone. The whole batch for a user is one
database transaction; any failure rolls everything back.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from sqlmodel import Session, select

from app.core.context import UserContext
from app.core.errors import ReconciliationError
from app.models.budget import Budget
from app.models.enums import ContributionSource
from app.services import ledger
from app.services.goals import apply_contribution, find_goal

logger = logging.getLogger(__name__)


@dataclass
class TransferResult:
    transfers_count: int = 0
    total_transferred: float = 0.0
    budgets_reset: int = 0

    @property
    def message(self) -> str:
        if self.transfers_count == 0:
            return "No transfers needed"
        return (
            f"Transferred ${self.total_transferred:,.2f} to savings goals "
            f"across {self.transfers_count} budget(s)."
        )


@dataclass
class ResetCheck:
    affected_count: int
    reset_occurred: bool


def is_pending(budget: Budget, period: ledger.DateRange) -> bool:
    return budget.last_reset is None or not period.contains(budget.last_reset)


def is_due_for_automatic_reset(budget: Budget, period: ledger.DateRange, tz: Optional[str] = None) -> bool:
    """A month boundary has passed since the budget was last reset (or created)."""
    reference = budget.last_reset
    if reference is None and budget.created_at:
        # created_at is naive UTC; the period is in the user's local days
        reference = ledger.to_local_day(budget.created_at, tz)
    return reference is not None and reference < period.start


def _user_budgets(session: Session, context: UserContext) -> List[Budget]:
    return list(
        session.exec(select(Budget).where(Budget.user_id == context.user_id).order_by(Budget.id)).all()
    )


def pending_budgets(session: Session, context: UserContext, today: date) -> List[Budget]:
    period = ledger.get_date_range_for_period("month", today)
    return [b for b in _user_budgets(session, context) if is_pending(b, period)]


def _reconcile_budget(session: Session, context: UserContext, budget: Budget, today: date) -> float:
    transferred = 0.0
    savings = float(budget.savings_allocation or 0)

    if savings > 0 and budget.linked_savings_goal_id is not None:
        goal = find_goal(session, context, budget.linked_savings_goal_id)
        if goal is None:
            logger.info(
                "Budget %s links to missing goal %s, skipping transfer",
                budget.id, budget.linked_savings_goal_id,
            )
        else:
            apply_contribution(session, context, goal, savings, ContributionSource.monthly_transfer)
            transferred = savings

    budget.expense_spent = 0.0
    budget.last_reset = today
    budget.updated_at = datetime.utcnow()
    session.add(budget)
    return transferred


def process_monthly_transfers(
    session: Session,
    context: UserContext,
    today: Optional[date] = None,
) -> TransferResult:
    today = today or ledger.local_today(context.timezone)
    result = TransferResult()

    try:
        for budget in pending_budgets(session, context, today):
            transferred = _reconcile_budget(session, context, budget, today)
            result.budgets_reset += 1
            if transferred > 0:
                result.transfers_count += 1
                result.total_transferred = round(result.total_transferred + transferred, 2)
        session.commit()
    except Exception as exc:
        session.rollback()
        logger.exception("Monthly transfers failed for user %s", context.user_id)
        raise ReconciliationError(str(exc)) from exc

    logger.info(
        "Monthly reconciliation for user %s (%s): %d reset, %d transfers, %.2f moved",
        context.user_id, today.isoformat(),
        result.budgets_reset, result.transfers_count, result.total_transferred,
    )
    return result


def check_and_reset_user_budgets(
    session: Session,
    context: UserContext,
    today: Optional[date] = None,
) -> ResetCheck:
    """Run the reconciliation once a month boundary has passed for some budget."""
    today = today or ledger.local_today(context.timezone)
    period = ledger.get_date_range_for_period("month", today)
    if not any(is_due_for_automatic_reset(b, period, context.timezone) for b in _user_budgets(session, context)):
        return ResetCheck(affected_count=0, reset_occurred=False)

    result = process_monthly_transfers(session, context, today)
    return ResetCheck(affected_count=result.budgets_reset, reset_occurred=result.budgets_reset > 0)
