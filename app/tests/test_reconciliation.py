"""
Tests for the monthly transfer and reset job.
"""
from datetime import date, datetime, timedelta

import pytest
from sqlmodel import select

from app.core.errors import ReconciliationError
from app.models.budget import Budget
from app.models.enums import ContributionSource, GoalStatus
from app.models.goal_progress import GoalProgressHistory
from app.models.savings_goal import SavingsGoal
from app.services import ledger, reconciliation
from app.services.reconciliation import check_and_reset_user_budgets, process_monthly_transfers


@pytest.fixture
def last_month(today):
    return ledger.get_previous_period_range("month", today).start


def test_savings_move_into_linked_goal(session, context, today, add_budget, add_goal):
    goal = add_goal("Emergency Fund", 1000, current=300)
    budget = add_budget("Savings Plan", 0, 150, expense_spent=42.5, linked_savings_goal_id=goal.id)

    result = process_monthly_transfers(session, context, today)

    assert result.transfers_count == 1
    assert result.total_transferred == pytest.approx(150)
    assert result.budgets_reset == 1
    assert result.message == "Transferred $150.00 to savings goals across 1 budget(s)."

    session.refresh(goal)
    session.refresh(budget)
    assert goal.current_amount == pytest.approx(450)
    assert budget.expense_spent == 0
    assert budget.last_reset == today

    history = session.exec(select(GoalProgressHistory).where(GoalProgressHistory.goal_id == goal.id)).all()
    assert len(history) == 1
    assert history[0].added_by == ContributionSource.monthly_transfer
    assert history[0].added_amount == pytest.approx(150)
    assert history[0].amount == pytest.approx(450)


def test_second_run_in_same_month_is_a_no_op(session, context, today, add_budget, add_goal):
    goal = add_goal("Emergency Fund", 1000, current=300)
    add_budget("Savings Plan", 0, 150, linked_savings_goal_id=goal.id)

    process_monthly_transfers(session, context, today)
    second = process_monthly_transfers(session, context, today)

    assert second.transfers_count == 0
    assert second.budgets_reset == 0
    assert second.message == "No transfers needed"
    session.refresh(goal)
    assert goal.current_amount == pytest.approx(450)


def test_budget_reset_last_month_is_pending(session, context, today, last_month, add_budget, add_goal):
    goal = add_goal("Laptop", 2000)
    stale = add_budget("Laptop Fund", 0, 100, last_reset=last_month, linked_savings_goal_id=goal.id)
    fresh = add_budget("Rent", 900, 0, last_reset=today, expense_spent=900)

    result = process_monthly_transfers(session, context, today)

    assert result.budgets_reset == 1
    session.refresh(stale)
    session.refresh(fresh)
    assert stale.last_reset == today
    assert fresh.expense_spent == 900


def test_budget_without_savings_or_goal_is_only_reset(session, context, today, add_budget):
    budget = add_budget("Groceries", 300, 0, expense_spent=120)

    result = process_monthly_transfers(session, context, today)

    assert result.transfers_count == 0
    assert result.budgets_reset == 1
    session.refresh(budget)
    assert budget.expense_spent == 0
    assert budget.last_reset == today


def test_dangling_goal_link_is_skipped(session, context, today, add_budget):
    budget = add_budget("Old Plan", 0, 75, expense_spent=10, linked_savings_goal_id=9999)

    result = process_monthly_transfers(session, context, today)

    assert result.transfers_count == 0
    assert result.budgets_reset == 1
    session.refresh(budget)
    assert budget.expense_spent == 0
    assert budget.linked_savings_goal_id == 9999


def test_reaching_target_completes_goal(session, context, today, add_budget, add_goal):
    goal = add_goal("Bike", 400, current=300)
    add_budget("Bike Fund", 0, 150, linked_savings_goal_id=goal.id)

    process_monthly_transfers(session, context, today)

    session.refresh(goal)
    assert goal.status == GoalStatus.completed


def test_failure_rolls_back_the_whole_batch(session, context, today, add_budget, add_goal, monkeypatch):
    first_goal = add_goal("Emergency Fund", 1000, current=300)
    second_goal = add_goal("Trip", 1000, current=50)
    first = add_budget("Savings Plan", 0, 150, expense_spent=20, linked_savings_goal_id=first_goal.id)
    second = add_budget("Trip Fund", 0, 80, linked_savings_goal_id=second_goal.id)
    first_id, second_id = first.id, second.id

    real_apply = reconciliation.apply_contribution
    calls = []

    def flaky_apply(*args, **kwargs):
        calls.append(args)
        if len(calls) == 2:
            raise RuntimeError("disk full")
        return real_apply(*args, **kwargs)

    monkeypatch.setattr(reconciliation, "apply_contribution", flaky_apply)

    with pytest.raises(ReconciliationError) as exc_info:
        process_monthly_transfers(session, context, today)
    assert exc_info.value.message == "Error processing transfers: disk full"

    session.expire_all()
    assert session.get(SavingsGoal, first_goal.id).current_amount == pytest.approx(300)
    assert session.get(SavingsGoal, second_goal.id).current_amount == pytest.approx(50)
    assert session.get(Budget, first_id).expense_spent == pytest.approx(20)
    assert session.get(Budget, first_id).last_reset is None
    assert session.get(Budget, second_id).last_reset is None
    assert session.exec(select(GoalProgressHistory)).all() == []


def test_automatic_reset_waits_for_a_month_boundary(session, context, today, add_budget):
    add_budget("Groceries", 300, 0, expense_spent=80)

    check = check_and_reset_user_budgets(session, context, today)

    assert not check.reset_occurred
    assert check.affected_count == 0


def test_automatic_reset_runs_after_month_boundary(session, context, today, last_month, add_budget, add_goal):
    goal = add_goal("Emergency Fund", 1000, current=300)
    created = datetime.combine(last_month, datetime.min.time()) + timedelta(hours=12)
    budget = add_budget(
        "Savings Plan", 0, 150, expense_spent=80, linked_savings_goal_id=goal.id, created_at=created,
    )

    check = check_and_reset_user_budgets(session, context, today)

    assert check.reset_occurred
    assert check.affected_count == 1
    session.refresh(budget)
    session.refresh(goal)
    assert budget.expense_spent == 0
    assert goal.current_amount == pytest.approx(450)

    again = check_and_reset_user_budgets(session, context, today)
    assert not again.reset_occurred


def test_creation_on_last_local_evening_counts_as_previous_month(session, context, add_budget):
    # 20:00 on October 31st in Chicago, already November 1st in UTC
    budget = add_budget("Groceries", 300, 0, expense_spent=250, created_at=datetime(2026, 11, 1, 1, 0))

    check = check_and_reset_user_budgets(session, context, date(2026, 11, 15))

    assert check.reset_occurred
    session.refresh(budget)
    assert budget.expense_spent == 0
    assert budget.last_reset == date(2026, 11, 15)


def test_creation_early_in_local_month_is_not_due(session, context, add_budget):
    add_budget("Groceries", 300, 0, expense_spent=250, created_at=datetime(2026, 11, 1, 12, 0))

    check = check_and_reset_user_budgets(session, context, date(2026, 11, 15))

    assert not check.reset_occurred
