from typing import Optional
from uuid import UUID

from sqlmodel import Session, select

from app.models.budget import Budget
from app.models.enums import TransactionType


def update_budget_spent(session: Session, user_id: UUID, budget_id: Optional[int], amount_delta: float):
    """
    Move a budget's ``expense_spent`` by ``amount_delta``, never below zero.

    A missing budget (untagged or deleted) is ignored.
    """
    if budget_id is None:
        return None

    budget = session.exec(
        select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
    ).first()
    if not budget:
        return None

    budget.expense_spent = max(0.0, round(float(budget.expense_spent) + amount_delta, 2))
    session.add(budget)
    return budget


def spent_delta(tx_type: TransactionType, amount: float) -> float:
    return float(amount) if tx_type == TransactionType.expense else 0.0
