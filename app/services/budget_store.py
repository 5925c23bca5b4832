"""
Budget store: create, edit and delete budgets behind the allocation check.

Every successful write is committed and followed by a full re-read of the
user's budgets (``store.budgets``); nothing is patched in memory.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.core.context import UserContext
from app.core.errors import AllocationExceededError, BudgetNotFoundError, StoreError
from app.models.budget import Budget
from app.models.transaction import Transaction
from app.services import ledger
from app.services.allocation import AllocationCheck, validate_allocation
from app.services.goals import find_goal

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "name",
    "description",
    "expense_allocation",
    "savings_allocation",
    "linked_savings_goal_id",
}
ALLOCATION_FIELDS = {"expense_allocation", "savings_allocation"}


class BudgetStore:
    def __init__(self, session: Session, context: UserContext):
        self.session = session
        self.context = context
        self.budgets: List[Budget] = []

    # Reads

    def list_budgets(self) -> List[Budget]:
        try:
            self.budgets = list(
                self.session.exec(
                    select(Budget)
                    .where(Budget.user_id == self.context.user_id)
                    .order_by(Budget.created_at, Budget.id)
                ).all()
            )
        except SQLAlchemyError as exc:
            logger.exception("Could not load budgets")
            raise StoreError(str(exc)) from exc
        return self.budgets

    def refresh(self) -> List[Budget]:
        return self.list_budgets()

    def get_budget(self, budget_id: int) -> Budget:
        budget = self.session.exec(
            select(Budget).where(Budget.id == budget_id, Budget.user_id == self.context.user_id)
        ).first()
        if not budget:
            raise BudgetNotFoundError(budget_id)
        return budget

    def find_budget_by_name(self, name: str) -> Optional[Budget]:
        wanted = name.strip().lower()
        return next((b for b in self.list_budgets() if b.name.lower() == wanted), None)

    def current_period(self) -> ledger.DateRange:
        return ledger.current_month_range(self.context.timezone)

    def period_transactions(self, period: Optional[ledger.DateRange] = None) -> List[Transaction]:
        period = period or self.current_period()
        return list(
            self.session.exec(
                select(Transaction).where(
                    Transaction.user_id == self.context.user_id,
                    Transaction.date >= period.start,
                    Transaction.date <= period.end,
                )
            ).all()
        )

    def monthly_income(self) -> float:
        period = self.current_period()
        return ledger.monthly_income(self.period_transactions(period), period)

    def totals(self) -> ledger.BudgetTotals:
        return ledger.totals(self.list_budgets(), self.monthly_income())

    def get_goal_name(self, goal_id: Optional[int]) -> Optional[str]:
        goal = find_goal(self.session, self.context, goal_id)
        return goal.name if goal else None

    def validate_allocation(
        self,
        expense: float,
        savings: float,
        exclude_budget_id: Optional[int] = None,
    ) -> AllocationCheck:
        return validate_allocation(
            self.list_budgets(),
            self.monthly_income(),
            expense,
            savings,
            exclude_budget_id=exclude_budget_id,
        )

    # Writes

    def _commit(self, action: str):
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Error %s budget", action)
            raise StoreError(str(exc)) from exc

    def _resolve_goal_link(self, goal_id: Optional[int]) -> Optional[int]:
        """Keep a goal link only if it points at one of the user's goals."""
        if goal_id is None:
            return None
        if find_goal(self.session, self.context, goal_id) is None:
            logger.debug("Ignoring link to missing goal %s", goal_id)
            return None
        return goal_id

    def _check_or_raise(self, expense: float, savings: float, exclude_budget_id: Optional[int] = None):
        check = self.validate_allocation(expense, savings, exclude_budget_id)
        if not check.is_valid:
            logger.info(
                "Rejected allocation (%.2f, %.2f) for user %s: exceeds income by %.2f",
                expense, savings, self.context.user_id, check.exceeded_by,
            )
            raise AllocationExceededError(check.exceeded_by, check.remaining)
        return check

    def create_budget(
        self,
        name: str,
        expense_allocation: float,
        savings_allocation: float,
        description: Optional[str] = None,
        linked_goal_id: Optional[int] = None,
    ) -> Budget:
        expense_allocation = round(float(expense_allocation), 2)
        savings_allocation = round(float(savings_allocation), 2)
        self._check_or_raise(expense_allocation, savings_allocation)

        budget = Budget(
            user_id=self.context.user_id,
            name=name,
            description=description or None,
            expense_allocation=expense_allocation,
            savings_allocation=savings_allocation,
            expense_spent=0.0,
            linked_savings_goal_id=self._resolve_goal_link(linked_goal_id),
        )
        self.session.add(budget)
        self._commit("creating")
        self.session.refresh(budget)
        logger.info("Created budget %s (%s)", budget.id, budget.name)

        self.refresh()
        return budget

    def update_budget(self, budget_id: int, updates: Dict[str, Any]) -> Budget:
        budget = self.get_budget(budget_id)
        updates = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
        if updates.get("name") is None:
            updates.pop("name", None)

        if ALLOCATION_FIELDS & updates.keys():
            expense = updates.get("expense_allocation")
            savings = updates.get("savings_allocation")
            # unspecified side of the pair keeps its current value
            expense = round(float(budget.expense_allocation if expense is None else expense), 2)
            savings = round(float(budget.savings_allocation if savings is None else savings), 2)
            self._check_or_raise(expense, savings, exclude_budget_id=budget.id)
            updates["expense_allocation"] = expense
            updates["savings_allocation"] = savings

        if "linked_savings_goal_id" in updates:
            updates["linked_savings_goal_id"] = self._resolve_goal_link(updates["linked_savings_goal_id"])

        for field, value in updates.items():
            setattr(budget, field, value)
        budget.updated_at = datetime.utcnow()

        self.session.add(budget)
        self._commit("updating")
        self.session.refresh(budget)
        logger.info("Updated budget %s: %s", budget.id, sorted(updates))

        self.refresh()
        return budget

    def delete_budget(self, budget_id: int) -> str:
        """Delete a budget and return its name."""
        budget = self.get_budget(budget_id)
        name = budget.name
        # transactions keep their budget_id; the reference simply dangles
        self.session.delete(budget)
        self._commit("deleting")
        logger.info("Deleted budget %s (%s)", budget_id, name)

        self.refresh()
        return name
