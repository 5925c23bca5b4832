from typing import Dict, Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select

from app.core.config import AUTO_MONTHLY_RESET
from app.core.context import UserContext
from app.core.security import get_current_context
from app.database import get_session
from app.models.budget import Budget
from app.models.savings_goal import SavingsGoal
from app.schemas.budget import (
    AllocationCheckRead,
    AllocationCheckRequest,
    BudgetCreate,
    BudgetListResponse,
    BudgetRead,
    BudgetSpendRead,
    BudgetSummaryRead,
    BudgetUpdate,
    ResetCheckRead,
    TransferResultRead,
)
from app.services import ledger
from app.services.budget_store import BudgetStore
from app.services.reconciliation import check_and_reset_user_budgets, process_monthly_transfers

router = APIRouter(prefix="/budgets", tags=["budgets"])


def get_budget_store(
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
) -> BudgetStore:
    return BudgetStore(session, context)


def _goal_names(store: BudgetStore) -> Dict[int, str]:
    goals = store.session.exec(select(SavingsGoal).where(SavingsGoal.user_id == store.context.user_id)).all()
    return {g.id: g.name for g in goals}


def _to_read(budget: Budget, goal_names: Dict[int, str]) -> BudgetRead:
    read = BudgetRead.model_validate(budget, from_attributes=True)
    read.linked_goal_name = goal_names.get(budget.linked_savings_goal_id)
    return read


def _budget_list(store: BudgetStore, message: Optional[str] = None) -> BudgetListResponse:
    # store.budgets was re-read right after the write
    names = _goal_names(store)
    return BudgetListResponse(budgets=[_to_read(b, names) for b in store.budgets], message=message)


@router.get("", response_model=BudgetListResponse)
@router.get("/", response_model=BudgetListResponse)
def list_budgets(store: BudgetStore = Depends(get_budget_store)):
    message = None
    if AUTO_MONTHLY_RESET:
        check = check_and_reset_user_budgets(store.session, store.context)
        if check.reset_occurred:
            message = f"Monthly reset applied to {check.affected_count} budget(s)"
    store.list_budgets()
    return _budget_list(store, message)


@router.post("", response_model=BudgetListResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=BudgetListResponse, status_code=status.HTTP_201_CREATED)
def create_budget(data: BudgetCreate, store: BudgetStore = Depends(get_budget_store)):
    store.create_budget(
        data.name,
        data.expense_allocation,
        data.savings_allocation,
        description=data.description,
        linked_goal_id=data.linked_savings_goal_id,
    )
    return _budget_list(store, f"{data.name} budget created successfully")


@router.post("/validate-allocation", response_model=AllocationCheckRead)
def validate_allocation(data: AllocationCheckRequest, store: BudgetStore = Depends(get_budget_store)):
    check = store.validate_allocation(
        data.expense_allocation,
        data.savings_allocation,
        exclude_budget_id=data.exclude_budget_id,
    )
    return AllocationCheckRead(is_valid=check.is_valid, remaining=check.remaining, exceeded_by=check.exceeded_by)


@router.get("/summary", response_model=BudgetSummaryRead)
def get_budget_summary(store: BudgetStore = Depends(get_budget_store)):
    period = store.current_period()
    budgets = store.list_budgets()
    transactions = store.period_transactions(period)
    budget_totals = ledger.totals(budgets, ledger.monthly_income(transactions, period))

    names = {b.id: b.name for b in budgets}
    spent = ledger.budget_spend_totals(transactions, period)

    return BudgetSummaryRead(
        **budget_totals.as_dict(),
        period_start=period.start,
        period_end=period.end,
        spent_by_budget=[
            BudgetSpendRead(budget_id=budget_id, budget_name=names.get(budget_id), spent=amount)
            for budget_id, amount in sorted(spent.items(), key=lambda item: item[1], reverse=True)
        ],
    )


@router.post("/process-monthly-transfers", response_model=TransferResultRead)
def run_monthly_transfers(store: BudgetStore = Depends(get_budget_store)):
    result = process_monthly_transfers(store.session, store.context)
    return TransferResultRead(
        transfers_count=result.transfers_count,
        total_transferred=result.total_transferred,
        budgets_reset=result.budgets_reset,
        message=result.message,
    )


@router.post("/check-reset", response_model=ResetCheckRead)
def check_reset(store: BudgetStore = Depends(get_budget_store)):
    check = check_and_reset_user_budgets(store.session, store.context)
    return ResetCheckRead(affected_count=check.affected_count, reset_occurred=check.reset_occurred)


@router.get("/{budget_id}", response_model=BudgetRead)
def get_budget(budget_id: int, store: BudgetStore = Depends(get_budget_store)):
    return _to_read(store.get_budget(budget_id), _goal_names(store))


@router.put("/{budget_id}", response_model=BudgetListResponse)
def update_budget(budget_id: int, data: BudgetUpdate, store: BudgetStore = Depends(get_budget_store)):
    store.update_budget(budget_id, data.model_dump(exclude_unset=True))
    return _budget_list(store, "Budget updated successfully")


@router.delete("/{budget_id}", response_model=BudgetListResponse)
def delete_budget(budget_id: int, store: BudgetStore = Depends(get_budget_store)):
    name = store.delete_budget(budget_id)
    return _budget_list(store, f"{name} has been deleted")
