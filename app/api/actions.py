from fastapi import APIRouter, Depends

from app.api.budgets import get_budget_store
from app.models.enums import ContributionSource
from app.schemas.actions import ActionRequest, ActionResult
from app.services.actions import dispatch_action
from app.services.budget_store import BudgetStore

router = APIRouter(prefix="/actions", tags=["actions"])


@router.post("", response_model=ActionResult)
@router.post("/", response_model=ActionResult)
def run_action(request: ActionRequest, store: BudgetStore = Depends(get_budget_store)):
    """Apply one typed budget/goal action through the regular validated operations."""
    return dispatch_action(store, request.action, ContributionSource(request.origin))
