import logging
from typing import Optional

from app.core.errors import BudgetNotFoundError, GoalNotFoundError
from app.models.enums import ContributionSource
from app.schemas.actions import (
    ActionResult,
    AddFundsToGoal,
    BudgetAction,
    CreateBudget,
    DeleteBudget,
    EditBudget,
    LinkGoalToBudget,
)
from app.schemas.budget import BudgetRead
from app.schemas.savings_goal import SavingsGoalRead
from app.services.budget_store import BudgetStore
from app.services.goals import add_funds, find_goal_by_name

logger = logging.getLogger(__name__)

CLEAR_LINK_VALUES = {"", "none", "null"}


def _goal_id_for(store: BudgetStore, goal_name: Optional[str]) -> Optional[int]:
    goal = find_goal_by_name(store.session, store.context, goal_name)
    if goal_name and not goal:
        logger.info("No goal named %r, leaving the budget unlinked", goal_name)
    return goal.id if goal else None


def _budget_read(store: BudgetStore, budget) -> BudgetRead:
    read = BudgetRead.model_validate(budget, from_attributes=True)
    read.linked_goal_name = store.get_goal_name(budget.linked_savings_goal_id)
    return read


def _result(store: BudgetStore, action: str, message: str, budget=None, goal=None) -> ActionResult:
    return ActionResult(
        action=action,
        message=message,
        budget=_budget_read(store, budget) if budget is not None else None,
        goal=SavingsGoalRead.model_validate(goal, from_attributes=True) if goal is not None else None,
        budgets=[_budget_read(store, b) for b in store.budgets],
    )


def _create_budget(store: BudgetStore, action: CreateBudget, origin: ContributionSource) -> ActionResult:
    linked = None
    if action.linked_goal_name and action.linked_goal_name.strip().lower() not in CLEAR_LINK_VALUES:
        linked = _goal_id_for(store, action.linked_goal_name)

    budget = store.create_budget(
        action.name,
        action.expense_allocation,
        action.savings_allocation,
        description=action.description,
        linked_goal_id=linked,
    )
    return _result(store, action.type, f"{budget.name} budget created successfully", budget=budget)


def _edit_budget(store: BudgetStore, action: EditBudget, origin: ContributionSource) -> ActionResult:
    updates = action.model_dump(
        exclude_unset=True,
        include={"name", "expense_allocation", "savings_allocation", "description"},
    )
    if action.linked_goal_name is not None:
        if action.linked_goal_name.strip().lower() in CLEAR_LINK_VALUES:
            updates["linked_savings_goal_id"] = None
        else:
            updates["linked_savings_goal_id"] = _goal_id_for(store, action.linked_goal_name)

    budget = store.update_budget(action.budget_id, updates)
    return _result(store, action.type, "Budget updated successfully", budget=budget)


def _delete_budget(store: BudgetStore, action: DeleteBudget, origin: ContributionSource) -> ActionResult:
    name = store.delete_budget(action.budget_id)
    return _result(store, action.type, f"{name} has been deleted")


def _link_goal(store: BudgetStore, action: LinkGoalToBudget, origin: ContributionSource) -> ActionResult:
    goal = find_goal_by_name(store.session, store.context, action.goal_name)
    if not goal:
        raise GoalNotFoundError(action.goal_name)
    budget = store.find_budget_by_name(action.budget_name)
    if not budget:
        raise BudgetNotFoundError(action.budget_name)

    budget = store.update_budget(budget.id, {"linked_savings_goal_id": goal.id})
    return _result(store, action.type, f'Linked "{goal.name}" to "{budget.name}"', budget=budget, goal=goal)


def _add_funds(store: BudgetStore, action: AddFundsToGoal, origin: ContributionSource) -> ActionResult:
    goal = find_goal_by_name(store.session, store.context, action.goal_name)
    if not goal:
        raise GoalNotFoundError(action.goal_name)

    goal = add_funds(store.session, store.context, goal, action.amount, origin)
    store.refresh()
    return _result(store, action.type, f'Added ${action.amount:,.2f} to "{goal.name}"', goal=goal)


HANDLERS = {
    CreateBudget: _create_budget,
    EditBudget: _edit_budget,
    DeleteBudget: _delete_budget,
    LinkGoalToBudget: _link_goal,
    AddFundsToGoal: _add_funds,
}


def dispatch_action(
    store: BudgetStore,
    action: BudgetAction,
    origin: ContributionSource = ContributionSource.ai,
) -> ActionResult:
    handler = HANDLERS.get(type(action))
    if handler is None:
        raise ValueError(f"Unsupported action: {type(action).__name__}")

    logger.info("Dispatching %s from %s for user %s", action.type, origin.value, store.context.user_id)
    return handler(store, action, origin)
