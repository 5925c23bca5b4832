"""
Typed commands an assistant (or any client) can submit.

They go through the same validated budget and goal operations as direct
user edits.
"""
from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional, Union

from app.schemas.budget import BudgetRead
from app.schemas.savings_goal import SavingsGoalRead


class CreateBudget(BaseModel):
    type: Literal["create_budget"] = "create_budget"
    name: str = Field(..., min_length=1, max_length=100)
    expense_allocation: float = Field(default=0.0, ge=0)
    savings_allocation: float = Field(default=0.0, ge=0)
    linked_goal_name: Optional[str] = None
    description: Optional[str] = None


class EditBudget(BaseModel):
    type: Literal["edit_budget"] = "edit_budget"
    budget_id: int
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    expense_allocation: Optional[float] = Field(default=None, ge=0)
    savings_allocation: Optional[float] = Field(default=None, ge=0)
    # None leaves the link alone, "" or "none" clears it
    linked_goal_name: Optional[str] = None
    description: Optional[str] = None


class DeleteBudget(BaseModel):
    type: Literal["delete_budget"] = "delete_budget"
    budget_id: int
    name: Optional[str] = None


class LinkGoalToBudget(BaseModel):
    type: Literal["link_goal_to_budget"] = "link_goal_to_budget"
    budget_name: str
    goal_name: str


class AddFundsToGoal(BaseModel):
    type: Literal["add_funds_to_goal"] = "add_funds_to_goal"
    goal_name: str
    amount: float = Field(..., gt=0)


BudgetAction = Annotated[
    Union[CreateBudget, EditBudget, DeleteBudget, LinkGoalToBudget, AddFundsToGoal],
    Field(discriminator="type"),
]


class ActionRequest(BaseModel):
    action: BudgetAction
    origin: Literal["user", "ai"] = "ai"


class ActionResult(BaseModel):
    action: str
    message: str
    budget: Optional[BudgetRead] = None
    goal: Optional[SavingsGoalRead] = None
    budgets: List[BudgetRead] = []
