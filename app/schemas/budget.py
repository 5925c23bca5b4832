# app/schemas/budget.py

from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Optional

Money = Annotated[float, Field(ge=0, le=10_000_000)]

class BudgetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    expense_allocation: Money = 0.0
    savings_allocation: Money = 0.0
    description: Optional[str] = Field(default=None, max_length=500)
    linked_savings_goal_id: Optional[int] = None

class BudgetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    expense_allocation: Optional[Money] = None
    savings_allocation: Optional[Money] = None
    description: Optional[str] = Field(default=None, max_length=500)
    linked_savings_goal_id: Optional[int] = None

class BudgetRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    expense_allocation: float
    savings_allocation: float
    expense_spent: float
    linked_savings_goal_id: Optional[int] = None
    linked_goal_name: Optional[str] = None
    last_reset: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class BudgetListResponse(BaseModel):
    budgets: List[BudgetRead]
    message: Optional[str] = None

class AllocationCheckRequest(BaseModel):
    expense_allocation: Money = 0.0
    savings_allocation: Money = 0.0
    exclude_budget_id: Optional[int] = None

class AllocationCheckRead(BaseModel):
    is_valid: bool
    remaining: float
    exceeded_by: float

class BudgetTotalsRead(BaseModel):
    monthly_income: float
    total_expense_allocation: float
    total_savings_allocation: float
    total_allocation: float
    total_expense_spent: float
    remaining_to_allocate: float
    is_over_allocated: bool

class BudgetSummaryRead(BudgetTotalsRead):
    period_start: date
    period_end: date
    spent_by_budget: List["BudgetSpendRead"] = []

class BudgetSpendRead(BaseModel):
    budget_id: int
    budget_name: Optional[str] = None  # None when the budget was deleted
    spent: float

class TransferResultRead(BaseModel):
    transfers_count: int
    total_transferred: float
    budgets_reset: int
    message: str

class ResetCheckRead(BaseModel):
    affected_count: int
    reset_occurred: bool

BudgetSummaryRead.model_rebuild()
