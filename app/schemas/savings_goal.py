# app/schemas/savings_goal.py

from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Optional

from app.models.enums import ContributionSource, GoalStatus

class SavingsGoalCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    target_amount: float = Field(..., gt=0, le=10_000_000)
    current_amount: float = Field(default=0.0, ge=0)
    description: Optional[str] = None
    target_date: Optional[date] = None

class SavingsGoalUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    target_amount: Optional[float] = Field(default=None, gt=0, le=10_000_000)
    current_amount: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    target_date: Optional[date] = None
    status: Optional[GoalStatus] = None

class SavingsGoalRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    current_amount: float
    target_amount: float
    target_date: Optional[date] = None
    status: GoalStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class AddFundsRequest(BaseModel):
    amount: Annotated[float, Field(gt=0, le=10_000_000, description="Amount to add")]

class GoalProgressRead(BaseModel):
    id: int
    goal_id: int
    goal_name: Optional[str] = None
    amount: float
    added_amount: Optional[float] = None
    added_by: ContributionSource
    recorded_at: datetime

    model_config = ConfigDict(from_attributes=True)
