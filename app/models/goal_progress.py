from sqlmodel import SQLModel, Field
from uuid import UUID
from typing import Optional
from datetime import datetime

from app.models.enums import ContributionSource

class GoalProgressHistory(SQLModel, table=True):
    __tablename__ = "goal_progress_history"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    goal_id: int = Field(index=True)
    goal_name: Optional[str] = None
    amount: float  # goal balance after the change
    added_amount: Optional[float] = None
    added_by: ContributionSource = Field(default=ContributionSource.user)
    recorded_at: datetime = Field(default_factory=datetime.utcnow)
