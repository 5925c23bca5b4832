from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from app.core.context import UserContext
from app.core.security import get_current_context
from app.database import get_session
from app.models.enums import ContributionSource, GoalStatus
from app.models.goal_progress import GoalProgressHistory
from app.models.savings_goal import SavingsGoal
from app.schemas.savings_goal import (
    AddFundsRequest,
    GoalProgressRead,
    SavingsGoalCreate,
    SavingsGoalRead,
    SavingsGoalUpdate,
)
from app.services.goals import add_funds, list_goals, record_progress, require_goal

router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", response_model=SavingsGoalRead, status_code=201)
@router.post("/", response_model=SavingsGoalRead, status_code=201)
def create_goal(
    goal_data: SavingsGoalCreate,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    goal = SavingsGoal(**goal_data.model_dump(), user_id=context.user_id)
    if goal.current_amount >= goal.target_amount:
        goal.status = GoalStatus.completed
    session.add(goal)
    session.commit()
    session.refresh(goal)
    return goal


@router.get("", response_model=List[SavingsGoalRead])
@router.get("/", response_model=List[SavingsGoalRead])
def get_goals(
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
    status: Optional[GoalStatus] = Query(None),
):
    return list_goals(session, context, status)


@router.put("/{goal_id}", response_model=SavingsGoalRead)
def update_goal(
    goal_id: int,
    goal_data: SavingsGoalUpdate,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    goal = require_goal(session, context, goal_id)
    previous_amount = goal.current_amount

    for field, value in goal_data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(goal, field, value)
    goal.updated_at = datetime.utcnow()
    session.add(goal)

    # editing the balance upward counts as a contribution
    if goal.current_amount > previous_amount:
        record_progress(session, context, goal, goal.current_amount - previous_amount, ContributionSource.user)

    session.commit()
    session.refresh(goal)
    return goal


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: int,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    goal = require_goal(session, context, goal_id)
    # budgets linking to this goal keep a dangling id; reconciliation skips them
    session.delete(goal)
    session.commit()
    return {"message": "Savings goal deleted"}


@router.post("/{goal_id}/add-funds", response_model=SavingsGoalRead)
def add_funds_to_goal(
    goal_id: int,
    data: AddFundsRequest,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    goal = require_goal(session, context, goal_id)
    return add_funds(session, context, goal, data.amount, ContributionSource.user)


@router.get("/{goal_id}/history", response_model=List[GoalProgressRead])
def get_goal_history(
    goal_id: int,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    require_goal(session, context, goal_id)
    return session.exec(
        select(GoalProgressHistory)
        .where(GoalProgressHistory.goal_id == goal_id, GoalProgressHistory.user_id == context.user_id)
        .order_by(GoalProgressHistory.recorded_at, GoalProgressHistory.id)
    ).all()
