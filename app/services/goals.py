import logging
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, func, select

from app.core.context import UserContext
from app.core.errors import GoalNotFoundError
from app.models.enums import ContributionSource, GoalStatus
from app.models.goal_progress import GoalProgressHistory
from app.models.savings_goal import SavingsGoal

logger = logging.getLogger(__name__)


def find_goal(session: Session, context: UserContext, goal_id: Optional[int]) -> Optional[SavingsGoal]:
    """Resolve a possibly dangling goal reference; ``None`` when it no longer exists."""
    if goal_id is None:
        return None
    return session.exec(
        select(SavingsGoal).where(SavingsGoal.id == goal_id, SavingsGoal.user_id == context.user_id)
    ).first()


def require_goal(session: Session, context: UserContext, goal_id: int) -> SavingsGoal:
    goal = find_goal(session, context, goal_id)
    if not goal:
        raise GoalNotFoundError(goal_id)
    return goal


def find_goal_by_name(session: Session, context: UserContext, name: Optional[str]) -> Optional[SavingsGoal]:
    if not name or not name.strip():
        return None
    return session.exec(
        select(SavingsGoal).where(
            SavingsGoal.user_id == context.user_id,
            func.lower(SavingsGoal.name) == name.strip().lower(),
        )
    ).first()


def list_goals(session: Session, context: UserContext, status: Optional[GoalStatus] = None) -> List[SavingsGoal]:
    query = select(SavingsGoal).where(SavingsGoal.user_id == context.user_id)
    if status:
        query = query.where(SavingsGoal.status == status)
    return list(session.exec(query.order_by(SavingsGoal.created_at)).all())


def record_progress(
    session: Session,
    context: UserContext,
    goal: SavingsGoal,
    added_amount: float,
    added_by: ContributionSource,
) -> GoalProgressHistory:
    entry = GoalProgressHistory(
        user_id=context.user_id,
        goal_id=goal.id,
        goal_name=goal.name,
        amount=goal.current_amount,
        added_amount=added_amount,
        added_by=added_by,
    )
    session.add(entry)
    return entry


def apply_contribution(
    session: Session,
    context: UserContext,
    goal: SavingsGoal,
    amount: float,
    added_by: ContributionSource,
) -> SavingsGoal:
    """
    Add ``amount`` to the goal and log it in the progress history.

    Does not commit; the caller owns the transaction boundary.
    """
    goal.current_amount = round(float(goal.current_amount) + amount, 2)
    goal.updated_at = datetime.utcnow()
    if goal.status == GoalStatus.active and goal.current_amount >= goal.target_amount:
        goal.status = GoalStatus.completed
    session.add(goal)
    record_progress(session, context, goal, amount, added_by)
    return goal


def add_funds(
    session: Session,
    context: UserContext,
    goal: SavingsGoal,
    amount: float,
    added_by: ContributionSource = ContributionSource.user,
) -> SavingsGoal:
    apply_contribution(session, context, goal, amount, added_by)
    session.commit()
    session.refresh(goal)
    logger.info("Added %.2f to goal %s (%s)", amount, goal.id, added_by.value)
    return goal
