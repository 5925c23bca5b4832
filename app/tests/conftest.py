"""
Shared fixtures: an in-memory database per test, a registered user and an
authenticated client.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.context import UserContext
from app.core.security import create_access_token
from app.database import get_session
from app.main import app
from app.models.budget import Budget
from app.models.enums import TransactionType
from app.models.savings_goal import SavingsGoal
from app.models.transaction import Transaction
from app.models.user import User
from app.services import ledger

TIMEZONE = "America/Chicago"


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def user(session):
    user = User(email="student@example.com", hashed_password="not-a-real-hash", name="Sam", timezone=TIMEZONE)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def context(user):
    return UserContext(user_id=user.id, timezone=user.timezone)


@pytest.fixture
def today(context):
    return ledger.local_today(context.timezone)


@pytest.fixture
def client(session):
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user):
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def add_income(session, context, today):
    def _add(amount: float, on: date = None):
        tx = Transaction(
            user_id=context.user_id,
            type=TransactionType.income,
            amount=amount,
            category="salary",
            description="Paycheck",
            date=on or today,
        )
        session.add(tx)
        session.commit()
        return tx

    return _add


@pytest.fixture
def add_budget(session, context):
    def _add(name: str, expense: float = 0.0, savings: float = 0.0, **fields):
        budget = Budget(
            user_id=context.user_id,
            name=name,
            expense_allocation=expense,
            savings_allocation=savings,
            **fields,
        )
        session.add(budget)
        session.commit()
        session.refresh(budget)
        return budget

    return _add


@pytest.fixture
def add_goal(session, context):
    def _add(name: str, target: float, current: float = 0.0):
        goal = SavingsGoal(user_id=context.user_id, name=name, target_amount=target, current_amount=current)
        session.add(goal)
        session.commit()
        session.refresh(goal)
        return goal

    return _add
