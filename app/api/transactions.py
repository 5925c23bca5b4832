from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from app.core.context import UserContext
from app.core.errors import TransactionNotFoundError
from app.core.security import get_current_context
from app.database import get_session
from app.models.budget import Budget
from app.models.enums import TransactionType
from app.models.transaction import Transaction
from app.schemas.transaction import TransactionCreate, TransactionRead, TransactionUpdate
from app.services import ledger
from app.utils.budget_helpers import spent_delta, update_budget_spent

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _budget_names(session: Session, context: UserContext) -> Dict[int, str]:
    budgets = session.exec(select(Budget).where(Budget.user_id == context.user_id)).all()
    return {b.id: b.name for b in budgets}


def _to_read(tx: Transaction, names: Dict[int, str]) -> TransactionRead:
    read = TransactionRead.model_validate(tx, from_attributes=True)
    # a deleted budget leaves the id in place; it just has no name
    read.budget_name = names.get(tx.budget_id) if tx.budget_id is not None else None
    return read


def _get_transaction(session: Session, context: UserContext, transaction_id: int) -> Transaction:
    tx = session.exec(
        select(Transaction).where(Transaction.id == transaction_id, Transaction.user_id == context.user_id)
    ).first()
    if not tx:
        raise TransactionNotFoundError(transaction_id)
    return tx


def _counts_toward_spent(tx: Transaction, context: UserContext) -> bool:
    # expense_spent tracks the current month only; older rows were already reset
    return tx.type == TransactionType.expense and ledger.current_month_range(context.timezone).contains(tx.date)


@router.post("", response_model=TransactionRead, status_code=201)
@router.post("/", response_model=TransactionRead, status_code=201)
def create_transaction(
    transaction_data: TransactionCreate,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    data = transaction_data.model_dump()
    if data.get("date") is None:
        data["date"] = ledger.local_today(context.timezone)
    if data["type"] == TransactionType.income:
        data["budget_id"] = None

    tx = Transaction(**data, user_id=context.user_id)
    session.add(tx)

    if _counts_toward_spent(tx, context):
        update_budget_spent(session, context.user_id, tx.budget_id, spent_delta(tx.type, tx.amount))

    session.commit()
    session.refresh(tx)
    return _to_read(tx, _budget_names(session, context))


@router.get("", response_model=List[TransactionRead])
@router.get("/", response_model=List[TransactionRead])
def list_transactions(
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
    type: Optional[TransactionType] = Query(None),
    period: Optional[ledger.Period] = Query(None, description="week, month, semester or year"),
    budget_id: Optional[int] = Query(None),
):
    query = select(Transaction).where(Transaction.user_id == context.user_id)
    if type:
        query = query.where(Transaction.type == type)
    if budget_id is not None:
        query = query.where(Transaction.budget_id == budget_id)
    if period:
        period_range = ledger.get_date_range_for_period(period, ledger.local_today(context.timezone))
        query = query.where(Transaction.date >= period_range.start, Transaction.date <= period_range.end)

    transactions = session.exec(query.order_by(Transaction.date.desc(), Transaction.id.desc())).all()
    names = _budget_names(session, context)
    return [_to_read(tx, names) for tx in transactions]


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(
    transaction_id: int,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    tx = _get_transaction(session, context, transaction_id)
    return _to_read(tx, _budget_names(session, context))


@router.put("/{transaction_id}", response_model=TransactionRead)
def update_transaction(
    transaction_id: int,
    data: TransactionUpdate,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    tx = _get_transaction(session, context, transaction_id)
    updates = data.model_dump(exclude_unset=True)

    # back out the old contribution, apply the new one
    if _counts_toward_spent(tx, context):
        update_budget_spent(session, context.user_id, tx.budget_id, -spent_delta(tx.type, tx.amount))

    for field, value in updates.items():
        if field == "category" and value:
            value = value.strip().lower()
        if field == "budget_id" and tx.type == TransactionType.income:
            continue
        setattr(tx, field, value)
    tx.updated_at = datetime.utcnow()
    session.add(tx)

    if _counts_toward_spent(tx, context):
        update_budget_spent(session, context.user_id, tx.budget_id, spent_delta(tx.type, tx.amount))

    session.commit()
    session.refresh(tx)
    return _to_read(tx, _budget_names(session, context))


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    tx = _get_transaction(session, context, transaction_id)

    if _counts_toward_spent(tx, context):
        update_budget_spent(session, context.user_id, tx.budget_id, -spent_delta(tx.type, tx.amount))

    session.delete(tx)
    session.commit()
    return {"message": "Transaction deleted"}
