"""
Tests for transaction endpoints and the budget spend counter.
"""
from app.models.budget import Budget
from app.services import ledger


def _expense(client, headers, amount, budget_id=None, **fields):
    payload = {"type": "expense", "amount": amount, "category": "Food", "budget_id": budget_id, **fields}
    response = client.post("/transactions", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_expense_updates_budget_spent(client, auth_headers, add_budget, session):
    budget = add_budget("Groceries", 300, 0)

    tx = _expense(client, auth_headers, 40, budget.id)
    assert tx["category"] == "food"
    assert tx["budget_name"] == "Groceries"
    session.refresh(budget)
    assert budget.expense_spent == 40

    client.put(f"/transactions/{tx['id']}", json={"amount": 65}, headers=auth_headers)
    session.refresh(budget)
    assert budget.expense_spent == 65

    client.delete(f"/transactions/{tx['id']}", headers=auth_headers)
    session.refresh(budget)
    assert budget.expense_spent == 0


def test_moving_expense_between_budgets(client, auth_headers, add_budget, session):
    groceries = add_budget("Groceries", 300, 0)
    fun = add_budget("Fun", 100, 0)

    tx = _expense(client, auth_headers, 30, groceries.id)
    client.put(f"/transactions/{tx['id']}", json={"budget_id": fun.id}, headers=auth_headers)

    session.refresh(groceries)
    session.refresh(fun)
    assert groceries.expense_spent == 0
    assert fun.expense_spent == 30


def test_expense_from_previous_month_does_not_touch_spent(client, auth_headers, add_budget, session, today):
    budget = add_budget("Groceries", 300, 0)
    last_month = ledger.get_previous_period_range("month", today).start

    _expense(client, auth_headers, 50, budget.id, date=last_month.isoformat())

    session.refresh(budget)
    assert budget.expense_spent == 0


def test_income_never_carries_a_budget(client, auth_headers, add_budget):
    budget = add_budget("Groceries", 300, 0)

    response = client.post(
        "/transactions",
        json={"type": "income", "amount": 2000, "category": "salary", "budget_id": budget.id},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["budget_id"] is None


def test_date_defaults_to_local_today(client, auth_headers, today):
    tx = _expense(client, auth_headers, 12)
    assert tx["date"] == today.isoformat()


def test_deleted_budget_leaves_dangling_references(client, auth_headers, add_budget, session):
    rent = add_budget("Rent", 1200, 0)
    for amount in (100, 200, 300, 400, 200):
        _expense(client, auth_headers, amount, rent.id, category="housing")

    response = client.delete(f"/budgets/{rent.id}", headers=auth_headers)
    assert response.status_code == 200
    assert session.get(Budget, rent.id) is None

    response = client.get("/transactions", headers=auth_headers)
    assert response.status_code == 200
    transactions = response.json()
    assert len(transactions) == 5
    assert all(t["budget_id"] == rent.id for t in transactions)
    assert all(t["budget_name"] is None for t in transactions)


def test_list_filters(client, auth_headers, add_budget, add_income):
    budget = add_budget("Groceries", 300, 0)
    add_income(1000)
    _expense(client, auth_headers, 20, budget.id)
    _expense(client, auth_headers, 30)

    expenses = client.get("/transactions", params={"type": "expense"}, headers=auth_headers).json()
    assert len(expenses) == 2

    tagged = client.get("/transactions", params={"budget_id": budget.id}, headers=auth_headers).json()
    assert [t["amount"] for t in tagged] == [20]

    month = client.get("/transactions", params={"period": "month"}, headers=auth_headers).json()
    assert len(month) == 3


def test_unknown_transaction(client, auth_headers):
    assert client.get("/transactions/42", headers=auth_headers).status_code == 404
    assert client.delete("/transactions/42", headers=auth_headers).status_code == 404
