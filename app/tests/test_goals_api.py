"""
Tests for savings goal endpoints.
"""


def test_create_and_list_goals(client, auth_headers):
    response = client.post(
        "/goals", json={"name": "Emergency Fund", "target_amount": 1000, "current_amount": 300}, headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["status"] == "active"

    goals = client.get("/goals", headers=auth_headers).json()
    assert [g["name"] for g in goals] == ["Emergency Fund"]


def test_add_funds_and_history(client, auth_headers, add_goal):
    goal = add_goal("Laptop", 1200, current=100)

    response = client.post(f"/goals/{goal.id}/add-funds", json={"amount": 250}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["current_amount"] == 350

    history = client.get(f"/goals/{goal.id}/history", headers=auth_headers).json()
    assert len(history) == 1
    assert history[0]["added_amount"] == 250
    assert history[0]["amount"] == 350
    assert history[0]["added_by"] == "user"


def test_add_funds_rejects_non_positive_amount(client, auth_headers, add_goal):
    goal = add_goal("Laptop", 1200)
    response = client.post(f"/goals/{goal.id}/add-funds", json={"amount": 0}, headers=auth_headers)
    assert response.status_code == 422


def test_reaching_target_marks_completed(client, auth_headers, add_goal):
    goal = add_goal("Bike", 400, current=350)
    response = client.post(f"/goals/{goal.id}/add-funds", json={"amount": 50}, headers=auth_headers)
    assert response.json()["status"] == "completed"

    completed = client.get("/goals", params={"status": "completed"}, headers=auth_headers).json()
    assert [g["name"] for g in completed] == ["Bike"]


def test_raising_balance_on_edit_is_recorded(client, auth_headers, add_goal):
    goal = add_goal("Trip", 900, current=100)

    client.put(f"/goals/{goal.id}", json={"current_amount": 180, "name": "Summer Trip"}, headers=auth_headers)

    history = client.get(f"/goals/{goal.id}/history", headers=auth_headers).json()
    assert history[0]["added_amount"] == 80
    assert history[0]["goal_name"] == "Summer Trip"


def test_deleting_linked_goal_keeps_budget_readable(client, auth_headers, add_goal, add_budget):
    goal = add_goal("Trip", 900)
    budget = add_budget("Trip Fund", 0, 0, linked_savings_goal_id=goal.id)

    assert client.delete(f"/goals/{goal.id}", headers=auth_headers).status_code == 200

    body = client.get(f"/budgets/{budget.id}", headers=auth_headers).json()
    assert body["linked_savings_goal_id"] == goal.id
    assert body["linked_goal_name"] is None


def test_unknown_goal(client, auth_headers):
    assert client.post("/goals/77/add-funds", json={"amount": 5}, headers=auth_headers).status_code == 404
    assert client.get("/goals/77/history", headers=auth_headers).status_code == 404
