from dateutil.relativedelta import relativedelta

from finance_api.utils.goal_planning import utcnow


def _future(months=12, days=2):
    return (utcnow() + relativedelta(months=months, days=days)).isoformat()


async def _create_goal(client, **overrides):
    payload = {
        "name": "New Laptop",
        "target_amount": 1200,
        "current_amount": 0,
        "saving_strategy": "monthly",
        "target_date": _future(),
    }
    payload.update(overrides)
    resp = await client.post("/api/v1/goals", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _linked_budgets(client, goal_id):
    budgets = (await client.get("/api/v1/budgets")).json()
    return [b for b in budgets if b["goal_id"] == goal_id]


async def test_create_structured_goal_creates_linked_plan(client):
    goal = await _create_goal(client)

    assert goal["periodic_contribution"] == 100.0
    assert goal["status"] == "active"
    assert goal["progress_percentage"] == 0.0

    linked = await _linked_budgets(client, goal["id"])
    assert len(linked) == 1
    assert linked[0]["category"] == "Goal: New Laptop"
    assert linked[0]["amount"] == 100.0
    assert linked[0]["spent"] == 0.0
    assert linked[0]["is_goal"] is True


async def test_create_goal_queues_notification(client):
    await _create_goal(client)
    notifications = (await client.get("/api/v1/notification/")).json()
    assert [n["title"] for n in notifications] == ["Goal Added"]


async def test_create_self_dependent_goal_has_no_plan(client):
    goal = await _create_goal(client, name="Rainy day", saving_strategy="self-dependent", target_date=None)

    assert goal["periodic_contribution"] == 0.0
    assert goal["target_date"] is None
    assert await _linked_budgets(client, goal["id"]) == []


async def test_create_with_contribution_derives_target_date(client):
    goal = await _create_goal(
        client,
        name="Console",
        target_amount=1000,
        current_amount=200,
        saving_strategy="weekly",
        target_date=None,
        periodic_contribution=100,
    )
    assert goal["periodic_contribution"] == 100.0
    assert goal["target_date"] is not None


async def test_create_rejects_past_target_date(client):
    resp = await client.post(
        "/api/v1/goals",
        json={
            "name": "Too late",
            "target_amount": 100,
            "saving_strategy": "monthly",
            "target_date": (utcnow() - relativedelta(days=1)).isoformat(),
        },
    )
    assert resp.status_code == 422
    assert resp.json()["field"] == "target_date"


async def test_create_rejects_current_above_target(client):
    resp = await client.post(
        "/api/v1/goals",
        json={
            "name": "Odd goal",
            "target_amount": 100,
            "current_amount": 150,
            "saving_strategy": "self-dependent",
        },
    )
    assert resp.status_code == 422


async def test_create_rejects_taken_plan_label(client):
    await client.post("/api/v1/budgets", json={"category": "Goal: Bike", "amount": 50})
    resp = await client.post(
        "/api/v1/goals",
        json={"name": "Bike", "target_amount": 600, "saving_strategy": "monthly", "target_date": _future()},
    )
    assert resp.status_code == 409
    assert (await client.get("/api/v1/goals")).json() == []


async def test_preview_plan_saves_nothing(client):
    resp = await client.post(
        "/api/v1/goals/plan/preview",
        json={"target_amount": 1200, "saving_strategy": "monthly", "target_date": _future()},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["periodic_contribution"] == 100.0
    assert body["periods_remaining"] == 12
    assert body["remaining_amount"] == 1200.0
    assert (await client.get("/api/v1/goals")).json() == []


async def test_edit_resyncs_linked_plan_amount(client):
    goal = await _create_goal(client)

    resp = await client.patch(f"/api/v1/goals/{goal['id']}", json={"target_amount": 2400})
    assert resp.status_code == 200, resp.text
    assert resp.json()["periodic_contribution"] == 200.0

    linked = await _linked_budgets(client, goal["id"])
    assert linked[0]["amount"] == 200.0


async def test_edit_with_new_contribution_makes_it_the_driver(client):
    goal = await _create_goal(client)

    resp = await client.patch(f"/api/v1/goals/{goal['id']}", json={"periodic_contribution": 300})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["periodic_contribution"] == 300.0
    # 1200 at 300 a month
    assert body["target_date"][:7] == (utcnow() + relativedelta(months=4)).isoformat()[:7]


async def test_edit_to_self_dependent_removes_plan_and_back_recreates_it(client):
    goal = await _create_goal(client)

    resp = await client.patch(f"/api/v1/goals/{goal['id']}", json={"saving_strategy": "self-dependent"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["periodic_contribution"] == 0.0
    assert await _linked_budgets(client, goal["id"]) == []

    resp = await client.patch(
        f"/api/v1/goals/{goal['id']}",
        json={"saving_strategy": "monthly", "target_date": _future(months=6)},
    )
    assert resp.status_code == 200, resp.text
    linked = await _linked_budgets(client, goal["id"])
    assert len(linked) == 1
    assert linked[0]["amount"] == 200.0


async def test_edit_rejects_name_change(client):
    goal = await _create_goal(client)

    resp = await client.patch(f"/api/v1/goals/{goal['id']}", json={"name": "Gaming Laptop"})
    assert resp.status_code == 422
    assert resp.json()["field"] == "name"

    # Resending the same name is fine
    resp = await client.patch(f"/api/v1/goals/{goal['id']}", json={"name": "New Laptop", "target_amount": 1300})
    assert resp.status_code == 200


async def test_delete_goal_removes_linked_plan(client):
    goal = await _create_goal(client)
    other = await _create_goal(client, name="Holiday")

    resp = await client.delete(f"/api/v1/goals/{goal['id']}")
    assert resp.status_code == 204

    assert (await client.get(f"/api/v1/goals/{goal['id']}")).status_code == 404
    budgets = (await client.get("/api/v1/budgets")).json()
    assert [b["goal_id"] for b in budgets] == [other["id"]]


async def test_unknown_goal_is_404(client):
    resp = await client.get("/api/v1/goals/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404


async def test_contribution_updates_goal_account_plan_and_history(client, make_account):
    account = await make_account(balance=1000)
    goal = await _create_goal(client)

    resp = await client.post(
        f"/api/v1/goals/{goal['id']}/contribute",
        json={"amount": 300, "from_account_id": account["id"]},
    )
    assert resp.status_code == 200, resp.text
    result = resp.json()

    assert result["applied_amount"] == 300.0
    assert result["account_balance"] == 700.0
    assert result["status"] == "active"
    assert result["goal"]["current_amount"] == 300.0
    assert result["linked_budget"]["spent"] == 300.0
    # 900 left over the same twelve months
    assert result["goal"]["periodic_contribution"] == 75.0
    assert result["linked_budget"]["amount"] == 75.0

    acc = (await client.get(f"/api/v1/accounts/{account['id']}")).json()
    assert acc["balance"] == 700.0

    txs = (await client.get("/api/v1/transactions", params={"category": "Savings"})).json()
    assert len(txs) == 1
    assert txs[0]["description"] == "Contribution to goal: New Laptop"
    assert txs[0]["type"] == "expense"
    assert txs[0]["amount"] == 300.0
    assert result["transaction_id"] == txs[0]["id"]

    titles = [n["title"] for n in (await client.get("/api/v1/notification/")).json()]
    assert "Contribution Successful!" in titles


async def test_overshoot_is_clamped_and_goal_reached(client, make_account):
    account = await make_account(balance=1000)
    goal = await _create_goal(client, name="Headphones", target_amount=500, current_amount=400)

    resp = await client.post(
        f"/api/v1/goals/{goal['id']}/contribute",
        json={"amount": 300, "from_account_id": account["id"]},
    )
    assert resp.status_code == 200, resp.text
    result = resp.json()
    assert result["requested_amount"] == 300.0
    assert result["applied_amount"] == 100.0
    assert result["account_balance"] == 900.0
    assert result["status"] == "reached"
    assert result["goal"]["current_amount"] == 500.0
    assert result["goal"]["progress_percentage"] == 100.0

    notifications = (await client.get("/api/v1/notification/")).json()
    milestones = [n for n in notifications if n["type"] == "milestone"]
    assert len(milestones) == 1

    resp = await client.post(
        f"/api/v1/goals/{goal['id']}/contribute",
        json={"amount": 10, "from_account_id": account["id"]},
    )
    assert resp.status_code == 409
    acc = (await client.get(f"/api/v1/accounts/{account['id']}")).json()
    assert acc["balance"] == 900.0


async def test_insufficient_funds_writes_nothing(client, make_account):
    account = await make_account(name="Wallet", balance=50, type="cash")
    goal = await _create_goal(client)

    resp = await client.post(
        f"/api/v1/goals/{goal['id']}/contribute",
        json={"amount": 100, "from_account_id": account["id"]},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == 'Your "Wallet" source does not have enough funds.'

    assert (await client.get(f"/api/v1/accounts/{account['id']}")).json()["balance"] == 50.0
    assert (await client.get(f"/api/v1/goals/{goal['id']}")).json()["current_amount"] == 0.0
    assert (await client.get("/api/v1/transactions")).json() == []
    assert (await _linked_budgets(client, goal["id"]))[0]["spent"] == 0.0
    assert (await client.get("/api/v1/notification/unread-count")).json() == 1


async def test_contribution_from_unknown_account_is_404(client):
    goal = await _create_goal(client)
    resp = await client.post(
        f"/api/v1/goals/{goal['id']}/contribute",
        json={"amount": 100, "from_account_id": "00000000-0000-0000-0000-000000000000"},
    )
    assert resp.status_code == 404


async def test_contribution_must_be_positive(client, make_account):
    account = await make_account()
    goal = await _create_goal(client)
    resp = await client.post(
        f"/api/v1/goals/{goal['id']}/contribute",
        json={"amount": 0, "from_account_id": account["id"]},
    )
    assert resp.status_code == 422


async def test_self_dependent_contribution_needs_no_plan(client, make_account):
    account = await make_account(balance=100)
    goal = await _create_goal(client, name="Someday", saving_strategy="self-dependent", target_date=None)

    resp = await client.post(
        f"/api/v1/goals/{goal['id']}/contribute",
        json={"amount": 40, "from_account_id": account["id"]},
    )
    assert resp.status_code == 200, resp.text
    result = resp.json()
    assert result["linked_budget"] is None
    assert result["goal"]["current_amount"] == 40.0
    assert result["goal"]["periodic_contribution"] == 0.0


async def test_contribution_to_contribution_driven_goal_keeps_plan_consistent(client, make_account):
    account = await make_account(balance=1000)
    goal = await _create_goal(
        client,
        name="Console",
        target_amount=1000,
        current_amount=200,
        saving_strategy="weekly",
        target_date=None,
        periodic_contribution=100,
    )
    [linked] = await _linked_budgets(client, goal["id"])
    assert linked["amount"] == 100.0

    resp = await client.post(
        f"/api/v1/goals/{goal['id']}/contribute",
        json={"amount": 200, "from_account_id": account["id"]},
    )
    assert resp.status_code == 200, resp.text
    result = resp.json()

    # The projected date stays put and now drives what is left
    assert result["goal"]["target_date"] == goal["target_date"]
    contribution = result["goal"]["periodic_contribution"]
    assert 600 / 8 <= contribution <= 600 / 7
    assert result["linked_budget"]["amount"] == contribution

    stored = (await client.get(f"/api/v1/goals/{goal['id']}")).json()
    [linked] = await _linked_budgets(client, goal["id"])
    assert stored["periodic_contribution"] == contribution
    assert linked["amount"] == contribution
    assert linked["spent"] == 200.0
