from dateutil.relativedelta import relativedelta

from finance_api.utils.goal_planning import utcnow


def _tx(account_id, **overrides):
    payload = {
        "description": "Weekly groceries",
        "amount": 42.5,
        "type": "expense",
        "category": "Groceries",
        "account_id": account_id,
        "transaction_date": utcnow().isoformat(),
    }
    payload.update(overrides)
    return payload


async def test_expense_debits_account_and_counts_towards_budget(client, make_account):
    account = await make_account(balance=500)
    budget = (await client.post("/api/v1/budgets", json={"category": "Groceries", "amount": 300})).json()

    resp = await client.post("/api/v1/transactions", json=_tx(account["id"]))
    assert resp.status_code == 201, resp.text
    assert resp.json()["account_id"] == account["id"]

    assert (await client.get(f"/api/v1/accounts/{account['id']}")).json()["balance"] == 457.5
    assert (await client.get(f"/api/v1/budgets/{budget['id']}")).json()["spent"] == 42.5

    notifications = (await client.get("/api/v1/notification/")).json()
    assert notifications[0]["title"] == "Transaction Added"
    assert notifications[0]["message"] == 'Deducted $42.50 for "Weekly groceries"'


async def test_income_credits_account(client, make_account):
    account = await make_account(balance=100, currency="eur")
    resp = await client.post(
        "/api/v1/transactions",
        json=_tx(account["id"], description="Salary", amount=2000, type="income", category="Income"),
    )
    assert resp.status_code == 201, resp.text
    assert (await client.get(f"/api/v1/accounts/{account['id']}")).json()["balance"] == 2100.0

    notifications = (await client.get("/api/v1/notification/")).json()
    assert notifications[0]["message"] == 'Credited €2,000.00 for "Salary"'


async def test_expense_matches_budget_category_case_insensitively(client, make_account):
    account = await make_account(balance=500)
    budget = (await client.post("/api/v1/budgets", json={"category": "Dining", "amount": 100})).json()

    await client.post("/api/v1/transactions", json=_tx(account["id"], category="dining", amount=20))
    assert (await client.get(f"/api/v1/budgets/{budget['id']}")).json()["spent"] == 20.0


async def test_transaction_requires_known_account(client):
    resp = await client.post("/api/v1/transactions", json=_tx("00000000-0000-0000-0000-000000000000"))
    assert resp.status_code == 404


async def test_transaction_validation(client, make_account):
    account = await make_account()
    assert (await client.post("/api/v1/transactions", json=_tx(account["id"], amount=0))).status_code == 422
    assert (await client.post("/api/v1/transactions", json=_tx(account["id"], description="x"))).status_code == 422


async def test_list_transactions_filters(client, make_account):
    bank = await make_account(name="Bank", balance=1000)
    cash = await make_account(name="Cash", balance=100, type="cash")

    await client.post("/api/v1/transactions", json=_tx(bank["id"], description="Rent", category="Housing", amount=500))
    await client.post("/api/v1/transactions", json=_tx(cash["id"], description="Coffee", category="Dining", amount=4))
    await client.post(
        "/api/v1/transactions",
        json=_tx(bank["id"], description="Salary", type="income", category="Income", amount=3000),
    )

    all_txs = (await client.get("/api/v1/transactions")).json()
    assert len(all_txs) == 3

    expenses = (await client.get("/api/v1/transactions", params={"type": "expense"})).json()
    assert {t["description"] for t in expenses} == {"Rent", "Coffee"}

    dining = (await client.get("/api/v1/transactions", params={"category": "Dining"})).json()
    assert [t["description"] for t in dining] == ["Coffee"]

    from_bank = (await client.get("/api/v1/transactions", params={"account_id": bank["id"]})).json()
    assert {t["description"] for t in from_bank} == {"Rent", "Salary"}


async def test_delete_transaction(client, make_account):
    account = await make_account()
    tx = (await client.post("/api/v1/transactions", json=_tx(account["id"]))).json()

    assert (await client.delete(f"/api/v1/transactions/{tx['id']}")).status_code == 204
    assert (await client.get(f"/api/v1/transactions/{tx['id']}")).status_code == 404


async def test_deleting_account_keeps_its_transactions(client, make_account):
    account = await make_account()
    tx = (await client.post("/api/v1/transactions", json=_tx(account["id"]))).json()

    assert (await client.delete(f"/api/v1/accounts/{account['id']}")).status_code == 204
    kept = (await client.get(f"/api/v1/transactions/{tx['id']}")).json()
    assert kept["account_id"] is None


async def test_update_account(client, make_account):
    account = await make_account()
    resp = await client.patch(f"/api/v1/accounts/{account['id']}", json={"name": "Joint account", "currency": "gbp"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Joint account"
    assert resp.json()["currency"] == "GBP"


async def test_duplicate_budget_category_conflicts(client):
    assert (await client.post("/api/v1/budgets", json={"category": "Groceries", "amount": 300})).status_code == 201
    resp = await client.post("/api/v1/budgets", json={"category": "groceries", "amount": 100})
    assert resp.status_code == 409


async def test_update_and_delete_plain_budget(client):
    budget = (await client.post("/api/v1/budgets", json={"category": "Fun", "amount": 80})).json()
    other = (await client.post("/api/v1/budgets", json={"category": "Travel", "amount": 200})).json()

    resp = await client.patch(f"/api/v1/budgets/{budget['id']}", json={"amount": 120})
    assert resp.status_code == 200
    assert resp.json()["amount"] == 120.0

    resp = await client.patch(f"/api/v1/budgets/{budget['id']}", json={"category": "Travel"})
    assert resp.status_code == 409

    assert (await client.delete(f"/api/v1/budgets/{other['id']}")).status_code == 204
    assert [b["id"] for b in (await client.get("/api/v1/budgets")).json()] == [budget["id"]]


async def test_goal_linked_plan_cannot_be_edited_or_deleted_directly(client):
    await client.post(
        "/api/v1/goals",
        json={
            "name": "Camera",
            "target_amount": 900,
            "saving_strategy": "monthly",
            "target_date": (utcnow() + relativedelta(months=9, days=2)).isoformat(),
        },
    )
    linked = (await client.get("/api/v1/budgets")).json()[0]
    assert linked["is_goal"] is True

    resp = await client.patch(f"/api/v1/budgets/{linked['id']}", json={"amount": 1})
    assert resp.status_code == 409
    assert "linked to a goal" in resp.json()["detail"]

    assert (await client.delete(f"/api/v1/budgets/{linked['id']}")).status_code == 409
    assert len((await client.get("/api/v1/budgets")).json()) == 1
