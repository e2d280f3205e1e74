from datetime import datetime

from dateutil.relativedelta import relativedelta

from finance_api.models.transaction import Transaction, TransactionType
from finance_api.utils.dashboard import month_bounds, monthly_overview, spending_by_category
from finance_api.utils.goal_planning import utcnow


def _txn(amount, type, category="Other", when=datetime(2025, 3, 10)):
    return Transaction(amount=amount, type=type, category=category, transaction_date=when)


def test_month_bounds():
    assert month_bounds(datetime(2024, 2, 29, 23, 59)) == (datetime(2024, 2, 1), datetime(2024, 3, 1))
    assert month_bounds(datetime(2025, 12, 5)) == (datetime(2025, 12, 1), datetime(2026, 1, 1))


def test_spending_by_category_ignores_income_and_sorts_descending():
    txns = [
        _txn(20, TransactionType.expense, "Dining"),
        _txn(100, TransactionType.expense, "Groceries"),
        _txn(15.5, TransactionType.expense, "Dining"),
        _txn(3000, TransactionType.income, "Income"),
    ]
    assert spending_by_category(txns) == [
        {"category": "Groceries", "amount": 100.0},
        {"category": "Dining", "amount": 35.5},
    ]


def test_monthly_overview_covers_window_oldest_first():
    now = datetime(2025, 3, 20)
    txns = [
        _txn(1000, TransactionType.income, when=datetime(2025, 3, 1)),
        _txn(200, TransactionType.expense, when=datetime(2025, 2, 14)),
        _txn(999, TransactionType.expense, when=datetime(2024, 9, 1)),  # outside the window
    ]
    overview = monthly_overview(txns, now, months=3)
    assert overview == [
        {"month": "2025-01", "income": 0.0, "expense": 0.0},
        {"month": "2025-02", "income": 0.0, "expense": 200.0},
        {"month": "2025-03", "income": 1000.0, "expense": 0.0},
    ]


async def test_dashboard_summary(client, make_account):
    bank = await make_account(name="Bank", balance=1000)
    await make_account(name="Card", balance=-150, type="card")
    await client.post("/api/v1/budgets", json={"category": "Groceries", "amount": 400})

    today = utcnow().isoformat()
    for payload in (
        {"description": "Salary", "amount": 2000, "type": "income", "category": "Income"},
        {"description": "Supermarket", "amount": 120, "type": "expense", "category": "Groceries"},
        {"description": "Cinema", "amount": 30, "type": "expense", "category": "Entertainment"},
    ):
        payload.update({"account_id": bank["id"], "transaction_date": today})
        resp = await client.post("/api/v1/transactions", json=payload)
        assert resp.status_code == 201, resp.text

    goal = (await client.post(
        "/api/v1/goals",
        json={
            "name": "Emergency fund",
            "target_amount": 1200,
            "current_amount": 300,
            "saving_strategy": "monthly",
            "target_date": (utcnow() + relativedelta(months=9, days=2)).isoformat(),
        },
    )).json()

    resp = await client.get("/api/v1/dashboard/summary", params={"months": 4})
    assert resp.status_code == 200, resp.text
    summary = resp.json()

    assert summary["currency"] == "USD"
    # 1000 + 2000 - 120 - 30 on the bank account, -150 on the card
    assert summary["total_balance"] == 2700.0
    # Groceries budget plus the goal's linked plan (900 over 9 months)
    assert summary["total_saving_target"] == 500.0
    assert summary["total_saved"] == 120.0
    assert summary["monthly_income"] == 2000.0
    assert summary["monthly_expense"] == 150.0
    assert summary["spending_by_category"] == [
        {"category": "Groceries", "amount": 120.0},
        {"category": "Entertainment", "amount": 30.0},
    ]

    assert len(summary["overview"]) == 4
    assert summary["overview"][-1]["income"] == 2000.0
    assert summary["overview"][-1]["expense"] == 150.0

    [progress] = summary["goals"]
    assert progress["id"] == goal["id"]
    assert progress["progress_percentage"] == 25.0
    assert progress["status"] == "active"
    assert progress["projected_completion_date"] is not None


async def test_dashboard_months_must_be_positive(client):
    resp = await client.get("/api/v1/dashboard/summary", params={"months": 0})
    assert resp.status_code == 422
