from fastapi import APIRouter

from finance_api.api.v1.routes import (
    accounts,
    auth,
    budgets,
    dashboard,
    goals,
    insights,
    notification,
    transactions,
    users,
)

api_router = APIRouter()

# Custom auth routes go first so /auth/jwt/logout wins over the fastapi-users router
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(accounts.router)
api_router.include_router(transactions.router)
api_router.include_router(budgets.router)
api_router.include_router(goals.router)
api_router.include_router(dashboard.router)
api_router.include_router(insights.router)
api_router.include_router(notification.router)
