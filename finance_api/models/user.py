# finance_api/models/user.py
# User itself is defined in core/auth.py next to the fastapi-users wiring.
# Importing this module registers every mapped class on Base.metadata.

from finance_api.core.auth import User
from finance_api.models.account import Account
from finance_api.models.budget import Budget
from finance_api.models.goal import Goal
from finance_api.models.notification import Notification
from finance_api.models.transaction import Transaction

__all__ = ["User", "Account", "Budget", "Goal", "Notification", "Transaction"]
