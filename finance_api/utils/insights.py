# finance_api/utils/insights.py
from typing import Any, Dict, List, Optional, Tuple
import json
import logging

import httpx
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from finance_api.core.auth import User
from finance_api.core.config import settings
from finance_api.crud.budget import get_budgets_for_user
from finance_api.crud.transaction import get_transactions_between
from finance_api.models.transaction import TransactionType
from finance_api.schemas.insights import CategorySuggestion, FinancialTipsResponse
from finance_api.utils.dashboard import month_bounds
from finance_api.utils.goal_planning import utcnow

logger = logging.getLogger(__name__)

COMMON_CATEGORIES = [
    "Groceries", "Dining", "Entertainment", "Utilities", "Transportation",
    "Healthcare", "Shopping", "Income", "Transfer", "Savings", "Other",
]

TIPS_SYSTEM_PROMPT = """
You are a personal finance advisor. Analyze the user's spending patterns and provide personalized tips to save money.

Provide a list of actionable tips to help the user reduce spending and improve their financial health. Focus on specific spending categories.
For each tip, suggest a corresponding action if applicable.
Actions can be:
- Navigating to a relevant page (e.g., '/dashboard/budgets', '/dashboard/transactions?category=Shopping').
- Suggesting to open a dialog (e.g., 'add_goal', 'add_budget').

If you find no significant areas for improvement, or if all potential tips are too similar to the starred tips, return an empty "tips" array and a friendly, encouraging "message".

Respond with JSON only, shaped as:
{"tips": [{"tip": "...", "action": {"type": "navigate" | "open_dialog", "payload": "..."}}], "message": "..."}
The "action" and "message" fields are optional.
"""

CATEGORY_SYSTEM_PROMPT = """
You are a personal finance expert. Your task is to suggest a category for a given transaction based on its details.
Respond with JSON only, shaped as: {"category": "...", "confidence": 0.0}
where confidence is a number between 0 and 1 indicating how sure you are about the suggestion.
"""


def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.AI_TIMEOUT_SECONDS)


def extract_json(content: str) -> Any:
    """Parse a model reply that should be JSON, tolerating code fences and chatter."""
    text = content.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("No JSON object found in model reply")
        return json.loads(text[start:end + 1])


async def chat_completion(system_prompt: str, user_prompt: str, title: str) -> Optional[str]:
    """
    Call OpenRouter chat-completions with the primary model, then the fallback one.

    Returns the reply text, or None when the service is not configured or both
    models fail.
    """
    if not settings.OPENROUTER_API_KEY:
        logger.warning("OpenRouter API key not configured. Skipping AI request.")
        return None

    headers = {
        "Authorization": f"Bearer {settings.OPENROUTER_API_KEY}",
        "Content-Type": "application/json",
        "HTTP-Referer": settings.BACKEND_BASE_URL,
        "X-Title": title,
    }
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]

    async with get_http_client() as client:
        for model in (settings.OPENROUTER_MODEL, settings.OPENROUTER_FALLBACK_MODEL):
            try:
                response = await client.post(
                    settings.OPENROUTER_URL,
                    headers=headers,
                    json={
                        "model": model,
                        "messages": messages,
                        "temperature": 0.4,
                        "max_tokens": 512,
                    },
                )
            except httpx.HTTPError as e:
                logger.error(f"OpenRouter request with {model} failed: {str(e)}")
                continue

            if response.status_code != 200:
                logger.warning(f"OpenRouter model {model} failed with status {response.status_code}: {response.text}")
                continue

            try:
                result = response.json()
            except ValueError:
                logger.warning(f"OpenRouter model {model} returned a non-JSON body")
                continue

            choices = result.get("choices") if isinstance(result, dict) else None
            first = choices[0] if isinstance(choices, list) and choices else None
            message = first.get("message") if isinstance(first, dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if content and isinstance(content, str):
                return content
            logger.warning(f"OpenRouter model {model} returned an empty reply")

    logger.error("Both OpenRouter models failed.")
    return None


async def build_spending_summary(user: User, db: AsyncSession) -> Tuple[List[Dict[str, Any]], float]:
    """Spending per budget/savings plan plus this month's income."""
    budgets = await get_budgets_for_user(user.id, db)
    spending_data = [{"category": b.category, "spent": round(b.spent or 0.0, 2)} for b in budgets]

    start, end = month_bounds(utcnow())
    transactions = await get_transactions_between(user.id, start, end, db)
    income = sum(t.amount for t in transactions if t.type == TransactionType.income)
    return spending_data, round(income, 2)


async def get_financial_tips(
    spending_data: List[Dict[str, Any]],
    income: float,
    starred_tips: Optional[List[str]] = None,
) -> Optional[FinancialTipsResponse]:
    user_prompt = f"""
    Spending Data: {json.dumps(spending_data)}

    Monthly Income: {income}
    """
    if starred_tips:
        starred = "\n".join(f'- "{tip}"' for tip in starred_tips)
        user_prompt += f"""
    The user has already starred these tips, so do not generate tips that are substantially similar to these:
    {starred}
    """

    content = await chat_completion(TIPS_SYSTEM_PROMPT, user_prompt, "Finance Dashboard Tips")
    if content is None:
        return None

    try:
        return FinancialTipsResponse.model_validate(extract_json(content))
    except (ValueError, SchemaValidationError) as e:
        logger.error(f"Could not parse financial tips reply: {str(e)}")
        return None


async def suggest_category(description: str, amount: float, account_type: str) -> CategorySuggestion:
    """Suggest a category for a transaction; an empty suggestion means none could be made."""
    user_prompt = f"""
    Transaction Description: {description}
    Transaction Amount: {amount}
    Account Type: {account_type}

    Consider common transaction categories such as {', '.join(COMMON_CATEGORIES)}.
    """
    content = await chat_completion(CATEGORY_SYSTEM_PROMPT, user_prompt, "Finance Dashboard Categorizer")
    if content is None:
        return CategorySuggestion()

    try:
        data = extract_json(content)
        if not isinstance(data, dict):
            logger.error(f"Category suggestion reply is not an object: {content}")
            return CategorySuggestion()
        confidence = min(1.0, max(0.0, float(data.get("confidence", 0.0))))
        return CategorySuggestion(category=str(data.get("category", "")).strip(), confidence=confidence)
    except (ValueError, TypeError, SchemaValidationError) as e:
        logger.error(f"Could not parse category suggestion reply: {str(e)}")
        return CategorySuggestion()
