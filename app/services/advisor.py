"""
Forward advisor chats to the LLM gateway together with the user's financial
context. Suggested actions in the reply are parsed but never executed here.
"""
import json
import logging
from typing import List, Optional

import httpx

from app.core import config
from app.core.errors import AdvisorGatewayError, AdvisorUnavailableError
from app.services import ledger
from app.services.budget_store import BudgetStore
from app.services.goals import list_goals
from app.utils.action_tokens import parse_action_tokens, strip_action_tokens

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a friendly personal financial advisor for a student budgeting app.
Analyze the user's spending, suggest realistic savings, and help with budgets and goals.
Keep answers short (2-3 paragraphs), use numbers from their data, format currency as USD.

When you recommend a concrete change, add one token per change on its own line:
[CREATE_BUDGET: Name | $Expense | $Savings | LinkedGoal or "none" | Description]
[EDIT_BUDGET: id | Name | $Expense | $Savings | LinkedGoal | Description]
[DELETE_BUDGET: id | Name]
[LINK_GOAL_TO_BUDGET: BudgetName | GoalName]
[ADD_FUNDS_TO_GOAL: GoalName | $Amount]
Never suggest allocations whose total exceeds the remaining income."""


def build_financial_context(store: BudgetStore) -> dict:
    period = store.current_period()
    transactions = store.period_transactions(period)
    budgets = store.list_budgets()
    budget_totals = ledger.totals(budgets, ledger.monthly_income(transactions, period))

    return {
        "period": {"start": period.start.isoformat(), "end": period.end.isoformat()},
        "totals": budget_totals.as_dict(),
        "transactions": [
            {
                "type": t.type.value,
                "amount": t.amount,
                "category": t.category,
                "description": t.description,
                "date": t.date.isoformat(),
                "budget_id": t.budget_id,
            }
            for t in transactions
        ],
        "budgets": [
            {
                "id": b.id,
                "name": b.name,
                "expense_allocation": b.expense_allocation,
                "savings_allocation": b.savings_allocation,
                "expense_spent": b.expense_spent,
                "linked_goal": store.get_goal_name(b.linked_savings_goal_id),
            }
            for b in budgets
        ],
        "goals": [
            {
                "name": g.name,
                "current_amount": g.current_amount,
                "target_amount": g.target_amount,
                "status": g.status.value,
            }
            for g in list_goals(store.session, store.context)
        ],
    }


async def request_advice(
    messages: List[dict],
    financial_context: dict,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    if not config.ADVISOR_API_KEY:
        raise AdvisorUnavailableError("Advisor is not configured")

    payload = {
        "model": config.ADVISOR_MODEL,
        "messages": [
            {
                "role": "system",
                "content": SYSTEM_PROMPT + "\n\nUSER FINANCIAL DATA:\n" + json.dumps(financial_context),
            },
            *messages,
        ],
    }
    headers = {"Authorization": f"Bearer {config.ADVISOR_API_KEY}"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.ADVISOR_TIMEOUT_SECONDS) as own_client:
                r = await own_client.post(config.ADVISOR_GATEWAY_URL, json=payload, headers=headers)
        else:
            r = await client.post(config.ADVISOR_GATEWAY_URL, json=payload, headers=headers)
        r.raise_for_status()
        data = r.json()
        return data["choices"][0]["message"]["content"]
    except httpx.HTTPStatusError as exc:
        logger.error("Advisor gateway error: %s", exc.response.status_code)
        if exc.response.status_code == 429:
            raise AdvisorGatewayError("Rate limit exceeded, please try again later") from exc
        raise AdvisorGatewayError("AI gateway error") from exc
    except (httpx.HTTPError, KeyError, IndexError, ValueError) as exc:
        logger.error("Advisor gateway request failed: %s", exc)
        raise AdvisorGatewayError("AI gateway error") from exc


async def chat(store: BudgetStore, messages: List[dict], client: Optional[httpx.AsyncClient] = None):
    content = await request_advice(messages, build_financial_context(store), client=client)
    return strip_action_tokens(content), parse_action_tokens(content)
