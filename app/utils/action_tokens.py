"""
Parse the bracketed action tokens the advisor embeds in its replies, e.g.

    [CREATE_BUDGET: Groceries | $400 | $50 | Emergency Fund | Weekly food]
    [ADD_FUNDS_TO_GOAL: Emergency Fund | $1,250.00]

into typed actions. Tokens that cannot be parsed are dropped.
"""
import logging
import re
from typing import List, Optional

from pydantic import ValidationError

from app.schemas.actions import (
    AddFundsToGoal,
    BudgetAction,
    CreateBudget,
    DeleteBudget,
    EditBudget,
    LinkGoalToBudget,
)

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(
    r"\[(CREATE_BUDGET|EDIT_BUDGET|DELETE_BUDGET|LINK_GOAL_TO_BUDGET|ADD_FUNDS_TO_GOAL):\s*([^\]]*)\]"
)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().strip('"').strip("'").strip()
    return value or None


def parse_amount(value: Optional[str]) -> Optional[float]:
    value = _clean(value)
    if value is None or value == "-":
        return None
    return float(value.replace("$", "").replace(",", "").strip())


def _field(parts: List[str], index: int) -> Optional[str]:
    return _clean(parts[index]) if index < len(parts) else None


def _build(kind: str, parts: List[str]) -> BudgetAction:
    if kind == "CREATE_BUDGET":
        return CreateBudget(
            name=_field(parts, 0),
            expense_allocation=parse_amount(_field(parts, 1)) or 0.0,
            savings_allocation=parse_amount(_field(parts, 2)) or 0.0,
            linked_goal_name=_field(parts, 3),
            description=_field(parts, 4),
        )
    if kind == "EDIT_BUDGET":
        fields = {
            "budget_id": int(_field(parts, 0)),
            "name": _field(parts, 1),
            "expense_allocation": parse_amount(_field(parts, 2)),
            "savings_allocation": parse_amount(_field(parts, 3)),
            "linked_goal_name": _field(parts, 4),
            "description": _field(parts, 5),
        }
        # only what the token actually specified counts as set
        return EditBudget(**{k: v for k, v in fields.items() if v is not None})
    if kind == "DELETE_BUDGET":
        return DeleteBudget(budget_id=int(_field(parts, 0)), name=_field(parts, 1))
    if kind == "LINK_GOAL_TO_BUDGET":
        return LinkGoalToBudget(budget_name=_field(parts, 0), goal_name=_field(parts, 1))
    return AddFundsToGoal(goal_name=_field(parts, 0), amount=parse_amount(_field(parts, 1)))


def parse_action_tokens(text: str) -> List[BudgetAction]:
    actions: List[BudgetAction] = []
    for match in TOKEN_RE.finditer(text or ""):
        kind, body = match.group(1), match.group(2)
        try:
            actions.append(_build(kind, body.split("|")))
        except (ValidationError, ValueError, TypeError) as exc:
            logger.debug("Skipping malformed %s token %r: %s", kind, match.group(0), exc)
    return actions


def strip_action_tokens(text: str) -> str:
    stripped = TOKEN_RE.sub("", text or "")
    return re.sub(r"\n{3,}", "\n\n", stripped).strip()
