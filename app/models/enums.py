from enum import Enum

class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class GoalStatus(str, Enum):
    active = "active"
    completed = "completed"
    archived = "archived"


class ContributionSource(str, Enum):
    user = "user"
    ai = "ai"
    monthly_transfer = "monthly_transfer"
