from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class AllocationCheck:
    is_valid: bool
    remaining: float
    exceeded_by: float


def validate_allocation(
    budgets: Iterable,
    monthly_income: float,
    expense: float,
    savings: float,
    exclude_budget_id: Optional[int] = None,
) -> AllocationCheck:
    """
    Check whether a (expense, savings) pair fits in the income still unallocated.

    ``exclude_budget_id`` is the budget being edited, so its current allocation
    is not counted against itself. A zero-zero pair is always accepted.
    """
    current_total = round(sum(
        float(b.expense_allocation) + float(b.savings_allocation)
        for b in budgets
        if exclude_budget_id is None or b.id != exclude_budget_id
    ), 2)
    # compare in cents so an exact fill is not lost to float error
    new_total = round(current_total + expense + savings, 2)
    remaining = round(monthly_income - new_total, 2)

    if expense == 0 and savings == 0:
        return AllocationCheck(is_valid=True, remaining=remaining, exceeded_by=0.0)

    return AllocationCheck(
        is_valid=remaining >= 0,
        remaining=remaining,
        exceeded_by=-remaining if remaining < 0 else 0.0,
    )
