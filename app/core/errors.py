"""
Domain errors raised by the budget services.

The API layer translates them into HTTP responses in ``app.main``.
"""


class BudgetServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AllocationExceededError(BudgetServiceError):
    """The requested allocation would push total allocations above monthly income."""

    status_code = 400

    def __init__(self, exceeded_by: float, remaining: float):
        self.exceeded_by = exceeded_by
        self.remaining = remaining
        super().__init__(
            f"This allocation would exceed your monthly income by ${exceeded_by:,.2f}. "
            "Please reduce the amount."
        )


class NotFoundError(BudgetServiceError):
    status_code = 404
    entity = "Record"

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"{self.entity} not found: {identifier}")


class BudgetNotFoundError(NotFoundError):
    entity = "Budget"


class GoalNotFoundError(NotFoundError):
    entity = "Savings goal"


class TransactionNotFoundError(NotFoundError):
    entity = "Transaction"


class StoreError(BudgetServiceError):
    """The database rejected a read or write. Nothing was left applied."""


class ReconciliationError(BudgetServiceError):
    def __init__(self, message: str):
        super().__init__(f"Error processing transfers: {message}")


class AdvisorUnavailableError(BudgetServiceError):
    status_code = 503


class AdvisorGatewayError(BudgetServiceError):
    status_code = 502
