"""Domain exceptions raised by the planner and converted to HTTP errors in main."""


class ValidationError(Exception):
    """Raised when input fails a business rule before anything is written."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field


class GoalReachedError(ValidationError):
    """Raised when contributing to a goal that already hit its target."""
    pass


class InsufficientFundsError(Exception):
    """Raised when a source account cannot cover a contribution."""

    def __init__(self, account_name: str, balance: float, amount: float):
        super().__init__(f'Your "{account_name}" source does not have enough funds.')
        self.message = str(self)
        self.account_name = account_name
        self.balance = balance
        self.amount = amount


class NotFoundError(Exception):
    """Raised when a requested record is not found for the current user."""

    def __init__(self, resource: str, message: str = None):
        super().__init__(message or f"{resource} not found")
        self.message = str(self)
        self.resource = resource


class ConflictError(Exception):
    """Raised when a write would break a uniqueness or ownership rule."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RemoteWriteFailure(Exception):
    """Raised when the store or the AI service fails to complete a call."""

    def __init__(self, message: str, operation: str = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
