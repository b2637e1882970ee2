"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found or not owned by the caller."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class InsufficientSharesError(AppError):
    """Raised when attempting to sell more shares than held."""

    def __init__(self, symbol: str, requested: str, available: str):
        super().__init__(
            f"Insufficient shares of {symbol}: requested {requested}, available {available}",
            code="INSUFFICIENT_SHARES",
        )


class InsufficientFundsError(AppError):
    """Raised when a buy costs more than the available cash balance."""

    def __init__(self, requested: str, available: str):
        super().__init__(
            f"Insufficient funds: requested {requested}, available {available}",
            code="INSUFFICIENT_FUNDS",
        )


class ConflictError(AppError):
    """Raised when amending or removing a transaction would require cascading reversals."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class LedgerConsistencyError(AppError):
    """
    Raised when derived ledger state contradicts itself.

    Signals an invariant broken elsewhere; never swallow it.
    """

    def __init__(self, message: str):
        super().__init__(message, code="LEDGER_INCONSISTENT")
