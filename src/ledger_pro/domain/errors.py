"""
Error taxonomy for ledger operations.

ValidationError and ClosedAccountError are raised before any store call.
StoreError is raised after a store call failed. None of them is fatal.
"""


class LedgerError(Exception):
    """Base class for every error raised by the ledger."""
    pass

class ValidationError(LedgerError):
    """Raised when a required field is missing or a field cannot be parsed."""
    pass

class ClosedAccountError(LedgerError):
    """Raised when a transaction write targets a closed account."""

    def __init__(self, account_id: str):
        super().__init__(f"Account '{account_id}' is closed")
        self.account_id = account_id

class StoreError(LedgerError):
    """Raised when the record store cannot complete a call."""
    pass

class RecordNotFoundError(StoreError):
    """Raised when a record to update or delete does not exist."""
    pass
