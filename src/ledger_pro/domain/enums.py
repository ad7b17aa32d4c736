from enum import Enum


class MutationOp(Enum):
    """Write operations that can be applied to a transaction"""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class GuardVerdict(Enum):
    """Outcome of the closed-account check"""
    ALLOWED = "allowed"
    BLOCKED = "blocked" # account is closed
