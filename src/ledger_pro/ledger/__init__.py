"""
Ledger ordering and balance-derivation engine.

Quick Start:
    >>> from ledger_pro.ledger import order_transactions, derive_balances
    >>>
    >>> rows = derive_balances(order_transactions(transactions))
    >>> print(f"Current balance: {rows[0].balance}")
"""
from ledger_pro.ledger.ordering import order_transactions, latest_transaction
from ledger_pro.ledger.balance import derive_balances
from ledger_pro.ledger.ranking import AccountActivityRanker
from ledger_pro.ledger.guard import ClosedAccountGuard

__all__ = [
    "order_transactions",
    "latest_transaction",
    "derive_balances",
    "AccountActivityRanker",
    "ClosedAccountGuard",
]
