from dataclasses import replace
from decimal import Decimal
from typing import List, Sequence

from ledger_pro.domain.models import Transaction


def derive_balances(ordered: Sequence[Transaction]) -> List[Transaction]:
    """
    Attach a running balance to every transaction.

    The balance is the cumulative credit - debit applied oldest-first, so
    the sequence is walked from its tail (oldest) to its head (newest).
    Presentation order is preserved: the returned list is still
    newest-first and its head carries the current account balance.

    Args:
        ordered: Transactions in the order produced by order_transactions

    Returns:
        Copies of the transactions with `balance` set
    """
    balanced: List[Transaction] = []
    running = Decimal("0")

    for txn in reversed(ordered):
        running += txn.net_amount
        balanced.append(replace(txn, balance=running))

    balanced.reverse()
    return balanced
