from typing import Iterable, List, Optional

from ledger_pro.domain.models import Transaction


def _sort_key(transaction: Transaction):
    return (transaction.entry_date, transaction.id)


def order_transactions(transactions: Iterable[Transaction]) -> List[Transaction]:
    """
    Order one account's transactions newest-first.

    A sorts before B when its entry date is later, or when the dates are
    equal and its identifier is greater. Identifiers are unique, so the
    result is a strict total order regardless of the order the store
    returned the records in.

    Args:
        transactions: Transactions that all belong to the same account

    Returns:
        A new list; the input is left untouched
    """
    return sorted(transactions, key=_sort_key, reverse=True)


def latest_transaction(transactions: Iterable[Transaction]) -> Optional[Transaction]:
    """Return the head of the canonical order, or None for no transactions"""
    ordered = order_transactions(transactions)
    return ordered[0] if ordered else None
