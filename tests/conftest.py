import asyncio
import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Set

from ledger_pro.domain.errors import RecordNotFoundError, StoreError
from ledger_pro.domain.models import Account, Transaction
from ledger_pro.repositories.base import LedgerStore
from ledger_pro.repositories.closed_flag_store import ClosedFlagStore
from ledger_pro.services.models import TransactionDraft


class InMemoryLedgerStore(LedgerStore):
    """
    Dict-backed store for tests.

    Transactions come back newest-inserted first, which is deliberately
    not the canonical order. Fetches for an account with a gate wait
    until the gate is set.
    """

    def __init__(self):
        self.accounts: List[Account] = []
        self.transactions: Dict[str, Transaction] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.failing_accounts: Set[str] = set()
        self.fail_writes = False
        self.writes = 0
        self._seq = 0

    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}{self._seq:04d}"

    def seed_account(self, account_id: str, name: str) -> Account:
        account = Account(id=account_id, name=name)
        self.accounts.append(account)
        return account

    def seed_transaction(self, transaction: Transaction) -> Transaction:
        self.transactions[transaction.id] = transaction
        return transaction

    async def fetch_accounts(self) -> List[Account]:
        return list(self.accounts)

    async def fetch_transactions(self, account_id: str) -> List[Transaction]:
        gate = self.gates.get(account_id)
        if gate is not None:
            await gate.wait()
        if account_id in self.failing_accounts:
            raise StoreError(f"fetch failed for {account_id}")
        rows = [t for t in self.transactions.values() if t.account_id == account_id]
        return list(reversed(rows))

    async def fetch_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self.transactions.get(transaction_id)

    async def create_account(self, name: str) -> Account:
        self._check_writes()
        return self.seed_account(self._next_id("acc"), name)

    async def create_transaction(self, account_id: str, fields: TransactionDraft) -> Transaction:
        self._check_writes()
        return self.seed_transaction(
            self._to_transaction(self._next_id("tx"), account_id, fields)
        )

    async def update_transaction(
        self, transaction_id: str, fields: TransactionDraft, account_id: str
    ) -> Transaction:
        self._check_writes()
        self._owned(transaction_id, account_id)
        updated = self._to_transaction(transaction_id, account_id, fields)
        self.transactions[transaction_id] = updated
        return updated

    async def delete_transaction(self, transaction_id: str, account_id: str) -> None:
        self._check_writes()
        self._owned(transaction_id, account_id)
        del self.transactions[transaction_id]

    def _owned(self, transaction_id: str, account_id: str) -> None:
        existing = self.transactions.get(transaction_id)
        if existing is None or existing.account_id != account_id:
            raise RecordNotFoundError(transaction_id)

    def _check_writes(self) -> None:
        if self.fail_writes:
            raise StoreError("store unavailable")
        self.writes += 1

    @staticmethod
    def _to_transaction(transaction_id: str, account_id: str, fields: TransactionDraft) -> Transaction:
        return Transaction(
            id=transaction_id,
            account_id=account_id,
            entry_date=fields.entry_date,
            due_date=fields.due_date,
            reference=fields.reference,
            description=fields.description,
            remarks=fields.remarks,
            debit=fields.debit,
            credit=fields.credit,
        )


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Factory for transactions with sensible defaults"""
    def _make(
        txn_id: str,
        entry_date: date,
        debit: str = "0",
        credit: str = "0",
        account_id: str = "acc-a",
        **fields,
    ) -> Transaction:
        return Transaction(
            id=txn_id,
            account_id=account_id,
            entry_date=entry_date,
            debit=Decimal(debit),
            credit=Decimal(credit),
            **fields,
        )
    return _make

@pytest.fixture
def scenario_transactions(make_transaction) -> List[Transaction]:
    """Three entries of one account, in store (not canonical) order"""
    return [
        make_transaction("t1", date(2024, 1, 10), credit="100"),
        make_transaction("t2", date(2024, 1, 12), debit="30"),
        make_transaction("t3", date(2024, 1, 12), credit="5"),
    ]

@pytest.fixture
def memory_store() -> InMemoryLedgerStore:
    """Empty in-memory store"""
    return InMemoryLedgerStore()

@pytest.fixture
def closed_flags(tmp_path) -> ClosedFlagStore:
    """Closed-flag store backed by a temp file"""
    return ClosedFlagStore(tmp_path / "closed_accounts.json")

@pytest.fixture
def draft() -> Callable[..., TransactionDraft]:
    """Factory for valid transaction drafts"""
    def _draft(entry_date: Optional[date] = date(2024, 1, 10), **fields) -> TransactionDraft:
        return TransactionDraft(entry_date=entry_date, **fields)
    return _draft
