import sqlite3
from decimal import Decimal
from typing import List, Optional

from ledger_pro.database.connection import DatabaseManager
from ledger_pro.domain.identifiers import new_record_id
from ledger_pro.domain.models import Account, Transaction
from ledger_pro.logging_setup import get_logger
from ledger_pro.repositories.base import LedgerStore, StoreError, RecordNotFoundError
from ledger_pro.services.models import TransactionDraft

logger = get_logger(__name__)


class SQLiteLedgerStore(LedgerStore):
    """
    SQLite implementation of the LedgerStore.

    Handles all database operations using raw SQL. Calls run on the
    event loop thread; sqlite3 failures surface as StoreError.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    async def fetch_accounts(self) -> List[Account]:
        """Retrieve all accounts in creation order"""
        try:
            conn = self.db.get_connection()
            rows = conn.execute(
                "SELECT id, name FROM accounts ORDER BY created_at, id"
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Could not fetch accounts: {e}") from e

        return [Account(id=row["id"], name=row["name"]) for row in rows]

    async def fetch_transactions(self, account_id: str) -> List[Transaction]:
        """Retrieve one account's transactions. No ORDER BY: callers sort."""
        try:
            conn = self.db.get_connection()
            rows = conn.execute(
                """
                SELECT id, account_id, entry_date, due_date, reference,
                       description, remarks, debit, credit
                FROM transactions WHERE account_id = ?
                """,
                (account_id,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(
                f"Could not fetch transactions for account {account_id}: {e}"
            ) from e

        return [self._row_to_transaction(row) for row in rows]

    async def fetch_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by ID, or None if it doesn't exist"""
        try:
            conn = self.db.get_connection()
            row = conn.execute(
                """
                SELECT id, account_id, entry_date, due_date, reference,
                       description, remarks, debit, credit
                FROM transactions WHERE id = ?
                """,
                (transaction_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Could not fetch transaction {transaction_id}: {e}") from e

        if row is None:
            return None
        return self._row_to_transaction(row)

    async def create_account(self, name: str) -> Account:
        """Insert an account and return it with its new ID"""
        account = Account(id=new_record_id(), name=name)
        try:
            with self.db.transaction() as conn:
                conn.execute(
                    "INSERT INTO accounts (id, name) VALUES (?, ?)",
                    (account.id, account.name),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Could not create account '{name}': {e}") from e

        return account

    async def create_transaction(
        self,
        account_id: str,
        fields: TransactionDraft,
    ) -> Transaction:
        """Insert a transaction and return it with its new ID"""
        transaction = self._draft_to_transaction(new_record_id(), account_id, fields)
        try:
            with self.db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO transactions (
                        id, account_id, entry_date, due_date, reference,
                        description, remarks, debit, credit
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        transaction.id,
                        transaction.account_id,
                        transaction.entry_date,
                        transaction.due_date,
                        transaction.reference,
                        transaction.description,
                        transaction.remarks,
                        str(transaction.debit), # Store as string for precision
                        str(transaction.credit),
                    ),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Could not create transaction: {e}") from e

        return transaction

    async def update_transaction(
        self,
        transaction_id: str,
        fields: TransactionDraft,
        account_id: str,
    ) -> Transaction:
        """Replace the editable fields of a transaction in the given account"""
        transaction = self._draft_to_transaction(transaction_id, account_id, fields)
        try:
            with self.db.transaction() as conn:
                cursor = conn.execute(
                    """
                    UPDATE transactions
                    SET entry_date = ?, due_date = ?, reference = ?,
                        description = ?, remarks = ?, debit = ?, credit = ?
                    WHERE id = ? AND account_id = ?
                    """,
                    (
                        transaction.entry_date,
                        transaction.due_date,
                        transaction.reference,
                        transaction.description,
                        transaction.remarks,
                        str(transaction.debit),
                        str(transaction.credit),
                        transaction_id,
                        account_id,
                    ),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Could not update transaction {transaction_id}: {e}") from e

        if cursor.rowcount == 0:
            raise RecordNotFoundError(
                f"Transaction with ID {transaction_id} not found in account {account_id}"
            )
        return transaction

    async def delete_transaction(self, transaction_id: str, account_id: str) -> None:
        """Delete a transaction from the given account"""
        try:
            with self.db.transaction() as conn:
                cursor = conn.execute(
                    "DELETE FROM transactions WHERE id = ? AND account_id = ?",
                    (transaction_id, account_id),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Could not delete transaction {transaction_id}: {e}") from e

        if cursor.rowcount == 0:
            raise RecordNotFoundError(
                f"Transaction with ID {transaction_id} not found in account {account_id}"
            )

    @staticmethod
    def _draft_to_transaction(
        transaction_id: str,
        account_id: str,
        fields: TransactionDraft,
    ) -> Transaction:
        return Transaction(
            id=transaction_id,
            account_id=account_id,
            entry_date=fields.entry_date,
            due_date=fields.due_date,
            reference=fields.reference,
            description=fields.description,
            remarks=fields.remarks,
            debit=fields.debit or Decimal("0"),
            credit=fields.credit or Decimal("0"),
        )

    def _row_to_transaction(self, row: sqlite3.Row) -> Transaction:
        """Convert database row to Transaction object."""
        return Transaction(
            id=row["id"],
            account_id=row["account_id"],
            entry_date=row["entry_date"],
            due_date=row["due_date"],
            reference=row["reference"],
            description=row["description"],
            remarks=row["remarks"],
            debit=Decimal(row["debit"]),
            credit=Decimal(row["credit"]),
        )
