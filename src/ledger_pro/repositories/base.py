from abc import ABC, abstractmethod
from typing import List, Optional

from ledger_pro.domain.errors import StoreError, RecordNotFoundError
from ledger_pro.domain.models import Account, Transaction
from ledger_pro.services.models import TransactionDraft

__all__ = ["LedgerStore", "StoreError", "RecordNotFoundError"]


class LedgerStore(ABC):
    """
    Abstract record store for accounts and transactions.

    Every call is a suspension point: callers await completion before
    using the result. Records may come back in any order.
    """

    @abstractmethod
    async def fetch_accounts(self) -> List[Account]:
        """
        Retrieve every account.

        Returns:
            Accounts as stored; the closed flag is not part of the record

        Raises:
            StoreError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def fetch_transactions(self, account_id: str) -> List[Transaction]:
        """
        Retrieve all transactions of one account, unordered.

        Args:
            account_id: Owning account identifier

        Raises:
            StoreError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def fetch_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """
        Retrieve a single transaction by ID.

        Args:
            transaction_id: Transaction identifier

        Returns:
            Transaction if found, None otherwise

        Raises:
            StoreError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def create_account(self, name: str) -> Account:
        """
        Create an account.

        Args:
            name: Display name (already validated non-empty)

        Returns:
            The stored account with its identifier assigned
        """
        pass

    @abstractmethod
    async def create_transaction(
        self,
        account_id: str,
        fields: TransactionDraft,
    ) -> Transaction:
        """
        Create a transaction in an account.

        Args:
            account_id: Owning account identifier
            fields: Validated transaction fields

        Returns:
            The stored transaction with its identifier assigned

        Raises:
            StoreError: If the write fails
        """
        pass

    @abstractmethod
    async def update_transaction(
        self,
        transaction_id: str,
        fields: TransactionDraft,
        account_id: str,
    ) -> Transaction:
        """
        Replace the editable fields of a transaction in an account.

        Identity and owning account never change.

        Args:
            transaction_id: Transaction to edit
            fields: Validated transaction fields
            account_id: Account the transaction must belong to

        Raises:
            RecordNotFoundError: If no such transaction exists in the account
            StoreError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: str, account_id: str) -> None:
        """
        Delete a transaction from an account.

        Raises:
            RecordNotFoundError: If no such transaction exists in the account
            StoreError: If the write fails
        """
        pass
