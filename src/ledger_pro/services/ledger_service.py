from dataclasses import replace
from typing import List, Optional

from ledger_pro.domain.enums import GuardVerdict, MutationOp
from ledger_pro.domain.errors import RecordNotFoundError, StoreError, ValidationError
from ledger_pro.domain.models import Account, Transaction
from ledger_pro.ledger import (
    AccountActivityRanker,
    ClosedAccountGuard,
    derive_balances,
    order_transactions,
)
from ledger_pro.logging_setup import get_logger
from ledger_pro.repositories.base import LedgerStore
from ledger_pro.repositories.closed_flag_store import ClosedFlagStore
from ledger_pro.services.models import MutationResult, RankedAccount, TransactionDraft

logger = get_logger(__name__)


class LedgerService:
    """
    Entry point for everything a UI does with the ledger.

    After any successful mutation the caller reloads list_accounts() and
    list_transactions(); those two calls are the only source of displayed
    balances and rankings.
    """

    def __init__(self, store: LedgerStore, closed_flags: ClosedFlagStore):
        self.store = store
        self.closed_flags = closed_flags
        self.guard = ClosedAccountGuard(closed_flags.is_closed)
        self.ranker = AccountActivityRanker(store)

    async def list_accounts(self) -> List[RankedAccount]:
        """
        List accounts ranked for display.

        Returns:
            Open accounts before closed ones, most recently active first

        Raises:
            StoreError: If the account list cannot be fetched
        """
        try:
            accounts = await self.store.fetch_accounts()
        except StoreError:
            logger.error("Failed to fetch accounts", exc_info=True)
            raise

        flagged = [
            replace(account, closed=self.closed_flags.is_closed(account.id))
            for account in accounts
        ]
        return await self.ranker.rank(flagged)

    async def list_transactions(self, account_id: Optional[str]) -> List[Transaction]:
        """
        List an account's transactions newest-first with running balances.

        Args:
            account_id: Account to list; empty or None returns [] without
                querying the store

        Raises:
            StoreError: If the transactions cannot be fetched
        """
        if not account_id:
            return []

        try:
            transactions = await self.store.fetch_transactions(account_id)
        except StoreError:
            logger.error(
                "Failed to fetch transactions for account %s", account_id, exc_info=True
            )
            raise

        return derive_balances(order_transactions(transactions))

    def guard_verdict(self, account_id: str) -> GuardVerdict:
        """Whether transaction writes to the account are currently allowed"""
        return self.guard.verdict(account_id)

    async def mutate_transaction(
        self,
        op: MutationOp,
        account_id: Optional[str],
        payload: Optional[TransactionDraft] = None,
        transaction_id: Optional[str] = None,
    ) -> MutationResult:
        """
        Create, update or delete a transaction in an open account.

        Args:
            op: The write to perform
            account_id: Owning account (the selected account)
            payload: Fields for create and update
            transaction_id: Target transaction for update and delete

        Returns:
            A MutationResult naming the views to reload

        Raises:
            ValidationError: If the account, target id or a required field is missing
            ClosedAccountError: If the named or the owning account is closed
            RecordNotFoundError: If the target transaction is not in the account
            StoreError: If the store call fails
        """
        if not account_id:
            raise ValidationError("No account selected.")

        self.guard.check(account_id)

        if op is not MutationOp.DELETE:
            if payload is None:
                raise ValidationError("Transaction fields are required.")
            payload.validate()
        if op is not MutationOp.CREATE and not transaction_id:
            raise ValidationError("No transaction selected.")

        try:
            if op is not MutationOp.CREATE:
                await self._check_owner(account_id, transaction_id)

            if op is MutationOp.CREATE:
                transaction = await self.store.create_transaction(account_id, payload)
            elif op is MutationOp.UPDATE:
                transaction = await self.store.update_transaction(
                    transaction_id, payload, account_id
                )
            else:
                await self.store.delete_transaction(transaction_id, account_id)
                transaction = None
        except StoreError:
            logger.error(
                "Failed to %s transaction in account %s", op.value, account_id, exc_info=True
            )
            raise

        logger.info(
            "Applied %s to transaction %s in account %s",
            op.value,
            transaction.id if transaction else transaction_id,
            account_id,
        )
        return MutationResult(op=op, account_id=account_id, transaction=transaction)

    async def _check_owner(self, account_id: str, transaction_id: str) -> None:
        """
        Guard the account that owns the transaction, not just the named one.

        Raises:
            RecordNotFoundError: If the transaction doesn't exist or belongs
                to another account
            ClosedAccountError: If the owning account is closed
        """
        existing = await self.store.fetch_transaction(transaction_id)
        if existing is None:
            raise RecordNotFoundError(f"Transaction with ID {transaction_id} not found")

        self.guard.check(existing.account_id)
        if existing.account_id != account_id:
            raise RecordNotFoundError(
                f"Transaction {transaction_id} does not belong to account {account_id}"
            )

    async def add_account(self, name: str) -> Account:
        """
        Create a new, open account.

        Raises:
            ValidationError: If the name is blank
            StoreError: If the store call fails
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required.")

        try:
            account = await self.store.create_account(name.strip())
        except StoreError:
            logger.error("Failed to create account '%s'", name, exc_info=True)
            raise

        logger.info("Created account %s (%s)", account.id, account.name)
        return account

    async def toggle_closed(self, account_id: str) -> bool:
        """
        Open a closed account or close an open one. Never guarded.

        Returns:
            The new closed flag

        Raises:
            ValidationError: If no account has this id
            StoreError: If the accounts cannot be fetched or the flag cannot be saved
        """
        try:
            accounts = await self.store.fetch_accounts()
        except StoreError:
            logger.error("Failed to fetch accounts", exc_info=True)
            raise

        if account_id not in {account.id for account in accounts}:
            raise ValidationError(f"Unknown account '{account_id}'.")

        return self.closed_flags.toggle(account_id)
