from dataclasses import dataclass
from typing import List, Optional

from ledger_pro.domain.enums import MutationOp
from ledger_pro.domain.errors import (
    ClosedAccountError,
    LedgerError,
    StoreError,
    ValidationError,
)
from ledger_pro.domain.models import Transaction
from ledger_pro.logging_setup import get_logger
from ledger_pro.services.ledger_service import LedgerService
from ledger_pro.services.models import RankedAccount, TransactionDraft

logger = get_logger(__name__)


@dataclass
class Notice:
    """A user-facing message left by a failed action"""
    kind: str # "validation", "closed" or "failure"
    message: str


class LedgerSession:
    """
    State a ledger screen works from: the ranked accounts, the selected
    account and its balanced transactions.

    Actions run one at a time. The only overlap handled is a transaction
    fetch still in flight when the selection changes: its response is
    dropped on arrival.
    """

    def __init__(self, service: LedgerService):
        self.service = service
        self.accounts: List[RankedAccount] = []
        self.selected_account_id: str = ""
        self.transactions: List[Transaction] = []
        self.loading: bool = False
        self.notice: Optional[Notice] = None

    async def refresh_accounts(self) -> bool:
        """
        Reload the ranked account list.

        Returns:
            False if the store failed; the previous list is kept
        """
        try:
            self.accounts = await self.service.list_accounts()
        except StoreError as e:
            self.notice = self._notice_for(e)
            return False
        return True

    async def select_account(self, account_id: Optional[str]) -> bool:
        """
        Change the selected account and load its transactions.

        Returns:
            True if the loaded transactions were applied
        """
        self.selected_account_id = account_id or ""
        return await self.reload_transactions()

    async def reload_transactions(self) -> bool:
        """
        Reload transactions for the selected account.

        Returns:
            False if the fetch failed, or if the response was discarded
            because the selection changed while it was in flight
        """
        requested = self.selected_account_id
        if not requested:
            self.transactions = []
            self.loading = False
            return True

        self.loading = True
        try:
            transactions = await self.service.list_transactions(requested)
        except StoreError as e:
            if self.selected_account_id == requested:
                self.notice = self._notice_for(e)
            return False
        finally:
            if self.selected_account_id == requested:
                self.loading = False

        if self.selected_account_id != requested:
            logger.debug(
                "Discarding stale transactions for %s (selected: %s)",
                requested,
                self.selected_account_id or "none",
            )
            return False

        self.transactions = transactions
        return True

    async def submit(
        self,
        op: MutationOp,
        draft: Optional[TransactionDraft] = None,
        transaction_id: Optional[str] = None,
    ) -> bool:
        """
        Apply a transaction write to the selected account.

        Failures are recorded in `notice` and leave both lists unchanged.
        On success both lists are reloaded.

        Returns:
            True if the write was applied
        """
        self.notice = None
        try:
            await self.service.mutate_transaction(
                op, self.selected_account_id, draft, transaction_id
            )
        except LedgerError as e:
            self.notice = self._notice_for(e)
            return False

        await self.reload_transactions()
        await self.refresh_accounts()
        return True

    async def add_account(self, name: str) -> bool:
        """Create an account and reload the account list"""
        self.notice = None
        try:
            await self.service.add_account(name)
        except LedgerError as e:
            self.notice = self._notice_for(e)
            return False

        await self.refresh_accounts()
        return True

    async def toggle_closed(self, account_id: str) -> bool:
        """
        Open or close an account.

        Closing the selected account clears the selection. On failure the
        error is recorded in `notice` and the selection is kept.

        Returns:
            The account's closed flag after the call
        """
        self.notice = None
        try:
            closed = await self.service.toggle_closed(account_id)
        except LedgerError as e:
            self.notice = self._notice_for(e)
            return self.service.closed_flags.is_closed(account_id)

        if closed and account_id == self.selected_account_id:
            self.selected_account_id = ""
            self.transactions = []
            self.loading = False
        await self.refresh_accounts()
        return closed

    def dismiss_notice(self) -> None:
        self.notice = None

    @staticmethod
    def _notice_for(error: LedgerError) -> Notice:
        if isinstance(error, ValidationError):
            return Notice(kind="validation", message=str(error))
        if isinstance(error, ClosedAccountError):
            return Notice(
                kind="closed",
                message="This account is closed. Reopen it to change its transactions.",
            )
        if isinstance(error, StoreError):
            return Notice(kind="failure", message="Something went wrong. Please try again.")
        return Notice(kind="failure", message=str(error))
