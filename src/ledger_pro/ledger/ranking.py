import asyncio
from datetime import date
from typing import List, Optional, Sequence

from ledger_pro.domain.models import Account
from ledger_pro.ledger.ordering import latest_transaction
from ledger_pro.logging_setup import get_logger
from ledger_pro.repositories.base import LedgerStore
from ledger_pro.services.models import RankedAccount

logger = get_logger(__name__)


class AccountActivityRanker:
    """
    Orders accounts for display by open/closed status and recency.

    Ranking rules, applied in order:
    1. Open accounts come before closed accounts
    2. Within each group, accounts with transactions come first, most
       recent entry date first
    3. Accounts without transactions keep their relative input order

    Each account's transactions are fetched separately and concurrently.
    A failed fetch only affects that account, which is then ranked as
    having no transactions.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    async def rank(self, accounts: Sequence[Account]) -> List[RankedAccount]:
        """
        Rank accounts. Read-only: neither accounts nor transactions change.

        Args:
            accounts: Accounts with their closed flag already attached

        Returns:
            Ranked accounts, each annotated with its latest entry date
        """
        latest_dates = await asyncio.gather(
            *(self._latest_entry_date(account) for account in accounts)
        )

        ranked = [
            RankedAccount(account=account, last_entry_date=last)
            for account, last in zip(accounts, latest_dates)
        ]
        # sorted() is stable, so ties keep their input order
        return sorted(ranked, key=self._rank_key)

    async def _latest_entry_date(self, account: Account) -> Optional[date]:
        """Entry date of the account's newest transaction, None if unknown"""
        try:
            transactions = await self.store.fetch_transactions(account.id)
        except Exception:
            logger.warning(
                "Could not fetch transactions for account %s, ranking it as inactive",
                account.id,
                exc_info=True,
            )
            return None

        head = latest_transaction(transactions)
        return head.entry_date if head else None

    @staticmethod
    def _rank_key(ranked: RankedAccount):
        last = ranked.last_entry_date
        recency = -last.toordinal() if last else 0
        return (ranked.account.closed, last is None, recency)
