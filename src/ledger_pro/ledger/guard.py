from typing import Callable

from ledger_pro.domain.enums import GuardVerdict
from ledger_pro.domain.errors import ClosedAccountError
from ledger_pro.logging_setup import get_logger

logger = get_logger(__name__)


class ClosedAccountGuard:
    """
    Gate applied before every transaction create, update or delete.

    Toggling the closed flag itself never goes through the guard, it is
    how a closed account gets reopened.
    """

    def __init__(self, is_closed: Callable[[str], bool]):
        """
        Args:
            is_closed: Lookup returning the closed flag for an account id
        """
        self._is_closed = is_closed

    def verdict(self, account_id: str) -> GuardVerdict:
        """Return BLOCKED for a closed account, ALLOWED otherwise"""
        if self._is_closed(account_id):
            return GuardVerdict.BLOCKED
        return GuardVerdict.ALLOWED

    def check(self, account_id: str) -> None:
        """
        Raise if writes to the account are blocked.

        Raises:
            ClosedAccountError: If the account is closed
        """
        if self.verdict(account_id) is GuardVerdict.BLOCKED:
            logger.info("Blocked write to closed account %s", account_id)
            raise ClosedAccountError(account_id)
