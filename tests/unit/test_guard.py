import pytest

from ledger_pro.domain.enums import GuardVerdict
from ledger_pro.domain.errors import ClosedAccountError
from ledger_pro.ledger.guard import ClosedAccountGuard


@pytest.fixture
def guard() -> ClosedAccountGuard:
    """Guard where only 'shut' is closed"""
    return ClosedAccountGuard(lambda account_id: account_id == "shut")


@pytest.mark.unit
class TestClosedAccountGuard:

    def test_open_account_is_allowed(self, guard):
        assert guard.verdict("open") is GuardVerdict.ALLOWED

    def test_closed_account_is_blocked(self, guard):
        assert guard.verdict("shut") is GuardVerdict.BLOCKED

    def test_check_passes_for_open_account(self, guard):
        guard.check("open")

    def test_check_raises_distinct_error_for_closed_account(self, guard):
        with pytest.raises(ClosedAccountError) as exc_info:
            guard.check("shut")

        assert exc_info.value.account_id == "shut"

    def test_verdict_follows_current_flag(self):
        # Arrange
        flags = {"acc": False}
        guard = ClosedAccountGuard(lambda account_id: flags[account_id])

        # Act & Assert
        assert guard.verdict("acc") is GuardVerdict.ALLOWED
        flags["acc"] = True
        assert guard.verdict("acc") is GuardVerdict.BLOCKED
