import asyncio
import pytest
from datetime import date
from decimal import Decimal

from ledger_pro.database.connection import DatabaseConfig, DatabaseManager, execute_schema
from ledger_pro.domain.enums import MutationOp
from ledger_pro.domain.errors import ClosedAccountError
from ledger_pro.repositories.sqlite_ledger_store import SQLiteLedgerStore
from ledger_pro.services.ledger_service import LedgerService
from ledger_pro.services.models import TransactionDraft

@pytest.fixture
def service(tmp_path, closed_flags):
    """LedgerService over a real temp database"""
    db_manager = DatabaseManager(DatabaseConfig(tmp_path / "ledger.db"))
    execute_schema(db_manager.get_connection())

    yield LedgerService(SQLiteLedgerStore(db_manager), closed_flags)

    db_manager.close()

def _post(service, account_id, entry_date, debit="0", credit="0"):
    draft = TransactionDraft(entry_date=entry_date, debit=Decimal(debit), credit=Decimal(credit))
    return asyncio.run(service.mutate_transaction(MutationOp.CREATE, account_id, draft))


@pytest.mark.integration
class TestLedgerEndToEnd:

    def test_same_day_entries_order_by_creation(self, service):
        # Arrange
        account = asyncio.run(service.add_account("Cash"))
        _post(service, account.id, date(2024, 1, 10), credit="100")
        _post(service, account.id, date(2024, 1, 12), debit="30")
        _post(service, account.id, date(2024, 1, 12), credit="5")

        # Act
        rows = asyncio.run(service.list_transactions(account.id))

        # Assert
        assert [(t.entry_date, t.debit, t.credit, t.balance) for t in rows] == [
            (date(2024, 1, 12), Decimal("0"), Decimal("5"), Decimal("75")),
            (date(2024, 1, 12), Decimal("30"), Decimal("0"), Decimal("70")),
            (date(2024, 1, 10), Decimal("0"), Decimal("100"), Decimal("100")),
        ]

    def test_ranking_follows_activity_and_closed_flag(self, service):
        # Arrange
        a = asyncio.run(service.add_account("A"))
        b = asyncio.run(service.add_account("B"))
        c = asyncio.run(service.add_account("C"))
        _post(service, a.id, date(2024, 2, 1), credit="1")
        _post(service, b.id, date(2024, 3, 1), credit="1")
        asyncio.run(service.toggle_closed(b.id))

        # Act
        ranked = asyncio.run(service.list_accounts())

        # Assert
        assert [r.name for r in ranked] == ["A", "C", "B"]

    def test_closed_account_rejects_edits_until_reopened(self, service):
        # Arrange
        account = asyncio.run(service.add_account("Cash"))
        created = _post(service, account.id, date(2024, 1, 10), credit="100").transaction
        asyncio.run(service.toggle_closed(account.id))

        # Act & Assert
        with pytest.raises(ClosedAccountError):
            asyncio.run(service.mutate_transaction(
                MutationOp.DELETE, account.id, transaction_id=created.id
            ))
        assert len(asyncio.run(service.list_transactions(account.id))) == 1

        asyncio.run(service.toggle_closed(account.id))
        asyncio.run(service.mutate_transaction(
            MutationOp.DELETE, account.id, transaction_id=created.id
        ))
        assert asyncio.run(service.list_transactions(account.id)) == []

    def test_closed_owner_blocks_delete_named_under_open_account(self, service):
        # Arrange
        closed = asyncio.run(service.add_account("Old Bank"))
        open_account = asyncio.run(service.add_account("Cash"))
        created = _post(service, closed.id, date(2024, 1, 10), credit="100").transaction
        asyncio.run(service.toggle_closed(closed.id))

        # Act & Assert
        with pytest.raises(ClosedAccountError):
            asyncio.run(service.mutate_transaction(
                MutationOp.DELETE, open_account.id, transaction_id=created.id
            ))
        assert [t.id for t in asyncio.run(service.list_transactions(closed.id))] == [created.id]
