import pytest
from datetime import date
from itertools import permutations

from ledger_pro.ledger.ordering import order_transactions, latest_transaction


@pytest.mark.unit
class TestOrderTransactions:
    """Test the canonical newest-first order"""

    def test_empty_input_returns_empty_list(self):
        assert order_transactions([]) == []

    def test_later_entry_date_comes_first(self, make_transaction):
        # Arrange
        older = make_transaction("b", date(2024, 1, 1))
        newer = make_transaction("a", date(2024, 3, 1))

        # Act
        result = order_transactions([older, newer])

        # Assert
        assert [t.id for t in result] == ["a", "b"]

    def test_same_date_breaks_tie_by_greater_id(self, scenario_transactions):
        # Act
        result = order_transactions(scenario_transactions)

        # Assert
        assert [t.id for t in result] == ["t3", "t2", "t1"]

    def test_input_is_not_mutated(self, scenario_transactions):
        # Arrange
        before = list(scenario_transactions)

        # Act
        result = order_transactions(scenario_transactions)

        # Assert
        assert scenario_transactions == before
        assert result is not scenario_transactions

    def test_order_is_independent_of_input_order(self, scenario_transactions, make_transaction):
        """The store may return records in any order"""
        transactions = scenario_transactions + [
            make_transaction("t0", date(2023, 12, 31), debit="1"),
        ]
        expected = ["t3", "t2", "t1", "t0"]

        for permutation in permutations(transactions):
            assert [t.id for t in order_transactions(permutation)] == expected

    def test_ordering_is_idempotent(self, scenario_transactions):
        once = order_transactions(scenario_transactions)
        assert order_transactions(once) == once

    def test_result_is_strictly_ordered(self, scenario_transactions):
        result = order_transactions(scenario_transactions)
        keys = [(t.entry_date, t.id) for t in result]
        assert all(a > b for a, b in zip(keys, keys[1:]))

    def test_due_date_and_reference_do_not_affect_position(self, make_transaction):
        # Arrange
        first = make_transaction("x2", date(2024, 5, 1), due_date=None, reference=None)
        second = make_transaction(
            "x1", date(2024, 5, 1), due_date=date(2030, 1, 1), reference="ZZZ"
        )

        # Act & Assert
        assert [t.id for t in order_transactions([second, first])] == ["x2", "x1"]


@pytest.mark.unit
class TestLatestTransaction:

    def test_returns_none_for_no_transactions(self):
        assert latest_transaction([]) is None

    def test_returns_head_of_canonical_order(self, scenario_transactions):
        assert latest_transaction(scenario_transactions).id == "t3"
