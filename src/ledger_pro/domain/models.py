from dataclasses import dataclass
from decimal import Decimal
from datetime import date
from typing import Optional

@dataclass
class Account:
    """A named bucket that owns transactions"""
    id: str
    name: str
    closed: bool = False

    def __repr__(self):
        state = "closed" if self.closed else "open"
        return f"Account({self.id}, {self.name[:30]}, {state})"


@dataclass
class Transaction:
    """Core domain model representing a single ledger entry"""
    id: str
    account_id: str
    entry_date: date
    due_date: Optional[date] = None
    reference: Optional[str] = None
    description: Optional[str] = None
    remarks: Optional[str] = None
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    # Derived when listing, never stored
    balance: Optional[Decimal] = None

    @property
    def net_amount(self) -> Decimal:
        """Credit minus debit, treating a missing amount as zero"""
        return (self.credit or Decimal("0")) - (self.debit or Decimal("0"))

    def __repr__(self):
        return (
            f"Transaction({self.entry_date}, {self.id}, "
            f"+{self.credit or 0}/-{self.debit or 0})"
        )
