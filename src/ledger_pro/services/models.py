"""
Service layer models - DTOs for ledger operations.

These models carry input to and results from the ledger service, they are
not stored records.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple

from ledger_pro.domain.enums import MutationOp
from ledger_pro.domain.errors import ValidationError
from ledger_pro.domain.models import Account, Transaction


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_date(name: str, value: Any) -> Optional[date]:
    if _blank(value):
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD), got '{value}'")


def _parse_amount(name: str, value: Any) -> Decimal:
    if _blank(value):
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{name} must be a number, got '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"{name} must be a number, got '{value}'")
    return amount


def _optional_text(value: Any) -> Optional[str]:
    if _blank(value):
        return None
    return str(value)


@dataclass
class TransactionDraft:
    """
    Editable fields of a transaction, as submitted by a caller.

    The reference is an opaque string, never interpreted as a number.
    """
    entry_date: Optional[date] = None
    due_date: Optional[date] = None
    reference: Optional[str] = None
    description: Optional[str] = None
    remarks: Optional[str] = None
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "TransactionDraft":
        """
        Build a draft from raw form input.

        Empty strings count as absent; dates use ISO format; amounts are
        parsed as exact decimals, a missing amount becomes 0.

        Args:
            form: Field name to raw value

        Returns:
            A parsed draft (not yet checked for required fields)

        Raises:
            ValidationError: If a date or amount cannot be parsed
        """
        return cls(
            entry_date=_parse_date("Date of entry", form.get("entry_date")),
            due_date=_parse_date("Due date", form.get("due_date")),
            reference=_optional_text(form.get("reference")),
            description=_optional_text(form.get("description")),
            remarks=_optional_text(form.get("remarks")),
            debit=_parse_amount("Debit", form.get("debit")),
            credit=_parse_amount("Credit", form.get("credit")),
        )

    def validate(self) -> None:
        """
        Check the draft can be written to the store.

        Raises:
            ValidationError: If the entry date is missing or an amount is negative
        """
        if self.entry_date is None:
            raise ValidationError("Date of entry is required.")
        for name, amount in (("Debit", self.debit), ("Credit", self.credit)):
            if amount is not None and amount < 0:
                raise ValidationError(f"{name} cannot be negative.")

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionDraft":
        """Draft pre-filled with an existing transaction's fields, for editing"""
        return cls(
            entry_date=transaction.entry_date,
            due_date=transaction.due_date,
            reference=transaction.reference,
            description=transaction.description,
            remarks=transaction.remarks,
            debit=transaction.debit,
            credit=transaction.credit,
        )


@dataclass
class RankedAccount:
    """An account annotated with the date of its most recent transaction"""
    account: Account
    last_entry_date: Optional[date] = None

    @property
    def id(self) -> str:
        return self.account.id

    @property
    def name(self) -> str:
        return self.account.name

    @property
    def closed(self) -> bool:
        return self.account.closed


@dataclass
class MutationResult:
    """
    Outcome of a successful transaction write.

    `invalidated` names the views the caller must reload; displayed lists
    are never patched in place.
    """
    op: MutationOp
    account_id: str
    transaction: Optional[Transaction] = None
    invalidated: Tuple[str, ...] = ("transactions", "accounts")
