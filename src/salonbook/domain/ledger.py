"""Ledger domain service."""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from salonbook.database.base import Database
from salonbook.domain.entities import (
    AppointmentStatus,
    DailyTotal,
    LedgerSummary,
    Transaction,
    TransactionType,
)
from salonbook.domain.errors import NotFoundError, ValidationError, entity_not_found
from salonbook.utils.amount_parser import check_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def validate_amount(amount: Decimal | int | str) -> Decimal:
    """Return amount as a Decimal if it is strictly positive."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError(f"Transaction amount must be a number, got {amount!r}")
    if not value.is_finite() or value <= 0:
        raise ValidationError(f"Transaction amount must be positive, got {amount}")
    try:
        return check_money(value)
    except ValueError as e:
        raise ValidationError(f"Invalid transaction amount: {e}")


def _parse_type(type: TransactionType | str) -> TransactionType:
    try:
        return TransactionType(type)
    except ValueError:
        raise ValidationError(f"Transaction type must be 'income' or 'expense', got '{type}'")


class LedgerService:
    """Service for recording and aggregating income and expenses.

    Totals are always computed from the entries in the requested range at
    read time; no running balance is stored.
    """

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def record(
        self,
        type: TransactionType | str,
        amount: Decimal | int | str,
        description: str,
        day: date,
        appointment_id: Optional[int] = None,
    ) -> Transaction:
        """Record an income or expense entry.

        Args:
            type: income or expense
            amount: Strictly positive amount; direction comes from type
            description: What the entry is for
            day: Date the entry applies to
            appointment_id: Optional appointment the entry belongs to

        Raises:
            ValidationError: If type, amount or description is invalid
            NotFoundError: If the linked appointment doesn't exist
        """
        entry_type = _parse_type(type)
        value = validate_amount(amount)
        if not description or not description.strip():
            raise ValidationError("Transaction description is required")
        self._check_appointment(appointment_id)

        transaction = self.db.create_transaction(
            type=entry_type,
            amount=value,
            description=description,
            date=day,
            appointment_id=appointment_id,
        )
        logger.info(
            "Recorded %s %s of %s on %s", entry_type.value, transaction.id, value, day
        )
        return transaction

    def record_appointment_income(
        self, appointment_id: int, day: Optional[date] = None
    ) -> Transaction:
        """Record the service price of a completed appointment as income.

        Args:
            appointment_id: Completed appointment
            day: Entry date; defaults to the appointment date

        Raises:
            NotFoundError: If appointment or its service doesn't exist
            ValidationError: If the appointment is not completed, already has
                an income entry, or its service is free
        """
        appointment = self.db.get_appointment(appointment_id)
        if appointment is None:
            raise NotFoundError(entity_not_found("Appointment", appointment_id))
        if appointment.status is not AppointmentStatus.COMPLETED:
            raise ValidationError(
                f"Appointment {appointment_id} is '{appointment.status.value}', not completed"
            )
        existing = self.db.list_transactions(
            type=TransactionType.INCOME, appointment_id=appointment_id
        )
        if existing:
            raise ValidationError(
                f"Appointment {appointment_id} already has income entry {existing[0].id}"
            )
        service = self.db.get_service(appointment.service_id)
        if service is None:
            raise NotFoundError(entity_not_found("Service", appointment.service_id))

        return self.record(
            TransactionType.INCOME,
            service.price,
            f"{service.name} (appointment {appointment_id})",
            day or appointment.date,
            appointment_id=appointment_id,
        )

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self.db.get_transaction(transaction_id)

    def update_transaction(self, transaction_id: int, **changes: Any) -> Transaction:
        """Merge changes into a transaction, validating changed fields.

        Raises:
            NotFoundError: If transaction or a newly linked appointment doesn't exist
            ValidationError: If a changed field is invalid
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(entity_not_found("Transaction", transaction_id))
        if "type" in changes:
            changes["type"] = _parse_type(changes["type"])
        if "amount" in changes:
            changes["amount"] = validate_amount(changes["amount"])
        if "description" in changes and (
            not changes["description"] or not changes["description"].strip()
        ):
            raise ValidationError("Transaction description is required")
        if "appointment_id" in changes:
            self._check_appointment(changes["appointment_id"])
        return self.db.update_transaction(transaction_id, **changes)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        if not self.db.delete_transaction(transaction_id):
            raise NotFoundError(entity_not_found("Transaction", transaction_id))
        logger.info("Deleted transaction %s", transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType | str] = None,
        appointment_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions in an inclusive date range, oldest first."""
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            type=_parse_type(type) if type is not None else None,
            appointment_id=appointment_id,
        )

    def summarize(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> LedgerSummary:
        """Total income, expense and net over an inclusive date range."""
        income = ZERO
        expense = ZERO
        transactions = self.db.list_transactions(start_date=start_date, end_date=end_date)
        for txn in transactions:
            if txn.type is TransactionType.INCOME:
                income += txn.amount
            else:
                expense += txn.amount
        return LedgerSummary(
            start_date=start_date,
            end_date=end_date,
            income=income,
            expense=expense,
            count=len(transactions),
        )

    def daily_totals(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[DailyTotal]:
        """Income and expense per day with at least one entry, oldest first."""
        totals: dict[date, dict[TransactionType, Decimal]] = defaultdict(
            lambda: {TransactionType.INCOME: ZERO, TransactionType.EXPENSE: ZERO}
        )
        for txn in self.db.list_transactions(start_date=start_date, end_date=end_date):
            totals[txn.date][txn.type] += txn.amount
        return [
            DailyTotal(
                date=day,
                income=amounts[TransactionType.INCOME],
                expense=amounts[TransactionType.EXPENSE],
            )
            for day, amounts in sorted(totals.items())
        ]

    def _check_appointment(self, appointment_id: Optional[int]) -> None:
        if appointment_id is not None and self.db.get_appointment(appointment_id) is None:
            raise NotFoundError(entity_not_found("Appointment", appointment_id))
