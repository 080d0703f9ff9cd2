"""Appointment reporting domain service."""

from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Optional

from salonbook.database.base import Database
from salonbook.domain.entities import (
    Appointment,
    AppointmentStatus,
    ClientReportRow,
    ProfessionalReportRow,
    ServiceReportRow,
)

ZERO = Decimal("0")


class ReportService:
    """Service for building admin reports over a date range.

    Revenue figures are estimates from completed appointments times the
    current service price; they are not read from the ledger.
    """

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _appointments(self, start_date: Optional[date], end_date: Optional[date]) -> list[Appointment]:
        return self.db.list_appointments(start_date=start_date, end_date=end_date)

    def service_report(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[ServiceReportRow]:
        """Appointments, completions and revenue per service, in catalog order."""
        appointments = self._appointments(start_date, end_date)
        rows = []
        for service in self.db.list_services():
            booked = [a for a in appointments if a.service_id == service.id]
            completed = sum(1 for a in booked if a.status is AppointmentStatus.COMPLETED)
            rows.append(
                ServiceReportRow(
                    service_id=service.id,
                    name=service.name,
                    appointments=len(booked),
                    completed=completed,
                    revenue=service.price * completed,
                )
            )
        return rows

    def professional_report(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[ProfessionalReportRow]:
        """Appointments and completions per professional."""
        appointments = self._appointments(start_date, end_date)
        rows = []
        for professional in self.db.list_professionals():
            booked = [a for a in appointments if a.professional_id == professional.id]
            rows.append(
                ProfessionalReportRow(
                    professional_id=professional.id,
                    name=professional.name,
                    appointments=len(booked),
                    completed=sum(1 for a in booked if a.status is AppointmentStatus.COMPLETED),
                )
            )
        return rows

    def client_report(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[ClientReportRow]:
        """Per-client outcomes and revenue, highest revenue first.

        Only clients with at least one appointment in the range are listed.
        """
        prices = {service.id: service.price for service in self.db.list_services()}
        by_user: dict[int, list[Appointment]] = {}
        for appointment in self._appointments(start_date, end_date):
            by_user.setdefault(appointment.user_id, []).append(appointment)

        rows = []
        for user_id, booked in by_user.items():
            user = self.db.get_user(user_id)
            counts = Counter(a.status for a in booked)
            revenue = sum(
                (prices.get(a.service_id, ZERO) for a in booked if a.status is AppointmentStatus.COMPLETED),
                ZERO,
            )
            rows.append(
                ClientReportRow(
                    user_id=user_id,
                    name=user.name if user else f"User {user_id}",
                    appointments=len(booked),
                    completed=counts[AppointmentStatus.COMPLETED],
                    cancelled=counts[AppointmentStatus.CANCELLED],
                    no_show=counts[AppointmentStatus.NO_SHOW],
                    revenue=revenue,
                )
            )
        rows.sort(key=lambda row: (-row.revenue, row.user_id))
        return rows

    def status_breakdown(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> dict[AppointmentStatus, int]:
        """Number of appointments in each status (every status present, possibly 0)."""
        counts = Counter(a.status for a in self._appointments(start_date, end_date))
        return {status: counts[status] for status in AppointmentStatus}
