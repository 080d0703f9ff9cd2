"""Appointment lifecycle domain service."""

import logging
from datetime import date, time
from typing import Iterable, Optional

from salonbook.database.base import Database
from salonbook.domain.availability import AvailabilityService
from salonbook.domain.entities import Appointment, AppointmentStatus
from salonbook.domain.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    entity_not_found,
    invalid_transition,
)
from salonbook.utils.time_parser import format_time

logger = logging.getLogger(__name__)


def _parse_status(status: AppointmentStatus | str) -> AppointmentStatus:
    try:
        return AppointmentStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in AppointmentStatus)
        raise ValidationError(f"Unknown appointment status '{status}'. Expected one of: {allowed}")


class BookingService:
    """Service for creating appointments and moving them through their lifecycle.

    Status transitions: scheduled -> completed | cancelled | no-show. The
    three outcomes are terminal. Ledger entries are never created or
    reversed here.
    """

    def __init__(self, db: Database, availability: Optional[AvailabilityService] = None):
        """Initialize booking service.

        Args:
            db: Database instance
            availability: Availability calculator; defaults to one with the
                standard slot step and conflict policy
        """
        self.db = db
        self.availability = availability or AvailabilityService(db)

    def create_appointment(
        self,
        user_id: int,
        professional_id: int,
        service_id: int,
        day: date,
        start_time: time,
        notes: Optional[str] = None,
    ) -> Appointment:
        """Book an appointment.

        The store re-checks for a conflicting booking as part of the insert,
        so of two concurrent requests for the same slot only one succeeds.

        Args:
            user_id: Client booking the appointment
            professional_id: Professional performing the service
            service_id: Service to perform
            day: Appointment date
            start_time: Requested start; must be one of the day's slots
            notes: Optional notes

        Returns:
            The scheduled appointment

        Raises:
            NotFoundError: If user, professional or service doesn't exist
            ValidationError: If professional or service is inactive, the
                professional doesn't perform the service, or the start is not
                a slot in the professional's hours that day
            ConflictError: If the slot is already booked
        """
        if self.db.get_user(user_id) is None:
            raise NotFoundError(entity_not_found("User", user_id))

        try:
            end_time = self.availability.check_slot(professional_id, service_id, day, start_time)
            appointment = self.db.create_appointment(
                user_id=user_id,
                professional_id=professional_id,
                service_id=service_id,
                date=day,
                start_time=start_time,
                end_time=end_time,
                notes=notes,
                conflict_policy=self.availability.conflict_policy,
            )
        except ConflictError:
            logger.warning(
                "Rejected booking for professional %s on %s at %s: slot taken",
                professional_id,
                day,
                format_time(start_time),
            )
            raise

        logger.info(
            "Booked appointment %s: user %s with professional %s on %s %s-%s",
            appointment.id,
            user_id,
            professional_id,
            day,
            format_time(appointment.start_time),
            format_time(appointment.end_time),
        )
        return appointment

    def get_appointment(self, appointment_id: int) -> Optional[Appointment]:
        return self.db.get_appointment(appointment_id)

    def require_appointment(self, appointment_id: int) -> Appointment:
        """Get appointment by ID or raise NotFoundError."""
        appointment = self.db.get_appointment(appointment_id)
        if appointment is None:
            raise NotFoundError(entity_not_found("Appointment", appointment_id))
        return appointment

    def update_status(self, appointment_id: int, status: AppointmentStatus | str) -> Appointment:
        """Move an appointment to a new status.

        Raises:
            NotFoundError: If appointment doesn't exist
            ValidationError: If status is not a known status
            InvalidTransitionError: If the change is not an allowed transition
        """
        target = _parse_status(status)
        appointment = self.require_appointment(appointment_id)
        if not appointment.status.can_transition_to(target):
            raise InvalidTransitionError(
                invalid_transition(appointment_id, appointment.status.value, target.value)
            )
        # Fails if another caller changed the status since it was read
        updated = self.db.transition_appointment(appointment_id, appointment.status, target)
        if updated is None:
            raise NotFoundError(entity_not_found("Appointment", appointment_id))
        logger.info(
            "Appointment %s: %s -> %s", appointment_id, appointment.status.value, target.value
        )
        return updated

    def complete(self, appointment_id: int) -> Appointment:
        return self.update_status(appointment_id, AppointmentStatus.COMPLETED)

    def cancel(self, appointment_id: int) -> Appointment:
        return self.update_status(appointment_id, AppointmentStatus.CANCELLED)

    def mark_no_show(self, appointment_id: int) -> Appointment:
        return self.update_status(appointment_id, AppointmentStatus.NO_SHOW)

    def reschedule(self, appointment_id: int, day: date, start_time: time) -> Appointment:
        """Move a scheduled appointment to another slot.

        Raises:
            NotFoundError: If appointment doesn't exist
            InvalidTransitionError: If the appointment is no longer scheduled
            ValidationError: If the new start is not a slot that day, or the
                professional or service can no longer be booked together
            ConflictError: If the new slot is taken by another appointment
        """
        appointment = self.require_appointment(appointment_id)
        if appointment.status is not AppointmentStatus.SCHEDULED:
            raise InvalidTransitionError(
                f"Cannot reschedule appointment {appointment_id}: it is '{appointment.status.value}'"
            )
        end_time = self.availability.check_slot(
            appointment.professional_id,
            appointment.service_id,
            day,
            start_time,
            exclude_id=appointment_id,
        )
        moved = self.db.move_appointment(
            appointment_id,
            date=day,
            start_time=start_time,
            end_time=end_time,
            conflict_policy=self.availability.conflict_policy,
        )
        logger.info(
            "Rescheduled appointment %s to %s %s", appointment_id, day, format_time(start_time)
        )
        return moved

    def update_notes(self, appointment_id: int, notes: Optional[str]) -> Appointment:
        self.require_appointment(appointment_id)
        return self.db.update_appointment(appointment_id, notes=notes)

    def delete_appointment(self, appointment_id: int) -> None:
        """Delete an appointment. Linked ledger entries are left in place.

        Raises:
            NotFoundError: If appointment doesn't exist
        """
        if not self.db.delete_appointment(appointment_id):
            raise NotFoundError(entity_not_found("Appointment", appointment_id))
        logger.info("Deleted appointment %s", appointment_id)

    def list_appointments(
        self,
        user_id: Optional[int] = None,
        professional_id: Optional[int] = None,
        day: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statuses: Optional[Iterable[AppointmentStatus | str]] = None,
    ) -> list[Appointment]:
        """List appointments with optional filters, ordered by date and time."""
        parsed = [_parse_status(s) for s in statuses] if statuses is not None else None
        return self.db.list_appointments(
            user_id=user_id,
            professional_id=professional_id,
            date=day,
            start_date=start_date,
            end_date=end_date,
            statuses=parsed,
        )

    def list_for_user(self, user_id: int) -> list[Appointment]:
        return self.list_appointments(user_id=user_id)

    def list_for_professional(self, professional_id: int) -> list[Appointment]:
        return self.list_appointments(professional_id=professional_id)

    def list_for_date(self, day: date) -> list[Appointment]:
        return self.list_appointments(day=day)

    def list_by_status(self, status: AppointmentStatus | str) -> list[Appointment]:
        return self.list_appointments(statuses=[status])
