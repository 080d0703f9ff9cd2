"""Appointment availability calculation.

A professional's bookable start times for a service on a date are derived
from their weekly work schedule for that weekday: candidates start at the
schedule's opening time and advance in fixed steps for as long as the whole
service still fits before closing. Candidates that conflict with an existing
scheduled or completed appointment are dropped. Nothing is cached; every
call reads the store afresh.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator, Optional

from salonbook.database.base import Database
from salonbook.domain.entities import (
    BLOCKING_STATUSES,
    Appointment,
    ConflictPolicy,
    DayAvailability,
    Professional,
    Service,
    WorkSchedule,
)
from salonbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    entity_not_found,
    slot_taken,
)
from salonbook.utils.date_parser import day_of_week
from salonbook.utils.time_parser import add_minutes, format_time

logger = logging.getLogger(__name__)

DEFAULT_SLOT_STEP = 30


def iter_candidate_starts(schedule: WorkSchedule, duration: int, step: int) -> Iterator[time]:
    """Yield start times from opening, every `step` minutes, while `duration` fits."""
    opening = datetime.combine(date.min, schedule.start_time)
    closing = datetime.combine(date.min, schedule.end_time)
    length = timedelta(minutes=duration)
    current = opening
    while current + length <= closing:
        yield current.time()
        current += timedelta(minutes=step)


def slot_end(start: time, duration: int) -> time:
    return add_minutes(start, duration)


class AvailabilityService:
    """Service for computing free appointment slots."""

    def __init__(
        self,
        db: Database,
        slot_step: int = DEFAULT_SLOT_STEP,
        conflict_policy: ConflictPolicy = ConflictPolicy.OVERLAP,
    ):
        """Initialize availability service.

        Args:
            db: Database instance
            slot_step: Minutes between candidate start times
            conflict_policy: How existing bookings block candidates
        """
        if slot_step <= 0:
            raise ValidationError(f"Slot step must be positive, got {slot_step}")
        self.db = db
        self.slot_step = slot_step
        self.conflict_policy = conflict_policy

    def get_available_slots(self, professional_id: int, service_id: int, day: date) -> list[str]:
        """Free start times as ascending "HH:MM" strings.

        Returns an empty list when the professional does not work that
        weekday, the service does not fit in their hours, either of them is
        inactive, or the professional does not perform the service.

        Raises:
            NotFoundError: If professional or service doesn't exist
        """
        professional = self._require_professional(professional_id)
        service = self._require_service(service_id)
        if self._unbookable_reason(professional, service):
            return []
        slots = [format_time(start) for start in self._open_starts(professional_id, service, day)]
        logger.debug(
            "Professional %s has %d free slots for service %s on %s",
            professional_id,
            len(slots),
            service_id,
            day,
        )
        return slots

    def describe_day(self, professional_id: int, service_id: int, day: date) -> DayAvailability:
        """Working window and free slots for one day.

        The window is reported even when the pair cannot be booked; the
        slots are then empty.
        """
        professional = self._require_professional(professional_id)
        service = self._require_service(service_id)
        schedule = self.schedule_for(professional_id, day)
        slots: tuple[str, ...] = ()
        if not self._unbookable_reason(professional, service):
            slots = tuple(
                format_time(start) for start in self._open_starts(professional_id, service, day)
            )
        return DayAvailability(
            professional_id=professional_id,
            service_id=service_id,
            date=day,
            duration=service.duration,
            slot_step=self.slot_step,
            opens_at=schedule.start_time if schedule else None,
            closes_at=schedule.end_time if schedule else None,
            slots=slots,
        )

    def next_available(
        self, professional_id: int, service_id: int, from_day: date, days: int = 14
    ) -> Optional[tuple[date, str]]:
        """First free (date, "HH:MM") within `days` days starting at from_day."""
        for offset in range(days):
            day = from_day + timedelta(days=offset)
            slots = self.get_available_slots(professional_id, service_id, day)
            if slots:
                return day, slots[0]
        return None

    def is_slot_open(
        self, professional_id: int, service_id: int, day: date, start_time: time
    ) -> bool:
        try:
            self.check_slot(professional_id, service_id, day, start_time)
        except (ValidationError, ConflictError):
            return False
        return True

    def check_slot(
        self,
        professional_id: int,
        service_id: int,
        day: date,
        start_time: time,
        exclude_id: Optional[int] = None,
    ) -> time:
        """Validate a requested start and return its end time.

        Raises:
            NotFoundError: If professional or service doesn't exist
            ValidationError: If professional or service is inactive, the
                professional doesn't perform the service, the professional
                doesn't work that day or the start is not a slot that fits in
                their hours
            ConflictError: If the slot is already booked
        """
        professional = self._require_professional(professional_id)
        service = self._require_service(service_id)
        reason = self._unbookable_reason(professional, service)
        if reason:
            raise ValidationError(reason)
        schedule = self.schedule_for(professional_id, day)
        if schedule is None:
            raise ValidationError(f"Professional {professional_id} does not work on {day:%A} {day}")
        if start_time not in set(iter_candidate_starts(schedule, service.duration, self.slot_step)):
            raise ValidationError(
                f"{format_time(start_time)} is not a bookable start for a {service.duration} minute "
                f"service between {format_time(schedule.start_time)} and {format_time(schedule.end_time)}"
            )

        end_time = slot_end(start_time, service.duration)
        booked = [a for a in self._booked(professional_id, day) if a.id != exclude_id]
        if self._conflicts(start_time, end_time, booked):
            raise ConflictError(slot_taken(professional_id, day, format_time(start_time)))
        return end_time

    def schedule_for(self, professional_id: int, day: date) -> Optional[WorkSchedule]:
        """The professional's work schedule for the weekday of `day`."""
        schedules = self.db.list_work_schedules(
            professional_id=professional_id, day_of_week=day_of_week(day)
        )
        return schedules[0] if schedules else None

    def _open_starts(self, professional_id: int, service: Service, day: date) -> Iterator[time]:
        schedule = self.schedule_for(professional_id, day)
        if schedule is None:
            return
        booked = self._booked(professional_id, day)
        for start in iter_candidate_starts(schedule, service.duration, self.slot_step):
            if not self._conflicts(start, slot_end(start, service.duration), booked):
                yield start

    def _booked(self, professional_id: int, day: date) -> list[Appointment]:
        return self.db.list_appointments(
            professional_id=professional_id, date=day, statuses=BLOCKING_STATUSES
        )

    def _conflicts(self, start: time, end: time, booked: Iterable[Appointment]) -> bool:
        return any(
            self.conflict_policy.conflicts(start, end, appt.start_time, appt.end_time)
            for appt in booked
        )

    def _unbookable_reason(self, professional: Professional, service: Service) -> Optional[str]:
        if not professional.active:
            return f"Professional {professional.id} is not active"
        if not service.active:
            return f"Service {service.id} is not active"
        if self.db.get_professional_service(professional.id, service.id) is None:
            return f"Professional {professional.id} does not perform service {service.id}"
        return None

    def _require_professional(self, professional_id: int) -> Professional:
        professional = self.db.get_professional(professional_id)
        if professional is None:
            raise NotFoundError(entity_not_found("Professional", professional_id))
        return professional

    def _require_service(self, service_id: int) -> Service:
        service = self.db.get_service(service_id)
        if service is None:
            raise NotFoundError(entity_not_found("Service", service_id))
        return service
