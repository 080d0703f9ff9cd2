"""Professional, qualification and work-schedule domain service."""

import logging
from datetime import time
from typing import Any, Optional

from salonbook.database.base import Database
from salonbook.domain.entities import Professional, ProfessionalService, Service, WorkSchedule
from salonbook.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    delete_blocked,
    duplicate_value,
    entity_not_found,
)

logger = logging.getLogger(__name__)

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
REQUIRED_FIELDS = ("name", "phone", "email", "cpf", "address")


def validate_day_of_week(day_of_week: int) -> int:
    if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
        raise ValidationError(f"Day of week must be 0 (Sunday) to 6 (Saturday), got {day_of_week!r}")
    return day_of_week


def validate_window(start_time: time, end_time: time) -> None:
    if start_time >= end_time:
        raise ValidationError(
            f"Schedule start {start_time:%H:%M} must be before end {end_time:%H:%M}"
        )


class StaffService:
    """Service for managing professionals, the services they perform and their hours."""

    def __init__(self, db: Database):
        """Initialize staff service.

        Args:
            db: Database instance
        """
        self.db = db

    # Professionals
    def create_professional(
        self,
        name: str,
        phone: str,
        email: str,
        cpf: str,
        address: str,
        active: bool = True,
        profile_picture: Optional[str] = None,
    ) -> Professional:
        """Create a professional.

        Raises:
            ValidationError: If a required field is blank or the cpf is taken
        """
        fields = {"name": name, "phone": phone, "email": email, "cpf": cpf, "address": address}
        for field in REQUIRED_FIELDS:
            if not fields[field] or not fields[field].strip():
                raise ValidationError(f"Professional {field} is required")
        self._check_cpf(cpf)

        professional = self.db.create_professional(
            name=name,
            phone=phone,
            email=email,
            cpf=cpf,
            address=address,
            active=active,
            profile_picture=profile_picture,
        )
        logger.info("Created professional %s (%s)", professional.id, professional.name)
        return professional

    def get_professional(self, professional_id: int) -> Optional[Professional]:
        return self.db.get_professional(professional_id)

    def require_professional(self, professional_id: int) -> Professional:
        """Get professional by ID or raise NotFoundError."""
        professional = self.db.get_professional(professional_id)
        if professional is None:
            raise NotFoundError(entity_not_found("Professional", professional_id))
        return professional

    def list_professionals(self, active_only: bool = False) -> list[Professional]:
        return self.db.list_professionals(active_only=active_only)

    def update_professional(self, professional_id: int, **changes: Any) -> Professional:
        """Merge changes into a professional.

        Raises:
            NotFoundError: If professional doesn't exist
            ValidationError: If a required field is blanked or the cpf is taken
        """
        self.require_professional(professional_id)
        for field in REQUIRED_FIELDS:
            if field in changes and (not changes[field] or not changes[field].strip()):
                raise ValidationError(f"Professional {field} is required")
        if "cpf" in changes:
            self._check_cpf(changes["cpf"], exclude_id=professional_id)
        return self.db.update_professional(professional_id, **changes)

    def delete_professional(self, professional_id: int, cascade: bool = False) -> None:
        """Delete a professional.

        Args:
            professional_id: Professional ID to delete
            cascade: Also remove service links and work schedules

        Raises:
            NotFoundError: If professional doesn't exist
            DependencyError: If appointments reference the professional, or links
                or schedules exist and cascade is False
        """
        self.require_professional(professional_id)

        appointment_count = len(self.db.list_appointments(professional_id=professional_id))
        if appointment_count:
            raise DependencyError(
                delete_blocked(
                    "Professional",
                    professional_id,
                    {"appointment": appointment_count},
                    hint="Deactivate the professional instead.",
                )
            )

        links = self.db.list_professional_service_links(professional_id=professional_id)
        schedules = self.db.list_work_schedules(professional_id=professional_id)
        if (links or schedules) and not cascade:
            raise DependencyError(
                delete_blocked(
                    "Professional",
                    professional_id,
                    {"service link": len(links), "work schedule": len(schedules)},
                )
            )

        for link in links:
            self.db.delete_professional_service(link.professional_id, link.service_id)
        for schedule in schedules:
            self.db.delete_work_schedule(schedule.id)
        self.db.delete_professional(professional_id)
        logger.info(
            "Deleted professional %s (%d links, %d schedules removed)",
            professional_id,
            len(links),
            len(schedules),
        )

    # Qualifications
    def assign_service(self, professional_id: int, service_id: int) -> ProfessionalService:
        """Record that a professional performs a service.

        Raises:
            NotFoundError: If professional or service doesn't exist
            ValidationError: If the pair is already linked
        """
        self.require_professional(professional_id)
        if self.db.get_service(service_id) is None:
            raise NotFoundError(entity_not_found("Service", service_id))
        if self.db.get_professional_service(professional_id, service_id) is not None:
            raise ValidationError(
                f"Professional {professional_id} is already linked to service {service_id}"
            )
        return self.db.create_professional_service(professional_id, service_id)

    def unassign_service(self, professional_id: int, service_id: int) -> None:
        """Remove a professional/service link.

        Raises:
            NotFoundError: If the pair is not linked
        """
        if not self.db.delete_professional_service(professional_id, service_id):
            raise NotFoundError(
                f"Professional {professional_id} is not linked to service {service_id}"
            )

    def list_services(self, professional_id: int) -> list[Service]:
        """Services a professional is qualified for.

        Raises:
            ReferentialIntegrityError: If a link points at a deleted service
        """
        return self.db.get_professional_services(professional_id)

    def list_professionals_for_service(self, service_id: int) -> list[Professional]:
        """Professionals qualified for a service.

        Raises:
            ReferentialIntegrityError: If a link points at a deleted professional
        """
        return self.db.get_service_professionals(service_id)

    def performs_service(self, professional_id: int, service_id: int) -> bool:
        return self.db.get_professional_service(professional_id, service_id) is not None

    # Work schedules
    def add_work_schedule(
        self, professional_id: int, day_of_week: int, start_time: time, end_time: time
    ) -> WorkSchedule:
        """Add working hours for one weekday.

        A professional has at most one schedule per weekday.

        Raises:
            NotFoundError: If professional doesn't exist
            ValidationError: If the day or window is invalid, or the day already
                has a schedule
        """
        self.require_professional(professional_id)
        validate_day_of_week(day_of_week)
        validate_window(start_time, end_time)
        self._check_free_day(professional_id, day_of_week)
        schedule = self.db.create_work_schedule(professional_id, day_of_week, start_time, end_time)
        logger.info(
            "Professional %s works %s %s-%s",
            professional_id,
            DAY_NAMES[day_of_week],
            f"{start_time:%H:%M}",
            f"{end_time:%H:%M}",
        )
        return schedule

    def get_schedule_for_day(self, professional_id: int, day_of_week: int) -> Optional[WorkSchedule]:
        """The professional's schedule for a weekday, or None if they don't work it."""
        schedules = self.db.list_work_schedules(
            professional_id=professional_id, day_of_week=day_of_week
        )
        return schedules[0] if schedules else None

    def list_work_schedules(self, professional_id: Optional[int] = None) -> list[WorkSchedule]:
        return self.db.list_work_schedules(professional_id=professional_id)

    def update_work_schedule(self, schedule_id: int, **changes: Any) -> WorkSchedule:
        """Merge changes into a work schedule, re-validating the result.

        Raises:
            NotFoundError: If schedule doesn't exist
            ValidationError: If the merged schedule is invalid or collides with
                another schedule on the same weekday
        """
        current = self.db.get_work_schedule(schedule_id)
        if current is None:
            raise NotFoundError(entity_not_found("Work schedule", schedule_id))

        professional_id = changes.get("professional_id", current.professional_id)
        day = changes.get("day_of_week", current.day_of_week)
        if professional_id != current.professional_id:
            self.require_professional(professional_id)
        validate_day_of_week(day)
        validate_window(
            changes.get("start_time", current.start_time),
            changes.get("end_time", current.end_time),
        )
        self._check_free_day(professional_id, day, exclude_id=schedule_id)
        return self.db.update_work_schedule(schedule_id, **changes)

    def delete_work_schedule(self, schedule_id: int) -> None:
        """Delete a work schedule.

        Raises:
            NotFoundError: If schedule doesn't exist
        """
        if not self.db.delete_work_schedule(schedule_id):
            raise NotFoundError(entity_not_found("Work schedule", schedule_id))

    def _check_cpf(self, cpf: str, exclude_id: Optional[int] = None) -> None:
        existing = self.db.get_professional_by_cpf(cpf)
        if existing is not None and existing.id != exclude_id:
            raise ValidationError(duplicate_value("Professional", "cpf", cpf))

    def _check_free_day(
        self, professional_id: int, day_of_week: int, exclude_id: Optional[int] = None
    ) -> None:
        for schedule in self.db.list_work_schedules(
            professional_id=professional_id, day_of_week=day_of_week
        ):
            if schedule.id != exclude_id:
                raise ValidationError(
                    f"Professional {professional_id} already has a schedule on "
                    f"{DAY_NAMES[day_of_week]} (schedule {schedule.id})"
                )
