"""Abstract store interface."""

from abc import ABC, abstractmethod
from datetime import date, time
from decimal import Decimal
from typing import Any, Iterable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from salonbook.domain.entities import (
    Appointment,
    AppointmentStatus,
    ConflictPolicy,
    Professional,
    ProfessionalService,
    Role,
    Service,
    Transaction,
    TransactionType,
    User,
    WorkSchedule,
)


class Database(ABC):
    """Abstract entity store for salonbook.

    Lookups return None for a missing id; updates merge the given fields and
    return None for a missing id; deletes return whether a row was removed
    and never cascade.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(
        self,
        username: str,
        password: str,
        name: str,
        email: str,
        role: Role = Role.CLIENT,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        instagram: Optional[str] = None,
        profile_picture: Optional[str] = None,
    ) -> User:
        """Create a user."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        pass

    @abstractmethod
    def list_users(self, role: Optional[Role] = None) -> list[User]:
        """List users, optionally filtered by role."""
        pass

    @abstractmethod
    def update_user(self, user_id: int, **changes: Any) -> Optional[User]:
        """Merge changes into a user."""
        pass

    @abstractmethod
    def delete_user(self, user_id: int) -> bool:
        """Delete a user."""
        pass

    # Professional operations
    @abstractmethod
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
        """Create a professional."""
        pass

    @abstractmethod
    def get_professional(self, professional_id: int) -> Optional[Professional]:
        """Get professional by ID."""
        pass

    @abstractmethod
    def get_professional_by_cpf(self, cpf: str) -> Optional[Professional]:
        """Get professional by national id."""
        pass

    @abstractmethod
    def list_professionals(self, active_only: bool = False) -> list[Professional]:
        """List professionals."""
        pass

    @abstractmethod
    def update_professional(self, professional_id: int, **changes: Any) -> Optional[Professional]:
        """Merge changes into a professional."""
        pass

    @abstractmethod
    def delete_professional(self, professional_id: int) -> bool:
        """Delete a professional."""
        pass

    # Service operations
    @abstractmethod
    def create_service(
        self,
        name: str,
        duration: int,
        price: Decimal,
        description: Optional[str] = None,
        active: bool = True,
    ) -> Service:
        """Create a service."""
        pass

    @abstractmethod
    def get_service(self, service_id: int) -> Optional[Service]:
        """Get service by ID."""
        pass

    @abstractmethod
    def list_services(self, active_only: bool = False) -> list[Service]:
        """List services."""
        pass

    @abstractmethod
    def update_service(self, service_id: int, **changes: Any) -> Optional[Service]:
        """Merge changes into a service."""
        pass

    @abstractmethod
    def delete_service(self, service_id: int) -> bool:
        """Delete a service."""
        pass

    # Professional-service link operations
    @abstractmethod
    def create_professional_service(
        self, professional_id: int, service_id: int
    ) -> ProfessionalService:
        """Link a professional to a service."""
        pass

    @abstractmethod
    def get_professional_service(
        self, professional_id: int, service_id: int
    ) -> Optional[ProfessionalService]:
        """Get the link row for a professional/service pair."""
        pass

    @abstractmethod
    def list_professional_service_links(
        self, professional_id: Optional[int] = None, service_id: Optional[int] = None
    ) -> list[ProfessionalService]:
        """List raw link rows."""
        pass

    @abstractmethod
    def delete_professional_service(self, professional_id: int, service_id: int) -> bool:
        """Remove the link for a professional/service pair."""
        pass

    @abstractmethod
    def get_professional_services(self, professional_id: int) -> list[Service]:
        """Resolve the services a professional is linked to.

        Raises:
            ReferentialIntegrityError: If a link points at a deleted service
        """
        pass

    @abstractmethod
    def get_service_professionals(self, service_id: int) -> list[Professional]:
        """Resolve the professionals linked to a service.

        Raises:
            ReferentialIntegrityError: If a link points at a deleted professional
        """
        pass

    # Work schedule operations
    @abstractmethod
    def create_work_schedule(
        self, professional_id: int, day_of_week: int, start_time: time, end_time: time
    ) -> WorkSchedule:
        """Create a work schedule row."""
        pass

    @abstractmethod
    def get_work_schedule(self, schedule_id: int) -> Optional[WorkSchedule]:
        """Get work schedule by ID."""
        pass

    @abstractmethod
    def list_work_schedules(
        self, professional_id: Optional[int] = None, day_of_week: Optional[int] = None
    ) -> list[WorkSchedule]:
        """List work schedules ordered by professional and day."""
        pass

    @abstractmethod
    def update_work_schedule(self, schedule_id: int, **changes: Any) -> Optional[WorkSchedule]:
        """Merge changes into a work schedule."""
        pass

    @abstractmethod
    def delete_work_schedule(self, schedule_id: int) -> bool:
        """Delete a work schedule."""
        pass

    # Appointment operations
    @abstractmethod
    def create_appointment(
        self,
        user_id: int,
        professional_id: int,
        service_id: int,
        date: date,
        start_time: time,
        end_time: time,
        notes: Optional[str] = None,
        conflict_policy: ConflictPolicy = ConflictPolicy.OVERLAP,
    ) -> Appointment:
        """Insert a scheduled appointment unless the slot is taken.

        The conflict check and the insert happen as one step.

        Raises:
            ConflictError: If a blocking appointment conflicts with the slot
        """
        pass

    @abstractmethod
    def get_appointment(self, appointment_id: int) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    def list_appointments(
        self,
        user_id: Optional[int] = None,
        professional_id: Optional[int] = None,
        service_id: Optional[int] = None,
        date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statuses: Optional[Iterable[AppointmentStatus]] = None,
    ) -> list[Appointment]:
        """List appointments ordered by date and start time."""
        pass

    @abstractmethod
    def find_conflicts(
        self,
        professional_id: int,
        date: date,
        start_time: time,
        end_time: time,
        conflict_policy: ConflictPolicy = ConflictPolicy.OVERLAP,
        exclude_id: Optional[int] = None,
    ) -> list[Appointment]:
        """List blocking appointments that conflict with a slot."""
        pass

    @abstractmethod
    def update_appointment(self, appointment_id: int, **changes: Any) -> Optional[Appointment]:
        """Merge changes into an appointment without re-deriving any field."""
        pass

    @abstractmethod
    def transition_appointment(
        self,
        appointment_id: int,
        expected: AppointmentStatus,
        target: AppointmentStatus,
    ) -> Optional[Appointment]:
        """Set an appointment's status if it still holds the expected one.

        The status is read and written under one lock, so two callers that
        both saw the same status cannot both move it.

        Raises:
            InvalidTransitionError: If the stored status is no longer expected
        """
        pass

    @abstractmethod
    def move_appointment(
        self,
        appointment_id: int,
        date: date,
        start_time: time,
        end_time: time,
        conflict_policy: ConflictPolicy = ConflictPolicy.OVERLAP,
    ) -> Optional[Appointment]:
        """Move an appointment to a new slot unless the slot is taken.

        Raises:
            ConflictError: If another blocking appointment conflicts with the slot
            InvalidTransitionError: If the appointment is no longer scheduled
        """
        pass

    @abstractmethod
    def delete_appointment(self, appointment_id: int) -> bool:
        """Delete an appointment."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        type: TransactionType,
        amount: Decimal,
        description: str,
        date: date,
        appointment_id: Optional[int] = None,
    ) -> Transaction:
        """Create a ledger entry."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
        appointment_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            start_date: Optional inclusive start date filter
            end_date: Optional inclusive end date filter
            type: Optional income/expense filter
            appointment_id: Optional linked appointment filter
        """
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, **changes: Any) -> Optional[Transaction]:
        """Merge changes into a transaction."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> bool:
        """Delete a transaction."""
        pass
