"""Generic SQLAlchemy store implementation."""

import functools
import threading
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from salonbook.database.base import Database
from salonbook.database.models import (
    Appointment,
    Professional,
    ProfessionalService,
    Service,
    Transaction,
    User,
    WorkSchedule,
    create_session_factory,
)
from salonbook.database.mappers import (
    appointment_to_domain,
    professional_service_to_domain,
    professional_to_domain,
    service_to_domain,
    transaction_to_domain,
    user_to_domain,
    work_schedule_to_domain,
)
from salonbook.domain.entities import (
    BLOCKING_STATUSES,
    Appointment as DomainAppointment,
    AppointmentStatus,
    ConflictPolicy,
    Professional as DomainProfessional,
    ProfessionalService as DomainProfessionalService,
    Role,
    Service as DomainService,
    Transaction as DomainTransaction,
    TransactionType,
    User as DomainUser,
    WorkSchedule as DomainWorkSchedule,
)
from salonbook.domain.errors import (
    ConflictError,
    InvalidTransitionError,
    ReferentialIntegrityError,
    ValidationError,
    dangling_reference,
    invalid_transition,
    slot_taken,
)

USER_FIELDS = frozenset(
    {"username", "password", "name", "email", "phone", "address", "role", "instagram", "profile_picture"}
)
PROFESSIONAL_FIELDS = frozenset(
    {"name", "phone", "email", "cpf", "address", "active", "profile_picture"}
)
SERVICE_FIELDS = frozenset({"name", "description", "duration", "price", "active"})
WORK_SCHEDULE_FIELDS = frozenset({"professional_id", "day_of_week", "start_time", "end_time"})
APPOINTMENT_FIELDS = frozenset(
    {"user_id", "professional_id", "service_id", "date", "start_time", "end_time", "status", "notes"}
)
TRANSACTION_FIELDS = frozenset({"appointment_id", "type", "amount", "description", "date"})


def _synchronized(method):
    """Run a store method while holding the store lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of the Database interface.

    The store owns a single session. Every public operation holds a
    re-entrant lock for its whole duration, so no caller can observe a
    half-applied write and the appointment insert can re-check conflicts
    atomically.
    """

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite://' for an
                in-memory store, 'sqlite:///path/to.db', 'postgresql://...')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None
        self._lock = threading.RLock()

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def _commit(self, session: Session) -> None:
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise ValidationError(f"Constraint violated: {exc.orig}") from exc

    def _find(self, model, record_id: int):
        return self._get_session().query(model).filter(model.id == record_id).first()

    def _apply_changes(self, record, changes: dict[str, Any], allowed: frozenset, kind: str) -> None:
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Unknown {kind} field(s): {', '.join(sorted(unknown))}")
        for field, value in changes.items():
            if isinstance(value, Enum):
                value = value.value
            setattr(record, field, value)

    def _delete(self, model, record_id: int) -> bool:
        session = self._get_session()
        record = self._find(model, record_id)
        if record is None:
            return False
        session.delete(record)
        session.commit()
        return True

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    @_synchronized
    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    # User operations
    @_synchronized
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
    ) -> DomainUser:
        """Create a user."""
        session = self._get_session()
        user = User(
            username=username,
            password=password,
            name=name,
            email=email,
            role=Role(role).value,
            phone=phone,
            address=address,
            instagram=instagram,
            profile_picture=profile_picture,
        )
        session.add(user)
        self._commit(session)
        return user_to_domain(user)

    @_synchronized
    def get_user(self, user_id: int) -> Optional[DomainUser]:
        """Get user by ID."""
        user = self._find(User, user_id)
        if user is None:
            return None
        return user_to_domain(user)

    @_synchronized
    def get_user_by_username(self, username: str) -> Optional[DomainUser]:
        """Get user by username."""
        session = self._get_session()
        user = session.query(User).filter(User.username == username).first()
        if user is None:
            return None
        return user_to_domain(user)

    @_synchronized
    def get_user_by_email(self, email: str) -> Optional[DomainUser]:
        """Get user by email."""
        session = self._get_session()
        user = session.query(User).filter(User.email == email).first()
        if user is None:
            return None
        return user_to_domain(user)

    @_synchronized
    def list_users(self, role: Optional[Role] = None) -> list[DomainUser]:
        """List users, optionally filtered by role."""
        session = self._get_session()
        query = session.query(User)
        if role is not None:
            query = query.filter(User.role == Role(role).value)
        return [user_to_domain(u) for u in query.order_by(User.id).all()]

    @_synchronized
    def update_user(self, user_id: int, **changes: Any) -> Optional[DomainUser]:
        """Merge changes into a user."""
        user = self._find(User, user_id)
        if user is None:
            return None
        self._apply_changes(user, changes, USER_FIELDS, "user")
        self._commit(self._get_session())
        return user_to_domain(user)

    @_synchronized
    def delete_user(self, user_id: int) -> bool:
        """Delete a user."""
        return self._delete(User, user_id)

    # Professional operations
    @_synchronized
    def create_professional(
        self,
        name: str,
        phone: str,
        email: str,
        cpf: str,
        address: str,
        active: bool = True,
        profile_picture: Optional[str] = None,
    ) -> DomainProfessional:
        """Create a professional."""
        session = self._get_session()
        professional = Professional(
            name=name,
            phone=phone,
            email=email,
            cpf=cpf,
            address=address,
            active=active,
            profile_picture=profile_picture,
        )
        session.add(professional)
        self._commit(session)
        return professional_to_domain(professional)

    @_synchronized
    def get_professional(self, professional_id: int) -> Optional[DomainProfessional]:
        """Get professional by ID."""
        professional = self._find(Professional, professional_id)
        if professional is None:
            return None
        return professional_to_domain(professional)

    @_synchronized
    def get_professional_by_cpf(self, cpf: str) -> Optional[DomainProfessional]:
        """Get professional by national id."""
        session = self._get_session()
        professional = session.query(Professional).filter(Professional.cpf == cpf).first()
        if professional is None:
            return None
        return professional_to_domain(professional)

    @_synchronized
    def list_professionals(self, active_only: bool = False) -> list[DomainProfessional]:
        """List professionals."""
        session = self._get_session()
        query = session.query(Professional)
        if active_only:
            query = query.filter(Professional.active.is_(True))
        return [professional_to_domain(p) for p in query.order_by(Professional.id).all()]

    @_synchronized
    def update_professional(self, professional_id: int, **changes: Any) -> Optional[DomainProfessional]:
        """Merge changes into a professional."""
        professional = self._find(Professional, professional_id)
        if professional is None:
            return None
        self._apply_changes(professional, changes, PROFESSIONAL_FIELDS, "professional")
        self._commit(self._get_session())
        return professional_to_domain(professional)

    @_synchronized
    def delete_professional(self, professional_id: int) -> bool:
        """Delete a professional."""
        return self._delete(Professional, professional_id)

    # Service operations
    @_synchronized
    def create_service(
        self,
        name: str,
        duration: int,
        price: Decimal,
        description: Optional[str] = None,
        active: bool = True,
    ) -> DomainService:
        """Create a service."""
        session = self._get_session()
        service = Service(
            name=name,
            duration=duration,
            price=price,
            description=description,
            active=active,
        )
        session.add(service)
        self._commit(session)
        return service_to_domain(service)

    @_synchronized
    def get_service(self, service_id: int) -> Optional[DomainService]:
        """Get service by ID."""
        service = self._find(Service, service_id)
        if service is None:
            return None
        return service_to_domain(service)

    @_synchronized
    def list_services(self, active_only: bool = False) -> list[DomainService]:
        """List services."""
        session = self._get_session()
        query = session.query(Service)
        if active_only:
            query = query.filter(Service.active.is_(True))
        return [service_to_domain(s) for s in query.order_by(Service.id).all()]

    @_synchronized
    def update_service(self, service_id: int, **changes: Any) -> Optional[DomainService]:
        """Merge changes into a service."""
        service = self._find(Service, service_id)
        if service is None:
            return None
        self._apply_changes(service, changes, SERVICE_FIELDS, "service")
        self._commit(self._get_session())
        return service_to_domain(service)

    @_synchronized
    def delete_service(self, service_id: int) -> bool:
        """Delete a service."""
        return self._delete(Service, service_id)

    # Professional-service link operations
    @_synchronized
    def create_professional_service(
        self, professional_id: int, service_id: int
    ) -> DomainProfessionalService:
        """Link a professional to a service."""
        session = self._get_session()
        link = ProfessionalService(professional_id=professional_id, service_id=service_id)
        session.add(link)
        self._commit(session)
        return professional_service_to_domain(link)

    @_synchronized
    def get_professional_service(
        self, professional_id: int, service_id: int
    ) -> Optional[DomainProfessionalService]:
        """Get the link row for a professional/service pair."""
        session = self._get_session()
        link = (
            session.query(ProfessionalService)
            .filter(
                ProfessionalService.professional_id == professional_id,
                ProfessionalService.service_id == service_id,
            )
            .first()
        )
        if link is None:
            return None
        return professional_service_to_domain(link)

    @_synchronized
    def list_professional_service_links(
        self, professional_id: Optional[int] = None, service_id: Optional[int] = None
    ) -> list[DomainProfessionalService]:
        """List raw link rows."""
        session = self._get_session()
        query = session.query(ProfessionalService)
        if professional_id is not None:
            query = query.filter(ProfessionalService.professional_id == professional_id)
        if service_id is not None:
            query = query.filter(ProfessionalService.service_id == service_id)
        links = query.order_by(ProfessionalService.id).all()
        return [professional_service_to_domain(link) for link in links]

    @_synchronized
    def delete_professional_service(self, professional_id: int, service_id: int) -> bool:
        """Remove the link for a professional/service pair."""
        link = self.get_professional_service(professional_id, service_id)
        if link is None:
            return False
        return self._delete(ProfessionalService, link.id)

    @_synchronized
    def get_professional_services(self, professional_id: int) -> list[DomainService]:
        """Resolve the services a professional is linked to."""
        services = []
        for link in self.list_professional_service_links(professional_id=professional_id):
            service = self._find(Service, link.service_id)
            if service is None:
                raise ReferentialIntegrityError(
                    dangling_reference("Service", link.service_id, f"Professional {professional_id}")
                )
            services.append(service_to_domain(service))
        return services

    @_synchronized
    def get_service_professionals(self, service_id: int) -> list[DomainProfessional]:
        """Resolve the professionals linked to a service."""
        professionals = []
        for link in self.list_professional_service_links(service_id=service_id):
            professional = self._find(Professional, link.professional_id)
            if professional is None:
                raise ReferentialIntegrityError(
                    dangling_reference("Professional", link.professional_id, f"Service {service_id}")
                )
            professionals.append(professional_to_domain(professional))
        return professionals

    # Work schedule operations
    @_synchronized
    def create_work_schedule(
        self, professional_id: int, day_of_week: int, start_time: time, end_time: time
    ) -> DomainWorkSchedule:
        """Create a work schedule row."""
        session = self._get_session()
        schedule = WorkSchedule(
            professional_id=professional_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
        )
        session.add(schedule)
        self._commit(session)
        return work_schedule_to_domain(schedule)

    @_synchronized
    def get_work_schedule(self, schedule_id: int) -> Optional[DomainWorkSchedule]:
        """Get work schedule by ID."""
        schedule = self._find(WorkSchedule, schedule_id)
        if schedule is None:
            return None
        return work_schedule_to_domain(schedule)

    @_synchronized
    def list_work_schedules(
        self, professional_id: Optional[int] = None, day_of_week: Optional[int] = None
    ) -> list[DomainWorkSchedule]:
        """List work schedules ordered by professional and day."""
        session = self._get_session()
        query = session.query(WorkSchedule)
        if professional_id is not None:
            query = query.filter(WorkSchedule.professional_id == professional_id)
        if day_of_week is not None:
            query = query.filter(WorkSchedule.day_of_week == day_of_week)
        schedules = query.order_by(
            WorkSchedule.professional_id, WorkSchedule.day_of_week, WorkSchedule.id
        ).all()
        return [work_schedule_to_domain(s) for s in schedules]

    @_synchronized
    def update_work_schedule(self, schedule_id: int, **changes: Any) -> Optional[DomainWorkSchedule]:
        """Merge changes into a work schedule."""
        schedule = self._find(WorkSchedule, schedule_id)
        if schedule is None:
            return None
        self._apply_changes(schedule, changes, WORK_SCHEDULE_FIELDS, "work schedule")
        self._commit(self._get_session())
        return work_schedule_to_domain(schedule)

    @_synchronized
    def delete_work_schedule(self, schedule_id: int) -> bool:
        """Delete a work schedule."""
        return self._delete(WorkSchedule, schedule_id)

    # Appointment operations
    @_synchronized
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
    ) -> DomainAppointment:
        """Insert a scheduled appointment unless the slot is taken."""
        if self.find_conflicts(professional_id, date, start_time, end_time, conflict_policy):
            raise ConflictError(slot_taken(professional_id, date, start_time.strftime("%H:%M")))

        session = self._get_session()
        appointment = Appointment(
            user_id=user_id,
            professional_id=professional_id,
            service_id=service_id,
            date=date,
            start_time=start_time,
            end_time=end_time,
            status=AppointmentStatus.SCHEDULED.value,
            notes=notes,
        )
        session.add(appointment)
        self._commit(session)
        return appointment_to_domain(appointment)

    @_synchronized
    def get_appointment(self, appointment_id: int) -> Optional[DomainAppointment]:
        """Get appointment by ID."""
        appointment = self._find(Appointment, appointment_id)
        if appointment is None:
            return None
        return appointment_to_domain(appointment)

    @_synchronized
    def list_appointments(
        self,
        user_id: Optional[int] = None,
        professional_id: Optional[int] = None,
        service_id: Optional[int] = None,
        date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statuses: Optional[Iterable[AppointmentStatus]] = None,
    ) -> list[DomainAppointment]:
        """List appointments ordered by date and start time."""
        session = self._get_session()
        query = session.query(Appointment)

        if user_id is not None:
            query = query.filter(Appointment.user_id == user_id)
        if professional_id is not None:
            query = query.filter(Appointment.professional_id == professional_id)
        if service_id is not None:
            query = query.filter(Appointment.service_id == service_id)
        if date is not None:
            query = query.filter(Appointment.date == date)
        if start_date is not None:
            query = query.filter(Appointment.date >= start_date)
        if end_date is not None:
            query = query.filter(Appointment.date <= end_date)
        if statuses is not None:
            values = [AppointmentStatus(s).value for s in statuses]
            query = query.filter(Appointment.status.in_(values))

        appointments = query.order_by(
            Appointment.date, Appointment.start_time, Appointment.id
        ).all()
        return [appointment_to_domain(a) for a in appointments]

    @_synchronized
    def find_conflicts(
        self,
        professional_id: int,
        date: date,
        start_time: time,
        end_time: time,
        conflict_policy: ConflictPolicy = ConflictPolicy.OVERLAP,
        exclude_id: Optional[int] = None,
    ) -> list[DomainAppointment]:
        """List blocking appointments that conflict with a slot."""
        booked = self.list_appointments(
            professional_id=professional_id, date=date, statuses=BLOCKING_STATUSES
        )
        return [
            appt
            for appt in booked
            if appt.id != exclude_id
            and conflict_policy.conflicts(start_time, end_time, appt.start_time, appt.end_time)
        ]

    @_synchronized
    def update_appointment(self, appointment_id: int, **changes: Any) -> Optional[DomainAppointment]:
        """Merge changes into an appointment without re-deriving any field."""
        appointment = self._find(Appointment, appointment_id)
        if appointment is None:
            return None
        self._apply_changes(appointment, changes, APPOINTMENT_FIELDS, "appointment")
        self._commit(self._get_session())
        return appointment_to_domain(appointment)

    @_synchronized
    def transition_appointment(
        self,
        appointment_id: int,
        expected: AppointmentStatus,
        target: AppointmentStatus,
    ) -> Optional[DomainAppointment]:
        """Set an appointment's status if it still holds the expected one."""
        appointment = self._find(Appointment, appointment_id)
        if appointment is None:
            return None
        if appointment.status != expected.value:
            raise InvalidTransitionError(
                invalid_transition(appointment_id, appointment.status, target.value)
            )
        appointment.status = target.value
        self._commit(self._get_session())
        return appointment_to_domain(appointment)

    @_synchronized
    def move_appointment(
        self,
        appointment_id: int,
        date: date,
        start_time: time,
        end_time: time,
        conflict_policy: ConflictPolicy = ConflictPolicy.OVERLAP,
    ) -> Optional[DomainAppointment]:
        """Move an appointment to a new slot unless the slot is taken."""
        appointment = self._find(Appointment, appointment_id)
        if appointment is None:
            return None
        if appointment.status != AppointmentStatus.SCHEDULED.value:
            raise InvalidTransitionError(
                f"Cannot reschedule appointment {appointment_id}: it is '{appointment.status}'"
            )
        conflicts = self.find_conflicts(
            appointment.professional_id,
            date,
            start_time,
            end_time,
            conflict_policy,
            exclude_id=appointment_id,
        )
        if conflicts:
            raise ConflictError(
                slot_taken(appointment.professional_id, date, start_time.strftime("%H:%M"))
            )
        return self.update_appointment(
            appointment_id, date=date, start_time=start_time, end_time=end_time
        )

    @_synchronized
    def delete_appointment(self, appointment_id: int) -> bool:
        """Delete an appointment."""
        return self._delete(Appointment, appointment_id)

    # Transaction operations
    @_synchronized
    def create_transaction(
        self,
        type: TransactionType,
        amount: Decimal,
        description: str,
        date: date,
        appointment_id: Optional[int] = None,
    ) -> DomainTransaction:
        """Create a ledger entry."""
        session = self._get_session()
        transaction = Transaction(
            type=TransactionType(type).value,
            amount=amount,
            description=description,
            date=date,
            appointment_id=appointment_id,
        )
        session.add(transaction)
        self._commit(session)
        return transaction_to_domain(transaction)

    @_synchronized
    def get_transaction(self, transaction_id: int) -> Optional[DomainTransaction]:
        """Get transaction by ID."""
        transaction = self._find(Transaction, transaction_id)
        if transaction is None:
            return None
        return transaction_to_domain(transaction)

    @_synchronized
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
        appointment_id: Optional[int] = None,
    ) -> list[DomainTransaction]:
        """List transactions with optional filters."""
        session = self._get_session()
        query = session.query(Transaction)

        if start_date is not None:
            query = query.filter(Transaction.date >= start_date)
        if end_date is not None:
            query = query.filter(Transaction.date <= end_date)
        if type is not None:
            query = query.filter(Transaction.type == TransactionType(type).value)
        if appointment_id is not None:
            query = query.filter(Transaction.appointment_id == appointment_id)

        transactions = query.order_by(Transaction.date, Transaction.id).all()
        return [transaction_to_domain(txn) for txn in transactions]

    @_synchronized
    def update_transaction(self, transaction_id: int, **changes: Any) -> Optional[DomainTransaction]:
        """Merge changes into a transaction."""
        transaction = self._find(Transaction, transaction_id)
        if transaction is None:
            return None
        self._apply_changes(transaction, changes, TRANSACTION_FIELDS, "transaction")
        self._commit(self._get_session())
        return transaction_to_domain(transaction)

    @_synchronized
    def delete_transaction(self, transaction_id: int) -> bool:
        """Delete a transaction."""
        return self._delete(Transaction, transaction_id)
