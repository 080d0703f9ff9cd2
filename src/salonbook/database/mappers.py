"""Mapper functions to convert SQLAlchemy models into domain entities.

Enum-valued columns are stored as their string values and converted back
here, so the rest of the store never sees raw role or status strings.
"""

from decimal import Decimal

from salonbook.domain import entities as domain
from salonbook.database.models import (
    User as ORMUser,
    Professional as ORMProfessional,
    Service as ORMService,
    ProfessionalService as ORMProfessionalService,
    WorkSchedule as ORMWorkSchedule,
    Appointment as ORMAppointment,
    Transaction as ORMTransaction,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        username=orm_user.username,
        password=orm_user.password,
        name=orm_user.name,
        email=orm_user.email,
        role=domain.Role(orm_user.role),
        phone=orm_user.phone,
        address=orm_user.address,
        instagram=orm_user.instagram,
        profile_picture=orm_user.profile_picture,
    )


def professional_to_domain(orm_professional: ORMProfessional) -> domain.Professional:
    """Convert SQLAlchemy Professional model to domain Professional entity."""
    return domain.Professional(
        id=orm_professional.id,
        name=orm_professional.name,
        phone=orm_professional.phone,
        email=orm_professional.email,
        cpf=orm_professional.cpf,
        address=orm_professional.address,
        active=bool(orm_professional.active),
        profile_picture=orm_professional.profile_picture,
    )


def service_to_domain(orm_service: ORMService) -> domain.Service:
    """Convert SQLAlchemy Service model to domain Service entity."""
    return domain.Service(
        id=orm_service.id,
        name=orm_service.name,
        duration=orm_service.duration,
        price=Decimal(orm_service.price),
        description=orm_service.description,
        active=bool(orm_service.active),
    )


def professional_service_to_domain(
    orm_link: ORMProfessionalService,
) -> domain.ProfessionalService:
    """Convert SQLAlchemy ProfessionalService row to domain join entity."""
    return domain.ProfessionalService(
        id=orm_link.id,
        professional_id=orm_link.professional_id,
        service_id=orm_link.service_id,
    )


def work_schedule_to_domain(orm_schedule: ORMWorkSchedule) -> domain.WorkSchedule:
    """Convert SQLAlchemy WorkSchedule model to domain WorkSchedule entity."""
    return domain.WorkSchedule(
        id=orm_schedule.id,
        professional_id=orm_schedule.professional_id,
        day_of_week=orm_schedule.day_of_week,
        start_time=orm_schedule.start_time,
        end_time=orm_schedule.end_time,
    )


def appointment_to_domain(orm_appointment: ORMAppointment) -> domain.Appointment:
    """Convert SQLAlchemy Appointment model to domain Appointment entity."""
    return domain.Appointment(
        id=orm_appointment.id,
        user_id=orm_appointment.user_id,
        professional_id=orm_appointment.professional_id,
        service_id=orm_appointment.service_id,
        date=orm_appointment.date,
        start_time=orm_appointment.start_time,
        end_time=orm_appointment.end_time,
        status=domain.AppointmentStatus(orm_appointment.status),
        created_at=orm_appointment.created_at,
        notes=orm_appointment.notes,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        type=domain.TransactionType(orm_transaction.type),
        amount=Decimal(orm_transaction.amount),
        description=orm_transaction.description,
        date=orm_transaction.date,
        created_at=orm_transaction.created_at,
        appointment_id=orm_transaction.appointment_id,
    )
