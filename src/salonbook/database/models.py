"""SQLAlchemy models for the salonbook store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Time,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

Base = declarative_base()

# AUTOINCREMENT keeps SQLite from handing out the id of a deleted last row again
_MONOTONIC_IDS = {"sqlite_autoincrement": True}


class User(Base):
    """Client or admin account."""

    __tablename__ = "users"
    __table_args__ = _MONOTONIC_IDS

    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    role = Column(String, nullable=False, default="client")
    instagram = Column(String, nullable=True)
    profile_picture = Column(String, nullable=True)


class Professional(Base):
    """Staff member model."""

    __tablename__ = "professionals"
    __table_args__ = _MONOTONIC_IDS

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=False)
    cpf = Column(String, unique=True, nullable=False)
    address = Column(String, nullable=False)
    profile_picture = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)


class Service(Base):
    """Salon service model."""

    __tablename__ = "services"
    __table_args__ = _MONOTONIC_IDS

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    duration = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    active = Column(Boolean, default=True, nullable=False)


class ProfessionalService(Base):
    """Association table between professionals and services."""

    __tablename__ = "professional_services"
    __table_args__ = (
        UniqueConstraint("professional_id", "service_id", name="uq_professional_service"),
        _MONOTONIC_IDS,
    )

    # No FK constraints: deletes never cascade and dangling rows are
    # detected when the join is resolved.
    id = Column(Integer, primary_key=True)
    professional_id = Column(Integer, nullable=False, index=True)
    service_id = Column(Integer, nullable=False, index=True)


class WorkSchedule(Base):
    """Recurring weekly work hours."""

    __tablename__ = "work_schedules"
    __table_args__ = (
        UniqueConstraint("professional_id", "day_of_week", name="uq_schedule_day"),
        _MONOTONIC_IDS,
    )

    id = Column(Integer, primary_key=True)
    professional_id = Column(Integer, nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)


class Appointment(Base):
    """Appointment model."""

    __tablename__ = "appointments"
    __table_args__ = _MONOTONIC_IDS

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    professional_id = Column(Integer, nullable=False, index=True)
    service_id = Column(Integer, nullable=False)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String, nullable=False, default="scheduled")
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Transaction(Base):
    """Ledger entry model."""

    __tablename__ = "transactions"
    __table_args__ = _MONOTONIC_IDS

    id = Column(Integer, primary_key=True)
    appointment_id = Column(Integer, nullable=True, index=True)
    type = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    SQLite connections are shared across threads; the store serializes
    access itself. In-memory databases use a single static connection so
    every session sees the same data.
    """
    engine_kwargs = {"echo": False}
    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **engine_kwargs)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
