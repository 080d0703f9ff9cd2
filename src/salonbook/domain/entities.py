"""Domain model entities for salonbook.

These are pure data classes representing business concepts, independent of
the database schema. Stores return them and services pass them around; they
are never mutated in place.
"""

from dataclasses import dataclass
from datetime import datetime, date, time
from decimal import Decimal
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """User role."""

    CLIENT = "client"
    ADMIN = "admin"


class AppointmentStatus(str, Enum):
    """Appointment lifecycle status."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"

    @property
    def is_terminal(self) -> bool:
        return not APPOINTMENT_TRANSITIONS[self]

    @property
    def blocks_slot(self) -> bool:
        """Whether an appointment in this status occupies its time slot."""
        return self in BLOCKING_STATUSES

    def can_transition_to(self, target: "AppointmentStatus") -> bool:
        return target in APPOINTMENT_TRANSITIONS[self]


APPOINTMENT_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW}
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}

BLOCKING_STATUSES = frozenset({AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED})


class TransactionType(str, Enum):
    """Ledger entry direction."""

    INCOME = "income"
    EXPENSE = "expense"


class ConflictPolicy(Enum):
    """How an existing booking blocks a candidate slot.

    OVERLAP blocks every candidate whose [start, end) interval intersects a
    booking. EXACT_START only blocks a candidate starting at the very same
    time as a booking, which lets bookings of different lengths overlap.
    """

    OVERLAP = "overlap"
    EXACT_START = "exact-start"

    def conflicts(self, start: time, end: time, other_start: time, other_end: time) -> bool:
        """Whether slot [start, end) is blocked by booking [other_start, other_end)."""
        if self is ConflictPolicy.EXACT_START:
            return start == other_start
        return start < other_end and other_start < end


@dataclass(frozen=True)
class User:
    """Authentication user: a client or an admin."""

    id: int
    username: str
    password: str
    name: str
    email: str
    role: Role
    phone: Optional[str] = None
    address: Optional[str] = None
    instagram: Optional[str] = None
    profile_picture: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class Professional:
    """Staff member who performs services."""

    id: int
    name: str
    phone: str
    email: str
    cpf: str
    address: str
    active: bool = True
    profile_picture: Optional[str] = None


@dataclass(frozen=True)
class Service:
    """Bookable salon service."""

    id: int
    name: str
    duration: int
    price: Decimal
    description: Optional[str] = None
    active: bool = True


@dataclass(frozen=True)
class ProfessionalService:
    """Link between a professional and a service they are qualified to perform."""

    id: int
    professional_id: int
    service_id: int


@dataclass(frozen=True)
class WorkSchedule:
    """Recurring weekly working hours. day_of_week: 0=Sunday .. 6=Saturday."""

    id: int
    professional_id: int
    day_of_week: int
    start_time: time
    end_time: time


@dataclass(frozen=True)
class Appointment:
    """Booked appointment."""

    id: int
    user_id: int
    professional_id: int
    service_id: int
    date: date
    start_time: time
    end_time: time
    status: AppointmentStatus
    created_at: datetime
    notes: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger entry."""

    id: int
    type: TransactionType
    amount: Decimal
    description: str
    date: date
    created_at: datetime
    appointment_id: Optional[int] = None


@dataclass(frozen=True)
class DayAvailability:
    """Availability of one professional for one service on one date."""

    professional_id: int
    service_id: int
    date: date
    duration: int
    slot_step: int
    opens_at: Optional[time]
    closes_at: Optional[time]
    slots: tuple[str, ...]

    @property
    def is_closed(self) -> bool:
        return self.opens_at is None


@dataclass(frozen=True)
class LedgerSummary:
    """Income, expense and net over a date range."""

    start_date: Optional[date]
    end_date: Optional[date]
    income: Decimal
    expense: Decimal
    count: int

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class DailyTotal:
    """Income and expense booked on a single day."""

    date: date
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class ServiceReportRow:
    service_id: int
    name: str
    appointments: int
    completed: int
    revenue: Decimal


@dataclass(frozen=True)
class ProfessionalReportRow:
    professional_id: int
    name: str
    appointments: int
    completed: int


@dataclass(frozen=True)
class ClientReportRow:
    user_id: int
    name: str
    appointments: int
    completed: int
    cancelled: int
    no_show: int
    revenue: Decimal
