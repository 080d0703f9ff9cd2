"""Shared pytest fixtures for salonbook tests."""

import os
import tempfile
from datetime import date, time
from decimal import Decimal

import pytest

from salonbook.database.factories import create_memory_database, create_sqlite_database
from salonbook.domain.availability import AvailabilityService
from salonbook.domain.booking import BookingService
from salonbook.domain.catalog import CatalogService
from salonbook.domain.ledger import LedgerService
from salonbook.domain.reports import ReportService
from salonbook.domain.staff import StaffService
from salonbook.domain.user import UserService

# 2024-06-03 is a Monday, 2024-06-02 a Sunday
MONDAY = date(2024, 6, 3)
SUNDAY = date(2024, 6, 2)


@pytest.fixture
def temp_db():
    """Create a fresh in-memory store for testing."""
    db = create_memory_database()
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()


@pytest.fixture
def file_db():
    """Create a temporary file-backed store, for tests that go through the CLI."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that pass it to the CLI
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_service(temp_db):
    return UserService(temp_db)


@pytest.fixture
def catalog_service(temp_db):
    return CatalogService(temp_db)


@pytest.fixture
def staff_service(temp_db):
    return StaffService(temp_db)


@pytest.fixture
def availability_service(temp_db):
    return AvailabilityService(temp_db)


@pytest.fixture
def booking_service(temp_db, availability_service):
    return BookingService(temp_db, availability_service)


@pytest.fixture
def ledger_service(temp_db):
    return LedgerService(temp_db)


@pytest.fixture
def report_service(temp_db):
    return ReportService(temp_db)


@pytest.fixture
def sample_client(user_service):
    """Create a client user."""
    return user_service.create_user(
        username="ana",
        password="secret",
        name="Ana Souza",
        email="ana@example.com",
        phone="11 98888-0000",
    )


@pytest.fixture
def sample_professional(staff_service):
    """Create a professional who works Mondays 09:00-12:00."""
    professional = staff_service.create_professional(
        name="John Smith",
        phone="11 9999-8888",
        email="john@salao.com",
        cpf="123.456.789-00",
        address="123 Main St",
    )
    staff_service.add_work_schedule(professional.id, 1, time(9, 0), time(12, 0))
    return professional


@pytest.fixture
def sample_service(catalog_service, staff_service, sample_professional):
    """Create a 60 minute service performed by the sample professional."""
    service = catalog_service.create_service(
        name="Hair Coloring", duration=60, price=Decimal("100.00"), description="Full coloring"
    )
    staff_service.assign_service(sample_professional.id, service.id)
    return service


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
