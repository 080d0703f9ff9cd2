"""Load sample salon data."""

from datetime import time
from decimal import Decimal

import click
from salonbook.database.base import Database
from salonbook.domain.catalog import CatalogService
from salonbook.domain.entities import Role
from salonbook.domain.staff import StaffService
from salonbook.domain.user import UserService

ADMIN = {
    "username": "admin",
    "password": "admin123",
    "name": "Administrator",
    "email": "admin@salao.com",
}

SAMPLE_SERVICES = [
    # (name, description, duration, price)
    ("Haircut", "Basic haircut with styling", 30, Decimal("35.00")),
    ("Hair Coloring", "Full hair coloring service", 120, Decimal("100.00")),
    ("Manicure", "Basic manicure service", 45, Decimal("25.00")),
]

SAMPLE_PROFESSIONALS = [
    # (name, phone, email, cpf, address, services, start, end)
    (
        "John Smith",
        "11 9999-8888",
        "john@salao.com",
        "123.456.789-00",
        "123 Main St, City",
        ("Haircut", "Hair Coloring"),
        time(9, 0),
        time(18, 0),
    ),
    (
        "Maria Silva",
        "11 9999-7777",
        "maria@salao.com",
        "987.654.321-00",
        "456 Palm Ave, City",
        ("Hair Coloring", "Manicure"),
        time(10, 0),
        time(19, 0),
    ),
]

WEEKDAYS = range(1, 6)  # Monday to Friday


def seed_sample_data(db: Database) -> bool:
    """Create the sample admin, services and professionals.

    Returns:
        False if the admin user already exists and nothing was created
    """
    users = UserService(db)
    if users.get_user_by_username(ADMIN["username"]) is not None:
        return False

    users.create_user(role=Role.ADMIN, **ADMIN)

    catalog = CatalogService(db)
    services = {}
    for name, description, duration, price in SAMPLE_SERVICES:
        services[name] = catalog.create_service(
            name=name, duration=duration, price=price, description=description
        )

    staff = StaffService(db)
    for name, phone, email, cpf, address, performs, start, end in SAMPLE_PROFESSIONALS:
        professional = staff.create_professional(
            name=name, phone=phone, email=email, cpf=cpf, address=address
        )
        for service_name in performs:
            staff.assign_service(professional.id, services[service_name].id)
        for day in WEEKDAYS:
            staff.add_work_schedule(professional.id, day, start, end)
    return True


@click.command("seed")
@click.pass_context
def seed(ctx):
    """Load an admin user, three services and two professionals working Mon-Fri."""
    if seed_sample_data(ctx.obj["db"]):
        click.echo(
            f"Seeded {len(SAMPLE_SERVICES)} services and {len(SAMPLE_PROFESSIONALS)} professionals."
        )
        click.echo(f"Admin login: {ADMIN['username']}")
    else:
        click.echo("Sample data already present, nothing to do.")


def register_commands(cli):
    """Register seed command with main CLI."""
    cli.add_command(seed)
