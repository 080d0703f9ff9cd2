"""Appointment commands."""

import click
from salonbook.cli.error_handling import handle_domain_error, parse_or_exit
from salonbook.domain.availability import AvailabilityService
from salonbook.domain.booking import BookingService
from salonbook.domain.entities import AppointmentStatus
from salonbook.domain.errors import DomainError
from salonbook.utils.date_parser import parse_date
from salonbook.utils.time_parser import format_time, parse_time

STATUS_CHOICES = click.Choice([s.value for s in AppointmentStatus])


def _booking(ctx) -> BookingService:
    db = ctx.obj["db"]
    return BookingService(db, AvailabilityService(db, slot_step=ctx.obj["slot_step"]))


@click.group()
def appointment_group():
    """Book and manage appointments."""
    pass


@appointment_group.command("slots")
@click.argument("professional_id", type=int)
@click.argument("service_id", type=int)
@click.option("--date", "date_str", required=True, help="Date (YYYY-MM-DD or 'tomorrow', 'next monday')")
@click.pass_context
def show_slots(ctx, professional_id: int, service_id: int, date_str: str):
    """Show free start times for a professional and service on a date."""
    day = parse_or_exit(ctx, parse_date, date_str, "date")
    try:
        availability = _booking(ctx).availability.describe_day(professional_id, service_id, day)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if availability.is_closed:
        click.echo(f"Professional {professional_id} does not work on {day:%A} {day}.")
        return
    click.echo(
        f"{day:%A} {day}: open {format_time(availability.opens_at)}-"
        f"{format_time(availability.closes_at)}, {availability.duration} min service"
    )
    if not availability.slots:
        click.echo("No free slots.")
        return
    click.echo("Free slots: " + ", ".join(availability.slots))


@appointment_group.command("book")
@click.option("--user", "user_id", type=int, required=True, help="Client user ID")
@click.option("--professional", "professional_id", type=int, required=True, help="Professional ID")
@click.option("--service", "service_id", type=int, required=True, help="Service ID")
@click.option("--date", "date_str", required=True, help="Date")
@click.option("--time", "time_str", required=True, help="Start time (HH:MM)")
@click.option("--notes", help="Notes")
@click.pass_context
def book_appointment(
    ctx,
    user_id: int,
    professional_id: int,
    service_id: int,
    date_str: str,
    time_str: str,
    notes: str | None,
):
    """Book an appointment in a free slot.

    Examples:
        salonbook appointment book --user 2 --professional 1 --service 1 --date 2024-06-03 --time 09:30
    """
    day = parse_or_exit(ctx, parse_date, date_str, "date")
    start = parse_or_exit(ctx, parse_time, time_str, "time")
    try:
        appointment = _booking(ctx).create_appointment(
            user_id=user_id,
            professional_id=professional_id,
            service_id=service_id,
            day=day,
            start_time=start,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Booked appointment {appointment.id} on {appointment.date} "
        f"{format_time(appointment.start_time)}-{format_time(appointment.end_time)}"
    )


@appointment_group.command("list")
@click.option("--user", "user_id", type=int, help="Client user ID")
@click.option("--professional", "professional_id", type=int, help="Professional ID")
@click.option("--date", "date_str", help="Only this date")
@click.option("--status", type=STATUS_CHOICES, multiple=True, help="Status filter (repeatable)")
@click.pass_context
def list_appointments(ctx, user_id: int | None, professional_id: int | None, date_str: str | None, status):
    """List appointments."""
    day = parse_or_exit(ctx, parse_date, date_str, "date") if date_str else None
    appointments = _booking(ctx).list_appointments(
        user_id=user_id,
        professional_id=professional_id,
        day=day,
        statuses=list(status) or None,
    )
    if not appointments:
        click.echo("No appointments found.")
        return

    click.echo(f"\nFound {len(appointments)} appointment(s):")
    click.echo("-" * 80)
    for a in appointments:
        click.echo(
            f"ID: {a.id:3d} | {a.date} {format_time(a.start_time)}-{format_time(a.end_time)} | "
            f"User {a.user_id:3d} | Professional {a.professional_id:3d} | "
            f"Service {a.service_id:3d} | {a.status.value}"
        )


@appointment_group.command("status")
@click.argument("appointment_id", type=int)
@click.argument("status", type=STATUS_CHOICES)
@click.pass_context
def set_status(ctx, appointment_id: int, status: str):
    """Mark a scheduled appointment completed, cancelled or no-show."""
    try:
        appointment = _booking(ctx).update_status(appointment_id, status)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Appointment {appointment.id} is now {appointment.status.value}")


@appointment_group.command("reschedule")
@click.argument("appointment_id", type=int)
@click.option("--date", "date_str", required=True, help="New date")
@click.option("--time", "time_str", required=True, help="New start time (HH:MM)")
@click.pass_context
def reschedule(ctx, appointment_id: int, date_str: str, time_str: str):
    """Move a scheduled appointment to another free slot."""
    day = parse_or_exit(ctx, parse_date, date_str, "date")
    start = parse_or_exit(ctx, parse_time, time_str, "time")
    try:
        appointment = _booking(ctx).reschedule(appointment_id, day, start)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Appointment {appointment.id} moved to {appointment.date} {format_time(appointment.start_time)}"
    )


@appointment_group.command("delete")
@click.argument("appointment_id", type=int)
@click.pass_context
def delete_appointment(ctx, appointment_id: int):
    """Delete an appointment. Ledger entries are not touched."""
    try:
        _booking(ctx).delete_appointment(appointment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted appointment {appointment_id}")


def register_commands(cli):
    """Register appointment commands with main CLI."""
    cli.add_command(appointment_group, name="appointment")
