"""Work schedule commands."""

import click
from salonbook.cli.error_handling import handle_domain_error, parse_or_exit
from salonbook.domain.errors import DomainError
from salonbook.domain.staff import DAY_NAMES, StaffService
from salonbook.utils.time_parser import format_time, parse_time

DAY_CHOICES = {name.lower(): index for index, name in enumerate(DAY_NAMES)}
DAY_CHOICES.update({name[:3].lower(): index for index, name in enumerate(DAY_NAMES)})


def _parse_day(value: str) -> int:
    key = value.strip().lower()
    if key.isdigit():
        return int(key)
    if key not in DAY_CHOICES:
        raise ValueError(f"'{value}' is not a weekday name or 0-6")
    return DAY_CHOICES[key]


@click.group()
def schedule_group():
    """Manage weekly work schedules."""
    pass


@schedule_group.command("add")
@click.argument("professional_id", type=int)
@click.argument("day")
@click.argument("start")
@click.argument("end")
@click.pass_context
def add_schedule(ctx, professional_id: int, day: str, start: str, end: str):
    """Add working hours for a weekday.

    DAY is a weekday name ("monday", "mon") or 0 (Sunday) to 6 (Saturday).

    Examples:
        salonbook schedule add 1 monday 09:00 18:00
        salonbook schedule add 2 6 10:00 14:00
    """
    day_of_week = parse_or_exit(ctx, _parse_day, day, "day")
    start_time = parse_or_exit(ctx, parse_time, start, "start time")
    end_time = parse_or_exit(ctx, parse_time, end, "end time")
    try:
        schedule = StaffService(ctx.obj["db"]).add_work_schedule(
            professional_id, day_of_week, start_time, end_time
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Added schedule {schedule.id}: {DAY_NAMES[schedule.day_of_week]} "
        f"{format_time(schedule.start_time)}-{format_time(schedule.end_time)}"
    )


@schedule_group.command("list")
@click.option("--professional", "professional_id", type=int, help="Professional ID")
@click.pass_context
def list_schedules(ctx, professional_id: int | None):
    """List work schedules."""
    schedules = StaffService(ctx.obj["db"]).list_work_schedules(professional_id=professional_id)
    if not schedules:
        click.echo("No work schedules found.")
        return
    for s in schedules:
        click.echo(
            f"ID: {s.id:3d} | Professional {s.professional_id:3d} | {DAY_NAMES[s.day_of_week]:9s} | "
            f"{format_time(s.start_time)}-{format_time(s.end_time)}"
        )


@schedule_group.command("delete")
@click.argument("schedule_id", type=int)
@click.pass_context
def delete_schedule(ctx, schedule_id: int):
    """Delete a work schedule."""
    try:
        StaffService(ctx.obj["db"]).delete_work_schedule(schedule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted schedule {schedule_id}")


def register_commands(cli):
    """Register schedule commands with main CLI."""
    cli.add_command(schedule_group, name="schedule")
