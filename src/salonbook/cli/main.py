"""Main CLI entry point."""

import logging

import click
from salonbook.database.factories import create_sqlite_database

# Import and register all commands at module level
from salonbook.cli.commands import (
    user,
    professional,
    service,
    schedule,
    appointment,
    ledger,
    report,
    seed,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SALONBOOK_DB_PATH environment variable)",
    envvar="SALONBOOK_DB_PATH",
)
@click.option(
    "--slot-step",
    type=click.IntRange(min=1),
    default=30,
    show_default=True,
    envvar="SALONBOOK_SLOT_STEP",
    help="Minutes between bookable start times",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="SALONBOOK_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, slot_step: int, log_level: str):
    """Salonbook - salon and barbershop booking.

    Manage professionals, services and work hours, book client
    appointments into free slots, and keep the salon's ledger.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj["slot_step"] = slot_step

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
professional.register_commands(cli)
service.register_commands(cli)
schedule.register_commands(cli)
appointment.register_commands(cli)
ledger.register_commands(cli)
report.register_commands(cli)
seed.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
