"""Ledger commands."""

from datetime import date

import click
from salonbook.cli.date_filters import date_range_options, resolve_cli_date_range
from salonbook.cli.error_handling import handle_domain_error, parse_or_exit
from salonbook.domain.entities import TransactionType
from salonbook.domain.errors import DomainError
from salonbook.domain.ledger import LedgerService
from salonbook.utils.amount_parser import parse_amount
from salonbook.utils.date_parser import parse_date

TYPE_CHOICES = click.Choice([t.value for t in TransactionType])


@click.group()
def ledger_group():
    """Record and summarize income and expenses."""
    pass


@ledger_group.command("record")
@click.argument("type", type=TYPE_CHOICES)
@click.argument("amount")
@click.argument("description")
@click.option("--date", "date_str", help="Entry date (defaults to today)")
@click.option("--appointment", "appointment_id", type=int, help="Linked appointment ID")
@click.pass_context
def record(ctx, type: str, amount: str, description: str, date_str: str | None, appointment_id: int | None):
    """Record an income or expense.

    Examples:
        salonbook ledger record expense 250.00 "Hair products"
        salonbook ledger record income 35 "Haircut" --appointment 4 --date yesterday
    """
    value = parse_or_exit(ctx, parse_amount, amount, "amount")
    day = parse_or_exit(ctx, parse_date, date_str, "date") if date_str else date.today()
    try:
        txn = LedgerService(ctx.obj["db"]).record(
            type, value, description, day, appointment_id=appointment_id
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded {txn.type.value} {txn.id}: {txn.amount:,.2f} on {txn.date}")


@ledger_group.command("appointment-income")
@click.argument("appointment_id", type=int)
@click.pass_context
def appointment_income(ctx, appointment_id: int):
    """Record the service price of a completed appointment as income."""
    try:
        txn = LedgerService(ctx.obj["db"]).record_appointment_income(appointment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded income {txn.id}: {txn.amount:,.2f} ({txn.description})")


@ledger_group.command("list")
@date_range_options
@click.option("--type", "type_", type=TYPE_CHOICES, help="Only income or only expenses")
@click.pass_context
def list_entries(ctx, period: str | None, start_date: str | None, end_date: str | None, type_: str | None):
    """List ledger entries."""
    start, end = resolve_cli_date_range(ctx, period=period, start_date=start_date, end_date=end_date)
    entries = LedgerService(ctx.obj["db"]).list_transactions(start_date=start, end_date=end, type=type_)
    if not entries:
        click.echo("No transactions found.")
        return
    for txn in entries:
        sign = "+" if txn.type is TransactionType.INCOME else "-"
        link = f" (appointment {txn.appointment_id})" if txn.appointment_id else ""
        click.echo(f"ID: {txn.id:3d} | {txn.date} | {sign}{txn.amount:>10,.2f} | {txn.description}{link}")


@ledger_group.command("summary")
@date_range_options
@click.option("--daily", is_flag=True, help="Also show per-day totals")
@click.pass_context
def summary(ctx, period: str | None, start_date: str | None, end_date: str | None, daily: bool):
    """Show income, expenses and net for a period."""
    start, end = resolve_cli_date_range(ctx, period=period, start_date=start_date, end_date=end_date)
    ledger = LedgerService(ctx.obj["db"])
    totals = ledger.summarize(start, end)

    label = f"{start or 'beginning'} to {end or 'today'}"
    click.echo(f"\nLedger summary ({label}), {totals.count} entr{'y' if totals.count == 1 else 'ies'}:")
    click.echo(f"  Income:   {totals.income:>12,.2f}")
    click.echo(f"  Expenses: {totals.expense:>12,.2f}")
    click.echo(f"  Net:      {totals.net:>12,.2f}")

    if daily:
        click.echo("")
        for day in ledger.daily_totals(start, end):
            click.echo(f"  {day.date} | +{day.income:>10,.2f} | -{day.expense:>10,.2f} | {day.net:>10,.2f}")


@ledger_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_entry(ctx, transaction_id: int):
    """Delete a ledger entry."""
    try:
        LedgerService(ctx.obj["db"]).delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
