"""Reporting commands."""

import click
from salonbook.cli.date_filters import date_range_options, resolve_cli_date_range
from salonbook.domain.reports import ReportService


@click.group()
def report_group():
    """Appointment reports."""
    pass


def _range(ctx, period, start_date, end_date):
    return resolve_cli_date_range(ctx, period=period, start_date=start_date, end_date=end_date)


@report_group.command("services")
@date_range_options
@click.pass_context
def services_report(ctx, period, start_date, end_date):
    """Appointments and revenue per service."""
    start, end = _range(ctx, period, start_date, end_date)
    rows = ReportService(ctx.obj["db"]).service_report(start, end)
    if not rows:
        click.echo("No services found.")
        return
    click.echo(f"{'Service':20s} | {'Booked':>6s} | {'Done':>6s} | {'Revenue':>10s}")
    click.echo("-" * 52)
    for row in rows:
        click.echo(f"{row.name:20s} | {row.appointments:6d} | {row.completed:6d} | {row.revenue:>10,.2f}")
    click.echo("-" * 52)
    click.echo(f"{'Total':20s} | {'':6s} | {'':6s} | {sum(r.revenue for r in rows):>10,.2f}")


@report_group.command("professionals")
@date_range_options
@click.pass_context
def professionals_report(ctx, period, start_date, end_date):
    """Appointments per professional."""
    start, end = _range(ctx, period, start_date, end_date)
    rows = ReportService(ctx.obj["db"]).professional_report(start, end)
    if not rows:
        click.echo("No professionals found.")
        return
    for row in rows:
        click.echo(f"{row.name:20s} | {row.appointments:4d} booked | {row.completed:4d} completed")


@report_group.command("clients")
@date_range_options
@click.pass_context
def clients_report(ctx, period, start_date, end_date):
    """Client outcomes, highest revenue first."""
    start, end = _range(ctx, period, start_date, end_date)
    rows = ReportService(ctx.obj["db"]).client_report(start, end)
    if not rows:
        click.echo("No appointments in range.")
        return
    for row in rows:
        click.echo(
            f"{row.name:20s} | {row.appointments:3d} booked | {row.completed:3d} done | "
            f"{row.cancelled:3d} cancelled | {row.no_show:3d} no-show | {row.revenue:>10,.2f}"
        )


@report_group.command("status")
@date_range_options
@click.pass_context
def status_report(ctx, period, start_date, end_date):
    """Appointment counts per status."""
    start, end = _range(ctx, period, start_date, end_date)
    counts = ReportService(ctx.obj["db"]).status_breakdown(start, end)
    total = sum(counts.values())
    for status, count in counts.items():
        share = f"{count * 100 // total}%" if total else "0%"
        click.echo(f"{status.value:10s} {count:5d}  {share:>4s}")
    click.echo(f"{'total':10s} {total:5d}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
