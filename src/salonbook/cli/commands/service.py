"""Service catalog commands."""

import click
from salonbook.cli.error_handling import handle_domain_error, parse_or_exit
from salonbook.domain.catalog import CatalogService
from salonbook.domain.errors import DomainError
from salonbook.utils.amount_parser import parse_amount


@click.group()
def service_group():
    """Manage the service catalog."""
    pass


@service_group.command("create")
@click.argument("name")
@click.option("--duration", type=int, required=True, help="Duration in minutes")
@click.option("--price", required=True, help="Price (e.g., 35.00 or 'R$ 35,00')")
@click.option("--description", help="Description")
@click.pass_context
def create_service(ctx, name: str, duration: int, price: str, description: str | None):
    """Create a service.

    Examples:
        salonbook service create Haircut --duration 30 --price 35.00
        salonbook service create "Hair Coloring" --duration 120 --price 100 --description "Full coloring"
    """
    amount = parse_or_exit(ctx, parse_amount, price, "price")
    try:
        service = CatalogService(ctx.obj["db"]).create_service(
            name=name, duration=duration, price=amount, description=description
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created service '{service.name}' (ID: {service.id})")


@service_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide inactive services")
@click.pass_context
def list_services(ctx, active_only: bool):
    """List services."""
    services = CatalogService(ctx.obj["db"]).list_services(active_only=active_only)
    if not services:
        click.echo("No services found.")
        return

    click.echo("\nServices:")
    click.echo("-" * 70)
    for s in services:
        status = "" if s.active else " (inactive)"
        click.echo(f"ID: {s.id:3d} | {s.name:20s} | {s.duration:3d} min | {s.price:>9,.2f}{status}")


@service_group.command("update")
@click.argument("service_id", type=int)
@click.option("--name", help="New name")
@click.option("--duration", type=int, help="New duration in minutes")
@click.option("--price", help="New price")
@click.option("--description", help="New description")
@click.option("--active/--inactive", default=None, help="Activate or deactivate")
@click.pass_context
def update_service(
    ctx,
    service_id: int,
    name: str | None,
    duration: int | None,
    price: str | None,
    description: str | None,
    active: bool | None,
):
    """Update a service. Only the given fields change."""
    changes = {
        field: value
        for field, value in {
            "name": name,
            "duration": duration,
            "description": description,
            "active": active,
        }.items()
        if value is not None
    }
    if price is not None:
        changes["price"] = parse_or_exit(ctx, parse_amount, price, "price")
    if not changes:
        click.echo("Nothing to update.")
        return
    try:
        service = CatalogService(ctx.obj["db"]).update_service(service_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated service '{service.name}' (ID: {service.id})")


@service_group.command("delete")
@click.argument("service_id", type=int)
@click.option("--cascade", is_flag=True, help="Also remove professional links")
@click.pass_context
def delete_service(ctx, service_id: int, cascade: bool):
    """Delete a service.

    A service with appointments cannot be deleted; deactivate it instead.
    """
    try:
        CatalogService(ctx.obj["db"]).delete_service(service_id, cascade=cascade)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted service {service_id}")


def register_commands(cli):
    """Register service commands with main CLI."""
    cli.add_command(service_group, name="service")
