"""Professional management commands."""

import click
from salonbook.cli.error_handling import handle_domain_error
from salonbook.domain.errors import DomainError
from salonbook.domain.staff import StaffService


@click.group()
def professional_group():
    """Manage professionals and the services they perform."""
    pass


@professional_group.command("create")
@click.argument("name")
@click.option("--phone", required=True, help="Phone number")
@click.option("--email", required=True, help="Email address")
@click.option("--cpf", required=True, help="National id (must be unique)")
@click.option("--address", required=True, help="Address")
@click.option("--inactive", is_flag=True, help="Create the professional as inactive")
@click.pass_context
def create_professional(ctx, name: str, phone: str, email: str, cpf: str, address: str, inactive: bool):
    """Create a professional.

    Examples:
        salonbook professional create "John Smith" --phone "11 9999-8888" \\
            --email john@salao.com --cpf 123.456.789-00 --address "123 Main St"
    """
    staff = StaffService(ctx.obj["db"])
    try:
        professional = staff.create_professional(
            name=name, phone=phone, email=email, cpf=cpf, address=address, active=not inactive
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created professional '{professional.name}' (ID: {professional.id})")


@professional_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide inactive professionals")
@click.pass_context
def list_professionals(ctx, active_only: bool):
    """List professionals."""
    professionals = StaffService(ctx.obj["db"]).list_professionals(active_only=active_only)
    if not professionals:
        click.echo("No professionals found.")
        return

    click.echo("\nProfessionals:")
    click.echo("-" * 70)
    for p in professionals:
        status = "active" if p.active else "inactive"
        click.echo(f"ID: {p.id:3d} | {p.name:20s} | {p.phone:15s} | {status}")


@professional_group.command("update")
@click.argument("professional_id", type=int)
@click.option("--name", help="New name")
@click.option("--phone", help="New phone number")
@click.option("--email", help="New email address")
@click.option("--address", help="New address")
@click.option("--active/--inactive", default=None, help="Activate or deactivate")
@click.pass_context
def update_professional(
    ctx,
    professional_id: int,
    name: str | None,
    phone: str | None,
    email: str | None,
    address: str | None,
    active: bool | None,
):
    """Update a professional. Only the given fields change."""
    fields = {"name": name, "phone": phone, "email": email, "address": address, "active": active}
    changes = {field: value for field, value in fields.items() if value is not None}
    if not changes:
        click.echo("Nothing to update.")
        return
    try:
        professional = StaffService(ctx.obj["db"]).update_professional(professional_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated professional '{professional.name}' (ID: {professional.id})")


@professional_group.command("delete")
@click.argument("professional_id", type=int)
@click.option("--cascade", is_flag=True, help="Also remove service links and work schedules")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_professional(ctx, professional_id: int, cascade: bool, yes: bool):
    """Delete a professional.

    A professional with appointments cannot be deleted; deactivate them
    instead. Service links and work schedules block deletion unless
    --cascade is given.
    """
    staff = StaffService(ctx.obj["db"])
    try:
        professional = staff.require_professional(professional_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete professional '{professional.name}' (ID: {professional_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        staff.delete_professional(professional_id, cascade=cascade)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted professional '{professional.name}'")


@professional_group.command("assign")
@click.argument("professional_id", type=int)
@click.argument("service_id", type=int)
@click.pass_context
def assign_service(ctx, professional_id: int, service_id: int):
    """Record that a professional performs a service."""
    try:
        StaffService(ctx.obj["db"]).assign_service(professional_id, service_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Professional {professional_id} now performs service {service_id}")


@professional_group.command("unassign")
@click.argument("professional_id", type=int)
@click.argument("service_id", type=int)
@click.pass_context
def unassign_service(ctx, professional_id: int, service_id: int):
    """Remove a service from a professional."""
    try:
        StaffService(ctx.obj["db"]).unassign_service(professional_id, service_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Professional {professional_id} no longer performs service {service_id}")


@professional_group.command("services")
@click.argument("professional_id", type=int)
@click.pass_context
def list_professional_services(ctx, professional_id: int):
    """List the services a professional performs."""
    staff = StaffService(ctx.obj["db"])
    try:
        staff.require_professional(professional_id)
        services = staff.list_services(professional_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not services:
        click.echo("No services assigned.")
        return
    for s in services:
        click.echo(f"ID: {s.id:3d} | {s.name:20s} | {s.duration:3d} min | {s.price:,.2f}")


def register_commands(cli):
    """Register professional commands with main CLI."""
    cli.add_command(professional_group, name="professional")
