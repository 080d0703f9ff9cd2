"""User management commands."""

import click
from salonbook.cli.error_handling import handle_domain_error
from salonbook.domain.entities import Role
from salonbook.domain.errors import DomainError
from salonbook.domain.user import UserService

ROLE_CHOICES = click.Choice([r.value for r in Role])


@click.group()
def user_group():
    """Manage clients and admins."""
    pass


@user_group.command("create")
@click.argument("username")
@click.option("--name", required=True, help="Full name")
@click.option("--email", required=True, help="Email address (must be unique)")
@click.option("--password", prompt=True, hide_input=True, help="Password")
@click.option("--role", type=ROLE_CHOICES, default=Role.CLIENT.value, show_default=True)
@click.option("--phone", help="Phone number")
@click.option("--address", help="Address")
@click.option("--instagram", help="Instagram handle")
@click.pass_context
def create_user(
    ctx,
    username: str,
    name: str,
    email: str,
    password: str,
    role: str,
    phone: str | None,
    address: str | None,
    instagram: str | None,
):
    """Create a user.

    Examples:
        salonbook user create ana --name "Ana Souza" --email ana@example.com
        salonbook user create boss --name Boss --email boss@salon.com --role admin
    """
    service = UserService(ctx.obj["db"])
    try:
        user = service.create_user(
            username=username,
            password=password,
            name=name,
            email=email,
            role=role,
            phone=phone,
            address=address,
            instagram=instagram,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {user.role.value} '{user.username}' (ID: {user.id})")


@user_group.command("list")
@click.option("--role", type=ROLE_CHOICES, help="Only list users with this role")
@click.pass_context
def list_users(ctx, role: str | None):
    """List users."""
    users = UserService(ctx.obj["db"]).list_users(role=role)
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 70)
    for u in users:
        click.echo(f"ID: {u.id:3d} | {u.username:15s} | {u.name:20s} | {u.role.value:6s} | {u.email}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
