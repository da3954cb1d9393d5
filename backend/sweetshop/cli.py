# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/sweetshop/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py and JWT_SECRET to any non-empty value.
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (idempotent; use `flask db upgrade` for migrations).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with their role.
# - python -m flask users create --username admin --password "secret1" --role admin
#   Create a user (prompts if options are omitted).
#
# Inventory inspection:
# - python -m flask sweets list
#   Print the catalogue with stock levels.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Sweet, User, Role
from .services.auth_service import create_user
from .validation import ValidationError, ConflictError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database schema ready.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete.")


# =============================================================================
# USER MANAGEMENT COMMANDS
# =============================================================================

@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice([r.value for r in Role]), default=Role.USER.value,
              show_default=True, help='Role')
@with_appcontext
def create_user_cli(username, password, role):
    """
    Create a new user.

    This is the supported way to provision the first admin account.
    """
    try:
        user = create_user(username=username, password=password, role=role)
    except (ValidationError, ConflictError) as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created user: {user.username} with role '{user.role.value}' (ID: {user.id})")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = db.session.query(User).order_by(User.created_at.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<38} {'Username':<30} {'Role'}")
    click.echo("="*80)

    for user in users:
        click.echo(f"{user.id:<38} {user.username:<30} {user.role.value}")

    click.echo("="*80 + "\n")


# =============================================================================
# INVENTORY COMMANDS
# =============================================================================

@click.group('sweets')
def sweets_group():
    """Inventory inspection commands."""


@sweets_group.command('list')
@click.option('--out-of-stock', is_flag=True, help='Only show sweets with zero quantity')
@with_appcontext
def list_sweets(out_of_stock):
    """List sweets with price and stock level."""
    query = db.session.query(Sweet)
    if out_of_stock:
        query = query.filter(Sweet.quantity == 0)
    sweets = query.order_by(Sweet.name.asc()).all()

    if not sweets:
        click.echo("No sweets found.")
        return

    click.echo(f"{'Name':<40} {'Category':<20} {'Price':>10} {'Qty':>6}")
    for s in sweets:
        click.echo(f"{s.name:<40} {s.category:<20} {s.price:>10.2f} {s.quantity:>6}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(sweets_group)
