"""CLI tools for SyariahOS administration."""

import click

from syariahos.core.errors import FieldValidationError
from syariahos.db.enums import Role
from syariahos.db.session import SessionLocal
from syariahos.services import session_service, task_reset_service, user_service


@click.group()
def cli():
    """SyariahOS CLI tools."""
    pass


@cli.command("reset-tasks")
def reset_tasks():
    """
    Reset recurring tasks whose cycle has elapsed.

    Safe to run at any cadence; schedule at least daily.

    Example:
        syariahos-cli reset-tasks
    """
    db = SessionLocal()
    try:
        count = task_reset_service.reset_eligible_tasks(db)
        click.echo(f"✓ Reset {count} task(s)")
    finally:
        db.close()


@cli.command("cleanup-tokens")
def cleanup_tokens():
    """Delete expired bearer tokens."""
    db = SessionLocal()
    try:
        count = session_service.cleanup_expired_tokens(db)
        click.echo(f"✓ Removed {count} expired token(s)")
    finally:
        db.close()


@cli.command("create-admin")
@click.option("--name", required=True, help="Display name")
@click.option("--email", required=True, help="Login email")
@click.password_option(help="Login password (min 8 characters)")
def create_admin(name: str, email: str, password: str):
    """
    Bootstrap an admin account.

    Example:
        syariahos-cli create-admin --name "Admin" --email admin@example.com
    """
    if len(password) < 8:
        raise click.BadParameter("Password must be at least 8 characters", param_hint="password")

    db = SessionLocal()
    try:
        user = user_service.create_user(db, name, email.strip().lower(), password, Role.ADMIN)
        db.commit()
        click.echo(f"✓ Created admin: {user.email}")
        click.echo(f"  ID: {user.id}")
    except FieldValidationError as e:
        db.rollback()
        raise click.ClickException(str(e))
    finally:
        db.close()


if __name__ == "__main__":
    cli()
