"""CLI tools for Taskwise administration."""

import click

from taskwise.db.session import SessionLocal
from taskwise.services.errors import ServiceError


@click.group()
def cli():
    """Taskwise CLI tools."""
    pass


@cli.command()
@click.option("--username", required=True, help="Display name")
@click.option("--email", required=True, help="Login email address")
@click.option("--password", required=True, prompt=True, hide_input=True, help="Initial password")
def create_user(username: str, email: str, password: str):
    """
    Create a user account.

    Example:
        python -m taskwise.cli create-user --username "Ada" --email "ada@example.com"
    """
    from taskwise.services import user_service

    db = SessionLocal()
    try:
        user = user_service.create_user(db, username, email, password)
        click.echo(f"✓ Created user: {user.email}")
        click.echo(f"  ID: {user.id}")
    except ServiceError as e:
        db.rollback()
        raise click.ClickException(e.message)
    finally:
        db.close()


@cli.command()
def refresh_urls():
    """
    Re-issue presigned URLs for stored images and task attachments.

    Example:
        python -m taskwise.cli refresh-urls
    """
    from taskwise.jobs.refresh_urls import refresh_presigned_urls

    db = SessionLocal()
    try:
        result = refresh_presigned_urls(db)
    finally:
        db.close()

    click.echo(
        f"✓ Refreshed {result.users} users, {result.workspaces} workspaces, "
        f"{result.projects} projects ({result.attachments} attachments)"
    )
    if result.failed:
        click.echo(f"❌ {result.failed} rows failed, see logs")
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
