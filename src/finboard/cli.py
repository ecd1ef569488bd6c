"""Flask CLI commands for Finboard."""

from __future__ import annotations

from pathlib import Path

import click
from flask import current_app


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("finboard-create-user")
    @click.argument("username")
    @click.option(
        "--password",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Password for the new user",
    )
    @click.option("--admin", is_flag=True, default=False, help="Grant the admin role")
    def finboard_create_user(username: str, password: str, admin: bool) -> None:
        """Create a login for USERNAME."""

        from .extensions import get_session_factory
        from .services.auth import create_user

        try:
            user = create_user(
                username=username,
                password=password,
                role="admin" if admin else "user",
                session_factory=get_session_factory(),
            )
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Created user {user.username} (id={user.id})")

    @app.cli.command("finboard-export")
    @click.argument("username")
    @click.option(
        "--output-dir",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Directory for the zip (defaults to DATA_DIR/exports)",
    )
    @click.option(
        "--include-passwords", is_flag=True, default=False, help="Also export the password vault"
    )
    def finboard_export(username: str, output_dir: Path | None, include_passwords: bool) -> None:
        """Export USERNAME's records as a zip of CSV files."""

        from .extensions import get_session_factory
        from .services.auth import get_user_by_username
        from .services.export_csv import export_bundle

        session_factory = get_session_factory()
        user = get_user_by_username(username, session_factory=session_factory)
        if user is None or user.id is None:
            raise click.ClickException(f"Unknown user: {username}")
        config = current_app.config["FINBOARD_CONFIG"]
        click.echo("Starting export...")
        path = export_bundle(
            user_id=user.id,
            session_factory=session_factory,
            output_dir=output_dir or config.exports_dir,
            include_passwords=include_passwords,
            retention=config.EXPORT_RETENTION,
        )
        click.echo(f"Export written: {path}")
