"""The ``academia`` command: serve the API and manage its database."""

import asyncio
from typing import NoReturn

import click

from academia import __version__
from academia.core.config import get_settings
from academia.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="Academia Pro")
def cli() -> None:
    """Academia Pro access service.

    Reads ACADEMIA_* environment variables and .env.
    """


@cli.command()
@click.option("--host", default=None, help="Bind address. Defaults to ACADEMIA_HOST.")
@click.option("--port", type=int, default=None, help="Bind port. Defaults to ACADEMIA_PORT.")
@click.option("--workers", type=int, default=None, help="Uvicorn worker count.")
@click.option("--reload", is_flag=True, default=False, help="Reload on code changes.")
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    options = {
        "host": host or settings.host,
        "port": port or settings.port,
        "workers": 1 if reload else (workers or settings.workers),
    }
    get_logger(__name__).info(
        "Serving access API", reload=reload, environment=settings.environment, **options
    )

    uvicorn.run(
        "academia.infrastructure.api.app:app",
        reload=reload,
        log_level=settings.log_level.lower(),
        **options,
    )


@cli.command()
@click.option("--force", is_flag=True, help="Do not ask for confirmation.")
def init_db(force: bool) -> None:
    """Create tables and seed permissions, roles and the env super admin."""
    from academia.infrastructure.persistence.database import (
        get_db_manager,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo("Refusing to initialize a production database without --force.", err=True)
        raise SystemExit(1)
    if not force:
        click.confirm("Create the schema and seed data?", abort=True, default=False)

    async def run() -> None:
        try:
            await init_database()
        finally:
            await get_db_manager().disconnect()

    asyncio.run(run())
    click.echo("Database ready.")


@cli.command()
@click.option("--email", default=None, help="Prompted for when omitted.")
@click.option("--password", default=None, help="Prompted for when omitted.")
@click.option("--force", is_flag=True, help="Add another super admin without asking.")
def create_superadmin(email: str | None, password: str | None, force: bool) -> None:
    """Create a super admin account."""
    from academia.domain.services.superadmin_service import (
        SuperadminCreationError,
        SuperadminService,
    )
    from academia.infrastructure.persistence import models  # noqa: F401
    from academia.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    async def run() -> None:
        nonlocal email, password
        db = get_db_manager()
        try:
            await db.create_tables()
            async with db.session() as session:
                exists = await SuperadminService.has_superadmin(session)
            if exists and not force:
                click.confirm("A super admin already exists. Add another?", abort=True)

            email = email or click.prompt("Email")
            password = password or click.prompt(
                "Password", hide_input=True, confirmation_prompt=True
            )

            try:
                async with db.session() as session:
                    user_id = await SuperadminService.create_superadmin(
                        email=email, password=password, session=session
                    )
            except SuperadminCreationError as e:
                logger.error("Super admin creation failed", error=str(e))
                raise click.ClickException(e.message) from e

            logger.info("Super admin created", user_id=user_id, email=email)
            click.echo(f"Created super admin {email} ({user_id}).")
            click.echo(f"Sign in at {settings.api_prefix}/auth/super-admin/login")
        finally:
            await db.disconnect()

    asyncio.run(run())


@cli.command()
def info() -> None:
    """Print the effective configuration."""
    settings = get_settings()
    rows = [
        ("Environment", settings.environment),
        ("API Prefix", settings.api_prefix),
        ("Database", settings.database_url),
        ("Access Token", f"{settings.access_token_expire_hours} hours"),
        ("Refresh Token", f"{settings.refresh_token_expire_days} days"),
        (
            "Lockout",
            f"{settings.max_login_attempts} attempts, {settings.lockout_minutes} minutes",
        ),
        ("Match Mode", settings.permission_match_mode),
        ("Logging", f"{settings.log_level} ({settings.log_format})"),
    ]

    click.echo(f"Academia Pro v{settings.app_version}")
    for label, value in rows:
        click.echo(f"  {label + ':':<15}{value}")


def main() -> NoReturn:
    cli()


if __name__ == "__main__":
    main()
