"""Database commands."""

import asyncio
import sys

import cyclopts
from sqlalchemy.ext.asyncio import AsyncEngine

from conducky.application.di import create_container
from conducky.cli.console import get_console
from conducky.config import Config, configure_logging
from conducky.infrastructure.persistence.migrate import run_migrations
from conducky.infrastructure.persistence.seed import ensure_role_catalog

app = cyclopts.App(name="db", help="Database management commands")


@app.command
def migrate() -> None:
    """Upgrade the database schema to the latest revision."""
    console = get_console()
    config = Config()  # type: ignore[call-arg]
    configure_logging(config.logging)

    with console.status("Running migrations..."):
        run_migrations(config.database.url)
    console.success("Database is up to date")


async def _seed_roles(config: Config) -> int:
    container = create_container(config)
    try:
        engine = await container.get(AsyncEngine)
        return await ensure_role_catalog(engine)
    finally:
        await container.close()


@app.command(name="seed-roles")
def seed_roles() -> None:
    """Insert any missing roles from the built-in role catalog."""
    console = get_console()
    config = Config()  # type: ignore[call-arg]
    configure_logging(config.logging)

    try:
        added = asyncio.run(_seed_roles(config))
    except Exception as e:
        console.error(f"Seeding failed: {e}", hint="Run 'conducky db migrate' first")
        sys.exit(1)

    if added:
        console.success(f"Added {added} role{'s' if added != 1 else ''}")
    else:
        console.info("Role catalog already complete")
