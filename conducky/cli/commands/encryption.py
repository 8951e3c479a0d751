"""Field encryption commands."""

import asyncio
import sys

import cyclopts

from conducky.application.di import create_container
from conducky.cli.console import get_console
from conducky.config import Config, configure_logging
from conducky.domain.settings.service.migration import (
    EncryptionMigration,
    EventContactMigration,
    IncidentCommentMigration,
    MigrationSummary,
)
from conducky.domain.shared.error import ConduckyError
from conducky.infrastructure.encryption.keys import validate_encryption_key
from conducky.util.di.scope import Scope

app = cyclopts.App(name="encryption", help="Field encryption maintenance")

MigrationJob = (
    type[EncryptionMigration] | type[EventContactMigration] | type[IncidentCommentMigration]
)


async def _run(config: Config, job: MigrationJob, dry_run: bool):
    container = create_container(config)
    try:
        async with container(scope=Scope.UOW) as uow:
            migration = await uow.get(job)
            return await migration.run(dry_run=dry_run)
    finally:
        await container.close()


def _report(summary: MigrationSummary, noun: str) -> None:
    console = get_console()
    prefix = "[dry run] " if summary.dry_run else ""
    console.table(
        [
            {"metric": "migrated", "count": summary.migrated},
            {"metric": "skipped", "count": summary.skipped},
            {"metric": "errors", "count": summary.errors},
            {"metric": "verified", "count": summary.verified},
        ],
        [("metric", "Metric"), ("count", "Count")],
        title=f"{prefix}{noun}",
    )
    for detail in summary.details:
        console.info(f"  {detail}")
    if summary.dry_run and summary.migrated:
        console.warning("Dry run: nothing was written")
    else:
        console.success("Done")


def _execute(job: MigrationJob, dry_run: bool, noun: str) -> None:
    console = get_console()
    config = Config()  # type: ignore[call-arg]
    configure_logging(config.logging)

    try:
        summary = asyncio.run(_run(config, job, dry_run))
    except ConduckyError as e:
        console.error(e.message, hint=f"code: {e.code}")
        sys.exit(1)
    _report(summary, noun)


@app.command
def migrate(dry_run: bool = False) -> None:
    """Re-encrypt legacy secrets in the system settings.

    Args:
        dry_run: Report what would change without writing.
    """
    _execute(EncryptionMigration, dry_run, "Settings re-encryption")


@app.command(name="migrate-events")
def migrate_events(dry_run: bool = False) -> None:
    """Encrypt plaintext event contact emails.

    Args:
        dry_run: Report what would change without writing.
    """
    _execute(EventContactMigration, dry_run, "Event contact encryption")


@app.command(name="migrate-incidents")
def migrate_incidents(dry_run: bool = False) -> None:
    """Encrypt plaintext incident fields and comment bodies.

    Args:
        dry_run: Report what would change without writing.
    """
    _execute(IncidentCommentMigration, dry_run, "Incident and comment encryption")


@app.command(name="check-key")
def check_key() -> None:
    """Validate the configured ENCRYPTION_KEY."""
    console = get_console()
    config = Config()  # type: ignore[call-arg]

    result = validate_encryption_key(config.master_key, config.server.environment)
    for warning in result.warnings:
        console.warning(warning)
    if not result.valid:
        for error in result.errors:
            console.error(error)
        sys.exit(1)
    console.success(f"Encryption key is valid for {config.server.environment}")
