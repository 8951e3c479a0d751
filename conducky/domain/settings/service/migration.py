"""Batch re-encryption jobs.

EncryptionMigration moves legacy fixed-salt secrets in the settings store
to the per-value salt format. EventContactMigration encrypts plaintext
event contact emails. IncidentCommentMigration encrypts plaintext incident
and comment fields. All are idempotent: values already in the target
format are skipped.
"""

import logging
from dataclasses import dataclass, field

from conducky.domain.settings.model.setting import SystemSetting
from conducky.domain.settings.port.cipher import FieldCipher
from conducky.domain.settings.port.event_repository import EventContactRepository
from conducky.domain.settings.port.record_repository import (
    SensitiveRecordKind,
    SensitiveRecordRepository,
)
from conducky.domain.settings.port.repository import SettingsRepository
from conducky.domain.settings.service.settings import SECRET_FIELDS
from conducky.domain.shared.error import DomainError, InvalidStateError
from conducky.domain.shared.service import Service

logger = logging.getLogger(__name__)


@dataclass
class MigrationSummary:
    dry_run: bool
    migrated: int = 0
    skipped: int = 0
    errors: int = 0
    verified: int = 0
    details: list[str] = field(default_factory=list)


class EncryptionMigration(Service):
    _settings: SettingsRepository
    _cipher: FieldCipher

    async def run(self, dry_run: bool = False) -> MigrationSummary:
        """Re-encrypt legacy secrets. Raises InvalidStateError if any setting fails."""
        summary = MigrationSummary(dry_run=dry_run)
        migrated_keys: list[str] = []

        for key, secret_fields in SECRET_FIELDS.items():
            setting = await self._settings.get(key)
            if setting is None or not setting.value:
                summary.skipped += 1
                continue

            try:
                data = setting.parse()
            except DomainError:
                logger.warning("Setting %s is not valid JSON, skipping", key)
                summary.skipped += 1
                continue

            legacy = [
                name for name in secret_fields if self._cipher.is_legacy_encrypted(data.get(name))
            ]
            if not legacy:
                logger.info("Setting %s has no legacy encrypted fields, skipping", key)
                summary.skipped += 1
                continue

            try:
                for name in legacy:
                    plaintext = self._cipher.decrypt_strict(data[name])
                    data[name] = self._cipher.encrypt_field(plaintext)
                if not dry_run:
                    await self._settings.upsert(SystemSetting.from_section(key, data))
            except DomainError as e:
                logger.error("Error migrating setting %s: %s", key, e.message)
                summary.errors += 1
                continue

            summary.migrated += 1
            migrated_keys.append(key)
            summary.details.append(f"{key}: {', '.join(legacy)}")
            logger.info("Re-encrypted %s field(s) in %s", len(legacy), key)

        logger.info(
            "Encryption migration: migrated=%d skipped=%d errors=%d dry_run=%s",
            summary.migrated,
            summary.skipped,
            summary.errors,
            dry_run,
        )
        if summary.errors:
            raise InvalidStateError(
                f"{summary.errors} settings failed migration", code="migration_failed"
            )

        if not dry_run and migrated_keys:
            await self._verify(migrated_keys, summary)
        return summary

    async def _verify(self, keys: list[str], summary: MigrationSummary) -> None:
        failures = 0
        for key in keys:
            setting = await self._settings.get(key)
            data = setting.parse() if setting is not None else {}
            for name in SECRET_FIELDS[key]:
                value = data.get(name)
                if not self._cipher.is_encrypted(value):
                    continue
                try:
                    self._cipher.decrypt_strict(value)
                except DomainError:
                    logger.error("Verification failed for %s.%s", key, name)
                    failures += 1
                else:
                    summary.verified += 1

        if failures:
            raise InvalidStateError(
                f"{failures} fields failed verification", code="migration_verification_failed"
            )


class EventContactMigration(Service):
    _events: EventContactRepository
    _cipher: FieldCipher

    async def run(self, dry_run: bool = False) -> MigrationSummary:
        summary = MigrationSummary(dry_run=dry_run)
        for event_id, email in await self._events.list_contact_emails():
            if not email or self._cipher.is_encrypted(email):
                summary.skipped += 1
                continue
            encrypted = self._cipher.encrypt_field(email)
            if not dry_run and encrypted is not None:
                await self._events.set_contact_email(event_id, encrypted)
            summary.migrated += 1
            summary.details.append(event_id)

        logger.info(
            "Event contact migration: migrated=%d skipped=%d dry_run=%s",
            summary.migrated,
            summary.skipped,
            dry_run,
        )
        return summary


class IncidentCommentMigration(Service):
    """Encrypt plaintext incident descriptions, parties, locations and comment bodies."""

    _records: SensitiveRecordRepository
    _cipher: FieldCipher

    async def run(self, dry_run: bool = False) -> MigrationSummary:
        summary = MigrationSummary(dry_run=dry_run)
        migrated: dict[SensitiveRecordKind, dict[str, list[str]]] = {}

        for kind in SensitiveRecordKind:
            for record_id, fields in await self._records.list_sensitive_fields(kind):
                values = {
                    name: self._cipher.encrypt_field(value)
                    for name, value in fields.items()
                    if value and not self._cipher.is_encrypted(value)
                }
                if not values:
                    summary.skipped += 1
                    continue
                if not dry_run:
                    await self._records.update_fields(kind, record_id, values)
                summary.migrated += 1
                migrated.setdefault(kind, {})[record_id] = list(values)
                summary.details.append(f"{kind} {record_id}: {', '.join(values)}")

        logger.info(
            "Incident/comment migration: migrated=%d skipped=%d dry_run=%s",
            summary.migrated,
            summary.skipped,
            dry_run,
        )
        if not dry_run and migrated:
            await self._verify(migrated, summary)
        return summary

    async def _verify(
        self,
        migrated: dict[SensitiveRecordKind, dict[str, list[str]]],
        summary: MigrationSummary,
    ) -> None:
        failures = 0
        for kind, records in migrated.items():
            for record_id, fields in await self._records.list_sensitive_fields(kind):
                for name in records.get(record_id, ()):
                    try:
                        self._cipher.decrypt_strict(fields[name] or "")
                    except DomainError:
                        logger.error("Verification failed for %s %s.%s", kind, record_id, name)
                        failures += 1
                    else:
                        summary.verified += 1

        if failures:
            raise InvalidStateError(
                f"{failures} fields failed verification", code="migration_verification_failed"
            )
