"""Incident and comment rows, reduced to their encrypted-at-rest columns."""

from sqlalchemy import Table, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from conducky.domain.settings.port.record_repository import (
    SensitiveRecordKind,
    SensitiveRecordRepository,
)
from conducky.infrastructure.encryption.records import (
    COMMENT_SENSITIVE_FIELDS,
    INCIDENT_SENSITIVE_FIELDS,
)
from conducky.infrastructure.persistence.tables import (
    incident_comments_table,
    incidents_table,
)

_TABLES: dict[SensitiveRecordKind, tuple[Table, tuple[str, ...]]] = {
    SensitiveRecordKind.INCIDENT: (incidents_table, INCIDENT_SENSITIVE_FIELDS),
    SensitiveRecordKind.COMMENT: (incident_comments_table, COMMENT_SENSITIVE_FIELDS),
}


class SqlSensitiveRecordRepository(SensitiveRecordRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_sensitive_fields(
        self, kind: SensitiveRecordKind
    ) -> list[tuple[str, dict[str, str | None]]]:
        table, fields = _TABLES[kind]
        stmt = select(table.c.id, *(table.c[name] for name in fields)).order_by(table.c.id)
        result = await self.session.execute(stmt)
        return [
            (row["id"], {name: row[name] for name in fields})
            for row in result.mappings().all()
        ]

    async def update_fields(
        self, kind: SensitiveRecordKind, record_id: str, values: dict[str, str]
    ) -> None:
        table, fields = _TABLES[kind]
        unknown = set(values) - set(fields)
        if unknown:
            raise ValueError(f"Not sensitive {kind} fields: {sorted(unknown)}")
        await self.session.execute(update(table).where(table.c.id == record_id).values(**values))
        await self.session.flush()
