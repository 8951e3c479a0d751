"""SQL implementation of SettingsRepository."""

from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from conducky.domain.settings.model.setting import SystemSetting
from conducky.domain.settings.port.repository import SettingsRepository
from conducky.infrastructure.persistence.tables import system_settings_table


class SqlSettingsRepository(SettingsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, key: str) -> SystemSetting | None:
        stmt = select(system_settings_table).where(system_settings_table.c.key == key)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return SystemSetting(key=row["key"], value=row["value"]) if row else None

    async def list_keys(self) -> list[str]:
        stmt = select(system_settings_table.c.key).order_by(system_settings_table.c.key)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def upsert(self, setting: SystemSetting) -> None:
        now = datetime.now(UTC)
        stmt = (
            update(system_settings_table)
            .where(system_settings_table.c.key == setting.key)
            .values(value=setting.value, updated_at=now)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            await self.session.execute(
                system_settings_table.insert().values(
                    key=setting.key, value=setting.value, updated_at=now
                )
            )
        await self.session.flush()
