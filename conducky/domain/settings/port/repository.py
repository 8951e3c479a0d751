"""Repository port for the system settings store."""

from abc import abstractmethod
from typing import Protocol

from conducky.domain.settings.model.setting import SystemSetting
from conducky.domain.shared.port import Port


class SettingsRepository(Port, Protocol):
    @abstractmethod
    async def get(self, key: str) -> SystemSetting | None:
        """Get a setting by key."""
        ...

    @abstractmethod
    async def list_keys(self) -> list[str]:
        ...

    @abstractmethod
    async def upsert(self, setting: SystemSetting) -> None:
        """Insert or replace the setting stored under setting.key."""
        ...
