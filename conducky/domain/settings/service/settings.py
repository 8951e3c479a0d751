"""SettingsService: configuration sections with encrypted secret sub-fields."""

import logging
from typing import Any

from conducky.domain.settings.model.setting import SystemSetting
from conducky.domain.settings.port.cipher import FieldCipher
from conducky.domain.settings.port.repository import SettingsRepository
from conducky.domain.shared.error import NotFoundError
from conducky.domain.shared.service import Service

logger = logging.getLogger(__name__)

# Settings keys holding secrets, and the sub-fields that are secret
SECRET_FIELDS: dict[str, tuple[str, ...]] = {
    "email": ("smtpPassword",),
    "googleOAuth": ("clientSecret",),
    "githubOAuth": ("clientSecret",),
}


class SettingsService(Service):
    _settings: SettingsRepository
    _cipher: FieldCipher

    async def get_section(self, key: str) -> dict[str, Any]:
        """Load a section with its secret sub-fields decrypted."""
        setting = await self._settings.get(key)
        if setting is None:
            raise NotFoundError(f"Setting not found: {key}", code="setting_not_found")

        data = setting.parse()
        for name in SECRET_FIELDS.get(key, ()):
            value = data.get(name)
            if isinstance(value, str):
                data[name] = self._cipher.decrypt_field(value)
        return data

    async def save_section(self, key: str, data: dict[str, Any]) -> None:
        """Store a section, encrypting secret sub-fields that are still plaintext."""
        stored = dict(data)
        encrypted = []
        for name in SECRET_FIELDS.get(key, ()):
            value = stored.get(name)
            if isinstance(value, str) and value and not self._cipher.is_sealed(value):
                stored[name] = self._cipher.encrypt_field(value)
                encrypted.append(name)

        await self._settings.upsert(SystemSetting.from_section(key, stored))
        logger.info("Saved setting %s (encrypted fields: %s)", key, encrypted or "none")
