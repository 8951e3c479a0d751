"""Settings domain ports."""

from .cipher import FieldCipher
from .event_repository import EventContactRepository
from .repository import SettingsRepository

__all__ = ["EventContactRepository", "FieldCipher", "SettingsRepository"]
