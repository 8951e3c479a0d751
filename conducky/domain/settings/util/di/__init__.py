from conducky.domain.settings.util.di.provider import SettingsProvider

__all__ = ["SettingsProvider"]
