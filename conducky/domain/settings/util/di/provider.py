"""DI provider for the settings domain."""

from dishka import provide

from conducky.domain.settings.service.migration import (
    EncryptionMigration,
    EventContactMigration,
    IncidentCommentMigration,
)
from conducky.domain.settings.service.settings import SettingsService
from conducky.util.di.base import Provider
from conducky.util.di.scope import Scope


class SettingsProvider(Provider):
    settings_service = provide(SettingsService, scope=Scope.UOW)
    encryption_migration = provide(EncryptionMigration, scope=Scope.UOW)
    event_contact_migration = provide(EventContactMigration, scope=Scope.UOW)
    incident_comment_migration = provide(IncidentCommentMigration, scope=Scope.UOW)
