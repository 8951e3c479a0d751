from dishka import AsyncContainer, make_async_container

from conducky.config import Config
from conducky.domain.auth.util.di import AuthProvider
from conducky.domain.settings.util.di import SettingsProvider
from conducky.infrastructure.encryption.di import EncryptionProvider
from conducky.infrastructure.persistence import PersistenceProvider
from conducky.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        PersistenceProvider(),
        EncryptionProvider(),
        AuthProvider(),
        SettingsProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
