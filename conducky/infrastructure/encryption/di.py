from dishka import provide

from conducky.config import Config
from conducky.domain.settings.port.cipher import FieldCipher
from conducky.infrastructure.encryption.codec import FieldEncryptor
from conducky.util.di.base import Provider
from conducky.util.di.scope import Scope


class EncryptionProvider(Provider):
    @provide(scope=Scope.APP)
    def get_field_encryptor(self, config: Config) -> FieldEncryptor:
        return FieldEncryptor.from_config(config)

    @provide(scope=Scope.APP)
    def get_field_cipher(self, encryptor: FieldEncryptor) -> FieldCipher:
        return encryptor
