"""Field-level encryption for sensitive columns and stored secrets.

Import modules directly:
    from conducky.infrastructure.encryption.codec import FieldEncryptor, is_encrypted
    from conducky.infrastructure.encryption.keys import validate_encryption_key
"""

__all__: list[str] = []
