"""Settings domain models."""

from .setting import SystemSetting

__all__ = ["SystemSetting"]
