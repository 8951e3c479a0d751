"""SystemSetting: one named JSON document in the settings store."""

import json
from typing import Any

from conducky.domain.shared.error import ValidationError
from conducky.domain.shared.model.entity import Entity


class SystemSetting(Entity):
    key: str
    value: str  # JSON-encoded section

    def parse(self) -> dict[str, Any]:
        try:
            data = json.loads(self.value)
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Setting {self.key!r} is not valid JSON", field=self.key, code="invalid_setting"
            ) from e
        if not isinstance(data, dict):
            raise ValidationError(
                f"Setting {self.key!r} is not a JSON object", field=self.key, code="invalid_setting"
            )
        return data

    @classmethod
    def from_section(cls, key: str, data: dict[str, Any]) -> "SystemSetting":
        return cls(key=key, value=json.dumps(data))
