"""Base model for DTOs exchanged with the hotel REST backend."""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """DTO mirrored from the backend.

    The backend speaks camelCase JSON; Python code uses snake_case names.
    Not strict: dates and datetimes arrive as ISO strings and must be coerced.
    Unknown fields are ignored so backend additions never break rendering.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        """Read an explicit JSON null as the field's default.

        Unset backend strings and collections arrive as null. Required fields
        keep the null and still fail validation.
        """
        if value is not None or info.field_name is None:
            return value
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return value
        return field.get_default(call_default_factory=True)

    def to_payload(self) -> dict:
        """Serialise for a request body: camelCase keys, unset optionals dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
