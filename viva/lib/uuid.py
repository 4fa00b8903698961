"""``uuid_utils`` UUIDs that pydantic can validate and serialize."""

from __future__ import annotations

import typing as t

import pydantic as p
import uuid_utils
from pydantic_core import core_schema


class UUID(uuid_utils.UUID):
    if t.TYPE_CHECKING:
        # uuid_utils.UUID doesn't show up as hashable
        def __hash__(self) -> int: ...

    @classmethod
    def coerce(cls, value: t.Any) -> UUID:
        if isinstance(value, cls):
            return value
        if isinstance(value, uuid_utils.UUID):
            return cls(bytes=value.bytes)
        if isinstance(value, str):
            return cls(value)
        raise ValueError(f"expected a UUID string, got {type(value).__name__}")

    @classmethod
    def __get_pydantic_core_schema__(cls, source: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(str, when_used="json"),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: p.GetJsonSchemaHandler
    ) -> p.json_schema.JsonSchemaValue:
        return {"type": "string", "format": "uuid"}


def uuid7() -> UUID:
    """Time-ordered UUID; keys minted later sort later."""
    return UUID(bytes=uuid_utils.uuid7().bytes)
