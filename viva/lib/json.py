"""JSON encoding for the values that flow through exam state and reports."""

from __future__ import annotations

import datetime
import enum
import json as pyjson
import typing as t

import pydantic as p
import uuid_utils

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


class JSONEncoder(pyjson.JSONEncoder):
    """Encoder that understands models, enums, timestamps, UUIDs and sets."""

    def default(self, o: t.Any) -> JSONValue:
        if isinstance(o, p.BaseModel):
            return o.model_dump(mode="json")
        if isinstance(o, enum.Enum):
            return o.value
        if isinstance(o, datetime.timedelta):
            return o.total_seconds()
        if isinstance(o, (datetime.datetime, datetime.date)):
            return o.isoformat()
        if isinstance(o, uuid_utils.UUID):
            return str(o)
        if isinstance(o, (set, frozenset)):
            return list(t.cast(t.Iterable[JSONValue], o))
        return super().default(o)


def dumps(obj: t.Any, *, indent: int | str | None = None, sort_keys: bool = False, **kw: t.Any) -> str:
    kw.setdefault("cls", JSONEncoder)
    return pyjson.dumps(obj, ensure_ascii=False, indent=indent, sort_keys=sort_keys, **kw)


def jsonable(obj: t.Any) -> JSONValue:
    """Reduce ``obj`` to plain JSON types (dicts, lists, strings, numbers)."""
    return pyjson.loads(dumps(obj))
