import typing as t

import pydantic as p


class BaseModel(p.BaseModel):
    """Root of every viva model.

    Dumps use field aliases unless the caller asks otherwise, so documents
    such as the logging ``dictConfig`` round-trip with keys like ``()`` and
    ``class`` intact.
    """

    def model_dump(self, *, by_alias: bool | None = True, **kwargs: t.Any) -> dict[str, t.Any]:  # pyright: ignore [reportIncompatibleMethodOverride]
        return super().model_dump(by_alias=by_alias, **kwargs)


class ValueModel(BaseModel):
    """Immutable value; transitions build a new instance with ``model_copy``."""

    model_config = p.ConfigDict(frozen=True)
