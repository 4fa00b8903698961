import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings

from viva.model import BaseModel


class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    """Settings section; ``model_dump`` resolves to the alias-preferring one on ``BaseModel``."""

    def __init__(self, values: t.Mapping[str, t.Any] | None = None, /, **kwargs: t.Any):
        # Configuration.as_() hands over the section as a single positional dict
        super().__init__(**{**(values or {}), **kwargs})
