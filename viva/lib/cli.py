from __future__ import annotations

import enum
import pathlib
import typing as t

import click
import pydantic as p
from click import *  # noqa: F401, F403 # pyright: ignore [reportWildcardImportFromLibrary]

# Commands import this module as `viva.lib.cli as click`, getting the stock
# click API together with the parameter types below.

E = t.TypeVar("E", bound=enum.Enum)


class EnumType(click.ParamType, t.Generic[E]):
    """Parameter whose value is a member of ``enum``, given by value."""

    def __init__(self, enum: type[E], case_sensitive: bool = True):
        self.enum = enum
        self.case_sensitive = case_sensitive
        self.name = enum.__name__

    def get_metavar(self, param: click.Parameter, *args: t.Any) -> str:
        return "[" + "|".join(str(m.value) for m in self.enum) + "]"

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> E:
        if isinstance(value, self.enum):
            return value
        wanted = str(value) if self.case_sensitive else str(value).casefold()
        for member in self.enum:
            candidate = str(member.value) if self.case_sensitive else str(member.value).casefold()
            if candidate == wanted:
                return member
        self.fail(f"{value!r} is not one of {', '.join(str(m.value) for m in self.enum)}", param, ctx)


class DirectoryURLType(click.ParamType):
    """Parameter naming an existing local directory, as a path or ``file://`` URL.

    The value is converted to an absolute ``file://`` URL.
    """

    name = "DIRECTORY"

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> p.FileUrl:
        if isinstance(value, p.FileUrl):
            return value
        text = str(value)
        if "://" in text:
            url = p.AnyUrl(text)
            if url.scheme != "file" or url.path is None:
                self.fail(f"{text}: only file:// URLs are supported", param, ctx)
            path = pathlib.Path(url.path)
        else:
            path = pathlib.Path(text)
        if not path.is_dir():
            self.fail(f"{text}: no such directory", param, ctx)
        return p.FileUrl(f"file://{path.absolute()}")
