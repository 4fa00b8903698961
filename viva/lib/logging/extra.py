import logging
import string
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

import viva.lib.json

from .json import JSONEncoder
from .style import LogStyle

# attributes every LogRecord carries, plus the ones formatters add while rendering
_RecordAttributes: t.Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"asctime", "message", "log_color", "taskName"}


def record_extra(record: logging.LogRecord) -> dict[str, t.Any]:
    """The fields passed through ``extra=`` when ``record`` was logged."""
    return {k: v for k, v in vars(record).items() if k not in _RecordAttributes}


class ExtraFormatter(logging.Formatter):
    """Delegate to a base formatter, then append the record's ``extra`` as JSON.

    Continuation lines of a multi-line message are indented to sit under its
    first line. The JSON is highlighted with pygments when ``stream`` is a TTY
    and the base formatter has not been told ``no_color``.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None,
        datefmt: str | None = None,
        indent: bool | None = True,
        pyg_style: type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        stream: t.TextIO | None = None,
        **kwargs: t.Any,
    ):
        if stream is not None:
            kwargs["stream"] = stream
        self.base = base(format, datefmt=datefmt, style=style, **kwargs)
        self.indent = 4 if indent else None
        self.pyg_style = pyg_style
        self.stream = stream

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if "\n" in message:
            self._align_continuation(record, message)

        rendered = self.base.format(record)
        extra = record_extra(record)
        if not extra:
            return rendered

        payload = viva.lib.json.dumps(extra, sort_keys=True, indent=self.indent, cls=JSONEncoder)
        if self.colorize:
            payload = pygments.highlight(payload, JsonLexer(), Terminal256Formatter(style=self.pyg_style))  # pyright: ignore [reportUnknownMemberType]
        return f"{rendered} {payload.strip()}"

    def _align_continuation(self, record: logging.LogRecord, message: str) -> None:
        prefix = self.base.format(record).split(message, 1)[0]
        # escape codes from colored output take no room on screen
        width = sum(1 for c in prefix if c in string.printable)
        first, rest = message.split("\n", 1)
        record.msg = f"{first}\n{textwrap.indent(rest, ' ' * width)}"
        record.args = None

    @property
    def colorize(self) -> bool:
        if getattr(self.base, "no_color", False):
            return False
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)
