import typing as t

from viva.lib.json import JSONEncoder as BaseJSONEncoder
from viva.lib.json import JSONValue


class JSONEncoder(BaseJSONEncoder):
    """Encoder for log payloads; never fails, falls back to ``repr``."""

    def default(self, o: t.Any) -> JSONValue:
        try:
            return super().default(o)
        except TypeError:
            return repr(o)
