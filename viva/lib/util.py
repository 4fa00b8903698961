import decimal
import typing as t
from collections.abc import Mapping

KT = t.TypeVar("KT")
VT = t.TypeVar("VT")
RecursiveMapping = VT | Mapping[KT, "RecursiveMapping[KT, VT]"]


def deep_update(
    d1: dict[KT, RecursiveMapping[KT, VT]], d2: Mapping[KT, RecursiveMapping[KT, VT]]
) -> dict[KT, RecursiveMapping[KT, VT]]:
    result = d1.copy()
    for k, v in d2.items():
        if isinstance(v, Mapping) and k in result and isinstance(result[k], Mapping):
            result[k] = deep_update(result[k], v)  # type: ignore
        else:
            result[k] = v
    return result


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a person would: 2.25 -> 2.3, not banker's rounding."""
    exp = decimal.Decimal(1).scaleb(-places)
    return float(decimal.Decimal(str(value)).quantize(exp, rounding=decimal.ROUND_HALF_UP))


def dedupe(items: t.Iterable[str]) -> tuple[str, ...]:
    """Drop blanks and repeats, keeping first-seen order."""
    return tuple(dict.fromkeys(s.strip() for s in items if s and s.strip()))
