"""Layer-completion policy.

The same two functions are applied by the session state machine to the
authoritative probe log and by the background analyzer to its own belief
accumulator. The two inputs may disagree transiently.
"""

from __future__ import annotations

import typing as t

from viva.model import LAYER_ORDER, ProbeLayer

WEAK_SCORE: t.Final[int] = 2
STRONG_SCORE: t.Final[int] = 4
DECISIVE_PROBES: t.Final[int] = 2


def is_layer_complete(layers: t.Iterable[ProbeLayer], scores: t.Iterable[int]) -> bool:
    """Whether a vertex has been probed enough to move on.

    True once every layer has been probed, or once two probes agree the
    vertex is a gap (score <= 2) or a strength (score >= 4).
    """
    if set(LAYER_ORDER) <= set(layers):
        return True
    scores = list(scores)
    if sum(1 for s in scores if s <= WEAK_SCORE) >= DECISIVE_PROBES:
        return True
    return sum(1 for s in scores if s >= STRONG_SCORE) >= DECISIVE_PROBES


def next_unprobed_layer(layers: t.Iterable[ProbeLayer]) -> ProbeLayer | None:
    probed = set(layers)
    for layer in LAYER_ORDER:
        if layer not in probed:
            return layer
    return None
