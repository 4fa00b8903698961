"""Enumerations shared by the session state machine and the analyzer."""

from __future__ import annotations

import enum
import typing as t


class Phase(enum.Enum):
    """Interview phase.

    ``Idle`` before a session starts; ``Probe`` while walking the vertex
    queue; ``Fill`` once the queue is exhausted. ``Dig``, ``Hypercorrect``
    and ``Retest`` are entered only on request.
    """

    Idle = "idle"
    Probe = "probe"
    Dig = "dig"
    Fill = "fill"
    Hypercorrect = "hypercorrect"
    Retest = "retest"


class Quadrant(enum.Enum):
    """Correctness x confidence classification of an answer."""

    Solid = "SOLID"
    Underconfident = "UNDERCONFIDENT"
    Gap = "GAP"
    HypercorrectionTarget = "HYPERCORRECTION_TARGET"


class ProbeLayer(enum.Enum):
    """Angle from which a vertex is probed."""

    Recall = "recall"
    Mechanism = "mechanism"
    Clinical = "clinical"
    Quantitative = "quantitative"

    @property
    def description(self) -> str:
        return LAYER_DESCRIPTIONS[self]


class DepthReached(enum.Enum):
    Surface = "surface"
    Mechanism = "mechanism"
    Application = "application"
    Integration = "integration"


class TargetBody(enum.Enum):
    """Credentialing body whose weighting orders the vertex queue."""

    ANZCA = "ANZCA"
    CICM = "CICM"
    Both = "Both"


LAYER_ORDER: t.Final[tuple[ProbeLayer, ...]] = (
    ProbeLayer.Recall,
    ProbeLayer.Mechanism,
    ProbeLayer.Clinical,
    ProbeLayer.Quantitative,
)

LAYER_DESCRIPTIONS: t.Final[dict[ProbeLayer, str]] = {
    ProbeLayer.Recall: "Basic factual recall: definitions, equations, names",
    ProbeLayer.Mechanism: "Mechanistic understanding: why, how, cause-effect",
    ProbeLayer.Clinical: "Clinical application: when, where, clinical scenarios",
    ProbeLayer.Quantitative: "Quantitative reasoning: calculations, values, ranges",
}

# spoken hint for the kind of question that suits each layer
LAYER_QUESTION_HINTS: t.Final[dict[ProbeLayer, str]] = {
    ProbeLayer.Recall: "definitions or equations",
    ProbeLayer.Mechanism: "why or how it works",
    ProbeLayer.Clinical: "a clinical scenario",
    ProbeLayer.Quantitative: "specific numbers or calculations",
}

MIN_SCORE: t.Final[int] = 1
MAX_SCORE: t.Final[int] = 5
