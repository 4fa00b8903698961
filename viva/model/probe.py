from __future__ import annotations

import datetime

import pydantic as p

from .base import ValueModel
from .exam import ProbeLayer, Quadrant


class ProbeResult(ValueModel):
    """One entry of the append-only probe log."""

    vertex: str
    layer: ProbeLayer
    level: int = p.Field(ge=1, le=5)
    score: int = p.Field(ge=1, le=5)
    confident: bool
    answer_summary: str = ""
    quadrant: Quadrant
    timestamp: datetime.datetime
