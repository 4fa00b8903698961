"""Slow-path belief model.

The background analyzer accumulates one ``VertexBelief`` per vertex from every
probe it is asked to analyze. Beliefs are advisory: they may lag behind or
disagree with the session's own ``VertexState`` and are never used to drive
session progression.
"""

from __future__ import annotations

import datetime

import pydantic as p

from .base import BaseModel, ValueModel
from .exam import DepthReached, ProbeLayer, Quadrant
from .id import ExamSessionID, new_session_id


class LayerProbe(ValueModel):
    layer: ProbeLayer
    question: str = ""
    answer_summary: str = ""
    score: int = p.Field(ge=1, le=5)
    confident: bool
    timestamp: datetime.datetime


class VertexBelief(ValueModel):
    layers: tuple[LayerProbe, ...] = ()
    overall_strength: float = 0.0
    confidence_calibration: float = 1.0
    known_misconceptions: tuple[str, ...] = ()

    @property
    def probed_layers(self) -> tuple[ProbeLayer, ...]:
        seen: list[ProbeLayer] = []
        for lp in self.layers:
            if lp.layer not in seen:
                seen.append(lp.layer)
        return tuple(seen)

    @property
    def scores(self) -> tuple[int, ...]:
        return tuple(lp.score for lp in self.layers)


class BeliefState(BaseModel):
    """Mutable container of per-vertex beliefs for one session.

    The mapping is replaced entry by entry under the analyzer's per-vertex
    locks; each ``VertexBelief`` itself is immutable.
    """

    session_id: ExamSessionID = p.Field(default_factory=new_session_id)
    vertex_beliefs: dict[str, VertexBelief] = p.Field(default_factory=dict)
    # recomputed by the analyzer after every belief update
    session_insights: list[str] = p.Field(default_factory=list)


class ProbeAnalysis(ValueModel):
    """Outcome of analyzing one probe on the slow path."""

    session_id: ExamSessionID
    vertex: str
    adjusted_score: int = p.Field(ge=1, le=5)
    adjusted_confidence: bool
    quadrant: Quadrant
    reasoning: str = ""
    follow_up_angles: tuple[str, ...] = ()
    misconceptions: tuple[str, ...] = ()
    depth_reached: DepthReached = DepthReached.Surface
    suggested_next_layer: ProbeLayer | None = None
    fallback: bool = False
