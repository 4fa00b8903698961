from __future__ import annotations

import datetime

from .base import ValueModel
from .exam import Phase, ProbeLayer, Quadrant, TargetBody
from .id import ExamSessionID
from .probe import ProbeResult
from .session import SessionSummary


class GapEntry(ValueModel):
    name: str
    best_score: int
    quadrant: Quadrant | None
    sub_topics: tuple[str, ...]


class StrengthEntry(ValueModel):
    name: str
    best_score: int


class HypercorrectionEntry(ValueModel):
    name: str
    best_score: int
    description: str
    corrected: bool


class StudyReport(ValueModel):
    """Everything an external writer needs to render a post-session study plan."""

    session_id: ExamSessionID
    body: TargetBody
    domains: tuple[str, ...]
    depth: str
    phase: Phase
    generated_at: datetime.datetime
    duration_minutes: int
    summary: SessionSummary
    gaps: tuple[GapEntry, ...]
    strengths: tuple[StrengthEntry, ...]
    hypercorrection_targets: tuple[HypercorrectionEntry, ...]
    probe_history: tuple[ProbeResult, ...]
    layer_scores: dict[str, dict[ProbeLayer, int]]
    notes: str = ""
