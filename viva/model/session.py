from __future__ import annotations

import datetime

import pydantic as p

from .base import ValueModel
from .exam import Phase, TargetBody
from .id import ExamSessionID, new_session_id
from .probe import ProbeResult
from .vertex import VertexState


class SessionState(ValueModel):
    """Authoritative record of one examination session.

    Every transition of the session state machine produces a new instance;
    nothing holds a reference that could observe a half-applied update.
    """

    session_id: ExamSessionID = p.Field(default_factory=new_session_id)
    phase: Phase = Phase.Idle
    body: TargetBody = TargetBody.Both
    domains: tuple[str, ...] = ()
    depth: str = ""
    queue: tuple[str, ...] = ()
    current_index: int = p.Field(default=0, ge=0)
    vertices: dict[str, VertexState] = p.Field(default_factory=dict)
    probe_log: tuple[ProbeResult, ...] = ()
    started_at: datetime.datetime | None = None

    @property
    def current_vertex(self) -> str | None:
        if self.current_index < len(self.queue):
            return self.queue[self.current_index]
        return None


class SessionSummary(ValueModel):
    total_vertices: int
    probed: int
    gaps: int
    strengths: int
    hypercorrection_targets: int
    filled: int
    corrected: int
    mean_score: float
    phase: Phase
