__all__ = [
    # Base
    "BaseModel",
    "ValueModel",
    # Enums
    "DeploymentEnvironment",
    "DepthReached",
    "Phase",
    "ProbeLayer",
    "Quadrant",
    "TargetBody",
    "LAYER_DESCRIPTIONS",
    "LAYER_ORDER",
    "LAYER_QUESTION_HINTS",
    "MAX_SCORE",
    "MIN_SCORE",
    # ID Types
    "ExamSessionID",
    "new_session_id",
    # Vertices
    "VertexDefinition",
    "VertexState",
    # Probes
    "ProbeResult",
    # Session
    "SessionState",
    "SessionSummary",
    # Beliefs
    "BeliefState",
    "LayerProbe",
    "ProbeAnalysis",
    "VertexBelief",
    # Report
    "GapEntry",
    "HypercorrectionEntry",
    "StrengthEntry",
    "StudyReport",
]

from .base import BaseModel, ValueModel
from .belief import BeliefState, LayerProbe, ProbeAnalysis, VertexBelief
from .enum import DeploymentEnvironment
from .exam import DepthReached, LAYER_DESCRIPTIONS, LAYER_ORDER, LAYER_QUESTION_HINTS, MAX_SCORE, MIN_SCORE, Phase, \
    ProbeLayer, Quadrant, TargetBody
from .id import ExamSessionID, new_session_id
from .probe import ProbeResult
from .report import GapEntry, HypercorrectionEntry, StrengthEntry, StudyReport
from .session import SessionState, SessionSummary
from .vertex import VertexDefinition, VertexState
