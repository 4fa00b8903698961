__all__ = [
    "CATALOG",
    "DOMAINS",
    "ExamError",
    "ExamSession",
    "InvalidBodyError",
    "InvalidProbeError",
    "analytics",
    "build_queue",
    "build_report",
    "classify",
    "get_definition",
    "is_layer_complete",
    "next_unprobed_layer",
    "parse_body",
    "validate_layer",
    "validate_score",
]

from . import analytics
from .catalog import CATALOG, DOMAINS, get_definition
from .errors import ExamError, InvalidBodyError, InvalidProbeError
from .policy import is_layer_complete, next_unprobed_layer
from .quadrant import classify
from .queue import build_queue, parse_body
from .report import build_report
from .session import ExamSession, validate_layer, validate_score
