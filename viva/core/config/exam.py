"""Examination defaults and slow-path tuning."""

from __future__ import annotations

import pydantic as p

from viva.model import TargetBody

from .base import BaseSettings


class AnalysisSettings(BaseSettings):
    """Background analyzer settings."""

    enabled: bool = True
    # upper bound on one deep-analysis model call before falling back
    timeout_seconds: float = p.Field(default=30.0, gt=0)


class ExamSettings(BaseSettings):
    default_body: TargetBody = TargetBody.Both
    default_depth: str = "Broad BFS"
    analysis: AnalysisSettings = AnalysisSettings()
