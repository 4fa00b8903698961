"""Structured verdict requested from the model for one probe."""

from __future__ import annotations

import pydantic as p


class DeepVerdict(p.BaseModel):
    """Recalibrated assessment of a student's answer in light of the full layer history."""

    adjusted_score: float = p.Field(
        allow_inf_nan=False,
        description=(
            "Recalibrated score from 1 to 5 considering every layer probed so far. A student who "
            "scores 4 on recall but 2 on mechanism has surface knowledge only."
        )
    )
    adjusted_confidence: bool = p.Field(
        description="Whether the student's expressed confidence is warranted by their actual accuracy"
    )
    misconceptions: list[str] = p.Field(
        default_factory=list,
        description="Specific factual errors or misconceptions detected in the answer",
    )
    depth_reached: str = p.Field(
        default="surface",
        description='How deep the understanding goes: one of "surface", "mechanism", "application", "integration"',
    )
    follow_up_angles: list[str] = p.Field(
        default_factory=list,
        description="Two or three short voice-friendly questions (under 15 words each) probing from a new angle",
    )
    reasoning: str = p.Field(default="", description="Brief explanation of the assessment, two or three sentences")
