"""
Profile Domain Model - Named detection settings for one financial metric.

Uses Pydantic for validation and YAML round-tripping.
"""

from typing import Literal

from pydantic import BaseModel, Field

from finanomaly.core.domain.config import DecompositionConfig, ScoringConfig


class DetectionProfile(BaseModel):
    """
    How a metric is prepared and scored, e.g. monthly revenue with a yearly cycle.
    """

    # --- Identity ---
    name: str
    description: str = ""

    # --- Preparation ---
    frequency: str | None = None  # pandas alias ("MS", "D"); None skips gap filling
    fill_policy: Literal["carry", "interpolate", "zero"] = "carry"

    # --- Detection ---
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    decomposition: DecompositionConfig = Field(default_factory=DecompositionConfig)
