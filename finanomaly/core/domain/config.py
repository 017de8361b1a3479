"""
Scoring Domain Model - Parameters for decomposition and robust scoring.

Uses Pydantic for validation. Both models are frozen so a config value can be
shared between runs without being mutated.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DecompositionConfig(BaseModel):
    """Tuning knobs for the seasonal-trend decomposition."""

    model_config = ConfigDict(frozen=True)

    robust: bool = True  # seed with a rolling median and re-weight by residual size
    passes: int = Field(default=2, ge=1, description="Trend/seasonal re-estimation passes")
    trend_window: int | None = Field(
        default=None,
        description="Odd trend window; None derives it from the period",
    )

    @field_validator("trend_window")
    @classmethod
    def _odd_window(cls, value: int | None) -> int | None:
        if value is not None and (value < 3 or value % 2 == 0):
            raise ValueError("trend_window must be an odd integer >= 3")
        return value


class ScoringConfig(BaseModel):
    """Configuration for robust anomaly scoring."""

    model_config = ConfigDict(frozen=True)

    period: int = Field(default=12, ge=2, description="Seasonal cycle length, e.g. 12 for monthly")
    threshold: float = Field(default=3.5, gt=0, description="Cut-off on |robust_z|")
    persistence: int = Field(default=1, ge=1, description="Consecutive flagged periods before confirming")
    mad_epsilon: float = Field(default=1e-9, gt=0, description="Stand-in for a MAD of exactly zero")

    # --- Dynamic threshold: clamp(base + IQR(robust_z), floor, ceiling) ---
    dynamic_threshold: bool = False
    dynamic_base: float = 1.5
    dynamic_floor: float = Field(default=3.0, gt=0)
    dynamic_ceiling: float = Field(default=5.0, gt=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "ScoringConfig":
        if self.dynamic_floor > self.dynamic_ceiling:
            raise ValueError("dynamic_floor must not exceed dynamic_ceiling")
        return self
