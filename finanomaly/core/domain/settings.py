from pydantic import BaseModel, Field

from finanomaly.core.domain.config import DecompositionConfig, ScoringConfig


class SystemSettings(BaseModel):
    """
    Global defaults, used when a caller does not pass its own ScoringConfig.
    """
    default_period: int = Field(default=12, ge=2, description="Seasonal cycle length")
    default_threshold: float = Field(default=3.5, gt=0, description="Robust z cut-off")
    default_persistence: int = Field(default=1, ge=1, description="Consecutive periods to confirm")
    robust: bool = Field(default=True, description="Robust decomposition mode")

    log_level: str = Field(default="INFO", description="Root logging level")

    # YAML Store
    profiles_file: str = Field(default="profiles.yaml", description="Path to detection profiles file")

    def scoring_config(self, period: int | None = None) -> ScoringConfig:
        """Build a ScoringConfig from the defaults, optionally for another period."""
        return ScoringConfig(
            period=period or self.default_period,
            threshold=self.default_threshold,
            persistence=self.default_persistence,
        )

    def decomposition_config(self) -> DecompositionConfig:
        return DecompositionConfig(robust=self.robust)
