"""
Result Domain Models - Data structures for decomposition and anomaly results.
"""

from dataclasses import dataclass
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class DecompositionResult:
    """Additive split of a series: observed = trend + seasonal + residual."""

    observed: pd.Series
    trend: pd.Series
    seasonal: pd.Series
    residual: pd.Series
    period: int

    @property
    def expected(self) -> pd.Series:
        """Trend plus seasonal, the value the model would have predicted."""
        return self.trend + self.seasonal

    def __len__(self) -> int:
        return len(self.observed)

    def to_frame(self) -> pd.DataFrame:
        frame = pd.DataFrame({
            "value": self.observed,
            "trend": self.trend,
            "seasonal": self.seasonal,
            "expected": self.expected,
            "residual": self.residual,
        })
        return frame.rename_axis("ds")


@dataclass(frozen=True)
class AnomalyRecord:
    """Score and flags for a single period."""

    timestamp: Any
    value: float
    expected: float
    residual: float
    robust_z: float
    is_anomaly: bool = False  # raw flag: |robust_z| > threshold
    is_confirmed: bool = False  # raw flag held for `persistence` consecutive periods
