"""
Detection Service - Decompose a series, score its residuals, assemble the report.

Flow:
1. Decompose into trend + seasonal + residual
2. Robust-score the residuals
3. Return records alongside the decomposition for persistence/alerting/dashboards
"""

import logging
from dataclasses import dataclass

import pandas as pd

from finanomaly.core.domain.config import DecompositionConfig, ScoringConfig
from finanomaly.core.domain.profile import DetectionProfile
from finanomaly.core.domain.result import AnomalyRecord, DecompositionResult
from finanomaly.core.domain.series import TimeSeries
from finanomaly.core.ports.profile_store import ProfileStore
from finanomaly.core.services.decomposer import decompose
from finanomaly.core.services.preparation import fill_gaps, series_from_frame
from finanomaly.core.services.scorer import score_with_threshold

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionReport:
    """Outcome of one detection run."""

    decomposition: DecompositionResult
    records: list[AnomalyRecord]
    threshold_used: float

    def anomalies(self) -> list[AnomalyRecord]:
        """Records whose raw flag is set."""
        return [r for r in self.records if r.is_anomaly]

    def confirmed(self) -> list[AnomalyRecord]:
        """Records that satisfied the persistence rule (alertable)."""
        return [r for r in self.records if r.is_confirmed]

    def to_frame(self) -> pd.DataFrame:
        frame = self.decomposition.to_frame().reset_index()
        frame["robust_z"] = [r.robust_z for r in self.records]
        frame["is_anomaly"] = [r.is_anomaly for r in self.records]
        frame["is_confirmed"] = [r.is_confirmed for r in self.records]
        return frame[[
            "ds", "value", "trend", "seasonal", "expected", "residual",
            "robust_z", "is_anomaly", "is_confirmed",
        ]]


class DetectionService:
    """
    Runs decomposition and scoring with a fixed pair of configs.

    A service built from a profile also knows how to prepare raw frames
    (gap-filling frequency and policy) for that metric.
    """

    def __init__(
        self,
        scoring: ScoringConfig | None = None,
        decomposition: DecompositionConfig | None = None,
        profile: DetectionProfile | None = None,
    ):
        """
        Args:
            scoring: Period, threshold and persistence
            decomposition: Robust mode, passes and trend window
            profile: Metric profile used by `run_frame` to prepare frames
        """
        self.scoring = scoring or ScoringConfig()
        self.decomposition = decomposition or DecompositionConfig()
        self.profile = profile

    @classmethod
    def from_profile(cls, profile: DetectionProfile) -> "DetectionService":
        return cls(scoring=profile.scoring, decomposition=profile.decomposition, profile=profile)

    @classmethod
    def for_metric(cls, name: str, store: ProfileStore) -> "DetectionService":
        """
        Build a service from the stored profile of a metric.

        Raises:
            KeyError: no profile with that name in the store
        """
        profile = store.get_profile(name)
        if profile is None:
            raise KeyError(f"No detection profile named '{name}'")
        return cls.from_profile(profile)

    def run(self, series: TimeSeries | pd.Series) -> DetectionReport:
        result = decompose(series, self.scoring.period, self.decomposition)
        records, threshold = score_with_threshold(result, self.scoring)

        report = DetectionReport(decomposition=result, records=records, threshold_used=threshold)
        name = series.name if isinstance(series, TimeSeries) else series.name or "y"
        logger.info(
            f"Detection for '{name}': {len(records)} periods, "
            f"{len(report.anomalies())} flagged, {len(report.confirmed())} confirmed"
        )
        return report

    def run_frame(self, df: pd.DataFrame) -> DetectionReport:
        """
        Prepare a ['ds', 'y'] frame according to the service's profile, then detect.

        Without a profile the frame is only sorted, not gap-filled.
        """
        name = self.profile.name if self.profile else None
        series = series_from_frame(df, name=name)
        if self.profile and self.profile.frequency:
            series = fill_gaps(series, self.profile.frequency, self.profile.fill_policy)
        return self.run(series)


def detect(
    series: TimeSeries | pd.Series,
    config: ScoringConfig | None = None,
    decomposition: DecompositionConfig | None = None,
) -> DetectionReport:
    """Decompose and score in one call."""
    return DetectionService(config, decomposition).run(series)
