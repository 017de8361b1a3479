"""
Robust Scorer Service - Median/MAD z-scores, thresholding and persistence.

robust_z = 0.6745 * (residual - median) / MAD

The 0.6745 factor makes MAD a consistent estimator of the standard deviation
for normally distributed residuals, so the threshold reads like a z-score.
"""

import logging
from collections.abc import Iterable

import numpy as np
import pandas as pd

from finanomaly.core.domain.config import ScoringConfig
from finanomaly.core.domain.errors import EmptyInputError
from finanomaly.core.domain.result import AnomalyRecord, DecompositionResult

logger = logging.getLogger(__name__)

MAD_CONSISTENCY = 0.6745


def robust_zscore(residuals: np.ndarray, epsilon: float = 1e-9) -> np.ndarray:
    """
    Compute robust z-scores using median and MAD.

    A MAD of exactly zero (more than half the residuals identical) is replaced
    by `epsilon`, so the scores stay finite instead of becoming NaN/inf.
    """
    residuals = np.asarray(residuals, dtype=float)
    median = np.median(residuals)
    mad = np.median(np.abs(residuals - median))
    if mad == 0:
        logger.warning(f"MAD is zero over {len(residuals)} residuals, using epsilon={epsilon}")
        mad = epsilon
    return MAD_CONSISTENCY * (residuals - median) / mad


def dynamic_threshold(scores: np.ndarray, config: ScoringConfig) -> float:
    """Threshold widened by the spread of the scores: clamp(base + IQR, floor, ceiling)."""
    q75, q25 = np.percentile(scores, [75, 25])
    return float(min(config.dynamic_ceiling, max(config.dynamic_floor, config.dynamic_base + (q75 - q25))))


def resolve_threshold(scores: np.ndarray, config: ScoringConfig) -> float:
    if config.dynamic_threshold:
        return dynamic_threshold(scores, config)
    return config.threshold


def confirm_persistence(flags: np.ndarray, persistence: int) -> np.ndarray:
    """
    Mark periods that close a run of at least `persistence` consecutive flags.

    Earlier periods of the run keep their raw flag but are not confirmed.
    """
    confirmed = np.zeros(len(flags), dtype=bool)
    run = 0
    for i, flagged in enumerate(flags):
        run = run + 1 if flagged else 0
        confirmed[i] = run >= persistence
    return confirmed


def score(
    residuals: DecompositionResult | pd.Series | Iterable[float],
    config: ScoringConfig | None = None,
) -> list[AnomalyRecord]:
    """
    Score residuals and flag anomalies.

    Args:
        residuals: A DecompositionResult (records carry value and expected), or a
            bare residual sequence (value = residual, expected = 0)
        config: Threshold, persistence and MAD fallback settings

    Returns:
        One AnomalyRecord per residual, in input order

    Raises:
        EmptyInputError: no residuals supplied
    """
    records, _ = score_with_threshold(residuals, config)
    return records


def score_with_threshold(
    residuals: DecompositionResult | pd.Series | Iterable[float],
    config: ScoringConfig | None = None,
) -> tuple[list[AnomalyRecord], float]:
    """Same as `score`, also returning the threshold the flags were cut at."""
    config = config or ScoringConfig()

    if isinstance(residuals, DecompositionResult):
        resid = residuals.residual
        values = residuals.observed
        expected = residuals.expected
    else:
        if isinstance(residuals, pd.Series):
            resid = residuals.astype(float)
        else:
            resid = pd.Series(list(residuals), dtype=float)
        values = resid
        expected = pd.Series(0.0, index=resid.index)

    if len(resid) == 0:
        raise EmptyInputError("No residuals to score")
    if not np.isfinite(resid.to_numpy()).all():
        raise ValueError("Residuals must be finite")

    z = robust_zscore(resid.to_numpy(), config.mad_epsilon)
    threshold = resolve_threshold(z, config)
    flags = np.abs(z) > threshold
    confirmed = confirm_persistence(flags, config.persistence)

    logger.debug(
        f"Scored {len(z)} residuals: {int(flags.sum())} flagged, "
        f"{int(confirmed.sum())} confirmed (threshold={threshold:.2f})"
    )

    records = [
        AnomalyRecord(
            timestamp=ts,
            value=float(value),
            expected=float(exp),
            residual=float(r),
            robust_z=float(zi),
            is_anomaly=bool(flag),
            is_confirmed=bool(conf),
        )
        for ts, value, exp, r, zi, flag, conf in zip(
            resid.index, values, expected, resid, z, flags, confirmed
        )
    ]
    return records, threshold
