"""
Decomposer Service - Additive seasonal-trend decomposition.

Each pass:
1. Trend = centred weighted line fit of the deseasonalised values, using the
   classical moving-average kernel (a plain moving average away from the edges)
2. Seasonal = weighted mean of the detrended values per position in the cycle,
   centred to zero mean
3. Residual = value - trend - seasonal

Robust mode seeds the weights from a rolling-median trend and re-weights
points by the size of their residual between passes (bisquare weights, as in
STL), so a single spike does not drag the trend or the seasonal pattern.
"""

import logging

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from finanomaly.core.domain.config import DecompositionConfig
from finanomaly.core.domain.errors import InsufficientDataError
from finanomaly.core.domain.result import DecompositionResult
from finanomaly.core.domain.series import TimeSeries

logger = logging.getLogger(__name__)

# Residuals beyond this many median absolute residuals get zero weight
BISQUARE_SCALE = 6.0


def decompose(
    series: TimeSeries | pd.Series,
    period: int,
    config: DecompositionConfig | None = None,
) -> DecompositionResult:
    """
    Split a regular series into trend, seasonal and residual components.

    Args:
        series: Gap-free series, indexed by evenly spaced timestamps
        period: Seasonal cycle length (12 for monthly data with yearly seasonality)
        config: Decomposition tuning; defaults to robust mode with 2 passes

    Returns:
        DecompositionResult where observed == trend + seasonal + residual

    Raises:
        InsufficientDataError: fewer than 2 * period points
        IrregularSeriesError: timestamps unordered, unevenly spaced or values missing
    """
    config = config or DecompositionConfig()
    if period < 2:
        raise ValueError(f"period must be >= 2, got {period}")

    if isinstance(series, TimeSeries):
        ts = series
    else:
        ts = TimeSeries(series, name=str(series.name or "y"))
    if len(ts) < 2 * period:
        raise InsufficientDataError(len(ts), period)
    ts.validate()

    values = ts.values.to_numpy()
    kernel = _trend_kernel(period, config.trend_window)
    positions = np.arange(len(values)) % period

    weights = np.ones(len(values))
    seasonal = np.zeros(len(values))
    if config.robust:
        seed = ts.values.rolling(len(kernel), center=True, min_periods=1).median().to_numpy()
        weights = _bisquare_weights(values - seed)

    for n in range(config.passes):
        trend = _weighted_trend(values - seasonal, weights, kernel)
        seasonal = _seasonal_pattern(values - trend, weights, positions, period)
        if config.robust:
            weights = _bisquare_weights(values - trend - seasonal)
        logger.debug(
            f"Pass {n + 1}/{config.passes} for '{ts.name}': "
            f"{int((weights == 0).sum())} points with zero weight"
        )

    residual = values - trend - seasonal
    index = ts.index
    return DecompositionResult(
        observed=ts.values.copy(),
        trend=pd.Series(trend, index=index, name="trend"),
        seasonal=pd.Series(seasonal, index=index, name="seasonal"),
        residual=pd.Series(residual, index=index, name="residual"),
        period=period,
    )


def _trend_kernel(period: int, window: int | None) -> np.ndarray:
    """Classical 2xm moving average for even periods, m-point for odd ones."""
    if window is not None:
        return np.ones(window)
    if period % 2 == 0:
        kernel = np.ones(period + 1)
        kernel[0] = kernel[-1] = 0.5
        return kernel
    return np.ones(period)


def _local_linear(x: np.ndarray, w: np.ndarray, kernel: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Weighted straight-line fit over each window, evaluated at the window centre."""
    size = len(kernel)
    half = size // 2
    offsets = np.arange(-half, half + 1, dtype=float)

    W = sliding_window_view(np.pad(w, half), size) * kernel
    Y = sliding_window_view(np.pad(x, half), size)
    total = W.sum(axis=1)
    safe = np.where(total > 0, total, 1.0)

    mean_x = (W @ offsets) / safe
    mean_y = (W * Y).sum(axis=1) / safe
    dx = offsets - mean_x[:, None]
    sxx = (W * dx**2).sum(axis=1)
    sxy = (W * dx * (Y - mean_y[:, None])).sum(axis=1)
    slope = np.divide(sxy, sxx, out=np.zeros_like(sxy), where=sxx > 0)
    return mean_y - slope * mean_x, total


def _weighted_trend(x: np.ndarray, weights: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    # Edge windows are truncated; the linear fit keeps them from flattening a trend
    trend, total = _local_linear(x, weights, kernel)

    empty = total <= 0
    if empty.any():
        plain, _ = _local_linear(x, np.ones_like(x), kernel)
        trend[empty] = plain[empty]
    return trend


def _seasonal_pattern(
    detrended: np.ndarray,
    weights: np.ndarray,
    positions: np.ndarray,
    period: int,
) -> np.ndarray:
    sums = np.bincount(positions, weights=detrended * weights, minlength=period)
    counts = np.bincount(positions, weights=weights, minlength=period)
    plain = (
        np.bincount(positions, weights=detrended, minlength=period)
        / np.bincount(positions, minlength=period)
    )

    # A position whose points were all down-weighted falls back to the plain mean
    pattern = np.where(counts > 0, sums / np.where(counts > 0, counts, 1.0), plain)
    pattern -= pattern.mean()
    return pattern[positions]


def _bisquare_weights(residual: np.ndarray) -> np.ndarray:
    scale = BISQUARE_SCALE * np.median(np.abs(residual))
    if scale == 0:
        # Most residuals are exactly zero: keep those, drop the rest
        return (residual == 0).astype(float)
    u = np.abs(residual) / scale
    return np.where(u < 1, (1 - u**2) ** 2, 0.0)
