"""
Series Preparation - Turn raw frames into regular, gap-free series.

Frames follow the ['ds', 'y'] column convention used across the project.
"""

import logging
from typing import Literal

import pandas as pd

from finanomaly.core.domain.errors import IrregularSeriesError
from finanomaly.core.domain.series import TimeSeries

logger = logging.getLogger(__name__)

FillPolicy = Literal["carry", "interpolate", "zero"]


def series_from_frame(df: pd.DataFrame, ds: str = "ds", y: str = "y", name: str | None = None) -> TimeSeries:
    """
    Build a TimeSeries from a frame, sorted by timestamp.

    Args:
        df: Frame with a timestamp column and a value column
        ds: Timestamp column name
        y: Value column name
        name: Series name (defaults to the value column)
    """
    missing = {ds, y} - set(df.columns)
    if missing:
        raise KeyError(f"Frame is missing columns: {sorted(missing)}")

    ordered = df.sort_values(ds)
    values = pd.Series(
        ordered[y].to_numpy(dtype=float),
        index=pd.Index(ordered[ds]),
        name=name or y,
    )
    return TimeSeries(values, name=name or y)


def fill_gaps(series: TimeSeries, freq: str, policy: FillPolicy = "carry") -> TimeSeries:
    """
    Reindex onto a complete date range and fill the holes.

    Args:
        series: Series indexed by timestamps aligned to `freq`
        freq: Pandas frequency alias, e.g. "D" or "MS"
        policy: "carry" (forward then backward fill), "interpolate" (time-weighted
            linear) or "zero"

    Raises:
        IrregularSeriesError: timestamps do not sit on the `freq` grid
    """
    idx = series.index
    full_index = pd.date_range(idx.min(), idx.max(), freq=freq)
    if not idx.isin(full_index).all():
        raise IrregularSeriesError(f"Timestamps of '{series.name}' do not align with frequency '{freq}'")

    reindexed = series.values.reindex(full_index)
    gaps = int(reindexed.isna().sum())

    if policy == "carry":
        filled = reindexed.ffill().bfill()
    elif policy == "interpolate":
        filled = reindexed.interpolate(method="time", limit_direction="both")
    elif policy == "zero":
        filled = reindexed.fillna(0.0)
    else:
        raise ValueError(f"Unknown fill policy: {policy}")

    if gaps:
        logger.info(f"Filled {gaps} gaps in '{series.name}' using '{policy}'")
    return TimeSeries(filled, name=series.name)
