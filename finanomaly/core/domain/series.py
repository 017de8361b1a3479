"""
Series Domain Model - A regular, gap-free time series.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd

from finanomaly.core.domain.errors import IrregularSeriesError


@dataclass(frozen=True)
class TimeSeries:
    """
    Ordered (timestamp, value) pairs at a fixed period.

    The index holds the timestamps: a DatetimeIndex or PeriodIndex (daily,
    monthly, ...) or a plain numeric index for period counters.
    """

    values: pd.Series
    name: str = "y"

    def __post_init__(self):
        object.__setattr__(self, "values", self.values.astype(float))

    def __len__(self) -> int:
        return len(self.values)

    @property
    def index(self) -> pd.Index:
        return self.values.index

    def validate(self) -> None:
        """
        Check ordering, spacing and completeness.

        Raises:
            IrregularSeriesError: timestamps are duplicated, unordered, unevenly
                spaced, or a value is missing.
        """
        idx = self.values.index
        if idx.has_duplicates or not idx.is_monotonic_increasing:
            raise IrregularSeriesError(f"Timestamps of '{self.name}' must be strictly increasing")

        if self.values.isna().any():
            missing = int(self.values.isna().sum())
            raise IrregularSeriesError(
                f"Series '{self.name}' has {missing} missing values; fill gaps before decomposing"
            )

        if len(idx) < 3:
            return

        if isinstance(idx, pd.PeriodIndex):
            idx = idx.to_timestamp()

        if isinstance(idx, pd.DatetimeIndex):
            # Calendar-aware: month starts are regular even though day counts differ
            if pd.infer_freq(idx) is None:
                raise IrregularSeriesError(f"Timestamps of '{self.name}' are not evenly spaced")
        else:
            try:
                steps = np.diff(idx.to_numpy(dtype=float))
            except (TypeError, ValueError) as e:
                raise IrregularSeriesError(
                    f"Index of '{self.name}' ({type(idx).__name__}) is neither timestamps nor numbers"
                ) from e
            if not np.allclose(steps, steps[0]):
                raise IrregularSeriesError(f"Index of '{self.name}' is not evenly spaced")
