"""
Tests for the seasonal-trend Decomposer.
"""
import numpy as np
import pandas as pd
import pytest

from finanomaly.core.domain.config import DecompositionConfig
from finanomaly.core.domain.errors import InsufficientDataError, IrregularSeriesError
from finanomaly.core.domain.series import TimeSeries
from finanomaly.core.services.decomposer import decompose


@pytest.mark.parametrize("robust", [True, False])
def test_additive_identity(seasonal_series, robust):
    result = decompose(seasonal_series, period=12, config=DecompositionConfig(robust=robust))

    rebuilt = result.trend + result.seasonal + result.residual
    assert np.allclose(result.observed, rebuilt, rtol=0, atol=1e-9)
    assert result.residual.index.equals(seasonal_series.index)


@pytest.mark.parametrize("robust", [True, False])
def test_seasonal_component_has_zero_mean_over_a_cycle(seasonal_series, robust):
    result = decompose(seasonal_series, period=12, config=DecompositionConfig(robust=robust))

    assert abs(result.seasonal.iloc[:12].mean()) < 1e-9
    assert abs(result.seasonal.iloc[12:24].mean()) < 1e-9


def test_seasonal_component_follows_the_cycle(seasonal_series):
    result = decompose(seasonal_series, period=12, config=DecompositionConfig(robust=False))

    cycle = np.sin(2 * np.pi * np.arange(48) / 12)
    assert np.corrcoef(result.seasonal.to_numpy(), cycle)[0, 1] > 0.9
    # Seasonal pattern repeats exactly every period
    assert np.allclose(result.seasonal.iloc[:12].to_numpy(), result.seasonal.iloc[12:24].to_numpy())


def test_robust_mode_isolates_a_single_spike(spike_series):
    result = decompose(spike_series, period=12)

    assert result.residual.iloc[17] == pytest.approx(400.0)
    others = result.residual.drop(result.residual.index[17])
    assert np.allclose(others, 0.0)
    assert np.allclose(result.trend, 100.0)


def test_idempotent(seasonal_series):
    first = decompose(seasonal_series, period=12)
    second = decompose(seasonal_series, period=12)

    pd.testing.assert_series_equal(first.trend, second.trend)
    pd.testing.assert_series_equal(first.seasonal, second.seasonal)
    pd.testing.assert_series_equal(first.residual, second.residual)


def test_does_not_mutate_input(spike_series):
    before = spike_series.copy()
    decompose(spike_series, period=12)
    pd.testing.assert_series_equal(spike_series, before)


def test_accepts_time_series_and_numeric_index():
    values = pd.Series(np.tile([1.0, 3.0, 2.0, 5.0], 4))
    result = decompose(TimeSeries(values, name="units"), period=4, config=DecompositionConfig(trend_window=5))

    assert len(result) == 16
    assert result.period == 4
    assert np.allclose(result.observed, result.trend + result.seasonal + result.residual)


def test_odd_period(seasonal_series):
    result = decompose(seasonal_series.iloc[:21], period=7)
    assert abs(result.seasonal.iloc[:7].mean()) < 1e-9


def test_insufficient_data():
    values = pd.Series(100.0, index=pd.date_range("2024-01-01", periods=10, freq="MS"))
    with pytest.raises(InsufficientDataError) as exc_info:
        decompose(values, period=12)
    assert exc_info.value.length == 10
    assert exc_info.value.period == 12


def test_irregular_spacing(seasonal_series):
    gapped = seasonal_series.drop(seasonal_series.index[5])
    with pytest.raises(IrregularSeriesError):
        decompose(gapped, period=6)


def test_missing_values_are_rejected(seasonal_series):
    holed = seasonal_series.copy()
    holed.iloc[3] = np.nan
    with pytest.raises(IrregularSeriesError):
        decompose(holed, period=12)


def test_period_must_be_at_least_two(seasonal_series):
    with pytest.raises(ValueError):
        decompose(seasonal_series, period=1)


def test_period_index(seasonal_series):
    series = pd.Series(seasonal_series.to_numpy(), index=pd.period_range("2021-01", periods=48, freq="M"))

    result = decompose(series, period=12)

    assert isinstance(result.residual.index, pd.PeriodIndex)
    assert np.allclose(result.observed, result.trend + result.seasonal + result.residual)


def test_gapped_period_index(seasonal_series):
    index = pd.period_range("2021-01", periods=48, freq="M").delete(5)
    series = pd.Series(seasonal_series.to_numpy()[:47], index=index)

    with pytest.raises(IrregularSeriesError):
        decompose(series, period=12)
