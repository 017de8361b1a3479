"""
Shared fixtures for finanomaly tests.
"""
import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def spike_series():
    """24 months of a flat 100 with a single spike of 500 in month 18."""
    values = pd.Series(100.0, index=pd.date_range("2023-01-01", periods=24, freq="MS"), name="revenue")
    values.iloc[17] = 500.0
    return values


@pytest.fixture
def seasonal_series():
    """4 years of monthly revenue: linear growth plus a yearly cycle plus noise."""
    t = np.arange(48)
    rng = np.random.default_rng(42)
    values = 1000 + 5 * t + 50 * np.sin(2 * np.pi * t / 12) + rng.normal(0, 2, size=48)
    return pd.Series(values, index=pd.date_range("2021-01-01", periods=48, freq="MS"), name="revenue")


@pytest.fixture
def noisy_residuals():
    rng = np.random.default_rng(7)
    residuals = rng.normal(0, 1, size=200)
    residuals[[20, 21, 22, 90, 150]] = [8.0, 9.0, 7.5, -10.0, 6.0]
    return residuals
