"""
Pytest configuration and shared fixtures for arcclimate tests.
"""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def summer_dates():
    """Two summer days of hourly JST timestamps."""
    return pd.date_range("2011-06-21 00:00", periods=48, freq="h")


@pytest.fixture
def winter_dates():
    """Two winter days of hourly JST timestamps."""
    return pd.date_range("2011-12-21 00:00", periods=48, freq="h")


def make_grid_series(dates, **overrides):
    """
    Flat grid-point frame: constant weather with a half-sine shortwave
    profile between 06 and 18 JST.
    """
    n = len(dates)
    hour = np.asarray(dates.hour, dtype=float)
    day = np.clip(np.sin(np.pi * (hour - 6) / 12), 0, None)
    data = {
        "TMP": np.full(n, 20.0),
        "MR": np.full(n, 10.0),
        "DSWRF_est": 3.0 * day,
        "DSWRF_msm": 2.8 * day,
        "Ld": np.full(n, 360.0),
        "VGRD": np.full(n, 1.0),
        "UGRD": np.full(n, 1.0),
        "PRES": np.full(n, 1013.0),
        "APCP01": np.zeros(n),
    }
    data.update(overrides)
    return pd.DataFrame(data, index=dates)


@pytest.fixture
def grid_series(summer_dates):
    """Four identical flat grid-point frames (SW, SE, NW, NE)."""
    return [make_grid_series(summer_dates) for _ in range(4)]


@pytest.fixture
def tokyo():
    """Latitude and longitude near Tokyo Tower."""
    return 35.658, 139.741
