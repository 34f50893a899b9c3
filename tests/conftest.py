"""
Pytest configuration and fixtures for SleepTrip tests.
"""

import pytest
import sys
import os

import numpy as np
import pandas as pd

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sleeptrip.core.result import (
    Result,
    CHANNEL_COLUMN,
    FREQ_COLUMN,
    POWER_COLUMN,
    POWER_KIND,
    POWER_ORIGIN,
)


def make_power_table(peaks, resolution=0.2, fmin=0.0, fmax=25.0,
                     channels=("C3", "C4"), width=0.5, baseline=1.0):
    """
    Long-format power table with Gaussian bumps on a flat baseline.

    peaks is a list of (frequency, height) pairs. Frequencies lie on an exact
    grid of ``resolution`` so that peak frequencies are reproduced exactly.
    """
    n_bins = int(round((fmax - fmin) / resolution)) + 1
    freqs = np.round(fmin + np.arange(n_bins) * resolution, 10)
    power = np.full(n_bins, baseline, dtype=np.float64)
    for freq, height in peaks:
        power = power + height * np.exp(-((freqs - freq) / width) ** 2)

    frames = [
        pd.DataFrame({FREQ_COLUMN: freqs, CHANNEL_COLUMN: label, POWER_COLUMN: power})
        for label in channels
    ]
    return pd.concat(frames, ignore_index=True)


def make_power_result(peaks, **kwargs):
    """Power spectrum result built from make_power_table."""
    return Result(origin=POWER_ORIGIN, kind=POWER_KIND,
                  table=make_power_table(peaks, **kwargs),
                  cfg={"resolution": kwargs.get("resolution", 0.2)})


@pytest.fixture
def single_peak_result():
    """Power spectrum with one peak at 10 Hz, 0.2 Hz resolution, 0-25 Hz."""
    return make_power_result([(10.0, 5.0)])


@pytest.fixture
def double_peak_result():
    """Power spectrum with a strong peak at 13 Hz and a weaker one at 9 Hz."""
    return make_power_result([(9.0, 3.0), (13.0, 5.0)])


@pytest.fixture
def small_result():
    """Factory for small generic results of a given origin and kind."""
    def _make(n_rows=3, origin="st_scoringdescriptives", kind="descriptive",
              appended=False, resnum=None, offset=0):
        table = pd.DataFrame({
            "channel": [f"C{i}" for i in range(n_rows)],
            "value": np.arange(n_rows, dtype=float) + offset,
        })
        if resnum is not None:
            table.insert(0, "resnum", resnum)
        return Result(origin=origin, kind=kind, table=table, appended=appended,
                      cfg={"note": "test"})
    return _make
