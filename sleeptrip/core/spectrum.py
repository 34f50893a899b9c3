"""
Power Spectrum Module

Produces full power spectrum results ('st_power' / 'power_full') from raw
channel signals using Welch's method. The result table is in long format,
one row per channel and frequency, and is the input of the spectral peak
extractor.

Functions:
    calculate_power_welch: Welch power spectral density of one signal
    compute_power_result: Power spectrum result for a set of channels

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import logging
from typing import Mapping, Optional, Tuple

import numpy as np
import pandas as pd
from scipy import signal

from sleeptrip.analysis.config import PowerConfig
from sleeptrip.core.result import (
    Result,
    CHANNEL_COLUMN,
    FREQ_COLUMN,
    POWER_COLUMN,
    POWER_KIND,
    POWER_ORIGIN,
)
from sleeptrip.core.validation import ValidationSeverity, validate_signal_data

logger = logging.getLogger(__name__)


def calculate_power_welch(
    time_data: np.ndarray,
    sample_rate: float,
    resolution: float = 0.2,
    window: str = 'hann',
    overlap_percent: float = 50.0
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Calculate power spectral density using Welch's method.

    The data is divided into overlapping segments of ``sample_rate /
    resolution`` samples, each segment is windowed and its periodogram
    computed, and the periodograms are averaged. Density scaling is used.

    Parameters
    ----------
    time_data : np.ndarray
        Input signal array (1D)
    sample_rate : float
        Sampling frequency in Hz, must be positive
    resolution : float, optional
        Frequency resolution in Hz. Default is 0.2.
    window : str, optional
        Window function applied to each segment. Default is 'hann'.
    overlap_percent : float, optional
        Segment overlap in percent. Default is 50.

    Returns
    -------
    frequencies : np.ndarray
        Frequencies in Hz
    psd : np.ndarray
        Power spectral density in signal_units^2 / Hz

    Raises
    ------
    ValueError
        If the signal is empty or contains NaN/Inf, if sample_rate or
        resolution is not positive, or if one segment is longer than
        the signal
    """
    time_data = np.asarray(time_data, dtype=np.float64)
    check = validate_signal_data(time_data, sample_rate)
    if not check.is_valid:
        raise ValueError(check.message)
    if check.severity == ValidationSeverity.WARNING:
        logger.warning(check.message)

    if resolution <= 0:
        raise ValueError("resolution must be positive")

    nperseg = int(round(sample_rate / resolution))
    if nperseg > len(time_data):
        raise ValueError(
            f"nperseg ({nperseg}) cannot be larger than signal length ({len(time_data)}). "
            f"Try using a coarser resolution or a longer signal."
        )
    noverlap = int(nperseg * overlap_percent / 100.0)

    frequencies, psd = signal.welch(
        time_data,
        fs=sample_rate,
        window=window,
        nperseg=nperseg,
        noverlap=noverlap,
        scaling='density'
    )
    return frequencies, psd


def compute_power_result(
    signals: Mapping[str, np.ndarray],
    sample_rate: float,
    config: Optional[PowerConfig] = None
) -> Result:
    """
    Compute a full power spectrum result for several channels.

    Parameters
    ----------
    signals : mapping of str to np.ndarray
        Channel label to signal
    sample_rate : float
        Sampling frequency in Hz, shared by all channels
    config : PowerConfig, optional
        Spectrum parameters. Defaults to PowerConfig().

    Returns
    -------
    Result
        Result of origin 'st_power' and kind 'power_full' with columns
        'freq', 'channel' and 'mean_powerDensity_over_segments'
    """
    if config is None:
        config = PowerConfig()
    config.validate()

    if len(signals) == 0:
        raise ValueError("At least one channel signal is required")

    frames = []
    for label, data in signals.items():
        frequencies, psd = calculate_power_welch(
            data,
            sample_rate,
            resolution=config.resolution,
            window=config.window,
            overlap_percent=config.overlap_percent
        )
        frames.append(pd.DataFrame({
            FREQ_COLUMN: frequencies,
            CHANNEL_COLUMN: str(label),
            POWER_COLUMN: psd,
        }))
        logger.debug(f"Computed power spectrum of channel '{label}' ({len(frequencies)} bins)")

    table = pd.concat(frames, axis=0, ignore_index=True)
    logger.info(f"Computed power spectra of {len(signals)} channel(s)")

    return Result(
        origin=POWER_ORIGIN,
        kind=POWER_KIND,
        table=table,
        cfg={"sample_rate": sample_rate, "window": config.window,
             "resolution": config.resolution,
             "overlap_percent": config.overlap_percent}
    )
