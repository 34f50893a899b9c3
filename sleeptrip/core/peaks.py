"""
Spectral Smoothing and Peak Search Module

Building blocks of the spectral peak extractor: moving-window smoothing of
power curves and automatic peak candidate search with minimum spacing.

Functions:
    smoothing_window: Smoothing window length in samples for a width in Hz
    smooth_curve: Centered moving mean along the frequency axis
    min_peak_distance: Minimum peak distance in samples for a spacing in Hz
    find_candidate_peaks: Local maxima ranked by power with spacing suppression
    drop_edge_peaks: Remove candidates at the band edges
    fix_peak_count: Pad or truncate candidates to the requested count

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import logging
from typing import Tuple

import numpy as np
from scipy.ndimage import uniform_filter1d
from scipy.signal import find_peaks

logger = logging.getLogger(__name__)

# Relative tolerance when converting Hz to a number of frequency bins
_BIN_TOLERANCE = 1e-9


def smoothing_window(smooth_hz: float, resolution: float) -> int:
    """
    Convert a smoothing width in Hz to an odd window length in samples.

    The width is rounded half away from zero; even lengths above one are
    widened by one sample so the window stays centered.
    """
    if resolution <= 0:
        raise ValueError("resolution must be positive")
    window = int(np.floor(smooth_hz / resolution + 0.5))
    if window > 1 and window % 2 == 0:
        window += 1
    return window


def smooth_curve(values: np.ndarray, window: int) -> np.ndarray:
    """
    Smooth power values with a centered moving mean.

    Parameters
    ----------
    values : np.ndarray
        One curve (n_bins,) or a matrix (n_channels, n_bins). Smoothing is
        applied along the last axis.
    window : int
        Window length in samples. A window of 1 or less disables smoothing.

    Returns
    -------
    np.ndarray
        Smoothed values with the same shape. Edges are extended with the
        nearest value.
    """
    values = np.asarray(values, dtype=np.float64)
    if window <= 1:
        return values.copy()
    return uniform_filter1d(values, size=window, axis=-1, mode="nearest")


def min_peak_distance(min_spacing_hz: float, resolution: float) -> int:
    """Minimum distance in samples between accepted peaks (at least 1)."""
    if resolution <= 0:
        raise ValueError("resolution must be positive")
    distance = int(np.ceil(min_spacing_hz / resolution - _BIN_TOLERANCE))
    return max(distance, 1)


def find_candidate_peaks(
    curve: np.ndarray,
    min_distance: int,
    min_height: float = 0.0
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Find local maxima of a power curve.

    Peaks must exceed ``min_height``. Starting from the highest peak, every
    peak closer than ``min_distance`` samples to an already accepted peak is
    suppressed. Among peaks of equal power the earlier one wins.
    A flat-topped peak is located at its first sample.

    Parameters
    ----------
    curve : np.ndarray
        Power curve (n_bins,)
    min_distance : int
        Minimum distance between accepted peaks in samples
    min_height : float, optional
        Peaks must be strictly greater than this value. Default is 0.

    Returns
    -------
    indices : np.ndarray
        Sample indices of accepted peaks, ordered by descending power
    powers : np.ndarray
        Power at those indices
    """
    curve = np.asarray(curve, dtype=np.float64)
    if curve.ndim != 1:
        raise ValueError("curve must be one-dimensional")

    # flat tops are reported at their first sample
    _, props = find_peaks(curve, plateau_size=1)
    indices = props["left_edges"]
    indices = indices[curve[indices] > min_height]
    powers = curve[indices]

    order = np.lexsort((indices, -powers))
    accepted = []
    for i in order:
        if all(abs(int(indices[i]) - int(indices[a])) >= min_distance for a in accepted):
            accepted.append(i)

    accepted = np.asarray(accepted, dtype=np.intp)
    logger.debug(f"Found {len(indices)} local maxima, accepted {len(accepted)}")
    return indices[accepted], powers[accepted]


def drop_edge_peaks(
    indices: np.ndarray,
    powers: np.ndarray,
    n_samples: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Remove candidates on the first or last sample of the band.

    If every candidate sits on an edge they are kept, with their position
    clamped to the nearest interior sample instead.
    """
    indices = np.asarray(indices, dtype=np.intp)
    powers = np.asarray(powers, dtype=np.float64)
    if indices.size == 0:
        return indices, powers

    valid = (indices > 0) & (indices < n_samples - 1)
    if valid.any():
        return indices[valid], powers[valid]

    lower = min(1, n_samples - 1)
    upper = max(n_samples - 2, lower)
    logger.debug("All peak candidates lie on the band edges, clamping inward")
    return np.clip(indices, lower, upper), powers


def fix_peak_count(
    freqs: np.ndarray,
    curve: np.ndarray,
    indices: np.ndarray,
    powers: np.ndarray,
    peaknum: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Bring the candidate set to exactly ``peaknum`` entries.

    Without any candidate a pseudo peak at the first frequency sample is used.
    Missing candidates repeat the last one, surplus candidates (the weakest,
    given descending power order) are dropped. The result is sorted by
    ascending frequency.

    Returns
    -------
    candidate_freqs : np.ndarray
        Candidate frequencies (peaknum,)
    candidate_powers : np.ndarray
        Candidate powers in the same order (peaknum,)
    """
    indices = list(np.asarray(indices, dtype=np.intp))
    power_list = list(np.asarray(powers, dtype=np.float64))

    if not indices:
        indices = [0]
        power_list = [float(curve[0])]

    while len(indices) < peaknum:
        indices.append(indices[-1])
        power_list.append(power_list[-1])

    cand_freqs = np.asarray(freqs, dtype=np.float64)[indices[:peaknum]]
    cand_powers = np.asarray(power_list[:peaknum], dtype=np.float64)

    order = np.argsort(cand_freqs, kind="stable")
    return cand_freqs[order], cand_powers[order]
