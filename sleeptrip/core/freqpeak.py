"""
Spectral Peak Extraction Module

Determines the frequency of power peaks (e.g. slow and fast spindle peaks)
in a full power spectrum result. For every result group ('resnum') the
channel-averaged spectrum within the band of interest is smoothed and
searched for peak candidates. The candidates are then confirmed group by
group through a confirmation surface until every group is accepted.

Functions:
    compute_peak_candidates: Candidate peaks for every group of a result
    confirm_peak_candidates: Round-robin confirmation of all groups
    find_frequency_peaks: Candidate search followed by confirmation

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from sleeptrip.analysis.config import FreqPeakConfig
from sleeptrip.analysis.confirmation import (
    PENDING,
    Confirmer,
    ConsolePeakConfirmer,
    is_pending,
)
from sleeptrip.analysis.error_handler import (
    ErrorCategory,
    ErrorHandler,
    InsufficientPaddingWarning,
    SleepTripError,
    warn,
)
from sleeptrip.core.channel_selection import select_channels
from sleeptrip.core.peaks import (
    drop_edge_peaks,
    find_candidate_peaks,
    fix_peak_count,
    min_peak_distance,
    smooth_curve,
    smoothing_window,
)
from sleeptrip.core.result import (
    Result,
    CHANNEL_COLUMN,
    FREQ_COLUMN,
    POWER_COLUMN,
    POWER_KIND,
    POWER_ORIGIN,
    RESNUM_COLUMN,
)
from sleeptrip.core.validation import (
    ValidationSeverity,
    frequency_resolution,
    validate_band_coverage,
)

logger = logging.getLogger(__name__)


@dataclass
class GroupSpectrum:
    """
    Band-limited spectrum of one result group with its peak candidates.

    Attributes:
        group_id: resnum of the group (1 if the result has no resnum column)
        freqs: Frequency bins within the band (n_bins,)
        curve: Smoothed channel-averaged power (n_bins,)
        channel_curves: Smoothed power per channel (n_channels, n_bins)
        channel_labels: Labels of the selected channels
        candidate_freqs: Proposed peak frequencies, ascending (peaknum,)
        candidate_powers: Power at the proposed peaks (peaknum,)
        n_detected: Number of automatically detected peaks
        resolution: Frequency resolution in Hz
        smoothing_window: Smoothing window length in samples
        label: Description presented during confirmation
    """
    group_id: int
    freqs: np.ndarray
    curve: np.ndarray
    channel_curves: np.ndarray
    channel_labels: List[str]
    candidate_freqs: np.ndarray
    candidate_powers: np.ndarray
    n_detected: int
    resolution: float
    smoothing_window: int
    label: str

    @property
    def trusted(self) -> bool:
        """True if as many peaks were detected as requested."""
        return self.n_detected == len(self.candidate_freqs)


def _check_power_result(result: Result):
    if not isinstance(result, Result):
        raise SleepTripError(
            "second argument is not a valid result structure.",
            ErrorCategory.DATA_VALIDATION,
            context={"type": type(result).__name__}
        )
    if result.tag != (POWER_ORIGIN, POWER_KIND):
        raise ErrorHandler.handle_wrong_result_type((POWER_ORIGIN, POWER_KIND), result.tag)
    missing = [c for c in (FREQ_COLUMN, CHANNEL_COLUMN, POWER_COLUMN)
               if c not in result.table.columns]
    if missing:
        raise SleepTripError(
            f"result table lacks column(s) {missing}",
            ErrorCategory.DATA_VALIDATION,
            context={"columns": list(result.table.columns)}
        )


def _channel_matrix(band: pd.DataFrame, labels: List[str],
                    group_id: int) -> Tuple[np.ndarray, np.ndarray]:
    matrix = band.pivot_table(
        index=CHANNEL_COLUMN,
        columns=FREQ_COLUMN,
        values=POWER_COLUMN,
        aggfunc="mean"
    ).reindex(labels)

    if matrix.isnull().to_numpy().any():
        raise SleepTripError(
            f"power of resnum {group_id} is not available for every selected "
            "channel and frequency",
            ErrorCategory.DATA_VALIDATION,
            suggestions=["Use the same frequency bins for every channel"],
            context={"resnum": group_id, "channels": labels}
        )

    return (matrix.columns.to_numpy(dtype=np.float64),
            matrix.to_numpy(dtype=np.float64))


def _group_spectrum(config: FreqPeakConfig, table: pd.DataFrame,
                    group_id: int) -> GroupSpectrum:
    freqs = table[FREQ_COLUMN].to_numpy(dtype=np.float64)
    resolution = frequency_resolution(freqs)

    coverage = validate_band_coverage(freqs, config.foilim, resolution)
    if not coverage.is_valid:
        data_min = float(freqs.min()) if freqs.size else float("nan")
        data_max = float(freqs.max()) if freqs.size else float("nan")
        raise ErrorHandler.handle_insufficient_range(group_id, config.foilim, data_min, data_max)
    if coverage.severity == ValidationSeverity.WARNING:
        warn(
            f"result structure with resnum {group_id} does have too little "
            "padding for finding peaks at the border.",
            InsufficientPaddingWarning
        )

    lo, hi = config.foilim
    tol = resolution * 1e-6
    band = table[(table[FREQ_COLUMN] >= lo - tol) & (table[FREQ_COLUMN] <= hi + tol)]
    if band.empty:
        raise ErrorHandler.handle_empty_band(group_id, config.foilim, resolution)
    band = band.assign(**{CHANNEL_COLUMN: band[CHANNEL_COLUMN].astype(str)})

    available = list(pd.unique(band[CHANNEL_COLUMN]))
    labels = select_channels(config.channel, available)
    if not labels:
        raise SleepTripError(
            f"channel selection {config.channel!r} matches none of the "
            f"channels of resnum {group_id}",
            ErrorCategory.DATA_VALIDATION,
            context={"resnum": group_id, "available": available}
        )

    band_freqs, channel_curves = _channel_matrix(band, labels, group_id)
    curve = channel_curves.mean(axis=0)

    label = str(group_id)
    window = smoothing_window(config.smooth, resolution)
    if window > 1:
        curve = smooth_curve(curve, window)
        channel_curves = smooth_curve(channel_curves, window)
        label += f": mean[{window} point(s)] at f_res = {resolution:g} Hz."

    distance = min_peak_distance(config.minpeakdist, resolution)
    indices, powers = find_candidate_peaks(curve, distance)
    indices, powers = drop_edge_peaks(indices, powers, len(band_freqs))
    n_detected = len(indices)

    if n_detected != config.peaknum:
        label += " Peak(s) not trusted!"

    cand_freqs, cand_powers = fix_peak_count(
        band_freqs, curve, indices, powers, config.peaknum
    )
    label += "\n" + ",".join(labels)

    logger.debug(
        f"resnum {group_id}: {n_detected} peak(s) detected, candidates "
        f"{np.round(cand_freqs, 4).tolist()} Hz"
    )

    return GroupSpectrum(
        group_id=group_id,
        freqs=band_freqs,
        curve=curve,
        channel_curves=channel_curves,
        channel_labels=labels,
        candidate_freqs=cand_freqs,
        candidate_powers=cand_powers,
        n_detected=n_detected,
        resolution=resolution,
        smoothing_window=window,
        label=label,
    )


def compute_peak_candidates(config: Optional[FreqPeakConfig],
                            result: Result) -> Dict[int, GroupSpectrum]:
    """
    Compute peak candidates for every group of a power spectrum result.

    Parameters
    ----------
    config : FreqPeakConfig or None
        Peak extraction parameters, defaults to FreqPeakConfig()
    result : Result
        Result of origin 'st_power' and kind 'power_full'

    Returns
    -------
    dict
        Mapping of group id to GroupSpectrum, in ascending id order. Without
        a resnum column the whole table is group 1.

    Raises
    ------
    WrongResultTypeError
        If the result was not produced by the power spectrum analysis
    InsufficientRangeError
        If any group does not cover the requested band
    SleepTripError
        If no channel is selected or the spectrum is incomplete
    """
    if config is None:
        config = FreqPeakConfig()
    config.validate()
    _check_power_result(result)

    table = result.table
    spectra = {}
    if result.has_resnum:
        for group_id in np.unique(table[RESNUM_COLUMN].to_numpy()):
            group_table = table[table[RESNUM_COLUMN] == group_id]
            spectra[int(group_id)] = _group_spectrum(config, group_table, int(group_id))
    else:
        spectra[1] = _group_spectrum(config, table, 1)

    logger.info(f"Computed peak candidates for {len(spectra)} group(s)")
    return spectra


def confirm_peak_candidates(spectra: Dict[int, GroupSpectrum], peaknum: int,
                            confirm: Confirmer) -> np.ndarray:
    """
    Confirm the peak candidates of all groups.

    Groups are presented in ascending id order, round-robin, and a group is
    presented again as long as its answer is pending. The loop ends once
    every group has been accepted.

    Parameters
    ----------
    spectra : dict
        Mapping of group id to GroupSpectrum
    peaknum : int
        Number of peaks per group
    confirm : callable
        Confirmation surface, see sleeptrip.analysis.confirmation

    Returns
    -------
    np.ndarray
        Confirmed peak frequencies (n_groups, peaknum), rows in ascending
        group id order
    """
    group_ids = sorted(spectra)
    output = np.full((len(group_ids), peaknum), PENDING)

    position = 0
    while np.any(output < 0):
        group_id = group_ids[position]
        if np.any(output[position] < 0):
            spectrum = spectra[group_id]
            answer = confirm(
                group_id,
                spectrum.freqs,
                spectrum.curve,
                spectrum.channel_curves,
                list(spectrum.channel_labels),
                (spectrum.candidate_freqs.copy(), spectrum.candidate_powers.copy()),
                spectrum.label,
            )
            if is_pending(answer):
                logger.info(f"Peaks of resnum {group_id} not yet decided")
            else:
                values = np.asarray(answer, dtype=np.float64).ravel()
                if values.size != peaknum:
                    raise ValueError(
                        f"confirmation of resnum {group_id} returned {values.size} "
                        f"value(s), expected {peaknum}"
                    )
                output[position] = values
                logger.info(f"Peaks of resnum {group_id} accepted: {values.tolist()} Hz")
        position = (position + 1) % len(group_ids)

    return output


def find_frequency_peaks(
    config: Optional[FreqPeakConfig],
    result: Result,
    confirm: Optional[Confirmer] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Determine peak frequencies in the power spectrum, confirmed per group.

    Parameters
    ----------
    config : FreqPeakConfig or None
        Peak extraction parameters, defaults to FreqPeakConfig()
    result : Result
        Result of origin 'st_power' and kind 'power_full', optionally
        appended (one group per resnum)
    confirm : callable, optional
        Confirmation surface, defaults to ConsolePeakConfirmer()

    Returns
    -------
    freqpeaks1 : np.ndarray
        First (lower) peak frequency per group, ascending group id order
    freqpeaks2 : np.ndarray
        Second peak frequency per group, all NaN if peaknum is 1
    """
    if config is None:
        config = FreqPeakConfig()
    if confirm is None:
        confirm = ConsolePeakConfirmer()

    spectra = compute_peak_candidates(config, result)
    peaks = confirm_peak_candidates(spectra, config.peaknum, confirm)

    freqpeaks1 = peaks[:, 0].copy()
    freqpeaks2 = np.full_like(freqpeaks1, np.nan)
    if config.peaknum == 2:
        freqpeaks2 = peaks[:, 1].copy()

    return freqpeaks1, freqpeaks2
