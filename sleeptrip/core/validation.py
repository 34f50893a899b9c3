"""
Core Data Validation Module

GUI-independent checks on spectra and signals. The checks return
standardized ValidationResult objects that include:
- Whether the data is acceptable
- Error or warning messages
- Severity level (error, warning, ok)

Callers decide how to escalate: errors become exceptions, warnings are
reported and processing continues.

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Sequence

import numpy as np

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation messages."""
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationResult:
    """
    Result of a validation check.

    Attributes:
        is_valid: Whether the data is acceptable
        severity: Severity level of any issues found
        message: Human-readable message describing the issue
        details: Optional dict with additional context
    """
    is_valid: bool
    severity: ValidationSeverity = ValidationSeverity.OK
    message: str = ""
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(is_valid=True, severity=ValidationSeverity.OK)

    @classmethod
    def warning(cls, message: str, details: Optional[Dict] = None) -> 'ValidationResult':
        """Create a warning result (valid but with concerns)."""
        return cls(
            is_valid=True,
            severity=ValidationSeverity.WARNING,
            message=message,
            details=details
        )

    @classmethod
    def error(cls, message: str, details: Optional[Dict] = None) -> 'ValidationResult':
        """Create an error result (invalid data)."""
        return cls(
            is_valid=False,
            severity=ValidationSeverity.ERROR,
            message=message,
            details=details
        )


def frequency_resolution(freqs: np.ndarray) -> Optional[float]:
    """
    Smallest spacing between distinct frequency samples.

    Returns None when fewer than two distinct frequencies are present.
    """
    distinct = np.unique(np.asarray(freqs, dtype=np.float64))
    if distinct.size < 2:
        return None
    # Rounded so that float drift of the frequency grid does not leak into
    # window lengths derived from the resolution
    return float(np.round(np.min(np.diff(distinct)), 12))


def validate_band_coverage(
    freqs: np.ndarray,
    foilim: Sequence[float],
    resolution: Optional[float]
) -> ValidationResult:
    """
    Validate that a frequency band is covered by the available samples.

    Args:
        freqs: Frequency samples in Hz (may repeat, e.g. one per channel)
        foilim: (begin, end) of the band in Hz
        resolution: Frequency resolution of the samples in Hz

    Returns:
        Error if the band reaches beyond the data, warning if less than one
        resolution step of data lies outside the band on either side.
    """
    freqs = np.asarray(freqs, dtype=np.float64)
    if freqs.size == 0 or resolution is None:
        return ValidationResult.error(
            "At least two distinct frequencies are required",
            details={"n_freqs": int(np.unique(freqs).size)}
        )

    lo, hi = float(foilim[0]), float(foilim[1])
    data_min, data_max = float(freqs.min()), float(freqs.max())
    tol = resolution * 1e-6

    if data_min > lo + tol or data_max < hi - tol:
        return ValidationResult.error(
            f"Band [{lo}, {hi}] Hz exceeds data range [{data_min}, {data_max}] Hz",
            details={"data_min": data_min, "data_max": data_max}
        )

    if (lo - data_min) < resolution - tol or (data_max - hi) < resolution - tol:
        return ValidationResult.warning(
            f"Less than one frequency step ({resolution} Hz) of padding around "
            f"band [{lo}, {hi}] Hz",
            details={"data_min": data_min, "data_max": data_max,
                     "resolution": resolution}
        )

    return ValidationResult.ok()


def validate_signal_data(signal: np.ndarray, sample_rate: float) -> ValidationResult:
    """
    Validate signal data for power spectrum calculation.

    Checks for:
    - Empty arrays
    - Non-positive sample rate
    - NaN/Inf values
    - Constant signals (no variance)

    Args:
        signal: Input signal array
        sample_rate: Sample rate in Hz

    Returns:
        ValidationResult with status and any messages
    """
    if signal.size == 0:
        return ValidationResult.error("Signal array is empty")

    if sample_rate <= 0:
        return ValidationResult.error(
            f"Sample rate must be positive, got {sample_rate}",
            details={"value": sample_rate}
        )

    nan_count = np.sum(np.isnan(signal))
    inf_count = np.sum(np.isinf(signal))

    if nan_count > 0 or inf_count > 0:
        return ValidationResult.error(
            f"Signal contains invalid values: {nan_count} NaN, {inf_count} Inf. "
            "Please clean or interpolate the data before analysis.",
            details={"nan_count": int(nan_count), "inf_count": int(inf_count)}
        )

    if np.std(signal) == 0:
        return ValidationResult.warning(
            "Signal has zero variance (constant value). "
            "Power will be zero at all frequencies.",
            details={"mean": float(np.mean(signal))}
        )

    return ValidationResult.ok()
