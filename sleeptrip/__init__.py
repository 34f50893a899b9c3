"""
SleepTrip - sleep analysis toolbox.

Appending of analysis results and confirmation-based spectral peak
extraction.
"""

from sleeptrip.analysis.config import FreqPeakConfig, PowerConfig
from sleeptrip.analysis.confirmation import (
    PENDING,
    AcceptCandidates,
    ConsolePeakConfirmer,
)
from sleeptrip.analysis.error_handler import (
    IncompatibleInputsError,
    InsufficientPaddingWarning,
    InsufficientRangeError,
    RecombinationWarning,
    SleepTripError,
    WrongResultTypeError,
)
from sleeptrip.core.aggregate import append_results
from sleeptrip.core.freqpeak import (
    GroupSpectrum,
    compute_peak_candidates,
    confirm_peak_candidates,
    find_frequency_peaks,
)
from sleeptrip.core.result import Result
from sleeptrip.core.spectrum import compute_power_result

__version__ = "0.1.0"
