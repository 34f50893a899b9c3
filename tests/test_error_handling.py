"""
Test suite for error handling and data validation.

Tests validate that:
- Fatal errors carry clear messages, categories and recovery suggestions
- Warnings are both logged and raised as Python warnings
- Spectrum and signal checks classify data correctly

Author: SleepTrip Development Team
"""

import logging

import numpy as np
import pytest

from sleeptrip.analysis.error_handler import (
    ErrorCategory,
    ErrorHandler,
    IncompatibleInputsError,
    InsufficientPaddingWarning,
    InsufficientRangeError,
    RecombinationWarning,
    SleepTripError,
    SleepTripWarning,
    WrongResultTypeError,
    log_error_with_recovery,
    warn,
)
from sleeptrip.core.validation import (
    ValidationSeverity,
    frequency_resolution,
    validate_band_coverage,
    validate_signal_data,
)


class TestErrorTaxonomy:

    def test_fatal_errors_share_base(self):
        for cls in (IncompatibleInputsError, WrongResultTypeError, InsufficientRangeError):
            assert issubclass(cls, SleepTripError)

    def test_warnings_share_base(self):
        for cls in (RecombinationWarning, InsufficientPaddingWarning):
            assert issubclass(cls, SleepTripWarning)
            assert issubclass(cls, UserWarning)

    def test_full_message(self):
        error = SleepTripError(
            "something failed",
            ErrorCategory.PROCESSING,
            suggestions=["try again"],
            context={"resnum": 3}
        )
        message = error.get_full_message()
        assert message.startswith("[PROCESSING] something failed")
        assert "1. try again" in message
        assert "- resnum: 3" in message

    def test_incompatible_inputs_names_both_pairs(self):
        error = ErrorHandler.handle_incompatible_inputs(("st_power", "power_full"),
                                                        ("st_spindles", "event"), 2)
        assert isinstance(error, IncompatibleInputsError)
        assert error.category == ErrorCategory.INCOMPATIBLE_INPUTS
        for tag in ("st_power", "power_full", "st_spindles", "event"):
            assert tag in error.message
        assert error.context["position"] == 2

    def test_wrong_result_type(self):
        error = ErrorHandler.handle_wrong_result_type(("st_power", "power_full"),
                                                      ("st_power", "power_band"))
        assert isinstance(error, WrongResultTypeError)
        assert "st_power" in str(error)
        assert error.suggestions

    def test_insufficient_range(self):
        error = ErrorHandler.handle_insufficient_range(4, (6.0, 30.0), 0.0, 25.0)
        assert isinstance(error, InsufficientRangeError)
        assert error.context["resnum"] == 4
        assert error.context["data_range"] == [0.0, 25.0]

    def test_missing_resnum(self):
        error = ErrorHandler.handle_missing_resnum(1, 2)
        assert isinstance(error, IncompatibleInputsError)
        assert error.category == ErrorCategory.INCOMPATIBLE_INPUTS
        assert error.context == {"position": 1, "n_missing": 2}

    def test_empty_band(self):
        error = ErrorHandler.handle_empty_band(1, (10.05, 10.15), 0.2)
        assert isinstance(error, InsufficientRangeError)
        assert "0.2 Hz" in error.message

    def test_categories(self):
        assert [c.name for c in ErrorCategory] == [
            "DATA_VALIDATION", "PROCESSING", "INCOMPATIBLE_INPUTS"
        ]

    def test_log_error_with_recovery(self, caplog):
        error = ErrorHandler.handle_insufficient_range(1, (6.0, 30.0), 0.0, 25.0)
        with caplog.at_level(logging.ERROR, logger="sleeptrip.analysis.error_handler"):
            log_error_with_recovery(error)
        assert "Suggestions" in caplog.text

    def test_warn_logs_and_raises_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="sleeptrip.analysis.error_handler"):
            with pytest.warns(RecombinationWarning, match="renumber"):
                warn("ids will be renumbered", RecombinationWarning)
        assert "ids will be renumbered" in caplog.text


class TestBandCoverage:

    def setup_method(self):
        self.freqs = np.round(np.arange(126) * 0.2, 10)

    def test_resolution(self):
        assert frequency_resolution(np.repeat(self.freqs, 3)) == 0.2

    def test_resolution_needs_two_frequencies(self):
        assert frequency_resolution(np.array([5.0, 5.0])) is None

    def test_covered_band(self):
        result = validate_band_coverage(self.freqs, (6.0, 18.0), 0.2)
        assert result.is_valid
        assert result.severity == ValidationSeverity.OK

    def test_band_at_data_edge_warns(self):
        result = validate_band_coverage(self.freqs, (6.0, 25.0), 0.2)
        assert result.is_valid
        assert result.severity == ValidationSeverity.WARNING

    def test_band_beyond_data_fails(self):
        result = validate_band_coverage(self.freqs, (6.0, 25.2), 0.2)
        assert not result.is_valid
        assert result.details["data_max"] == 25.0

    def test_band_below_data_fails(self):
        result = validate_band_coverage(self.freqs[10:], (1.0, 18.0), 0.2)
        assert not result.is_valid

    def test_no_resolution_fails(self):
        result = validate_band_coverage(np.array([10.0]), (6.0, 18.0), None)
        assert result.severity == ValidationSeverity.ERROR


class TestSignalValidation:

    def test_valid_signal(self):
        rng = np.random.default_rng(0)
        assert validate_signal_data(rng.standard_normal(1000), 100.0).is_valid

    def test_empty_signal(self):
        result = validate_signal_data(np.array([]), 100.0)
        assert not result.is_valid
        assert "empty" in result.message.lower()

    def test_non_finite_values(self):
        signal = np.ones(100)
        signal[3] = np.nan
        signal[5] = np.inf
        result = validate_signal_data(signal, 100.0)
        assert not result.is_valid
        assert result.details == {"nan_count": 1, "inf_count": 1}

    def test_constant_signal_warns(self):
        result = validate_signal_data(np.ones(100), 100.0)
        assert result.is_valid
        assert result.severity == ValidationSeverity.WARNING

    def test_bad_sample_rate(self):
        assert not validate_signal_data(np.ones(100), 0.0).is_valid
