"""
Error Handling Module for SleepTrip Analyses

This module provides the error and warning taxonomy used by the result
aggregator and the spectral peak extractor. Fatal errors carry actionable
recovery suggestions; warnings are logged and processing continues.

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import logging
import warnings
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Categories of errors that can occur during an analysis."""
    DATA_VALIDATION = "data_validation"
    PROCESSING = "processing"
    INCOMPATIBLE_INPUTS = "incompatible_inputs"


class SleepTripError(Exception):
    """
    Base exception for analysis errors with recovery suggestions.

    Attributes:
    -----------
    message : str
        Error message
    category : ErrorCategory
        Category of error
    suggestions : List[str]
        List of recovery suggestions
    context : Dict
        Additional context about the error
    """

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.PROCESSING,
                 suggestions: Optional[List[str]] = None,
                 context: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.category = category
        self.suggestions = suggestions or []
        self.context = context or {}

    def get_full_message(self) -> str:
        """
        Get full error message with suggestions.

        Returns:
        --------
        str
            Formatted error message with suggestions
        """
        msg = f"[{self.category.value.upper()}] {self.message}"

        if self.suggestions:
            msg += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                msg += f"\n  {i}. {suggestion}"

        if self.context:
            msg += "\n\nContext:"
            for key, value in self.context.items():
                msg += f"\n  - {key}: {value}"

        return msg


class IncompatibleInputsError(SleepTripError):
    """Results to be appended disagree on origin, kind or columns."""


class WrongResultTypeError(SleepTripError):
    """A result was not produced by the analysis an operation expects."""


class InsufficientRangeError(SleepTripError):
    """The requested frequency band is not covered by the data."""


class SleepTripWarning(UserWarning):
    """Base class for non-fatal analysis warnings."""


class RecombinationWarning(SleepTripWarning):
    """Previously appended results get their resnum ids renumbered."""


class InsufficientPaddingWarning(SleepTripWarning):
    """Less than one frequency step of data lies outside the requested band."""


def warn(message: str, category=SleepTripWarning):
    """
    Report a non-fatal condition.

    The message is logged at WARNING level and raised as a Python warning of
    the given category so callers can filter or escalate it.
    """
    logger.warning(message)
    warnings.warn(message, category, stacklevel=3)


class ErrorHandler:
    """
    Builds the fatal analysis errors with recovery suggestions.
    """

    @staticmethod
    def handle_incompatible_inputs(expected: Tuple[str, str],
                                   found: Tuple[str, str],
                                   position: int) -> IncompatibleInputsError:
        """
        Handle results with mismatching origin or kind.

        Parameters:
        -----------
        expected : tuple of str
            (origin, kind) of the first result
        found : tuple of str
            (origin, kind) of the offending result
        position : int
            Zero-based argument position of the offending result

        Returns:
        --------
        IncompatibleInputsError
            Error with recovery suggestions
        """
        return IncompatibleInputsError(
            f"result of origin {found[0]} and kind {found[1]} not compatible "
            f"with result of origin {expected[0]} and kind {expected[1]}",
            ErrorCategory.INCOMPATIBLE_INPUTS,
            suggestions=[
                "Only append results produced by the same analysis",
                "Check the order of the results passed in",
            ],
            context={"expected": expected, "found": found, "position": position}
        )

    @staticmethod
    def handle_incompatible_columns(expected: Sequence[str],
                                    found: Sequence[str],
                                    position: int) -> IncompatibleInputsError:
        """
        Handle results whose tables cannot be stacked.

        Returns:
        --------
        IncompatibleInputsError
            Error with recovery suggestions
        """
        return IncompatibleInputsError(
            f"result table at position {position} has columns {list(found)}, "
            f"expected {list(expected)}",
            ErrorCategory.INCOMPATIBLE_INPUTS,
            suggestions=[
                "Produce all results with the same analysis settings",
            ],
            context={"expected": list(expected), "found": list(found),
                     "position": position}
        )

    @staticmethod
    def handle_missing_resnum(position: int, n_missing: int) -> IncompatibleInputsError:
        """
        Handle an appended result with rows that carry no resnum.

        Returns:
        --------
        IncompatibleInputsError
            Error with recovery suggestions
        """
        return IncompatibleInputsError(
            f"appended result at position {position} has {n_missing} row(s) "
            "without a resnum",
            ErrorCategory.INCOMPATIBLE_INPUTS,
            suggestions=[
                "Append the original results again instead of editing the resnum column",
            ],
            context={"position": position, "n_missing": n_missing}
        )

    @staticmethod
    def handle_wrong_result_type(expected: Tuple[str, str],
                                 found: Tuple[str, str]) -> WrongResultTypeError:
        """
        Handle a result that was produced by a different analysis.

        Returns:
        --------
        WrongResultTypeError
            Error with recovery suggestions
        """
        return WrongResultTypeError(
            f"provided result structure does not match origin of '{expected[0]}' "
            f"and kind '{expected[1]}' structure.",
            ErrorCategory.DATA_VALIDATION,
            suggestions=[
                f"Pass a result of origin '{expected[0]}' and kind '{expected[1]}'",
                "Use compute_power_result() to produce a power spectrum result",
            ],
            context={"expected": expected, "found": found}
        )

    @staticmethod
    def handle_insufficient_range(group_id: int, foilim: Tuple[float, float],
                                  data_min: float, data_max: float) -> InsufficientRangeError:
        """
        Handle a frequency band that is not covered by the data.

        Returns:
        --------
        InsufficientRangeError
            Error with recovery suggestions
        """
        return InsufficientRangeError(
            "result structure does not provide sufficient data for requested "
            f"frequency range [{foilim[0]}, {foilim[1]}] Hz (resnum {group_id} "
            f"covers [{data_min}, {data_max}] Hz).",
            ErrorCategory.DATA_VALIDATION,
            suggestions=[
                f"Narrow foilim to lie within [{data_min}, {data_max}] Hz",
                "Recompute the power spectrum over a wider frequency range",
            ],
            context={"resnum": group_id, "foilim": list(foilim),
                     "data_range": [data_min, data_max]}
        )

    @staticmethod
    def handle_empty_band(group_id: int, foilim: Tuple[float, float],
                          resolution: float) -> InsufficientRangeError:
        """
        Handle a frequency band that lies between two frequency bins.

        Returns:
        --------
        InsufficientRangeError
            Error with recovery suggestions
        """
        return InsufficientRangeError(
            f"requested frequency range [{foilim[0]}, {foilim[1]}] Hz contains no "
            f"frequency bin of resnum {group_id} (resolution {resolution:g} Hz).",
            ErrorCategory.DATA_VALIDATION,
            suggestions=[
                f"Widen foilim to span at least one {resolution:g} Hz bin",
            ],
            context={"resnum": group_id, "foilim": list(foilim),
                     "resolution": resolution}
        )


def log_error_with_recovery(error: SleepTripError):
    """
    Log error with full recovery information.

    Parameters:
    -----------
    error : SleepTripError
        Error to log
    """
    logger.error(error.get_full_message())
