"""
Analysis Configuration Module

This module handles configuration of the spectral analyses. Configurations
can be saved to and loaded from JSON files to keep repeated analyses
consistent.

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import json
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Tuple, Union


@dataclass
class PowerConfig:
    """Configuration for the power spectrum calculation."""

    window: str = "hann"
    resolution: float = 0.2  # Hz
    overlap_percent: float = 50.0

    def validate(self):
        """
        Validate power spectrum configuration parameters.

        Raises:
        -------
        ValueError
            If configuration parameters are invalid
        """
        if self.window not in ["hann", "hamming", "blackman", "bartlett"]:
            raise ValueError(f"Invalid window: {self.window}")

        if self.resolution <= 0:
            raise ValueError(f"Invalid resolution: {self.resolution}")

        if not 0 <= self.overlap_percent < 100:
            raise ValueError(f"Invalid overlap_percent: {self.overlap_percent}")


@dataclass
class FreqPeakConfig:
    """
    Configuration for the spectral peak extractor.

    channel      channel selection, 'all' or a list of specifiers
    foilim       (begin, end) frequency band of interest in Hz; the data
                 should extend at least one frequency step beyond it
    peaknum      number of expected peaks, 1 or 2
    smooth       smoothing window width in Hz
    minpeakdist  minimal distance between suggested peaks in Hz
    """

    channel: Union[str, List[str]] = "all"
    foilim: Tuple[float, float] = (6.0, 18.0)
    peaknum: int = 2
    smooth: float = 0.3
    minpeakdist: float = 1.0

    def __post_init__(self):
        """Normalize list-like fields coming from JSON."""
        self.foilim = tuple(float(f) for f in self.foilim)
        if not isinstance(self.channel, str):
            self.channel = list(self.channel)

    def validate(self):
        """
        Validate peak extraction parameters.

        Raises:
        -------
        ValueError
            If configuration parameters are invalid
        """
        if isinstance(self.channel, str):
            channels = [self.channel]
        else:
            channels = self.channel
        if not channels or not all(isinstance(c, str) for c in channels):
            raise ValueError(f"Invalid channel selection: {self.channel}")

        if len(self.foilim) != 2:
            raise ValueError(f"foilim must have two entries, got {self.foilim}")

        if self.foilim[0] >= self.foilim[1]:
            raise ValueError("foilim begin must be less than end")

        if self.peaknum not in [1, 2]:
            raise ValueError(f"Invalid peaknum: {self.peaknum} (must be 1 or 2)")

        if self.smooth < 0:
            raise ValueError(f"Invalid smooth: {self.smooth}")

        if self.minpeakdist <= 0:
            raise ValueError(f"Invalid minpeakdist: {self.minpeakdist}")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
        --------
        dict
            Configuration as dictionary
        """
        data = asdict(self)
        data["foilim"] = list(self.foilim)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FreqPeakConfig':
        """
        Create configuration from dictionary, ignoring unknown keys.

        Parameters:
        -----------
        data : dict
            Configuration dictionary

        Returns:
        --------
        FreqPeakConfig
            Configuration object
        """
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def save(self, file_path: str):
        """
        Save configuration to JSON file.

        Parameters:
        -----------
        file_path : str
            Path to save configuration file
        """
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, file_path: str) -> 'FreqPeakConfig':
        """
        Load configuration from JSON file.

        Parameters:
        -----------
        file_path : str
            Path to configuration file

        Returns:
        --------
        FreqPeakConfig
            Loaded configuration object
        """
        with open(file_path, 'r') as f:
            data = json.load(f)

        return cls.from_dict(data)
