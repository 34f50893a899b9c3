"""
Result Structure Module

Defines the tagged container exchanged between SleepTrip analyses. A result
records which analysis produced it (origin and kind), the long-format table
of values, and whether it is itself the product of appending several results.

Author: SleepTrip Development Team
Date: 2026-10-18
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import pandas as pd


RESNUM_COLUMN = "resnum"
FREQ_COLUMN = "freq"
CHANNEL_COLUMN = "channel"
POWER_COLUMN = "mean_powerDensity_over_segments"

# Producer tags of a full power spectrum result
POWER_ORIGIN = "st_power"
POWER_KIND = "power_full"


@dataclass
class Result:
    """
    Result of an analysis step.

    Attributes:
        origin: Tag of the producing analysis (e.g. 'st_power')
        kind: Sub-type of the result (e.g. 'power_full')
        table: Long-format table, one row per observation
        appended: True if this result was produced by appending results
        cfg: Configuration used to produce the result, if any
    """
    origin: str
    kind: str
    table: pd.DataFrame = field(default_factory=pd.DataFrame)
    appended: bool = False
    cfg: Optional[Dict[str, Any]] = None

    @property
    def tag(self) -> Tuple[str, str]:
        """(origin, kind) pair identifying the producing analysis."""
        return (self.origin, self.kind)

    @property
    def has_resnum(self) -> bool:
        return RESNUM_COLUMN in self.table.columns

    def __repr__(self) -> str:
        return (
            f"Result(origin='{self.origin}', kind='{self.kind}', "
            f"rows={len(self.table)}, appended={self.appended})"
        )
