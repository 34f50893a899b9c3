"""
Peak Confirmation Module

Confirmation surfaces for the spectral peak extractor. A confirmer is any
callable with the signature

    confirm(group_id, freqs, curve, channel_curves, channel_labels,
            candidates, label) -> Sequence[float] or None

where ``candidates`` is a ``(frequencies, powers)`` pair. Returning the
accepted peak frequencies (one per requested peak) accepts the group;
returning None or any negative value (PENDING) leaves it undecided, and the
extractor presents it again in a later round.

Classes:
    AcceptCandidates: Accepts the automatically proposed candidates
    ConsolePeakConfirmer: Terminal prompt for operator confirmation

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import logging
import sys
from typing import Callable, List, Optional, Sequence, TextIO, Tuple

import numpy as np

logger = logging.getLogger(__name__)

PENDING = -1.0

Candidates = Tuple[np.ndarray, np.ndarray]
Confirmer = Callable[..., Optional[Sequence[float]]]


def is_pending(values: Optional[Sequence[float]]) -> bool:
    """True if a confirmation answer leaves the group undecided."""
    if values is None:
        return True
    values = np.asarray(values, dtype=np.float64)
    return bool(np.any(values < 0))


class AcceptCandidates:
    """Confirmer that accepts the proposed candidate frequencies unchanged."""

    def __call__(self, group_id, freqs, curve, channel_curves, channel_labels,
                 candidates: Candidates, label: str) -> List[float]:
        logger.debug(f"Accepting candidates of resnum {group_id} unchanged")
        return [float(f) for f in candidates[0]]


class ConsolePeakConfirmer:
    """
    Confirm peak candidates at a terminal prompt.

    The operator sees the group label, a coarse text rendering of the
    channel-averaged power curve and the proposed candidates, then answers:

        <Enter>          accept the candidates
        10.2, 13.4       use these frequencies (snapped to the nearest sample)
        s                skip, the group is presented again later

    Parameters
    ----------
    input_func : callable, optional
        Function reading one answer line, default ``input``
    stream : file-like, optional
        Output stream, default ``sys.stdout``
    max_rows : int, optional
        Maximum number of frequency rows in the curve rendering
    bar_width : int, optional
        Width of the longest power bar in characters
    """

    def __init__(self, input_func: Callable[[str], str] = input,
                 stream: Optional[TextIO] = None,
                 max_rows: int = 25, bar_width: int = 50):
        self.input_func = input_func
        self.stream = stream
        self.max_rows = max_rows
        self.bar_width = bar_width

    def _write(self, text: str = ""):
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(text + "\n")

    def _render_curve(self, freqs: np.ndarray, curve: np.ndarray,
                      cand_freqs: np.ndarray):
        n_rows = min(self.max_rows, len(freqs))
        rows = np.unique(np.linspace(0, len(freqs) - 1, n_rows).round().astype(int))
        # Candidate bins are always shown
        cand_rows = [int(np.argmin(np.abs(freqs - f))) for f in cand_freqs]
        rows = np.union1d(rows, cand_rows)

        peak = float(np.max(curve)) if curve.size else 0.0
        for i in rows:
            length = int(round(self.bar_width * curve[i] / peak)) if peak > 0 else 0
            marker = " <" if i in cand_rows else ""
            self._write(f"{freqs[i]:8.2f} Hz | {'#' * max(length, 0)}{marker}")

    def _parse(self, answer: str, freqs: np.ndarray,
               peaknum: int) -> Optional[List[float]]:
        try:
            values = [float(v) for v in answer.replace(";", ",").split(",") if v.strip()]
        except ValueError:
            self._write(f"Could not read '{answer}' as frequencies.")
            return None

        if len(values) != peaknum:
            self._write(f"Please give exactly {peaknum} frequency value(s).")
            return None

        if any(v < freqs.min() or v > freqs.max() for v in values):
            self._write(f"Frequencies must lie within [{freqs.min():.2f}, {freqs.max():.2f}] Hz.")
            return None

        snapped = [float(freqs[np.argmin(np.abs(freqs - v))]) for v in values]
        return sorted(snapped)

    def __call__(self, group_id, freqs, curve, channel_curves, channel_labels,
                 candidates: Candidates, label: str) -> Optional[List[float]]:
        freqs = np.asarray(freqs, dtype=np.float64)
        curve = np.asarray(curve, dtype=np.float64)
        cand_freqs, cand_powers = candidates
        peaknum = len(cand_freqs)

        self._write("=" * 60)
        self._write(label)
        self._write("-" * 60)
        self._render_curve(freqs, curve, np.asarray(cand_freqs))
        self._write("-" * 60)
        for i, (f, p) in enumerate(zip(cand_freqs, cand_powers), 1):
            self._write(f"  peak {i}: {f:.2f} Hz (power {p:.4g})")

        prompt = (f"resnum {group_id}: [Enter] accept, frequencies separated "
                  f"by commas, or 's' to skip: ")
        while True:
            answer = self.input_func(prompt).strip()
            if answer == "":
                return [float(f) for f in cand_freqs]
            if answer.lower() in ("s", "skip"):
                logger.info(f"Peak confirmation of resnum {group_id} skipped")
                return None
            values = self._parse(answer, freqs, peaknum)
            if values is not None:
                return values
