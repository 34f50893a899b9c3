"""
Channel Selection Module

Resolves a channel selection specifier against the channel labels present in
a result. Specifiers follow the conventions of FieldTrip's channel selection:

    'all'              every available channel
    'C3'               a single label
    'C*'               shell-style wildcard
    '-EMG', '-EOG*'    remove matching channels from the selection

A list combines specifiers; a list made of negations only starts from 'all'.

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import logging
from fnmatch import fnmatchcase
from typing import List, Sequence, Union

logger = logging.getLogger(__name__)

ChannelSpec = Union[str, Sequence[str]]


def _matches(pattern: str, label: str) -> bool:
    if pattern == "all":
        return True
    return fnmatchcase(label, pattern)


def select_channels(selection: ChannelSpec, available: Sequence[str]) -> List[str]:
    """
    Select channel labels from the available ones.

    Parameters
    ----------
    selection : str or sequence of str
        Selection specifier(s), see module docstring.
    available : sequence of str
        Channel labels present in the data.

    Returns
    -------
    list of str
        Selected labels, in the order of ``available``.
    """
    if isinstance(selection, str):
        specifiers = [selection]
    else:
        specifiers = list(selection)

    for spec in specifiers:
        if not isinstance(spec, str):
            raise TypeError(f"channel specifiers must be strings, got {spec!r}")

    include = [s for s in specifiers if not s.startswith("-")]
    exclude = [s[1:] for s in specifiers if s.startswith("-")]
    if not include:
        include = ["all"]

    available = [str(label) for label in available]
    selected = [
        label for label in available
        if any(_matches(p, label) for p in include)
        and not any(_matches(p, label) for p in exclude)
    ]

    for pattern in include + exclude:
        if not any(_matches(pattern, label) for label in available):
            logger.debug(f"Channel specifier '{pattern}' matches no available channel")

    logger.debug(f"Selected {len(selected)} of {len(available)} channel(s)")
    return selected
