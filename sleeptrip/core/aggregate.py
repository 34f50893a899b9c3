"""
Result Aggregation Module

Appends matching result structures into one long-format result. Every
original result (or every sub-result of a previously appended one) receives
its own id in a leading 'resnum' column, so rows stay attributable after the
tables are stacked.

Functions:
    append_results: Append results of the same origin and kind

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import logging
from dataclasses import replace
from typing import List

import numpy as np
import pandas as pd

from sleeptrip.core.result import Result, RESNUM_COLUMN
from sleeptrip.analysis.error_handler import (
    ErrorHandler,
    RecombinationWarning,
    warn,
)

logger = logging.getLogger(__name__)


def _data_columns(result: Result) -> List[str]:
    return [c for c in result.table.columns if c != RESNUM_COLUMN]


def append_results(*results: Result) -> Result:
    """
    Append matching result structures.

    Parameters
    ----------
    *results : Result
        One or more results. All must share origin and kind with the first.

    Returns
    -------
    Result
        Appended result carrying the scaffold of the last input, with
        ``appended=True``, no ``cfg`` and a leading ``resnum`` column whose
        ids run contiguously from 1 in input order.

    Raises
    ------
    ValueError
        If no result is given
    IncompatibleInputsError
        If origin, kind or table columns of any result differ from the first,
        or an appended result has rows without a resnum. Columns are matched
        by name, so their order may differ.

    Notes
    -----
    A previously appended input contributes one new id per distinct old
    ``resnum`` (ascending); the old ids are discarded and a
    RecombinationWarning is issued.
    """
    if len(results) == 0:
        raise ValueError("append_results requires at least one result")

    first = results[0]
    expected_columns = _data_columns(first)

    any_appended = False
    for position, res in enumerate(results):
        if res.tag != first.tag:
            raise ErrorHandler.handle_incompatible_inputs(first.tag, res.tag, position)
        columns = _data_columns(res)
        if set(columns) != set(expected_columns):
            raise ErrorHandler.handle_incompatible_columns(expected_columns, columns, position)
        if res.appended and res.has_resnum:
            n_missing = int(res.table[RESNUM_COLUMN].isna().sum())
            if n_missing:
                raise ErrorHandler.handle_missing_resnum(position, n_missing)
        any_appended = any_appended or res.appended

    if any_appended:
        warn(
            "some results have been appended before, will re-create new "
            "resnum column with new ids",
            RecombinationWarning
        )

    next_id = 1
    id_columns = []
    tables = []
    for res in results:
        table = res.table
        if res.appended and res.has_resnum:
            old_ids = table[RESNUM_COLUMN].to_numpy()
            new_ids = np.empty(len(table), dtype=np.int64)
            for old_id in np.unique(old_ids):
                new_ids[old_ids == old_id] = next_id
                next_id += 1
            logger.debug(f"Renumbered {len(np.unique(old_ids))} sub-results of an appended result")
        else:
            if res.has_resnum:
                logger.debug("Discarding stale resnum column of a result that was not appended")
            new_ids = np.full(len(table), next_id, dtype=np.int64)
            next_id += 1

        id_columns.append(new_ids)
        tables.append(table[expected_columns])

    resnum = np.concatenate(id_columns)
    stacked = pd.concat(tables, axis=0, ignore_index=True)
    stacked.insert(0, RESNUM_COLUMN, resnum)

    logger.info(
        f"Appended {len(results)} result(s) of origin '{first.origin}' and kind "
        f"'{first.kind}' into {len(stacked)} rows with {next_id - 1} resnum id(s)"
    )

    return replace(results[-1], table=stacked, appended=True, cfg=None)
