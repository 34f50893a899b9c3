"""
Test suite for appending result structures.

Author: SleepTrip Development Team
"""

import warnings

import numpy as np
import pytest

from sleeptrip.core.aggregate import append_results
from sleeptrip.core.result import RESNUM_COLUMN
from sleeptrip.analysis.error_handler import (
    IncompatibleInputsError,
    RecombinationWarning,
)


class TestAppendResults:
    """Tests for resnum assignment and table stacking."""

    def test_two_results_get_consecutive_ids(self, small_result):
        a = small_result(n_rows=4)
        b = small_result(n_rows=4, offset=10)

        res = append_results(a, b)

        assert len(res.table) == 8
        assert res.table.columns[0] == RESNUM_COLUMN
        assert res.table[RESNUM_COLUMN].tolist() == [1, 1, 1, 1, 2, 2, 2, 2]
        assert res.table["value"].tolist() == [0, 1, 2, 3, 10, 11, 12, 13]
        assert res.appended is True

    def test_single_result(self, small_result):
        res = append_results(small_result(n_rows=2))
        assert res.table[RESNUM_COLUMN].tolist() == [1, 1]
        assert res.appended

    def test_reappending_keeps_sub_groups(self, small_result):
        ab = append_results(small_result(n_rows=2), small_result(n_rows=2, offset=10))
        c = small_result(n_rows=3, offset=20)

        with pytest.warns(RecombinationWarning):
            res = append_results(ab, c)

        assert res.table[RESNUM_COLUMN].tolist() == [1, 1, 2, 2, 3, 3, 3]
        assert res.table["value"].tolist() == [0, 1, 10, 11, 20, 21, 22]
        assert list(res.table.columns).count(RESNUM_COLUMN) == 1

    def test_appended_result_in_second_position(self, small_result):
        ab = append_results(small_result(n_rows=1), small_result(n_rows=1, offset=10))
        c = small_result(n_rows=2, offset=20)

        with pytest.warns(RecombinationWarning):
            res = append_results(c, ab)

        assert res.table[RESNUM_COLUMN].tolist() == [1, 1, 2, 3]

    def test_old_ids_renumbered_in_ascending_order(self, small_result):
        prior = small_result(n_rows=3, appended=True, resnum=[5, 5, 2])

        with pytest.warns(RecombinationWarning):
            res = append_results(prior)

        # Old id 2 becomes 1, old id 5 becomes 2, row order unchanged
        assert res.table[RESNUM_COLUMN].tolist() == [2, 2, 1]
        assert res.table["channel"].tolist() == ["C0", "C1", "C2"]

    def test_ids_are_contiguous(self, small_result):
        prior = small_result(n_rows=4, appended=True, resnum=[3, 7, 7, 9])
        res = append_results(small_result(n_rows=1), prior, small_result(n_rows=1))

        ids = np.unique(res.table[RESNUM_COLUMN])
        assert ids.tolist() == [1, 2, 3, 4, 5]

    def test_no_warning_without_appended_inputs(self, small_result):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            append_results(small_result(), small_result())

    def test_output_takes_last_scaffold_without_cfg(self, small_result):
        a = small_result()
        b = small_result()
        res = append_results(a, b)

        assert res.origin == b.origin
        assert res.kind == b.kind
        assert res.cfg is None

    def test_inputs_not_modified(self, small_result):
        prior = small_result(n_rows=2, appended=True, resnum=[4, 4])
        before = prior.table.copy()

        with pytest.warns(RecombinationWarning):
            append_results(prior, small_result())

        assert prior.table.equals(before)
        assert prior.cfg == {"note": "test"}

    def test_stale_resnum_of_fresh_result_replaced(self, small_result):
        stale = small_result(n_rows=2, appended=False, resnum=[8, 9])
        res = append_results(small_result(n_rows=1), stale)

        assert res.table[RESNUM_COLUMN].tolist() == [1, 2, 2]

    def test_columns_matched_by_name(self, small_result):
        a = small_result(n_rows=2)
        b = small_result(n_rows=2, offset=10)
        b.table = b.table[["value", "channel"]]

        res = append_results(a, b)

        assert list(res.table.columns) == [RESNUM_COLUMN, "channel", "value"]
        assert res.table["value"].tolist() == [0, 1, 10, 11]
        assert res.table["channel"].tolist() == ["C0", "C1", "C0", "C1"]


class TestAppendResultsErrors:
    """Tests for incompatible inputs."""

    def test_different_origin_fails(self, small_result):
        a = small_result(origin="st_scoringdescriptives")
        b = small_result(origin="st_power")

        with pytest.raises(IncompatibleInputsError) as excinfo:
            append_results(a, b)

        message = str(excinfo.value)
        assert "st_power" in message
        assert "st_scoringdescriptives" in message

    def test_different_kind_fails(self, small_result):
        with pytest.raises(IncompatibleInputsError):
            append_results(small_result(kind="descriptive"), small_result(kind="other"))

    def test_different_columns_fail(self, small_result):
        a = small_result()
        b = small_result()
        b.table["extra"] = 1.0

        with pytest.raises(IncompatibleInputsError):
            append_results(a, b)

    def test_appended_result_with_missing_resnum_fails(self, small_result):
        broken = small_result(n_rows=3, appended=True, resnum=[1.0, np.nan, 2.0])

        with pytest.raises(IncompatibleInputsError, match="without a resnum"):
            append_results(small_result(), broken)

    def test_no_results_fails(self):
        with pytest.raises(ValueError):
            append_results()
