"""Tests for ResultRecord transitions and the QueryResult snapshot."""

import dataclasses

import pytest

from asyncquery import QueryResult, ResultRecord


def _fields(record):
    return record.loading, record.data, record.error, record.previous_data


class TestResultRecord:
    def test_initial(self):
        assert _fields(ResultRecord.initial(skip=False)) == (True, None, None, None)
        assert _fields(ResultRecord.initial(skip=True)) == (False, None, None, None)

    def test_begin_shifts_data(self):
        record = ResultRecord()
        record.succeed("A")
        record.begin()
        assert _fields(record) == (True, None, None, "A")

    def test_begin_after_failure_shifts_empty_data(self):
        record = ResultRecord()
        record.succeed("A")
        record.begin()
        record.fail(ValueError("x"))
        record.begin()
        # the failed attempt left data empty, so that is what gets shifted
        assert record.previous_data is None

    def test_fail_leaves_previous_data(self):
        record = ResultRecord()
        record.succeed("A")
        record.begin()
        err = ValueError("x")
        record.fail(err)
        assert _fields(record) == (False, None, err, "A")

    def test_skip_keeps_data(self):
        record = ResultRecord()
        record.succeed("A")
        record.skip()
        assert _fields(record) == (False, "A", None, None)


class TestQueryResult:
    def test_snapshot_is_frozen(self):
        snap = ResultRecord(data="A").snapshot()
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.data = "B"

    def test_equality_ignores_refetch(self):
        a = QueryResult(False, None, "A", None, refetch=lambda: None)
        b = QueryResult(False, None, "A", None)
        assert a == b

    def test_snapshot_does_not_track_record(self):
        record = ResultRecord()
        snap = record.snapshot()
        record.succeed("A")
        assert snap.data is None
