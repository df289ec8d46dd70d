"""Tests for per-job report marks."""

import json

import pytest

from variant_inspector.errors import MissingContextError, ReportStoreError
from variant_inspector.report_marks import JsonReportStore, ReportMarkSet


class TestReportMarkSet:
    """Tests for toggle semantics."""

    def test_unknown_job_is_not_marked(self):
        marks = ReportMarkSet()

        assert marks.is_marked("job-1", 100) is False
        assert marks.is_marked(None, 100) is False

    def test_toggle_adds_then_removes(self):
        marks = ReportMarkSet()

        assert marks.toggle("job-1", 100) is True
        assert marks.is_marked("job-1", 100)
        assert marks.toggle("job-1", 100) is False
        assert not marks.is_marked("job-1", 100)

    def test_jobs_are_independent(self):
        marks = ReportMarkSet()
        marks.toggle("job-1", 100)

        assert not marks.is_marked("job-2", 100)

    def test_missing_job_id_raises(self):
        marks = ReportMarkSet()

        with pytest.raises(MissingContextError, match="Job ID"):
            marks.toggle(None, 100)
        with pytest.raises(MissingContextError):
            marks.toggle("", 100)

    def test_marked_positions_sorted(self):
        marks = ReportMarkSet()
        for position in (300, 100, 200):
            marks.toggle("job-1", position)

        assert marks.marked_positions("job-1") == [100, 200, 300]


class TestJsonReportStore:
    """Tests for JSON file persistence of marks."""

    def test_missing_file_loads_empty(self, tmp_path):
        store = JsonReportStore(tmp_path / "marks.json")

        assert store.load() == {}

    def test_toggles_are_persisted(self, tmp_path):
        path = tmp_path / "nested" / "marks.json"
        marks = ReportMarkSet(JsonReportStore(path))
        marks.toggle("job-1", 200)
        marks.toggle("job-1", 100)

        assert json.loads(path.read_text()) == {"job-1": [100, 200]}

        reloaded = ReportMarkSet(JsonReportStore(path))
        assert reloaded.is_marked("job-1", 100)
        assert reloaded.is_marked("job-1", 200)

    def test_corrupt_file_raises_store_error(self, tmp_path):
        path = tmp_path / "marks.json"
        path.write_text("{not json")

        with pytest.raises(ReportStoreError, match="Invalid JSON"):
            ReportMarkSet(JsonReportStore(path))

    def test_wrong_shape_raises_store_error(self, tmp_path):
        path = tmp_path / "marks.json"
        path.write_text('["job-1", 100]')

        with pytest.raises(ReportStoreError, match="position lists"):
            JsonReportStore(path).load()
