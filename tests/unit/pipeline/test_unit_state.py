# tests/unit/pipeline/test_unit_state.py — v2
"""Tests for pipeline/state.py — RunResult."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from figmadump.core.models import Arguments
from figmadump.pipeline.state import RunResult, generate_run_id


class TestGenerateRunId:
    def test_format(self):
        run_id = generate_run_id(datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        assert re.fullmatch(r"20260102_030405_[0-9a-f]{5}", run_id)

    def test_unique(self):
        assert generate_run_id() != generate_run_id()


class TestRunResult:
    def test_defaults(self):
        result = RunResult(run_id="r1", arguments=Arguments())
        assert result.success is True
        assert result.all_files == []
        assert result.documents == {}

    def test_all_files_flattens_in_project_order(self):
        result = RunResult(run_id="r1", arguments=Arguments(team="T1"))
        result.files = {"1": [{"key": "FA"}, {"key": "FB"}], "2": [{"key": "FC"}]}
        assert [f["key"] for f in result.all_files] == ["FA", "FB", "FC"]

    def test_failures_mean_not_success(self):
        result = RunResult(run_id="r1", arguments=Arguments(file="FA"))
        result.failures["FA"] = "HTTP 403: Forbidden"
        assert result.success is False
        assert "1 failure(s)" in result.summary()
