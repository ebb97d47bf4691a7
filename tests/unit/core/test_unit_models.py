# tests/unit/core/test_unit_models.py — v2
"""Tests for core/models.py and core/errors.py."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from figmadump.core.errors import (
    DocumentFetchError,
    FetchTimeoutError,
    FigmaDumpError,
    PersistError,
    StageFatalError,
)
from figmadump.core.models import Arguments, Run, Skip, StageOutcome


class TestArguments:
    def test_defaults(self):
        args = Arguments()
        assert (args.team, args.project, args.file) == ("", "", "")
        assert args.output == Path("./out")
        assert args.format == "csv"
        assert args.has_identifier is False

    def test_ids_are_stripped(self):
        args = Arguments(team="  T1 ", project=None, file=" ")
        assert args.team == "T1"
        assert args.project == ""
        assert args.file == ""
        assert args.has_identifier is True

    def test_numeric_ids_become_strings(self):
        assert Arguments(project=42).project == "42"

    def test_frozen(self):
        with pytest.raises(ValidationError):
            Arguments().team = "T1"  # type: ignore[misc]

    def test_invalid_format(self):
        with pytest.raises(ValidationError):
            Arguments(format="xml")


class TestStageDecision:
    def test_equality(self):
        assert Run() == Run()
        assert Skip("a") == Skip("a")
        assert Skip("a") != Skip("b")

    def test_outcome_skipped(self):
        assert StageOutcome("projects", Skip("x")).skipped is True
        assert StageOutcome("projects", Run()).skipped is False


class TestErrors:
    @pytest.mark.parametrize("error", [
        StageFatalError("files", "HTTP 403"),
        DocumentFetchError("FA", "HTTP 404"),
        PersistError("document:FA", "disk full"),
        FetchTimeoutError("file FA", 2.0),
    ])
    def test_hierarchy(self, error):
        assert isinstance(error, FigmaDumpError)

    def test_messages(self):
        assert str(StageFatalError("files", "HTTP 403")) == "Stage 'files' failed: HTTP 403"
        assert "FA" in str(DocumentFetchError("FA", "x"))
        assert "2.0s" in str(FetchTimeoutError("file FA", 2.0))
