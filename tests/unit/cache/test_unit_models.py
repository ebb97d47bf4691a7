# tests/unit/cache/test_unit_models.py — v3
"""Tests for cache/models.py — ScopeKey."""

from __future__ import annotations

import pytest

from figmadump.cache.models import ScopeKey


class TestScopeKey:
    def test_constructors(self):
        assert ScopeKey.projects("T1") == ScopeKey("projects", "T1")
        assert ScopeKey.files(7) == ScopeKey("files", "7")
        assert ScopeKey.document("FA") == ScopeKey("document", "FA")

    def test_scope_id_coerced_to_str(self):
        assert ScopeKey("files", 7).scope_id == "7"  # type: ignore[arg-type]

    def test_unknown_entity(self):
        with pytest.raises(ValueError):
            ScopeKey("teams", "1")

    def test_hashable_and_frozen(self):
        key = ScopeKey.files("1")
        assert {key: 1}[ScopeKey.files(1)] == 1
        with pytest.raises(AttributeError):
            key.scope_id = "2"  # type: ignore[misc]

    def test_filename(self):
        assert ScopeKey.projects("T1").filename("csv") == "team_projects_by_team_T1.csv"
        assert ScopeKey.files("9").filename("json") == "project_files_by_project_9.json"
        assert ScopeKey.document("FA").filename("json") == "file_by_file_FA.json"

    def test_str(self):
        assert str(ScopeKey.document("FA")) == "document:FA"

    def test_columns_include_stamped_field(self):
        assert "team_id" in ScopeKey.projects("T1").columns
        assert "project_id" in ScopeKey.files("1").columns
        assert ScopeKey.document("FA").columns == ("id",)
