"""Tests for configuration helpers."""

from pathlib import Path

import pytest

from multichat.config import (
    DEFAULT_DB_PATH,
    PROJECT_ROOT,
    CostRollupSettings,
    load_cost_rollup_settings,
    resolve_db_path,
)


class TestResolveDbPath:
    """Tests for resolve_db_path()."""

    def test_default(self):
        assert resolve_db_path() == DEFAULT_DB_PATH
        assert resolve_db_path("") == DEFAULT_DB_PATH

    def test_memory(self):
        assert resolve_db_path(":memory:") == ":memory:"

    def test_relative_is_under_project_root(self):
        assert resolve_db_path("03_data/test.db") == PROJECT_ROOT / "03_data" / "test.db"

    def test_absolute_is_kept(self, tmp_path):
        path = tmp_path / "x.db"
        assert resolve_db_path(str(path)) == Path(path)


class TestCostRollupSettings:
    """Tests for load_cost_rollup_settings()."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("COST_ROLLUP_MAX_ATTEMPTS", raising=False)
        monkeypatch.delenv("COST_ROLLUP_RETRY_DELAY", raising=False)

        assert load_cost_rollup_settings() == CostRollupSettings(max_attempts=3, retry_delay=0.2)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("COST_ROLLUP_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("COST_ROLLUP_RETRY_DELAY", "0")

        assert load_cost_rollup_settings() == CostRollupSettings(max_attempts=5, retry_delay=0)

    @pytest.mark.parametrize(
        "name,value",
        [("COST_ROLLUP_MAX_ATTEMPTS", "0"), ("COST_ROLLUP_RETRY_DELAY", "-1")],
    )
    def test_invalid(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ValueError):
            load_cost_rollup_settings()
