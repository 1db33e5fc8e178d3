"""Tests for Application."""

import pytest

from multichat.app import Application
from multichat.models import Chat


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.delenv("COST_ROLLUP_MAX_ATTEMPTS", raising=False)
    monkeypatch.delenv("COST_ROLLUP_RETRY_DELAY", raising=False)


class TestApplicationStart:
    """Tests for Application.start()."""

    async def test_start_initializes_components(self):
        """Test that start initializes all components."""
        app = Application(db_path=":memory:")
        await app.start()

        assert app._storage is not None
        assert app._cost_rollup is not None
        assert app._chat_service is not None
        await app.stop()

    async def test_start_wires_dependencies(self):
        """Test that components share the same storage."""
        app = Application(db_path=":memory:")
        await app.start()

        assert app._cost_rollup._storage is app._storage
        assert app._chat_service._storage is app._storage
        assert app._chat_service._cost_rollup is app._cost_rollup
        await app.stop()

    async def test_start_without_api_key(self, caplog):
        """Test that completions are disabled without an API key."""
        app = Application(db_path=":memory:")

        with caplog.at_level("WARNING"):
            await app.start()

        assert app._llm is None
        assert app._chat_service._llm is None
        assert "completions disabled" in caplog.text
        await app.stop()

    async def test_start_with_openrouter_key(self, monkeypatch):
        """Test that the provider cost lookup is wired in and closed on stop."""
        monkeypatch.setenv("OPENROUTER_API_KEY", "test_key")
        app = Application(db_path=":memory:")
        await app.start()

        fetcher = app._cost_fetcher
        assert fetcher is not None
        assert app._chat_service._cost_fetcher is fetcher

        await app.stop()
        assert app._cost_fetcher is None
        assert fetcher._client.is_closed

    async def test_start_without_openrouter_key(self):
        app = Application(db_path=":memory:")
        await app.start()

        assert app._cost_fetcher is None
        assert app._chat_service._cost_fetcher is None
        await app.stop()

    async def test_start_rejects_bad_rollup_settings(self, monkeypatch):
        monkeypatch.setenv("COST_ROLLUP_MAX_ATTEMPTS", "0")
        app = Application(db_path=":memory:")

        with pytest.raises(ValueError):
            await app.start()
        await app.stop()

    async def test_start_creates_database_tables(self):
        """Test that start creates database tables."""
        app = Application(db_path=":memory:")
        await app.start()

        async with app._storage._conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ) as cursor:
            tables = [row[0] for row in await cursor.fetchall()]
            assert "messages" in tables
        await app.stop()


class TestApplicationStop:
    """Tests for Application.stop()."""

    async def test_stop_closes_storage(self):
        """Test that stop closes the storage connection."""
        app = Application(db_path=":memory:")
        await app.start()
        await app.stop()

        assert app._storage._conn is None

    async def test_stop_before_start(self):
        """Test that stop without start does nothing."""
        await Application(db_path=":memory:").stop()


class TestApplicationReset:
    """Tests for Application.reset()."""

    async def test_reset_clears_storage(self):
        """Test that reset clears storage data."""
        app = Application(db_path=":memory:")
        await app.start()
        await app.storage.save_chat(Chat(id="chat1"))

        await app.reset()

        assert await app.storage.get_chat("chat1") is None
        await app.stop()


class TestApplicationProperties:
    """Tests for Application properties."""

    async def test_properties(self):
        app = Application(db_path=":memory:")
        await app.start()

        assert app.storage is app._storage
        assert app.cost_rollup is app._cost_rollup
        assert app.chat_service is app._chat_service
        await app.stop()

    @pytest.mark.parametrize("name", ["storage", "cost_rollup", "chat_service"])
    def test_property_raises_when_not_started(self, name):
        """Test that properties raise when not started."""
        app = Application(db_path=":memory:")

        with pytest.raises(RuntimeError, match="not started"):
            getattr(app, name)
