"""Tests for the HTTP API."""

import httpx
import pytest

from multichat.api import create_fastapi_app, set_app
from multichat.app import Application
from multichat.models import (
    Chat,
    MessageSet,
    Project,
    create_ai_message,
    create_user_message,
)


@pytest.fixture
async def application(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    app = Application(db_path=":memory:")
    await app.start()
    set_app(app)
    yield app
    await app.stop()
    set_app(None)


@pytest.fixture
async def client(application):
    # ASGITransport does not run the lifespan; the application is started above
    transport = httpx.ASGITransport(app=create_fastapi_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def seeded(application):
    storage = application.storage
    await storage.save_project(Project(id="p1", name="Project"))
    await storage.save_chat(Chat(id="chat1", title="Test", project_id="p1"))

    await storage.save_message_set(
        MessageSet(id="s1", chat_id="chat1", type="user", level=0, selected_block_type="user")
    )
    await storage.save_message(create_user_message("chat1", "s1", "Compare these", message_id="u1"))

    await storage.save_message_set(
        MessageSet(id="s2", chat_id="chat1", type="ai", level=0, selected_block_type="compare")
    )
    for i, model in enumerate(["m-a", "m-b"]):
        msg = create_ai_message("chat1", "s2", "compare", model, selected=i == 0, message_id=f"c{i}")
        msg.text = f"Answer {i}"
        msg.cost_usd = 0.25
        await storage.save_message(msg)
    return application


class TestConversationRoutes:
    """Tests for conversation endpoints."""

    async def test_get_conversation(self, client, seeded):
        response = await client.get("/api/chats/chat1/conversation")

        assert response.status_code == 200
        data = response.json()
        assert data["chat_id"] == "chat1"
        assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
        assert data["messages"][1]["content"] == "Answer 0"

    async def test_get_synthesis_conversation(self, client, seeded):
        response = await client.get("/api/chats/chat1/conversation/synthesis")

        assert response.status_code == 200
        messages = response.json()["messages"]
        assert messages[-1]["role"] == "user"
        assert 'sender="m-a"' in messages[-1]["content"]
        assert 'sender="m-b"' in messages[-1]["content"]

    async def test_unknown_chat(self, client):
        response = await client.get("/api/chats/missing/conversation")

        assert response.status_code == 404


class TestCostRoutes:
    """Tests for cost endpoints."""

    async def test_recompute_chat_cost(self, client, seeded):
        response = await client.post("/api/chats/chat1/cost/recompute")

        assert response.status_code == 200
        assert response.json() == {
            "chat_id": "chat1",
            "project_id": "p1",
            "total_cost_usd": 0.5,
            "formatted": "$0.5000",
        }

        project = await client.get("/api/projects/p1/cost")
        assert project.json()["total_cost_usd"] == 0.5

    async def test_get_chat_cost_before_rollup(self, client, seeded):
        """Test that a chat without a rollup shows the placeholder."""
        response = await client.get("/api/chats/chat1/cost")

        assert response.status_code == 200
        assert response.json() == {"id": "chat1", "total_cost_usd": None, "formatted": "–"}

    async def test_unknown_chat_and_project(self, client):
        assert (await client.get("/api/chats/missing/cost")).status_code == 404
        assert (await client.post("/api/chats/missing/cost/recompute")).status_code == 404
        assert (await client.get("/api/projects/missing/cost")).status_code == 404


class TestUsageRoute:
    """Tests for recording message usage."""

    async def test_record_usage_with_pricing(self, client, seeded):
        response = await client.post(
            "/api/messages/c1/usage",
            json={
                "prompt_tokens": 1000,
                "completion_tokens": 500,
                "prompt_price_per_token": 0.000001,
                "completion_price_per_token": 0.000002,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message_id"] == "c1"
        assert data["cost_usd"] == pytest.approx(0.002)
        assert data["formatted"] == "0.20¢"

        await seeded.cost_rollup.aclose()
        chat = await seeded.storage.get_chat("chat1")
        assert chat.total_cost_usd == pytest.approx(0.252)

    async def test_record_usage_without_cost_data(self, client, seeded):
        """Test that a generation id without a configured lookup leaves the cost unknown."""
        response = await client.post(
            "/api/messages/c1/usage",
            json={"prompt_tokens": 10, "completion_tokens": 5, "generation_id": "gen-1"},
        )

        assert response.status_code == 200
        assert response.json()["cost_usd"] is None
        assert response.json()["formatted"] == "–"

    async def test_unknown_message(self, client):
        response = await client.post(
            "/api/messages/missing/usage",
            json={"prompt_tokens": 1, "completion_tokens": 1},
        )

        assert response.status_code == 404
