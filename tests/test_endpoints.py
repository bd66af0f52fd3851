"""Tests for API endpoints."""

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from social_os.config import AgentConfig
from social_os.errors import ModelUnavailableError
from social_os.main import app
from social_os.services.checkpoint import InMemoryCheckpointStore
from social_os.services.conversation import ConversationService, get_conversation_service
from social_os.services.timeline import TimelineService, get_timeline_service
from social_os.tools.registry import ToolsRegistry
from tests.fakes import FakeChatModel, tool_call

PUBLISH_ACTION = {
    "name": "publishPost",
    "description": "Publish a post to the user's timeline",
    "parameters": [{"name": "content", "type": "string", "description": "The post text"}],
}


@pytest.fixture
def llm():
    return FakeChatModel()


@pytest.fixture
def timeline():
    return TimelineService()


@pytest.fixture
def client(llm, timeline):
    service = ConversationService(
        config=AgentConfig(max_message_chars=100),
        llm=llm,
        registry=ToolsRegistry(),
        checkpoint_store=InMemoryCheckpointStore(),
    )
    app.dependency_overrides[get_conversation_service] = lambda: service
    app.dependency_overrides[get_timeline_service] = lambda: timeline
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_user(client, username="ada", display_name="Ada Lovelace"):
    response = client.post(
        "/users", json={"username": username, "display_name": display_name, "email": f"{username}@example.com"}
    )
    assert response.status_code == 201
    return response.json()


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check(self, client):
        response = client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert "timestamp" in data


class TestConversationEndpoint:
    """Tests for the conversation endpoints."""

    def test_conversation_reply(self, client, llm):
        llm.responses = [AIMessage(content="Hi! Want some post ideas?")]

        response = client.post("/conversation", json={"message": "Hello", "session_id": "s1"})
        data = response.json()

        assert response.status_code == 200
        assert data["response"] == "Hi! Want some post ideas?"
        assert data["session_id"] == "s1"
        assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
        assert data["pending_actions"] == []

    def test_conversation_generates_session_id(self, client):
        data = client.post("/conversation", json={"message": "Hello"}).json()

        assert isinstance(data["session_id"], str)
        assert len(data["session_id"]) > 0

    def test_conversation_with_tool_messages(self, client, llm):
        llm.responses = [
            AIMessage(content="", tool_calls=[tool_call("generateImagePrompt", {"description": "a cat"}, "c1")]),
            AIMessage(content="Here is your image prompt."),
        ]

        data = client.post("/conversation", json={"message": "Image please", "session_id": "s1"}).json()

        assert [m["role"] for m in data["messages"]] == ["user", "assistant", "tool", "assistant"]
        assert data["messages"][1]["tool_calls"] == [
            {"id": "c1", "name": "generateImagePrompt", "args": {"description": "a cat"}}
        ]
        assert data["messages"][2]["tool_call_id"] == "c1"
        assert data["messages"][2]["is_error"] is False

    def test_pending_actions_and_resume(self, client, llm):
        llm.responses = [
            AIMessage(content="Publishing.", tool_calls=[tool_call("publishPost", {"content": "Hello"}, "c1")]),
            AIMessage(content="Your post is live."),
        ]

        first = client.post(
            "/conversation", json={"message": "Post hello", "session_id": "s1", "actions": [PUBLISH_ACTION]}
        ).json()
        assert first["pending_actions"] == [{"id": "c1", "name": "publishPost", "args": {"content": "Hello"}}]

        second = client.post(
            "/conversation",
            json={
                "session_id": "s1",
                "actions": [PUBLISH_ACTION],
                "action_results": [{"call_id": "c1", "content": "Published"}],
            },
        ).json()
        assert second["response"] == "Your post is live."
        assert second["messages"][0]["role"] == "tool"

    def test_user_id_personalizes_agent(self, client, llm):
        user = create_user(client)

        response = client.post("/conversation", json={"message": "Hello", "user_id": user["id"]})

        assert response.status_code == 200
        system_prompt = llm.calls[0][0].content
        assert "agent for Ada Lovelace" in system_prompt
        assert "Tone: casual" in system_prompt

    def test_unknown_user_id(self, client):
        response = client.post("/conversation", json={"message": "Hello", "user_id": "nobody"})
        assert response.status_code == 404

    def test_empty_message(self, client):
        response = client.post("/conversation", json={"message": ""})
        assert response.status_code == 400

    def test_too_long_message(self, client):
        response = client.post("/conversation", json={"message": "x" * 101})

        assert response.status_code == 400
        assert "too long" in response.json()["detail"]

    def test_invalid_action_parameter_name(self, client, llm):
        action = {"name": "publishPost", "parameters": [{"name": "_draft"}]}

        response = client.post("/conversation", json={"message": "Hello", "actions": [action]})

        assert response.status_code == 422
        assert llm.calls == []

    def test_model_unavailable(self, client, llm):
        llm.error = ModelUnavailableError("overloaded")

        response = client.post("/conversation", json={"message": "Hello"})

        assert response.status_code == 503

    def test_history_and_delete(self, client, llm):
        llm.responses = [AIMessage(content="Hi there")]
        client.post("/conversation", json={"message": "Hello", "session_id": "s1"})

        history = client.get("/conversation/s1")
        assert history.status_code == 200
        assert [m["content"] for m in history.json()["messages"]] == ["Hello", "Hi there"]

        assert client.delete("/conversation/s1").status_code == 204
        assert client.get("/conversation/s1").status_code == 404
        assert client.delete("/conversation/s1").status_code == 404


class TestTimelineEndpoints:
    """Tests for the user and post endpoints."""

    def test_create_and_get_user(self, client):
        user = create_user(client)

        assert user["avatar_url"].endswith("seed=ada")
        assert client.get(f"/users/{user['id']}").json()["username"] == "ada"

        agent = client.get(f"/users/{user['id']}/agent").json()
        assert agent["agent_name"] == "Ada Lovelace's Agent"
        assert agent["writing_style"] == {"tone": "casual", "length": "medium"}

    def test_duplicate_user(self, client):
        create_user(client)

        response = client.post("/users", json={"username": "ada", "display_name": "Ada", "email": "other@example.com"})

        assert response.status_code == 409

    def test_invalid_email(self, client):
        response = client.post("/users", json={"username": "bob", "display_name": "Bob", "email": "not-an-email"})
        assert response.status_code == 422

    def test_unknown_user(self, client):
        assert client.get("/users/nobody").status_code == 404
        assert client.get("/users/nobody/agent").status_code == 404

    def test_posts(self, client):
        user = create_user(client)
        client.post("/posts", json={"user_id": user["id"], "content": "First"})
        client.post("/posts", json={"user_id": user["id"], "content": "Secret", "is_public": False})
        client.post("/posts", json={"user_id": user["id"], "content": "Second", "ai_generated": True})

        posts = client.get("/posts").json()

        assert [p["content"] for p in posts] == ["Second", "First"]
        assert posts[0]["user"]["display_name"] == "Ada Lovelace"
        assert posts[0]["ai_generated"] is True

    def test_post_for_unknown_user(self, client):
        response = client.post("/posts", json={"user_id": "nobody", "content": "Hello"})
        assert response.status_code == 404

    def test_blank_post(self, client):
        user = create_user(client)
        response = client.post("/posts", json={"user_id": user["id"], "content": "   "})
        assert response.status_code == 400

    def test_invalid_limit(self, client):
        assert client.get("/posts?limit=0").status_code == 400
        assert client.get("/users?offset=-1").status_code == 400


class TestAPIDocumentation:
    """Tests for API documentation endpoints."""

    def test_openapi_json_available(self, client):
        response = client.get("/openapi.json")

        assert response.status_code == 200
        assert "/conversation" in response.json()["paths"]

    def test_swagger_ui_available(self, client):
        response = client.get("/docs")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
