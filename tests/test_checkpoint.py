"""Tests for the checkpoint stores."""

from datetime import UTC, datetime, timedelta

import pytest
from langchain_core.messages import AIMessage, HumanMessage, ToolMessage

from social_os.errors import CheckpointUnavailableError
from social_os.graphs.state import ConversationState
from social_os.models.actions import ExternalAction
from social_os.services.checkpoint import InMemoryCheckpointStore, JsonFileCheckpointStore, generate_session_id
from tests.fakes import tool_call


def make_state(session_id="s1"):
    return ConversationState(
        messages=[
            HumanMessage(content="Post something", id="m1"),
            AIMessage(content="", tool_calls=[tool_call("publishPost", {"content": "Hi"}, "c1")], id="m2"),
            ToolMessage(content="Published", tool_call_id="c1", name="publishPost", id="m3"),
            AIMessage(content="Done!", id="m4"),
        ],
        session_id=session_id,
        user_name="Ada",
        user_style="Dry and witty",
        external_actions=[ExternalAction(name="publishPost")],
    )


def test_generated_session_ids_are_unique():
    assert generate_session_id() != generate_session_id()


class TestInMemoryCheckpointStore:
    """Tests for the in-memory store."""

    @pytest.mark.asyncio
    async def test_round_trip(self):
        store = InMemoryCheckpointStore()
        await store.save("s1", make_state())

        loaded = await store.load("s1")

        assert [m.id for m in loaded.messages] == ["m1", "m2", "m3", "m4"]
        assert loaded.user_name == "Ada"
        assert loaded.user_style == "Dry and witty"

    @pytest.mark.asyncio
    async def test_external_actions_are_not_saved(self):
        store = InMemoryCheckpointStore()
        await store.save("s1", make_state())

        assert (await store.load("s1")).external_actions == []

    @pytest.mark.asyncio
    async def test_unknown_session(self):
        assert await InMemoryCheckpointStore().load("missing") is None

    @pytest.mark.asyncio
    async def test_loaded_state_is_a_copy(self):
        store = InMemoryCheckpointStore()
        await store.save("s1", make_state())

        loaded = await store.load("s1")
        loaded.messages[0].content = "changed"

        assert (await store.load("s1")).messages[0].content == "Post something"

    @pytest.mark.asyncio
    async def test_delete(self):
        store = InMemoryCheckpointStore()
        await store.save("s1", make_state())

        assert await store.delete("s1") is True
        assert await store.delete("s1") is False
        assert store.get_session_count() == 0

    @pytest.mark.asyncio
    async def test_sessions_kept_without_timeout(self):
        store = InMemoryCheckpointStore()
        await store.save("s1", make_state())
        store._last_activity["s1"] = datetime.now(UTC) - timedelta(days=30)

        assert store.get_session_count() == 1

    @pytest.mark.asyncio
    async def test_expired_sessions_are_evicted(self):
        store = InMemoryCheckpointStore(session_timeout_minutes=30)
        await store.save("old", make_state("old"))
        await store.save("new", make_state("new"))
        store._last_activity["old"] = datetime.now(UTC) - timedelta(minutes=31)

        assert store.get_session_count() == 1
        assert await store.load("old") is None
        assert await store.load("new") is not None


class TestJsonFileCheckpointStore:
    """Tests for the JSON file store."""

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path):
        store = JsonFileCheckpointStore(tmp_path)
        await store.save("s1", make_state())

        loaded = await JsonFileCheckpointStore(tmp_path).load("s1")

        assert [type(m) for m in loaded.messages] == [HumanMessage, AIMessage, ToolMessage, AIMessage]
        assert loaded.messages[1].tool_calls[0]["id"] == "c1"
        assert loaded.messages[2].tool_call_id == "c1"
        assert loaded.user_name == "Ada"
        assert loaded.external_actions == []

    @pytest.mark.asyncio
    async def test_unknown_session(self, tmp_path):
        assert await JsonFileCheckpointStore(tmp_path).load("missing") is None

    @pytest.mark.asyncio
    async def test_session_ids_map_to_distinct_files(self, tmp_path):
        store = JsonFileCheckpointStore(tmp_path)
        await store.save("alice/1", make_state("alice/1"))

        assert await store.load("alice_1") is None
        assert await store.load("alice.1") is None
        assert (await store.load("alice/1")).session_id == "alice/1"

        await store.save("alice_1", make_state("alice_1"))
        assert len(list(tmp_path.iterdir())) == 2
        assert (await store.load("alice/1")).session_id == "alice/1"
        assert (await store.load("alice_1")).session_id == "alice_1"

    @pytest.mark.asyncio
    async def test_file_of_another_session_is_rejected(self, tmp_path):
        store = JsonFileCheckpointStore(tmp_path)
        await store.save("alice", make_state("alice"))
        store._path("alice").replace(store._path("bob"))

        with pytest.raises(CheckpointUnavailableError, match="another session"):
            await store.load("bob")

    @pytest.mark.asyncio
    async def test_corrupt_file(self, tmp_path):
        store = JsonFileCheckpointStore(tmp_path)
        store._path("s1").write_text("{not json", encoding="utf-8")

        with pytest.raises(CheckpointUnavailableError):
            await store.load("s1")

    @pytest.mark.asyncio
    async def test_delete(self, tmp_path):
        store = JsonFileCheckpointStore(tmp_path)
        await store.save("s1", make_state())

        assert await store.delete("s1") is True
        assert await store.delete("s1") is False
        assert await store.load("s1") is None
