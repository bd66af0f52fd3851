"""Tests for conversation graph routing."""

from langchain_core.messages import AIMessage, HumanMessage, ToolMessage

from social_os.graphs.edges import pending_external_calls, route_agent_output
from social_os.graphs.state import ConversationState
from social_os.models.actions import ExternalAction
from tests.fakes import tool_call


def make_state(*messages, actions=("publishPost",)):
    return ConversationState(
        messages=list(messages),
        session_id="session-1",
        external_actions=[ExternalAction(name=name) for name in actions],
    )


class TestRouteAgentOutput:
    """Tests for the execute_tools / end decision."""

    def test_plain_reply_ends(self):
        state = make_state(HumanMessage(content="Hi"), AIMessage(content="Hello!"))
        assert route_agent_output(state) == "end"

    def test_empty_history_ends(self):
        assert route_agent_output(make_state()) == "end"

    def test_last_message_not_from_model_ends(self):
        state = make_state(
            AIMessage(content="", tool_calls=[tool_call("suggestPostIdeas", {"interests": []}, "c1")]),
            ToolMessage(content="ideas", tool_call_id="c1"),
        )
        assert route_agent_output(state) == "end"

    def test_local_tool_call_executes(self):
        state = make_state(AIMessage(content="", tool_calls=[tool_call("suggestPostIdeas", {}, "c1")]))
        assert route_agent_output(state) == "execute_tools"

    def test_client_action_ends(self):
        state = make_state(AIMessage(content="", tool_calls=[tool_call("publishPost", {}, "c1")]))
        assert route_agent_output(state) == "end"

    def test_only_first_call_decides_when_client_action_first(self):
        state = make_state(
            AIMessage(
                content="",
                tool_calls=[tool_call("publishPost", {}, "c1"), tool_call("generateImagePrompt", {}, "c2")],
            )
        )
        assert route_agent_output(state) == "end"

    def test_only_first_call_decides_when_local_tool_first(self):
        state = make_state(
            AIMessage(
                content="",
                tool_calls=[tool_call("generateImagePrompt", {}, "c1"), tool_call("publishPost", {}, "c2")],
            )
        )
        assert route_agent_output(state) == "execute_tools"

    def test_unknown_tool_still_routes_to_execution(self):
        state = make_state(AIMessage(content="", tool_calls=[tool_call("deletePost", {}, "c1")]))
        assert route_agent_output(state) == "execute_tools"

    def test_without_client_actions(self):
        state = make_state(
            AIMessage(content="", tool_calls=[tool_call("publishPost", {}, "c1")]),
            actions=(),
        )
        assert route_agent_output(state) == "execute_tools"


class TestPendingExternalCalls:
    """Tests for extracting client action requests."""

    def test_returns_client_calls_only(self):
        state = make_state(
            AIMessage(
                content="",
                tool_calls=[tool_call("publishPost", {"content": "Hi"}, "c1"), tool_call("suggestPostIdeas", {}, "c2")],
            )
        )

        pending = pending_external_calls(state)

        assert [call["id"] for call in pending] == ["c1"]
        assert pending[0]["args"] == {"content": "Hi"}

    def test_none_after_plain_reply(self):
        state = make_state(AIMessage(content="Done"))
        assert pending_external_calls(state) == []
