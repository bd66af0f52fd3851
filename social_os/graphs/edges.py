"""Edge logic and routing for the conversation graph."""

from typing import Literal

from langchain_core.messages import AIMessage

from social_os.graphs.state import ConversationState
from social_os.utils.logging import get_logger

logger = get_logger(__name__)


def route_agent_output(state: ConversationState) -> Literal["execute_tools", "end"]:
    """Route from the agent node based on its latest response.

    Only the first tool call decides the route: when it names a client-side
    action the turn ends so the client can run it, even if later calls name
    local tools.
    """
    if not state.messages:
        return "end"

    last_message = state.messages[-1]
    if not isinstance(last_message, AIMessage) or not last_message.tool_calls:
        return "end"

    first_call_name = last_message.tool_calls[0]["name"]
    if first_call_name in state.external_action_names():
        logger.info(f"Tool call {first_call_name} is a client action, ending turn for session {state.session_id}")
        return "end"

    logger.debug(f"Routing {len(last_message.tool_calls)} tool calls to execution")
    return "execute_tools"


def pending_external_calls(state: ConversationState) -> list[dict]:
    """Tool calls of the last AI message that the client has to execute."""
    if not state.messages:
        return []

    last_message = state.messages[-1]
    if not isinstance(last_message, AIMessage):
        return []

    external_names = state.external_action_names()
    return [call for call in last_message.tool_calls if call["name"] in external_names]
