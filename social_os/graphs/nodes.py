"""Node implementations for the conversation graph."""

from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, SystemMessage, ToolMessage
from langchain_core.messages.tool import ToolCall
from langchain_core.runnables import RunnableConfig

from social_os.errors import InvalidArgumentsError, ModelUnavailableError, UnknownToolError
from social_os.graphs.state import ConversationState
from social_os.services.llm import ModelRateLimiter
from social_os.tools.external_actions import build_tool_set
from social_os.tools.registry import ToolsRegistry
from social_os.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_USER_NAME = "the user"
DEFAULT_USER_STYLE = "Friendly and conversational"


def get_system_prompt(user_name: str | None = None, user_style: str | None = None) -> str:
    """Generate the personalized system prompt.

    Args:
        user_name: Display name of the user the agent works for
        user_style: Free-text description of the user's writing style

    Returns:
        System prompt string
    """
    return f"""You are a personalized AI agent for {user_name or DEFAULT_USER_NAME}.

Your role is to:
- Help create engaging social media posts in the user's style
- Generate creative content ideas
- Assist with image generation
- Provide suggestions for growing engagement

Writing Style: {user_style or DEFAULT_USER_STYLE}

Be helpful, creative, and align your responses with the user's personality and preferences.
When generating content, make it authentic and engaging for social media."""


def create_agent_node(llm: BaseChatModel, registry: ToolsRegistry, rate_limiter: ModelRateLimiter | None = None):
    """Create the chat node bound to a model and tool registry."""

    async def agent_node(state: ConversationState, config: RunnableConfig) -> dict[str, Any]:
        """Call the model with the personalized prompt and every available tool.

        The tool set is rebuilt on each call since client actions change per turn.
        """
        logger.info(f"Agent node processing for session {state.session_id}")

        tools = build_tool_set(registry, state.external_actions)
        model = llm.bind_tools(tools) if tools else llm

        system_message = SystemMessage(content=get_system_prompt(state.user_name, state.user_style))

        if rate_limiter is not None:
            await rate_limiter.acquire()

        try:
            response = await model.ainvoke([system_message, *state.messages], config)
        except Exception as e:
            logger.error(f"Model call failed for session {state.session_id}: {e}", exc_info=True)
            raise ModelUnavailableError(f"Language model request failed: {e}") from e

        if not isinstance(response, AIMessage):
            raise ModelUnavailableError(f"Language model returned {type(response).__name__}, expected AIMessage")

        if response.tool_calls:
            logger.info(f"Agent requesting tools: {[tc['name'] for tc in response.tool_calls]}")

        return {"messages": [response]}

    return agent_node


def create_tools_node(registry: ToolsRegistry):
    """Create the node that runs the local tools requested by the model."""

    async def tools_node(state: ConversationState) -> dict[str, Any]:
        """Execute every tool call of the last AI message, in order.

        Each call gets exactly one ToolMessage with its id. Failures are
        reported to the model as error results instead of ending the turn.
        """
        last_message = state.messages[-1]
        tool_calls = last_message.tool_calls if isinstance(last_message, AIMessage) else []
        external_names = state.external_action_names()

        logger.info(f"Executing {len(tool_calls)} tool calls for session {state.session_id}")

        results = []
        for tool_call in tool_calls:
            results.append(await _execute_tool_call(registry, tool_call, external_names))

        return {"messages": results}

    return tools_node


async def _execute_tool_call(registry: ToolsRegistry, tool_call: ToolCall, external_names: set[str]) -> ToolMessage:
    tool_name = tool_call["name"]
    call_id = tool_call["id"]

    if tool_name in external_names:
        logger.warning(f"Client action {tool_name} requested after a local tool call; not executed")
        return ToolMessage(
            content=(
                f"Error: {tool_name} is executed by the client application. "
                "Request it on its own, as the first tool call of a response."
            ),
            tool_call_id=call_id,
            name=tool_name,
            status="error",
        )

    try:
        result = await registry.invoke(tool_name, tool_call.get("args"))
        logger.debug(f"Tool {tool_name} succeeded: {result[:100]}...")
        return ToolMessage(content=result, tool_call_id=call_id, name=tool_name)

    except (InvalidArgumentsError, UnknownToolError) as e:
        logger.warning(f"Rejected tool call {tool_name}: {e}")
        return ToolMessage(content=f"Error: {e}", tool_call_id=call_id, name=tool_name, status="error")

    except Exception as e:
        logger.error(f"Tool {tool_name} failed: {e}", exc_info=True)
        return ToolMessage(
            content=f"Error: {tool_name} failed: {e}", tool_call_id=call_id, name=tool_name, status="error"
        )
