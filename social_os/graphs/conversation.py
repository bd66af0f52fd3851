"""Main conversation graph implementation."""

from typing import Any

from langchain_core.language_models import BaseChatModel
from langgraph.errors import GraphRecursionError
from langgraph.graph import END, StateGraph

from social_os.errors import ToolLoopLimitError
from social_os.graphs.edges import route_agent_output
from social_os.graphs.nodes import create_agent_node, create_tools_node
from social_os.graphs.state import ConversationState
from social_os.services.llm import ModelRateLimiter
from social_os.tools.registry import ToolsRegistry
from social_os.utils.logging import get_logger

logger = get_logger(__name__)


def create_conversation_graph(
    llm: BaseChatModel, registry: ToolsRegistry, rate_limiter: ModelRateLimiter | None = None
):
    """Create the conversation graph.

    The agent node calls the model; when the model asks for local tools the
    tools node runs them and hands control back to the agent. The turn ends
    when the model answers without tool calls or asks for a client action.

    The graph is compiled without a checkpointer: the conversation service
    saves state itself once a turn has fully settled.

    Args:
        llm: Chat model supporting tool binding
        registry: Local tools available to the model
        rate_limiter: Optional limiter awaited before each model call

    Returns:
        Compiled LangGraph workflow
    """
    logger.info("Creating conversation graph")

    workflow = StateGraph(ConversationState)

    workflow.add_node("agent", create_agent_node(llm, registry, rate_limiter))
    workflow.add_node("tools", create_tools_node(registry))

    workflow.set_entry_point("agent")

    workflow.add_conditional_edges(
        "agent",
        route_agent_output,
        {
            "execute_tools": "tools",
            "end": END,
        },
    )

    workflow.add_edge("tools", "agent")

    compiled = workflow.compile()

    logger.info("Conversation graph created successfully")
    return compiled


class ConversationGraphManager:
    """Manager class for conversation graph operations."""

    def __init__(
        self,
        llm: BaseChatModel,
        registry: ToolsRegistry,
        rate_limiter: ModelRateLimiter | None = None,
        recursion_limit: int = 25,
    ):
        """Initialize the conversation graph manager.

        Args:
            llm: Chat model supporting tool binding
            registry: Local tools available to the model
            rate_limiter: Optional limiter awaited before each model call
            recursion_limit: Maximum graph steps per turn
        """
        self.graph = create_conversation_graph(llm, registry, rate_limiter)
        self.recursion_limit = recursion_limit

    async def run_turn(self, state: dict[str, Any]) -> ConversationState:
        """Run one turn through the graph until it settles.

        Args:
            state: Input state with the full message history of the turn

        Returns:
            The settled conversation state

        Raises:
            ToolLoopLimitError: If the turn exceeds the recursion limit
        """
        session_id = state["session_id"]
        logger.info(f"Running graph for session {session_id}")

        config = {
            "configurable": {"thread_id": session_id},
            "recursion_limit": self.recursion_limit,
        }

        try:
            result = await self.graph.ainvoke(state, config)
        except GraphRecursionError as e:
            logger.warning(f"Session {session_id} exceeded {self.recursion_limit} graph steps")
            raise ToolLoopLimitError(
                f"The turn exceeded {self.recursion_limit} steps without producing a final response"
            ) from e

        return ConversationState.model_validate(result)
