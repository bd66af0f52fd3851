"""State definitions for the LangGraph conversation flow."""

from collections.abc import Sequence
from typing import Annotated

from langchain_core.messages import BaseMessage
from langgraph.graph.message import add_messages
from pydantic import BaseModel, ConfigDict, Field

from social_os.models.actions import ExternalAction


class ConversationState(BaseModel):
    """Main conversation state for LangGraph.

    Threaded through every node of a turn. Node outputs are merged with the
    ``add_messages`` reducer, so message history only ever grows.
    """

    # Core conversation data
    messages: Annotated[Sequence[BaseMessage], add_messages]
    session_id: str

    # Personalization, fixed for the duration of a turn
    user_name: str | None = None
    user_style: str | None = None

    # Client-side actions available for this turn only
    external_actions: list[ExternalAction] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)  # Allow BaseMessage types

    def external_action_names(self) -> set[str]:
        """Names of the client-side actions offered this turn."""
        return {action.name for action in self.external_actions}
