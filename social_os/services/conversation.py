"""Conversation service: the turn interface around the LangGraph agent."""

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, ToolMessage

from social_os.config import AgentConfig
from social_os.errors import CheckpointUnavailableError
from social_os.graphs.conversation import ConversationGraphManager
from social_os.graphs.edges import pending_external_calls
from social_os.graphs.state import ConversationState
from social_os.models.actions import ActionResult, ExternalAction
from social_os.services.checkpoint import (
    CheckpointStore,
    InMemoryCheckpointStore,
    JsonFileCheckpointStore,
    generate_session_id,
)
from social_os.services.llm import ModelRateLimiter, create_chat_model
from social_os.tools.external_actions import convert_actions_to_tools
from social_os.tools.registry import ToolsRegistry, get_tools_registry
from social_os.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_RESPONSE = "I apologize, but I couldn't generate a response. Please try again."
MISSING_RESULT = "Error: the client application returned no result for this action."
NOT_EXECUTED = "Error: this tool was not run because the turn paused for a client action."


@dataclass
class TurnResult:
    """Outcome of one conversation turn."""

    session_id: str
    messages: list[BaseMessage]  # Messages appended during this turn
    response: str
    pending_actions: list[dict[str, Any]] = field(default_factory=list)


def message_text(message: BaseMessage) -> str:
    """Extract the plain text of a message, skipping tool-use blocks."""
    content = message.content
    if isinstance(content, str):
        return content

    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def create_checkpoint_store(config: AgentConfig) -> CheckpointStore:
    """Pick the checkpoint store for a configuration."""
    if config.checkpoint_dir:
        logger.info(f"Using JSON file checkpoints in {config.checkpoint_dir}")
        return JsonFileCheckpointStore(config.checkpoint_dir)
    return InMemoryCheckpointStore(session_timeout_minutes=config.session_timeout_minutes)


class ConversationService:
    """Service running conversation turns through the LangGraph agent.

    Turns of one session run one at a time; different sessions run
    concurrently. State is checkpointed only after a turn has settled, so a
    failed or cancelled turn leaves the previous checkpoint untouched.
    """

    def __init__(
        self,
        config: AgentConfig | None = None,
        llm: BaseChatModel | None = None,
        registry: ToolsRegistry | None = None,
        checkpoint_store: CheckpointStore | None = None,
        rate_limiter: ModelRateLimiter | None = None,
    ):
        """Initialize conversation service.

        Args:
            config: Agent configuration (defaults to environment variables)
            llm: Chat model; created from the configuration on first use when omitted
            registry: Local tools registry
            checkpoint_store: Store for session state
            rate_limiter: Limiter for model requests
        """
        self.config = config or AgentConfig.from_env()
        self.registry = registry or get_tools_registry()
        self.checkpoint_store = checkpoint_store or create_checkpoint_store(self.config)
        self.rate_limiter = rate_limiter or ModelRateLimiter(self.config.requests_per_minute)
        self._llm = llm
        self._graph_manager: ConversationGraphManager | None = None
        self._session_locks: dict[str, asyncio.Lock] = {}
        self._lock_waiters: dict[str, int] = {}

        logger.info("ConversationService initialized with LangGraph")

    @property
    def graph_manager(self) -> ConversationGraphManager:
        if self._graph_manager is None:
            llm = self._llm or create_chat_model(self.config)
            self._graph_manager = ConversationGraphManager(
                llm,
                self.registry,
                rate_limiter=self.rate_limiter,
                recursion_limit=self.config.recursion_limit,
            )
        return self._graph_manager

    async def run_turn(
        self,
        message: str | None,
        session_id: str | None = None,
        *,
        user_name: str | None = None,
        user_style: str | None = None,
        external_actions: Sequence[ExternalAction] = (),
        action_results: Sequence[ActionResult] = (),
    ) -> TurnResult:
        """Process one user turn and return what it added to the conversation.

        Args:
            message: New user message; may be omitted when resuming with action results
            session_id: Conversation id; a new one is generated when omitted
            user_name: Display name used in the system prompt
            user_style: Writing style description used in the system prompt
            external_actions: Client-side actions available this turn
            action_results: Results of client actions requested in the previous turn

        Returns:
            TurnResult with the turn's messages, reply text and pending client actions

        Raises:
            ValueError: If the input is empty, too long, or answers unknown calls
            ModelUnavailableError: If the language model call fails
            CheckpointUnavailableError: If state cannot be loaded or saved
            ToolLoopLimitError: If the turn never settles
        """
        if not message and not action_results:
            raise ValueError("A message or action results are required.")
        if message:
            self._validate_message_length(message)
        self._validate_external_actions(external_actions)

        session_id = session_id or generate_session_id()

        async with self._session_lock(session_id):
            previous = await self._load(session_id)
            history = list(previous.messages) if previous else []

            new_messages: list[BaseMessage] = _settle_pending_calls(
                history, action_results, self._unexecuted_local_tools(external_actions)
            )
            if message:
                new_messages.append(HumanMessage(content=message))

            logger.info(f"Processing turn for session {session_id} with {len(history)} prior messages")

            state = {
                "messages": [*history, *new_messages],
                "session_id": session_id,
                "user_name": user_name or (previous.user_name if previous else None),
                "user_style": user_style or (previous.user_style if previous else None),
                "external_actions": list(external_actions),
            }

            result = await self.graph_manager.run_turn(state)
            await self._save(session_id, result.model_copy(update={"external_actions": []}))

        turn_messages = list(result.messages[len(history) :])
        pending_actions = pending_external_calls(result)

        return TurnResult(
            session_id=session_id,
            messages=turn_messages,
            response=self._response_text(turn_messages, pending_actions),
            pending_actions=pending_actions,
        )

    async def get_history(self, session_id: str) -> list[BaseMessage] | None:
        """Get the checkpointed messages of a session, or None if unknown."""
        state = await self._load(session_id)
        return list(state.messages) if state else None

    async def reset_session(self, session_id: str) -> bool:
        """Forget a session. Returns False if it did not exist."""
        async with self._session_lock(session_id):
            try:
                return await self.checkpoint_store.delete(session_id)
            except CheckpointUnavailableError:
                raise
            except Exception as e:
                raise CheckpointUnavailableError(f"Failed to delete session {session_id}: {e}") from e

    async def _load(self, session_id: str) -> ConversationState | None:
        try:
            return await self.checkpoint_store.load(session_id)
        except CheckpointUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Checkpoint load failed for session {session_id}: {e}", exc_info=True)
            raise CheckpointUnavailableError(f"Failed to load session {session_id}: {e}") from e

    async def _save(self, session_id: str, state: ConversationState) -> None:
        try:
            await self.checkpoint_store.save(session_id, state)
        except CheckpointUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Checkpoint save failed for session {session_id}: {e}", exc_info=True)
            raise CheckpointUnavailableError(f"Failed to save session {session_id}: {e}") from e

    @asynccontextmanager
    async def _session_lock(self, session_id: str) -> AsyncIterator[None]:
        """Hold the session's lock, dropping it once no turn holds or awaits it."""
        lock = self._session_locks.setdefault(session_id, asyncio.Lock())
        self._lock_waiters[session_id] = self._lock_waiters.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_waiters[session_id] -= 1
            if not self._lock_waiters[session_id]:
                del self._lock_waiters[session_id]
                del self._session_locks[session_id]

    def _unexecuted_local_tools(self, external_actions: Sequence[ExternalAction]) -> set[str]:
        """Local tools a paused batch skipped, as opposed to client actions."""
        external_names = {action.name for action in external_actions}
        return {name for name in self.registry.get_tool_names() if name not in external_names}

    @staticmethod
    def _validate_external_actions(external_actions: Sequence[ExternalAction]) -> None:
        """Check that every client action converts into a tool schema.

        Raises:
            ValueError: If an action cannot be offered to the model
        """
        try:
            convert_actions_to_tools(external_actions)
        except (NameError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid client actions: {e}") from e

    def _validate_message_length(self, message: str) -> None:
        """Validate message doesn't exceed the configured size.

        Raises:
            ValueError: If message is too long
        """
        if len(message) > self.config.max_message_chars:
            raise ValueError(
                f"Your message is too long. Please keep messages under {self.config.max_message_chars} characters."
            )

    @staticmethod
    def _response_text(turn_messages: list[BaseMessage], pending_actions: list[dict[str, Any]]) -> str:
        ai_messages = [m for m in turn_messages if isinstance(m, AIMessage)]
        text = message_text(ai_messages[-1]) if ai_messages else ""
        if text or pending_actions:
            return text
        return FALLBACK_RESPONSE


def _settle_pending_calls(
    history: list[BaseMessage], action_results: Sequence[ActionResult], local_tool_names: set[str]
) -> list[ToolMessage]:
    """Answer the tool calls a previous turn left open for the client.

    A turn that ends on a client action leaves its AI message's tool calls
    unanswered. Each gets the client's result when one was sent. Otherwise
    local tools the pause skipped get a not-executed error and client actions
    get a missing-result error. Results keep the order the model requested.

    Raises:
        ValueError: If a result names a call that is not pending
    """
    last_message = history[-1] if history else None
    pending_calls = last_message.tool_calls if isinstance(last_message, AIMessage) else []

    results_by_id = {result.call_id: result for result in action_results}
    unknown_ids = set(results_by_id) - {call["id"] for call in pending_calls}
    if unknown_ids:
        raise ValueError(f"No pending action call with id: {', '.join(sorted(unknown_ids))}")

    settled = []
    for call in pending_calls:
        result = results_by_id.get(call["id"])
        if result is None:
            logger.warning(f"No client result for tool call {call['name']} ({call['id']})")
            content = NOT_EXECUTED if call["name"] in local_tool_names else MISSING_RESULT
            settled.append(
                ToolMessage(content=content, tool_call_id=call["id"], name=call["name"], status="error")
            )
        else:
            settled.append(
                ToolMessage(
                    content=result.content,
                    tool_call_id=call["id"],
                    name=call["name"],
                    status="error" if result.is_error else "success",
                )
            )
    return settled


_conversation_service: ConversationService | None = None


def get_conversation_service() -> ConversationService:
    """Get or create the shared conversation service."""
    global _conversation_service
    if _conversation_service is None:
        _conversation_service = ConversationService()
    return _conversation_service
