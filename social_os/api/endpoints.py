"""Conversation and health endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException

from social_os import __version__
from social_os.errors import (
    CheckpointUnavailableError,
    ModelUnavailableError,
    ToolLoopLimitError,
    UserNotFoundError,
)
from social_os.models.conversation import (
    ConversationHistoryResponse,
    ConversationRequest,
    ConversationResponse,
    HealthResponse,
    MessageOut,
    ToolCallOut,
)
from social_os.services.conversation import ConversationService, get_conversation_service
from social_os.services.timeline import TimelineService, get_timeline_service
from social_os.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/conversation", response_model=ConversationResponse, tags=["Conversation"])
async def handle_conversation(
    request: ConversationRequest,
    conversation_service: ConversationService = Depends(get_conversation_service),
    timeline_service: TimelineService = Depends(get_timeline_service),
) -> ConversationResponse:
    """Run one conversation turn with the user's agent.

    When ``user_id`` is given, the user's display name and agent profile
    personalize the agent unless ``user_name``/``user_style`` override them.
    """
    user_name = request.user_name
    user_style = request.user_style

    if request.user_id:
        try:
            user = timeline_service.get_user(request.user_id)
            agent = timeline_service.get_user_agent(request.user_id)
        except UserNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        user_name = user_name or user.display_name
        user_style = user_style or agent.describe_style()

    try:
        if request.message:
            logger.info(f"Processing message for session {request.session_id}: {request.message[:50]}...")
        result = await conversation_service.run_turn(
            request.message,
            request.session_id,
            user_name=user_name,
            user_style=user_style,
            external_actions=request.actions,
            action_results=request.action_results,
        )
    except ValueError as e:
        logger.warning(f"Rejected conversation request for session {request.session_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except (ModelUnavailableError, CheckpointUnavailableError) as e:
        logger.error(f"Conversation unavailable for session {request.session_id}: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e
    except ToolLoopLimitError as e:
        logger.error(f"Conversation aborted for session {request.session_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e

    logger.info(f"Generated response for session {result.session_id}: {result.response[:50]}...")
    return ConversationResponse(
        response=result.response,
        session_id=result.session_id,
        messages=[MessageOut.from_message(m) for m in result.messages],
        pending_actions=[ToolCallOut(id=c["id"], name=c["name"], args=c["args"]) for c in result.pending_actions],
    )


@router.get("/conversation/{session_id}", response_model=ConversationHistoryResponse, tags=["Conversation"])
async def get_conversation(
    session_id: str,
    conversation_service: ConversationService = Depends(get_conversation_service),
) -> ConversationHistoryResponse:
    """Return the saved message history of a session."""
    try:
        messages = await conversation_service.get_history(session_id)
    except CheckpointUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    if messages is None:
        raise HTTPException(status_code=404, detail=f"Unknown session ID: {session_id}")

    return ConversationHistoryResponse(
        session_id=session_id,
        messages=[MessageOut.from_message(m) for m in messages],
    )


@router.delete("/conversation/{session_id}", status_code=204, tags=["Conversation"])
async def delete_conversation(
    session_id: str,
    conversation_service: ConversationService = Depends(get_conversation_service),
) -> None:
    """Forget a session's history."""
    try:
        deleted = await conversation_service.reset_session(session_id)
    except CheckpointUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    if not deleted:
        raise HTTPException(status_code=404, detail=f"Unknown session ID: {session_id}")


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )
