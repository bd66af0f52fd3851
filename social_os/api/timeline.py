"""Timeline endpoints for users and posts."""

from fastapi import APIRouter, Depends, HTTPException

from social_os.errors import DuplicateUserError, UserNotFoundError
from social_os.models.timeline import CreatePostInput, CreateUserInput, Post, User, UserAgent
from social_os.services.timeline import TimelineService, get_timeline_service
from social_os.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/users", response_model=list[User], tags=["Timeline"])
async def list_users(
    limit: int | None = None,
    offset: int | None = None,
    timeline_service: TimelineService = Depends(get_timeline_service),
) -> list[User]:
    """List users, newest first."""
    try:
        return timeline_service.list_users(limit, offset)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/users", response_model=User, status_code=201, tags=["Timeline"])
async def create_user(
    request: CreateUserInput,
    timeline_service: TimelineService = Depends(get_timeline_service),
) -> User:
    """Create a user and their personal agent."""
    try:
        return timeline_service.create_user(request)
    except DuplicateUserError as e:
        logger.warning(f"Duplicate user {request.username}: {e}")
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.get("/users/{user_id}", response_model=User, tags=["Timeline"])
async def get_user(user_id: str, timeline_service: TimelineService = Depends(get_timeline_service)) -> User:
    try:
        return timeline_service.get_user(user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.get("/users/{user_id}/agent", response_model=UserAgent, tags=["Timeline"])
async def get_user_agent(user_id: str, timeline_service: TimelineService = Depends(get_timeline_service)) -> UserAgent:
    try:
        return timeline_service.get_user_agent(user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.get("/posts", response_model=list[Post], tags=["Timeline"])
async def list_posts(
    limit: int | None = None,
    offset: int | None = None,
    user_id: str | None = None,
    timeline_service: TimelineService = Depends(get_timeline_service),
) -> list[Post]:
    """List public posts, newest first."""
    try:
        return timeline_service.list_posts(limit, offset, user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/posts", response_model=Post, status_code=201, tags=["Timeline"])
async def create_post(
    request: CreatePostInput,
    timeline_service: TimelineService = Depends(get_timeline_service),
) -> Post:
    """Publish a post."""
    try:
        return timeline_service.create_post(request)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
