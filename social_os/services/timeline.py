"""In-memory timeline service for users, agent profiles and posts."""

from datetime import UTC, datetime

from cuid2 import cuid_wrapper

from social_os.errors import DuplicateUserError, UserNotFoundError
from social_os.models.timeline import CreatePostInput, CreateUserInput, Post, User, UserAgent, UserSummary
from social_os.utils.logging import get_logger

logger = get_logger(__name__)

cuid = cuid_wrapper()

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/avataaars/svg?seed={username}"


def validate_pagination(limit: int | None, offset: int | None) -> tuple[int, int]:
    """Validate paging parameters.

    Returns:
        (limit, offset) with limit clamped to the maximum page size

    Raises:
        ValueError: If limit is below 1 or offset is negative
    """
    if limit is None:
        limit = DEFAULT_PAGE_SIZE
    elif limit < 1:
        raise ValueError('Invalid "limit" parameter')

    if offset is None:
        offset = 0
    elif offset < 0:
        raise ValueError('Invalid "offset" parameter')

    return min(limit, MAX_PAGE_SIZE), offset


class TimelineService:
    """Users and posts held in process memory."""

    def __init__(self):
        self.users: dict[str, User] = {}
        self.agents: dict[str, UserAgent] = {}  # keyed by user id
        self.posts: list[Post] = []

    def create_user(self, data: CreateUserInput) -> User:
        """Create a user together with a default agent profile.

        Raises:
            DuplicateUserError: If the username or email is taken
        """
        for existing in self.users.values():
            if existing.username == data.username or existing.email.lower() == data.email.lower():
                raise DuplicateUserError("Username or email already exists")

        now = datetime.now(UTC)
        user = User(
            id=cuid(),
            username=data.username,
            display_name=data.display_name,
            email=data.email,
            bio=data.bio,
            avatar_url=AVATAR_URL_TEMPLATE.format(username=data.username),
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user

        self.agents[user.id] = UserAgent(
            id=cuid(),
            user_id=user.id,
            agent_name=f"{user.display_name}'s Agent",
            created_at=now,
            updated_at=now,
        )

        logger.info(f"Created user {user.username} ({user.id})")
        return user

    def list_users(self, limit: int | None = None, offset: int | None = None) -> list[User]:
        """List users, newest first."""
        limit, offset = validate_pagination(limit, offset)
        users = list(reversed(self.users.values()))
        return users[offset : offset + limit]

    def get_user(self, user_id: str) -> User:
        """Get a user by id.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = self.users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def get_user_agent(self, user_id: str) -> UserAgent:
        """Get the agent profile of a user.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        self.get_user(user_id)
        return self.agents[user_id]

    def create_post(self, data: CreatePostInput) -> Post:
        """Publish a post for an existing user.

        Raises:
            UserNotFoundError: If the author does not exist
            ValueError: If the content is blank
        """
        if not data.content.strip():
            raise ValueError("Post content cannot be empty")

        user = self.get_user(data.user_id)
        now = datetime.now(UTC)
        post = Post(
            id=cuid(),
            user_id=user.id,
            content=data.content,
            is_public=data.is_public,
            image_url=data.image_url,
            ai_generated=data.ai_generated,
            created_at=now,
            updated_at=now,
        )
        self.posts.append(post)

        logger.info(f"User {user.username} created post {post.id}")
        return self._with_author(post)

    def list_posts(
        self, limit: int | None = None, offset: int | None = None, user_id: str | None = None
    ) -> list[Post]:
        """List public posts, newest first, optionally for one user.

        Private posts are never listed since requests are not authenticated.
        """
        limit, offset = validate_pagination(limit, offset)

        posts = [
            post
            for post in reversed(self.posts)
            if post.is_public and (user_id is None or post.user_id == user_id)
        ]
        return [self._with_author(post) for post in posts[offset : offset + limit]]

    def _with_author(self, post: Post) -> Post:
        user = self.users.get(post.user_id)
        if user is None:
            return post
        summary = UserSummary(username=user.username, display_name=user.display_name, avatar_url=user.avatar_url)
        return post.model_copy(update={"user": summary})


_timeline_service: TimelineService | None = None


def get_timeline_service() -> TimelineService:
    """Get or create the shared timeline service."""
    global _timeline_service
    if _timeline_service is None:
        _timeline_service = TimelineService()
    return _timeline_service
