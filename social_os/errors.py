"""Error types raised by the Social OS agent and timeline services."""

from pydantic import ValidationError


class SocialOSError(Exception):
    """Base class for all Social OS errors."""


class InvalidArgumentsError(SocialOSError):
    """Tool call arguments failed schema validation."""

    def __init__(self, tool_name: str, validation_error: ValidationError):
        self.tool_name = tool_name
        self.validation_error = validation_error
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
            for err in validation_error.errors()
        )
        super().__init__(f"Invalid arguments for {tool_name}: {problems}")


class UnknownToolError(SocialOSError):
    """A tool call named a tool that is not registered."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool {tool_name}")


class ExternalActionError(SocialOSError):
    """A client-side action was invoked inside the agent."""

    def __init__(self, action_name: str):
        self.action_name = action_name
        super().__init__(f"Action {action_name} is executed by the client application")


class ModelUnavailableError(SocialOSError):
    """The language model call failed or timed out."""


class CheckpointUnavailableError(SocialOSError):
    """The checkpoint store could not load or save a conversation."""


class ToolLoopLimitError(SocialOSError):
    """A turn kept calling tools past the configured recursion limit."""


class UserNotFoundError(SocialOSError):
    """The requested user does not exist."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class DuplicateUserError(SocialOSError):
    """A user with the same username or email already exists."""
