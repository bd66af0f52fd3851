"""Chat model construction and request rate limiting."""

import asyncio
import time

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from limits import parse
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

from social_os.config import AgentConfig
from social_os.utils.logging import get_logger

logger = get_logger(__name__)


class ModelRateLimiter:
    """Moving-window limit on chat model requests, shared by all sessions."""

    def __init__(self, requests_per_minute: int = 50):
        """Initialize rate limiter.

        Args:
            requests_per_minute: Maximum model requests per minute
        """
        self.storage = MemoryStorage()
        self.limiter = MovingWindowRateLimiter(self.storage)
        self.request_limit = parse(f"{requests_per_minute}/minute")

    async def acquire(self, identifier: str = "chat_model") -> None:
        """Wait until a request slot is free, then take it."""
        while not self.limiter.hit(self.request_limit, identifier):
            window_stats = self.limiter.get_window_stats(self.request_limit, identifier)
            wait_time = max(0.05, window_stats.reset_time - time.time())
            logger.warning(f"Model request rate limit reached, waiting {wait_time:.2f}s")
            await asyncio.sleep(wait_time)


def create_chat_model(config: AgentConfig) -> BaseChatModel:
    """Create the chat model used by the agent node.

    Raises:
        ValueError: If no Anthropic API key is configured
    """
    if not config.api_key:
        raise ValueError("ANTHROPIC_API_KEY environment variable is required")

    logger.info(f"Creating chat model {config.model}")
    return ChatAnthropic(
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        max_retries=config.max_retries,
        timeout=config.timeout,
        anthropic_api_key=config.api_key,
    )
