"""Post content generation tool."""

from typing import Literal

from langchain_core.tools import tool
from pydantic import BaseModel, Field

TONE_GUIDANCE = {
    "casual": "Keep it friendly and conversational",
    "professional": "Use professional and polished language",
    "creative": "Be creative, use metaphors and vivid language",
    "humorous": "Add humor and wit",
}

TARGET_LENGTHS = {
    "short": 50,
    "medium": 150,
    "long": 300,
}


class GeneratePostContentInput(BaseModel):
    """Input schema for the post content tool."""

    topic: str = Field(..., description="The topic or theme for the post")
    tone: Literal["casual", "professional", "creative", "humorous"] = Field(
        ..., description="The tone of the post"
    )
    length: Literal["short", "medium", "long"] = Field(..., description="The desired length of the post")


def build_post_content_prompt(topic: str, tone: str, length: str) -> str:
    """Expand the post template for a topic.

    Unknown tones and lengths fall back to ``casual`` and ``medium``.
    """
    guidance = TONE_GUIDANCE.get(tone, TONE_GUIDANCE["casual"])
    target_length = TARGET_LENGTHS.get(length, TARGET_LENGTHS["medium"])

    return (
        f'Generate a social media post about "{topic}". {guidance}. '
        f"Target length: approximately {target_length} characters. Make it engaging and authentic."
    )


def create_generate_post_content_tool():
    @tool("generatePostContent", args_schema=GeneratePostContentInput)
    async def generate_post_content_handler(topic: str, tone: str, length: str) -> str:  # noqa: RUF029
        """Generate social media post content based on topic, tone, and length preferences"""
        return build_post_content_prompt(topic, tone, length)

    return generate_post_content_handler
