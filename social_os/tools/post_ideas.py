"""Post idea suggestion tool."""

from langchain_core.tools import tool
from pydantic import BaseModel, Field

MAX_IDEAS = 5


class SuggestPostIdeasInput(BaseModel):
    """Input schema for the post ideas tool."""

    interests: list[str] = Field(..., description="User's areas of interest")
    count: int = Field(default=3, ge=0, description="Number of ideas to suggest")


def build_post_ideas(interests: list[str], count: int = 3) -> list[str]:
    """Return up to ``count`` ideas, never more than five.

    Only the first two interests are used; missing ones get generic topics.
    """
    first_interest = interests[0] if len(interests) > 0 and interests[0] else "technology"
    second_interest = interests[1] if len(interests) > 1 and interests[1] else "innovation"

    ideas = [
        f"Share a thought about the future of AI in {first_interest}",
        f"Ask your followers a question about {second_interest}",
        "Share a personal experience or learning from today",
        "Recommend a resource or tool you find valuable",
        "Celebrate a small win or achievement",
    ]

    return ideas[: max(0, min(count, MAX_IDEAS))]


def create_suggest_post_ideas_tool():
    @tool("suggestPostIdeas", args_schema=SuggestPostIdeasInput)
    async def suggest_post_ideas_handler(interests: list[str], count: int = 3) -> str:  # noqa: RUF029
        """Suggest post ideas based on user interests"""
        return "\n- ".join(build_post_ideas(interests, count))

    return suggest_post_ideas_handler
