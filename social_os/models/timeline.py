"""Timeline data models: users, their agent profiles and posts."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class User(BaseModel):
    """A Social OS user."""

    id: str
    username: str
    display_name: str
    email: str
    bio: str | None = None
    avatar_url: str
    created_at: datetime
    updated_at: datetime


class UserSummary(BaseModel):
    """Author fields embedded in timeline posts."""

    username: str
    display_name: str
    avatar_url: str


class WritingStyle(BaseModel):
    tone: str = "casual"
    length: str = "medium"


class GenerationSettings(BaseModel):
    model: str = "claude-3-5-sonnet-20241022"
    temperature: float = 0.7

    model_config = {"protected_namespaces": ()}


class UserAgent(BaseModel):
    """Per-user agent profile used to personalize the assistant."""

    id: str
    user_id: str
    agent_name: str
    personality_traits: list[str] = Field(default_factory=lambda: ["helpful", "creative", "friendly"])
    writing_style: WritingStyle = Field(default_factory=WritingStyle)
    preferred_topics: list[str] = Field(default_factory=lambda: ["AI", "Technology", "Social Media"])
    learned_patterns: dict[str, Any] = Field(default_factory=dict)
    generation_settings: GenerationSettings = Field(default_factory=GenerationSettings)
    created_at: datetime
    updated_at: datetime

    def describe_style(self) -> str:
        """Render the profile as a writing-style description for the system prompt."""
        parts = [
            f"Tone: {self.writing_style.tone}",
            f"Preferred length: {self.writing_style.length}",
        ]
        if self.personality_traits:
            parts.append(f"Personality: {', '.join(self.personality_traits)}")
        if self.preferred_topics:
            parts.append(f"Favorite topics: {', '.join(self.preferred_topics)}")
        return ". ".join(parts) + "."


class Post(BaseModel):
    """A timeline post."""

    id: str
    user_id: str
    content: str
    is_public: bool = True
    image_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    ai_generated: bool = False
    created_at: datetime
    updated_at: datetime
    user: UserSummary | None = None


class CreateUserInput(BaseModel):
    """Request model for creating a user."""

    username: str = Field(..., min_length=1, max_length=50)
    display_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    bio: str | None = None


class CreatePostInput(BaseModel):
    """Request model for creating a post."""

    user_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    is_public: bool = True
    image_url: str | None = None
    ai_generated: bool = False
