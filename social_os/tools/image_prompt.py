"""Image prompt generation tool."""

from langchain_core.tools import tool
from pydantic import BaseModel, Field

DEFAULT_IMAGE_STYLE = "modern, vibrant"


class GenerateImagePromptInput(BaseModel):
    """Input schema for the image prompt tool."""

    description: str = Field(..., description="What the image should depict")
    style: str = Field(default=DEFAULT_IMAGE_STYLE, description="The artistic style of the image")


def build_image_prompt(description: str, style: str = DEFAULT_IMAGE_STYLE) -> str:
    return f"Create an image: {description}. Style: {style}. High quality, detailed, suitable for social media."


def create_generate_image_prompt_tool():
    @tool("generateImagePrompt", args_schema=GenerateImagePromptInput)
    async def generate_image_prompt_handler(  # noqa: RUF029
        description: str, style: str = DEFAULT_IMAGE_STYLE
    ) -> str:
        """Generate an optimized image generation prompt"""
        return build_image_prompt(description, style)

    return generate_image_prompt_handler
