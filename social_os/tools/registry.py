"""Tools registry for the Social OS agent's local tools."""

from typing import Any

from langchain_core.tools import StructuredTool
from pydantic import ValidationError

from social_os.errors import InvalidArgumentsError, UnknownToolError
from social_os.tools.image_prompt import create_generate_image_prompt_tool
from social_os.tools.post_content import create_generate_post_content_tool
from social_os.tools.post_ideas import create_suggest_post_ideas_tool
from social_os.utils.logging import get_logger

logger = get_logger(__name__)


class ToolsRegistry:
    """Registry of the tools the agent runs itself."""

    def __init__(self, register_defaults: bool = True):
        """Initialize the registry, optionally with the default content tools."""
        self._tools: dict[str, StructuredTool] = {}
        if register_defaults:
            self._register_default_tools()

    def _register_default_tools(self) -> None:
        """Register the content-creation tools."""
        tools = [
            create_generate_post_content_tool(),
            create_suggest_post_ideas_tool(),
            create_generate_image_prompt_tool(),
        ]

        for tool in tools:
            self.register_tool(tool)

    def register_tool(self, tool: StructuredTool) -> None:
        """Register a new tool in the registry.

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' already registered")
        self._tools[tool.name] = tool

    def list_tools(self) -> list[StructuredTool]:
        """Get all registered tools in registration order."""
        return list(self._tools.values())

    def get_tool(self, name: str) -> StructuredTool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def get_tool_names(self) -> list[str]:
        """Get list of all registered tool names."""
        return list(self._tools.keys())

    def has_tool(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    async def invoke(self, name: str, arguments: dict[str, Any] | None) -> str:
        """Validate arguments and run a tool.

        Args:
            name: Registered tool name
            arguments: Raw arguments from the model's tool call

        Returns:
            The tool's string output

        Raises:
            UnknownToolError: If no tool has this name
            InvalidArgumentsError: If the arguments do not match the tool's schema
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)

        try:
            validated = tool.args_schema.model_validate(arguments or {})
        except ValidationError as e:
            raise InvalidArgumentsError(name, e) from e

        logger.debug(f"Invoking tool {name} with {validated.model_dump()}")
        result = await tool.ainvoke(validated.model_dump())
        return str(result)


_tools_registry: ToolsRegistry | None = None


def get_tools_registry() -> ToolsRegistry:
    """Get or create the shared tools registry."""
    global _tools_registry

    if _tools_registry is None:
        _tools_registry = ToolsRegistry()

    return _tools_registry
