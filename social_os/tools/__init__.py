"""Tools for the Social OS agent."""

from social_os.tools.external_actions import build_tool_set, convert_actions_to_tools
from social_os.tools.registry import ToolsRegistry, get_tools_registry

__all__ = ["ToolsRegistry", "build_tool_set", "convert_actions_to_tools", "get_tools_registry"]
