"""Bridge from client-side actions to LangChain tools.

The hosting UI registers actions that it renders or executes itself. The model
has to see them next to the local tools so it can ask for them with the same
tool call shape, but the agent never runs them.
"""

from collections.abc import Sequence
from typing import Any, Literal

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field, create_model

from social_os.errors import ExternalActionError
from social_os.models.actions import ActionParameter, ExternalAction
from social_os.tools.registry import ToolsRegistry
from social_os.utils.logging import get_logger

logger = get_logger(__name__)

_PARAMETER_TYPES: dict[str, Any] = {
    "string": str,
    "number": float,
    "boolean": bool,
    "object": dict[str, Any],
    "string[]": list[str],
    "number[]": list[float],
    "boolean[]": list[bool],
    "object[]": list[dict[str, Any]],
}


def _parameter_type(param: ActionParameter) -> Any:
    if param.enum:
        return Literal[tuple(param.enum)]
    return _PARAMETER_TYPES.get(param.type, Any)


def build_args_schema(action: ExternalAction) -> type[BaseModel]:
    """Create a pydantic args schema from an action's parameter list."""
    fields = {}
    for param in action.parameters:
        param_type = _parameter_type(param)
        if param.required:
            fields[param.name] = (param_type, Field(..., description=param.description))
        else:
            fields[param.name] = (param_type | None, Field(default=None, description=param.description))

    return create_model(f"{action.name}Schema", **fields)


def create_external_action_tool(action: ExternalAction) -> StructuredTool:
    """Wrap a client-side action in a tool the model can request."""

    async def deferred_to_client(**kwargs: Any) -> str:
        raise ExternalActionError(action.name)

    return StructuredTool.from_function(
        coroutine=deferred_to_client,
        name=action.name,
        description=action.description or f"Client action {action.name}",
        args_schema=build_args_schema(action),
    )


def convert_actions_to_tools(actions: Sequence[ExternalAction]) -> list[StructuredTool]:
    """Convert client-side action descriptors into tools."""
    return [create_external_action_tool(action) for action in actions]


def build_tool_set(registry: ToolsRegistry, actions: Sequence[ExternalAction]) -> list[StructuredTool]:
    """Combine client actions with the local tools for one model call.

    A client action shadows a local tool with the same name.
    """
    external_tools = convert_actions_to_tools(actions)
    external_names = {tool.name for tool in external_tools}

    local_tools = []
    for tool in registry.list_tools():
        if tool.name in external_names:
            logger.info(f"Client action {tool.name} shadows the local tool of the same name")
            continue
        local_tools.append(tool)

    return [*external_tools, *local_tools]
