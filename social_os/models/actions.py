"""Client-side action descriptors supplied by the hosting UI."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

ParameterType = Literal[
    "string",
    "number",
    "boolean",
    "object",
    "string[]",
    "number[]",
    "boolean[]",
    "object[]",
]

# Tool names accepted by the model provider
ACTION_NAME_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"

# Parameters become fields of a generated args schema
PARAMETER_NAME_PATTERN = r"^[A-Za-z][A-Za-z0-9_]*$"


class ActionParameter(BaseModel):
    """A single parameter of a client-side action."""

    name: str = Field(..., pattern=PARAMETER_NAME_PATTERN)
    type: ParameterType = "string"
    description: str = ""
    required: bool = True
    enum: list[str] | None = None

    @field_validator("name")
    @classmethod
    def not_reserved(cls, name: str) -> str:
        if name.startswith("model_"):
            raise ValueError("Parameter names must not start with 'model_'")
        return name


class ExternalAction(BaseModel):
    """An action the hosting UI executes itself.

    The agent advertises these to the model next to its own tools, but never
    runs them: when the model asks for one the turn ends and the client takes
    over.
    """

    name: str = Field(..., pattern=ACTION_NAME_PATTERN)
    description: str = ""
    parameters: list[ActionParameter] = Field(default_factory=list)

    @field_validator("parameters")
    @classmethod
    def unique_parameter_names(cls, parameters: list[ActionParameter]) -> list[ActionParameter]:
        names = [param.name for param in parameters]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate parameter names: {', '.join(duplicates)}")
        return parameters


class ActionResult(BaseModel):
    """Outcome of a client-side action, sent back to resume the conversation."""

    call_id: str
    content: str
    is_error: bool = False
