"""Tool definition and tool result models."""

from pydantic import BaseModel, Field
from typing import Dict, Any, List, Optional, Callable, Awaitable, Literal


class ParameterSpec(BaseModel):
    """Declared constraints for a single tool parameter."""
    type: Literal["string", "integer", "number", "boolean"] = Field(
        default="string",
        description="Primitive type the argument must have",
    )
    required: bool = Field(default=True, description="Whether the argument must be present")
    min_length: Optional[int] = Field(
        default=None,
        ge=0,
        description="Minimum length for string arguments",
    )
    description: Optional[str] = Field(default=None, description="Human-readable parameter description")

    class Config:
        frozen = True

    def json_schema(self) -> Dict[str, Any]:
        """Render this parameter as a JSON Schema property."""
        schema: Dict[str, Any] = {"type": self.type}
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.description:
            schema["description"] = self.description
        return schema


class ContentBlock(BaseModel):
    """A single content block of a tool result."""
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Uniform envelope returned by every tool handler."""
    content: List[ContentBlock] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "ToolResult":
        """Build a result holding a single text block."""
        return cls(content=[ContentBlock(text=text)])


class ToolDefinition(BaseModel):
    """A named, schema-validated remote operation."""
    name: str = Field(..., min_length=1, description="Unique tool name")
    description: str = Field(..., description="Tool description")
    parameters: Dict[str, ParameterSpec] = Field(
        default_factory=dict,
        description="Parameter name -> declared constraints, in declaration order",
    )
    handler: Callable[[Dict[str, Any]], Awaitable[ToolResult]] = Field(
        ...,
        description="Async callable receiving validated arguments",
    )

    class Config:
        frozen = True
        arbitrary_types_allowed = True

    def input_schema(self) -> Dict[str, Any]:
        """JSON Schema object describing this tool's arguments."""
        return {
            "type": "object",
            "properties": {name: spec.json_schema() for name, spec in self.parameters.items()},
            "required": [name for name, spec in self.parameters.items() if spec.required],
        }

    def get_schema(self) -> Dict[str, Any]:
        """Return the tool schema for discovery."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }
