from typing import Callable, Dict, List, Tuple

from pydantic import BaseModel, Field

# Collaborators receive the extracted arguments and return (output, exit_code).
ToolFunc = Callable[[Dict[str, str]], Tuple[str, int]]
LabelFunc = Callable[[Dict[str, str]], str]


class ToolParameter(BaseModel):
    """
    A single advertised tool parameter.

    Attributes:
        type: JSON schema type name. Every catalog parameter is a string.
        description: Explanation shown to the model.
    """

    type: str = "string"
    description: str


class ToolDefinition(BaseModel):
    """
    Represents the definition of a tool that can be advertised to the model.

    Attributes:
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        parameters: Parameter name to its declared schema.
        required: Subset of parameter names that must be present and non-empty.
        func: Collaborator performing the side effect. Receives the extracted
              arguments by parameter name and returns ``(output, exit_code)``.
        label: Builds the ``Command:`` label from the extracted arguments.
    """

    name: str
    description: str
    parameters: Dict[str, ToolParameter] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)
    func: ToolFunc
    label: LabelFunc

    @property
    def optional(self) -> List[str]:
        """Parameter names that are advertised but not required."""
        return [name for name in self.parameters if name not in self.required]

    def to_openai(self) -> Dict[str, object]:
        """Render the definition in the OpenAI ``tools`` array format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {name: param.model_dump() for name, param in self.parameters.items()},
                    "required": list(self.required),
                },
            },
        }
