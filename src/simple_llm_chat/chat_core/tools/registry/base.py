"""Tool registry: the catalog of tools that may be advertised to the model."""

from typing import Any, Dict, Iterable, List, Optional

from ..models import ToolDefinition
from ...exceptions import ToolNotFoundError, ToolRegistrationError
from ...logger import get_logger

logger = get_logger(__name__)


class ToolRegistry:
    """
    A central registry to manage and access all known tools.

    This class holds the declarations advertised to the model and maps tool
    names to the collaborators that perform their side effects. Which of the
    registered tools are actually offered is decided per request by the
    enabled-tools list passed to :meth:`describe`.
    """

    def __init__(self) -> None:
        """Initialize the ToolRegistry."""
        self.tools: Dict[str, ToolDefinition] = {}

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a new tool.

        Args:
            tool: The tool definition to add.

        Raises:
            ToolRegistrationError: If a tool with the same name already exists.
        """
        if tool.name in self.tools:
            msg = f"Tool '{tool.name}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        for name in tool.required:
            if name not in tool.parameters:
                msg = f"Tool '{tool.name}' requires undeclared parameter '{name}'."
                logger.error(msg)
                raise ToolRegistrationError(msg)

        self.tools[tool.name] = tool
        logger.debug("Registered tool: '%s'", tool.name)

    def unregister(self, tool_name: str) -> None:
        """Unregister a tool from the registry.

        Args:
            tool_name: The name of the tool to remove.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
        """
        if tool_name in self.tools:
            del self.tools[tool_name]
            logger.debug("Unregistered tool: '%s'", tool_name)
        else:
            raise ToolNotFoundError(f"Tool '{tool_name}' not found in the registry.")

    def get(self, tool_name: str) -> Optional[ToolDefinition]:
        """Look up a tool by exact name, or None if it is unknown."""
        return self.tools.get(tool_name)

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self.tools

    def describe(self, enabled_names: Iterable[str]) -> List[ToolDefinition]:
        """Select the definitions to advertise for the given enabled tool names.

        Names that are not registered are dropped silently; calling them later
        still fails at invocation time. Duplicates are advertised once.

        Args:
            enabled_names: Tool names enabled by configuration, in advertisement order.

        Returns:
            The matching definitions, in the order of ``enabled_names``.
        """
        described: List[ToolDefinition] = []
        seen = set()
        for name in enabled_names:
            if name in seen:
                continue
            seen.add(name)
            tool = self.tools.get(name)
            if tool is None:
                logger.debug("Enabled tool '%s' is not in the registry; not advertised.", name)
                continue
            described.append(tool)
        return described

    def tool_object(self, enabled_names: Iterable[str]) -> Optional[List[Dict[str, Any]]]:
        """
        Generates the ``tools`` array of an OpenAI-compatible request.

        Args:
            enabled_names: Tool names enabled by configuration.

        Returns:
            A list of tool dictionaries, or None if nothing is advertised.
        """
        tools = [tool.to_openai() for tool in self.describe(enabled_names)]
        return tools or None
