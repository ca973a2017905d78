"""ITool interface - callable tools for the agent."""
from typing import Protocol, Dict, Any, TYPE_CHECKING, runtime_checkable
from dataclasses import dataclass

if TYPE_CHECKING:
    from ..context import ExecutionContext


@runtime_checkable
class ICloseable(Protocol):
    """
    Protocol for resources that need cleanup.

    Tools holding network sessions or other resources implement this
    so the ToolFactory can release them after a run.
    """

    async def close(self) -> None:
        """Release resources."""
        ...


@dataclass
class ToolResult:
    """Result from tool execution."""
    content: str
    success: bool = True
    error: str = None


class ITool(Protocol):
    """
    Tool that the agent can call during a step.

    Tools are:
    - Focused (single responsibility)
    - JSON-serializable results
    - Strict about input: malformed input raises before any side effect,
      and the ToolFactory turns the error into a failed result
    """
    name: str
    description: str
    parameters: Dict[str, Any]  # JSON Schema

    async def execute(
        self,
        params: Dict[str, Any],
        context: "ExecutionContext"
    ) -> ToolResult:
        """
        Execute the tool with given parameters.

        Args:
            params: Tool parameters matching the JSON schema
            context: Execution context

        Returns:
            ToolResult with content and success status
        """
        ...

    def to_schema(self) -> Dict[str, Any]:
        """
        Return tool schema for LLM function calling.

        Returns:
            Dict with name, description, and parameters schema
        """
        ...
