"""Tool Factory for docforge.

Creates Strands-compatible tools with ExecutionContext injected.
Handles the bridge between plugin-defined tools and the Strands agent runtime.

Each tool in the registry has a factory function that receives:
- ExecutionContext: Conversation id, stream writer, cancellation
- Container: For resolving service dependencies (chat store, etc.)

The ToolFactory wraps these into Strands tool format using the @tool decorator.
Errors raised by a tool become explicit failed results for the model.
"""
import json
import logging
import time
from typing import Any, Dict, List, Optional

from strands import tool as strands_tool
from strands.types.tools import ToolContext

from .container import Container
from .context import ExecutionContext
from .registry import PluginRegistry
from .interfaces.tool import ITool, ICloseable

logger = logging.getLogger(__name__)


def _truncate(s: str, max_len: int = 500) -> str:
    """Truncate string for logging."""
    return s[:max_len] + "..." if len(s) > max_len else s


class ToolFactory:
    """
    Creates tools for one conversation run.

    Resolves tool plugins from registry, injects dependencies via container,
    and wraps them in Strands-compatible format.

    Example:
        factory = ToolFactory(registry, container)
        tools = factory.create_tools(controller.active_tools, context)
        # After the run:
        await factory.cleanup()
    """

    def __init__(self, registry: PluginRegistry, container: Container):
        """
        Initialize the tool factory.

        Args:
            registry: Plugin registry with tool definitions.
            container: DI container for service resolution.
        """
        self._registry = registry
        self._container = container
        self._created_tools: List[ITool] = []  # Track for cleanup

    def create_tools(
        self,
        tool_names: List[str],
        context: ExecutionContext,
    ) -> List[Any]:
        """
        Create Strands-compatible tools by name.

        Names without a registered plugin are skipped with a warning;
        they belong to collaborators outside this package.

        Args:
            tool_names: Tool names to create (e.g., a mode's active tools).
            context: Execution context to inject into tools.

        Returns:
            List of Strands tools (decorated functions).
        """
        tools = []
        created = []
        for name in tool_names:
            tool = self.create_tool(name, context)
            if tool is not None:
                tools.append(tool)
                created.append(name)

        logger.info(f"Created {len(tools)} tools: {created}")
        return tools

    def create_tool(
        self,
        tool_name: str,
        context: ExecutionContext,
    ) -> Optional[Any]:
        """
        Create a single Strands-compatible tool.

        Returns:
            Strands tool (decorated function), or None if tool not found.
        """
        plugin = self._registry.get_tool(tool_name)
        if not plugin:
            logger.warning(f"Tool '{tool_name}' not found in registry")
            return None

        return self._create_tool(plugin, context)

    def _create_tool(
        self,
        plugin: Dict[str, Any],
        context: ExecutionContext,
    ) -> Optional[Any]:
        """
        Create a Strands tool from a plugin definition.

        The plugin must have a ``factory`` (Callable(context, container) -> ITool)
        or a ``class`` instantiated with context and container.
        """
        tool_name = plugin.get("name", "unknown")
        try:
            if "factory" in plugin:
                tool_instance = plugin["factory"](context, self._container)
            elif "class" in plugin:
                tool_instance = plugin["class"](context=context, container=self._container)
            else:
                logger.error(f"Tool '{tool_name}' missing factory or class")
                return None

            self._created_tools.append(tool_instance)
            return self._to_strands_tool(tool_instance, context)

        except Exception as e:
            logger.error(f"Failed to create tool '{tool_name}': {e}")
            return None

    def _to_strands_tool(
        self,
        tool: ITool,
        context: ExecutionContext,
    ) -> Any:
        """
        Convert ITool to Strands tool using the @tool decorator.

        Args:
            tool: The tool instance.
            context: Execution context (captured in closure).

        Returns:
            Strands-compatible tool (decorated function).
        """
        async def handler(tool_context: ToolContext) -> str:
            """Execute tool and return JSON result.

            Uses ToolContext to get raw input params, bypassing Strands' signature-based validation.
            """
            await context.check_cancelled()

            kwargs = tool_context.tool_use.get("input", {})

            params_str = json.dumps(kwargs, default=str)
            logger.info(f"[TOOL] Invoking '{tool.name}' | params={_truncate(params_str, 200)}")
            start_time = time.time()

            try:
                result = await tool.execute(kwargs, context)
                duration_ms = (time.time() - start_time) * 1000

                result_preview = _truncate(result.content, 300) if result.content else "(empty)"
                logger.info(
                    f"[TOOL] Completed '{tool.name}' | "
                    f"success={result.success} | "
                    f"duration={duration_ms:.0f}ms | "
                    f"result={result_preview}"
                )

                return json.dumps({
                    "success": result.success,
                    "content": result.content,
                    "error": result.error,
                })

            except Exception as e:
                duration_ms = (time.time() - start_time) * 1000
                logger.error(
                    f"[TOOL] Failed '{tool.name}' | "
                    f"duration={duration_ms:.0f}ms | "
                    f"error={str(e)}",
                    exc_info=True
                )
                # The model sees the failure and decides how to proceed
                return json.dumps({
                    "success": False,
                    "content": "",
                    "error": str(e),
                })

        return strands_tool(
            name=tool.name,
            description=tool.description,
            inputSchema=tool.parameters,
            context=True,
        )(handler)

    async def cleanup(self) -> None:
        """
        Close all tracked tools that implement ICloseable.

        Call after a run to release tool resources.
        """
        for tool in self._created_tools:
            if isinstance(tool, ICloseable):
                try:
                    await tool.close()
                    logger.debug(f"Closed tool: {getattr(tool, 'name', 'unknown')}")
                except Exception as e:
                    logger.warning(
                        f"Failed to close tool {getattr(tool, 'name', 'unknown')}: {e}"
                    )
        self._created_tools = []
