"""Plugin Registry for docforge.

Provides auto-discovery and registration of tool plugins.
Plugins declare themselves via a PLUGIN dict in their __init__.py.

Example plugin declaration:

    # plugins/tools/set_mode/__init__.py
    from .tool import SetModeTool, create_set_mode_tool

    PLUGIN = {
        "type": "tool",
        "name": "set_mode",
        "class": SetModeTool,
        "factory": create_set_mode_tool,
        "category": "agent_state",
        "description": "Switch the agent between discovery and build mode",
    }
"""
import importlib
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypedDict

logger = logging.getLogger(__name__)

DEFAULT_PLUGIN_DIR = Path(__file__).parent.parent / "plugins"


class ToolPlugin(TypedDict, total=False):
    """Type definition for tool plugin declaration."""
    type: str  # "tool"
    name: str
    factory: Callable  # Factory function that creates tool with context
    category: str
    description: str


def _module_name(plugin_path: Path) -> str:
    """Dotted module name of a package directory, from its top-level package."""
    parts = [plugin_path.name]
    parent = plugin_path.parent
    while (parent / "__init__.py").exists():
        parts.append(parent.name)
        parent = parent.parent

    # Ensure the directory holding the top-level package is importable
    root = str(parent)
    if root not in sys.path:
        sys.path.insert(0, root)

    return ".".join(reversed(parts))


class PluginRegistry:
    """
    Scans plugin directories and auto-registers tool plugins.

    Example:
        registry = PluginRegistry()
        await registry.discover()

        plugin = registry.get_tool("set_mode")
        registry.list_tools()
    """

    def __init__(self):
        self._tools: Dict[str, Dict[str, Any]] = {}
        self._plugin_dirs: List[Path] = []

    @property
    def tool_count(self) -> int:
        """Get number of registered tools."""
        return len(self._tools)

    async def discover(self, plugin_dirs: Optional[List[Path]] = None) -> None:
        """
        Scan directories for PLUGIN dicts and register.

        Directory structure expected:
            plugins/
                tools/
                    set_mode/
                        __init__.py
                        tool.py

        Args:
            plugin_dirs: Plugin directories to scan. Defaults to docforge/plugins.
        """
        self._plugin_dirs = plugin_dirs or [DEFAULT_PLUGIN_DIR]

        for plugin_dir in self._plugin_dirs:
            if not plugin_dir.exists():
                logger.warning(f"Plugin directory not found: {plugin_dir}")
                continue

            for type_dir in plugin_dir.iterdir():
                if not type_dir.is_dir() or type_dir.name.startswith('_'):
                    continue

                for plugin_path in sorted(type_dir.iterdir()):
                    if not plugin_path.is_dir() or plugin_path.name.startswith('_'):
                        continue
                    if (plugin_path / "__init__.py").exists():
                        self._load_plugin(plugin_path)

        logger.info(f"Discovered {self.tool_count} tools: {self.list_tools()}")

    def _load_plugin(self, plugin_path: Path) -> None:
        """
        Import module, extract PLUGIN dict, and register.

        Args:
            plugin_path: Path to the plugin package directory.
        """
        try:
            module_name = _module_name(plugin_path)
            if module_name in sys.modules:
                module = sys.modules[module_name]
            else:
                module = importlib.import_module(module_name)

            if not hasattr(module, 'PLUGIN'):
                logger.debug(f"No PLUGIN in {module_name}, skipping")
                return

            self.register(module.PLUGIN, source=module_name)

        except Exception as e:
            logger.error(f"Failed to load plugin from {plugin_path}: {e}")

    def register(self, plugin: Dict[str, Any], source: str = "manual") -> bool:
        """
        Register a plugin declaration.

        Args:
            plugin: PLUGIN dict.
            source: Where the declaration came from (for logging).

        Returns:
            True if registered.
        """
        plugin_type = plugin.get('type')
        plugin_name = plugin.get('name')

        if not plugin_type or not plugin_name:
            logger.warning(f"Invalid PLUGIN in {source}: missing type or name")
            return False

        if plugin_type != 'tool':
            logger.warning(f"Unknown plugin type '{plugin_type}' in {source}")
            return False

        self._tools[plugin_name] = plugin
        logger.info(f"Registered tool: {plugin_name}")
        return True

    def get_tool(self, name: str) -> Optional[Dict[str, Any]]:
        """Get a tool plugin by name."""
        return self._tools.get(name)

    def list_tools(self) -> List[str]:
        """List registered tool names."""
        return sorted(self._tools)
