"""Tests for the plugin-to-Strands tool bridge."""
import json
from types import SimpleNamespace

import pytest

from docforge.core import tool_factory as tool_factory_module
from docforge.core.exceptions import ModeValidationError, RunCancelled
from docforge.core.interfaces.tool import ToolResult
from docforge.core.registry import PluginRegistry
from docforge.core.tool_factory import ToolFactory


def fake_strands_tool(**tool_spec):
    """Stand-in for strands.tool that returns the raw handler."""
    def decorator(handler):
        handler.tool_spec = tool_spec
        return handler
    return decorator


class EchoTool:
    name = "echo"
    description = "Echo the input"
    parameters = {"type": "object", "properties": {"text": {"type": "string"}}}

    def __init__(self):
        self.closed = False

    async def execute(self, params, context):
        return ToolResult(content=json.dumps({"echo": params.get("text")}))

    async def close(self):
        self.closed = True


class FailingTool:
    name = "failing"
    description = "Always fails"
    parameters = {"type": "object", "properties": {}}

    async def execute(self, params, context):
        raise ModeValidationError("bad input")


def tool_context(tool_input):
    return SimpleNamespace(tool_use={"toolUseId": "t-1", "name": "echo", "input": tool_input})


@pytest.fixture(autouse=True)
def patch_strands_tool(monkeypatch):
    monkeypatch.setattr(tool_factory_module, "strands_tool", fake_strands_tool)


@pytest.fixture
def echo_tool():
    return EchoTool()


@pytest.fixture
def factory(echo_tool, container):
    registry = PluginRegistry()
    registry.register({"type": "tool", "name": "echo", "factory": lambda ctx, c: echo_tool})
    registry.register({"type": "tool", "name": "failing", "factory": lambda ctx, c: FailingTool()})
    return ToolFactory(registry, container)


# =============================================================================
# Creation Tests
# =============================================================================

def test_create_tools_skips_unknown(factory, execution_context):
    tools = factory.create_tools(["echo", "query_rag", "failing"], execution_context)

    assert [t.tool_spec["name"] for t in tools] == ["echo", "failing"]


def test_strands_spec_from_tool(factory, execution_context):
    handler = factory.create_tool("echo", execution_context)

    assert handler.tool_spec["description"] == "Echo the input"
    assert handler.tool_spec["inputSchema"] == EchoTool.parameters
    assert handler.tool_spec["context"] is True


def test_factory_error_gives_none(container, execution_context):
    def broken_factory(ctx, c):
        raise RuntimeError("no deps")

    registry = PluginRegistry()
    registry.register({"type": "tool", "name": "broken", "factory": broken_factory})

    assert ToolFactory(registry, container).create_tool("broken", execution_context) is None


# =============================================================================
# Execution Tests
# =============================================================================

async def test_handler_wraps_result(factory, execution_context):
    handler = factory.create_tool("echo", execution_context)

    raw = await handler(tool_context({"text": "hi"}))

    result = json.loads(raw)
    assert result["success"] is True
    assert result["error"] is None
    assert json.loads(result["content"]) == {"echo": "hi"}


async def test_raised_error_becomes_failed_result(factory, execution_context):
    handler = factory.create_tool("failing", execution_context)

    result = json.loads(await handler(tool_context({})))

    assert result == {"success": False, "content": "", "error": "bad input"}


async def test_cancelled_run_raises(factory, execution_context):
    handler = factory.create_tool("echo", execution_context)
    execution_context.cancel("user stopped")

    with pytest.raises(RunCancelled):
        await handler(tool_context({"text": "hi"}))


async def test_cleanup_closes_tools(factory, echo_tool, execution_context):
    factory.create_tools(["echo", "failing"], execution_context)

    await factory.cleanup()

    assert echo_tool.closed is True
