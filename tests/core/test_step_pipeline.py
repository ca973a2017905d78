"""End-to-end: set_mode through the tool bridge, step capture and ModeController."""
import json
from types import SimpleNamespace

import pytest

from docforge.core import tool_factory as tool_factory_module
from docforge.core.config import ModesConfig
from docforge.core.exceptions import PersistenceError
from docforge.core.hooks import StepCaptureHook, StepRecorder
from docforge.core.mode_controller import ModeController
from docforge.core.modes import ChatMode
from docforge.core.notifier import CONTINUATION_REQUESTED, MODE_CHANGED
from docforge.core.registry import PluginRegistry
from docforge.core.tool_factory import ToolFactory
from docforge.plugins.tools.set_mode import PLUGIN


def fake_strands_tool(**tool_spec):
    def decorator(handler):
        handler.tool_spec = tool_spec
        return handler
    return decorator


@pytest.fixture(autouse=True)
def patch_strands_tool(monkeypatch):
    monkeypatch.setattr(tool_factory_module, "strands_tool", fake_strands_tool)


@pytest.fixture
def set_mode_handler(container, execution_context):
    registry = PluginRegistry()
    registry.register(PLUGIN)
    return ToolFactory(registry, container).create_tool("set_mode", execution_context)


@pytest.fixture
def controller(clock):
    controller = ModeController(ModesConfig(), history_limit=10, clock=clock)
    controller.initialize(ChatMode.DISCOVERY)
    return controller


async def run_step(handler, controller, tool_input):
    """Run one set_mode call the way an agent step does and cross the boundary."""
    tool_use = {"toolUseId": "t-1", "name": "set_mode", "input": tool_input}
    raw = await handler(SimpleNamespace(tool_use=tool_use))

    recorder = StepRecorder()
    StepCaptureHook(recorder)._capture_step(SimpleNamespace(
        tool_use=tool_use,
        result={"toolUseId": "t-1", "status": "success", "content": [{"text": raw}]},
    ))
    state = controller.on_step_boundary(recorder.take_step(), step_number=1)
    return json.loads(raw), state


# =============================================================================
# Switch Tests
# =============================================================================

async def test_switch_to_build(set_mode_handler, controller, stream_writer, chat_store):
    result, state = await run_step(
        set_mode_handler, controller, {"mode": "build", "reason": "Ready to implement"}
    )

    assert result["success"] is True
    assert state.current_mode == ChatMode.BUILD
    assert len(state.mode_history) == 2
    assert chat_store.mode_updates == [("chat-123", ChatMode.BUILD)]
    assert stream_writer.types == [MODE_CHANGED]
    assert stream_writer.events[0].data["mode"] == "build"
    assert stream_writer.events[0].data["reason"] == "Ready to implement"
    assert stream_writer.events[0].transient is True


async def test_switch_with_next_message(set_mode_handler, controller, stream_writer):
    result, state = await run_step(set_mode_handler, controller, {
        "mode": "build",
        "reason": "Ready to implement",
        "nextMessage": "Now implementing...",
    })

    assert state.current_mode == ChatMode.BUILD
    assert stream_writer.types == [MODE_CHANGED, CONTINUATION_REQUESTED]
    continuation = stream_writer.events[1]
    assert continuation.data == {"message": "Now implementing..."}
    assert continuation.transient is False
    assert json.loads(result["content"])["continuation"] == "Now implementing..."


# =============================================================================
# Failure Tests
# =============================================================================

async def test_persistence_failure_keeps_mode(set_mode_handler, controller, stream_writer, chat_store):
    chat_store.error = PersistenceError("DB Error")

    result, state = await run_step(
        set_mode_handler, controller, {"mode": "build", "reason": "Ready to implement"}
    )

    assert result == {"success": False, "content": "", "error": "DB Error"}
    assert state.current_mode == ChatMode.DISCOVERY
    assert len(state.mode_history) == 1
    assert stream_writer.attempts == []


async def test_missing_reason_keeps_mode(set_mode_handler, controller, stream_writer, chat_store):
    result, state = await run_step(set_mode_handler, controller, {"mode": "build"})

    assert result["success"] is False
    assert state.current_mode == ChatMode.DISCOVERY
    assert len(state.mode_history) == 1
    assert chat_store.mode_updates == []
    assert stream_writer.attempts == []
