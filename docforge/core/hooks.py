"""Strands hooks for docforge."""
import json
import logging
from typing import Any, Dict, List, Optional

from strands.hooks import HookProvider, HookRegistry, AfterToolCallEvent

from .invocations import GenericInvocation, StepRecord, ToolInvocation, parse_invocation

logger = logging.getLogger(__name__)


def decode_tool_result(result: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Extract the tool's own payload from a Strands tool result.

    Tools built by the ToolFactory return a JSON wrapper whose "content"
    holds the tool's payload, itself usually JSON:
    {"success": true, "content": "{\"mode\": \"build\", ...}", "error": null}

    Returns:
        The decoded payload dict, or None for failed or non-JSON results.
    """
    result_text = result.get("content", [{}])[0].get("text", "{}")
    result_data = json.loads(result_text)
    if not isinstance(result_data, dict) or not result_data.get("success", True):
        return None

    inner_content = result_data.get("content")
    if isinstance(inner_content, str):
        try:
            inner_data = json.loads(inner_content)
        except json.JSONDecodeError:
            return None
        return inner_data if isinstance(inner_data, dict) else None

    if isinstance(inner_content, dict):
        return inner_content

    return result_data


def tool_failed(result: Dict[str, Any]) -> bool:
    """True when Strands or the ToolFactory wrapper reports a failed call.

    Unreadable results are not treated as failures.
    """
    if result.get("status") == "error":
        return True
    try:
        result_data = json.loads(result.get("content", [{}])[0].get("text", "{}"))
    except (json.JSONDecodeError, KeyError, IndexError, TypeError, AttributeError):
        return False
    return isinstance(result_data, dict) and result_data.get("success", True) is False


class StepRecorder:
    """Collects the tool activity of the step in progress."""

    def __init__(self):
        self._calls: List[ToolInvocation] = []
        self._results: List[ToolInvocation] = []

    def record_call(self, tool_name: str, tool_input: Any) -> None:
        self._calls.append(parse_invocation(tool_name, tool_input))

    def record_failed_call(self, tool_name: str, tool_input: Any) -> None:
        """Keep a failed call in the step without letting it act as a signal."""
        payload = tool_input if isinstance(tool_input, dict) else {}
        self._calls.append(GenericInvocation(tool_name=tool_name, payload=payload))

    def record_result(self, tool_name: str, payload: Any) -> None:
        self._results.append(parse_invocation(tool_name, payload))

    def take_step(self) -> StepRecord:
        """Return the finished step's record and start a new one."""
        step = StepRecord(tool_calls=self._calls, tool_results=self._results)
        self._calls = []
        self._results = []
        return step


class StepCaptureHook(HookProvider):
    """Records each tool call and its decoded result into a StepRecorder.

    The recorder is drained at the step boundary and handed to the
    StepOrchestrator, which looks for mode, goal and completion signals.
    """

    def __init__(self, recorder: StepRecorder):
        self._recorder = recorder

    def register_hooks(self, registry: HookRegistry) -> None:
        registry.add_callback(AfterToolCallEvent, self._capture_step)

    def _capture_step(self, event: AfterToolCallEvent) -> None:
        tool_name = event.tool_use.get("name", "")
        tool_input = event.tool_use.get("input", {})

        if tool_failed(event.result):
            self._recorder.record_failed_call(tool_name, tool_input)
            logger.info(f"[HOOK] '{tool_name}' failed, call kept without signals")
            return

        self._recorder.record_call(tool_name, tool_input)

        try:
            payload = decode_tool_result(event.result)
        except (json.JSONDecodeError, KeyError, IndexError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to decode result of '{tool_name}': {e}")
            return

        if payload is not None:
            self._recorder.record_result(tool_name, payload)
            logger.debug(f"[HOOK] Captured result of '{tool_name}'")
