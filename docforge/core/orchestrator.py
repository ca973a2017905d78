"""Per-step driver hook: decides mode, prompt and tools before each step."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from .context import ContextBundle
from .invocations import StepRecord
from .mode_controller import ModeController
from .modes import ChatMode

if TYPE_CHECKING:
    from ..prompts.assembler import PromptAssembler
    from ..prompts.composer import PromptComposer
    from ..prompts.scenarios import Scenario

logger = logging.getLogger(__name__)


@dataclass
class StepPlan:
    """What the inference engine should run for one step."""
    step_number: int
    mode: ChatMode
    system_prompt: str
    active_tools: List[str] = field(default_factory=list)
    model: Optional[str] = None
    temperature: Optional[float] = None


class StepOrchestrator:
    """
    Prepares every inference step of one conversation run.

    Created once per run. Before step N+1 the driver hands over step N's
    record; the orchestrator applies it to the mode state and returns the
    system prompt, tool set and model settings for the next step.

    Example:
        orchestrator = StepOrchestrator(controller, assembler, composer, scenario, bundle)
        plan = orchestrator.prepare_step(None, step_number=0, user_message_count=1)
        while True:
            step = run_step(plan)
            if orchestrator.should_stop(step, plan.step_number + 1):
                break
            plan = orchestrator.prepare_step(step, plan.step_number + 1, user_message_count=1)
    """

    def __init__(
        self,
        controller: ModeController,
        assembler: "PromptAssembler",
        composer: "PromptComposer",
        scenario: "Scenario",
        bundle: ContextBundle,
    ):
        self._controller = controller
        self._assembler = assembler
        self._composer = composer
        self._scenario = scenario
        self._bundle = bundle
        self._steps_in_mode = 0
        self._last_mode: Optional[ChatMode] = None

    @property
    def controller(self) -> ModeController:
        return self._controller

    def prepare_step(
        self,
        previous_step: Optional[StepRecord],
        step_number: int,
        user_message_count: int = 0,
    ) -> StepPlan:
        """
        Build the plan for step ``step_number``.

        Args:
            previous_step: Tool activity of the step that just ran, or None.
            step_number: Number of the step about to run.
            user_message_count: User messages in the conversation so far.

        Returns:
            StepPlan with mode, system prompt, active tools and model settings.

        Raises:
            RequiredLayerError: If the scenario prompt cannot be assembled.
        """
        state = self._controller.on_step_boundary(previous_step, step_number)
        mode = state.current_mode

        if mode != self._last_mode:
            self._steps_in_mode = 0
            self._last_mode = mode
        self._steps_in_mode += 1

        scenario_prompt = self._assembler.generate(self._scenario, self._bundle)
        domain = self._bundle.get_domain()
        mode_prompt = self._composer.compose_mode_prompt(
            mode=mode,
            state=state,
            message_count=user_message_count,
            current_date=self._bundle.current_date,
            domain=domain.id if domain else None,
        )

        settings = self._controller.mode_settings
        plan = StepPlan(
            step_number=step_number,
            mode=mode,
            system_prompt=f"{scenario_prompt}{self._assembler.separator}{mode_prompt}",
            active_tools=list(settings.active_tools),
            model=settings.model,
            temperature=settings.temperature,
        )

        logger.info(
            f"Prepared step {step_number}: mode={mode.value}, "
            f"tools={len(plan.active_tools)}, complete={state.is_complete}, "
            f"history={len(state.mode_history)}"
        )
        return plan

    def should_stop(self, last_step: Optional[StepRecord], steps_run: int) -> bool:
        """
        Whether the run should end after ``last_step``.

        Stops when the step called one of the current mode's stop tools,
        or when the mode's step budget is used up. ``steps_run`` is
        informational and only logged.
        """
        settings = self._controller.mode_settings

        if last_step is not None and settings.stop_on_tools:
            called = {invocation.tool_name for invocation in last_step.tool_calls}
            hit = called.intersection(settings.stop_on_tools)
            if hit:
                logger.info(f"Stopping after {steps_run} steps: called {sorted(hit)}")
                return True

        if settings.max_steps is not None and self._steps_in_mode >= settings.max_steps:
            logger.info(
                f"Stopping after {steps_run} steps: "
                f"{self._steps_in_mode} steps in {self._controller.current_mode.value} mode"
            )
            return True

        return False
