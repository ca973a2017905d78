"""Per-run mode state machine.

The ModeController owns the ModeState of one conversation run. At every
step boundary it inspects the previous step's tool activity and applies
mode, goal and completion changes. It never performs I/O: persistence of
a mode switch happens inside the set_mode tool, before the step ends.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .config import ModeSettings, ModesConfig
from .invocations import StepRecord
from .modes import ChatMode, ModeHistoryEntry, ModeState, Todo
from .transitions import StepSignals, detect_transitions

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ModeController:
    """
    Applies detected signals to one run's ModeState.

    Example:
        controller = ModeController(config.modes, history_limit=10)
        controller.initialize(ChatMode.DISCOVERY)

        # before each step N+1
        state = controller.on_step_boundary(recorder.take_step(), step_number=N + 1)
        tools = controller.active_tools
    """

    def __init__(
        self,
        modes_config: Optional[ModesConfig] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize the controller.

        Args:
            modes_config: Per-mode model and tool settings.
            history_limit: Maximum number of mode history entries kept.
            clock: Source of transition timestamps.
        """
        if history_limit < 1:
            raise ValueError(f"history_limit must be >= 1, got {history_limit}")

        self._modes_config = modes_config or ModesConfig()
        self._history_limit = history_limit
        self._clock = clock
        self._state: Optional[ModeState] = None

    @property
    def history_limit(self) -> int:
        return self._history_limit

    @property
    def state(self) -> ModeState:
        """The run's ModeState. Raises if initialize() was not called."""
        if self._state is None:
            raise RuntimeError("ModeController.initialize() must be called before use")
        return self._state

    @property
    def current_mode(self) -> ChatMode:
        return self.state.current_mode

    @property
    def mode_settings(self) -> ModeSettings:
        """Model settings of the current mode."""
        return self._modes_config.for_mode(self.current_mode)

    @property
    def active_tools(self) -> List[str]:
        """Tool names enabled in the current mode."""
        return list(self.mode_settings.active_tools)

    def initialize(
        self,
        initial_mode: ChatMode,
        initial_goal: Optional[str] = None,
        initial_todos: Optional[List[Todo]] = None,
        initial_complete: bool = False,
    ) -> ModeState:
        """
        Create the run's ModeState.

        The history is seeded with the initial mode at step 0.

        Args:
            initial_mode: Mode stored on the chat when the run starts.
            initial_goal: Goal carried over from earlier runs.
            initial_todos: Todos carried over from earlier runs.
            initial_complete: Completion flag stored on the chat.

        Returns:
            The new ModeState.
        """
        self._state = ModeState(
            current_mode=initial_mode,
            mode_history=[
                ModeHistoryEntry(
                    mode=initial_mode,
                    step_number=0,
                    timestamp=self._clock(),
                )
            ],
            goal=initial_goal,
            todos=list(initial_todos or []),
            is_complete=initial_complete,
        )
        logger.info(f"Mode state initialized: mode={initial_mode.value}")
        return self._state

    def on_step_boundary(
        self,
        previous_step: Optional[StepRecord],
        step_number: int,
    ) -> ModeState:
        """
        Apply the previous step's signals before step ``step_number`` runs.

        Args:
            previous_step: Tool activity of the step that just finished,
                or None before the first step.
            step_number: Number of the step about to run.

        Returns:
            The (possibly updated) ModeState.
        """
        state = self.state
        signals = detect_transitions(previous_step)
        self._apply(state, signals, step_number)
        return state

    def _apply(self, state: ModeState, signals: StepSignals, step_number: int) -> None:
        transition = signals.transition
        if transition is not None and transition.mode != state.current_mode:
            previous = state.current_mode
            state.mode_history.append(
                ModeHistoryEntry(
                    mode=transition.mode,
                    step_number=step_number,
                    timestamp=self._clock(),
                    reason=transition.reason,
                )
            )
            if len(state.mode_history) > self._history_limit:
                del state.mode_history[:-self._history_limit]
            state.current_mode = transition.mode

            logger.info(
                f"Mode transition at step {step_number}: "
                f"{previous.value} -> {transition.mode.value} (reason={transition.reason})"
            )
            if transition.next_message:
                # Logged only, never injected as a follow-up turn
                logger.info(f"Continuation requested: {transition.next_message[:200]}")

        if signals.goal is not None:
            state.goal = signals.goal.goal
            logger.info(f"Goal updated at step {step_number}: {state.goal}")

        if signals.completion is not None and signals.completion.complete != state.is_complete:
            state.is_complete = signals.completion.complete
            logger.info(
                f"Completion changed at step {step_number}: "
                f"complete={state.is_complete} (reason={signals.completion.reason})"
            )
