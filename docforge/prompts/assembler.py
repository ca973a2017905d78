"""Deterministic system prompt assembly from scenario layers."""
import logging
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from ..core.config import DEFAULT_SEPARATOR
from ..core.context import ContextBundle
from ..core.exceptions import RequiredLayerError
from .layers import LayerResolver
from .scenarios import LayerSource, Scenario

if TYPE_CHECKING:
    from .composer import PromptComposer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssembledLayer:
    """A layer that made it into the prompt."""
    source: LayerSource
    label: str
    content: str
    editable: bool = False
    db_field: Optional[str] = None


class PromptAssembler:
    """
    Builds a system prompt from a scenario's ordered layers.

    For each layer, in order:
    - resolved text is kept as is
    - an empty optional layer is dropped entirely
    - an empty required layer raises RequiredLayerError

    Kept layers are joined with the separator. Equal inputs give the same
    bytes: the date comes from the bundle, never from the clock.

    Example:
        assembler = PromptAssembler(LayerResolver(composer))
        prompt = assembler.generate(scenarios.get("chat-message"), bundle)
    """

    def __init__(self, resolver: LayerResolver, separator: str = DEFAULT_SEPARATOR):
        self._resolver = resolver
        self._separator = separator

    @classmethod
    def from_composer(
        cls,
        composer: "PromptComposer",
        separator: str = DEFAULT_SEPARATOR,
    ) -> "PromptAssembler":
        return cls(LayerResolver(composer), separator=separator)

    @property
    def separator(self) -> str:
        return self._separator

    def generate(self, scenario: Scenario, bundle: ContextBundle) -> str:
        """
        Assemble the system prompt for a scenario.

        Args:
            scenario: Scenario whose layers to assemble.
            bundle: Context the layers draw from.

        Returns:
            The layer texts joined with the separator.

        Raises:
            RequiredLayerError: If a precondition fails or a required
                layer resolves to nothing.
        """
        sections = self.generate_sections(scenario, bundle)
        prompt = self._separator.join(section.content for section in sections)
        logger.debug(
            f"Assembled prompt for scenario '{scenario.id}': "
            f"{len(sections)}/{len(scenario.layers)} layers, length={len(prompt)}"
        )
        return prompt

    def generate_sections(self, scenario: Scenario, bundle: ContextBundle) -> List[AssembledLayer]:
        """
        Resolve a scenario's layers without joining them.

        Used to preview the prompt stack layer by layer.

        Returns:
            The surviving layers, in scenario order.
        """
        self._check_preconditions(scenario, bundle)

        sections = []
        for layer in scenario.layers:
            text = self._resolver.resolve(layer, bundle)
            if not text or not text.strip():
                if layer.required:
                    raise RequiredLayerError(
                        f"Required layer '{layer.label}' ({layer.source.value}) is empty "
                        f"in scenario '{scenario.id}'",
                        scenario_id=scenario.id,
                        source=layer.source.value,
                    )
                logger.debug(f"Skipping empty optional layer '{layer.source.value}'")
                continue

            sections.append(
                AssembledLayer(
                    source=layer.source,
                    label=layer.label,
                    content=text,
                    editable=layer.editable,
                    db_field=layer.db_field,
                )
            )
        return sections

    def _check_preconditions(self, scenario: Scenario, bundle: ContextBundle) -> None:
        if scenario.requires_domain and bundle.get_domain() is None:
            raise RequiredLayerError(
                f"Scenario '{scenario.id}' requires a domain",
                scenario_id=scenario.id,
                source=LayerSource.DOMAIN.value,
            )
        if scenario.requires_artifact_type and bundle.get_artifact_type() is None:
            raise RequiredLayerError(
                f"Scenario '{scenario.id}' requires an artifact type",
                scenario_id=scenario.id,
                source=LayerSource.ARTIFACT_TYPE.value,
            )
