"""Layer resolution: turns one scenario layer into prompt text.

Every LayerSource has exactly one resolver. A resolver returns the layer
text, or None/"" when the layer has nothing to contribute; whether that
is acceptable is the assembler's decision (required vs optional).
"""
import logging
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from ..core.context import Capability, ContextBundle
from .scenarios import LayerConfig, LayerSource

if TYPE_CHECKING:
    from .composer import PromptComposer

logger = logging.getLogger(__name__)

WORKSPACE_CONTEXT_INTRO = (
    "Use this context to understand how this team works and their preferences:"
)
OBJECTIVE_CONTEXT_INTRO = (
    "Use this context to understand the current goal and what has been learned so far:"
)

REQUIRES_SOURCES = "📎 Requires transcript/source documents"
FROM_SCRATCH = "✏️ Can create from scratch"

Resolver = Callable[[ContextBundle], Optional[str]]


def render_capabilities(capabilities: List[Capability]) -> str:
    """
    Render the capability listing for a domain.

    Returns an empty string when there is nothing to list.
    """
    if not capabilities:
        return ""

    entries = []
    for capability in capabilities:
        lines = [
            f"**{capability.name}**",
            capability.description,
            REQUIRES_SOURCES if capability.requires_source_documents else FROM_SCRATCH,
        ]
        if capability.use_when:
            lines.append(f"Use when: {capability.use_when}")
        if capability.trigger_keywords:
            lines.append(f"Keywords: {', '.join(capability.trigger_keywords[:3])}")
        entries.append("\n".join(lines))

    return (
        "## My Core Capabilities\n\n"
        "### Document Creation\n"
        "I can help you create these types of business documents:\n\n"
        + "\n\n".join(entries)
    )


class LayerResolver:
    """
    Resolves scenario layers against a ContextBundle.

    Example:
        resolver = LayerResolver(composer)
        text = resolver.resolve(layer, bundle)
    """

    def __init__(self, composer: "PromptComposer"):
        self._composer = composer
        self._resolvers: Dict[LayerSource, Resolver] = {
            LayerSource.CORE: self._core,
            LayerSource.CURRENT_CONTEXT: self._current_context,
            LayerSource.DOMAIN: self._domain,
            LayerSource.STREAMING: self._streaming,
            LayerSource.CAPABILITIES: self._capabilities,
            LayerSource.ARTIFACT_TYPE: self._artifact_type,
            LayerSource.TEMPLATE: self._template,
            LayerSource.WORKSPACE_CONTEXT: self._workspace_context,
            LayerSource.OBJECTIVE_CONTEXT: self._objective_context,
        }
        missing = set(LayerSource) - set(self._resolvers)
        if missing:
            raise RuntimeError(f"No resolver for layer sources: {sorted(s.value for s in missing)}")

    def resolve(self, layer: LayerConfig, bundle: ContextBundle) -> Optional[str]:
        """Resolve one layer. Returns None or "" when the layer is empty."""
        return self._resolvers[layer.source](bundle)

    # -------------------------------------------------------------------------
    # One resolver per source
    # -------------------------------------------------------------------------

    def _core(self, bundle: ContextBundle) -> Optional[str]:
        return self._composer.get_core_prompt()

    def _current_context(self, bundle: ContextBundle) -> Optional[str]:
        lines = [f"Current date: {bundle.current_date.isoformat()}"]
        if bundle.user_name:
            lines.append(f"User: {bundle.user_name}")
        return "## Current Context\n\n" + "\n".join(lines)

    def _domain(self, bundle: ContextBundle) -> Optional[str]:
        domain = bundle.get_domain()
        if domain is None or not (domain.system_prompt or "").strip():
            return None
        if domain.allowed_layer_guidance:
            return f"{domain.system_prompt}\n\n{domain.allowed_layer_guidance}"
        return domain.system_prompt

    def _streaming(self, bundle: ContextBundle) -> Optional[str]:
        domain = bundle.get_domain()
        return self._composer.get_streaming_prompt(domain.id if domain else None)

    def _capabilities(self, bundle: ContextBundle) -> Optional[str]:
        domain = bundle.get_domain()
        if domain is None or bundle.capability_source is None:
            return None

        try:
            capabilities = bundle.capability_source.list_capabilities(domain.id)
        except Exception as e:
            logger.warning(f"Capability listing unavailable for domain '{domain.id}': {e}")
            return ""

        return render_capabilities(capabilities)

    def _artifact_type(self, bundle: ContextBundle) -> Optional[str]:
        artifact_type = bundle.get_artifact_type()
        if artifact_type is None:
            return None
        return artifact_type.instruction_prompt

    def _template(self, bundle: ContextBundle) -> Optional[str]:
        artifact_type = bundle.get_artifact_type()
        if artifact_type is None or not (artifact_type.template or "").strip():
            return None
        return f"## Required Output Format\n\n{artifact_type.template}"

    def _workspace_context(self, bundle: ContextBundle) -> Optional[str]:
        workspace = bundle.get_workspace()
        if workspace is None or not (workspace.context or "").strip():
            return None
        return f"## Workspace Context\n\n{WORKSPACE_CONTEXT_INTRO}\n\n{workspace.context}"

    def _objective_context(self, bundle: ContextBundle) -> Optional[str]:
        objective = bundle.get_objective()
        if objective is None or not (objective.context or "").strip():
            return None

        body = objective.context
        if objective.goal and str(objective.goal).strip():
            body = f"Goal: {objective.goal}\n\n{body}"
        return f"## Objective Context\n\n{OBJECTIVE_CONTEXT_INTRO}\n\n{body}"
