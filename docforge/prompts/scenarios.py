"""Prompt scenarios: which layers a use case assembles, in which order."""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..config import load_scenarios_config
from ..core.exceptions import ConfigError, ScenarioNotFoundError

logger = logging.getLogger(__name__)


class LayerSource(str, Enum):
    """Where a layer's text comes from."""
    CORE = "core"
    CURRENT_CONTEXT = "currentContext"
    DOMAIN = "domain"
    STREAMING = "streaming"
    CAPABILITIES = "capabilities"
    ARTIFACT_TYPE = "artifactType"
    TEMPLATE = "template"
    WORKSPACE_CONTEXT = "workspaceContext"
    OBJECTIVE_CONTEXT = "objectiveContext"


@dataclass(frozen=True)
class LayerConfig:
    """One layer slot in a scenario."""
    source: LayerSource
    label: str
    editable: bool = False
    required: bool = True
    db_field: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayerConfig":
        """Create LayerConfig from dictionary (e.g., from YAML)."""
        raw_source = data.get("source")
        try:
            source = LayerSource(raw_source)
        except ValueError:
            raise ConfigError(f"Unknown layer source: {raw_source!r}")

        return cls(
            source=source,
            label=data.get("label", source.value),
            editable=bool(data.get("editable", False)),
            required=bool(data.get("required", True)),
            db_field=data.get("db_field"),
        )


@dataclass(frozen=True)
class Scenario:
    """A prompt use case with its ordered layers."""
    id: str
    label: str
    layers: Tuple[LayerConfig, ...]
    description: str = ""
    requires_domain: bool = False
    requires_artifact_type: bool = False
    artifact_category: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Scenario":
        """Create Scenario from dictionary (e.g., from YAML)."""
        if not data.get("id"):
            raise ConfigError(f"Scenario without id: {data!r}")

        layers = data.get("layers") or []
        if not layers:
            raise ConfigError(f"Scenario '{data['id']}' declares no layers")

        return cls(
            id=data["id"],
            label=data.get("label", data["id"]),
            description=data.get("description", ""),
            requires_domain=bool(data.get("requires_domain", False)),
            requires_artifact_type=bool(data.get("requires_artifact_type", False)),
            artifact_category=data.get("artifact_category"),
            layers=tuple(LayerConfig.from_dict(layer) for layer in layers),
        )

    def has_layer(self, source: LayerSource) -> bool:
        return any(layer.source == source for layer in self.layers)


class ScenarioRegistry:
    """
    Read-only table of prompt scenarios.

    Loaded once from scenarios.yaml (or a supplied mapping). Scenario
    order follows the file.

    Example:
        registry = ScenarioRegistry()
        scenario = registry.get("chat-message")
        [layer.source for layer in scenario.layers]
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        """
        Initialize the registry.

        Args:
            data: Parsed scenarios mapping ({"scenarios": [...]}).
                Defaults to the packaged scenarios.yaml.

        Raises:
            ConfigError: On unknown layer sources, duplicate ids or a
                missing scenarios list.
        """
        if data is None:
            data = load_scenarios_config()

        self._scenarios: Dict[str, Scenario] = {}
        self._load(data)

    @classmethod
    def from_file(cls, filename: str) -> "ScenarioRegistry":
        """Load scenarios from a packaged YAML file other than the default."""
        return cls(load_scenarios_config(filename))

    def _load(self, data: Dict[str, Any]) -> None:
        entries = data.get("scenarios")
        if not entries:
            raise ConfigError("No scenarios defined")

        for entry in entries:
            scenario = Scenario.from_dict(entry)
            if scenario.id in self._scenarios:
                raise ConfigError(f"Duplicate scenario id: {scenario.id}")
            self._scenarios[scenario.id] = scenario

        logger.info(f"Loaded {len(self._scenarios)} prompt scenarios")

    def get(self, scenario_id: str) -> Scenario:
        """
        Get a scenario by id.

        Raises:
            ScenarioNotFoundError: If no scenario has that id.
        """
        scenario = self._scenarios.get(scenario_id)
        if scenario is None:
            raise ScenarioNotFoundError(
                f"Unknown scenario '{scenario_id}'. "
                f"Available: {list(self._scenarios)}"
            )
        return scenario

    def list_scenarios(self) -> List[Scenario]:
        return list(self._scenarios.values())

    def __contains__(self, scenario_id: object) -> bool:
        return scenario_id in self._scenarios

    def __iter__(self) -> Iterator[Scenario]:
        return iter(self._scenarios.values())

    def __len__(self) -> int:
        return len(self._scenarios)
