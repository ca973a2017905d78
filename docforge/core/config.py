"""Configuration management for docforge."""
import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .modes import ChatMode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

DEFAULT_SEPARATOR = "\n\n---\n\n"

DEFAULT_DISCOVERY_TOOLS = [
    "query_rag",
    "list_documents",
    "load_document",
    "set_mode",
    "set_complete",
]

DEFAULT_BUILD_TOOLS = [
    "ask_user",
    "query_rag",
    "list_documents",
    "load_document",
    "load_documents",
    "generate_document_version",
    "update_punchlist",
    "update_workspace_context",
    "update_objective_context",
    "get_playbook",
    "set_mode",
    "set_complete",
]


# =============================================================================
# Mode Configuration
# =============================================================================

@dataclass
class ModeSettings:
    """Inference settings applied while the agent is in one mode."""
    model: str = "claude-sonnet-4"
    temperature: float = 0.5
    active_tools: List[str] = field(default_factory=list)
    # Run stops after this many steps (None = unbounded)
    max_steps: Optional[int] = None
    # Run stops after a step that called any of these tools
    stop_on_tools: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict], defaults: "ModeSettings") -> "ModeSettings":
        """Create ModeSettings from dictionary, falling back to defaults per key."""
        if not data:
            return defaults

        max_steps = data.get("max_steps", defaults.max_steps)
        return cls(
            model=data.get("model", defaults.model),
            temperature=float(data.get("temperature", defaults.temperature)),
            active_tools=list(data.get("active_tools", defaults.active_tools)),
            max_steps=int(max_steps) if max_steps is not None else None,
            stop_on_tools=list(data.get("stop_on_tools", defaults.stop_on_tools)),
        )


def _default_mode_settings() -> Dict[ChatMode, ModeSettings]:
    return {
        ChatMode.DISCOVERY: ModeSettings(
            temperature=0.6,
            active_tools=list(DEFAULT_DISCOVERY_TOOLS),
            max_steps=30,
            stop_on_tools=["set_mode"],
        ),
        ChatMode.BUILD: ModeSettings(
            temperature=0.5,
            active_tools=list(DEFAULT_BUILD_TOOLS),
        ),
    }


@dataclass
class ModesConfig:
    """Per-mode settings (model, temperature, active tool set)."""
    settings: Dict[ChatMode, ModeSettings] = field(default_factory=_default_mode_settings)

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "ModesConfig":
        """Create ModesConfig from dictionary (e.g., from YAML)."""
        if not data:
            return cls()

        defaults = _default_mode_settings()
        settings = {}
        for mode in ChatMode:
            settings[mode] = ModeSettings.from_dict(data.get(mode.value), defaults[mode])

        unknown = set(data) - {mode.value for mode in ChatMode}
        if unknown:
            logger.warning(f"Ignoring unknown modes in config: {sorted(unknown)}")

        return cls(settings=settings)

    def for_mode(self, mode: ChatMode) -> ModeSettings:
        return self.settings[mode]


@dataclass
class ModeHistoryConfig:
    """Bound on the per-run mode history."""
    limit: int = 10

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "ModeHistoryConfig":
        """Create ModeHistoryConfig from dictionary (e.g., from YAML)."""
        if not data:
            return cls()

        return cls(limit=int(data.get("limit", 10)))


# =============================================================================
# Prompt Configuration
# =============================================================================

@dataclass
class PromptsConfig:
    """Prompt assembly configuration."""
    separator: str = DEFAULT_SEPARATOR
    scenarios_file: str = "scenarios.yaml"
    capabilities_file: str = "capabilities.yaml"

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "PromptsConfig":
        """Create PromptsConfig from dictionary (e.g., from YAML)."""
        if not data:
            return cls()

        return cls(
            separator=data.get("separator", DEFAULT_SEPARATOR),
            scenarios_file=data.get("scenarios_file", "scenarios.yaml"),
            capabilities_file=data.get("capabilities_file", "capabilities.yaml"),
        )


# =============================================================================
# Chat Store Configuration
# =============================================================================

@dataclass
class ChatStoreConfig:
    """Chat store (DynamoDB) configuration."""
    table_name: str = "docforge_main"
    max_attempts: int = 3
    connect_timeout: int = 5
    read_timeout: int = 30

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "ChatStoreConfig":
        """Create ChatStoreConfig from dictionary (e.g., from YAML)."""
        if not data:
            return cls()

        return cls(
            table_name=data.get("table_name", "docforge_main"),
            max_attempts=int(data.get("max_attempts", 3)),
            connect_timeout=int(data.get("connect_timeout", 5)),
            read_timeout=int(data.get("read_timeout", 30)),
        )


class Config:
    """
    Configuration manager for docforge.

    Loads config.yaml (path from argument, DOCFORGE_CONFIG, or the packaged
    default) and exposes one typed section per concern.
    """

    def __init__(self, config_path: Optional[str] = None):
        path = config_path or os.getenv("DOCFORGE_CONFIG") or DEFAULT_CONFIG_PATH
        self._config_path = Path(path)
        self._data: Dict = {}
        self._modes: ModesConfig = None
        self._mode_history: ModeHistoryConfig = None
        self._prompts: PromptsConfig = None
        self._chat_store: ChatStoreConfig = None

        self._load_config()
        self._load_modes_config()
        self._load_mode_history_config()
        self._load_prompts_config()
        self._load_chat_store_config()

    def _load_config(self):
        """Load configuration from YAML file."""
        if self._config_path.exists():
            self._data = yaml.safe_load(self._config_path.read_text()) or {}
        else:
            logger.warning(f"Config file not found: {self._config_path}, using defaults")
            self._data = {}

    def _load_modes_config(self):
        """Load per-mode settings."""
        self._modes = ModesConfig.from_dict(self._data.get("modes", {}))
        logger.info(
            "Loaded modes config: "
            + ", ".join(
                f"{mode.value}={len(settings.active_tools)} tools"
                for mode, settings in self._modes.settings.items()
            )
        )

    def _load_mode_history_config(self):
        """Load mode history bound.

        DOCFORGE_MODE_HISTORY_LIMIT overrides mode_history.limit.
        """
        self._mode_history = ModeHistoryConfig.from_dict(self._data.get("mode_history", {}))
        env_limit = os.getenv("DOCFORGE_MODE_HISTORY_LIMIT")
        if env_limit:
            self._mode_history.limit = int(env_limit)
            logger.info(f"Mode history limit overridden by env var: {env_limit}")
        if self._mode_history.limit < 1:
            raise ValueError(f"mode_history.limit must be >= 1, got {self._mode_history.limit}")

    def _load_prompts_config(self):
        """Load prompt assembly configuration."""
        self._prompts = PromptsConfig.from_dict(self._data.get("prompts", {}))
        logger.info(f"Loaded prompts config: scenarios_file={self._prompts.scenarios_file}")

    def _load_chat_store_config(self):
        """Load chat store configuration."""
        self._chat_store = ChatStoreConfig.from_dict(self._data.get("chat_store", {}))

    @property
    def modes(self) -> ModesConfig:
        """Get per-mode settings."""
        return self._modes

    @property
    def mode_history(self) -> ModeHistoryConfig:
        """Get mode history configuration."""
        return self._mode_history

    @property
    def prompts(self) -> PromptsConfig:
        """Get prompt assembly configuration."""
        return self._prompts

    @property
    def chat_store(self) -> ChatStoreConfig:
        """Get chat store configuration."""
        return self._chat_store
