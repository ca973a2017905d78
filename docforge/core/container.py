"""Dependency Injection Container for docforge.

Explicit registration, explicit resolution. create_container() is the
composition root; tool plugins receive the container and resolve their
collaborators (the chat store, mostly) from it.
"""
import logging
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from .exceptions import DocForgeError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ContainerError(DocForgeError):
    """Raised when container operations fail."""
    pass


class ServiceNotFoundError(ContainerError):
    """Raised when a requested service is not registered."""
    pass


class Container:
    """
    Holds ready instances and lazy factories keyed by interface.

    A factory runs on the first resolve() and its result is kept, so each
    interface resolves to one instance per container.
    """

    def __init__(self):
        self._services: Dict[type, Any] = {}
        self._factories: Dict[type, Callable[["Container"], Any]] = {}

    def register(self, interface: Type[T], implementation: T) -> None:
        self._services[interface] = implementation
        logger.debug(f"Registered instance: {interface.__name__}")

    def register_factory(
        self,
        interface: Type[T],
        factory: Callable[["Container"], T]
    ) -> None:
        self._factories[interface] = factory
        logger.debug(f"Registered factory: {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Resolve a service by interface.

        Raises:
            ServiceNotFoundError: If neither an instance nor a factory is registered.
        """
        if interface in self._services:
            return self._services[interface]

        factory = self._factories.get(interface)
        if factory is None:
            known = sorted(t.__name__ for t in {**self._factories, **self._services})
            raise ServiceNotFoundError(
                f"No registration for {interface.__name__}. Available: {known}"
            )

        instance = factory(self)
        self._services[interface] = instance
        logger.debug(f"Created {interface.__name__} from factory")
        return instance


def create_container(config_path: Optional[str] = None) -> Container:
    """
    Create and configure the application container.

    This is the composition root where all services are wired together.
    Call this once at application startup.

    Args:
        config_path: Optional path to config.yaml.

    Returns:
        Configured Container with all services registered.
    """
    from .config import Config
    from .registry import PluginRegistry
    from .tool_factory import ToolFactory
    from .interfaces.services import IChatStore, ICapabilitySource
    from ..adapters.dynamodb import DynamoDBClient, DynamoDBChatStore
    from ..adapters.capabilities import YamlCapabilitySource
    from ..prompts import (
        PromptRegistry,
        PromptComposer,
        PromptAssembler,
        ScenarioRegistry,
        prompt_registry,
    )
    from ..config import load_yaml_config

    container = Container()

    # Register Config first (other services depend on it)
    container.register_factory(Config, lambda c: Config(config_path))

    # ===========================================================================
    # Prompt System
    # ===========================================================================
    container.register(PromptRegistry, prompt_registry)
    container.register_factory(
        PromptComposer,
        lambda c: PromptComposer(registry=c.resolve(PromptRegistry))
    )
    container.register_factory(
        ScenarioRegistry,
        lambda c: ScenarioRegistry.from_file(c.resolve(Config).prompts.scenarios_file)
    )
    container.register_factory(
        PromptAssembler,
        lambda c: PromptAssembler.from_composer(
            c.resolve(PromptComposer),
            separator=c.resolve(Config).prompts.separator,
        )
    )

    # ===========================================================================
    # Persistence and Capabilities
    # ===========================================================================

    container.register_factory(
        DynamoDBClient, lambda c: DynamoDBClient(c.resolve(Config).chat_store)
    )
    container.register_factory(
        IChatStore,
        lambda c: DynamoDBChatStore(
            client=c.resolve(DynamoDBClient),
            table_name=c.resolve(Config).chat_store.table_name,
        )
    )
    container.register_factory(
        ICapabilitySource,
        lambda c: YamlCapabilitySource(
            load_yaml_config(c.resolve(Config).prompts.capabilities_file)
        )
    )

    # ===========================================================================
    # Tools
    # ===========================================================================
    container.register_factory(PluginRegistry, lambda c: PluginRegistry())
    container.register_factory(
        ToolFactory,
        lambda c: ToolFactory(registry=c.resolve(PluginRegistry), container=c)
    )

    logger.info("Application container created with all services")
    return container
