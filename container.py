"""
Service Container - Dependency Injection Container for the Pairs server
Manages service creation, dependencies, and lifecycle.
"""

from typing import Dict, Any, List, Optional, Callable
import inspect
from enum import Enum


class ServiceLifecycle(Enum):
    """Service lifecycle management options"""
    SINGLETON = "singleton"  # One instance per container
    TRANSIENT = "transient"  # New instance every time


class ServiceDefinition:
    """Definition of how a service should be created"""

    def __init__(
        self,
        name: str,
        factory: Callable,
        dependencies: Optional[List[str]] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON
    ):
        self.name = name
        self.factory = factory
        self.dependencies = dependencies or []
        self.lifecycle = lifecycle


class CircularDependencyError(Exception):
    """Raised when circular dependency is detected"""
    pass


class ServiceNotFoundError(Exception):
    """Raised when requested service is not registered"""
    pass


class ServiceContainer:
    """
    Dependency Injection Container for managing services and their dependencies.

    Dependencies are passed positionally, in the order they are declared.
    Instances set with set_external_dependency() take precedence over
    registered factories, which lets tests swap in a scheduler driven by a
    manual clock.
    """

    def __init__(self):
        self._services: Dict[str, ServiceDefinition] = {}
        self._instances: Dict[str, Any] = {}
        self._creating: set = set()  # Track services being created (circular detection)

    def register(
        self,
        name: str,
        factory: Callable,
        dependencies: Optional[List[str]] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON
    ) -> 'ServiceContainer':
        """
        Register a service with the container.

        Args:
            name: Service name for retrieval
            factory: Class or function to create the service
            dependencies: List of service names this service depends on
            lifecycle: How the service instance should be managed

        Returns:
            Self for method chaining
        """
        if name in self._services:
            raise ValueError(f"Service '{name}' is already registered")

        if not callable(factory):
            raise ValueError(f"Factory for '{name}' must be callable")

        self._services[name] = ServiceDefinition(
            name=name,
            factory=factory,
            dependencies=dependencies,
            lifecycle=lifecycle
        )
        return self

    def configure_services(self) -> 'ServiceContainer':
        """Register all game services with their dependencies."""
        from src.config.game_settings import GameSettings
        from src.room_manager import RoomManager
        from src.game_manager import GameManager
        from src.services.deck_service import DeckService
        from src.services.validation_service import ValidationService
        from src.services.error_response_factory import ErrorResponseFactory
        from src.services.session_service import SessionService
        from src.services.room_state_presenter import RoomStatePresenter
        from src.services.broadcast_service import BroadcastService
        from src.services.scheduler_service import SchedulerService
        from src.services.turn_timer_service import TurnTimerService
        from src.services.match_resolution_service import MatchResolutionService
        from src.services.game_state_transition_service import GameStateTransitionService

        # Settings - depend on the external AppConfig
        self.register('GameSettings', GameSettings, dependencies=['AppConfig'])
        self.register('ImagePoolManager', _create_image_pool_manager, dependencies=['GameSettings'])

        # Stateless services - no dependencies
        self.register('ErrorResponseFactory', ErrorResponseFactory)
        self.register('SessionService', SessionService)
        self.register('RoomStatePresenter', RoomStatePresenter)
        self.register('SchedulerService', SchedulerService)
        self.register('MatchResolutionService', MatchResolutionService)
        self.register('GameStateTransitionService', GameStateTransitionService)

        self.register('ValidationService', ValidationService, dependencies=['GameSettings'])
        self.register('DeckService', DeckService, dependencies=['ImagePoolManager'])
        self.register('RoomManager', RoomManager, dependencies=['GameSettings'])

        # Broadcast service - socketio is injected as external dependency
        self.register('BroadcastService', BroadcastService, dependencies=['socketio', 'RoomStatePresenter'])

        self.register('TurnTimerService', TurnTimerService,
                      dependencies=['SchedulerService', 'RoomManager', 'BroadcastService', 'GameSettings'])

        self.register('GameManager', GameManager, dependencies=[
            'RoomManager', 'DeckService', 'BroadcastService', 'SchedulerService', 'SessionService',
            'MatchResolutionService', 'GameStateTransitionService', 'TurnTimerService', 'GameSettings'
        ])

        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """
        Set an external dependency that's created outside the container.
        Useful for Flask-SocketIO and similar framework objects.
        """
        self._instances[name] = instance
        return self

    def get(self, name: str) -> Any:
        """
        Get a service instance, creating it if necessary.

        Args:
            name: Service name to retrieve

        Returns:
            Service instance

        Raises:
            ServiceNotFoundError: If service is not registered
            CircularDependencyError: If circular dependency detected
        """
        if name in self._instances:
            return self._instances[name]

        if name not in self._services:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")

        return self._create_service(name)

    def _create_service(self, name: str) -> Any:
        """
        Create a service instance with dependency injection.
        """
        if name in self._creating:
            cycle = ' -> '.join(list(self._creating) + [name])
            raise CircularDependencyError(f"Circular dependency detected: {cycle}")

        self._creating.add(name)

        try:
            service_def = self._services[name]
            dependencies = [self.get(dep_name) for dep_name in service_def.dependencies]

            if inspect.isclass(service_def.factory) and not service_def.dependencies:
                instance = service_def.factory()
            else:
                instance = service_def.factory(*dependencies)

            if service_def.lifecycle == ServiceLifecycle.SINGLETON:
                self._instances[name] = instance

            return instance

        finally:
            self._creating.discard(name)

    def has_service(self, name: str) -> bool:
        """Check if a service is registered"""
        return name in self._services

    def get_service_names(self) -> List[str]:
        """Get list of all registered service names"""
        return list(self._services.keys())

    def validate_dependencies(self) -> Dict[str, List[str]]:
        """
        Validate all service dependencies can be resolved.

        Returns:
            Dictionary mapping service names to lists of missing dependencies
        """
        issues = {}

        for name, service_def in self._services.items():
            missing_deps = [
                dep for dep in service_def.dependencies
                if not self.has_service(dep) and dep not in self._instances
            ]
            if missing_deps:
                issues[name] = missing_deps

        return issues

    def clear(self) -> 'ServiceContainer':
        """Clear all services and instances (useful for testing)"""
        self._services.clear()
        self._instances.clear()
        self._creating.clear()
        return self

    def __repr__(self) -> str:
        return f"ServiceContainer(services={len(self._services)}, instances={len(self._instances)})"


def _create_image_pool_manager(game_settings):
    from src.image_pool_manager import ImagePoolManager
    return ImagePoolManager(game_settings.images_file)


# Global container instance for the application
_app_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the global application service container"""
    global _app_container
    if _app_container is None:
        _app_container = ServiceContainer()
    return _app_container


def reset_container() -> None:
    """Drop the global container (for testing)."""
    global _app_container
    _app_container = None


def configure_container(socketio=None, app_config=None, scheduler=None) -> ServiceContainer:
    """
    Configure the global service container with the game services.

    Args:
        socketio: Flask-SocketIO instance
        app_config: AppConfig instance, the loaded global config when omitted
        scheduler: Optional SchedulerService replacing the default one

    Returns:
        Configured service container
    """
    if app_config is None:
        from config_factory import get_config
        app_config = get_config()

    container = get_container()
    container.clear()

    if socketio is not None:
        container.set_external_dependency('socketio', socketio)
    container.set_external_dependency('AppConfig', app_config)
    if scheduler is not None:
        container.set_external_dependency('SchedulerService', scheduler)

    container.configure_services()

    return container
