"""
Service Container Unit Tests
Tests registration, dependency resolution and the game service wiring.
"""

import pytest
from unittest.mock import Mock

from container import (
    ServiceContainer, ServiceLifecycle, CircularDependencyError, ServiceNotFoundError,
    configure_container, get_container, reset_container
)


class Greeter:
    def __init__(self, name):
        self.name = name


class TestServiceContainer:
    """Test ServiceContainer basics"""

    def setup_method(self):
        self.container = ServiceContainer()

    def test_singleton_resolution(self):
        self.container.register('Name', lambda: 'Alice')
        self.container.register('Greeter', Greeter, dependencies=['Name'])

        greeter = self.container.get('Greeter')

        assert greeter.name == 'Alice'
        assert self.container.get('Greeter') is greeter

    def test_transient_resolution(self):
        self.container.register('Thing', object, lifecycle=ServiceLifecycle.TRANSIENT)

        assert self.container.get('Thing') is not self.container.get('Thing')

    def test_external_dependency_wins(self):
        self.container.register('Name', lambda: 'Alice')
        self.container.set_external_dependency('Name', 'Bob')

        assert self.container.get('Name') == 'Bob'

    def test_duplicate_registration(self):
        self.container.register('Thing', object)
        with pytest.raises(ValueError, match="already registered"):
            self.container.register('Thing', object)

    def test_non_callable_factory(self):
        with pytest.raises(ValueError, match="must be callable"):
            self.container.register('Thing', 42)

    def test_unknown_service(self):
        with pytest.raises(ServiceNotFoundError):
            self.container.get('Missing')

    def test_circular_dependency(self):
        self.container.register('A', Greeter, dependencies=['B'])
        self.container.register('B', Greeter, dependencies=['A'])

        with pytest.raises(CircularDependencyError):
            self.container.get('A')

    def test_validate_dependencies(self):
        self.container.register('Greeter', Greeter, dependencies=['Name'])

        assert self.container.validate_dependencies() == {'Greeter': ['Name']}

    def test_clear(self):
        self.container.register('Thing', object)
        self.container.get('Thing')

        self.container.clear()

        assert self.container.get_service_names() == []


class TestGameWiring:
    """Test the configured game services"""

    def teardown_method(self):
        reset_container()

    def test_every_service_resolves(self, app_config, mock_socketio):
        configured = configure_container(socketio=mock_socketio, app_config=app_config)

        assert configured.validate_dependencies() == {}
        for name in configured.get_service_names():
            assert configured.get(name) is not None
        assert get_container() is configured

    def test_game_manager_shares_services(self, app_config, mock_socketio):
        scheduler = Mock()
        configured = configure_container(socketio=mock_socketio, app_config=app_config, scheduler=scheduler)

        game_manager = configured.get('GameManager')

        assert game_manager.room_manager is configured.get('RoomManager')
        assert game_manager.scheduler is scheduler
        assert configured.get('BroadcastService').socketio is mock_socketio
        assert configured.get('TurnTimerService').scheduler is scheduler

    def test_reset_container(self):
        first = get_container()
        reset_container()

        assert get_container() is not first
