"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import pytest
import os
from unittest.mock import Mock

# Ensure testing environment before the app module loads its configuration
os.environ['FLASK_ENV'] = 'testing'
os.environ['SOCKETIO_ASYNC_MODE'] = 'threading'

from tests.helpers.manual_clock import ManualClock
from tests.helpers.socket_mocks import create_mock_socketio


@pytest.fixture(scope="session")
def app():
    """Flask app with Socket.IO handlers registered."""
    from app import app as flask_app
    return flask_app


@pytest.fixture(scope="session")
def socketio():
    """The app's SocketIO instance."""
    from app import socketio as socketio_instance
    return socketio_instance


@pytest.fixture
def clock():
    """Manual clock driving every deferred action."""
    return ManualClock()


@pytest.fixture
def app_config():
    """Default testing configuration."""
    from config_factory import AppConfig, Environment
    return AppConfig(environment=Environment.TESTING, socketio_async_mode='threading')


@pytest.fixture
def mock_socketio():
    return create_mock_socketio()


@pytest.fixture
def container(mock_socketio, app_config, clock):
    """Service container wired to a mock SocketIO and a manual clock."""
    from container import configure_container, reset_container
    from src.services.scheduler_service import SchedulerService

    reset_container()
    configured = configure_container(
        socketio=mock_socketio,
        app_config=app_config,
        scheduler=SchedulerService(timer_factory=clock)
    )
    configured.get('ImagePoolManager').load_images_from_yaml()
    yield configured
    reset_container()


@pytest.fixture
def room_manager(container):
    """Provide RoomManager service through dependency injection."""
    return container.get('RoomManager')


@pytest.fixture
def game_manager(container):
    """Provide GameManager service through dependency injection."""
    return container.get('GameManager')


@pytest.fixture
def session_service(container):
    """Provide SessionService through dependency injection."""
    return container.get('SessionService')


@pytest.fixture
def validation_service(container):
    """Provide ValidationService through dependency injection."""
    return container.get('ValidationService')


@pytest.fixture
def mock_game_settings():
    """GameSettings stand-in with the default values."""
    settings = Mock()
    settings.max_players_per_room = 2
    settings.default_pair_count = 8
    settings.min_pair_count = 1
    settings.max_pair_count = 45
    settings.default_turn_duration = 0
    settings.min_turn_duration = 5
    settings.max_turn_duration = 300
    settings.reveal_delay = 1.0
    settings.timer_tick = 1.0
    settings.require_room_password = False
    settings.require_pair_count = False
    settings.require_turn_duration = False
    settings.max_room_id_length = 50
    settings.max_player_name_length = 20
    settings.max_password_length = 64
    settings.matched_player_keeps_turn = True
    settings.retain_ended_rooms = True
    return settings
