"""
Room Connection Handler Unit Tests

Tests createRoom and joinRoom handling, with admission failures reported
on joinError.
"""

import pytest
from unittest.mock import MagicMock, Mock, patch

from src.core.errors import ErrorCode, ValidationError
from src.core.messages import CreateRoomMessage, JoinRoomMessage
from src.handlers.room_connection_handler import RoomConnectionHandler
from src.services.validation_service import ValidationService


@pytest.fixture
def handler_env(mock_game_settings):
    container = Mock()
    game_manager = Mock()
    services = {'GameManager': game_manager, 'ValidationService': ValidationService(mock_game_settings)}
    container.get.side_effect = services.__getitem__

    with patch('src.handlers.base_handler.get_container', return_value=container), \
         patch('src.handlers.base_handler.request', new=MagicMock()) as base_request, \
         patch('src.handlers.room_connection_handler.request', new=MagicMock()) as handler_request, \
         patch('src.services.error_response_factory.emit') as mock_emit:
        base_request.sid = handler_request.sid = 'sid-a'
        yield RoomConnectionHandler(), game_manager, mock_emit


class TestRoomConnectionHandler:

    def test_create_room(self, handler_env):
        handler, game_manager, mock_emit = handler_env

        handler.handle_create_room({'roomId': 'room1', 'playerName': 'Alice', 'pairCount': 4})

        game_manager.create_room.assert_called_once_with(
            CreateRoomMessage('room1', 'Alice', None, 4, None), 'sid-a'
        )
        mock_emit.assert_not_called()

    def test_create_room_invalid_config(self, handler_env):
        handler, game_manager, mock_emit = handler_env

        handler.handle_create_room({'roomId': 'room 1', 'playerName': 'Alice'})

        game_manager.create_room.assert_not_called()
        event, payload = mock_emit.call_args[0]
        assert event == 'joinError'
        assert payload['error']['code'] == 'INVALID_CONFIG'

    def test_create_room_duplicate(self, handler_env):
        handler, game_manager, mock_emit = handler_env
        game_manager.create_room.side_effect = ValidationError(ErrorCode.DUPLICATE_ROOM_ID, "Room room1 already exists")

        handler.handle_create_room({'roomId': 'room1', 'playerName': 'Alice'})

        assert mock_emit.call_args[0][1]['error']['code'] == 'DUPLICATE_ROOM_ID'

    def test_join_room(self, handler_env):
        handler, game_manager, mock_emit = handler_env

        handler.handle_join_room({'roomId': 'room1', 'playerName': 'Bob', 'password': 'pw'})

        game_manager.join_room.assert_called_once_with(JoinRoomMessage('room1', 'Bob', 'pw'), 'sid-a')

    def test_join_room_full(self, handler_env):
        handler, game_manager, mock_emit = handler_env
        game_manager.join_room.side_effect = ValidationError(ErrorCode.ROOM_FULL, "Room room1 is full")

        handler.handle_join_room({'roomId': 'room1', 'playerName': 'Carol'})

        event, payload = mock_emit.call_args[0]
        assert event == 'joinError'
        assert payload == {
            'success': False,
            'error': {'code': 'ROOM_FULL', 'message': 'Room room1 is full', 'details': {}}
        }
