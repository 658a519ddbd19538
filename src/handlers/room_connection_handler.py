"""
Room Connection Handler

This module handles Socket.IO events that admit players to rooms:
creating a room and joining one.
"""

import logging

from flask import request

from src.core.messages import OutboundEvent
from src.error_handler import with_error_handling
from .base_handler import BaseHandler

logger = logging.getLogger(__name__)


class RoomConnectionHandler(BaseHandler):
    """Handler for room creation and joining."""

    @with_error_handling(OutboundEvent.JOIN_ERROR.value)
    def handle_create_room(self, data):
        """
        Handle a player creating a room.

        Expected data format:
        {
            'roomId': 'room_name',
            'playerName': 'display_name',
            'password': 'optional',
            'pairCount': 8,
            'turnDurationSeconds': 30
        }
        """
        self.log_handler_start('handle_create_room', data)

        message = self.validation_service.parse_create_room(data)
        self.game_manager.create_room(message, request.sid)

        self.log_handler_success(
            'handle_create_room',
            f'Room {message.room_id} created by {message.player_name}'
        )

    @with_error_handling(OutboundEvent.JOIN_ERROR.value)
    def handle_join_room(self, data):
        """
        Handle a player joining a room.

        Expected data format:
        {
            'roomId': 'room_name',
            'playerName': 'display_name',
            'password': 'optional'
        }
        """
        self.log_handler_start('handle_join_room', data)

        message = self.validation_service.parse_join_room(data)
        self.game_manager.join_room(message, request.sid)

        self.log_handler_success(
            'handle_join_room',
            f'Player {message.player_name} joined room {message.room_id}'
        )
