"""
Game Action Handler

This module handles Socket.IO events for in-game actions:
flipping cards and restarting a finished game.
"""

import logging

from flask import request

from src.core.messages import OutboundEvent
from src.error_handler import with_error_handling
from .base_handler import BaseHandler

logger = logging.getLogger(__name__)


class GameActionHandler(BaseHandler):
    """Handler for card flips and game restarts."""

    @with_error_handling(OutboundEvent.FLIP_ERROR.value)
    def handle_flip_card(self, data):
        """
        Handle a card flip.

        Expected data format:
        {
            'roomId': 'room_name',
            'cardId': 3
        }
        """
        self.log_handler_start('handle_flip_card', data)

        message = self.validation_service.parse_flip_card(data)
        if self.game_manager.flip_card(message, request.sid):
            self.log_handler_success('handle_flip_card', f'Card {message.card_id} in room {message.room_id}')

    @with_error_handling(OutboundEvent.ERROR.value)
    def handle_restart_game(self, data):
        """
        Handle a request to play again after a game ended.

        Expected data format:
        {
            'roomId': 'room_name'
        }
        """
        self.log_handler_start('handle_restart_game', data)

        message = self.validation_service.parse_restart_game(data)
        self.game_manager.restart_game(message, request.sid)

        self.log_handler_success('handle_restart_game', f'Game restarted in room {message.room_id}')
