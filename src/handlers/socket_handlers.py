"""
Socket.IO event handlers for the Pairs game.

This module provides the registration function and the connection and
disconnection handlers.
"""

import logging
import os

from flask import request

from container import get_container
from src.core.messages import InboundEvent
from .socket_event_router import setup_router
from .room_connection_handler import RoomConnectionHandler
from .game_action_handler import GameActionHandler

logger = logging.getLogger(__name__)


def register_socket_handlers(socketio_instance):
    """Register all socket handlers with the SocketIO instance."""
    router = setup_router(socketio_instance)

    room_handler = RoomConnectionHandler()
    game_handler = GameActionHandler()

    # Connection lifecycle events bypass the router
    socketio_instance.on_event('connect', handle_connect)
    socketio_instance.on_event('disconnect', handle_disconnect)

    router.register_route(InboundEvent.CREATE_ROOM.value, room_handler.handle_create_room)
    router.register_route(InboundEvent.JOIN_ROOM.value, room_handler.handle_join_room)
    router.register_route(InboundEvent.FLIP_CARD.value, game_handler.handle_flip_card)
    router.register_route(InboundEvent.RESTART_GAME.value, game_handler.handle_restart_game)

    router.register_with_socketio()

    logger.info(f"Registered {len(router.get_registered_events())} socket event handlers")
    return router


def handle_connect(auth=None):
    """Handle client connection with optional Origin enforcement in production."""
    app_config = get_container().get('AppConfig')
    allowed_origins_env = os.environ.get('SOCKETIO_CORS_ALLOWED_ORIGINS', '')

    origin = request.headers.get('Origin')
    # Enforce Origin in production if a CORS allowlist is configured
    if app_config.is_production and allowed_origins_env:
        allowed = {o.strip() for o in allowed_origins_env.split(',') if o.strip()}
        if origin and origin not in allowed:
            logger.warning(f'Rejecting connection from disallowed Origin: {origin}')
            return False
    logger.info(f'New connection: {request.sid} from Origin: {origin}')  # type: ignore[attr-defined]


def handle_disconnect(reason=None):
    """Remove the player from their room and reset or delete it."""
    game_manager = get_container().get('GameManager')
    logger.info(f'Client disconnected: {request.sid}')  # type: ignore[attr-defined]
    game_manager.handle_disconnect(request.sid)  # type: ignore[attr-defined]
