"""
Base Handler Classes

This module provides the base class for Socket.IO handlers with common
service access and logging.
"""

import logging
from typing import Any, Optional

from flask import request

from container import get_container

logger = logging.getLogger(__name__)


class BaseHandler:
    """
    Base class for all Socket.IO handlers.

    Services are resolved from the container on every access, so a
    reconfigured container is picked up without recreating handlers.
    """

    @property
    def _container(self):
        return get_container()

    @property
    def game_manager(self):
        """Get the game manager service."""
        return self._container.get('GameManager')

    @property
    def validation_service(self):
        """Get the validation service."""
        return self._container.get('ValidationService')

    def log_handler_start(self, handler_name: str, data: Any = None) -> None:
        """Log the start of handler execution."""
        logger.info(f'{handler_name} called by client: {request.sid}')  # type: ignore[attr-defined]
        if data:
            logger.debug(f'{handler_name} data: {data}')

    def log_handler_success(self, handler_name: str, message: Optional[str] = None) -> None:
        """Log successful handler completion."""
        log_msg = f'{handler_name} completed successfully for client: {request.sid}'  # type: ignore[attr-defined]
        if message:
            log_msg += f' - {message}'
        logger.info(log_msg)
