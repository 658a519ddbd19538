"""
Socket Event Router

This module maps inbound Socket.IO event names to handler methods, runs
middleware in front of them and logs every request.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from flask import request

logger = logging.getLogger(__name__)


class EventRouteNotFoundError(Exception):
    """Raised when an event route is not found."""
    pass


class SocketEventRouter:
    """
    Router for Socket.IO events with middleware support and logging.

    Middleware is called as ``middleware(event_name, data)`` and may return
    replacement data; returning None keeps the data unchanged.
    """

    def __init__(self, socketio_instance=None):
        self.socketio = socketio_instance
        self._routes: Dict[str, Callable] = {}
        self._middleware: List[Callable] = []

    def register_route(self, event_name: str, handler: Callable) -> None:
        """Register an event handler for a specific event."""
        self._routes[event_name] = handler
        logger.debug(f"Registered route: {event_name} -> {handler.__name__}")

    def add_middleware(self, middleware: Callable) -> None:
        """Add middleware that will be executed for all events."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.__name__}")

    def handle_event(self, event_name: str, data: Any = None) -> Any:
        """
        Handle an incoming Socket.IO event.

        Args:
            event_name: The name of the event to handle
            data: The event data

        Returns:
            The result from the handler (if any)

        Raises:
            EventRouteNotFoundError: If no handler is registered for the event
        """
        if event_name not in self._routes:
            raise EventRouteNotFoundError(f"No handler registered for event: {event_name}")

        logger.info(f"Handling event: {event_name} from client: {request.sid}")  # type: ignore[attr-defined]

        for middleware in self._middleware:
            result = middleware(event_name, data)
            if result is not None:
                data = result

        return self._routes[event_name](data)

    def get_registered_events(self) -> List[str]:
        """Get a list of all registered event names."""
        return list(self._routes.keys())

    def has_route(self, event_name: str) -> bool:
        return event_name in self._routes

    def register_with_socketio(self) -> None:
        """Bind every registered route to the SocketIO instance."""
        for event_name in self.get_registered_events():
            self.socketio.on_event(event_name, self._make_socketio_handler(event_name))
            logger.debug(f"Registered SocketIO handler for: {event_name}")

    def _make_socketio_handler(self, event_name: str) -> Callable:
        def socketio_handler(data=None):
            return self.handle_event(event_name, data)
        socketio_handler.__name__ = f"on_{event_name}"
        return socketio_handler


def request_logging_middleware(event_name: str, data: Any) -> Any:
    """Log the payload of every inbound event at debug level."""
    if data is not None:
        logger.debug(f"Event data for {event_name}: {data}")
    return data


_default_router: Optional[SocketEventRouter] = None


def get_router() -> SocketEventRouter:
    """Get the default router instance."""
    if _default_router is None:
        raise RuntimeError("Router not initialized. Call setup_router() first.")
    return _default_router


def setup_router(socketio_instance) -> SocketEventRouter:
    """Set up the default router with the SocketIO instance."""
    global _default_router
    _default_router = SocketEventRouter(socketio_instance)
    _default_router.add_middleware(request_logging_middleware)

    logger.info("Socket event router initialized")
    return _default_router
