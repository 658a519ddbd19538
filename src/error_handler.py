"""
Error Handler for the Pairs game

Provides the decorator that turns exceptions raised by Socket.IO event
handlers into error events for the sender.
"""

import functools
import logging

from src.core.errors import ValidationError
from src.core.messages import OutboundEvent
from src.services.error_response_factory import ErrorResponseFactory

logger = logging.getLogger(__name__)


def with_error_handling(error_event: str = OutboundEvent.ERROR.value):
    """
    Decorator for Socket.IO event handlers to provide consistent error handling.

    A ValidationError is reported on ``error_event`` to the sender. Anything
    else is logged with its traceback and reported as INTERNAL_ERROR.

    Args:
        error_event: Outbound event name for errors raised by the handler

    Returns:
        Decorator wrapping the handler
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ValidationError as e:
                factory = ErrorResponseFactory()
                factory.emit_validation_error(e, error_event)
            except Exception as e:
                factory = ErrorResponseFactory()
                error_code, error_message = factory.handle_exception(e, func.__name__)
                factory.emit_error(error_code, error_message, event=error_event)
        return wrapper
    return decorator
