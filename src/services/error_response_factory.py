"""
Error Response Factory for the Pairs game

Provides standardized error response creation and delivery to the sender.
"""

import logging
import traceback
from typing import Dict, Optional, Tuple

from flask_socketio import emit

from src.core.errors import ErrorCategory, ErrorCode, ValidationError
from src.core.messages import OutboundEvent

logger = logging.getLogger(__name__)


class ErrorResponseFactory:
    """Factory responsible for creating standardized error responses."""

    def create_error_response(self, code: ErrorCode, message: str, details: Optional[Dict] = None) -> Dict:
        """
        Create standardized error response.

        Args:
            code: Error code enum
            message: Human-readable error message
            details: Optional additional error details

        Returns:
            Standardized error response
        """
        return {
            "success": False,
            "error": {
                "code": code.value,
                "message": message,
                "details": details or {}
            }
        }

    def emit_error(self, code: ErrorCode, message: str, details: Optional[Dict] = None,
                   event: str = OutboundEvent.ERROR.value):
        """
        Emit standardized error response to the requesting client only.

        Args:
            code: Error code enum
            message: Human-readable error message
            details: Optional additional error details
            event: Outbound event name carrying the error
        """
        error_response = self.create_error_response(code, message, details)

        if code.category == ErrorCategory.INTERNAL:
            logger.error(f"Emitting {event}: {code.value} - {message}")
        else:
            logger.warning(f"Emitting {event}: {code.value} - {message}")
        emit(event, error_response)

    def emit_validation_error(self, error: ValidationError, event: str = OutboundEvent.ERROR.value):
        self.emit_error(error.code, error.message, error.details, event)

    def handle_exception(self, e: Exception, context: str = "Unknown") -> Tuple[ErrorCode, str]:
        """
        Handle unexpected exceptions and return appropriate error code and message.

        Args:
            e: Exception instance
            context: Context where the exception occurred

        Returns:
            Tuple of (error_code, error_message)
        """
        if isinstance(e, ValidationError):
            return e.code, e.message

        logger.error(f"Unexpected exception in {context}: {str(e)}")
        logger.error(f"Exception traceback: {traceback.format_exc()}")

        return ErrorCode.INTERNAL_ERROR, "An internal error occurred"
