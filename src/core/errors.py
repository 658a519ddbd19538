"""
Core error definitions for the Pairs game server

Provides error codes, their categories and the exceptions raised by the
room/turn state machine. Nothing here depends on other services.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCategory(Enum):
    """How an error is treated by the transport layer."""
    ADMISSION = "admission"
    TURN_PROTOCOL = "turn_protocol"
    INTERNAL = "internal"


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Admission errors (create/join/restart)
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    DUPLICATE_ROOM_ID = "DUPLICATE_ROOM_ID"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INVALID_CONFIG = "INVALID_CONFIG"
    ALREADY_IN_ROOM = "ALREADY_IN_ROOM"
    INSUFFICIENT_IMAGE_POOL = "INSUFFICIENT_IMAGE_POOL"

    # Turn protocol violations
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    ANIMATION_IN_PROGRESS = "ANIMATION_IN_PROGRESS"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_NOT_ENDED = "GAME_NOT_ENDED"
    NOT_IN_ROOM = "NOT_IN_ROOM"
    INVALID_DATA = "INVALID_DATA"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def category(self) -> ErrorCategory:
        if self in _ADMISSION_CODES:
            return ErrorCategory.ADMISSION
        if self == ErrorCode.INTERNAL_ERROR:
            return ErrorCategory.INTERNAL
        return ErrorCategory.TURN_PROTOCOL


_ADMISSION_CODES = frozenset({
    ErrorCode.ROOM_NOT_FOUND,
    ErrorCode.ROOM_FULL,
    ErrorCode.DUPLICATE_ROOM_ID,
    ErrorCode.AUTHENTICATION_FAILED,
    ErrorCode.INVALID_CONFIG,
    ErrorCode.ALREADY_IN_ROOM,
    ErrorCode.INSUFFICIENT_IMAGE_POOL,
})


class ValidationError(Exception):
    """Raised for admission errors and turn-protocol violations.

    Reported to the originating connection only; room state is left unchanged.
    """

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvariantViolationError(Exception):
    """Raised when room state breaks an invariant. Always a server defect."""

    def __init__(self, room_id: str, message: str):
        self.room_id = room_id
        self.message = message
        super().__init__(f"Room {room_id}: {message}")
