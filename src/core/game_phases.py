"""
Room Phase Enumeration

Defines the room states used by the turn state machine.
"""

from enum import Enum


class RoomPhase(Enum):
    """Room phase enumeration."""
    WAITING = "waiting"
    READY_TO_START = "ready_to_start"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"
