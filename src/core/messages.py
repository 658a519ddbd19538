"""
Socket message definitions

Inbound messages are parsed into these frozen dataclasses at the handler
boundary, so the state machine never touches a raw payload. Outbound event
names live in OutboundEvent.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class InboundEvent(Enum):
    CREATE_ROOM = "createRoom"
    JOIN_ROOM = "joinRoom"
    FLIP_CARD = "flipCard"
    RESTART_GAME = "restartGame"


class OutboundEvent(Enum):
    ROOM_CREATED = "roomCreated"
    JOIN_ERROR = "joinError"
    FLIP_ERROR = "flipError"
    ERROR = "error"
    PLAYER_JOINED = "playerJoined"
    PLAYER_LEFT = "playerLeft"
    GAME_START = "gameStart"
    GAME_UPDATE = "gameUpdate"
    TIMER_UPDATE = "timerUpdate"
    GAME_END = "gameEnd"
    GAME_RESET = "gameReset"


@dataclass(frozen=True)
class CreateRoomMessage:
    room_id: str
    player_name: str
    password: Optional[str] = None
    pair_count: Optional[int] = None
    turn_duration_seconds: Optional[int] = None


@dataclass(frozen=True)
class JoinRoomMessage:
    room_id: str
    player_name: str
    password: Optional[str] = None


@dataclass(frozen=True)
class FlipCardMessage:
    room_id: str
    card_id: int


@dataclass(frozen=True)
class RestartGameMessage:
    room_id: str
