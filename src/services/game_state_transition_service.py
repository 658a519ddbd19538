"""
Game State Transition Service for the Pairs game

Validates room phase transitions and checks room invariants after every
mutation. A failed check is a server defect and raises
InvariantViolationError rather than being tolerated.
"""

import logging
from collections import Counter
from typing import Dict

from src.core.errors import InvariantViolationError
from src.core.game_phases import RoomPhase

logger = logging.getLogger(__name__)

MAX_PLAYERS = 2


class GameStateTransitionService:
    """Manages room phase transitions and invariant checks."""

    VALID_TRANSITIONS = {
        RoomPhase.WAITING: {RoomPhase.WAITING, RoomPhase.READY_TO_START},
        RoomPhase.READY_TO_START: {RoomPhase.IN_PROGRESS, RoomPhase.WAITING},
        RoomPhase.IN_PROGRESS: {RoomPhase.ENDED, RoomPhase.WAITING},
        RoomPhase.ENDED: {RoomPhase.READY_TO_START, RoomPhase.WAITING},
    }

    def validate_phase_transition(self, current_phase: str, new_phase: str) -> bool:
        """
        Validate that a phase transition is allowed.

        Args:
            current_phase: Current room phase value
            new_phase: Requested new phase value

        Returns:
            True if transition is valid, False otherwise
        """
        try:
            current = RoomPhase(current_phase)
            target = RoomPhase(new_phase)
        except ValueError:
            return False
        return target in self.VALID_TRANSITIONS[current]

    def transition(self, room: Dict, new_phase: RoomPhase) -> None:
        """
        Move a room to a new phase.

        Raises:
            InvariantViolationError: If the transition is not allowed
        """
        current_phase = room["phase"]
        if not self.validate_phase_transition(current_phase, new_phase.value):
            raise InvariantViolationError(
                room["room_id"], f"illegal phase transition {current_phase} -> {new_phase.value}"
            )
        room["phase"] = new_phase.value
        logger.debug(f"Room {room['room_id']} phase {current_phase} -> {new_phase.value}")

    def verify_room_invariants(self, room: Dict) -> None:
        """
        Check every room invariant.

        Raises:
            InvariantViolationError: On the first broken invariant
        """
        room_id = room["room_id"]
        players = room["players"]
        cards = room["cards"]

        def fail(message: str):
            logger.error(f"Invariant violation in room {room_id}: {message}")
            raise InvariantViolationError(room_id, message)

        if len(players) > MAX_PLAYERS:
            fail(f"{len(players)} players in a two-player room")

        player_ids = [p["player_id"] for p in players]
        if len(player_ids) != len(set(player_ids)):
            fail("duplicate player connection ids")

        if len(cards) % 2 != 0:
            fail(f"odd deck size {len(cards)}")

        ids = [card["id"] for card in cards]
        if sorted(ids) != list(range(len(cards))):
            fail("card ids are not a permutation of 0..N-1")

        image_counts = Counter(card["image"] for card in cards)
        if any(count != 2 for count in image_counts.values()):
            fail("an image does not occur exactly twice")

        if room["game_started"]:
            if room["phase"] != RoomPhase.IN_PROGRESS.value:
                fail(f"game started in phase {room['phase']}")
            if len(players) != MAX_PLAYERS:
                fail("game started without two players")
            if room["current_turn"] not in player_ids:
                fail(f"current turn {room['current_turn']} is not a player")

        face_up = [c for c in cards if c["is_flipped"] and not c["is_matched"]]
        if len(face_up) > 2:
            fail(f"{len(face_up)} unmatched cards face up")

        if room["locked"] and len(face_up) != 2:
            fail("room locked without a pending pair")

        if room["locked"] and not room["game_started"]:
            fail("room locked outside a game")

        for card in cards:
            if card["is_matched"] and not card["is_flipped"]:
                fail(f"card {card['id']} matched but face down")
