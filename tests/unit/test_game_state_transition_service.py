"""
Game State Transition Service Unit Tests

Tests phase transitions and the room invariant checks.
"""

import pytest

from src.core.errors import InvariantViolationError
from src.core.game_phases import RoomPhase
from src.services.game_state_transition_service import GameStateTransitionService


def make_room(phase=RoomPhase.IN_PROGRESS, started=True):
    return {
        "room_id": "room1",
        "players": [
            {"player_id": "sid-a", "name": "Alice", "score": 0, "moves": 0, "hits": 0},
            {"player_id": "sid-b", "name": "Bob", "score": 0, "moves": 0, "hits": 0},
        ],
        "cards": [
            {"id": 0, "image": "a", "is_flipped": False, "is_matched": False},
            {"id": 1, "image": "b", "is_flipped": False, "is_matched": False},
            {"id": 2, "image": "b", "is_flipped": False, "is_matched": False},
            {"id": 3, "image": "a", "is_flipped": False, "is_matched": False},
        ],
        "current_turn": "sid-a",
        "game_started": started,
        "locked": False,
        "phase": phase.value,
    }


class TestPhaseTransitions:

    def setup_method(self):
        self.service = GameStateTransitionService()

    @pytest.mark.parametrize("current,target", [
        (RoomPhase.WAITING, RoomPhase.READY_TO_START),
        (RoomPhase.READY_TO_START, RoomPhase.IN_PROGRESS),
        (RoomPhase.IN_PROGRESS, RoomPhase.ENDED),
        (RoomPhase.IN_PROGRESS, RoomPhase.WAITING),
        (RoomPhase.ENDED, RoomPhase.READY_TO_START),
        (RoomPhase.ENDED, RoomPhase.WAITING),
    ])
    def test_allowed(self, current, target):
        room = make_room(current)

        self.service.transition(room, target)

        assert room["phase"] == target.value

    @pytest.mark.parametrize("current,target", [
        (RoomPhase.WAITING, RoomPhase.IN_PROGRESS),
        (RoomPhase.WAITING, RoomPhase.ENDED),
        (RoomPhase.IN_PROGRESS, RoomPhase.READY_TO_START),
        (RoomPhase.ENDED, RoomPhase.IN_PROGRESS),
    ])
    def test_rejected(self, current, target):
        room = make_room(current)

        with pytest.raises(InvariantViolationError, match="illegal phase transition"):
            self.service.transition(room, target)
        assert room["phase"] == current.value

    def test_unknown_phase(self):
        assert self.service.validate_phase_transition("lobby", "waiting") is False


class TestRoomInvariants:

    def setup_method(self):
        self.service = GameStateTransitionService()
        self.room = make_room()

    def test_valid_room(self):
        self.service.verify_room_invariants(self.room)

    def test_waiting_room_without_deck(self):
        room = make_room(RoomPhase.WAITING, started=False)
        room["cards"] = []
        room["players"].pop()
        room["current_turn"] = None

        self.service.verify_room_invariants(room)

    def test_three_players(self):
        self.room["players"].append({"player_id": "sid-c", "name": "C", "score": 0, "moves": 0, "hits": 0})
        with pytest.raises(InvariantViolationError, match="3 players"):
            self.service.verify_room_invariants(self.room)

    def test_image_not_paired(self):
        self.room["cards"][3]["image"] = "c"
        with pytest.raises(InvariantViolationError, match="exactly twice"):
            self.service.verify_room_invariants(self.room)

    def test_ids_not_permutation(self):
        self.room["cards"][3]["id"] = 7
        with pytest.raises(InvariantViolationError, match="permutation"):
            self.service.verify_room_invariants(self.room)

    def test_turn_not_a_player(self):
        self.room["current_turn"] = "sid-x"
        with pytest.raises(InvariantViolationError, match="current turn"):
            self.service.verify_room_invariants(self.room)

    def test_started_in_wrong_phase(self):
        self.room["phase"] = RoomPhase.ENDED.value
        with pytest.raises(InvariantViolationError, match="game started in phase"):
            self.service.verify_room_invariants(self.room)

    def test_three_cards_face_up(self):
        for c in self.room["cards"][:3]:
            c["is_flipped"] = True
        with pytest.raises(InvariantViolationError, match="3 unmatched cards face up"):
            self.service.verify_room_invariants(self.room)

    def test_locked_requires_pending_pair(self):
        self.room["locked"] = True
        with pytest.raises(InvariantViolationError, match="locked without a pending pair"):
            self.service.verify_room_invariants(self.room)

        self.room["cards"][0]["is_flipped"] = True
        self.room["cards"][1]["is_flipped"] = True
        self.service.verify_room_invariants(self.room)

    def test_matched_card_face_down(self):
        self.room["cards"][0]["is_matched"] = True
        self.room["cards"][3].update(is_matched=True, is_flipped=True)
        with pytest.raises(InvariantViolationError, match="matched but face down"):
            self.service.verify_room_invariants(self.room)
