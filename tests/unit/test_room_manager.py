"""
Unit tests for RoomManager class.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest

from src.core.errors import ErrorCode, ValidationError
from src.core.game_phases import RoomPhase
from src.room_manager import RoomManager


class TestRoomManager:
    """Test cases for RoomManager functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.room_manager = RoomManager()

    def test_create_room_success(self):
        """Test successful room creation."""
        room = self.room_manager.create_room("room1", "Alice", "sid-a", pair_count=4, turn_duration=30)

        assert room["room_id"] == "room1"
        assert [p["name"] for p in room["players"]] == ["Alice"]
        assert room["players"][0] == {"player_id": "sid-a", "name": "Alice", "score": 0, "moves": 0, "hits": 0}
        assert room["phase"] == RoomPhase.WAITING.value
        assert room["cards"] == []
        assert room["pair_count"] == 4
        assert room["turn_duration"] == 30
        assert room["password_hash"] is None
        assert isinstance(room["created_at"], datetime)

    def test_create_room_uses_defaults(self, mock_game_settings):
        mock_game_settings.default_pair_count = 6
        mock_game_settings.default_turn_duration = 20
        room_manager = RoomManager(mock_game_settings)

        room = room_manager.create_room("room1", "Alice", "sid-a")

        assert room["pair_count"] == 6
        assert room["turn_duration"] == 20

    def test_create_room_duplicate_fails(self):
        """Test that creating duplicate room raises error."""
        self.room_manager.create_room("room1", "Alice", "sid-a")

        with pytest.raises(ValidationError) as exc_info:
            self.room_manager.create_room("room1", "Bob", "sid-b")
        assert exc_info.value.code == ErrorCode.DUPLICATE_ROOM_ID
        assert len(self.room_manager.get_room_players("room1")) == 1

    def test_create_room_requires_names(self):
        with pytest.raises(ValidationError) as exc_info:
            self.room_manager.create_room("", "Alice", "sid-a")
        assert exc_info.value.code == ErrorCode.INVALID_CONFIG

    def test_password_is_hashed(self):
        room = self.room_manager.create_room("room1", "Alice", "sid-a", password="hunter2")

        assert room["password_hash"] is not None
        assert room["password_hash"] != "hunter2"

    def test_join_room(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")

        room = self.room_manager.join_room("room1", "Bob", "sid-b")

        assert [p["player_id"] for p in room["players"]] == ["sid-a", "sid-b"]

    def test_join_missing_room(self):
        with pytest.raises(ValidationError) as exc_info:
            self.room_manager.join_room("nowhere", "Bob", "sid-b")
        assert exc_info.value.code == ErrorCode.ROOM_NOT_FOUND

    def test_join_full_room(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")
        self.room_manager.join_room("room1", "Bob", "sid-b")

        with pytest.raises(ValidationError) as exc_info:
            self.room_manager.join_room("room1", "Carol", "sid-c")
        assert exc_info.value.code == ErrorCode.ROOM_FULL

    def test_join_twice(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")

        with pytest.raises(ValidationError) as exc_info:
            self.room_manager.join_room("room1", "Alice again", "sid-a")
        assert exc_info.value.code == ErrorCode.ALREADY_IN_ROOM

    def test_join_with_password(self):
        self.room_manager.create_room("room1", "Alice", "sid-a", password="hunter2")

        for attempt in (None, "", "wrong"):
            with pytest.raises(ValidationError) as exc_info:
                self.room_manager.join_room("room1", "Bob", "sid-b", attempt)
            assert exc_info.value.code == ErrorCode.AUTHENTICATION_FAILED

        room = self.room_manager.join_room("room1", "Bob", "sid-b", "hunter2")
        assert len(room["players"]) == 2

    def test_open_room_ignores_offered_password(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")

        room = self.room_manager.join_room("room1", "Bob", "sid-b", "anything")

        assert len(room["players"]) == 2

    def test_remove_player_keeps_room(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")
        self.room_manager.join_room("room1", "Bob", "sid-b")

        removed = self.room_manager.remove_player_from_room("room1", "sid-a")

        assert removed["name"] == "Alice"
        assert [p["name"] for p in self.room_manager.get_room_players("room1")] == ["Bob"]

    def test_remove_last_player_deletes_room(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")

        self.room_manager.remove_player_from_room("room1", "sid-a")

        assert not self.room_manager.room_exists("room1")
        assert "room1" not in self.room_manager.concurrency_control._room_locks

    def test_remove_unknown_player(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")

        assert self.room_manager.remove_player_from_room("room1", "sid-x") is None
        assert self.room_manager.remove_player_from_room("nowhere", "sid-a") is None

    def test_delete_room_is_idempotent(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")

        assert self.room_manager.delete_room("room1") is True
        assert self.room_manager.delete_room("room1") is False

    def test_get_room_state_is_a_copy(self):
        room = self.room_manager.create_room("room1", "Alice", "sid-a")
        room["tasks"]["reveal"] = object()

        state = self.room_manager.get_room_state("room1")
        state["players"][0]["score"] = 99

        assert room["players"][0]["score"] == 0
        assert "tasks" not in state
        assert state["pending_tasks"] == ["reveal"]
        assert self.room_manager.get_room_state("nowhere") is None

    def test_get_room_players_are_copies(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")

        players = self.room_manager.get_room_players("room1")
        players[0]["name"] = "Mallory"

        assert self.room_manager.get_room("room1")["players"][0]["name"] == "Alice"
        assert self.room_manager.get_room_players("nowhere") == []

    def test_find_rooms_for_player(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")
        self.room_manager.create_room("room2", "Bob", "sid-b")

        assert self.room_manager.find_rooms_for_player("sid-a") == ["room1"]
        assert self.room_manager.find_rooms_for_player("sid-x") == []

    def test_find_player(self):
        room = self.room_manager.create_room("room1", "Alice", "sid-a")

        assert self.room_manager.find_player(room, "sid-a")["name"] == "Alice"
        assert self.room_manager.find_player(room, "sid-x") is None

    def test_get_all_rooms(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")
        self.room_manager.create_room("room2", "Bob", "sid-b")

        assert sorted(self.room_manager.get_all_rooms()) == ["room1", "room2"]


class TestRoomManagerConcurrency:
    """Test room operations under concurrent access."""

    def setup_method(self):
        self.room_manager = RoomManager()

    def test_concurrent_joins_admit_one(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")

        def join(index):
            try:
                self.room_manager.join_room("room1", f"Player{index}", f"sid-{index}")
                return True
            except ValidationError as e:
                assert e.code == ErrorCode.ROOM_FULL
                return False

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(join, range(8)))

        assert results.count(True) == 1
        assert len(self.room_manager.get_room_players("room1")) == 2

    def test_concurrent_creates_of_same_id(self):
        def create(index):
            try:
                self.room_manager.create_room("room1", f"Player{index}", f"sid-{index}")
                return True
            except ValidationError:
                return False

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(create, range(8)))

        assert results.count(True) == 1

    def test_room_operation_is_reentrant(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")

        with self.room_manager.room_operation("room1"):
            with self.room_manager.room_operation("room1"):
                self.room_manager.join_room("room1", "Bob", "sid-b")

        assert len(self.room_manager.get_room_players("room1")) == 2

    def test_room_operation_excludes_other_threads(self):
        self.room_manager.create_room("room1", "Alice", "sid-a")
        entered = threading.Event()
        order = []

        def contender():
            entered.set()
            with self.room_manager.room_operation("room1"):
                order.append("contender")

        with self.room_manager.room_operation("room1"):
            worker = threading.Thread(target=contender)
            worker.start()
            entered.wait(1)
            order.append("holder")
        worker.join(1)

        assert order == ["holder", "contender"]

    def test_lock_per_room(self):
        control = self.room_manager.concurrency_control

        assert control.get_room_lock("room1") is control.get_room_lock("room1")
        assert control.get_room_lock("room1") is not control.get_room_lock("room2")
        control.cleanup_room_lock("room1")
        assert "room1" not in control._room_locks
