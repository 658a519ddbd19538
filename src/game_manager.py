"""
Game Manager for the Pairs game

Handles room lifecycle transitions, the two-flip turn protocol and disconnect
recovery. Works with RoomManager to manage game sessions; every operation
re-fetches its room by id and mutates it only inside the room's lock.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from src.config.game_settings import get_game_settings
from src.core.errors import ErrorCode, ValidationError
from src.core.game_phases import RoomPhase
from src.core.messages import CreateRoomMessage, FlipCardMessage, JoinRoomMessage, RestartGameMessage
from src.room_manager import RoomManager
from src.services.game_state_transition_service import GameStateTransitionService
from src.services.match_resolution_service import MatchResolutionService
from src.services.scheduler_service import REVEAL_TASK
from src.services.session_service import SessionService
from src.services.turn_timer_service import TurnTimerService

logger = logging.getLogger(__name__)

RESET_MESSAGE = "A player left the game."


class GameManager:
    """Manages game state transitions and the turn protocol."""

    def __init__(self, room_manager: RoomManager, deck_service, broadcast_service, scheduler,
                 session_service: Optional[SessionService] = None,
                 match_resolution: Optional[MatchResolutionService] = None,
                 transition_service: Optional[GameStateTransitionService] = None,
                 turn_timer: Optional[TurnTimerService] = None,
                 game_settings=None):
        self.room_manager = room_manager
        self.deck_service = deck_service
        self.broadcast_service = broadcast_service
        self.scheduler = scheduler
        self.game_settings = game_settings or get_game_settings()
        self.session_service = session_service or SessionService()
        self.match_resolution = match_resolution or MatchResolutionService()
        self.transition_service = transition_service or GameStateTransitionService()
        self.turn_timer = turn_timer or TurnTimerService(
            scheduler, room_manager, broadcast_service, self.game_settings
        )
        self.turn_timer.set_timeout_handler(self.handle_turn_timeout)

    # Admission

    def create_room(self, message: CreateRoomMessage, socket_id: str) -> Dict:
        """
        Create a room with the sender as its first player.

        Args:
            message: Validated createRoom message
            socket_id: Connection ID of the creator

        Returns:
            The room dict

        Raises:
            ValidationError: ALREADY_IN_ROOM, DUPLICATE_ROOM_ID, INVALID_CONFIG or INSUFFICIENT_IMAGE_POOL
        """
        self._ensure_not_in_room(socket_id)

        pair_count = message.pair_count or self.game_settings.default_pair_count
        max_pairs = self.deck_service.max_pair_count()
        if pair_count > max_pairs:
            raise ValidationError(
                ErrorCode.INSUFFICIENT_IMAGE_POOL,
                f"Cannot deal {pair_count} pairs from a pool of {max_pairs} images",
                {"pair_count": pair_count, "pool_size": max_pairs}
            )

        room_id = message.room_id
        room = self.room_manager.create_room(
            room_id, message.player_name, socket_id,
            password=message.password,
            pair_count=pair_count,
            turn_duration=message.turn_duration_seconds
        )
        with self.room_manager.room_operation(room_id):
            self.transition_service.verify_room_invariants(room)
            self.session_service.create_session(socket_id, room_id, socket_id, message.player_name)
            self.broadcast_service.subscribe(socket_id, room_id)
            self.broadcast_service.send_room_created(room_id, socket_id)
            self.broadcast_service.broadcast_player_joined(room)

        logger.info(f"Room {room_id} created by {message.player_name} ({socket_id}), "
                    f"{pair_count} pairs, turn duration {room['turn_duration']}s")
        return room

    def join_room(self, message: JoinRoomMessage, socket_id: str) -> Dict:
        """
        Add the sender to a room, starting the game when it becomes full.

        Raises:
            ValidationError: ALREADY_IN_ROOM, ROOM_NOT_FOUND, ROOM_FULL or AUTHENTICATION_FAILED
        """
        self._ensure_not_in_room(socket_id)
        room_id = message.room_id
        self._ensure_room_exists(room_id)

        with self.room_manager.room_operation(room_id):
            room = self.room_manager.join_room(room_id, message.player_name, socket_id, message.password)
            self.session_service.create_session(socket_id, room_id, socket_id, message.player_name)
            self.broadcast_service.subscribe(socket_id, room_id)
            self.transition_service.verify_room_invariants(room)
            self.broadcast_service.broadcast_player_joined(room)
            logger.info(f"Player {message.player_name} ({socket_id}) joined room {room_id}, "
                        f"players: {[p['name'] for p in room['players']]}")

            if len(room["players"]) == self.game_settings.max_players_per_room:
                self.transition_service.transition(room, RoomPhase.READY_TO_START)
                self.start_game(room_id)
            return room

    # Game flow

    def start_game(self, room_id: str) -> Dict:
        """
        Deal a fresh deck and hand the first turn to the first player to join.

        The room must be READY_TO_START with two players.
        """
        with self.room_manager.room_operation(room_id):
            room = self._get_room_or_raise(room_id)

            room["cards"] = self.deck_service.generate(room["pair_count"])
            for player in room["players"]:
                player["score"] = 0
                player["moves"] = 0
                player["hits"] = 0
            room["current_turn"] = room["players"][0]["player_id"]
            room["locked"] = False
            room["started_at"] = datetime.now()
            room["ended_at"] = None
            self.transition_service.transition(room, RoomPhase.IN_PROGRESS)
            room["game_started"] = True
            self.transition_service.verify_room_invariants(room)

            self.broadcast_service.broadcast_game_start(room)
            self.turn_timer.start(room)
            logger.info(f"Game started in room {room_id}, {len(room['cards'])} cards, "
                        f"current turn: {room['current_turn']}")
            return room

    def flip_card(self, message: FlipCardMessage, socket_id: str) -> bool:
        """
        Flip one card for the player whose turn it is.

        Checks run in order: room exists, game active, room not locked, sender
        holds the turn. A card that is out of range, already face up or
        already matched is ignored without an error.

        Args:
            message: Validated flipCard message
            socket_id: Connection ID of the sender

        Returns:
            True if the card was flipped, False for an ignored flip

        Raises:
            ValidationError: ROOM_NOT_FOUND, GAME_NOT_ACTIVE, ANIMATION_IN_PROGRESS or NOT_YOUR_TURN
        """
        room_id = message.room_id
        self._ensure_room_exists(room_id)

        with self.room_manager.room_operation(room_id):
            room = self._get_room_or_raise(room_id)

            if not room["game_started"]:
                raise ValidationError(ErrorCode.GAME_NOT_ACTIVE, "The game is not active")
            if room["locked"]:
                raise ValidationError(ErrorCode.ANIMATION_IN_PROGRESS, "Wait for the cards to turn back")
            if room["current_turn"] != socket_id:
                raise ValidationError(ErrorCode.NOT_YOUR_TURN, "It is not your turn")

            card_id = message.card_id
            if not 0 <= card_id < len(room["cards"]):
                logger.debug(f"Ignoring flip of unknown card {card_id} in room {room_id}")
                return False
            card = room["cards"][card_id]
            if card["is_flipped"] or card["is_matched"]:
                logger.debug(f"Ignoring repeated flip of card {card_id} in room {room_id}")
                return False

            card["is_flipped"] = True
            logger.info(f"Card {card_id} flipped by {socket_id} in room {room_id}")

            pending = self.match_resolution.get_pending_cards(room)
            if len(pending) < 2:
                self.transition_service.verify_room_invariants(room)
                self.broadcast_service.broadcast_game_update(room)
                return True

            # Both cards face up before the pair resolves
            self.broadcast_service.broadcast_game_update(room)
            room["locked"] = True
            self.turn_timer.cancel(room)
            self._resolve_pair(room, socket_id, pending)
            return True

    def _resolve_pair(self, room: Dict, socket_id: str, pending: List[Dict]):
        player = self.room_manager.find_player(room, socket_id)
        first, second = pending

        if not self.match_resolution.resolve_pair(room, player, first, second):
            self.transition_service.verify_room_invariants(room)
            self.broadcast_service.broadcast_game_update(room)
            self.scheduler.schedule_room_task(
                room, REVEAL_TASK, self.game_settings.reveal_delay, self._on_reveal
            )
            return

        room["locked"] = False
        game_over = self.match_resolution.is_game_over(room)
        if not game_over and not self.game_settings.matched_player_keeps_turn:
            self._switch_turn(room)
        self.transition_service.verify_room_invariants(room)
        self.broadcast_service.broadcast_game_update(room)

        if game_over:
            self._end_game(room)
        else:
            self.turn_timer.start(room)

    def _on_reveal(self, room_id: str, token: str):
        """Turn a mismatched pair back and pass the turn."""
        if not self.room_manager.room_exists(room_id):
            logger.debug(f"Reveal for deleted room {room_id} ignored")
            return

        with self.room_manager.room_operation(room_id):
            room = self.room_manager.get_room(room_id)
            if not self.scheduler.is_current_task(room, REVEAL_TASK, token):
                logger.debug(f"Stale reveal for room {room_id} ignored")
                return
            self.scheduler.complete_room_task(room, REVEAL_TASK)

            self.match_resolution.flip_back(self.match_resolution.get_pending_cards(room))
            self._switch_turn(room)
            room["locked"] = False
            self.transition_service.verify_room_invariants(room)
            self.broadcast_service.broadcast_game_update(room)
            self.turn_timer.start(room)
            logger.info(f"No match, turn changed to {room['current_turn']} in room {room_id}")

    def handle_turn_timeout(self, room_id: str):
        """
        Pass the turn when the turn timer runs out.

        The switch only happens when no card of the turn is face up. With one
        card pending the countdown restarts for the same player and no card
        is touched. A locked room has no running timer.
        """
        with self.room_manager.room_operation(room_id):
            room = self.room_manager.get_room(room_id)
            if room is None or not room["game_started"] or room["locked"]:
                return

            if self.match_resolution.get_pending_cards(room):
                self.turn_timer.start(room)
                logger.info(f"Turn timer expired mid-pair in room {room_id}, "
                            f"turn held for {room['current_turn']}")
                return

            previous = room["current_turn"]
            self._switch_turn(room)
            self.transition_service.verify_room_invariants(room)
            self.broadcast_service.broadcast_game_update(room)
            self.turn_timer.start(room)
            logger.info(f"Turn timed out in room {room_id}: {previous} -> {room['current_turn']}")

    def _switch_turn(self, room: Dict):
        others = [p["player_id"] for p in room["players"] if p["player_id"] != room["current_turn"]]
        room["current_turn"] = others[0] if others else room["players"][0]["player_id"]

    def _end_game(self, room: Dict):
        room_id = room["room_id"]
        self.scheduler.cancel_all_room_tasks(room)
        room["time_remaining"] = None
        room["locked"] = False
        room["game_started"] = False
        room["ended_at"] = datetime.now()
        self.transition_service.transition(room, RoomPhase.ENDED)
        self.transition_service.verify_room_invariants(room)

        winner, is_tie = self.match_resolution.determine_winner(room["players"])
        self.broadcast_service.broadcast_game_end(room, winner, is_tie)
        logger.info(f"Game ended in room {room_id}, winner: {winner['name'] if winner else None}"
                    f"{' (tie)' if is_tie else ''}")

        if not self.game_settings.retain_ended_rooms:
            self._discard_room(room_id)

    def _discard_room(self, room_id: str):
        for socket_id in self.session_service.get_sessions_by_room(room_id):
            self.session_service.remove_session(socket_id)
        self.room_manager.delete_room(room_id)
        self.broadcast_service.close_room(room_id)
        logger.info(f"Room {room_id} deleted")

    def restart_game(self, message: RestartGameMessage, socket_id: str) -> Dict:
        """
        Deal a new game in a room whose previous game ended.

        Raises:
            ValidationError: ROOM_NOT_FOUND, NOT_IN_ROOM or GAME_NOT_ENDED
        """
        room_id = message.room_id
        self._ensure_room_exists(room_id)

        with self.room_manager.room_operation(room_id):
            room = self._get_room_or_raise(room_id)
            if self.room_manager.find_player(room, socket_id) is None:
                raise ValidationError(ErrorCode.NOT_IN_ROOM, f"You are not in room {room_id}")
            if room["phase"] != RoomPhase.ENDED.value:
                raise ValidationError(ErrorCode.GAME_NOT_ENDED, "The current game has not ended")

            self.transition_service.transition(room, RoomPhase.READY_TO_START)
            logger.info(f"Restart requested by {socket_id} in room {room_id}")
            return self.start_game(room_id)

    # Disconnects

    def handle_disconnect(self, socket_id: str) -> List[str]:
        """
        Remove a connection from every room it is in.

        A room left empty is deleted. A room with a remaining player is reset
        to WAITING with no cards and no turn.

        Returns:
            IDs of the rooms the connection was removed from
        """
        self.session_service.remove_session(socket_id)
        left_rooms = []

        for room_id in self.room_manager.find_rooms_for_player(socket_id):
            with self.room_manager.room_operation(room_id):
                room = self.room_manager.get_room(room_id)
                if room is None:
                    continue
                self.scheduler.cancel_all_room_tasks(room)

                removed = self.room_manager.remove_player_from_room(room_id, socket_id)
                if removed is None:
                    continue
                left_rooms.append(room_id)
                logger.info(f"Player {removed['name']} ({socket_id}) left room {room_id}")

                room = self.room_manager.get_room(room_id)
                if room is None:
                    self.broadcast_service.close_room(room_id)
                    logger.info(f"Room {room_id} deleted")
                    continue

                self._reset_room(room)
                self.broadcast_service.broadcast_player_left(room_id, room)
                self.broadcast_service.broadcast_game_reset(room_id, RESET_MESSAGE)
                logger.info(f"Game reset in room {room_id} due to player disconnect")

        return left_rooms

    def _reset_room(self, room: Dict):
        room["game_started"] = False
        room["locked"] = False
        room["cards"] = []
        room["current_turn"] = None
        room["time_remaining"] = None
        room["started_at"] = None
        room["ended_at"] = None
        for player in room["players"]:
            player["score"] = 0
            player["moves"] = 0
            player["hits"] = 0
        self.transition_service.transition(room, RoomPhase.WAITING)
        self.transition_service.verify_room_invariants(room)

    def shutdown(self):
        """Cancel every deferred action of every room."""
        for room_id in self.room_manager.get_all_rooms():
            with self.room_manager.room_operation(room_id):
                room = self.room_manager.get_room(room_id)
                if room is not None:
                    self.scheduler.cancel_all_room_tasks(room)
        self.scheduler.shutdown()

    # Helpers

    def _ensure_room_exists(self, room_id: str):
        if not self.room_manager.room_exists(room_id):
            raise ValidationError(ErrorCode.ROOM_NOT_FOUND, f"Room {room_id} not found")

    def _get_room_or_raise(self, room_id: str) -> Dict:
        room = self.room_manager.get_room(room_id)
        if room is None:
            raise ValidationError(ErrorCode.ROOM_NOT_FOUND, f"Room {room_id} not found")
        return room

    def _ensure_not_in_room(self, socket_id: str):
        if self.session_service.has_session(socket_id):
            room_id = self.session_service.get_session(socket_id)["room_id"]
            raise ValidationError(
                ErrorCode.ALREADY_IN_ROOM,
                f"You are already in room {room_id}",
                {"room_id": room_id}
            )
