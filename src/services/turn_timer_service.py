"""
Turn Timer Service - Per-turn countdown for timed rooms.

This service handles:
- Starting the countdown when a turn begins
- Ticking once per interval and broadcasting the seconds left
- Handing expiry to the game manager
- Stopping the countdown when the turn ends early
"""

import logging
from typing import Callable, Dict, Optional

from src.config.game_settings import get_game_settings
from src.services.scheduler_service import TURN_TIMER_TASK

logger = logging.getLogger(__name__)


class TurnTimerService:
    """Runs one cancelable countdown per timed room."""

    def __init__(self, scheduler, room_manager, broadcast_service, game_settings=None):
        """Initialize the turn timer service.

        Args:
            scheduler: SchedulerService that owns the tick timers
            room_manager: Room registry, used to re-fetch the room on every tick
            broadcast_service: Service for broadcasting timerUpdate
            game_settings: Settings providing the tick interval
        """
        self.scheduler = scheduler
        self.room_manager = room_manager
        self.broadcast_service = broadcast_service
        self.game_settings = game_settings or get_game_settings()
        self._timeout_handler: Optional[Callable[[str], None]] = None

    def set_timeout_handler(self, handler: Callable[[str], None]):
        """Register the callable invoked with the room ID when a turn expires."""
        self._timeout_handler = handler

    def is_enabled(self, room: Dict) -> bool:
        return bool(room["turn_duration"])

    def start(self, room: Dict) -> bool:
        """
        Restart the countdown for the current turn. Caller holds the room lock.

        Returns:
            True if a countdown was started, False for untimed rooms
        """
        if not self.is_enabled(room):
            return False

        room["time_remaining"] = room["turn_duration"]
        self.scheduler.schedule_room_task(room, TURN_TIMER_TASK, self.game_settings.timer_tick, self._on_tick)
        self.broadcast_service.broadcast_timer_update(room)
        logger.debug(f"Turn timer started for room {room['room_id']}: {room['turn_duration']}s")
        return True

    def cancel(self, room: Dict) -> bool:
        """Stop the countdown. Caller holds the room lock."""
        return self.scheduler.cancel_room_task(room, TURN_TIMER_TASK)

    def _on_tick(self, room_id: str, token: str):
        if not self.room_manager.room_exists(room_id):
            return

        with self.room_manager.room_operation(room_id):
            room = self.room_manager.get_room(room_id)
            if not self.scheduler.is_current_task(room, TURN_TIMER_TASK, token):
                logger.debug(f"Stale timer tick for room {room_id} ignored")
                return
            self.scheduler.complete_room_task(room, TURN_TIMER_TASK)

            room["time_remaining"] = max(0, room["time_remaining"] - 1)
            self.broadcast_service.broadcast_timer_update(room)

            if room["time_remaining"] > 0:
                self.scheduler.schedule_room_task(room, TURN_TIMER_TASK, self.game_settings.timer_tick,
                                                  self._on_tick)
                return

            logger.info(f"Turn expired in room {room_id} for player {room['current_turn']}")
            if self._timeout_handler is not None:
                self._timeout_handler(room_id)
