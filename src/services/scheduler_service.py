"""
Scheduler Service - Cancelable deferred actions keyed by room.

This service handles:
- Scheduling callbacks after a delay (reveal delay, turn timer ticks)
- Tracking the pending task of each kind in the room dict
- Token checks so a callback that fires after cancellation is a no-op
- Canceling everything on shutdown
"""

import logging
import threading
import uuid
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

TURN_TIMER_TASK = "turn_timer"
REVEAL_TASK = "reveal"


class SchedulerService:
    """Schedules cancelable deferred actions for rooms."""

    def __init__(self, timer_factory: Optional[Callable] = None):
        """Initialize the scheduler.

        Args:
            timer_factory: Callable with the ``threading.Timer`` signature
                ``(interval, function, args)`` returning an object with
                ``start()`` and ``cancel()``. Defaults to ``threading.Timer``.
        """
        self.timer_factory = timer_factory or threading.Timer
        self._active: Dict[str, object] = {}
        self._active_lock = threading.Lock()
        self.running = True

    def schedule(self, delay: float, callback: Callable, *args):
        """Run ``callback(*args)`` after ``delay`` seconds.

        Returns:
            The timer handle, cancelable with ``cancel()``
        """
        if not self.running:
            logger.debug("Scheduler stopped, dropping deferred action")
            return None

        handle_id = uuid.uuid4().hex

        def run(*call_args):
            with self._active_lock:
                self._active.pop(handle_id, None)
            try:
                callback(*call_args)
            except Exception as e:
                logger.exception(f"Error in deferred action {getattr(callback, '__name__', callback)}: {e}")

        timer = self.timer_factory(delay, run, args)
        timer.daemon = True
        timer.handle_id = handle_id
        with self._active_lock:
            self._active[handle_id] = timer
        timer.start()
        return timer

    def cancel(self, handle) -> None:
        """Cancel a handle returned by schedule()."""
        with self._active_lock:
            self._active.pop(getattr(handle, "handle_id", None), None)
        handle.cancel()

    def schedule_room_task(self, room: Dict, kind: str, delay: float, callback: Callable) -> str:
        """
        Schedule ``callback(room_id, token)`` for a room, replacing any task of the same kind.

        Args:
            room: Live room dict; the handle and token are stored on it
            kind: Task kind, one pending task per kind per room
            delay: Seconds until the callback fires
            callback: Receives the room ID and the task token

        Returns:
            The task token
        """
        self.cancel_room_task(room, kind)
        token = uuid.uuid4().hex
        room["task_tokens"][kind] = token
        handle = self.schedule(delay, callback, room["room_id"], token)
        if handle is not None:
            room["tasks"][kind] = handle
        logger.debug(f"Scheduled {kind} for room {room['room_id']} in {delay}s")
        return token

    def cancel_room_task(self, room: Dict, kind: str) -> bool:
        """
        Cancel the pending task of one kind.

        Returns:
            True if a task was pending
        """
        room["task_tokens"].pop(kind, None)
        handle = room["tasks"].pop(kind, None)
        if handle is None:
            return False
        self.cancel(handle)
        logger.debug(f"Canceled {kind} for room {room['room_id']}")
        return True

    def cancel_all_room_tasks(self, room: Dict) -> None:
        """Cancel every pending task of a room."""
        for kind in list(room["tasks"].keys()):
            self.cancel_room_task(room, kind)
        room["task_tokens"].clear()

    def is_current_task(self, room: Optional[Dict], kind: str, token: str) -> bool:
        """Check that a firing callback still owns its slot in the room."""
        if room is None:
            return False
        return room["task_tokens"].get(kind) == token

    def complete_room_task(self, room: Dict, kind: str) -> None:
        """Forget a task that has fired."""
        room["tasks"].pop(kind, None)
        room["task_tokens"].pop(kind, None)

    def pending_count(self) -> int:
        with self._active_lock:
            return len(self._active)

    def shutdown(self):
        """Stop scheduling and cancel everything still pending."""
        self.running = False
        with self._active_lock:
            timers = list(self._active.values())
            self._active.clear()
        for timer in timers:
            timer.cancel()
        logger.info(f"SchedulerService stopped, canceled {len(timers)} pending actions")
