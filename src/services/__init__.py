"""
Services package for the Pairs game

Contains decomposed service classes that follow Single Responsibility Principle.
"""

from .room_lifecycle_service import RoomLifecycleService
from .player_management_service import PlayerManagementService
from .concurrency_control_service import ConcurrencyControlService
from .game_state_transition_service import GameStateTransitionService
from .match_resolution_service import MatchResolutionService
from .scheduler_service import SchedulerService
from .turn_timer_service import TurnTimerService
from .deck_service import DeckService

__all__ = [
    'RoomLifecycleService',
    'PlayerManagementService',
    'ConcurrencyControlService',
    'GameStateTransitionService',
    'MatchResolutionService',
    'SchedulerService',
    'TurnTimerService',
    'DeckService'
]
