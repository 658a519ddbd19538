"""
Room State Presenter - Centralized room state transformation for broadcasts.

This service provides canonical transformations for room state data that needs
to be sent to clients, ensuring consistent payload shapes and that face-down
card images never leave the server.
"""

import logging
from datetime import datetime
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)


class RoomStatePresenter:
    """Centralized service for transforming room state data for client broadcasts."""

    def create_card_list(self, cards: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Create the wire card list.

        The image of a card that is neither flipped nor matched is redacted
        to None. Server-side state keeps the real image.

        Args:
            cards: Card dicts from the room

        Returns:
            List of card objects safe for every observer
        """
        card_list = []
        for card in cards:
            visible = card['is_flipped'] or card['is_matched']
            card_list.append({
                'id': card['id'],
                'image': card['image'] if visible else None,
                'isFlipped': card['is_flipped'],
                'isMatched': card['is_matched']
            })
        return card_list

    def create_player_list(self, room_state: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Create the player list in join order.

        Args:
            room_state: Room dict from the room manager

        Returns:
            List of player objects
        """
        return [
            {
                'id': player['player_id'],
                'name': player['name'],
                'score': player['score'],
                'moves': player['moves'],
                'hits': player['hits']
            }
            for player in room_state['players']
        ]

    def create_snapshot(self, room_state: Dict[str, Any]) -> Dict[str, Any]:
        """Create the gameUpdate snapshot sent after every mutation."""
        return {
            'roomId': room_state['room_id'],
            'cards': self.create_card_list(room_state['cards']),
            'currentTurn': room_state['current_turn'],
            'players': self.create_player_list(room_state),
            'locked': room_state['locked']
        }

    def create_game_start(self, room_state: Dict[str, Any]) -> Dict[str, Any]:
        """Create the gameStart payload."""
        payload = self.create_snapshot(room_state)
        payload['pairCount'] = room_state['pair_count']
        if room_state['turn_duration']:
            payload['timerSeconds'] = room_state['turn_duration']
        return payload

    def create_timer_update(self, room_state: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'secondsRemaining': room_state['time_remaining'],
            'currentTurn': room_state['current_turn']
        }

    def create_player_stats(self, player: Dict[str, Any]) -> Dict[str, Any]:
        """Create derived statistics for one player.

        Accuracy is hits over moves, 0.0 for a player who never moved.
        """
        moves = player['moves']
        accuracy = player['hits'] / moves if moves else 0.0
        return {
            'id': player['player_id'],
            'name': player['name'],
            'moves': moves,
            'hits': player['hits'],
            'accuracy': round(accuracy, 4)
        }

    def create_game_end(self, room_state: Dict[str, Any], winner: Optional[Dict[str, Any]],
                        is_tie: bool) -> Dict[str, Any]:
        """Create the gameEnd payload.

        Args:
            room_state: Room dict at the end of the game
            winner: Winning player dict
            is_tie: True when the winner was picked by the join-order tie-break

        Returns:
            Final scores, per-player statistics and game duration
        """
        started_at: Optional[datetime] = room_state.get('started_at')
        ended_at: Optional[datetime] = room_state.get('ended_at')
        duration = 0
        if started_at and ended_at:
            duration = int((ended_at - started_at).total_seconds())

        return {
            'roomId': room_state['room_id'],
            'winner': winner['name'] if winner else None,
            'winnerId': winner['player_id'] if winner else None,
            'isTie': is_tie,
            'scores': [
                {'id': p['player_id'], 'name': p['name'], 'score': p['score']}
                for p in room_state['players']
            ],
            'stats': [self.create_player_stats(p) for p in room_state['players']],
            'duration': duration
        }
