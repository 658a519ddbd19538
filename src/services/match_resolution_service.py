"""
Match Resolution Service for the Pairs game

Decides whether two face-up cards match and applies the scoring.
Holds no room state between calls.
"""

import logging
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class MatchResolutionService:
    """Resolves a flipped pair and computes end-of-game results."""

    def get_pending_cards(self, room: Dict) -> List[Dict]:
        """Cards that are face up but not yet matched."""
        return [card for card in room["cards"] if card["is_flipped"] and not card["is_matched"]]

    def resolve_pair(self, room: Dict, player: Dict, first: Dict, second: Dict) -> bool:
        """
        Score a flipped pair for the acting player.

        A match marks both cards matched and counts a hit and a point; either
        way the attempt counts as a move. Flipping back a mismatch is left to
        the caller, after the reveal delay.

        Args:
            room: Live room dict
            player: Acting player dict
            first: First face-up card
            second: Second face-up card

        Returns:
            True if the cards match
        """
        player["moves"] += 1

        if first["image"] != second["image"]:
            logger.info(f"No match for {player['name']} in room {room['room_id']}: "
                        f"cards {first['id']} and {second['id']}")
            return False

        first["is_matched"] = True
        second["is_matched"] = True
        player["score"] += 1
        player["hits"] += 1
        logger.info(f"Match found by {player['name']} in room {room['room_id']}: "
                    f"cards {first['id']} and {second['id']}, score: {player['score']}")
        return True

    def flip_back(self, cards: List[Dict]) -> None:
        """Turn unmatched cards face down again."""
        for card in cards:
            if not card["is_matched"]:
                card["is_flipped"] = False

    def is_game_over(self, room: Dict) -> bool:
        """Check if every card in a dealt deck is matched."""
        cards = room["cards"]
        return bool(cards) and all(card["is_matched"] for card in cards)

    def determine_winner(self, players: List[Dict]) -> Tuple[Optional[Dict], bool]:
        """
        Pick the winner by score.

        Ties go to the player who joined first, so the result is the same on
        every run. The tie flag lets clients show a draw anyway.

        Returns:
            Tuple of (winning player or None, is_tie)
        """
        if not players:
            return None, False

        winner = players[0]
        for player in players[1:]:
            if player["score"] > winner["score"]:
                winner = player

        is_tie = sum(1 for p in players if p["score"] == winner["score"]) > 1
        return winner, is_tie
