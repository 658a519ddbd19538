"""
Deck Service for the Pairs game

Builds shuffled, paired decks from the image pool. Holds no room state.
"""

import logging
import random
from typing import Dict, List, Optional

from src.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class DeckService:
    """Deals decks of paired cards."""

    def __init__(self, image_pool_manager, rng: Optional[random.Random] = None):
        self.image_pool_manager = image_pool_manager
        self._rng = rng or random.Random()

    def max_pair_count(self) -> int:
        """Largest deck the loaded pool can deal."""
        return self.image_pool_manager.get_image_count()

    def generate(self, pair_count: int) -> List[Dict]:
        """
        Deal a shuffled deck of ``pair_count`` pairs.

        Distinct images are sampled from the pool, each placed exactly twice,
        and the whole deck is shuffled with a Fisher-Yates shuffle so every
        arrangement is reachable. Card ids are the final positions.

        Args:
            pair_count: Number of pairs in the deck

        Returns:
            List of card dicts ordered by id

        Raises:
            ValidationError: If pair_count is not positive or exceeds the pool
        """
        if isinstance(pair_count, bool) or not isinstance(pair_count, int) or pair_count < 1:
            raise ValidationError(
                ErrorCode.INVALID_CONFIG,
                "Pair count must be a positive integer",
                {"pair_count": pair_count}
            )

        pool = self.image_pool_manager.get_all_images()
        if pair_count > len(pool):
            raise ValidationError(
                ErrorCode.INSUFFICIENT_IMAGE_POOL,
                f"Cannot deal {pair_count} pairs from a pool of {len(pool)} images",
                {"pair_count": pair_count, "pool_size": len(pool)}
            )

        selected = self._rng.sample(pool, pair_count)
        faces = selected + selected
        self._rng.shuffle(faces)

        cards = [
            {
                "id": index,
                "image": image,
                "is_flipped": False,
                "is_matched": False
            }
            for index, image in enumerate(faces)
        ]
        logger.debug(f"Dealt deck of {len(cards)} cards ({pair_count} pairs)")
        return cards
