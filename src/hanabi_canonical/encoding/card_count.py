"""Count the copies of each card that are not yet publicly accounted for."""

from __future__ import annotations

import logging

import numpy as np

from ..config import GameConfig
from ..engine.state import Observation
from ..errors import EncodingInvariantError
from .sections import check_fireworks, discard_counts

logger = logging.getLogger(__name__)


def full_deck_count(config: GameConfig) -> np.ndarray:
    """Copies of each card in a full deck, color-major."""
    return np.array(
        [
            config.instances_of(color, rank)
            for color in range(config.num_colors)
            for rank in range(config.num_ranks)
        ],
        dtype=np.int64,
    )


def compute_card_count(config: GameConfig, obs: Observation) -> np.ndarray:
    """
    Compute how many copies of each card are unseen.

    Starts from the full deck and removes the discard pile and every card
    played onto the fireworks. Cards in hands, including visible ones, are
    not removed: the result must add up to the deck plus all held cards.

    Args:
        config: Game configuration
        obs: Observation

    Returns:
        (colors * ranks,) int64 counts, color-major

    Raises:
        EncodingInvariantError: The counts are inconsistent with the
            observation's deck and hand sizes.
    """
    check_fireworks(config, obs)
    card_count = full_deck_count(config) - discard_counts(config, obs)

    for color, level in enumerate(obs.fireworks):
        start = color * config.num_ranks
        card_count[start : start + level] -= 1

    if (card_count < 0).any():
        negative = [int(i) for i in np.flatnonzero(card_count < 0)]
        logger.error("Negative remaining card count at card indices %s", negative)
        raise EncodingInvariantError(f"Negative remaining card count at card indices {negative}")

    total = int(card_count.sum())
    expected = obs.deck_size + obs.total_cards_in_hands()
    if total != expected:
        logger.error("Card count mismatch: %d remaining vs %d in deck and hands", total, expected)
        raise EncodingInvariantError(
            f"Card count mismatch: {total} remaining vs {expected} in deck and hands"
        )
    return card_count
