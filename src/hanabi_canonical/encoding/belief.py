"""Belief over the identity of held cards.

Both estimators work on a card-knowledge section (see
``sections.encode_card_knowledge``) and replace each occupied slot's
plausibility grid with a probability distribution, leaving the hinted
color and rank entries untouched.

V0 weights every plausible card by its number of unseen copies, i.e. a
uniform prior over the unseen cards restricted to the slot's support.

V1 starts from V0 and relaxes towards joint consistency: copies believed
to sit in one slot are discounted from every other slot. Each step

    remaining = count - sum of all occupied slots' beliefs
    candidate = max(remaining + own belief, 0) * plausible
    belief    = normalize((1 - weight) * belief + weight * candidate)

There is no convergence check; the number of steps is a tunable constant.
"""

from __future__ import annotations

import logging
from typing import Iterator

import numpy as np

from ..config import GameConfig
from ..engine.state import Observation
from ..errors import EncodingInvariantError
from .card_count import compute_card_count
from .layout import SectionWriter, card_knowledge_section_length, knowledge_slot_length
from .sections import encode_card_knowledge

logger = logging.getLogger(__name__)

DEFAULT_NUM_ITERS = 100
DEFAULT_WEIGHT = 0.1


def card_knowledge_section(config: GameConfig, obs: Observation) -> np.ndarray:
    """Encode the card-knowledge section into a fresh float64 array."""
    length = card_knowledge_section_length(config)
    section = np.zeros(length, dtype=np.float64)
    encode_card_knowledge(config, obs, SectionWriter(section, 0, length, "card_knowledge"))
    return section


def _slot_view(config: GameConfig, section: np.ndarray) -> np.ndarray:
    """(players, hand_size, slot_length) view of a knowledge section."""
    return section.reshape(config.num_players, config.hand_size, knowledge_slot_length(config))


def _occupied_slots(config: GameConfig, obs: Observation) -> np.ndarray:
    """(players, hand_size) mask of slots currently holding a card."""
    occupied = np.zeros((config.num_players, config.hand_size), dtype=bool)
    for player, hand in enumerate(obs.hands):
        occupied[player, : len(hand.cards)] = True
    return occupied


def v0_belief(
    config: GameConfig,
    obs: Observation,
    knowledge: np.ndarray | None = None,
    card_count: np.ndarray | None = None,
) -> np.ndarray:
    """
    Direct posterior over each held card.

    Args:
        config: Game configuration
        obs: Observation
        knowledge: Precomputed card-knowledge section (not modified)
        card_count: Precomputed unseen card counts

    Returns:
        float64 card-knowledge section with normalized plausibility grids
        for occupied slots

    Raises:
        EncodingInvariantError: A slot has no plausible unseen card
    """
    if knowledge is None:
        knowledge = card_knowledge_section(config, obs)
    if card_count is None:
        card_count = compute_card_count(config, obs)

    belief = np.array(knowledge, dtype=np.float64, copy=True)
    grids = _slot_view(config, belief)[..., : config.bits_per_card]

    for player, hand in enumerate(obs.hands):
        for slot in range(len(hand.cards)):
            weighted = grids[player, slot] * card_count
            total = weighted.sum()
            if total <= 0:
                logger.error(
                    "No plausible unseen card for player %d slot %d (hand sizes %s)",
                    player,
                    slot,
                    [len(h.cards) for h in obs.hands],
                )
                raise EncodingInvariantError(f"Empty belief for player {player} slot {slot}")
            grids[player, slot] = weighted / total

    return belief


def v1_belief_steps(
    config: GameConfig,
    obs: Observation,
    num_iters: int = DEFAULT_NUM_ITERS,
    weight: float = DEFAULT_WEIGHT,
) -> Iterator[np.ndarray]:
    """
    Run the iterative refinement, yielding the belief after every step.

    Args:
        config: Game configuration
        obs: Observation
        num_iters: Number of relaxation steps
        weight: Damping weight of each candidate update

    Yields:
        float64 card-knowledge section after each step (a copy)
    """
    knowledge = card_knowledge_section(config, obs)
    card_count = compute_card_count(config, obs)
    belief = v0_belief(config, obs, knowledge, card_count)

    bits = config.bits_per_card
    occupied = _occupied_slots(config, obs)
    plausible = _slot_view(config, knowledge)[..., :bits][occupied]
    grids = _slot_view(config, belief)[..., :bits]

    for step in range(num_iters):
        current = grids[occupied]  # (num_held, bits)
        remaining = card_count - current.sum(axis=0)
        candidate = np.maximum(remaining + current, 0.0) * plausible
        blended = (1.0 - weight) * current + weight * candidate

        totals = blended.sum(axis=1)
        if (totals <= 0).any():
            logger.error(
                "Empty refined belief at step %d for %d slot(s)", step, int((totals <= 0).sum())
            )
            raise EncodingInvariantError(f"Empty refined belief at step {step}")
        grids[occupied] = blended / totals[:, None]
        yield belief.copy()


def v1_belief(
    config: GameConfig,
    obs: Observation,
    num_iters: int = DEFAULT_NUM_ITERS,
    weight: float = DEFAULT_WEIGHT,
) -> np.ndarray:
    """
    Iteratively refined belief over each held card.

    With ``num_iters == 0`` or ``weight == 0`` this is exactly ``v0_belief``.

    Returns:
        float64 card-knowledge section
    """
    if num_iters == 0 or weight == 0:
        return v0_belief(config, obs)

    belief = None
    for belief in v1_belief_steps(config, obs, num_iters, weight):
        pass
    return belief


def extract_belief(config: GameConfig, section: np.ndarray) -> np.ndarray:
    """
    Drop the hinted color/rank entries from a card-knowledge section.

    Returns:
        (players * hand_size * colors * ranks,) array, slot-major
    """
    if section.shape[0] != card_knowledge_section_length(config):
        raise EncodingInvariantError(
            f"Knowledge section has {section.shape[0]} entries, "
            f"expected {card_knowledge_section_length(config)}"
        )
    return _slot_view(config, section)[..., : config.bits_per_card].reshape(-1).copy()
