"""Section encoders for the canonical observation vector.

Each encoder writes one section through a ``SectionWriter`` and returns the
number of entries written, which always equals the section's static length.
Fields that do not apply to the observation are left zero but still consume
their full width.
"""

from __future__ import annotations

import numpy as np

from ..config import GameConfig
from ..engine.state import Card, MoveType, Observation
from ..errors import EncodingInvariantError
from .layout import (
    NUM_ENCODED_MOVE_TYPES,
    NUM_PLAY_OUTCOMES,
    OWN_HAND_BITS_PER_CARD,
    SectionWriter,
    deck_field_length,
)

# Position of each encodable move type in the move-type one-hot
MOVE_TYPE_INDEX = {
    MoveType.PLAY: 0,
    MoveType.DISCARD: 1,
    MoveType.REVEAL_COLOR: 2,
    MoveType.REVEAL_RANK: 3,
}


def _check_hands(config: GameConfig, obs: Observation) -> None:
    if len(obs.hands) != config.num_players:
        raise EncodingInvariantError(
            f"Observation has {len(obs.hands)} hands, game has {config.num_players} players"
        )
    for player, hand in enumerate(obs.hands):
        if len(hand.cards) > config.hand_size:
            raise EncodingInvariantError(
                f"Player {player} holds {len(hand.cards)} cards, hand size is {config.hand_size}"
            )


def _check_card_in_range(config: GameConfig, card: Card) -> None:
    if card.color >= config.num_colors or card.rank >= config.num_ranks:
        raise EncodingInvariantError(
            f"Card {card!r} outside a {config.num_colors}x{config.num_ranks} deck"
        )


def check_fireworks(config: GameConfig, obs: Observation) -> None:
    """Require one firework per color, each between 0 and num_ranks."""
    if len(obs.fireworks) != config.num_colors:
        raise EncodingInvariantError(
            f"Observation has {len(obs.fireworks)} fireworks, game has {config.num_colors} colors"
        )
    for color, level in enumerate(obs.fireworks):
        if not 0 <= level <= config.num_ranks:
            raise EncodingInvariantError(
                f"Firework level {level} of color {color} outside [0, {config.num_ranks}]"
            )


def encode_hands(
    config: GameConfig,
    obs: Observation,
    writer: SectionWriter,
    show_own_cards: bool = False,
) -> int:
    """
    Encode the cards held by every player.

    Each card uses a ``colors * ranks`` one-hot in color-major order. The
    observer's own cards (player 0) are left zero unless ``show_own_cards``.
    Slots beyond a short hand stay zero. One final bit per player marks a
    hand holding fewer than ``hand_size`` cards.

    Args:
        config: Game configuration
        obs: Observation to encode
        writer: Cursor over the hands section
        show_own_cards: Encode the observer's true cards

    Returns:
        Number of entries written
    """
    _check_hands(config, obs)
    bits_per_card = config.bits_per_card

    for player, hand in enumerate(obs.hands):
        for card in hand.cards:
            _check_card_in_range(config, card)
            if player == 0 and not show_own_cards:
                if card.is_valid:
                    raise EncodingInvariantError(
                        f"Own card {card!r} is visible but must be hidden"
                    )
                writer.skip(bits_per_card)
                continue
            if not card.is_valid:
                raise EncodingInvariantError(f"Player {player} holds an unobserved card")
            writer.one_hot(card.index(config.num_ranks), bits_per_card)

        # Absent cards keep their slots, left empty
        writer.skip((config.hand_size - len(hand.cards)) * bits_per_card)

    for player, hand in enumerate(obs.hands):
        if len(hand.cards) < config.hand_size:
            writer.set(player, config.num_players)
    writer.skip(config.num_players)

    return writer.close()


def encode_board(config: GameConfig, obs: Observation, writer: SectionWriter) -> int:
    """
    Encode the board.

    - remaining deck size (thermometer)
    - fireworks (one-hot of the highest played rank per color, zero if none)
    - information tokens (thermometer)
    - life tokens (thermometer)

    Life tokens 000 (0), 100 (1), 110 (2), 111 (3), for example.
    """
    writer.thermometer(obs.deck_size, deck_field_length(config))

    check_fireworks(config, obs)
    for level in obs.fireworks:
        writer.one_hot(level - 1 if level > 0 else None, config.num_ranks)

    writer.thermometer(obs.information_tokens, config.max_information_tokens)
    writer.thermometer(obs.life_tokens, config.max_life_tokens)

    return writer.close()


def discard_counts(config: GameConfig, obs: Observation) -> np.ndarray:
    """Number of discarded copies per card, color-major."""
    counts = np.zeros(config.bits_per_card, dtype=np.int64)
    for card in obs.discard_pile:
        if not card.is_valid:
            raise EncodingInvariantError("Discard pile holds an unobserved card")
        _check_card_in_range(config, card)
        counts[card.index(config.num_ranks)] += 1
    return counts


def encode_discards(
    config: GameConfig, obs: Observation, writer: SectionWriter
) -> int:
    """
    Encode the discard pile.

    One thermometer per (color, rank), color-major, as wide as the number of
    copies of that card. With 3/2/2/2/1 copies per rank, one color reads

        LLL      H
        1100011101

    for two lowest-rank discards, none of the second rank, both of the third,
    one of the fourth and the single highest-rank card.
    """
    counts = discard_counts(config, obs)
    for color in range(config.num_colors):
        for rank in range(config.num_ranks):
            index = color * config.num_ranks + rank
            writer.thermometer(int(counts[index]), config.instances_of(color, rank))
    return writer.close()


def encode_last_action(
    config: GameConfig, obs: Observation, writer: SectionWriter
) -> int:
    """
    Encode the most recent move other than a deal.

    Fields:
    - acting player, relative to the observer (one-hot)
    - move type: play, discard, reveal color, reveal rank (one-hot)
    - target player, relative to the observer (hints only)
    - revealed color (reveal color only)
    - revealed rank (reveal rank only)
    - slots touched by the hint (hints only)
    - slot played or discarded (play/discard only)
    - card played or discarded (play/discard only)
    - scored, added information token (play only)

    The whole section is zero before the first move.
    """
    num_players = config.num_players
    item = obs.last_non_deal_move()
    if item is None:
        writer.skip(writer.length)
        return writer.close()

    move = item.move
    move_type = move.move_type
    if move_type not in MOVE_TYPE_INDEX:
        raise EncodingInvariantError(f"Cannot encode last move of type {move_type.name}")
    is_hint = move_type in (MoveType.REVEAL_COLOR, MoveType.REVEAL_RANK)
    is_play_or_discard = move_type in (MoveType.PLAY, MoveType.DISCARD)

    # No check on the player: at a terminal state the last mover may be us
    writer.one_hot(item.player, num_players)
    writer.one_hot(MOVE_TYPE_INDEX[move_type], NUM_ENCODED_MOVE_TYPES)

    target = (item.player + move.target_offset) % num_players if is_hint else None
    writer.one_hot(target, num_players)
    writer.one_hot(move.color if move_type == MoveType.REVEAL_COLOR else None, config.num_colors)
    writer.one_hot(move.rank if move_type == MoveType.REVEAL_RANK else None, config.num_ranks)

    if is_hint:
        for slot in range(config.hand_size):
            if item.reveal_bitmask & (1 << slot):
                writer.set(slot, config.hand_size)
    writer.skip(config.hand_size)

    writer.one_hot(move.card_index if is_play_or_discard else None, config.hand_size)

    card_index = None
    if is_play_or_discard:
        if item.color < 0 or item.rank < 0:
            raise EncodingInvariantError(f"{move_type.name} move without a known card identity")
        card_index = item.color * config.num_ranks + item.rank
    writer.one_hot(card_index, config.bits_per_card)

    if move_type == MoveType.PLAY:
        if item.scored:
            writer.set(0, NUM_PLAY_OUTCOMES)
        if item.information_token:
            writer.set(1, NUM_PLAY_OUTCOMES)
    writer.skip(NUM_PLAY_OUTCOMES)

    return writer.close()


def encode_card_knowledge(
    config: GameConfig, obs: Observation, writer: SectionWriter
) -> int:
    """
    Encode the common card knowledge of every slot, observer included.

    Per slot: the plausible cards (``colors * ranks``, color-major), then the
    directly revealed color and rank. A card known only to be green reads

        R    Y    G    W    B
        0000000000111110000000000   only green cards are possible
        0    0    1    0    0       color was revealed
        00000                       rank was not revealed

    and a card known only to be not green reads

        1111111111000001111111111
        0    0    0    0    0
        00000

    Plausibility is the cross product of the color and rank flags. Slots
    without knowledge are left zero.
    """
    _check_hands(config, obs)
    for player, hand in enumerate(obs.hands):
        if len(hand.knowledge) > config.hand_size:
            raise EncodingInvariantError(
                f"Player {player} tracks {len(hand.knowledge)} knowledge slots, "
                f"hand size is {config.hand_size}"
            )
        for knowledge in hand.knowledge:
            grid = np.outer(
                np.asarray(knowledge.color_plausible, dtype=np.float32),
                np.asarray(knowledge.rank_plausible, dtype=np.float32),
            )
            writer.write_block(grid.ravel())
            writer.one_hot(knowledge.color, config.num_colors)
            writer.one_hot(knowledge.rank, config.num_ranks)

        slot_length = config.bits_per_card + config.num_colors + config.num_ranks
        writer.skip((config.hand_size - len(hand.knowledge)) * slot_length)

    return writer.close()


def encode_own_hand_trinary(
    config: GameConfig, obs: Observation, writer: SectionWriter
) -> int:
    """
    Encode the observer's true cards against the fireworks, 3 entries per slot.

    Entry 0: rank equals the firework level (playable now).
    Entry 1: rank below it (already played).
    Entry 2: rank above it.

    Requires the observer's cards to be known, e.g. as an auxiliary target.
    """
    cards = obs.hands[0].cards
    if len(cards) > config.hand_size:
        raise EncodingInvariantError(
            f"Own hand holds {len(cards)} cards, hand size is {config.hand_size}"
        )
    check_fireworks(config, obs)
    for card in cards:
        if not card.is_valid:
            raise EncodingInvariantError("Own hand summary needs the observer's true cards")
        _check_card_in_range(config, card)
        firework = obs.fireworks[card.color]
        if card.rank == firework:
            writer.one_hot(0, OWN_HAND_BITS_PER_CARD)
        elif card.rank < firework:
            writer.one_hot(1, OWN_HAND_BITS_PER_CARD)
        else:
            writer.one_hot(2, OWN_HAND_BITS_PER_CARD)
    writer.skip((config.hand_size - len(cards)) * OWN_HAND_BITS_PER_CARD)
    return writer.close()
