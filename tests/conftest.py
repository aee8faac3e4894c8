"""Shared test fixtures for hanabi_canonical tests."""

from __future__ import annotations

from typing import Callable, Sequence

import pytest

from hanabi_canonical.engine import (
    Card,
    CardKnowledge,
    GameConfig,
    Hand,
    HistoryItem,
    Observation,
)

# Own hand (true cards) and partner hand used by most tests
OWN_CARDS = [Card(0, 0), Card(0, 0), Card(1, 1), Card(2, 2), Card(4, 4)]
PARTNER_CARDS = [Card(3, 0), Card(3, 1), Card(4, 0), Card(1, 0), Card(2, 0)]


def make_hand(config: GameConfig, cards: Sequence[Card]) -> Hand:
    """Hand with no hint knowledge on any slot."""
    hand = Hand()
    for card in cards:
        hand.add_card(card, CardKnowledge(config.num_colors, config.num_ranks))
    return hand


def build_observation(
    config: GameConfig,
    hands: Sequence[Sequence[Card]] | None = None,
    show_own: bool = False,
    discard_pile: Sequence[Card] = (),
    fireworks: Sequence[int] | None = None,
    deck_size: int | None = None,
    information_tokens: int | None = None,
    life_tokens: int | None = None,
    last_moves: Sequence[HistoryItem] = (),
) -> Observation:
    """
    Build an observation for the observer (player 0).

    The observer's cards are replaced by hidden cards unless ``show_own``.
    When ``deck_size`` is None it is derived so that card counts are
    consistent with the discard pile, fireworks and hands.
    """
    if hands is None:
        hands = [OWN_CARDS[: config.hand_size], PARTNER_CARDS[: config.hand_size]]
    if fireworks is None:
        fireworks = [0] * config.num_colors

    built = []
    for player, cards in enumerate(hands):
        if player == 0 and not show_own:
            cards = [Card.hidden() for _ in cards]
        built.append(make_hand(config, cards))

    if deck_size is None:
        held = sum(len(cards) for cards in hands)
        deck_size = config.max_deck_size - len(discard_pile) - sum(fireworks) - held

    return Observation(
        hands=built,
        fireworks=list(fireworks),
        deck_size=deck_size,
        information_tokens=(
            config.max_information_tokens if information_tokens is None else information_tokens
        ),
        life_tokens=config.max_life_tokens if life_tokens is None else life_tokens,
        discard_pile=list(discard_pile),
        last_moves=list(last_moves),
    )


@pytest.fixture
def config() -> GameConfig:
    """Standard 2-player game: 5 colors, 5 ranks, hand size 5."""
    return GameConfig()


@pytest.fixture
def observation_factory() -> Callable[..., Observation]:
    return build_observation


@pytest.fixture
def fresh_observation(config: GameConfig) -> Observation:
    """Start of a standard game, own cards hidden."""
    return build_observation(config)


@pytest.fixture
def shown_observation(config: GameConfig) -> Observation:
    """Start of a standard game, own cards visible."""
    return build_observation(config, show_own=True)
