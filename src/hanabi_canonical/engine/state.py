"""Core data structures for observations consumed by the encoder."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union

COLOR_CHARS = "RYGWB"


class MoveType(IntEnum):
    """Move variant tag."""

    INVALID = 0
    PLAY = 1
    DISCARD = 2
    REVEAL_COLOR = 3
    REVEAL_RANK = 4
    DEAL = 5  # Chance move, never encoded


@dataclass(frozen=True, slots=True)
class Card:
    """
    Card representation.

    A card with a negative color or rank is unobserved: only the observing
    player's own cards are hidden this way.
    """

    color: int
    rank: int

    @classmethod
    def hidden(cls) -> Card:
        """Create an unobserved card."""
        return cls(-1, -1)

    @property
    def is_valid(self) -> bool:
        return self.color >= 0 and self.rank >= 0

    def index(self, num_ranks: int) -> int:
        """One-hot index in color-major order."""
        return self.color * num_ranks + self.rank

    def __repr__(self) -> str:
        if not self.is_valid:
            return "XX"
        color = COLOR_CHARS[self.color] if self.color < len(COLOR_CHARS) else str(self.color)
        return f"{color}{self.rank + 1}"


@dataclass(slots=True)
class CardKnowledge:
    """
    Public knowledge about one card slot.

    Color and rank plausibility are tracked independently; a (color, rank)
    pair is plausible iff both its color and its rank are.
    """

    num_colors: int
    num_ranks: int
    color_plausible: list[bool] = field(default_factory=list)
    rank_plausible: list[bool] = field(default_factory=list)
    color: int | None = None  # Directly hinted color
    rank: int | None = None  # Directly hinted rank

    def __post_init__(self) -> None:
        if not self.color_plausible:
            self.color_plausible = [True] * self.num_colors
        if not self.rank_plausible:
            self.rank_plausible = [True] * self.num_ranks

    def color_hinted(self) -> bool:
        return self.color is not None

    def rank_hinted(self) -> bool:
        return self.rank is not None

    def apply_is_color_hint(self, color: int) -> None:
        """Card was revealed to be ``color``."""
        self.color = color
        self.color_plausible = [c == color for c in range(self.num_colors)]

    def apply_is_not_color_hint(self, color: int) -> None:
        """A hint for ``color`` did not touch this card."""
        self.color_plausible[color] = False

    def apply_is_rank_hint(self, rank: int) -> None:
        """Card was revealed to be ``rank``."""
        self.rank = rank
        self.rank_plausible = [r == rank for r in range(self.num_ranks)]

    def apply_is_not_rank_hint(self, rank: int) -> None:
        """A hint for ``rank`` did not touch this card."""
        self.rank_plausible[rank] = False

    def is_card_plausible(self, color: int, rank: int) -> bool:
        return self.color_plausible[color] and self.rank_plausible[rank]

    def __repr__(self) -> str:
        colors = "".join(
            COLOR_CHARS[c] if c < len(COLOR_CHARS) else str(c)
            for c in range(self.num_colors)
            if self.color_plausible[c]
        )
        ranks = "".join(str(r + 1) for r in range(self.num_ranks) if self.rank_plausible[r])
        return f"{colors}|{ranks}"


@dataclass
class Hand:
    """A player's hand: held cards and the parallel per-slot knowledge."""

    cards: list[Card] = field(default_factory=list)
    knowledge: list[CardKnowledge] = field(default_factory=list)

    def add_card(self, card: Card, knowledge: CardKnowledge) -> None:
        self.cards.append(card)
        self.knowledge.append(knowledge)

    def remove_from_hand(self, card_index: int) -> Card:
        """Remove a card and its knowledge; later slots shift down."""
        self.knowledge.pop(card_index)
        return self.cards.pop(card_index)


# Moves. Each variant only carries the payload that is meaningful for it.


@dataclass(frozen=True, slots=True)
class PlayMove:
    card_index: int

    @property
    def move_type(self) -> MoveType:
        return MoveType.PLAY


@dataclass(frozen=True, slots=True)
class DiscardMove:
    card_index: int

    @property
    def move_type(self) -> MoveType:
        return MoveType.DISCARD


@dataclass(frozen=True, slots=True)
class RevealColorMove:
    target_offset: int  # Target player, relative to the acting player
    color: int

    @property
    def move_type(self) -> MoveType:
        return MoveType.REVEAL_COLOR


@dataclass(frozen=True, slots=True)
class RevealRankMove:
    target_offset: int
    rank: int

    @property
    def move_type(self) -> MoveType:
        return MoveType.REVEAL_RANK


@dataclass(frozen=True, slots=True)
class DealMove:
    color: int
    rank: int

    @property
    def move_type(self) -> MoveType:
        return MoveType.DEAL


@dataclass(frozen=True, slots=True)
class InvalidMove:
    @property
    def move_type(self) -> MoveType:
        return MoveType.INVALID


Move = Union[PlayMove, DiscardMove, RevealColorMove, RevealRankMove, DealMove, InvalidMove]


@dataclass
class HistoryItem:
    """Record of a past move."""

    move: Move
    player: int  # Acting player, relative to the observer
    scored: bool = False  # Play moves: card was added to a firework
    information_token: bool = False  # Play moves: completing a firework returned a token
    color: int = -1  # Play/discard: identity of the card that left the hand
    rank: int = -1
    reveal_bitmask: int = 0  # Hint moves: bit i set if slot i was touched


@dataclass
class Observation:
    """
    A player's view of the game at one step.

    Hands and history players are indexed relative to the observer: index 0
    is the observing player, index 1 the next player to act after them.
    """

    hands: list[Hand]
    fireworks: list[int]
    deck_size: int
    information_tokens: int
    life_tokens: int
    discard_pile: list[Card] = field(default_factory=list)
    last_moves: list[HistoryItem] = field(default_factory=list)  # Most recent first
    current_player: int = 0
    observing_player: int = 0

    def last_non_deal_move(self) -> HistoryItem | None:
        """Most recent move that was not a chance deal, if any."""
        for item in self.last_moves:
            if item.move.move_type != MoveType.DEAL:
                return item
        return None

    def total_cards_in_hands(self) -> int:
        """Count cards currently held across all hands."""
        return sum(len(hand.cards) for hand in self.hands)
