"""Static layout of the canonical observation vector.

Section order and lengths, all pure functions of ``GameConfig``:

    hands           players * hand_size * colors * ranks + players
    board           (max_deck_size - players * hand_size) + colors * ranks
                    + max_information_tokens + max_life_tokens
    discards        max_deck_size
    last_action     players + 4 + players + colors + ranks
                    + hand_size + hand_size + colors * ranks + 2
    card_knowledge  players * hand_size * (colors * ranks + colors + ranks)
                    (omitted for the minimal observation type)
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from ..config import GameConfig, ObservationType
from ..errors import EncodingInvariantError

NUM_ENCODED_MOVE_TYPES = 4  # play, discard, reveal color, reveal rank
NUM_PLAY_OUTCOMES = 2  # scored, added information token
OWN_HAND_BITS_PER_CARD = 3  # playable, already played, not yet playable


def hands_section_length(config: GameConfig) -> int:
    return config.num_players * config.hand_size * config.bits_per_card + config.num_players


def deck_field_length(config: GameConfig) -> int:
    """Width of the remaining-deck thermometer."""
    return config.max_deck_size - config.num_players * config.hand_size


def board_section_length(config: GameConfig) -> int:
    return (
        deck_field_length(config)
        + config.num_colors * config.num_ranks  # fireworks
        + config.max_information_tokens
        + config.max_life_tokens
    )


def discards_section_length(config: GameConfig) -> int:
    return config.max_deck_size


def last_action_section_length(config: GameConfig) -> int:
    return (
        config.num_players  # acting player
        + NUM_ENCODED_MOVE_TYPES
        + config.num_players  # target player (hints)
        + config.num_colors  # revealed color
        + config.num_ranks  # revealed rank
        + config.hand_size  # slots touched by the hint
        + config.hand_size  # slot played or discarded
        + config.bits_per_card  # card played or discarded
        + NUM_PLAY_OUTCOMES
    )


def knowledge_slot_length(config: GameConfig) -> int:
    """Entries per card slot in the card-knowledge section."""
    return config.bits_per_card + config.num_colors + config.num_ranks


def card_knowledge_section_length(config: GameConfig) -> int:
    return config.num_players * config.hand_size * knowledge_slot_length(config)


def own_hand_length(config: GameConfig) -> int:
    return config.hand_size * OWN_HAND_BITS_PER_CARD


def belief_length(config: GameConfig) -> int:
    """Length of an extracted belief (plausibility grids only)."""
    return config.num_players * config.hand_size * config.bits_per_card


class Section(NamedTuple):
    """A named contiguous range of the observation vector."""

    name: str
    start: int
    length: int

    @property
    def stop(self) -> int:
        return self.start + self.length


def section_layout(config: GameConfig) -> list[Section]:
    """
    Ordered sections of the observation vector.

    Args:
        config: Game configuration

    Returns:
        Sections in write order; the last one ends at the vector length
    """
    lengths = [
        ("hands", hands_section_length(config)),
        ("board", board_section_length(config)),
        ("discards", discards_section_length(config)),
        ("last_action", last_action_section_length(config)),
    ]
    if config.observation_type != ObservationType.MINIMAL:
        lengths.append(("card_knowledge", card_knowledge_section_length(config)))

    sections = []
    start = 0
    for name, length in lengths:
        sections.append(Section(name, start, length))
        start += length
    return sections


def observation_length(config: GameConfig) -> int:
    """Total length of the canonical observation vector."""
    return sum(section.length for section in section_layout(config))


class SectionWriter:
    """
    Cursor over one section of a shared output buffer.

    All writes are relative to the current cursor position and must stay
    inside the declared width. ``close`` checks that exactly the declared
    width was consumed.
    """

    def __init__(self, buffer: np.ndarray, start: int, length: int, name: str = "section"):
        if start < 0 or start + length > buffer.shape[0]:
            raise EncodingInvariantError(
                f"{name}: range [{start}, {start + length}) outside buffer of {buffer.shape[0]}"
            )
        self.buffer = buffer
        self.start = start
        self.length = length
        self.name = name
        self.offset = 0

    @classmethod
    def for_section(cls, buffer: np.ndarray, section: Section) -> SectionWriter:
        return cls(buffer, section.start, section.length, section.name)

    @property
    def remaining(self) -> int:
        return self.length - self.offset

    def _check(self, index: int, width: int) -> None:
        if not 0 <= index < width:
            raise EncodingInvariantError(
                f"{self.name}: index {index} outside field of width {width} "
                f"at offset {self.offset}"
            )
        if self.offset + width > self.length:
            raise EncodingInvariantError(
                f"{self.name}: field of width {width} at offset {self.offset} "
                f"overruns section length {self.length}"
            )

    def set(self, index: int, width: int, value: float = 1.0) -> None:
        """Set one entry of the field starting at the cursor (cursor unchanged)."""
        self._check(index, width)
        self.buffer[self.start + self.offset + index] = value

    def skip(self, width: int) -> None:
        """Advance the cursor past a field, leaving it as is."""
        if width < 0 or self.offset + width > self.length:
            raise EncodingInvariantError(
                f"{self.name}: cannot advance {width} from offset {self.offset} of {self.length}"
            )
        self.offset += width

    def one_hot(self, index: int | None, width: int) -> None:
        """Write a one-hot field (all zero when ``index`` is None) and advance."""
        if index is not None:
            self.set(index, width)
        self.skip(width)

    def thermometer(self, count: int, width: int) -> None:
        """Set the first ``count`` entries of a field and advance."""
        if not 0 <= count <= width:
            raise EncodingInvariantError(
                f"{self.name}: thermometer value {count} outside [0, {width}]"
            )
        if self.offset + width > self.length:
            raise EncodingInvariantError(
                f"{self.name}: field of width {width} at offset {self.offset} "
                f"overruns section length {self.length}"
            )
        begin = self.start + self.offset
        self.buffer[begin : begin + count] = 1.0
        self.offset += width

    def write_block(self, values: np.ndarray) -> None:
        """Copy ``values`` at the cursor and advance by their length."""
        width = int(values.shape[0])
        if self.offset + width > self.length:
            raise EncodingInvariantError(
                f"{self.name}: block of {width} at offset {self.offset} "
                f"overruns section length {self.length}"
            )
        begin = self.start + self.offset
        self.buffer[begin : begin + width] = values
        self.offset += width

    def close(self) -> int:
        """Verify the whole section was consumed and return its length."""
        if self.offset != self.length:
            raise EncodingInvariantError(
                f"{self.name}: wrote {self.offset} entries, declared length is {self.length}"
            )
        return self.offset
