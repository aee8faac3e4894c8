"""Canonical observation encoder."""

from __future__ import annotations

import logging

import numpy as np

from ..config import EncoderConfig, GameConfig
from ..engine.state import Observation
from ..errors import EncodingInvariantError
from .belief import card_knowledge_section, extract_belief, v0_belief, v1_belief
from .card_count import compute_card_count
from .layout import (
    Section,
    SectionWriter,
    last_action_section_length,
    observation_length,
    own_hand_length,
    section_layout,
)
from .sections import (
    encode_board,
    encode_discards,
    encode_hands,
    encode_last_action,
    encode_own_hand_trinary,
)

logger = logging.getLogger(__name__)


class CanonicalObservationEncoder:
    """
    Encode observations into the canonical fixed-length vector.

    Layout, in order: hands, board, discards, last action and, unless the
    game uses the minimal observation type, card knowledge. The
    card-knowledge section carries the direct belief by default.

    The encoder holds no per-call state; every call returns a fresh array.
    """

    def __init__(self, game_config: GameConfig, encoder_config: EncoderConfig | None = None):
        """
        Initialize encoder.

        Args:
            game_config: Static game parameters
            encoder_config: Encoder settings (defaults if None)
        """
        self.game_config = game_config
        self.config = encoder_config if encoder_config is not None else EncoderConfig()
        self.sections: list[Section] = section_layout(game_config)
        self.output_dim = observation_length(game_config)

        logger.debug(
            "Canonical layout (%d entries): %s",
            self.output_dim,
            ", ".join(f"{s.name}[{s.start}:{s.stop}]" for s in self.sections),
        )

    def shape(self) -> tuple[int]:
        """Shape of the encoded observation."""
        return (self.output_dim,)

    def encode(self, obs: Observation, show_own_cards: bool = False) -> np.ndarray:
        """
        Encode an observation.

        Args:
            obs: Observation of the acting player
            show_own_cards: Encode the observer's true cards in the hands section

        Returns:
            (output_dim,) float32 vector
        """
        game = self.game_config
        encoding = np.zeros(self.output_dim, dtype=np.float32)

        offset = 0
        for section in self.sections:
            if section.start != offset:
                raise EncodingInvariantError(
                    f"Section {section.name} starts at {section.start}, cursor is at {offset}"
                )
            writer = SectionWriter.for_section(encoding, section)
            if section.name == "hands":
                offset += encode_hands(game, obs, writer, show_own_cards)
            elif section.name == "board":
                offset += encode_board(game, obs, writer)
            elif section.name == "discards":
                offset += encode_discards(game, obs, writer)
            elif section.name == "last_action":
                offset += encode_last_action(game, obs, writer)
            elif section.name == "card_knowledge":
                offset += self._encode_knowledge(obs, writer)
            else:
                raise EncodingInvariantError(f"Unknown section {section.name}")

        if offset != self.output_dim:
            raise EncodingInvariantError(f"Encoded {offset} entries, shape is {self.output_dim}")
        return encoding

    def _encode_knowledge(self, obs: Observation, writer: SectionWriter) -> int:
        knowledge = card_knowledge_section(self.game_config, obs)
        if self.config.knowledge_as_belief:
            knowledge = v0_belief(self.game_config, obs, knowledge)
        writer.write_block(knowledge.astype(np.float32))
        return writer.close()

    def encode_last_action(self, obs: Observation) -> np.ndarray:
        """Encode only the last-action section."""
        length = last_action_section_length(self.game_config)
        encoding = np.zeros(length, dtype=np.float32)
        writer = SectionWriter(encoding, 0, length, "last_action")
        encode_last_action(self.game_config, obs, writer)
        return encoding

    def encode_v0_belief(self, obs: Observation) -> np.ndarray:
        """
        Direct belief for every slot.

        Returns:
            (players * hand_size * colors * ranks,) float32, zero for empty slots
        """
        belief = v0_belief(self.game_config, obs)
        return extract_belief(self.game_config, belief).astype(np.float32)

    def encode_v1_belief(self, obs: Observation) -> np.ndarray:
        """
        Iteratively refined belief for every slot.

        Returns:
            (players * hand_size * colors * ranks,) float32, zero for empty slots
        """
        belief = v1_belief(
            self.game_config,
            obs,
            num_iters=self.config.belief_iterations,
            weight=self.config.belief_weight,
        )
        return extract_belief(self.game_config, belief).astype(np.float32)

    def encode_hand_mask(self, obs: Observation) -> np.ndarray:
        """Plausibility grid of every slot, without the hint entries."""
        knowledge = card_knowledge_section(self.game_config, obs)
        return extract_belief(self.game_config, knowledge).astype(np.float32)

    def encode_card_count(self, obs: Observation) -> np.ndarray:
        """Unseen copies of each card, color-major."""
        return compute_card_count(self.game_config, obs).astype(np.float32)

    def encode_own_hand(self, obs: Observation) -> np.ndarray:
        """Observer's true cards against the fireworks, 3 entries per slot."""
        length = own_hand_length(self.game_config)
        encoding = np.zeros(length, dtype=np.float32)
        writer = SectionWriter(encoding, 0, length, "own_hand")
        encode_own_hand_trinary(self.game_config, obs, writer)
        return encoding

