"""Observation encoding module."""

from .batch_builder import ObservationBatchBuilder
from .belief import (
    DEFAULT_NUM_ITERS,
    DEFAULT_WEIGHT,
    card_knowledge_section,
    extract_belief,
    v0_belief,
    v1_belief,
    v1_belief_steps,
)
from .canonical_encoder import CanonicalObservationEncoder
from .card_count import compute_card_count, full_deck_count
from .layout import (
    Section,
    SectionWriter,
    belief_length,
    board_section_length,
    card_knowledge_section_length,
    discards_section_length,
    hands_section_length,
    last_action_section_length,
    observation_length,
    own_hand_length,
    section_layout,
)
from .sections import (
    encode_board,
    encode_card_knowledge,
    encode_discards,
    encode_hands,
    encode_last_action,
    encode_own_hand_trinary,
)

__all__ = [
    # Main encoder
    "CanonicalObservationEncoder",
    "ObservationBatchBuilder",
    # Layout
    "Section",
    "SectionWriter",
    "section_layout",
    "observation_length",
    "hands_section_length",
    "board_section_length",
    "discards_section_length",
    "last_action_section_length",
    "card_knowledge_section_length",
    "own_hand_length",
    "belief_length",
    # Section encoders
    "encode_hands",
    "encode_board",
    "encode_discards",
    "encode_last_action",
    "encode_card_knowledge",
    "encode_own_hand_trinary",
    # Card counts and beliefs
    "compute_card_count",
    "full_deck_count",
    "card_knowledge_section",
    "v0_belief",
    "v1_belief",
    "v1_belief_steps",
    "extract_belief",
    "DEFAULT_NUM_ITERS",
    "DEFAULT_WEIGHT",
]
