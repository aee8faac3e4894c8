"""Batch builder for converting observations to tensors."""

from __future__ import annotations

import torch
from torch import Tensor

from ..engine.state import Observation
from .canonical_encoder import CanonicalObservationEncoder


class ObservationBatchBuilder:
    """
    Build batches of encoded observations.

    Converts Observation snapshots to float32 tensors for training code.
    """

    def __init__(self, encoder: CanonicalObservationEncoder, device: str = "cpu"):
        """
        Initialize batch builder.

        Args:
            encoder: Canonical encoder for the game being played
            device: Device to create tensors on
        """
        self.encoder = encoder
        self.device = device

    def build_single(self, obs: Observation, show_own_cards: bool = False) -> dict[str, Tensor]:
        """
        Build a single sample from an observation.

        Args:
            obs: Observation to encode
            show_own_cards: Encode the observer's true cards

        Returns:
            Dictionary of tensors:
                - observation: (output_dim,) canonical encoding
                - last_action: (last_action_len,) last-action section
                - v0_belief: (players * hand_size * colors * ranks,) direct belief
                - hand_mask: (players * hand_size * colors * ranks,) plausibility
                - card_count: (colors * ranks,) unseen copies per card
        """
        arrays = {
            "observation": self.encoder.encode(obs, show_own_cards),
            "last_action": self.encoder.encode_last_action(obs),
            "v0_belief": self.encoder.encode_v0_belief(obs),
            "hand_mask": self.encoder.encode_hand_mask(obs),
            "card_count": self.encoder.encode_card_count(obs),
        }
        return {key: torch.from_numpy(value).to(self.device) for key, value in arrays.items()}

    def build_batch(
        self, observations: list[Observation], show_own_cards: bool = False
    ) -> dict[str, Tensor]:
        """
        Build a batch from multiple observations.

        Args:
            observations: Observations to encode
            show_own_cards: Encode the observers' true cards

        Returns:
            Batched dictionary of tensors, batch dimension first
        """
        samples = [self.build_single(obs, show_own_cards) for obs in observations]
        return self._collate(samples)

    def _collate(self, samples: list[dict[str, Tensor]]) -> dict[str, Tensor]:
        """Collate samples into a batch."""
        return {key: torch.stack([s[key] for s in samples]) for key in samples[0].keys()}
