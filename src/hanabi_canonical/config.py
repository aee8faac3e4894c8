"""Game and encoder configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping

from .errors import ConfigurationError


class ObservationType(IntEnum):
    """How much card knowledge the observation carries."""

    MINIMAL = 0  # No card-knowledge section
    CARD_KNOWLEDGE = 1
    SEER = 2


@dataclass(frozen=True)
class GameConfig:
    """Static game parameters.

    Every section length of the encoding is a pure function of this object.

    Attributes:
        num_colors: Number of card colors (suits).
        num_ranks: Number of ranks per color.
        num_players: Number of players at the table.
        hand_size: Cards dealt to each player.
        max_information_tokens: Information (hint) token capacity.
        max_life_tokens: Life (fuse) token capacity.
        observation_type: Knowledge carried by observations.
        card_instances: Optional ``[color][rank]`` table of copies per card.
            When omitted the standard deck is used: three copies of the
            lowest rank, one of the highest and two of every other rank.
    """

    num_colors: int = 5
    num_ranks: int = 5
    num_players: int = 2
    hand_size: int = 5
    max_information_tokens: int = 8
    max_life_tokens: int = 3
    observation_type: ObservationType = ObservationType.CARD_KNOWLEDGE
    card_instances: tuple[tuple[int, ...], ...] | None = field(default=None)

    def __post_init__(self) -> None:
        for name in ("num_colors", "num_ranks", "hand_size"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.num_players, int) or self.num_players < 2:
            raise ConfigurationError(f"num_players must be at least 2, got {self.num_players!r}")
        for name in ("max_information_tokens", "max_life_tokens"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"{name} must be non-negative, got {value!r}")
        try:
            object.__setattr__(self, "observation_type", ObservationType(self.observation_type))
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown observation type {self.observation_type!r}"
            ) from exc

        if self.card_instances is not None:
            table = tuple(tuple(row) for row in self.card_instances)
            if len(table) != self.num_colors or any(len(row) != self.num_ranks for row in table):
                raise ConfigurationError(
                    f"card_instances must be {self.num_colors}x{self.num_ranks}"
                )
            if any(not isinstance(n, int) or n < 0 for row in table for n in row):
                raise ConfigurationError("card_instances entries must be non-negative integers")
            object.__setattr__(self, "card_instances", table)

        initial_deal = self.num_players * self.hand_size
        if self.max_deck_size < initial_deal:
            raise ConfigurationError(
                f"Deck of {self.max_deck_size} cards cannot deal "
                f"{self.hand_size} cards to {self.num_players} players"
            )

    @property
    def bits_per_card(self) -> int:
        """Width of a one-hot card in color-major order."""
        return self.num_colors * self.num_ranks

    @property
    def max_deck_size(self) -> int:
        """Total number of physical cards in a full deck."""
        return sum(
            self.instances_of(color, rank)
            for color in range(self.num_colors)
            for rank in range(self.num_ranks)
        )

    def instances_of(self, color: int, rank: int) -> int:
        """Number of copies of (color, rank) in a full deck."""
        if self.card_instances is not None:
            return self.card_instances[color][rank]
        if rank == 0:
            return 3
        if rank < self.num_ranks - 1:
            return 2
        return 1

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "num_colors": self.num_colors,
            "num_ranks": self.num_ranks,
            "num_players": self.num_players,
            "hand_size": self.hand_size,
            "max_information_tokens": self.max_information_tokens,
            "max_life_tokens": self.max_life_tokens,
            "observation_type": int(self.observation_type),
            "card_instances": self.card_instances,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "GameConfig":
        """Create config from dictionary."""
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "GameConfig":
        """
        Create config from a Hanabi environment parameter map.

        Keys follow the environment convention (``players``, ``colors``,
        ``ranks``, ``hand_size``, ``max_information_tokens``,
        ``max_life_tokens``, ``observation_type``). Values may be strings.

        Args:
            params: Parameter map

        Returns:
            GameConfig

        Raises:
            ConfigurationError: A value is not an integer
        """

        def get_int(key: str, default: int) -> int:
            value = params.get(key, default)
            try:
                return int(value)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"Parameter {key!r} must be an integer, got {value!r}"
                ) from exc

        num_players = get_int("players", 2)
        default_hand_size = 5 if num_players < 4 else 4
        return cls(
            num_colors=get_int("colors", 5),
            num_ranks=get_int("ranks", 5),
            num_players=num_players,
            hand_size=get_int("hand_size", default_hand_size),
            max_information_tokens=get_int("max_information_tokens", 8),
            max_life_tokens=get_int("max_life_tokens", 3),
            observation_type=get_int("observation_type", int(ObservationType.CARD_KNOWLEDGE)),
        )


@dataclass
class EncoderConfig:
    """Encoder settings.

    Attributes:
        belief_iterations: Relaxation steps of the iterative belief.
        belief_weight: Damping weight blending each candidate into the belief.
        knowledge_as_belief: Write the card-knowledge section of ``encode``
            as the normalized direct belief instead of raw plausibility bits.
    """

    belief_iterations: int = 100
    belief_weight: float = 0.1
    knowledge_as_belief: bool = True

    def __post_init__(self) -> None:
        if self.belief_iterations < 0:
            raise ConfigurationError(
                f"belief_iterations must be non-negative, got {self.belief_iterations}"
            )
        if not 0.0 <= self.belief_weight <= 1.0:
            raise ConfigurationError(f"belief_weight must be in [0, 1], got {self.belief_weight}")

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "belief_iterations": self.belief_iterations,
            "belief_weight": self.belief_weight,
            "knowledge_as_belief": self.knowledge_as_belief,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "EncoderConfig":
        """Create config from dictionary."""
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})
