"""Observation data model module."""

from ..config import GameConfig, ObservationType
from .state import (
    Card,
    CardKnowledge,
    DealMove,
    DiscardMove,
    Hand,
    HistoryItem,
    InvalidMove,
    Move,
    MoveType,
    Observation,
    PlayMove,
    RevealColorMove,
    RevealRankMove,
)

__all__ = [
    # Config
    "GameConfig",
    "ObservationType",
    # Cards and hands
    "Card",
    "CardKnowledge",
    "Hand",
    # Moves
    "Move",
    "MoveType",
    "PlayMove",
    "DiscardMove",
    "RevealColorMove",
    "RevealRankMove",
    "DealMove",
    "InvalidMove",
    "HistoryItem",
    # Observation
    "Observation",
]
