#!/usr/bin/env python3
"""Print the canonical observation layout for a game configuration.

Usage:
    # Standard 2-player game
    uv run scripts/describe_layout.py

    # 4-player game without the card-knowledge section
    uv run scripts/describe_layout.py --players 4 --observation-type 0
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hanabi_canonical.config import GameConfig
from hanabi_canonical.encoding import (
    belief_length,
    last_action_section_length,
    own_hand_length,
    section_layout,
)
from hanabi_canonical.errors import ConfigurationError


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Describe the canonical Hanabi observation layout",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--players", type=int, default=2, help="Number of players")
    parser.add_argument("--colors", type=int, default=5, help="Number of colors")
    parser.add_argument("--ranks", type=int, default=5, help="Number of ranks")
    parser.add_argument("--hand-size", type=int, help="Cards per hand (default by player count)")
    parser.add_argument("--max-information-tokens", type=int, default=8, help="Information tokens")
    parser.add_argument("--max-life-tokens", type=int, default=3, help="Life tokens")
    parser.add_argument(
        "--observation-type",
        type=int,
        default=1,
        choices=[0, 1, 2],
        help="0 = minimal, 1 = card knowledge, 2 = seer",
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    params = {
        "players": args.players,
        "colors": args.colors,
        "ranks": args.ranks,
        "max_information_tokens": args.max_information_tokens,
        "max_life_tokens": args.max_life_tokens,
        "observation_type": args.observation_type,
    }
    if args.hand_size is not None:
        params["hand_size"] = args.hand_size

    try:
        config = GameConfig.from_params(params)
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    sections = section_layout(config)
    print(f"Game: {config.to_dict()}")
    print(f"  Max deck size: {config.max_deck_size}")
    print()
    for section in sections:
        print(f"  {section.name:<15} [{section.start:>5}, {section.stop:>5})  {section.length:>5}")
    print(f"  {'total':<15} {sections[-1].stop:>21}")
    print()
    print(f"Last action only: {last_action_section_length(config)}")
    print(f"Belief:           {belief_length(config)}")
    print(f"Own hand:         {own_hand_length(config)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
