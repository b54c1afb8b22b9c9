"""
Trainer Configuration

Rule and behaviour settings for a trainer table, with named presets:
- DEFAULT: interactive play, bots take 1-3 seconds to "think"
- FAST: no thinking delay (watch mode, tests)
- TRAINING: novice opponents, no red fives
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional, Tuple


class Difficulty(IntEnum):
    """Scripted opponent strength"""
    NOVICE = 0
    INTERMEDIATE = 1
    ADVANCED = 2


@dataclass(frozen=True)
class TrainerConfig:
    """
    Configuration for a trainer table.

    Scripted-opponent weights and probabilities live here so that a table
    can be tuned without touching the bot code.
    """

    name: str = "Default"

    # Table
    starting_points: int = 25000
    red_fives: int = 3  # One red 5 per suit
    riichi_cost: int = 1000
    human_seat: Optional[int] = 0  # None = all four seats scripted

    # Scripted opponents
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    think_delay: Tuple[float, float] = (1.0, 3.0)  # seconds, (min, max)

    # Ron is claimed by a scripted seat with this probability
    ron_call_probability: float = 0.8

    # Novice tier
    novice_terminal_bias: float = 0.7
    novice_call_rate: float = 0.2

    # Pon is only worth it if waits stay above this share of current waits
    pon_wait_ratio: float = 0.8

    # Placeholder fu for every winning hand
    base_fu: int = 30

    seed: Optional[int] = None

    def with_overrides(self, **changes) -> "TrainerConfig":
        return replace(self, **changes)

    def __repr__(self) -> str:
        return f"TrainerConfig({self.name})"


DEFAULT_CONFIG = TrainerConfig()

FAST_CONFIG = TrainerConfig(
    name="Fast",
    think_delay=(0.0, 0.0),
)

TRAINING_CONFIG = TrainerConfig(
    name="Training",
    red_fives=0,
    difficulty=Difficulty.NOVICE,
    think_delay=(0.5, 1.5),
)
