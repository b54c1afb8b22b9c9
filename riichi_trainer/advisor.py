"""
Hand Advisor

Read-only analysis of a seat's hand for display next to the table: waits,
efficiency, safety, a rough win chance, threats and beginner guidance.
Nothing here touches the table.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from .bot import danger_tiles
from .game import TableState
from .hand import winning_tiles
from .player import Player
from .shanten import calculate_shanten
from .tiles import Tile, sort_tiles

EFFICIENCY_LOW = 0.3
EFFICIENCY_HIGH = 0.6
SAFETY_ALERT = 0.5

CONTINUE_BUILDING = "Continue building hand"
FOCUS_ON_PAIRS = "Focus on basic pairs"

GUIDANCE_STARTING = (
    "Starting Out: Look for pairs (two identical tiles) or potential sequences "
    "(like 3-4 needing a 2 or 5). Discard single tiles that don't connect to anything."
)
GUIDANCE_PROGRESS = (
    "Making Progress: Great! You're getting close to a winning hand. "
    "Keep collecting the tiles shown in \"Waiting For\"."
)
GUIDANCE_ALMOST = (
    "Almost There: Excellent progress! You have multiple ways to win. "
    "Focus on the most common tiles (lower numbers are usually safer)."
)
GUIDANCE_MASTER = (
    "Master Level: Outstanding! Your hand is very flexible. "
    "Consider what opponents might be collecting before discarding."
)

TIP_LOW = "Try discarding your highest single tile (like 9s or honors you don't have pairs of)."
TIP_MEDIUM = "Keep tiles that are close to making sequences or sets. Discard isolated tiles."
TIP_HIGH = "You're close! Focus on the specific tiles you need and avoid dangerous discards."

SAFETY_WARNING = (
    "Safety Alert: Be careful! Other players might be close to winning. "
    "Consider discarding safer tiles (like those already discarded by others)."
)


@dataclass
class HandAnalysis:
    """Snapshot analysis of one hand"""
    waits: List[Tile] = field(default_factory=list)
    efficiency: float = 0.0
    shanten: int = 8
    safety_rating: float = 1.0
    danger_tiles: List[Tile] = field(default_factory=list)
    win_probability: float = 0.0
    opponent_threats: List[str] = field(default_factory=list)
    recommended_action: str = FOCUS_ON_PAIRS
    guidance: str = GUIDANCE_STARTING
    tip: str = TIP_LOW
    safety_warning: str = ""

    @property
    def is_tenpai(self) -> bool:
        return bool(self.waits)


def hand_efficiency(hand: Sequence[Tile], melds: Sequence = ()) -> float:
    """Number of winning tile kinds over 13"""
    return len(winning_tiles(hand, melds)) / 13


def recommendation(num_waits: int) -> str:
    return CONTINUE_BUILDING if num_waits > 0 else FOCUS_ON_PAIRS


def guidance(num_waits: int) -> str:
    if num_waits == 0:
        return GUIDANCE_STARTING
    if num_waits <= 3:
        return GUIDANCE_PROGRESS
    if num_waits <= 8:
        return GUIDANCE_ALMOST
    return GUIDANCE_MASTER


def efficiency_tip(efficiency: float) -> str:
    if efficiency < EFFICIENCY_LOW:
        return TIP_LOW
    if efficiency < EFFICIENCY_HIGH:
        return TIP_MEDIUM
    return TIP_HIGH


def opponent_threats(state: TableState, player_idx: int) -> List[str]:
    threats = []
    for p in state.players:
        if p.index == player_idx:
            continue
        if p.is_riichi:
            threats.append(f"Player {p.index + 1} is in riichi")
        if len(p.melds) >= 3:
            threats.append(f"Player {p.index + 1} has {len(p.melds)} melds")
        if len(p.discards) < 6:
            threats.append(f"Player {p.index + 1} may be building a fast hand")
    return threats


def analyze_hand(player: Player, state: TableState) -> HandAnalysis:
    """
    Analyze a seat's hand against the committed table.

    Waits are computed on the concealed hand as held, so a hand holding
    its extra tile mid-turn reports none.
    """
    hand = player.get_hand_tiles()
    waits = winning_tiles(hand, player.melds)
    efficiency = len(waits) / 13

    danger = danger_tiles(state, player.index)
    dangerous_held = sum(1 for t in hand if t in danger)
    safety = 1 - dangerous_held / len(hand) if hand else 1.0

    win_probability = 0.0
    if waits:
        win_probability = min(1.0, len(waits) * 4 / max(1, len(state.wall)))

    return HandAnalysis(
        waits=waits,
        efficiency=efficiency,
        shanten=calculate_shanten(hand, len(player.melds)) if hand else 8,
        safety_rating=safety,
        danger_tiles=sort_tiles(danger),
        win_probability=win_probability,
        opponent_threats=opponent_threats(state, player.index),
        recommended_action=recommendation(len(waits)),
        guidance=guidance(len(waits)),
        tip=efficiency_tip(efficiency),
        safety_warning=SAFETY_WARNING if safety < SAFETY_ALERT else "",
    )
