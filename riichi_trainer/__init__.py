"""
Riichi Mahjong Trainer
Hand-completion engine, scripted opponents and a hand advisor
"""

from .tiles import Tile, TileSuit, HonorType, TileSet, parse_tiles
from .errors import TrainerError, InvalidMove, MalformedHand, WallExhausted
from .hand import can_complete, winning_tiles, iter_winning_tiles, is_tenpai
from .shanten import ShantenCalculator, calculate_shanten
from .player import Player, Meld, MeldType
from .actions import (
    Action, ActionType, DrawAction, DiscardAction, RiichiAction, ChiAction,
    PonAction, KanAction, TsumoAction, RonAction, action_from_record, action_to_record,
)
from .config import TrainerConfig, Difficulty, DEFAULT_CONFIG, FAST_CONFIG, TRAINING_CONFIG
from .game import TableState, Phase, RoundResult, new_table, deal, start_round, apply
from .bot import ScriptedOpponent
from .advisor import HandAnalysis, analyze_hand
from .scheduler import TurnScheduler
from .session import GameSession

__version__ = "0.1.0"
__all__ = [
    "Tile",
    "TileSuit",
    "HonorType",
    "TileSet",
    "parse_tiles",
    "TrainerError",
    "InvalidMove",
    "MalformedHand",
    "WallExhausted",
    "can_complete",
    "winning_tiles",
    "iter_winning_tiles",
    "is_tenpai",
    "ShantenCalculator",
    "calculate_shanten",
    "Player",
    "Meld",
    "MeldType",
    "Action",
    "ActionType",
    "DrawAction",
    "DiscardAction",
    "RiichiAction",
    "ChiAction",
    "PonAction",
    "KanAction",
    "TsumoAction",
    "RonAction",
    "action_from_record",
    "action_to_record",
    "TrainerConfig",
    "Difficulty",
    "DEFAULT_CONFIG",
    "FAST_CONFIG",
    "TRAINING_CONFIG",
    "TableState",
    "Phase",
    "RoundResult",
    "new_table",
    "deal",
    "start_round",
    "apply",
    "ScriptedOpponent",
    "HandAnalysis",
    "analyze_hand",
    "TurnScheduler",
    "GameSession",
]
