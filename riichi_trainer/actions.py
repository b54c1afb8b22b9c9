"""
Player Actions

One frozen dataclass per action kind, each carrying only the fields it
needs. The reducer dispatches on the concrete class.

External callers may submit plain records of the form
``{"type", "playerId", "tile"?, "tiles"?, "fromSeat"?, "timestamp"}``;
`action_from_record` turns them into typed actions.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple

from .errors import InvalidMove
from .tiles import Tile


class ActionType(Enum):
    """Action kinds, valued by their record tag"""
    DRAW = "draw"
    DISCARD = "discard"
    RIICHI = "riichi"
    CHI = "chi"
    PON = "pon"
    KAN = "kan"
    TSUMO = "tsumo"
    RON = "ron"


class Action:
    """Base class for all actions"""
    action_type: ClassVar[ActionType]
    player_idx: int
    timestamp: float

    def __repr__(self) -> str:
        tile = getattr(self, "tile", None)
        suffix = f", {tile}" if tile is not None else ""
        return f"{type(self).__name__}(P{self.player_idx}{suffix})"


@dataclass(frozen=True, repr=False)
class DrawAction(Action):
    """Turn-start draw from the front of the wall"""
    action_type: ClassVar[ActionType] = ActionType.DRAW
    player_idx: int
    timestamp: float = 0.0


@dataclass(frozen=True, repr=False)
class DiscardAction(Action):
    action_type: ClassVar[ActionType] = ActionType.DISCARD
    player_idx: int
    tile: Tile
    timestamp: float = 0.0


@dataclass(frozen=True, repr=False)
class RiichiAction(Action):
    """Riichi declaration together with its discard"""
    action_type: ClassVar[ActionType] = ActionType.RIICHI
    player_idx: int
    tile: Tile
    timestamp: float = 0.0


@dataclass(frozen=True, repr=False)
class ChiAction(Action):
    """
    Claim the last discard as a run.

    `tiles` are the two held tiles completing the run with `tile`.
    """
    action_type: ClassVar[ActionType] = ActionType.CHI
    player_idx: int
    tile: Tile
    tiles: Tuple[Tile, Tile]
    from_seat: int
    timestamp: float = 0.0


@dataclass(frozen=True, repr=False)
class PonAction(Action):
    action_type: ClassVar[ActionType] = ActionType.PON
    player_idx: int
    tile: Tile
    from_seat: int
    timestamp: float = 0.0


@dataclass(frozen=True, repr=False)
class KanAction(Action):
    """
    Declare a quad.

    With `from_seat` set this claims the last discard (open kan); without
    it, four held tiles become a concealed quad on the player's own turn.
    """
    action_type: ClassVar[ActionType] = ActionType.KAN
    player_idx: int
    tile: Tile
    from_seat: Optional[int] = None
    timestamp: float = 0.0


@dataclass(frozen=True, repr=False)
class TsumoAction(Action):
    action_type: ClassVar[ActionType] = ActionType.TSUMO
    player_idx: int
    timestamp: float = 0.0


@dataclass(frozen=True, repr=False)
class RonAction(Action):
    action_type: ClassVar[ActionType] = ActionType.RON
    player_idx: int
    tile: Tile
    from_seat: Optional[int] = None
    timestamp: float = 0.0


def _parse_tile(value: Any) -> Tile:
    if isinstance(value, Tile):
        return value
    if isinstance(value, str):
        return Tile.from_string(value)
    raise InvalidMove(f"Cannot interpret {value!r} as a tile")


def action_from_record(record: Mapping[str, Any]) -> Action:
    """
    Build a typed action from an external record.

    Raises:
        InvalidMove: unknown type or missing/invalid fields
    """
    try:
        action_type = ActionType(record["type"])
        player_idx = int(record["playerId"])
        timestamp = float(record.get("timestamp", 0.0))
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidMove(f"Malformed action record {dict(record)!r}: {e}") from e

    if not 0 <= player_idx < 4:
        raise InvalidMove(f"No such seat: {player_idx}")

    from_seat = record.get("fromSeat", record.get("from"))
    raw_tile = record.get("tile")

    try:
        tile = _parse_tile(raw_tile) if raw_tile is not None else None
        if action_type == ActionType.DRAW:
            return DrawAction(player_idx, timestamp)
        if action_type == ActionType.TSUMO:
            return TsumoAction(player_idx, timestamp)
        if tile is None:
            raise InvalidMove(f"{action_type.value} requires a tile")
        if action_type == ActionType.DISCARD:
            return DiscardAction(player_idx, tile, timestamp)
        if action_type == ActionType.RIICHI:
            return RiichiAction(player_idx, tile, timestamp)
        if action_type == ActionType.RON:
            seat = int(from_seat) if from_seat is not None else None
            return RonAction(player_idx, tile, seat, timestamp)
        if action_type == ActionType.KAN:
            seat = int(from_seat) if from_seat is not None else None
            return KanAction(player_idx, tile, seat, timestamp)
        if from_seat is None:
            raise InvalidMove(f"{action_type.value} requires fromSeat")
        if action_type == ActionType.PON:
            return PonAction(player_idx, tile, int(from_seat), timestamp)
        raw_tiles = record.get("tiles") or ()
        if len(raw_tiles) != 2:
            raise InvalidMove("chi requires the two held tiles")
        held = tuple(_parse_tile(t) for t in raw_tiles)
        return ChiAction(player_idx, tile, held, int(from_seat), timestamp)
    except InvalidMove:
        raise
    except (ValueError, TypeError) as e:
        raise InvalidMove(f"Malformed action record {dict(record)!r}: {e}") from e


def action_to_record(action: Action) -> Dict[str, Any]:
    """Inverse of `action_from_record`, with tiles in text form"""
    record: Dict[str, Any] = {
        "type": action.action_type.value,
        "playerId": action.player_idx,
        "timestamp": action.timestamp,
    }
    tile = getattr(action, "tile", None)
    if tile is not None:
        record["tile"] = str(tile)
    tiles = getattr(action, "tiles", None)
    if tiles:
        record["tiles"] = [str(t) for t in tiles]
    from_seat = getattr(action, "from_seat", None)
    if from_seat is not None:
        record["fromSeat"] = from_seat
    return record
