"""
Game Session

Runs one table: the single writer of table state. Human actions come in
through `submit`, scripted turns are scheduled on the asyncio loop with a
think delay, and every transition goes through `apply` one at a time.
Readers only ever see `session.state`, the last committed table.

Turn flow after each commit:
1. A fresh discard opens a claim window. The human seat (if it has a
   claim) gets first say, then scripted seats are asked in seat order.
2. A turn holder that needs a tile draws automatically.
3. A scripted turn holder is scheduled to act after its think delay; a
   human turn holder is waited on.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import numpy as np

from .actions import Action, DiscardAction, DrawAction, action_from_record
from .bot import ScriptedOpponent
from .config import DEFAULT_CONFIG, Difficulty, TrainerConfig
from .errors import InvalidMove
from .game import NUM_PLAYERS, Phase, TableState, apply, claim_options, start_round
from .scheduler import TurnScheduler

logger = logging.getLogger(__name__)

StateListener = Callable[[TableState], None]


class GameSession:
    """
    One trainer table with its scripted opponents.

    `start` must be called from inside a running event loop whenever any
    seat is scripted, since scripted turns are scheduled on it.
    """

    def __init__(
        self,
        config: TrainerConfig = DEFAULT_CONFIG,
        rng: Optional[np.random.Generator] = None,
        scheduler: Optional[TurnScheduler] = None,
        difficulty: Optional[Difficulty] = None,
    ):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.scheduler = scheduler or TurnScheduler()
        difficulty = config.difficulty if difficulty is None else difficulty

        self.bots: Dict[int, ScriptedOpponent] = {
            seat: ScriptedOpponent(difficulty, self.rng, config)
            for seat in range(NUM_PLAYERS)
            if seat != config.human_seat
        }

        self._state: Optional[TableState] = None
        self._claims_resolved_at = -1
        self._human_passed_at = -1
        self._awaiting_claim = False
        self._finished = asyncio.Event()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> Optional[TableState]:
        """Last committed table"""
        return self._state

    @property
    def human_seat(self) -> Optional[int]:
        return self.config.human_seat

    @property
    def awaiting_claim(self) -> bool:
        """The human seat may claim the last discard"""
        return self._awaiting_claim

    @property
    def is_finished(self) -> bool:
        return self._state is not None and self._state.is_terminal

    def subscribe(self, listener: StateListener) -> None:
        """Call `listener` with every committed table"""
        self._listeners.append(listener)

    def start(self, dealer: int = 0) -> TableState:
        """Shuffle, deal and set the first turn in motion"""
        self.scheduler.cancel_all()
        self._finished.clear()
        self._reset_claims()
        self._state = start_round(self.config, self.rng, dealer=dealer)
        logger.info(f"Session started ({self.config.name}, dealer P{dealer})")
        self._publish()
        self._advance()
        return self._state

    def load(self, state: TableState) -> TableState:
        """Take over an existing table, such as a saved one, and set it in motion"""
        if state.phase == Phase.DEALING:
            raise InvalidMove("Table has not been dealt")
        self.scheduler.cancel_all()
        self._finished.clear()
        self._reset_claims()
        self._state = state
        logger.info(f"Session loaded {state!r}")
        self._publish()
        self._advance()
        return self._state

    def next_round(self) -> TableState:
        """
        Deal the next round, carrying scores over.

        The dealer keeps the seat after winning; honba goes up on a dealer
        win or an exhausted wall and resets otherwise. Riichi sticks stay
        on the table until someone wins them.
        """
        prev = self._state
        if prev is None or not prev.is_terminal:
            raise InvalidMove("Current round is not over")

        dealer_won = prev.result is not None and prev.result.winner == prev.dealer
        if dealer_won:
            dealer, honba = prev.dealer, prev.honba + 1
        elif prev.phase == Phase.DRAW:
            dealer, honba = (prev.dealer + 1) % NUM_PLAYERS, prev.honba + 1
        else:
            dealer, honba = (prev.dealer + 1) % NUM_PLAYERS, 0

        self.scheduler.cancel_all()
        self._finished.clear()
        self._reset_claims()
        self._state = start_round(
            self.config,
            self.rng,
            dealer=dealer,
            round_number=prev.round_number + 1,
            scores=[p.score for p in prev.players],
            honba=honba,
            riichi_sticks=prev.riichi_sticks,
        )
        self._publish()
        self._advance()
        return self._state

    def reset(self) -> None:
        """Cancel every pending turn and drop the table"""
        canceled = self.scheduler.cancel_all()
        self._state = None
        self._reset_claims()
        self._finished.set()
        logger.info(f"Session reset ({canceled} pending turns canceled)")

    def submit(self, action: Union[Action, Mapping[str, Any]]) -> TableState:
        """
        Apply an action from the human seat.

        Raises:
            InvalidMove: if the action is rejected; the table is unchanged
        """
        try:
            if not isinstance(action, Action):
                action = action_from_record(action)
            if self._state is None:
                raise InvalidMove("No game in progress", action)
            if action.player_idx != self.human_seat:
                raise InvalidMove(f"Seat {action.player_idx} is not the human seat", action)
            self._commit(action)
        except InvalidMove as e:
            logger.warning(f"Rejected {action!r}: {e}")
            raise

        self._awaiting_claim = False
        self._advance()
        return self._state

    def pass_claim(self) -> TableState:
        """Human declines to claim the last discard"""
        if not self._awaiting_claim:
            raise InvalidMove("No claim pending")
        self._awaiting_claim = False
        self._human_passed_at = len(self._state.action_log)
        self._advance()
        return self._state

    async def run_until_finished(self) -> Optional[TableState]:
        """Start if needed and wait for the round to end (or a reset)"""
        if self._state is None:
            self.start()
        await self._finished.wait()
        return self._state

    def _reset_claims(self) -> None:
        self._claims_resolved_at = -1
        self._human_passed_at = -1
        self._awaiting_claim = False

    def _commit(self, action: Action) -> None:
        self._state = apply(self._state, action, self.rng)
        self._publish()

    def _publish(self) -> None:
        state = self._state
        for listener in self._listeners:
            listener(state)
        if state.is_terminal:
            self.scheduler.cancel_all()
            self._finished.set()
            logger.info(f"Round {state.round_number} over: {state.phase.name}")

    def _advance(self) -> None:
        """Drive the table until it waits on the human or a scheduled turn"""
        while self._state is not None and not self._state.is_terminal:
            state = self._state

            if self._open_claim_window(state):
                if self._awaiting_claim:
                    return
                continue

            player = state.turn_player
            if player.needs_draw:
                self._commit(DrawAction(player.index))
                continue

            if player.index in self.bots:
                self._schedule_turn(player.index)
            return

    def _open_claim_window(self, state: TableState) -> bool:
        """
        Offer the last discard for claims. Returns True if the table
        changed or the human must answer first.
        """
        claim = state.last_discard
        marker = len(state.action_log)
        if claim is None or self._claims_resolved_at == marker:
            return False
        discarder, tile = claim

        human = self.human_seat
        if (human is not None and human != discarder
                and self._human_passed_at != marker and claim_options(state, human)):
            self._awaiting_claim = True
            return True

        self._claims_resolved_at = marker
        for offset in range(1, NUM_PLAYERS):
            seat = (discarder + offset) % NUM_PLAYERS
            bot = self.bots.get(seat)
            if bot is None:
                continue
            call = bot.should_call_meld(state.players[seat], tile, discarder)
            if call is None:
                continue
            try:
                self._commit(call)
            except InvalidMove as e:
                logger.warning(f"Scripted call {call!r} rejected: {e}")
                continue
            return True
        return False

    def _schedule_turn(self, seat: int) -> None:
        state = self._state
        key = (state.round_number, len(state.action_log))
        low, high = self.config.think_delay
        delay = float(self.rng.uniform(low, high)) if high > low else low
        self.scheduler.schedule(key, delay, lambda: self._scripted_turn(seat, state))

    def _scripted_turn(self, seat: int, expected: TableState) -> None:
        if self._state is not expected:
            logger.debug(f"Skipping stale turn for P{seat}")
            return

        state = self._state
        bot = self.bots[seat]
        player = state.players[seat]
        drawn = state.last_draw if isinstance(state.last_action, DrawAction) else None
        action = bot.decide(player, state, drawn)
        try:
            self._commit(action)
        except InvalidMove as e:
            logger.warning(f"Scripted {action!r} rejected ({e}), discarding instead")
            tile = bot.choose_discard(player.get_hand_tiles(), player, state)
            try:
                self._commit(DiscardAction(seat, tile))
            except InvalidMove as err:
                logger.error(f"P{seat} has no legal fallback discard ({err}), resetting session")
                self.reset()
                return
        self._advance()
