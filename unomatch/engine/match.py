"""Per-match UNO engine.

A MatchEngine owns the round, call and match state of one match and is the
only thing that changes them. Actions are applied one at a time: an action
arriving while another is being applied is rejected with ActionInProgress.
"""

import logging
import random
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from unomatch.config import EngineConfig
from unomatch.engine.calls import ChallengeOutcome, declare, resolve_challenge, update_after_action
from unomatch.engine.card import Card, Color
from unomatch.engine.errors import ActionInProgress, EngineError, IllegalMove, MatchOver
from unomatch.engine.game_state import CallState, MatchState, Player, PlayerView, RoundState
from unomatch.engine.rules import DrawMode, apply_draw, apply_play, init_round
from unomatch.engine.scoring import apply_hand_result, is_match_over, match_winner, score_hand

logger = logging.getLogger(__name__)

MAX_AUTOMATED_PLAYERS = 9


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a play or draw attempt. ``state`` is unchanged when ``error`` is set."""

    state: Optional[RoundState]
    error: Optional[EngineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class EngineEvent:
    """Change notification sent to subscribers after an action is applied."""

    kind: str  # hand_started, play, draw, declare, challenge, hand_ended, match_ended
    state: RoundState


Listener = Callable[[EngineEvent], None]


class MatchEngine:
    """Runs one match: one human at seat 0 and automated opponents after it."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or EngineConfig()
        self._rng = rng or random.Random(self.config.seed)
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._players: tuple[Player, ...] = ()
        self._round: Optional[RoundState] = None
        self._match: Optional[MatchState] = None
        self._calls = CallState()

    @property
    def rng(self) -> random.Random:
        return self._rng

    # ---------- Lifecycle ----------

    def start_match(
        self,
        automated_player_count: int,
        target_score: Optional[int] = None,
        deck: Optional[Sequence[Card]] = None,
    ) -> tuple[MatchState, RoundState]:
        """Seat the players, zero the scores and deal the first hand.

        ``deck`` forces the order of the first hand's deck (top first).
        """
        if not 1 <= automated_player_count <= MAX_AUTOMATED_PLAYERS:
            raise ValueError(
                f"automated_player_count must be 1-{MAX_AUTOMATED_PLAYERS}, got {automated_player_count}"
            )
        target = self.config.target_score if target_score is None else target_score
        if target <= 0:
            raise ValueError("target_score must be positive")
        with self._action():
            self._players = (Player(id="0", name="Player 1"),) + tuple(
                Player(id=str(i + 1), name=f"Bot {i + 1}", is_automated=True)
                for i in range(automated_player_count)
            )
            self._match = MatchState(target_score=target)
            self._round = None
        logger.info(
            "Match started: %d automated opponents, target score %d",
            automated_player_count,
            target,
        )
        return self._match, self.start_hand(deck)

    def start_hand(self, deck: Optional[Sequence[Card]] = None) -> RoundState:
        """Deal a new hand, keeping the match totals.

        Raises:
            IllegalMove: No match has been started, or the current hand is still being played.
            MatchOver: A player already reached the target score.
        """
        with self._action():
            if self._match is None:
                raise IllegalMove("No match has been started")
            if is_match_over(self._match):
                raise MatchOver(f"Match already won by {match_winner(self._match)}")
            if self._round is not None and not self._round.is_over:
                raise IllegalMove("The current hand is still being played")
            self._round = init_round(self._players, deck=deck, rng=self._rng)
            self._calls = CallState()
            state = self._round
        logger.info("Hand %d dealt, opening card %s", self._match.hand_number, state.top_discard())
        self._notify([EngineEvent("hand_started", state)])
        return state

    # ---------- Player actions ----------

    def attempt_play(
        self,
        card_index: int,
        color_choice: Optional[Color] = None,
        player_id: Optional[str] = None,
    ) -> MoveResult:
        """Play a card for the current player, or for ``player_id`` if it is their turn."""
        try:
            with self._action():
                state = self._require_round()
                index = state.current_player_index if player_id is None else state.player_index(player_id)
                sizes_before = state.hand_sizes()
                new_state = apply_play(state, index, card_index, color_choice)
                events = self._commit(new_state, sizes_before, "play")
        except EngineError as exc:
            logger.warning("Rejected play of card %s: %s", card_index, exc)
            return MoveResult(self._round, exc)
        self._notify(events)
        return MoveResult(new_state)

    def attempt_draw(self, player_id: Optional[str] = None) -> MoveResult:
        """Draw for the current player: the pending penalty if any, else one card."""
        try:
            with self._action():
                state = self._require_round()
                index = state.current_player_index if player_id is None else state.player_index(player_id)
                mode = DrawMode.PENALTY if state.pending_draw_count > 0 else DrawMode.VOLUNTARY
                sizes_before = state.hand_sizes()
                new_state = apply_draw(state, index, mode, rng=self._rng)
                events = self._commit(new_state, sizes_before, "draw")
        except EngineError as exc:
            logger.warning("Rejected draw: %s", exc)
            return MoveResult(self._round, exc)
        self._notify(events)
        return MoveResult(new_state)

    def declare_last_card(self, player_id: str) -> None:
        with self._action():
            state = self._require_round()
            self._calls = declare(self._calls, state, player_id)
        logger.debug("%s declared their last card", player_id)
        self._notify([EngineEvent("declare", state)])

    def raise_challenge(self, challenger_id: str, target_id: str) -> ChallengeOutcome:
        """Challenge ``target_id`` for holding one card without declaring it.

        The loser of the challenge draws four cards; the turn does not move.
        """
        with self._action():
            state = self._require_round()
            if state.is_over:
                raise IllegalMove("The hand is over")
            outcome, new_state, self._calls = resolve_challenge(
                self._calls, state, challenger_id, target_id, rng=self._rng
            )
            self._round = new_state
        logger.info("Challenge by %s against %s %s", challenger_id, target_id, outcome.value)
        self._notify([EngineEvent("challenge", new_state)])
        return outcome

    # ---------- Snapshots ----------

    @property
    def round_state(self) -> Optional[RoundState]:
        return self._round

    @property
    def match_state(self) -> Optional[MatchState]:
        return self._match

    @property
    def call_state(self) -> CallState:
        return self._calls

    @property
    def players(self) -> tuple[Player, ...]:
        if self._round is not None:
            return self._round.players
        return self._players

    def hand(self, player_id: str) -> tuple[Card, ...]:
        return self._require_round().hand_of(player_id)

    def top_card(self) -> Optional[Card]:
        return self._require_round().top_discard()

    @property
    def active_color(self) -> Optional[Color]:
        return self._require_round().active_color

    @property
    def pending_draw_count(self) -> int:
        return self._require_round().pending_draw_count

    @property
    def current_player_id(self) -> str:
        return self._require_round().current_player.id

    @property
    def current_hand_scores(self) -> Dict[str, int]:
        return dict(self._require_match().current_hand_scores)

    @property
    def total_scores(self) -> Dict[str, int]:
        return dict(self._require_match().total_scores)

    def is_hand_over(self) -> bool:
        return self._round is not None and self._round.is_over

    def is_match_over(self) -> bool:
        return self._match is not None and is_match_over(self._match)

    def match_winner(self) -> Optional[str]:
        return match_winner(self._match) if self._match is not None else None

    def view(self, player_id: str) -> PlayerView:
        return PlayerView.from_state(self._require_round(), player_id)

    # ---------- Notifications ----------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for engine events; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---------- Save / resume ----------

    def export_state(self) -> dict[str, Any]:
        """Structural snapshot of the whole engine, JSON compatible."""
        return {
            "players": [replace(p, hand=()).to_dict() for p in self.players],
            "round": self._round.to_dict() if self._round is not None else None,
            "match": self._match.to_dict() if self._match is not None else None,
            "calls": self._calls.to_dict(),
        }

    @classmethod
    def from_state_dict(
        cls,
        data: dict[str, Any],
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> "MatchEngine":
        engine = cls(config=config, rng=rng)
        engine._players = tuple(Player.from_dict(p) for p in data["players"])
        if data.get("round") is not None:
            engine._round = RoundState.from_dict(data["round"])
        if data.get("match") is not None:
            engine._match = MatchState.from_dict(data["match"])
        engine._calls = CallState.from_dict(data.get("calls", {}))
        return engine

    # ---------- Internals ----------

    @contextmanager
    def _action(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise ActionInProgress("Another action is still being applied")
        try:
            yield
        finally:
            self._lock.release()

    def _require_round(self) -> RoundState:
        if self._round is None:
            raise IllegalMove("No hand has been dealt")
        return self._round

    def _require_match(self) -> MatchState:
        if self._match is None:
            raise IllegalMove("No match has been started")
        return self._match

    def _commit(self, new_state: RoundState, sizes_before: Dict[str, int], kind: str) -> List[EngineEvent]:
        match = self._match
        if new_state.winner_id is not None:
            score = score_hand(new_state.players, new_state.winner_id)
            match = apply_hand_result(self._require_match(), new_state.winner_id, score)
        self._round = new_state
        self._calls = update_after_action(self._calls, sizes_before, new_state)
        self._match = match
        events = [EngineEvent(kind, new_state)]
        if new_state.winner_id is None:
            return events

        logger.info(
            "Hand won by %s for %d points; totals %s",
            new_state.winner_id,
            score,
            self._match.total_scores,
        )
        events.append(EngineEvent("hand_ended", new_state))
        if is_match_over(self._match):
            logger.info("Match won by %s", match_winner(self._match))
            events.append(EngineEvent("match_ended", new_state))
        return events

    def _notify(self, events: List[EngineEvent]) -> None:
        for event in events:
            for listener in list(self._listeners):
                listener(event)
