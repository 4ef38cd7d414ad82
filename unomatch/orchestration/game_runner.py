"""Match runner: drives policies through a match via the engine API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence

from unomatch.engine import MatchEngine, MoveResult, PlayCard, get_legal_actions
from unomatch.engine.calls import is_challengeable

if TYPE_CHECKING:
    from unomatch.agent.protocol import OpponentPolicy

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Result of a completed (or abandoned) match."""

    winner: Optional[str]
    hands_played: int
    num_turns: int
    player_ids: tuple[str, ...]
    total_scores: dict[str, int] = field(default_factory=dict)


class MatchRunner:
    """Runs a match to completion, one policy per seat (seat 0 first).

    Each turn is two-phase: the seat's policy picks an action from a player
    view, then the engine applies it. Any delay between the two is the
    caller's business.
    """

    def __init__(
        self,
        policies: Sequence["OpponentPolicy"],
        engine: Optional[MatchEngine] = None,
        max_turns: Optional[int] = None,
    ):
        if len(policies) < 2:
            raise ValueError("A match needs at least two seats")
        self._policies = list(policies)
        self.engine = engine or MatchEngine()
        self._max_turns = self.engine.config.max_turns if max_turns is None else max_turns
        self._by_id: dict[str, "OpponentPolicy"] = {}
        self.num_turns = 0

    def run(self, target_score: Optional[int] = None) -> MatchResult:
        """Start a match and play hands until someone reaches the target score."""
        self.engine.start_match(len(self._policies) - 1, target_score=target_score)
        self._by_id = {p.id: policy for p, policy in zip(self.engine.players, self._policies)}
        hands_played = 0

        while self.num_turns < self._max_turns:
            self.run_hand()
            if not self.engine.is_hand_over():
                break
            hands_played += 1
            if self.engine.is_match_over():
                break
            self.engine.start_hand()

        if not self.engine.is_match_over():
            logger.warning("Match stopped after %d turns without a winner", self.num_turns)
        return MatchResult(
            winner=self.engine.match_winner(),
            hands_played=hands_played,
            num_turns=self.num_turns,
            player_ids=tuple(self._by_id),
            total_scores=self.engine.total_scores,
        )

    def run_hand(self) -> None:
        """Play turns until the current hand ends or the turn budget is spent."""
        while not self.engine.is_hand_over() and self.num_turns < self._max_turns:
            self.play_turn()

    def play_turn(self) -> MoveResult:
        state = self.engine.round_state
        pid = state.current_player.id
        policy = self._by_id[pid]
        legal = get_legal_actions(state, state.current_player_index)
        action = policy.choose_move(self.engine.view(pid), legal)

        if isinstance(action, PlayCard):
            result = self.engine.attempt_play(action.card_index, action.chosen_color, player_id=pid)
        else:
            result = self.engine.attempt_draw(player_id=pid)
        if not result.ok:
            logger.warning("%s proposed an illegal action (%s); drawing instead", policy.name, result.error)
            result = self.engine.attempt_draw(player_id=pid)

        self.num_turns += 1
        self._handle_calls(pid)
        return result

    def _handle_calls(self, actor_id: str) -> None:
        """Let the actor declare a last card, then let the table challenge misses."""
        engine = self.engine
        if engine.is_hand_over():
            return
        if len(engine.hand(actor_id)) == 1 and not engine.call_state.has_declared(actor_id):
            if self._by_id[actor_id].should_declare(engine.view(actor_id)):
                engine.declare_last_card(actor_id)

        for target_id in list(self._by_id):
            if not is_challengeable(engine.call_state, engine.round_state, target_id):
                continue
            for challenger_id, policy in self._by_id.items():
                if challenger_id == target_id:
                    continue
                if policy.should_challenge(engine.view(challenger_id), target_id):
                    engine.raise_challenge(challenger_id, target_id)
                    break
