"""Last-card declarations and challenges."""

import random
from enum import Enum
from typing import Dict, Optional, Tuple

from unomatch.engine.game_state import CallState, RoundState
from unomatch.engine.rules import DrawMode, apply_draw

CHALLENGE_PENALTY = 4


class ChallengeOutcome(str, Enum):
    """Result of challenging a player's missing last-card declaration."""

    UPHELD = "upheld"  # target held one card undeclared and draws the penalty
    REJECTED = "rejected"  # challenger was wrong and draws the penalty


def declare(call_state: CallState, state: RoundState, player_id: str) -> CallState:
    """Record a declaration. Declaring early is allowed; hosts gate it by hand size.

    Declarations already on record for other players stand.
    """
    state.player_index(player_id)
    return _with_required(call_state.declared | {player_id}, state.hand_sizes())


def update_after_action(
    call_state: CallState,
    sizes_before: Dict[str, int],
    state: RoundState,
) -> CallState:
    """Drop each declaration whose declarer's hand moved off one card."""
    sizes_after = state.hand_sizes()
    declared = frozenset(
        pid for pid in call_state.declared
        if sizes_after[pid] == 1 or sizes_after[pid] == sizes_before.get(pid)
    )
    return _with_required(declared, sizes_after)


def _with_required(declared: frozenset[str], sizes: Dict[str, int]) -> CallState:
    required = any(size == 1 and pid not in declared for pid, size in sizes.items())
    return CallState(declared=declared, required=required)


def is_challengeable(call_state: CallState, state: RoundState, target_id: str) -> bool:
    """True when ``target_id`` holds exactly one card and has not declared it."""
    return len(state.hand_of(target_id)) == 1 and not call_state.has_declared(target_id)


def resolve_challenge(
    call_state: CallState,
    state: RoundState,
    challenger_id: str,
    target_id: str,
    rng: Optional[random.Random] = None,
) -> Tuple[ChallengeOutcome, RoundState, CallState]:
    """Settle a challenge; the loser draws the penalty without the turn moving."""
    state.player_index(challenger_id)
    sizes_before = state.hand_sizes()
    if is_challengeable(call_state, state, target_id):
        outcome, loser = ChallengeOutcome.UPHELD, target_id
    else:
        outcome, loser = ChallengeOutcome.REJECTED, challenger_id
    new_state = apply_draw(
        state,
        state.current_player_index,
        DrawMode.CHALLENGE,
        count=CHALLENGE_PENALTY,
        target_id=loser,
        rng=rng,
    )
    return outcome, new_state, update_after_action(call_state, sizes_before, new_state)
