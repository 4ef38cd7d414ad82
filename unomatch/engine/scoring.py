"""Hand scoring and match progress."""

from typing import Optional, Sequence

from unomatch.engine.game_state import MatchState, Player


def score_hand(players: Sequence[Player], winner_id: str) -> int:
    """Sum the cards left in every losing hand.

    Number cards score face value, Skip/Reverse/Draw Two 20, wilds 50.
    """
    return sum(
        card.score
        for player in players
        if player.id != winner_id
        for card in player.hand
    )


def apply_hand_result(match_state: MatchState, winner_id: str, score: int) -> MatchState:
    """Credit ``score`` to the hand winner and move on to the next hand number."""
    totals = dict(match_state.total_scores)
    totals[winner_id] = totals.get(winner_id, 0) + score
    return MatchState(
        current_hand_scores={**match_state.current_hand_scores, winner_id: score},
        total_scores=totals,
        target_score=match_state.target_score,
        hand_number=match_state.hand_number + 1,
    )


def is_match_over(match_state: MatchState) -> bool:
    return any(total >= match_state.target_score for total in match_state.total_scores.values())


def match_winner(match_state: MatchState) -> Optional[str]:
    """Id of the player who reached the target score, or None while the match runs."""
    if not is_match_over(match_state):
        return None
    return max(match_state.total_scores, key=lambda pid: match_state.total_scores[pid])
