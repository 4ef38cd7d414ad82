"""Tests for the MatchEngine API, including a scripted end-to-end hand."""

import json

import pytest
from unomatch.config import EngineConfig
from unomatch.engine import (
    ActionInProgress,
    Card,
    CardType,
    ChallengeOutcome,
    Color,
    IllegalMove,
    InvalidIndex,
    MatchEngine,
    MatchOver,
    MissingColorChoice,
    UnknownPlayer,
    build_standard_deck,
)

R, B, G, Y = Color.RED, Color.BLUE, Color.GREEN, Color.YELLOW
N = CardType.NUMBER


def stacked_deck(*faces):
    """A full deck whose top cards have the given (color, type, value) faces, in order."""
    deck = build_standard_deck()
    front = []
    for color, card_type, value in faces:
        card = next(c for c in deck if (c.color, c.type, c.value) == (color, card_type, value))
        deck.remove(card)
        front.append(card)
    return front + deck


# Seat 0 can chain skips and reverses (two players) and go out without
# seat 1 ever taking a turn.
WINNING_DECK = (
    (R, CardType.SKIP, None),
    (R, CardType.SKIP, None),
    (R, CardType.REVERSE, None),
    (R, CardType.REVERSE, None),
    (B, CardType.REVERSE, None),
    (B, CardType.SKIP, None),
    (B, N, 5),
    # seat 1
    (R, N, 7),
    (None, CardType.WILD, None),
    (Y, CardType.SKIP, None),
    (G, N, 0),
    (Y, N, 0),
    (B, N, 0),
    (R, N, 0),
    # opening discard
    (R, N, 3),
)


def start(target_score: int = 500, seed: int = 1) -> MatchEngine:
    engine = MatchEngine(EngineConfig(seed=seed))
    engine.start_match(1, target_score=target_score, deck=stacked_deck(*WINNING_DECK))
    return engine


def test_start_match() -> None:
    engine = MatchEngine(EngineConfig(seed=5))
    match, state = engine.start_match(3)
    assert match.target_score == 500
    assert match.hand_number == 1
    assert match.total_scores == {}
    assert [p.id for p in state.players] == ["0", "1", "2", "3"]
    assert [p.is_automated for p in state.players] == [False, True, True, True]
    assert state.card_count() == 108
    assert engine.current_player_id == "0"


def test_start_match_rejects_bad_seat_count() -> None:
    with pytest.raises(ValueError):
        MatchEngine().start_match(0)
    with pytest.raises(ValueError):
        MatchEngine().start_match(10)


def test_end_to_end_opening_hand() -> None:
    engine = start()
    assert engine.top_card().same_face(Card(R, N, 3))
    assert engine.active_color == R

    for _ in range(7):
        result = engine.attempt_play(0, player_id="0")
        assert result.ok, result.error
        assert result.state.card_count() == 108

    state = engine.round_state
    assert state.winner_id == "0"
    assert engine.hand("0") == ()
    assert len(engine.hand("1")) == 7
    assert engine.current_hand_scores == {"0": 77}
    assert engine.total_scores == {"0": 77}
    assert engine.match_state.hand_number == 2
    assert not engine.is_match_over()


def test_reverse_in_two_player_game_keeps_turn() -> None:
    engine = start()
    engine.attempt_play(0)
    engine.attempt_play(0)
    result = engine.attempt_play(0)
    assert result.state.top_discard().type == CardType.REVERSE
    assert engine.current_player_id == "0"


def test_failed_play_leaves_state_unchanged() -> None:
    engine = start()
    before = engine.round_state
    result = engine.attempt_play(12)
    assert not result.ok
    assert isinstance(result.error, InvalidIndex)
    assert result.state is before
    assert engine.round_state is before

    result = engine.attempt_play(0, player_id="1")
    assert isinstance(result.error, IllegalMove)
    assert engine.round_state is before


def test_wild_without_color_is_reported() -> None:
    engine = start()
    for _ in range(6):
        engine.attempt_play(0)
    # Hand the turn to seat 1, who holds a wild
    engine.attempt_draw()
    assert engine.current_player_id == "1"
    wild_index = next(i for i, c in enumerate(engine.hand("1")) if c.type == CardType.WILD)
    result = engine.attempt_play(wild_index)
    assert isinstance(result.error, MissingColorChoice)
    assert engine.attempt_play(wild_index, Color.GREEN).ok
    assert engine.active_color == Color.GREEN


def test_attempt_draw_passes_turn() -> None:
    engine = start()
    result = engine.attempt_draw()
    assert result.ok
    assert len(engine.hand("0")) == 8
    assert engine.current_player_id == "1"


def test_challenge_upheld_when_last_card_not_declared() -> None:
    engine = start()
    for _ in range(6):
        engine.attempt_play(0)
    assert len(engine.hand("0")) == 1
    assert engine.call_state.required

    outcome = engine.raise_challenge("1", "0")
    assert outcome == ChallengeOutcome.UPHELD
    assert len(engine.hand("0")) == 5
    assert len(engine.hand("1")) == 7
    assert engine.current_player_id == "0"
    assert engine.round_state.card_count() == 108


def test_challenge_rejected_after_declaration() -> None:
    engine = start()
    for _ in range(6):
        engine.attempt_play(0)
    engine.declare_last_card("0")
    assert not engine.call_state.required

    outcome = engine.raise_challenge("1", "0")
    assert outcome == ChallengeOutcome.REJECTED
    assert len(engine.hand("0")) == 1
    assert len(engine.hand("1")) == 11


def test_challenge_unknown_player() -> None:
    engine = start()
    with pytest.raises(UnknownPlayer):
        engine.raise_challenge("1", "7")


def test_next_hand_keeps_totals() -> None:
    engine = start()
    for _ in range(7):
        engine.attempt_play(0)
    state = engine.start_hand()
    assert state.winner_id is None
    assert all(len(p.hand) == 7 for p in state.players)
    assert engine.total_scores == {"0": 77}


def test_start_hand_refused_mid_hand() -> None:
    engine = start()
    with pytest.raises(IllegalMove):
        engine.start_hand()


def test_match_over_blocks_new_hands() -> None:
    engine = start(target_score=50)
    for _ in range(7):
        engine.attempt_play(0)
    assert engine.is_match_over()
    assert engine.match_winner() == "0"
    with pytest.raises(MatchOver):
        engine.start_hand()


def test_concurrent_action_rejected() -> None:
    engine = start()
    engine._lock.acquire()
    try:
        result = engine.attempt_play(0)
        assert isinstance(result.error, ActionInProgress)
        with pytest.raises(ActionInProgress):
            engine.declare_last_card("0")
    finally:
        engine._lock.release()
    assert engine.attempt_play(0).ok


def test_listeners_receive_events() -> None:
    engine = start(target_score=50)
    seen = []
    unsubscribe = engine.subscribe(lambda event: seen.append(event.kind))
    for _ in range(7):
        engine.attempt_play(0)
    assert seen == ["play"] * 7 + ["hand_ended", "match_ended"]

    unsubscribe()
    count = len(seen)
    engine.declare_last_card("0")
    assert len(seen) == count


def test_view_hides_other_hands() -> None:
    engine = start()
    view = engine.view("1")
    assert len(view.my_hand) == 7
    assert view.num_cards_per_player == {"0": 7, "1": 7}
    assert view.current_player == "0"
    assert not view.is_my_turn


def test_export_and_resume() -> None:
    engine = start()
    engine.attempt_play(0)
    engine.attempt_draw()
    data = json.loads(json.dumps(engine.export_state()))

    resumed = MatchEngine.from_state_dict(data)
    assert resumed.round_state == engine.round_state
    assert resumed.match_state == engine.match_state
    assert resumed.call_state == engine.call_state

    assert resumed.attempt_draw().ok
    assert resumed.round_state.card_count() == 108


def test_winning_play_without_match_leaves_round_untouched() -> None:
    engine = start()
    for _ in range(6):
        engine.attempt_play(0)
    data = engine.export_state()
    data["match"] = None
    resumed = MatchEngine.from_state_dict(data)
    before = resumed.round_state
    calls_before = resumed.call_state

    result = resumed.attempt_play(0)
    assert isinstance(result.error, IllegalMove)
    assert resumed.round_state is before
    assert resumed.call_state == calls_before
    assert len(resumed.hand("0")) == 1
    assert not resumed.is_hand_over()
