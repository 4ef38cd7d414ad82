"""Unit tests for game history logging."""

import random

from unomatch.engine import (
    Card,
    CardType,
    Color,
    DrawMode,
    Player,
    RoundState,
    apply_draw,
    apply_play,
    init_round,
)


def _state(pending: int = 0) -> RoundState:
    top = Card(Color.RED, CardType.DRAW_TWO) if pending else Card(Color.RED, CardType.NUMBER, 5)
    return RoundState(
        players=(
            Player(id="p1", name="P1", hand=(Card(Color.RED, CardType.NUMBER, 1), Card(None, CardType.WILD))),
            Player(id="p2", name="P2", hand=(Card(Color.BLUE, CardType.NUMBER, 1),)),
        ),
        deck=tuple(Card(Color.GREEN, CardType.NUMBER, 2) for _ in range(5)),
        discard_pile=(top,),
        active_color=Color.RED,
        pending_draw_count=pending,
    )


def test_history_initialization():
    players = [Player(id="p1", name="P1"), Player(id="p2", name="P2")]
    state = init_round(players, rng=random.Random(0))
    assert len(state.history) == 0


def test_history_records_play():
    state = apply_play(_state(), 0, 0)
    assert state.history == ("p1 played red_1",)


def test_history_records_wild_color():
    state = apply_play(_state(), 0, 1, Color.BLUE)
    assert state.history[-1] == "p1 played wild (chose blue)"


def test_history_records_draw():
    state = apply_draw(_state(), 0, DrawMode.VOLUNTARY)
    assert state.history[-1] == "p1 drew a card"


def test_history_records_penalty():
    state = apply_draw(_state(pending=2), 0, DrawMode.PENALTY)
    assert state.history[-1] == "p1 drew 2 cards (penalty)"


def test_history_records_win():
    state = apply_play(_state(), 0, 0)
    state = apply_play(state, 1, 0)
    assert state.history[-1] == "p2 played blue_1 and WON!"


def test_history_persists_across_turns():
    state = apply_play(_state(), 0, 0)
    state = apply_draw(state, 1, DrawMode.VOLUNTARY)
    assert len(state.history) == 2
    assert "p1 played" in state.history[0]
    assert "p2 drew" in state.history[1]
