"""Game engine for UNO."""

from unomatch.engine.calls import ChallengeOutcome
from unomatch.engine.card import Card, CardType, Color
from unomatch.engine.deck import (
    build_standard_deck,
    create_deck,
    deal_opening_hands,
    draw_opening_discard,
    shuffle,
)
from unomatch.engine.errors import (
    ActionInProgress,
    EmptyHand,
    EngineError,
    IllegalMove,
    InvalidIndex,
    MatchOver,
    MissingColorChoice,
    UnknownPlayer,
)
from unomatch.engine.game_state import CallState, MatchState, Player, PlayerView, RoundState
from unomatch.engine.match import EngineEvent, MatchEngine, MoveResult
from unomatch.engine.rules import (
    Action,
    PlayCard,
    DrawCard,
    DrawMode,
    is_legal_play,
    get_legal_actions,
    apply_play,
    apply_draw,
    init_round,
)
from unomatch.engine.scoring import apply_hand_result, is_match_over, match_winner, score_hand

__all__ = [
    "Card",
    "CardType",
    "Color",
    "build_standard_deck",
    "create_deck",
    "deal_opening_hands",
    "draw_opening_discard",
    "shuffle",
    "EngineError",
    "IllegalMove",
    "MissingColorChoice",
    "InvalidIndex",
    "EmptyHand",
    "ActionInProgress",
    "MatchOver",
    "UnknownPlayer",
    "Player",
    "RoundState",
    "CallState",
    "MatchState",
    "PlayerView",
    "Action",
    "PlayCard",
    "DrawCard",
    "DrawMode",
    "is_legal_play",
    "get_legal_actions",
    "apply_play",
    "apply_draw",
    "init_round",
    "ChallengeOutcome",
    "score_hand",
    "apply_hand_result",
    "is_match_over",
    "match_winner",
    "MatchEngine",
    "MoveResult",
    "EngineEvent",
]
