"""Game state for UNO."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from unomatch.engine.card import Card, Color
from unomatch.engine.errors import UnknownPlayer


@dataclass(frozen=True)
class Player:
    """A seated player. The hand is only replaced by the turn engine."""

    id: str
    name: str
    hand: tuple[Card, ...] = ()
    is_automated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "hand": [c.to_dict() for c in self.hand],
            "is_automated": self.is_automated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Player":
        return cls(
            id=data["id"],
            name=data["name"],
            hand=tuple(Card.from_dict(c) for c in data["hand"]),
            is_automated=data["is_automated"],
        )


@dataclass(frozen=True)
class RoundState:
    """Immutable state of one hand of UNO."""

    players: tuple[Player, ...]  # turn order
    deck: tuple[Card, ...]  # top is first
    discard_pile: tuple[Card, ...]  # top is last
    current_player_index: int = 0
    direction: int = 1  # 1 = forward through players, -1 = backward
    active_color: Optional[Color] = None
    pending_draw_count: int = 0  # accumulated Draw Two/Four
    winner_id: Optional[str] = None
    history: tuple[str, ...] = field(default_factory=tuple)  # Log of events

    def top_discard(self) -> Optional[Card]:
        """Return the top card on the discard pile."""
        return self.discard_pile[-1] if self.discard_pile else None

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def is_over(self) -> bool:
        return self.winner_id is not None

    def player_index(self, player_id: str) -> int:
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        raise UnknownPlayer(f"No player with id {player_id!r}")

    def hand_of(self, player_id: str) -> tuple[Card, ...]:
        return self.players[self.player_index(player_id)].hand

    def hand_sizes(self) -> Dict[str, int]:
        return {p.id: len(p.hand) for p in self.players}

    def card_count(self) -> int:
        """Cards in deck, discard pile and every hand; 108 for a full deck."""
        return (
            len(self.deck)
            + len(self.discard_pile)
            + sum(len(p.hand) for p in self.players)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "players": [p.to_dict() for p in self.players],
            "deck": [c.to_dict() for c in self.deck],
            "discard_pile": [c.to_dict() for c in self.discard_pile],
            "current_player_index": self.current_player_index,
            "direction": self.direction,
            "active_color": self.active_color.value if self.active_color else None,
            "pending_draw_count": self.pending_draw_count,
            "winner_id": self.winner_id,
            "history": list(self.history),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoundState":
        color = data.get("active_color")
        return cls(
            players=tuple(Player.from_dict(p) for p in data["players"]),
            deck=tuple(Card.from_dict(c) for c in data["deck"]),
            discard_pile=tuple(Card.from_dict(c) for c in data["discard_pile"]),
            current_player_index=data["current_player_index"],
            direction=data["direction"],
            active_color=Color(color) if color else None,
            pending_draw_count=data["pending_draw_count"],
            winner_id=data.get("winner_id"),
            history=tuple(data.get("history", ())),
        )


@dataclass(frozen=True)
class CallState:
    """Who has declared their last card, and whether a declaration is owed."""

    declared: frozenset[str] = frozenset()  # players whose declaration stands
    required: bool = False

    def has_declared(self, player_id: str) -> bool:
        return player_id in self.declared

    def to_dict(self) -> dict[str, Any]:
        return {"declared": sorted(self.declared), "required": self.required}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CallState":
        return cls(declared=frozenset(data.get("declared", ())), required=data.get("required", False))


@dataclass(frozen=True)
class MatchState:
    """Scores carried across the hands of a match."""

    current_hand_scores: Dict[str, int] = field(default_factory=dict)
    total_scores: Dict[str, int] = field(default_factory=dict)
    target_score: int = 500
    hand_number: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_hand_scores": dict(self.current_hand_scores),
            "total_scores": dict(self.total_scores),
            "target_score": self.target_score,
            "hand_number": self.hand_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchState":
        return cls(
            current_hand_scores=dict(data.get("current_hand_scores", {})),
            total_scores=dict(data.get("total_scores", {})),
            target_score=data["target_score"],
            hand_number=data["hand_number"],
        )


@dataclass
class PlayerView:
    """Filtered round state visible to a single player.

    Contains only that player's hand and public info.
    """

    player_id: str
    my_hand: List[Card]
    top_discard: Optional[Card]
    current_player: str
    direction: int
    active_color: Optional[Color]
    pending_draw_count: int
    winner_id: Optional[str]
    player_order: tuple[str, ...]
    num_cards_per_player: Dict[str, int]  # player_id -> count
    history: List[str]  # Recent game events

    @property
    def is_my_turn(self) -> bool:
        return self.current_player == self.player_id and self.winner_id is None

    @classmethod
    def from_state(cls, state: RoundState, player_id: str) -> "PlayerView":
        """Create a player view from full round state, hiding other players' hands."""
        return cls(
            player_id=player_id,
            my_hand=list(state.hand_of(player_id)),
            top_discard=state.top_discard(),
            current_player=state.current_player.id,
            direction=state.direction,
            active_color=state.active_color,
            pending_draw_count=state.pending_draw_count,
            winner_id=state.winner_id,
            player_order=tuple(p.id for p in state.players),
            num_cards_per_player=state.hand_sizes(),
            history=list(state.history[-10:]),  # Last 10 events
        )
