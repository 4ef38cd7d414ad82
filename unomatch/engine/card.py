"""Card, Color and CardType types for UNO."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Color(str, Enum):
    """Card colors, in catalog order."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"


class CardType(str, Enum):
    """Card types."""

    NUMBER = "number"
    SKIP = "skip"
    REVERSE = "reverse"
    DRAW_TWO = "draw_two"
    WILD = "wild"
    WILD_DRAW_FOUR = "wild_draw_four"


WILD_TYPES = (CardType.WILD, CardType.WILD_DRAW_FOUR)
ACTION_TYPES = (CardType.SKIP, CardType.REVERSE, CardType.DRAW_TWO)

# Points a card is worth when left in a losing hand; number cards score face value.
CARD_SCORES = {
    CardType.SKIP: 20,
    CardType.REVERSE: 20,
    CardType.DRAW_TWO: 20,
    CardType.WILD: 50,
    CardType.WILD_DRAW_FOUR: 50,
}


def _new_card_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Card:
    """A UNO card.

    Number cards carry a color and a value 0-9. Skip/Reverse/Draw Two carry a
    color and no value. Wild and Wild Draw Four carry neither. The id tells
    apart otherwise identical cards.
    """

    color: Optional[Color]
    type: CardType
    value: Optional[int] = None
    id: str = field(default_factory=_new_card_id)

    def __post_init__(self) -> None:
        if self.type == CardType.NUMBER:
            if self.value is None or not 0 <= self.value <= 9:
                raise ValueError(f"Number card needs a value 0-9, got {self.value!r}")
        elif self.value is not None:
            raise ValueError(f"Only number cards have a value: {self.type.value}")
        if self.type in WILD_TYPES and self.color is not None:
            raise ValueError("Wild cards must have color=None")
        if self.type not in WILD_TYPES and self.color is None:
            raise ValueError("Non-wild cards must have a color")

    @property
    def is_wild(self) -> bool:
        return self.type in WILD_TYPES

    @property
    def score(self) -> int:
        if self.type == CardType.NUMBER:
            return self.value
        return CARD_SCORES[self.type]

    def same_face(self, other: "Card") -> bool:
        """True when both cards print the same thing, regardless of id."""
        return (self.color, self.type, self.value) == (other.color, other.type, other.value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "color": self.color.value if self.color else None,
            "type": self.type.value,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Card":
        color = data.get("color")
        return cls(
            color=Color(color) if color else None,
            type=CardType(data["type"]),
            value=data.get("value"),
            id=data["id"],
        )

    def __str__(self) -> str:
        if self.color is None:
            return self.type.value
        if self.type == CardType.NUMBER:
            return f"{self.color.value}_{self.value}"
        return f"{self.color.value}_{self.type.value}"
