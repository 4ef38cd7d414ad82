"""Deck creation, shuffling and the opening deal.

The front of a deck (index 0) is its top: dealing and drawing take cards
from the front, and recycled cards go to the back.
"""

import random
from typing import List, Optional, Sequence, Tuple

from unomatch.engine.card import ACTION_TYPES, Card, CardType, Color

HAND_SIZE = 7
DECK_SIZE = 108


def build_standard_deck() -> List[Card]:
    """Create a standard, unshuffled 108-card UNO deck with fresh ids.

    - 4 colors x (one 0, two each of 1-9, two each of Skip/Reverse/Draw Two): 100 cards
    - 4 Wild, 4 Wild Draw Four: 8 cards
    """
    cards: List[Card] = []

    for color in Color:
        cards.append(Card(color, CardType.NUMBER, 0))
        for value in range(1, 10):
            cards.append(Card(color, CardType.NUMBER, value))
            cards.append(Card(color, CardType.NUMBER, value))
        for card_type in ACTION_TYPES:
            cards.append(Card(color, card_type))
            cards.append(Card(color, card_type))

    for _ in range(4):
        cards.append(Card(None, CardType.WILD))
        cards.append(Card(None, CardType.WILD_DRAW_FOUR))

    return cards


def shuffle(deck: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """Return a uniformly random permutation of ``deck`` (Fisher-Yates)."""
    shuffled = list(deck)
    (rng or random).shuffle(shuffled)
    return shuffled


def create_deck(seed: Optional[int] = None) -> List[Card]:
    """Build a standard deck and shuffle it, reproducibly when seeded."""
    return shuffle(build_standard_deck(), random.Random(seed))


def deal_opening_hands(
    deck: Sequence[Card],
    player_count: int,
    hand_size: int = HAND_SIZE,
) -> Tuple[List[List[Card]], List[Card]]:
    """Deal ``hand_size`` cards to each player from the top of the deck.

    Player 0 receives the first block of cards, player 1 the next, and so on.
    """
    if player_count < 1:
        raise ValueError("Need at least one player")
    if player_count * hand_size > len(deck):
        raise ValueError(
            f"Cannot deal {hand_size} cards to {player_count} players from {len(deck)} cards"
        )
    hands = [
        list(deck[i * hand_size:(i + 1) * hand_size])
        for i in range(player_count)
    ]
    return hands, list(deck[player_count * hand_size:])


def draw_opening_discard(deck: Sequence[Card]) -> Tuple[Card, List[Card]]:
    """Turn up the first number card as the opening discard.

    Special cards met on the way are moved to the bottom of the deck, never
    discarded, so the hand starts with a definite color and no pending effect.
    """
    remaining = list(deck)
    if not any(card.type == CardType.NUMBER for card in remaining):
        raise ValueError("Deck holds no number card to open the discard pile")
    while True:
        card = remaining.pop(0)
        if card.type == CardType.NUMBER:
            return card, remaining
        remaining.append(card)
