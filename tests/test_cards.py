"""Unit tests for cards and deck building."""

import random
from collections import Counter

import pytest
from unomatch.engine import (
    Card,
    CardType,
    Color,
    build_standard_deck,
    create_deck,
    deal_opening_hands,
    draw_opening_discard,
    shuffle,
)


def test_standard_deck_composition() -> None:
    deck = build_standard_deck()
    assert len(deck) == 108
    assert len({c.id for c in deck}) == 108

    types = Counter(c.type for c in deck)
    assert types[CardType.WILD] == 4
    assert types[CardType.WILD_DRAW_FOUR] == 4
    for card_type in (CardType.SKIP, CardType.REVERSE, CardType.DRAW_TWO):
        assert types[card_type] == 8

    for color in Color:
        colored = [c for c in deck if c.color == color]
        assert len(colored) == 25
        values = Counter(c.value for c in colored if c.type == CardType.NUMBER)
        assert values[0] == 1
        assert all(values[v] == 2 for v in range(1, 10))


def test_card_invariants() -> None:
    with pytest.raises(ValueError):
        Card(Color.RED, CardType.NUMBER)
    with pytest.raises(ValueError):
        Card(Color.RED, CardType.NUMBER, 10)
    with pytest.raises(ValueError):
        Card(Color.RED, CardType.SKIP, 3)
    with pytest.raises(ValueError):
        Card(Color.RED, CardType.WILD)
    with pytest.raises(ValueError):
        Card(None, CardType.DRAW_TWO)


def test_card_identity_and_display() -> None:
    a = Card(Color.RED, CardType.NUMBER, 7)
    b = Card(Color.RED, CardType.NUMBER, 7)
    assert a != b
    assert a.same_face(b)
    assert str(a) == "red_7"
    assert str(Card(Color.BLUE, CardType.DRAW_TWO)) == "blue_draw_two"
    assert str(Card(None, CardType.WILD_DRAW_FOUR)) == "wild_draw_four"


def test_card_scores() -> None:
    assert Card(Color.GREEN, CardType.NUMBER, 9).score == 9
    assert Card(Color.GREEN, CardType.REVERSE).score == 20
    assert Card(None, CardType.WILD).score == 50
    assert Card(None, CardType.WILD_DRAW_FOUR).score == 50


def test_card_dict_keeps_identity() -> None:
    card = Card(Color.YELLOW, CardType.NUMBER, 4)
    restored = Card.from_dict(card.to_dict())
    assert restored == card


def test_shuffle_is_permutation_and_leaves_input_alone() -> None:
    deck = build_standard_deck()
    before = list(deck)
    shuffled = shuffle(deck, random.Random(7))
    assert deck == before
    assert sorted(c.id for c in shuffled) == sorted(c.id for c in deck)
    assert shuffled != deck


def test_shuffle_reproducible_with_seed() -> None:
    deck = build_standard_deck()
    assert shuffle(deck, random.Random(123)) == shuffle(deck, random.Random(123))


def test_create_deck_size() -> None:
    assert len(create_deck(seed=42)) == 108


def test_deal_opening_hands() -> None:
    deck = build_standard_deck()
    hands, remaining = deal_opening_hands(deck, 3)
    assert [len(h) for h in hands] == [7, 7, 7]
    assert hands[0] == deck[:7]
    assert hands[1] == deck[7:14]
    assert remaining == deck[21:]


def test_deal_needs_enough_cards() -> None:
    with pytest.raises(ValueError):
        deal_opening_hands(build_standard_deck()[:10], 2)


def test_opening_discard_recycles_special_cards() -> None:
    skip = Card(Color.RED, CardType.SKIP)
    wild = Card(None, CardType.WILD)
    five = Card(Color.BLUE, CardType.NUMBER, 5)
    rest = Card(Color.GREEN, CardType.NUMBER, 1)

    top, remaining = draw_opening_discard([skip, wild, five, rest])
    assert top == five
    assert remaining == [rest, skip, wild]


def test_opening_discard_without_number_card() -> None:
    with pytest.raises(ValueError):
        draw_opening_discard([Card(None, CardType.WILD)])
