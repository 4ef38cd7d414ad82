"""First-fit opponent policy: play the first legal card in hand order."""

import random
from typing import Optional, Sequence

from unomatch.engine import Action, Card, Color, DrawCard, PlayCard, PlayerView
from unomatch.engine.rules import legal_card_indices


def pick_color(hand: Sequence[Card], rng: Optional[random.Random] = None) -> Color:
    """Most frequent color left in ``hand``, ties going to catalog order.

    A hand with no colored cards gets a uniformly random color.
    """
    counts = {color: 0 for color in Color}
    for card in hand:
        if card.color is not None:
            counts[card.color] += 1
    if not any(counts.values()):
        return (rng or random).choice(list(Color))
    # max() keeps the first of equal counts, and Color iterates in catalog order
    return max(Color, key=lambda color: counts[color])


def choose_move(
    hand: Sequence[Card],
    top_card: Optional[Card],
    active_color: Optional[Color],
    pending_draw_count: int,
    rng: Optional[random.Random] = None,
) -> Action:
    """Play the first legal card in hand order, or draw when there is none."""
    legal = legal_card_indices(hand, top_card, active_color, pending_draw_count)
    if not legal:
        return DrawCard()
    index = legal[0]
    card = hand[index]
    if card.is_wild:
        rest = [c for i, c in enumerate(hand) if i != index]
        return PlayCard(card_index=index, chosen_color=pick_color(rest, rng))
    return PlayCard(card_index=index)


class FirstFitPolicy:
    """Automated player using ``choose_move`` plus two probability knobs."""

    def __init__(
        self,
        call_probability: float = 0.8,
        challenge_probability: float = 0.7,
        rng: Optional[random.Random] = None,
        name: str = "first-fit",
    ):
        self._call_probability = call_probability
        self._challenge_probability = challenge_probability
        self._rng = rng or random.Random()
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def choose_move(
        self,
        player_view: PlayerView,
        legal_actions: Optional[list[Action]] = None,
    ) -> Action:
        return choose_move(
            player_view.my_hand,
            player_view.top_discard,
            player_view.active_color,
            player_view.pending_draw_count,
            rng=self._rng,
        )

    def should_declare(self, player_view: PlayerView) -> bool:
        return self._rng.random() < self._call_probability

    def should_challenge(self, player_view: PlayerView, target_id: str) -> bool:
        return self._rng.random() < self._challenge_probability
