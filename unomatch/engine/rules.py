"""UNO rules: legality, legal actions and state transitions.

Transitions never mutate their input state. Each returns a new RoundState or
raises an EngineError, leaving the caller's state untouched.
"""

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from unomatch.engine.card import Card, CardType, Color
from unomatch.engine.deck import HAND_SIZE, build_standard_deck, deal_opening_hands, draw_opening_discard, shuffle
from unomatch.engine.errors import EmptyHand, IllegalMove, InvalidIndex, MissingColorChoice
from unomatch.engine.game_state import Player, RoundState

logger = logging.getLogger(__name__)


@dataclass
class PlayCard:
    """Action: play the card at ``card_index``. For wilds, chosen_color is required."""

    card_index: int
    chosen_color: Optional[Color] = None


@dataclass
class DrawCard:
    """Action: draw (the pending penalty if there is one, else a single card)."""

    pass


Action = Union[PlayCard, DrawCard]


class DrawMode(str, Enum):
    """Why cards are being drawn."""

    PENALTY = "penalty"  # resolve the pending Draw Two/Four, turn passes
    VOLUNTARY = "voluntary"  # draw one card, turn passes
    CHALLENGE = "challenge"  # out-of-turn penalty for a lost challenge, turn stays


def init_round(
    players: Sequence[Player],
    deck: Optional[Sequence[Card]] = None,
    rng: Optional[random.Random] = None,
    hand_size: int = HAND_SIZE,
) -> RoundState:
    """Create the opening state of a hand: deal, then turn up a number card.

    ``deck`` is used in the given order (top first); when omitted a freshly
    shuffled standard deck is used.
    """
    if len(players) < 2:
        raise ValueError("A hand needs at least two players")
    if deck is None:
        deck = shuffle(build_standard_deck(), rng)
    hands, remaining = deal_opening_hands(deck, len(players), hand_size)
    first_card, remaining = draw_opening_discard(remaining)
    return RoundState(
        players=tuple(
            replace(player, hand=tuple(hand)) for player, hand in zip(players, hands)
        ),
        deck=tuple(remaining),
        discard_pile=(first_card,),
        current_player_index=0,
        direction=1,
        active_color=first_card.color,
        pending_draw_count=0,
    )


def is_legal_play(
    card: Card,
    top_card: Optional[Card],
    active_color: Optional[Color],
    pending_draw_count: int,
    acting_hand: Sequence[Card],
) -> bool:
    """Check if ``card`` can be played on the current discard pile."""
    if top_card is None:
        return pending_draw_count == 0
    # A pending penalty can only be passed on with the same penalty card
    if pending_draw_count > 0:
        if top_card.type in (CardType.DRAW_TWO, CardType.WILD_DRAW_FOUR):
            return card.type == top_card.type
        return False
    if card.type == CardType.WILD:
        return True
    if card.type == CardType.WILD_DRAW_FOUR:
        return not any(c.color == active_color for c in acting_hand)
    if card.color == active_color:
        return True
    if card.type == CardType.NUMBER and top_card.type == CardType.NUMBER:
        return card.value == top_card.value
    return card.type == top_card.type


def legal_card_indices(
    hand: Sequence[Card],
    top_card: Optional[Card],
    active_color: Optional[Color],
    pending_draw_count: int,
) -> List[int]:
    """Indices of the cards in ``hand`` that may be played, in hand order."""
    return [
        i for i, card in enumerate(hand)
        if is_legal_play(card, top_card, active_color, pending_draw_count, hand)
    ]


def get_legal_actions(state: RoundState, player_index: int) -> List[Action]:
    """Return all legal actions for the given player."""
    if state.winner_id is not None:
        return []
    if state.current_player_index != player_index:
        return []

    hand = state.players[player_index].hand
    actions: List[Action] = []
    for i in legal_card_indices(hand, state.top_discard(), state.active_color, state.pending_draw_count):
        if hand[i].is_wild:
            for color in Color:
                actions.append(PlayCard(card_index=i, chosen_color=color))
        else:
            actions.append(PlayCard(card_index=i))

    # Drawing is always possible: it resolves a penalty or ends the turn
    actions.append(DrawCard())
    return actions


def next_player_index(index: int, direction: int, player_count: int, steps: int = 1) -> int:
    return (index + direction * steps) % player_count


def _with_hand(players: tuple[Player, ...], index: int, hand: tuple[Card, ...]) -> tuple[Player, ...]:
    return players[:index] + (replace(players[index], hand=hand),) + players[index + 1:]


def _draw_cards(
    deck: Sequence[Card],
    discard: Sequence[Card],
    n: int,
    rng: Optional[random.Random],
) -> Tuple[List[Card], List[Card], List[Card]]:
    """Take ``n`` cards from the top of the deck, reshuffling the discard pile when it runs out.

    Returns (drawn, deck, discard). Draws fewer than ``n`` only when the deck
    and every discard below the top card are exhausted.
    """
    deck = list(deck)
    discard = list(discard)
    drawn: List[Card] = []
    for _ in range(n):
        if not deck and len(discard) > 1:
            # Reshuffle discard (except top) into draw pile
            deck = shuffle(discard[:-1], rng)
            discard = discard[-1:]
            logger.debug("Reshuffled %d discards into the deck", len(deck))
        if not deck:
            logger.debug("No cards left to draw; stopped after %d of %d", len(drawn), n)
            break
        drawn.append(deck.pop(0))
    return drawn, deck, discard


def apply_play(
    state: RoundState,
    player_index: int,
    card_index: int,
    chosen_color: Optional[Color] = None,
) -> RoundState:
    """Play a card and return the new round state.

    Raises:
        IllegalMove: The hand is over, it is not this player's turn, or the card cannot be played.
        EmptyHand / InvalidIndex: ``card_index`` does not reference a card in the hand.
        MissingColorChoice: A wild card was played without ``chosen_color``.
    """
    if state.winner_id is not None:
        raise IllegalMove("The hand is over")
    if player_index != state.current_player_index:
        raise IllegalMove(f"It is not seat {player_index}'s turn")

    player = state.players[player_index]
    hand = player.hand
    if not hand:
        raise EmptyHand(f"Player {player.id} has no cards")
    if not 0 <= card_index < len(hand):
        raise InvalidIndex(f"Card index {card_index} out of range (0-{len(hand) - 1})")

    card = hand[card_index]
    top = state.top_discard()
    if not is_legal_play(card, top, state.active_color, state.pending_draw_count, hand):
        raise IllegalMove(f"{card} cannot be played on {top}")
    if card.is_wild and chosen_color is None:
        raise MissingColorChoice(f"{card} requires a color choice")

    new_hand = hand[:card_index] + hand[card_index + 1:]
    players = _with_hand(state.players, player_index, new_hand)
    discard = state.discard_pile + (card,)
    active_color = chosen_color if card.is_wild else card.color
    direction = state.direction
    pending = state.pending_draw_count
    steps = 1

    # Handle special cards
    if card.type == CardType.SKIP:
        steps = 2
    elif card.type == CardType.REVERSE:
        direction = -direction
        # With two players a reverse hands the turn straight back, like a skip
        if len(players) == 2:
            steps = 2
    elif card.type == CardType.DRAW_TWO:
        pending += 2
    elif card.type == CardType.WILD_DRAW_FOUR:
        pending += 4

    action_desc = f"{player.id} played {card}"
    if card.is_wild:
        action_desc += f" (chose {chosen_color.value})"
    logger.debug(action_desc)

    # Check win
    if not new_hand:
        return replace(
            state,
            players=players,
            discard_pile=discard,
            direction=direction,
            active_color=active_color,
            pending_draw_count=pending,
            winner_id=player.id,
            history=state.history + (f"{action_desc} and WON!",),
        )

    return replace(
        state,
        players=players,
        discard_pile=discard,
        current_player_index=next_player_index(player_index, direction, len(players), steps),
        direction=direction,
        active_color=active_color,
        pending_draw_count=pending,
        history=state.history + (action_desc,),
    )


def apply_draw(
    state: RoundState,
    player_index: int,
    mode: DrawMode,
    count: int = 1,
    target_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> RoundState:
    """Draw cards and return the new round state.

    PENALTY draws the whole pending count for the current player; VOLUNTARY
    draws one card. Both consume the drawing player's turn. CHALLENGE draws
    ``count`` cards into ``target_id``'s hand without moving the turn, and
    ignores ``player_index``.

    Raises:
        IllegalMove: The hand is over, the mode does not fit the pending penalty,
            or it is not this player's turn.
    """
    if state.winner_id is not None:
        raise IllegalMove("The hand is over")

    if mode == DrawMode.CHALLENGE:
        if target_id is None:
            raise IllegalMove("A challenge penalty draw needs a target player")
        return _draw_into(state, state.player_index(target_id), count, rng, "(challenge penalty)")

    if player_index != state.current_player_index:
        raise IllegalMove(f"It is not seat {player_index}'s turn")

    pending = state.pending_draw_count
    if mode == DrawMode.PENALTY:
        if pending == 0:
            raise IllegalMove("There is no pending draw penalty")
        drawn_state = _draw_into(state, player_index, pending, rng, "(penalty)")
    else:
        if pending > 0:
            raise IllegalMove(f"Player {state.players[player_index].id} must draw the pending {pending} cards")
        drawn_state = _draw_into(state, player_index, 1, rng, "")

    # Skip turn after drawing (no play)
    return replace(
        drawn_state,
        pending_draw_count=0,
        current_player_index=next_player_index(player_index, state.direction, len(state.players)),
    )


def _draw_into(
    state: RoundState,
    player_index: int,
    n: int,
    rng: Optional[random.Random],
    reason: str,
) -> RoundState:
    player = state.players[player_index]
    drawn, deck, discard = _draw_cards(state.deck, state.discard_pile, n, rng)
    desc = f"{player.id} drew a card" if len(drawn) == 1 else f"{player.id} drew {len(drawn)} cards"
    if reason:
        desc += f" {reason}"
    logger.debug(desc)
    return replace(
        state,
        players=_with_hand(state.players, player_index, player.hand + tuple(drawn)),
        deck=tuple(deck),
        discard_pile=tuple(discard),
        history=state.history + (desc,),
    )
