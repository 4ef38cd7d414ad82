"""Opponent policy protocol - interface that automated and human players implement."""

from typing import Protocol

from unomatch.engine import Action, PlayerView


class OpponentPolicy(Protocol):
    """Interface for UNO-playing policies."""

    @property
    def name(self) -> str:
        """Display name for the policy."""
        ...

    def choose_move(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
    ) -> Action | None:
        """Choose an action given the player view and legal actions.

        Args:
            player_view: Filtered view with only this player's hand and public info.
            legal_actions: List of valid actions to choose from.

        Returns:
            One of the legal actions, or None to draw.
        """
        ...

    def should_declare(self, player_view: PlayerView) -> bool:
        """Whether to declare the last card now that one card is left."""
        ...

    def should_challenge(self, player_view: PlayerView, target_id: str) -> bool:
        """Whether to challenge ``target_id``, who holds one card without declaring it."""
        ...
