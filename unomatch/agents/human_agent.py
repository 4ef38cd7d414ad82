"""Human agent - reads actions from terminal."""

from unomatch.engine import Action, PlayerView
from unomatch.engine.rules import DrawCard


def _ask_yes_no(prompt: str) -> bool:
    try:
        return input(f"{prompt} [y/N]: ").strip().lower() in ("y", "yes")
    except EOFError:
        return False


class HumanAgent:
    """Agent that prompts the human for input via terminal."""

    def __init__(self, name: str = "human"):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def choose_move(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
    ) -> Action | None:
        if not legal_actions:
            return None

        print("\n--- Your turn ---")
        print("Your hand:", " ".join(f"[{i}]{c}" for i, c in enumerate(player_view.my_hand)))
        print("Top discard:", player_view.top_discard)
        print("Color to match:", player_view.active_color.value if player_view.active_color else "any")
        if player_view.pending_draw_count:
            print(f"Pending draw: {player_view.pending_draw_count} cards")
        print("\nLegal actions:")
        for i, a in enumerate(legal_actions):
            if isinstance(a, DrawCard):
                print(f"  {i}: DRAW")
            else:
                card = player_view.my_hand[a.card_index]
                extra = f" (choose color: {a.chosen_color.value})" if a.chosen_color else ""
                print(f"  {i}: PLAY {card}{extra}")

        while True:
            try:
                raw = input("Enter number: ").strip()
                idx = int(raw)
                if 0 <= idx < len(legal_actions):
                    return legal_actions[idx]
            except ValueError:
                pass
            except EOFError:
                return None
            print("Invalid. Try again.")

    def should_declare(self, player_view: PlayerView) -> bool:
        return _ask_yes_no("One card left! Declare it?")

    def should_challenge(self, player_view: PlayerView, target_id: str) -> bool:
        return _ask_yes_no(f"Player {target_id} has one card. Challenge a missed declaration?")
