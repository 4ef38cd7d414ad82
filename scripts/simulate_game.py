"""Simulate a match between first-fit bots and print the events."""

import random

from unomatch.agents import FirstFitPolicy
from unomatch.engine import EngineEvent, MatchEngine
from unomatch.orchestration import MatchRunner


def print_event(event: EngineEvent) -> None:
    if event.kind in ("play", "draw", "challenge"):
        print(f"> {event.state.history[-1]}")
    elif event.kind == "hand_ended":
        print(f"Hand won by {event.state.winner_id}")


def main():
    rng = random.Random(42)
    policies = [FirstFitPolicy(rng=rng, name=f"Bot{i}") for i in range(4)]

    engine = MatchEngine(rng=rng)
    engine.subscribe(print_event)
    result = MatchRunner(policies, engine=engine).run(target_score=200)

    print(f"Match finished! Winner: {result.winner}")
    print(f"Hands: {result.hands_played}, turns: {result.num_turns}")
    print(f"Totals: {result.total_scores}")

if __name__ == "__main__":
    main()
