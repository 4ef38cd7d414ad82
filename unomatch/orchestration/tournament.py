"""Tournament - run many seeded matches and aggregate wins."""

import random
from collections import defaultdict
from typing import Callable, Optional

from unomatch.agents.first_fit import FirstFitPolicy
from unomatch.config import EngineConfig
from unomatch.engine import MatchEngine
from unomatch.orchestration.game_runner import MatchRunner

PolicyFactory = Callable[[int, random.Random], object]


def _first_fit_factory(config: EngineConfig) -> PolicyFactory:
    def make(seat: int, rng: random.Random) -> FirstFitPolicy:
        return FirstFitPolicy(
            call_probability=config.call_probability,
            challenge_probability=config.challenge_probability,
            rng=rng,
            name=f"first-fit-{seat}",
        )

    return make


def run_tournament(
    num_matches: int = 10,
    automated_player_count: int = 3,
    seed: Optional[int] = None,
    config: Optional[EngineConfig] = None,
    policy_factory: Optional[PolicyFactory] = None,
) -> dict[str, int]:
    """Play ``num_matches`` full matches with every seat automated.

    Returns:
        Dict mapping player id to number of matches won.
    """
    config = config or EngineConfig()
    make_policy = policy_factory or _first_fit_factory(config)
    wins: dict[str, int] = defaultdict(int)

    rng = random.Random(seed)
    for _ in range(num_matches):
        match_rng = random.Random(rng.randint(0, 2**31 - 1))
        policies = [make_policy(seat, match_rng) for seat in range(automated_player_count + 1)]
        runner = MatchRunner(policies, engine=MatchEngine(config=config, rng=match_rng))
        result = runner.run()
        if result.winner:
            wins[result.winner] += 1

    return dict(wins)
