"""Engine configuration read from the environment (and a .env file via the CLI)."""

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class EngineConfig:
    """Match settings and automated-player knobs."""

    target_score: int = 500
    call_probability: float = 0.8  # chance a bot remembers to declare its last card
    challenge_probability: float = 0.7  # chance a bot challenges a missed declaration
    max_turns: int = 5000  # per match, guards runaway simulations
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.target_score <= 0:
            raise ValueError("target_score must be positive")
        for name in ("call_probability", "challenge_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            target_score=_read(env, "UNO_TARGET_SCORE", int, defaults.target_score),
            call_probability=_read(env, "UNO_CALL_PROBABILITY", float, defaults.call_probability),
            challenge_probability=_read(
                env, "UNO_CHALLENGE_PROBABILITY", float, defaults.challenge_probability
            ),
            max_turns=_read(env, "UNO_MAX_TURNS", int, defaults.max_turns),
            seed=_read(env, "UNO_SEED", int, defaults.seed),
        )


def _read(env: Mapping[str, str], name: str, parse: Callable[[str], T], default: T) -> T:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from None
