"""Match orchestration."""

from unomatch.orchestration.game_runner import MatchResult, MatchRunner
from unomatch.orchestration.tournament import run_tournament

__all__ = ["MatchResult", "MatchRunner", "run_tournament"]
