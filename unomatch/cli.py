"""CLI entry point."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Optional

import typer
from dotenv import load_dotenv

from unomatch.config import EngineConfig
from unomatch.engine import EngineEvent

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(help="UNO match engine: play against bots or simulate matches")


def _setup_logging(level: Optional[str]) -> None:
    level = (level or os.environ.get("UNO_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(target_score: Optional[int], seed: Optional[int]) -> EngineConfig:
    try:
        config = EngineConfig.from_env()
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    if target_score is not None:
        config = replace(config, target_score=target_score)
    if seed is not None:
        config = replace(config, seed=seed)
    return config


@app.command()
def play(
    bots: int = typer.Option(3, "--bots", "-b", help="Number of automated opponents (1-9)"),
    target_score: Optional[int] = typer.Option(None, "--target-score", "-t", help="Points needed to win the match"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level"),
) -> None:
    """Play a match in the terminal against first-fit bots."""
    import random

    from unomatch.agents import FirstFitPolicy, HumanAgent
    from unomatch.engine import MatchEngine
    from unomatch.orchestration import MatchRunner

    _setup_logging(log_level)
    config = _load_config(target_score, seed)
    rng = random.Random(config.seed)
    policies = [HumanAgent(name="You")] + [
        FirstFitPolicy(config.call_probability, config.challenge_probability, rng=rng, name=f"Bot {i + 1}")
        for i in range(bots)
    ]
    engine = MatchEngine(config=config, rng=rng)
    engine.subscribe(_echo_event)
    result = MatchRunner(policies, engine=engine).run()
    typer.echo(f"Winner: {result.winner or 'None (unfinished)'}")
    typer.echo(f"Hands: {result.hands_played}, turns: {result.num_turns}")
    for pid, total in sorted(result.total_scores.items(), key=lambda x: -x[1]):
        typer.echo(f"  {pid}: {total} points")


def _echo_event(event: EngineEvent) -> None:
    if event.kind in ("play", "draw", "challenge") and event.state.history:
        typer.echo(f"> {event.state.history[-1]}")
    elif event.kind == "hand_ended":
        typer.echo(f"*** Hand won by {event.state.winner_id} ***")


@app.command()
def simulate(
    bots: int = typer.Option(3, "--bots", "-b", help="Automated opponents besides seat 0"),
    matches: int = typer.Option(10, "--matches", "-n", help="Number of matches"),
    policy: str = typer.Option("first-fit", "--policy", "-p", help="Seat 0 policy: first-fit or llm"),
    llm_provider: str = typer.Option("openrouter", "--llm-provider", help="LLM provider: openrouter, groq, huggingface or ollama"),
    llm_model: str = typer.Option("openai/gpt-4o-mini", "--llm-model", help="Model name"),
    target_score: Optional[int] = typer.Option(None, "--target-score", "-t", help="Points needed to win a match"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level"),
) -> None:
    """Run matches with every seat automated and report match wins."""
    from unomatch.agents import FirstFitPolicy, LLMAgent
    from unomatch.orchestration import run_tournament

    _setup_logging(log_level)
    config = _load_config(target_score, seed)

    if policy == "first-fit":
        factory = None
    elif policy == "llm":
        llm = LLMAgent(provider=llm_provider, model=llm_model)

        def factory(seat, rng):
            if seat == 0:
                return llm
            return FirstFitPolicy(config.call_probability, config.challenge_probability, rng=rng)
    else:
        raise typer.BadParameter(f"Unknown policy: {policy}. Use 'first-fit' or 'llm'.")

    wins = run_tournament(
        num_matches=matches,
        automated_player_count=bots,
        seed=config.seed,
        config=config,
        policy_factory=factory,
    )
    typer.echo("Simulation results:")
    for pid, w in sorted(wins.items(), key=lambda x: -x[1]):
        typer.echo(f"  {pid}: {w} wins")


if __name__ == "__main__":
    app()
