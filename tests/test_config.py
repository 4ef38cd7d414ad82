"""Unit tests for configuration."""

import pytest
from unomatch.config import EngineConfig


def test_defaults() -> None:
    config = EngineConfig.from_env({})
    assert config.target_score == 500
    assert config.call_probability == 0.8
    assert config.challenge_probability == 0.7
    assert config.seed is None


def test_from_env() -> None:
    config = EngineConfig.from_env(
        {
            "UNO_TARGET_SCORE": "250",
            "UNO_CALL_PROBABILITY": "1",
            "UNO_CHALLENGE_PROBABILITY": "0.25",
            "UNO_SEED": "17",
            "UNO_MAX_TURNS": " ",
        }
    )
    assert config.target_score == 250
    assert config.call_probability == 1.0
    assert config.challenge_probability == 0.25
    assert config.seed == 17
    assert config.max_turns == 5000


def test_malformed_value_names_variable() -> None:
    with pytest.raises(ValueError, match="UNO_TARGET_SCORE"):
        EngineConfig.from_env({"UNO_TARGET_SCORE": "lots"})


def test_probabilities_checked() -> None:
    with pytest.raises(ValueError):
        EngineConfig(call_probability=1.5)
    with pytest.raises(ValueError):
        EngineConfig(target_score=0)
