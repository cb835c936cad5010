"""Tests for engine configuration."""

import pytest

from engine.config import EngineConfig


def test_defaults_are_valid():
    config = EngineConfig()
    assert config.player_count == 3
    assert config.seed is None
    assert config.validate() == []


@pytest.mark.parametrize("player_count", [2, 6])
def test_invalid_player_count(player_count):
    errors = EngineConfig(player_count=player_count).validate()
    assert errors == [f"Invalid player count: {player_count} (must be 3-5)"]


def test_starting_credibility_within_cap():
    """Players cannot start above the credibility cap."""
    errors = EngineConfig(starting_credibility=4, max_credibility=3).validate()
    assert errors == ["starting_credibility must be between 0 and 3, got 4"]


def test_negative_cap():
    errors = EngineConfig(starting_credibility=0, max_credibility=-1).validate()
    assert "max_credibility must be >= 0, got -1" in errors


def test_frozen():
    config = EngineConfig()
    with pytest.raises(AttributeError):
        config.player_count = 4
