"""Tests for configuration loader."""

import pytest
import yaml
from pathlib import Path
from tempfile import NamedTemporaryFile

from calendar_agent.config.config_loader import ConfigLoader, load_config
from calendar_agent.config.config_schema import AppConfig


def write_config(config_dict):
    with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(config_dict, f)
        return f.name


def test_load_config_valid():
    """Test loading a valid configuration."""
    config_path = write_config(
        {
            "google_calendar": {
                "credentials_path": "credentials.json",
                "token_path": "token.json",
                "calendar_ids": ["primary", "team@example.com"],
            },
            "search": {"window_mode": "padded", "max_results": 25},
        }
    )

    try:
        config = ConfigLoader.load_config(config_path, env={})
        assert isinstance(config, AppConfig)
        assert config.google_calendar.credentials_path == "credentials.json"
        assert config.google_calendar.calendar_ids == ["primary", "team@example.com"]
        assert config.search.window_mode == "padded"
        assert config.search.max_results == 25
        assert config.search.concurrent is True
    finally:
        Path(config_path).unlink()


def test_load_config_missing_file():
    """Test loading a non-existent configuration file."""
    with pytest.raises(FileNotFoundError):
        load_config("nonexistent.yaml")


def test_load_config_empty_file():
    """Test that an empty file is rejected."""
    with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        config_path = f.name

    try:
        with pytest.raises(ValueError, match="empty"):
            load_config(config_path)
    finally:
        Path(config_path).unlink()


def test_load_config_invalid_window_mode():
    """Test that an unknown window mode raises a validation error."""
    config_path = write_config(
        {"google_calendar": {"access_token": "t"}, "search": {"window_mode": "fuzzy"}}
    )

    try:
        with pytest.raises(Exception):
            ConfigLoader.load_config(config_path, env={})
    finally:
        Path(config_path).unlink()


def test_calendar_without_credentials_rejected():
    """Test that a calendar section needs some credential source."""
    with pytest.raises(ValueError, match="access_token"):
        ConfigLoader.from_dict({"google_calendar": {"calendar_ids": ["primary"]}}, env={})


def test_calendar_ids_deduplicated():
    """Test that calendar ids are deduplicated keeping order."""
    config = ConfigLoader.from_dict(
        {
            "google_calendar": {
                "access_token": "t",
                "calendar_ids": ["work", "", "primary", "work"],
            }
        },
        env={},
    )

    assert config.google_calendar.calendar_ids == ["work", "primary"]


def test_calendar_ids_default_to_primary():
    config = ConfigLoader.from_dict({"google_calendar": {"access_token": "t"}}, env={})

    assert config.google_calendar.calendar_ids == ["primary"]
    assert config.google_calendar.create_calendar_id == "primary"


def test_env_access_token_override():
    """Test that the environment supplies a bearer token."""
    config = ConfigLoader.from_dict(
        {"search": {"max_results": 10}},
        env={"GOOGLE_CALENDAR_ACCESS_TOKEN": "env-token"},
    )

    assert config.google_calendar.access_token == "env-token"
    assert config.google_calendar.has_credentials()


def test_env_timezone_override():
    config = ConfigLoader.from_dict(
        {"agent": {"preferences": {"timezone": "UTC"}}},
        env={"CALENDAR_AGENT_TIMEZONE": "Asia/Tokyo"},
    )

    assert config.agent.preferences.timezone == "Asia/Tokyo"


def test_load_config_without_optional_sections():
    """Test that omitted sections fall back to defaults."""
    config = ConfigLoader.from_dict({"logging": {"verbosity": 1}}, env={})

    assert config.google_calendar is None
    assert config.agent.preferences.timezone == "UTC"
    assert config.search.window_mode == "precise"
    assert config.search.max_results == 50
    assert config.logging.verbosity == 1


def test_invalid_timezone():
    """Test that invalid timezone raises validation error."""
    with pytest.raises(ValueError, match="Invalid timezone"):
        AppConfig(agent={"preferences": {"timezone": "Invalid/Timezone"}})


@pytest.mark.parametrize("max_results", [0, 2501])
def test_max_results_bounds(max_results):
    with pytest.raises(ValueError):
        AppConfig(search={"max_results": max_results})
