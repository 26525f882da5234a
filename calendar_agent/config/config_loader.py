"""Configuration loader for YAML files."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .config_schema import AppConfig

# Session layers hand the bearer token over through the environment
ACCESS_TOKEN_ENV = "GOOGLE_CALENDAR_ACCESS_TOKEN"
TIMEZONE_ENV = "CALENDAR_AGENT_TIMEZONE"


class ConfigLoader:
    """Load and validate configuration from YAML files."""

    @staticmethod
    def load_config(path: str = "config.yaml", env: Optional[Dict[str, str]] = None) -> AppConfig:
        """
        Load configuration from YAML file.

        Environment overrides are applied on top of the file: an access token
        in GOOGLE_CALENDAR_ACCESS_TOKEN and a timezone in
        CALENDAR_AGENT_TIMEZONE.

        Args:
            path: Path to configuration file
            env: Environment mapping (default: os.environ)

        Returns:
            Validated AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)

        if not config_dict:
            raise ValueError("Configuration file is empty")

        return ConfigLoader.from_dict(config_dict, env)

    @staticmethod
    def from_dict(config_dict: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> AppConfig:
        """
        Build and validate configuration from a dictionary.

        Args:
            config_dict: Parsed configuration
            env: Environment mapping (default: os.environ)

        Returns:
            Validated AppConfig instance
        """
        env = os.environ if env is None else env
        config_dict = dict(config_dict)

        token = env.get(ACCESS_TOKEN_ENV)
        if token:
            calendar = dict(config_dict.get("google_calendar") or {})
            calendar["access_token"] = token
            config_dict["google_calendar"] = calendar

        timezone = env.get(TIMEZONE_ENV)
        if timezone:
            agent = dict(config_dict.get("agent") or {})
            preferences = dict(agent.get("preferences") or {})
            preferences["timezone"] = timezone
            agent["preferences"] = preferences
            config_dict["agent"] = agent

        config = AppConfig(**config_dict)
        config.validate()
        return config


def load_config(path: str = "config.yaml") -> AppConfig:
    """
    Convenience function to load configuration.

    Args:
        path: Path to configuration file

    Returns:
        Validated AppConfig instance
    """
    return ConfigLoader.load_config(path)
