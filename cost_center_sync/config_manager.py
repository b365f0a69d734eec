"""
Configuration Manager for loading and managing sync settings.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from dotenv import load_dotenv

from cost_center_sync.config_models import SourceSpecifier
from cost_center_sync.errors import ConfigurationError, MissingInputError
from cost_center_sync.github_api import DEFAULT_API_URL


class ConfigManager:
    """
    Manages sync configuration from CLI overrides, environment variables and a YAML file.

    Precedence is overrides > environment > YAML > defaults. Everything is
    read once here; nothing else in the package consults the environment.
    """

    def __init__(self, config_path: str = "config/config.yaml",
                 overrides: Optional[Dict[str, Any]] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the YAML config file
            overrides: Values from the command line, keyed by attribute name
            environ: Environment mapping, defaults to os.environ
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path)
        self.overrides = {k: v for k, v in (overrides or {}).items() if v not in (None, "", [])}

        if environ is None:
            # Load environment variables
            load_dotenv()
            environ = os.environ
        self.environ = environ

        self._load_config()

    def _env(self, name: str) -> Optional[str]:
        value = self.environ.get(name)
        if value is None or not value.strip():
            return None
        return value.strip()

    def _env_list(self, name: str) -> List[str]:
        value = self._env(name)
        if not value:
            return []
        return [item.strip() for item in value.split(",") if item.strip()]

    def _load_config(self):
        """Load configuration from the YAML file and the environment."""
        if self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        else:
            self.logger.warning(f"Config file {self.config_path} not found, using defaults")
            config_data = {}

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")

        # GitHub configuration
        github_config = config_data.get("github") or {}
        self.github_token = (
            self.overrides.get("github_token") or
            self._env("GITHUB_TOKEN") or
            github_config.get("token")
        )
        self.github_enterprise = (
            self.overrides.get("github_enterprise") or
            self._env("GITHUB_ENTERPRISE") or
            github_config.get("enterprise")
        )
        self.github_api_url = (
            self.overrides.get("github_api_url") or
            self._env("GITHUB_API_URL") or
            github_config.get("api_url") or
            DEFAULT_API_URL
        )
        timeout = github_config.get("timeout") or 30
        try:
            self.request_timeout = float(timeout)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"github.timeout must be a number of seconds, got {timeout!r}") from e

        # Cost center configuration
        cost_center_config = config_data.get("cost_center") or {}
        self.cost_center_name = (
            self.overrides.get("cost_center_name") or
            self._env("COST_CENTER_NAME") or
            cost_center_config.get("name")
        )
        self.cost_center_api_url = (
            self.overrides.get("cost_center_api_url") or
            self._env("COST_CENTER_API_URL") or
            cost_center_config.get("api_url") or
            self.github_api_url
        )
        self.cost_center_token = (
            self._env("COST_CENTER_TOKEN") or
            cost_center_config.get("token") or
            self.github_token
        )

        # Source configuration
        sources_config = config_data.get("sources") or {}
        layers = [
            ("command line", self.overrides.get("team"),
             self.overrides.get("organizations"), self.overrides.get("source_specifiers")),
            ("environment", self._env("GITHUB_TEAM"),
             self._env_list("SOURCE_ORGANIZATIONS"), self._env_list("SOURCE_SPECIFIERS")),
            (str(self.config_path), sources_config.get("team"),
             _as_list(sources_config.get("organizations") or sources_config.get("organization")),
             _as_list(sources_config.get("specifiers"))),
        ]
        self.team = None
        self.sources = []
        # The highest layer that selects sources at all decides them as a whole
        for layer_name, team, organizations, specifiers in layers:
            if team in (None, "") and not organizations and not specifiers:
                continue
            self._select_sources(layer_name, team, organizations or [], specifiers or [])
            break

        # Logging configuration
        logging_config = config_data.get("logging") or {}
        debug_env = (self._env("DEBUG") or "").lower() == "true"
        self.log_level = "DEBUG" if debug_env else logging_config.get("level", "INFO")
        self.log_file = logging_config.get("file", "logs/cost_center_sync.log")
        self.log_config_file = logging_config.get("config_file")

    def _select_sources(self, layer_name: str, team, organizations: List, specifiers: List):
        """Set team and sources from one configuration layer."""
        if specifiers and team not in (None, ""):
            raise ConfigurationError(
                f"A team name cannot be combined with source specifiers ({layer_name}); "
                "put the team into each specifier as 'org/team'"
            )
        if specifiers and organizations:
            raise ConfigurationError(
                f"Configure either source organizations or source specifiers, not both ({layer_name})"
            )

        if specifiers:
            self.sources = [SourceSpecifier.parse(value) for value in specifiers]
            return

        self.team = str(team) if team not in (None, "") else None
        self.sources = [SourceSpecifier(str(org), self.team) for org in organizations]

    def validate(self) -> None:
        """
        Check that every required setting is present.

        Raises:
            MissingInputError: Naming the first missing setting
        """
        if not self.github_token:
            raise MissingInputError("github token", "set GITHUB_TOKEN or github.token")
        if not self.github_enterprise:
            raise MissingInputError("github enterprise", "set GITHUB_ENTERPRISE or github.enterprise")
        if not self.cost_center_name:
            raise MissingInputError("cost center name", "set COST_CENTER_NAME or cost_center.name")

    def get_config_summary(self) -> Dict[str, Any]:
        """Get a summary of current configuration."""
        cost_center_url = None
        if self.github_enterprise:
            cost_center_url = f"https://github.com/enterprises/{self.github_enterprise}/billing/cost_centers"

        return {
            "github_enterprise": self.github_enterprise,
            "github_token_set": bool(self.github_token),
            "github_api_url": self.github_api_url,
            "cost_center_name": self.cost_center_name,
            "cost_center_api_url": self.cost_center_api_url,
            "cost_center_token_set": bool(self.cost_center_token),
            "cost_centers_url": cost_center_url,
            "sources": [source.label for source in self.sources] or "linked organizations",
            "team": self.team,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }


def _as_list(value) -> List:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]
