"""Configuration Service.

Loads the deployment configuration from a YAML file and the environment.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..deployment.errors import ConfigurationError
from ..shared.schemas import DeployConfig

logger = logging.getLogger(__name__)

# Environment variable holding the service account credentials path
CREDENTIALS_ENV = "GEMSERVER_CREDS"

# Environment variable pointing at the configuration file
CONFIG_ENV = "GEMSERVER_CONFIG"

DEFAULT_CONFIG_FILE = "gemdeploy.yml"


class ConfigurationService:
    """Build the immutable DeployConfig used for a run."""

    def __init__(self, environ: dict[str, str] | None = None):
        """
        Initialize the Configuration Service.

        Args:
            environ: Environment mapping (default: os.environ)
        """
        self.environ = os.environ if environ is None else environ

    def config_path(self, path: str | Path | None = None) -> Path:
        """Resolve the configuration file from the argument, GEMSERVER_CONFIG or the default."""
        if path:
            return Path(path)
        return Path(self.environ.get(CONFIG_ENV, DEFAULT_CONFIG_FILE))

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration {path}: {e}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping in {path}")
        return data

    def _sql_instances_from_app(self, server_path: Path) -> str:
        """Read beta_settings.cloud_sql_instances from the server's app.yaml."""
        app_file = server_path / "app.yaml"
        if not app_file.is_file():
            return ""
        app = self._read_yaml(app_file)
        return (app.get("beta_settings") or {}).get("cloud_sql_instances", "") or ""

    def load(self, path: str | Path | None = None) -> DeployConfig:
        """
        Load the deployment configuration.

        Relative server paths are resolved against the configuration file's
        directory.

        Args:
            path: Configuration file (default: GEMSERVER_CONFIG or gemdeploy.yml)

        Returns:
            The validated configuration

        Raises:
            ConfigurationError: If the file is unreadable or invalid
        """
        path = self.config_path(path)
        data = self._read_yaml(path)

        server_path = Path(data.get("server_path") or ".")
        if not server_path.is_absolute():
            server_path = path.parent / server_path
        data["server_path"] = server_path

        if not data.get("credentials_path") and self.environ.get(CREDENTIALS_ENV):
            data["credentials_path"] = self.environ[CREDENTIALS_ENV]

        if not data.get("sql_instances"):
            data["sql_instances"] = self._sql_instances_from_app(server_path)

        try:
            config = DeployConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}")

        logger.info(f"Loaded configuration from {path} "
                    f"(project={config.project_id}, platform={config.platform.value})")
        return config
