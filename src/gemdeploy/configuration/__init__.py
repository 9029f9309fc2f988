"""Configuration Service module for loading deployment settings."""

from .service import CONFIG_ENV, CREDENTIALS_ENV, ConfigurationService

__all__ = ["ConfigurationService", "CONFIG_ENV", "CREDENTIALS_ENV"]
