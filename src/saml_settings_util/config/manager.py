"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading and management functionality,
including support for JSON configuration files, environment variable overrides,
and configuration validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from saml_settings_util.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from saml_settings_util.config.schema import Config, LoggingConfig, SchemaConfig
from saml_settings_util.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "SAML_SETTINGS_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (SAML_SETTINGS_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> schema_dir = config.schemas.schema_dir
    """
    # Load .env file if present in project root
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)
    config_dict = _apply_env_overrides(config_dict)
    _check_sensitive_values(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If JSON is malformed or the file cannot be read
    """
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
            logger.info(f"Loaded configuration from {config_path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check file permissions and path"
            ) from e
        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a JSON object at top level."
            )
        return config_dict

    logger.debug(f"Config file not found: {config_path}. Using default configuration.")
    # Deep copy of defaults to avoid mutation
    return json.loads(json.dumps(DEFAULT_CONFIG))


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with SAML_SETTINGS_ prefix.

    Environment variables follow the pattern: SAML_SETTINGS_<FIELD>
    For example: SAML_SETTINGS_SCHEMA_DIR, SAML_SETTINGS_LOG_LEVEL

    Args:
        config_dict: Configuration dictionary to update

    Returns:
        Updated configuration dictionary with environment overrides applied
    """
    # Logging section
    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config_dict.setdefault("logging", {})["level"] = log_level
        logger.debug("Override: log_level from environment")

    if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config_dict.setdefault("logging", {})["log_file"] = log_file
        logger.debug("Override: log_file from environment")

    if redact_secrets := os.getenv(f"{ENV_PREFIX}REDACT_SECRETS"):
        config_dict.setdefault("logging", {})["redact_secrets"] = _parse_bool(
            redact_secrets
        )
        logger.debug("Override: redact_secrets from environment")

    # Schemas section
    if schema_dir := os.getenv(f"{ENV_PREFIX}SCHEMA_DIR"):
        config_dict.setdefault("schemas", {})["schema_dir"] = schema_dir
        logger.debug("Override: schema_dir from environment")

    # Validation section
    if sp_validation_only := os.getenv(f"{ENV_PREFIX}SP_VALIDATION_ONLY"):
        config_dict.setdefault("validation", {})["sp_validation_only"] = _parse_bool(
            sp_validation_only
        )
        logger.debug("Override: sp_validation_only from environment")

    # Metadata section
    if valid_until_days := os.getenv(f"{ENV_PREFIX}METADATA_VALID_UNTIL_DAYS"):
        config_dict.setdefault("metadata", {})["valid_until_days"] = valid_until_days
        logger.debug("Override: valid_until_days from environment")

    if cache_duration := os.getenv(f"{ENV_PREFIX}METADATA_CACHE_DURATION"):
        config_dict.setdefault("metadata", {})["cache_duration_seconds"] = cache_duration
        logger.debug("Override: cache_duration_seconds from environment")

    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string.

    Args:
        value: String value to parse (case-insensitive)

    Returns:
        Boolean value
    """
    return value.lower() in ("true", "1", "yes", "on")


def _check_sensitive_values(config_dict: dict[str, Any]) -> None:
    """Warn when key material is found in the tool configuration.

    Private keys belong to the SAML settings document or a secret store, never
    to the tool configuration file.

    Args:
        config_dict: Configuration dictionary to check
    """
    serialized = json.dumps(config_dict)
    if "PRIVATE KEY" in serialized or "privateKey" in serialized:
        logger.warning(
            "WARNING: Private key material found in configuration file! "
            "Keep SP keys in the SAML settings document or a secret store."
        )


def get_logging_config(config: Config) -> LoggingConfig:
    """Get logging configuration.

    Args:
        config: Configuration instance

    Returns:
        LoggingConfig instance
    """
    return config.logging


def get_schema_config(config: Config) -> SchemaConfig:
    """Get XML schema configuration.

    Args:
        config: Configuration instance

    Returns:
        SchemaConfig instance
    """
    return config.schemas
