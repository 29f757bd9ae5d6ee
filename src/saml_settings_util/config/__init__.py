"""Config module.

This module provides configuration management functionality.
"""

from saml_settings_util.config.manager import (
    get_logging_config,
    get_schema_config,
    load_config,
)
from saml_settings_util.config.schema import (
    Config,
    LoggingConfig,
    MetadataConfig,
    SchemaConfig,
    ValidationConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_logging_config",
    "get_schema_config",
    # Configuration models
    "Config",
    "LoggingConfig",
    "SchemaConfig",
    "ValidationConfig",
    "MetadataConfig",
]
