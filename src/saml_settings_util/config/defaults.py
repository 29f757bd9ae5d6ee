"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# SP metadata lifetime written by the metadata builder
DEFAULT_VALID_UNTIL_DAYS = 2
DEFAULT_CACHE_DURATION_SECONDS = 604800  # 1 week

# Default configuration dictionary
# This is used as a fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "log_file": "logs/saml-settings-util.log",
        # Key material never reaches log files unless the user opts out
        "redact_secrets": True,
    },
    "schemas": {
        # No bundled schemas - the SAML XSD directory must be provided by user
        "schema_dir": None,
        "metadata_schema": "saml-schema-metadata-2.0.xsd",
    },
    "validation": {
        "sp_validation_only": False,
    },
    "metadata": {
        "valid_until_days": DEFAULT_VALID_UNTIL_DAYS,
        "cache_duration_seconds": DEFAULT_CACHE_DURATION_SECONDS,
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"
