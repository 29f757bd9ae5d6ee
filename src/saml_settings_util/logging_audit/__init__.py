"""Logging Audit module.

This module provides logging configuration and audit trail functionality.
"""

from .audit import log_audit_event
from .formatters import SecretRedactingFormatter
from .logger import configure_logging, configure_logging_from_config, get_logger

__all__ = [
    "configure_logging",
    "configure_logging_from_config",
    "get_logger",
    "log_audit_event",
    "SecretRedactingFormatter",
]
