"""Audit trail functionality for the SAML Settings Utility.

This module provides structured audit logging for validation runs and
metadata generation.
"""

import time
import uuid
from typing import Any, Dict

from .logger import get_logger

logger = get_logger(__name__)


def log_audit_event(event_type: str, details: Dict[str, Any]) -> None:
    """Log an audit trail event.
    
    Creates a structured audit log entry with standard fields. Audit events
    are logged at INFO level for successful operations and ERROR level for
    failures.
    
    Args:
        event_type: Type of operation (e.g., "SETTINGS_VALIDATED",
                   "METADATA_VALIDATED", "METADATA_GENERATED")
        details: Dictionary with event details. Common fields include:
                - input_file: Path to input file (if applicable)
                - status: "success" or "failure"
                - error_count: Number of reported error codes
                - errors: Reported error codes
                - duration: Operation duration in seconds
                - correlation_id: Optional correlation ID for tracking related events
                
    Example:
        >>> log_audit_event("SETTINGS_VALIDATED", {
        ...     "input_file": "settings.json",
        ...     "status": "failure",
        ...     "error_count": 1,
        ...     "errors": ["sp_acs_not_found"],
        ... })
    """
    details = dict(details)
    details.setdefault("timestamp", time.time())
    details.setdefault("correlation_id", str(uuid.uuid4()))
    
    message_parts = [f"AUDIT [{event_type}]"]
    
    field_order = [
        "status",
        "input_file",
        "error_count",
        "errors",
        "duration",
        "correlation_id",
    ]
    
    for field in field_order:
        if field in details:
            value = details[field]
            if field == "duration" and isinstance(value, (int, float)):
                message_parts.append(f"{field}={value:.2f}s")
            elif field == "errors":
                message_parts.append(f"{field}={','.join(str(v) for v in value)}")
            else:
                message_parts.append(f"{field}={value}")
    
    for key, value in details.items():
        if key not in field_order and key != "timestamp":
            message_parts.append(f"{key}={value}")
    
    audit_message = " | ".join(message_parts)
    
    if details.get("status") == "failure":
        logger.error(audit_message)
    else:
        logger.info(audit_message)
