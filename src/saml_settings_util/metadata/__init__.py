"""SAML metadata module.

This module provides functionality for:
- Validating standalone SP metadata documents (schema, structure, expiry)
- Generating SP metadata from a settings record
- Signing SP metadata with the SP key (using SignXML)
"""

from saml_settings_util.metadata.builder import SPMetadataBuilder
from saml_settings_util.metadata.schema import (
    LxmlSchemaChecker,
    SchemaChecker,
    default_schema_checker,
)
from saml_settings_util.metadata.signing import (
    MetadataSigningStatus,
    SPMetadataResult,
    get_sp_metadata,
    sign_metadata,
)
from saml_settings_util.metadata.timeutil import (
    current_timestamp,
    get_expire_time,
    parse_datetime,
    parse_duration,
)
from saml_settings_util.metadata.validator import (
    MetadataErrorCode,
    parse_metadata,
    validate_metadata,
)

__all__ = [
    # Document validation
    "validate_metadata",
    "parse_metadata",
    "MetadataErrorCode",
    # Schema checking
    "SchemaChecker",
    "LxmlSchemaChecker",
    "default_schema_checker",
    # Expiry computation
    "get_expire_time",
    "current_timestamp",
    "parse_duration",
    "parse_datetime",
    # Generation and signing
    "SPMetadataBuilder",
    "get_sp_metadata",
    "sign_metadata",
    "SPMetadataResult",
    "MetadataSigningStatus",
]
