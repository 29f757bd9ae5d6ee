"""Settings validation module.

This module provides the SP, IdP and combined settings validators and the
error codes they report.
"""

from saml_settings_util.validation.errors import SettingsErrorCode
from saml_settings_util.validation.rules import (
    check_idp_certs,
    check_required,
    check_sp_certs,
)
from saml_settings_util.validation.settings_validator import (
    validate_idp_settings,
    validate_settings,
    validate_sp_settings,
)

__all__ = [
    "validate_settings",
    "validate_sp_settings",
    "validate_idp_settings",
    "check_required",
    "check_sp_certs",
    "check_idp_certs",
    "SettingsErrorCode",
]
