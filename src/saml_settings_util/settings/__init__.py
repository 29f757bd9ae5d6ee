"""Settings module.

This module provides the immutable SAML settings record and its construction
from settings documents.
"""

from saml_settings_util.settings.builder import SettingsBuilder
from saml_settings_util.settings.document import SettingsDocument
from saml_settings_util.settings.model import HSM, Contact, Organization, Saml2Settings

__all__ = [
    "Saml2Settings",
    "Contact",
    "Organization",
    "HSM",
    "SettingsBuilder",
    "SettingsDocument",
]
