"""Error codes reported by the settings validators.

Codes are stable strings suitable for i18n lookup or logging. Members are
``str`` subclasses, so ``SettingsErrorCode.SP_ACS_NOT_FOUND == "sp_acs_not_found"``.
"""

from enum import Enum


class SettingsErrorCode(str, Enum):
    """Settings validation error codes."""

    SP_ENTITY_ID_NOT_FOUND = "sp_entityId_not_found"
    SP_ACS_NOT_FOUND = "sp_acs_not_found"
    SP_CERT_NOT_FOUND_AND_REQUIRED = "sp_cert_not_found_and_required"
    CONTACT_TYPE_INVALID = "contact_type_invalid"
    CONTACT_NOT_ENOUGH_DATA = "contact_not_enough_data"
    ORGANIZATION_NOT_ENOUGH_DATA = "organization_not_enough_data"
    USE_EITHER_HSM_OR_PRIVATE_KEY = "use_either_hsm_or_private_key"
    IDP_ENTITY_ID_NOT_FOUND = "idp_entityId_not_found"
    IDP_SSO_URL_INVALID = "idp_sso_url_invalid"
    IDP_CERT_OR_FINGERPRINT_NOT_FOUND_AND_REQUIRED = (
        "idp_cert_or_fingerprint_not_found_and_required"
    )
    IDP_CERT_NOT_FOUND_AND_REQUIRED = "idp_cert_not_found_and_required"

    def __str__(self) -> str:
        return self.value

    @property
    def is_idp(self) -> bool:
        """True for codes produced by the IdP validator."""
        return self.value.startswith("idp_")
