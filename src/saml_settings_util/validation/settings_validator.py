"""SP and IdP settings validation.

This module checks a ``Saml2Settings`` record for gaps that would make a SAML2
exchange fail later, deep inside message construction or signature handling.
All applicable checks run and every triggered code is collected, in check
order, so callers can show the full list or only the first entry.

Validators never raise for invalid settings and never modify the record.
"""

import logging
from typing import Optional

from saml_settings_util.settings.model import Saml2Settings
from saml_settings_util.validation.errors import SettingsErrorCode
from saml_settings_util.validation.rules import (
    check_idp_certs,
    check_required,
    check_sp_certs,
    contact_has_enough_data,
    contact_type_valid,
    organization_has_enough_data,
    sp_signing_or_encryption_requested,
)

logger = logging.getLogger(__name__)


def _report(errors: list[SettingsErrorCode], code: SettingsErrorCode) -> None:
    errors.append(code)
    logger.error(code.value)


def validate_sp_settings(settings: Saml2Settings) -> list[SettingsErrorCode]:
    """Check the Service Provider part of the settings.

    Checks, in order: entity ID, ACS URL, certificate/key sufficiency when
    signing or encryption is requested and no HSM is configured, contact
    type and data, organization data, HSM and private key exclusivity.

    Args:
        settings: Settings record to check

    Returns:
        Ordered list of error codes, empty when the SP settings are valid

    Example:
        >>> settings = Saml2Settings(sp_assertion_consumer_service_url="https://sp/acs")
        >>> validate_sp_settings(settings)
        [<SettingsErrorCode.SP_ENTITY_ID_NOT_FOUND: 'sp_entityId_not_found'>]
    """
    errors: list[SettingsErrorCode] = []

    if not check_required(settings.sp_entity_id):
        _report(errors, SettingsErrorCode.SP_ENTITY_ID_NOT_FOUND)

    if not check_required(settings.sp_assertion_consumer_service_url):
        _report(errors, SettingsErrorCode.SP_ACS_NOT_FOUND)

    if (
        settings.hsm is None
        and sp_signing_or_encryption_requested(settings)
        and not check_sp_certs(settings)
    ):
        _report(errors, SettingsErrorCode.SP_CERT_NOT_FOUND_AND_REQUIRED)

    for contact in settings.contacts:
        if not contact_type_valid(contact):
            _report(errors, SettingsErrorCode.CONTACT_TYPE_INVALID)
        if not contact_has_enough_data(contact):
            _report(errors, SettingsErrorCode.CONTACT_NOT_ENOUGH_DATA)

    if settings.organization is not None and not organization_has_enough_data(
        settings.organization
    ):
        _report(errors, SettingsErrorCode.ORGANIZATION_NOT_ENOUGH_DATA)

    if settings.hsm is not None and settings.sp_private_key is not None:
        _report(errors, SettingsErrorCode.USE_EITHER_HSM_OR_PRIVATE_KEY)

    return errors


def validate_idp_settings(settings: Saml2Settings) -> list[SettingsErrorCode]:
    """Check the Identity Provider part of the settings.

    Args:
        settings: Settings record to check

    Returns:
        Ordered list of error codes, empty when the IdP settings are valid
    """
    errors: list[SettingsErrorCode] = []

    if not check_required(settings.idp_entity_id):
        _report(errors, SettingsErrorCode.IDP_ENTITY_ID_NOT_FOUND)

    if not check_required(settings.idp_single_sign_on_service_url):
        _report(errors, SettingsErrorCode.IDP_SSO_URL_INVALID)

    idp_certs_present = check_idp_certs(settings)

    if not idp_certs_present and not check_required(settings.idp_cert_fingerprint):
        _report(errors, SettingsErrorCode.IDP_CERT_OR_FINGERPRINT_NOT_FOUND_AND_REQUIRED)

    # Encrypting the NameID sent to the IdP needs the IdP public key
    if not idp_certs_present and settings.name_id_encrypted:
        _report(errors, SettingsErrorCode.IDP_CERT_NOT_FOUND_AND_REQUIRED)

    return errors


def validate_settings(
    settings: Saml2Settings, sp_validation_only: Optional[bool] = None
) -> list[SettingsErrorCode]:
    """Check SP settings and, unless in SP-only mode, IdP settings.

    Args:
        settings: Settings record to check
        sp_validation_only: Skip IdP checks. None uses the record's own
            ``sp_validation_only`` flag.

    Returns:
        SP error codes followed by IdP error codes; empty when valid
    """
    if sp_validation_only is None:
        sp_validation_only = settings.sp_validation_only

    errors = validate_sp_settings(settings)
    if not sp_validation_only:
        errors.extend(validate_idp_settings(settings))

    if errors:
        logger.info(f"Settings validation found {len(errors)} error(s)")
    else:
        logger.debug("Settings validation passed")
    return errors
