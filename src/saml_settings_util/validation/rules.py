"""Reusable settings rules.

Each rule is a pure function over values or over the settings record. The
SP and IdP validators compose them; no validator checks emptiness on its own.
"""

from typing import Optional, Sequence, Union, overload

from saml_settings_util.settings.constants import VALID_CONTACT_TYPES
from saml_settings_util.settings.model import Contact, Organization, Saml2Settings


@overload
def check_required(value: Optional[str]) -> bool: ...


@overload
def check_required(value: Optional[Sequence[object]]) -> bool: ...


def check_required(value: Union[str, Sequence[object], None]) -> bool:
    """Check that a settings value is present and non-empty.

    Strings (including URLs) and sequences share the same rule: ``None`` and
    zero length mean "not filled in".

    Args:
        value: String, URL string, sequence or None

    Returns:
        True if the value is present and non-empty
    """
    if value is None:
        return False
    return len(value) > 0


def check_sp_certs(settings: Saml2Settings) -> bool:
    """Check that both SP certificate and SP private key are configured."""
    return settings.sp_x509cert is not None and settings.sp_private_key is not None


def check_idp_certs(settings: Saml2Settings) -> bool:
    """Check that an IdP certificate or a non-empty multi-certificate set is configured."""
    if settings.idp_x509cert is not None:
        return True
    return check_required(settings.idp_x509cert_multi)


def sp_signing_or_encryption_requested(settings: Saml2Settings) -> bool:
    """Check whether any setting needs SP certificate and key material."""
    return (
        settings.authn_requests_signed
        or settings.logout_request_signed
        or settings.logout_response_signed
        or settings.want_assertions_encrypted
        or settings.want_name_id_encrypted
    )


def contact_type_valid(contact: Contact) -> bool:
    return contact.contact_type in VALID_CONTACT_TYPES


def contact_has_enough_data(contact: Contact) -> bool:
    """Check that a contact carries at least one identifying value.

    Email and telephone lists count only when at least one entry is non-empty.
    """
    return (
        any(check_required(email) for email in contact.email_addresses)
        or any(check_required(phone) for phone in contact.telephone_numbers)
        or check_required(contact.company)
        or check_required(contact.given_name)
        or check_required(contact.sur_name)
    )


def organization_has_enough_data(organization: Organization) -> bool:
    return (
        check_required(organization.display_name)
        and check_required(organization.name)
        and check_required(organization.url)
    )
