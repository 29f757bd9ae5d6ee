"""Data models for SAML Service Provider / Identity Provider settings.

This module defines the immutable settings record consumed by the validators
and by SP metadata generation. The record holds facts only; all decisions
about whether the facts are consistent live in ``saml_settings_util.validation``.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional, Protocol, Tuple, runtime_checkable

from cryptography import x509

from saml_settings_util.settings import constants


@runtime_checkable
class HSM(Protocol):
    """External signing capability used instead of an in-process private key.

    Any object exposing ``sign`` satisfies the protocol; settings validation
    only checks whether an HSM is configured.
    """

    def sign(self, data: bytes, algorithm: str) -> bytes:
        """Sign ``data`` with the HSM-held key using the algorithm URI."""
        ...


@dataclass(frozen=True)
class Contact:
    """Contact person published in SP metadata.

    Attributes:
        contact_type: One of technical, support, administrative, billing, other
        email_addresses: Email addresses (``mailto:`` prefix optional)
        telephone_numbers: Telephone numbers
        company: Company name
        given_name: Given name
        sur_name: Surname
    """

    contact_type: str
    email_addresses: Tuple[str, ...] = ()
    telephone_numbers: Tuple[str, ...] = ()
    company: str = ""
    given_name: str = ""
    sur_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "email_addresses", tuple(self.email_addresses))
        object.__setattr__(self, "telephone_numbers", tuple(self.telephone_numbers))


@dataclass(frozen=True)
class Organization:
    """Organization published in SP metadata.

    Attributes:
        name: OrganizationName
        display_name: OrganizationDisplayName
        url: OrganizationURL
        lang: xml:lang used for all three elements
    """

    name: str = ""
    display_name: str = ""
    url: str = ""
    lang: str = "en"


# Fields converted from lists to tuples at construction time
_SEQUENCE_FIELDS = ("idp_x509cert_multi", "requested_authn_context", "contacts")


@dataclass(frozen=True)
class Saml2Settings:
    """Immutable SAML2 SP/IdP settings record.

    Built once by the caller (directly or via ``SettingsBuilder``) and shared
    read-only between validators. Certificates are ``cryptography`` X.509
    objects, the private key any ``cryptography`` private key and the HSM any
    object satisfying :class:`HSM`.

    Example:
        >>> settings = Saml2Settings(
        ...     sp_entity_id="https://sp.example.com/metadata",
        ...     sp_assertion_consumer_service_url="https://sp.example.com/acs",
        ...     idp_entity_id="https://idp.example.com",
        ...     idp_single_sign_on_service_url="https://idp.example.com/sso",
        ...     idp_cert_fingerprint="AA:BB:CC",
        ... )
        >>> settings.sp_assertion_consumer_service_binding
        'urn:oasis:names:tc:SAML:2.0:bindings:HTTP-POST'
    """

    # Toolkit
    strict: bool = True
    debug: bool = False

    # SP identity
    sp_entity_id: str = ""
    sp_assertion_consumer_service_url: Optional[str] = None
    sp_assertion_consumer_service_binding: str = constants.BINDING_HTTP_POST
    sp_single_logout_service_url: Optional[str] = None
    sp_single_logout_service_binding: str = constants.BINDING_HTTP_REDIRECT
    sp_name_id_format: str = constants.NAMEID_UNSPECIFIED

    # SP credentials
    sp_x509cert: Optional[x509.Certificate] = None
    sp_x509cert_new: Optional[x509.Certificate] = None
    sp_private_key: Optional[Any] = None
    hsm: Optional[HSM] = None

    # IdP identity
    idp_entity_id: str = ""
    idp_single_sign_on_service_url: Optional[str] = None
    idp_single_sign_on_service_binding: str = constants.BINDING_HTTP_REDIRECT
    idp_single_logout_service_url: Optional[str] = None
    idp_single_logout_service_response_url: Optional[str] = None
    idp_single_logout_service_binding: str = constants.BINDING_HTTP_REDIRECT

    # IdP credentials
    idp_x509cert: Optional[x509.Certificate] = None
    idp_x509cert_multi: Optional[Tuple[x509.Certificate, ...]] = None
    idp_cert_fingerprint: Optional[str] = None
    idp_cert_fingerprint_algorithm: str = "sha1"

    # Security
    name_id_encrypted: bool = False
    authn_requests_signed: bool = False
    logout_request_signed: bool = False
    logout_response_signed: bool = False
    want_messages_signed: bool = False
    want_assertions_signed: bool = False
    want_assertions_encrypted: bool = False
    want_name_id: bool = True
    want_name_id_encrypted: bool = False
    sign_metadata: bool = False
    requested_authn_context: Tuple[str, ...] = ()
    requested_authn_context_comparison: str = "exact"
    want_xml_validation: bool = True
    signature_algorithm: str = constants.RSA_SHA256
    digest_algorithm: str = constants.SHA256
    reject_unsolicited_responses_with_in_response_to: bool = False
    allow_repeat_attribute_name: bool = False
    reject_deprecated_alg: bool = False
    unique_id_prefix: Optional[str] = None

    # Compression
    compress_request: bool = True
    compress_response: bool = True

    # Parsing
    trim_name_ids: bool = False
    trim_attribute_values: bool = False

    # Metadata descriptive info
    contacts: Tuple[Contact, ...] = ()
    organization: Optional[Organization] = None

    # Mode
    sp_validation_only: bool = False

    def __post_init__(self) -> None:
        for name in _SEQUENCE_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

        # Logout responses go to the logout URL unless a dedicated one is set
        if self.idp_single_logout_service_response_url is None:
            object.__setattr__(
                self,
                "idp_single_logout_service_response_url",
                self.idp_single_logout_service_url,
            )

    def describe(self) -> dict[str, Any]:
        """Summarize the record for logs without exposing key material.

        Returns:
            Dictionary of field name to printable value. Credentials are
            reported as "present"/"absent".
        """
        credential_fields = {
            "sp_x509cert",
            "sp_x509cert_new",
            "sp_private_key",
            "hsm",
            "idp_x509cert",
            "idp_x509cert_multi",
        }
        summary: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in credential_fields:
                summary[f.name] = "present" if value else "absent"
            else:
                summary[f.name] = value
        return summary
