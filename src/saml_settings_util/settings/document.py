"""Settings document models using pydantic.

A settings document is the nested dictionary form of SAML settings used by
python3-saml style integrations::

    {
        "strict": true,
        "sp": {"entityId": "...", "assertionConsumerService": {"url": "..."}},
        "idp": {"entityId": "...", "singleSignOnService": {"url": "..."}},
        "security": {"authnRequestsSigned": true},
        "contactPerson": {"technical": {"givenName": "...", "emailAddress": "..."}},
        "organization": {"en-US": {"name": "...", "displayname": "...", "url": "..."}}
    }

The models only check shapes and types. Empty or missing values that the
settings validators report (entity IDs, URLs, contact data) are accepted here
so that they reach the validators.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from saml_settings_util.settings import constants


class _DocumentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ServiceEndpoint(_DocumentModel):
    """Endpoint location and binding.

    Attributes:
        url: Endpoint URL
        binding: Binding URI
        response_url: Separate response location (IdP SLO only)
    """

    url: Optional[str] = None
    binding: Optional[str] = None
    response_url: Optional[str] = Field(default=None, alias="responseUrl")


class SPDocument(_DocumentModel):
    """Service Provider section of a settings document."""

    entity_id: str = Field(default="", alias="entityId")
    assertion_consumer_service: ServiceEndpoint = Field(
        default_factory=ServiceEndpoint, alias="assertionConsumerService"
    )
    single_logout_service: ServiceEndpoint = Field(
        default_factory=ServiceEndpoint, alias="singleLogoutService"
    )
    name_id_format: str = Field(
        default=constants.NAMEID_UNSPECIFIED, alias="NameIDFormat"
    )
    x509cert: Optional[str] = None
    x509cert_new: Optional[str] = Field(default=None, alias="x509certNew")
    private_key: Optional[str] = Field(default=None, alias="privateKey")


class IdPDocument(_DocumentModel):
    """Identity Provider section of a settings document."""

    entity_id: str = Field(default="", alias="entityId")
    single_sign_on_service: ServiceEndpoint = Field(
        default_factory=ServiceEndpoint, alias="singleSignOnService"
    )
    single_logout_service: ServiceEndpoint = Field(
        default_factory=ServiceEndpoint, alias="singleLogoutService"
    )
    x509cert: Optional[str] = None
    x509cert_multi: Optional[dict[str, list[str]]] = Field(
        default=None,
        alias="x509certMulti",
        description="Certificates keyed by use: signing, encryption",
    )
    cert_fingerprint: Optional[str] = Field(default=None, alias="certFingerprint")
    cert_fingerprint_algorithm: str = Field(
        default="sha1", alias="certFingerprintAlgorithm"
    )


class SecurityDocument(_DocumentModel):
    """Security section of a settings document."""

    name_id_encrypted: bool = Field(default=False, alias="nameIdEncrypted")
    authn_requests_signed: bool = Field(default=False, alias="authnRequestsSigned")
    logout_request_signed: bool = Field(default=False, alias="logoutRequestSigned")
    logout_response_signed: bool = Field(default=False, alias="logoutResponseSigned")
    want_messages_signed: bool = Field(default=False, alias="wantMessagesSigned")
    want_assertions_signed: bool = Field(default=False, alias="wantAssertionsSigned")
    want_assertions_encrypted: bool = Field(
        default=False, alias="wantAssertionsEncrypted"
    )
    want_name_id: bool = Field(default=True, alias="wantNameId")
    want_name_id_encrypted: bool = Field(default=False, alias="wantNameIdEncrypted")
    sign_metadata: bool = Field(default=False, alias="signMetadata")
    requested_authn_context: Union[bool, list[str]] = Field(
        default=False,
        alias="requestedAuthnContext",
        description="false: none, true: PasswordProtectedTransport, list: class refs",
    )
    requested_authn_context_comparison: str = Field(
        default="exact", alias="requestedAuthnContextComparison"
    )
    want_xml_validation: bool = Field(default=True, alias="wantXMLValidation")
    signature_algorithm: str = Field(
        default=constants.RSA_SHA256, alias="signatureAlgorithm"
    )
    digest_algorithm: str = Field(default=constants.SHA256, alias="digestAlgorithm")
    reject_unsolicited_responses_with_in_response_to: bool = Field(
        default=False, alias="rejectUnsolicitedResponsesWithInResponseTo"
    )
    allow_repeat_attribute_name: bool = Field(
        default=False, alias="allowRepeatAttributeName"
    )
    reject_deprecated_algorithm: bool = Field(
        default=False, alias="rejectDeprecatedAlgorithm"
    )
    unique_id_prefix: Optional[str] = Field(default=None, alias="uniqueIdPrefix")


class CompressDocument(_DocumentModel):
    """Compression section of a settings document."""

    request: bool = True
    response: bool = True


class ParsingDocument(_DocumentModel):
    """Parsing section of a settings document."""

    trim_name_ids: bool = Field(default=False, alias="trimNameIds")
    trim_attribute_values: bool = Field(default=False, alias="trimAttributeValues")


class ContactDocument(_DocumentModel):
    """Contact person entry.

    ``contact_type`` is only read when contacts are given as a list; when given
    as a mapping the key is the contact type.
    """

    contact_type: Optional[str] = Field(default=None, alias="contactType")
    given_name: str = Field(default="", alias="givenName")
    sur_name: str = Field(default="", alias="surName")
    company: str = ""
    email_address: list[str] = Field(default_factory=list, alias="emailAddress")
    telephone_number: list[str] = Field(default_factory=list, alias="telephoneNumber")

    @field_validator("email_address", "telephone_number", mode="before")
    @classmethod
    def validate_string_or_list(cls, v: Union[str, list[str], None]) -> list[str]:
        """Accept a single string where a list is expected.

        Args:
            v: Raw value from the settings document

        Returns:
            List of strings
        """
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class OrganizationDocument(_DocumentModel):
    """Organization entry for one language."""

    name: str = ""
    displayname: str = ""
    url: str = ""


class SettingsDocument(_DocumentModel):
    """Root settings document model.

    Example:
        >>> document = SettingsDocument.model_validate({
        ...     "sp": {"entityId": "https://sp.example.com"},
        ...     "security": {"authnRequestsSigned": True},
        ... })
        >>> document.security.authn_requests_signed
        True
    """

    strict: bool = True
    debug: bool = False
    sp: SPDocument = Field(default_factory=SPDocument)
    idp: IdPDocument = Field(default_factory=IdPDocument)
    security: SecurityDocument = Field(default_factory=SecurityDocument)
    compress: CompressDocument = Field(default_factory=CompressDocument)
    parsing: ParsingDocument = Field(default_factory=ParsingDocument)
    contact_person: Union[dict[str, ContactDocument], list[ContactDocument]] = Field(
        default_factory=dict, alias="contactPerson"
    )
    organization: dict[str, OrganizationDocument] = Field(default_factory=dict)
    sp_validation_only: bool = Field(default=False, alias="spValidationOnly")
