"""Build ``Saml2Settings`` records from settings documents."""

import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from saml_settings_util.settings import constants
from saml_settings_util.settings.certificates import (
    load_certificate_text,
    load_private_key_text,
)
from saml_settings_util.settings.document import (
    ContactDocument,
    OrganizationDocument,
    SettingsDocument,
)
from saml_settings_util.settings.model import HSM, Contact, Organization, Saml2Settings
from saml_settings_util.utils.exceptions import SettingsDocumentError

logger = logging.getLogger(__name__)


class SettingsBuilder:
    """Convert a settings document into an immutable settings record.

    The builder does not fix or default invalid values beyond the documented
    field defaults; whatever the document says reaches the record and the
    validators decide whether it is acceptable.

    Attributes:
        document: Parsed settings document
        hsm: Optional HSM to attach to the record
        key_password: Password for an encrypted SP private key

    Example:
        >>> settings = SettingsBuilder.from_dict({
        ...     "sp": {
        ...         "entityId": "https://sp.example.com/metadata",
        ...         "assertionConsumerService": {"url": "https://sp.example.com/acs"},
        ...     },
        ... })
        >>> settings.sp_entity_id
        'https://sp.example.com/metadata'
    """

    def __init__(
        self,
        document: SettingsDocument,
        hsm: Optional[HSM] = None,
        key_password: Optional[bytes] = None,
    ) -> None:
        self.document = document
        self.hsm = hsm
        self.key_password = key_password

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        hsm: Optional[HSM] = None,
        key_password: Optional[bytes] = None,
    ) -> Saml2Settings:
        """Parse a settings dictionary and build the record.

        Args:
            data: Settings document as a dictionary
            hsm: Optional HSM signing capability
            key_password: Password for an encrypted SP private key

        Returns:
            Saml2Settings record

        Raises:
            SettingsDocumentError: If the document has wrongly typed sections
            CertificateLoadError: If certificate or key text cannot be loaded
        """
        try:
            document = SettingsDocument.model_validate(data)
        except PydanticValidationError as e:
            raise SettingsDocumentError(
                f"Settings document validation failed:\n{e}\n\n"
                f"Fix: Check the section and field types against the settings "
                f"document format."
            ) from e
        return cls(document, hsm=hsm, key_password=key_password).build()

    def build(self) -> Saml2Settings:
        """Build the settings record from the parsed document.

        Returns:
            Saml2Settings record
        """
        doc = self.document
        sp = doc.sp
        idp = doc.idp
        security = doc.security

        settings = Saml2Settings(
            strict=doc.strict,
            debug=doc.debug,
            sp_entity_id=sp.entity_id,
            sp_assertion_consumer_service_url=sp.assertion_consumer_service.url,
            sp_assertion_consumer_service_binding=(
                sp.assertion_consumer_service.binding or constants.BINDING_HTTP_POST
            ),
            sp_single_logout_service_url=sp.single_logout_service.url,
            sp_single_logout_service_binding=(
                sp.single_logout_service.binding or constants.BINDING_HTTP_REDIRECT
            ),
            sp_name_id_format=sp.name_id_format,
            sp_x509cert=self._load_cert(sp.x509cert),
            sp_x509cert_new=self._load_cert(sp.x509cert_new),
            sp_private_key=self._load_key(sp.private_key),
            hsm=self.hsm,
            idp_entity_id=idp.entity_id,
            idp_single_sign_on_service_url=idp.single_sign_on_service.url,
            idp_single_sign_on_service_binding=(
                idp.single_sign_on_service.binding or constants.BINDING_HTTP_REDIRECT
            ),
            idp_single_logout_service_url=idp.single_logout_service.url,
            idp_single_logout_service_response_url=(
                idp.single_logout_service.response_url
            ),
            idp_single_logout_service_binding=(
                idp.single_logout_service.binding or constants.BINDING_HTTP_REDIRECT
            ),
            idp_x509cert=self._load_cert(idp.x509cert),
            idp_x509cert_multi=self._load_cert_multi(idp.x509cert_multi),
            idp_cert_fingerprint=idp.cert_fingerprint,
            idp_cert_fingerprint_algorithm=idp.cert_fingerprint_algorithm,
            name_id_encrypted=security.name_id_encrypted,
            authn_requests_signed=security.authn_requests_signed,
            logout_request_signed=security.logout_request_signed,
            logout_response_signed=security.logout_response_signed,
            want_messages_signed=security.want_messages_signed,
            want_assertions_signed=security.want_assertions_signed,
            want_assertions_encrypted=security.want_assertions_encrypted,
            want_name_id=security.want_name_id,
            want_name_id_encrypted=security.want_name_id_encrypted,
            sign_metadata=security.sign_metadata,
            requested_authn_context=self._requested_authn_context(
                security.requested_authn_context
            ),
            requested_authn_context_comparison=(
                security.requested_authn_context_comparison
            ),
            want_xml_validation=security.want_xml_validation,
            signature_algorithm=security.signature_algorithm,
            digest_algorithm=security.digest_algorithm,
            reject_unsolicited_responses_with_in_response_to=(
                security.reject_unsolicited_responses_with_in_response_to
            ),
            allow_repeat_attribute_name=security.allow_repeat_attribute_name,
            reject_deprecated_alg=security.reject_deprecated_algorithm,
            unique_id_prefix=security.unique_id_prefix,
            compress_request=doc.compress.request,
            compress_response=doc.compress.response,
            trim_name_ids=doc.parsing.trim_name_ids,
            trim_attribute_values=doc.parsing.trim_attribute_values,
            contacts=self._contacts(doc.contact_person),
            organization=self._organization(doc.organization),
            sp_validation_only=doc.sp_validation_only,
        )

        logger.debug(f"Built settings for SP entity '{settings.sp_entity_id}'")
        return settings

    def _load_cert(self, cert_text: Optional[str]):
        # An empty string in a settings document means "not configured"
        if not cert_text:
            return None
        return load_certificate_text(cert_text)

    def _load_key(self, key_text: Optional[str]):
        if not key_text:
            return None
        return load_private_key_text(key_text, password=self.key_password)

    def _load_cert_multi(self, cert_multi: Optional[dict[str, list[str]]]):
        if cert_multi is None:
            return None
        certs = []
        for use in ("signing", "encryption"):
            certs.extend(self._load_cert(text) for text in cert_multi.get(use, []) if text)
        return tuple(certs)

    @staticmethod
    def _requested_authn_context(value) -> tuple[str, ...]:
        if value is True:
            return (constants.AC_PASSWORD_PROTECTED,)
        if value is False:
            return ()
        return tuple(value)

    @staticmethod
    def _contacts(
        contact_person: dict[str, ContactDocument] | list[ContactDocument],
    ) -> tuple[Contact, ...]:
        if isinstance(contact_person, dict):
            entries = [
                (contact_type, entry) for contact_type, entry in contact_person.items()
            ]
        else:
            entries = [(entry.contact_type or "", entry) for entry in contact_person]

        return tuple(
            Contact(
                contact_type=contact_type,
                email_addresses=tuple(entry.email_address),
                telephone_numbers=tuple(entry.telephone_number),
                company=entry.company,
                given_name=entry.given_name,
                sur_name=entry.sur_name,
            )
            for contact_type, entry in entries
        )

    @staticmethod
    def _organization(
        organization: dict[str, OrganizationDocument],
    ) -> Optional[Organization]:
        if not organization:
            return None
        lang, entry = next(iter(organization.items()))
        return Organization(
            name=entry.name,
            display_name=entry.displayname,
            url=entry.url,
            lang=lang,
        )
