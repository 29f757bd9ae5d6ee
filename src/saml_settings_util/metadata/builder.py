"""SP metadata generation using lxml.

This module renders the SAML 2.0 metadata document that describes the Service
Provider configured in a ``Saml2Settings`` record. The element order follows
saml-schema-metadata-2.0.xsd so the output passes ``validate_metadata``.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from lxml import etree

from ..config.defaults import DEFAULT_CACHE_DURATION_SECONDS, DEFAULT_VALID_UNTIL_DAYS
from ..settings.certificates import certificate_base64
from ..settings.constants import NS_DS, NS_MD, NS_PROTOCOL, NS_XML, NSMAP
from ..settings.model import Contact, Organization, Saml2Settings

logger = logging.getLogger(__name__)


def _md(tag: str) -> str:
    return f"{{{NS_MD}}}{tag}"


def _ds(tag: str) -> str:
    return f"{{{NS_DS}}}{tag}"


def _bool_attr(value: bool) -> str:
    return "true" if value else "false"


def format_saml_datetime(value: datetime) -> str:
    """Format a datetime as an xs:dateTime in UTC with a Z suffix."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class SPMetadataBuilder:
    """Build SP metadata XML from a settings record.

    Attributes:
        settings: Settings record describing the SP
        valid_until: Absolute expiry written to ``validUntil``
        cache_duration: Seconds written to ``cacheDuration``

    Example:
        >>> builder = SPMetadataBuilder(settings)
        >>> xml = builder.build()
        >>> "SPSSODescriptor" in xml
        True
    """

    def __init__(
        self,
        settings: Saml2Settings,
        valid_until: Optional[datetime] = None,
        cache_duration: Optional[int] = None,
    ) -> None:
        self.settings = settings
        self.valid_until = valid_until or (
            datetime.now(timezone.utc) + timedelta(days=DEFAULT_VALID_UNTIL_DAYS)
        )
        self.cache_duration = (
            DEFAULT_CACHE_DURATION_SECONDS if cache_duration is None else cache_duration
        )

    def generate_id(self) -> str:
        """Generate an xs:ID for the EntityDescriptor."""
        prefix = self.settings.unique_id_prefix or "SAML_"
        return f"{prefix}{uuid.uuid4().hex}"

    def build_element(self) -> etree._Element:
        """Build the EntityDescriptor element tree.

        Returns:
            EntityDescriptor root element
        """
        settings = self.settings

        root = etree.Element(_md("EntityDescriptor"), nsmap=NSMAP)
        root.set("entityID", settings.sp_entity_id)
        root.set("ID", self.generate_id())
        root.set("validUntil", format_saml_datetime(self.valid_until))
        root.set("cacheDuration", f"PT{self.cache_duration}S")

        sp_sso = etree.SubElement(root, _md("SPSSODescriptor"))
        sp_sso.set("AuthnRequestsSigned", _bool_attr(settings.authn_requests_signed))
        sp_sso.set("WantAssertionsSigned", _bool_attr(settings.want_assertions_signed))
        sp_sso.set("protocolSupportEnumeration", NS_PROTOCOL)

        certs = [c for c in (settings.sp_x509cert, settings.sp_x509cert_new) if c is not None]
        for cert in certs:
            self._add_key_descriptor(sp_sso, "signing", certificate_base64(cert))
        if settings.want_assertions_encrypted or settings.want_name_id_encrypted:
            for cert in certs:
                self._add_key_descriptor(sp_sso, "encryption", certificate_base64(cert))

        if settings.sp_single_logout_service_url:
            slo = etree.SubElement(sp_sso, _md("SingleLogoutService"))
            slo.set("Binding", settings.sp_single_logout_service_binding)
            slo.set("Location", settings.sp_single_logout_service_url)

        name_id_format = etree.SubElement(sp_sso, _md("NameIDFormat"))
        name_id_format.text = settings.sp_name_id_format

        acs = etree.SubElement(sp_sso, _md("AssertionConsumerService"))
        acs.set("Binding", settings.sp_assertion_consumer_service_binding)
        acs.set("Location", settings.sp_assertion_consumer_service_url or "")
        acs.set("index", "1")
        acs.set("isDefault", "true")

        if settings.organization is not None:
            self._add_organization(root, settings.organization)

        for contact in settings.contacts:
            self._add_contact(root, contact)

        return root

    def build(self) -> str:
        """Build SP metadata as XML text.

        Returns:
            Pretty-printed metadata document (UTF-8 declaration included)
        """
        root = self.build_element()
        xml = etree.tostring(
            root, pretty_print=True, xml_declaration=True, encoding="UTF-8"
        ).decode("utf-8")
        logger.info(f"Generated SP metadata for {self.settings.sp_entity_id}")
        return xml

    @staticmethod
    def _add_key_descriptor(parent: etree._Element, use: str, cert_b64: str) -> None:
        key_descriptor = etree.SubElement(parent, _md("KeyDescriptor"))
        key_descriptor.set("use", use)
        key_info = etree.SubElement(key_descriptor, _ds("KeyInfo"))
        x509_data = etree.SubElement(key_info, _ds("X509Data"))
        x509_cert = etree.SubElement(x509_data, _ds("X509Certificate"))
        x509_cert.text = cert_b64

    @staticmethod
    def _add_organization(parent: etree._Element, organization: Organization) -> None:
        org = etree.SubElement(parent, _md("Organization"))
        for tag, value in (
            ("OrganizationName", organization.name),
            ("OrganizationDisplayName", organization.display_name),
            ("OrganizationURL", organization.url),
        ):
            child = etree.SubElement(org, _md(tag))
            child.set(f"{{{NS_XML}}}lang", organization.lang)
            child.text = value

    @staticmethod
    def _add_contact(parent: etree._Element, contact: Contact) -> None:
        person = etree.SubElement(parent, _md("ContactPerson"))
        person.set("contactType", contact.contact_type)
        for tag, value in (
            ("Company", contact.company),
            ("GivenName", contact.given_name),
            ("SurName", contact.sur_name),
        ):
            if value:
                etree.SubElement(person, _md(tag)).text = value
        for email in contact.email_addresses:
            if email:
                etree.SubElement(person, _md("EmailAddress")).text = email
        for phone in contact.telephone_numbers:
            if phone:
                etree.SubElement(person, _md("TelephoneNumber")).text = phone
