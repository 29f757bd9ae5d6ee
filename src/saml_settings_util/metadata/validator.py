"""Standalone SAML SP metadata document validation.

``validate_metadata`` checks an SP metadata document in three stages, each
gated on the previous one:

1. Schema conformance against the SAML 2.0 metadata schema
2. Structure: an ``EntityDescriptor`` root with exactly one ``SPSSODescriptor``
3. Expiry from the root ``cacheDuration`` / ``validUntil`` attributes

Problems found in a readable document are returned as error codes. A document
that cannot be parsed, or a schema that cannot be loaded, raises instead:
an empty result must only ever mean "valid".

Metadata signature validation is not performed here. It is a deferred
extension point: a signed document passes or fails on the three stages above
regardless of its ds:Signature.
"""

import logging
import re
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from lxml import etree

from ..settings.constants import NS_MD, SAML_SCHEMA_METADATA_2_0
from ..utils.exceptions import MalformedXMLError
from .schema import SchemaChecker, default_schema_checker
from .timeutil import current_timestamp, get_expire_time

logger = logging.getLogger(__name__)

_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml\s[^>]*\?>")


class MetadataErrorCode(str, Enum):
    """Errors reported by the metadata document validator."""

    SCHEMA_MISMATCH = "Invalid SAML Metadata. Not match the saml-schema-metadata-2.0.xsd"
    NO_ENTITY_DESCRIPTOR = "noEntityDescriptor_xml"
    ONLY_ONE_SPSSO_DESCRIPTOR_ALLOWED = "onlySPSSODescriptor_allowed_xml"
    EXPIRED = "expired_xml"

    def __str__(self) -> str:
        return self.value


def parse_metadata(xml_text: Union[str, bytes]) -> etree._Element:
    """Parse metadata into an element tree.

    Text input is already decoded: a leading XML declaration is removed and
    the encoding it names is ignored. Byte input is decoded by the parser from
    its byte order mark or declaration, UTF-8 when it has neither. Entity
    resolution and network access are disabled.

    Args:
        xml_text: Metadata document as text or raw bytes

    Returns:
        Root element

    Raises:
        MalformedXMLError: If the document is not well-formed XML
    """
    if isinstance(xml_text, str):
        text = _XML_DECLARATION_RE.sub("", xml_text.lstrip("\ufeff"), count=1)
        data = text.strip().encode("utf-8")
        parser = etree.XMLParser(resolve_entities=False, no_network=True, encoding="utf-8")
    else:
        data = xml_text
        parser = etree.XMLParser(resolve_entities=False, no_network=True)

    try:
        return etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        error_msg = (
            f"Malformed metadata XML at line {e.lineno}: {e.msg}. "
            f"Check for unclosed tags or invalid characters."
        )
        logger.error(error_msg)
        raise MalformedXMLError(error_msg) from e


def validate_metadata(
    xml_text: Union[str, bytes],
    schema_checker: Optional[SchemaChecker] = None,
    now: Optional[datetime] = None,
    schema_id: str = SAML_SCHEMA_METADATA_2_0,
) -> list[MetadataErrorCode]:
    """Validate an SP metadata document.

    Args:
        xml_text: Metadata document as text or raw bytes
        schema_checker: Schema conformance capability. Defaults to an
            ``LxmlSchemaChecker`` over the configured schema directory.
        now: Override for the current time (timezone-aware)
        schema_id: Metadata schema file name

    Returns:
        Ordered list of errors; empty when the document is valid

    Raises:
        MalformedXMLError: If the document cannot be parsed
        SchemaLoadError: If the metadata schema cannot be loaded
        InvalidTimestampError: If cacheDuration or validUntil cannot be read

    Example:
        >>> errors = validate_metadata(metadata_xml, schema_checker=checker)
        >>> if not errors:
        ...     print("Metadata is valid")
    """
    root = parse_metadata(xml_text)
    checker = schema_checker if schema_checker is not None else default_schema_checker()

    errors: list[MetadataErrorCode] = []

    if not checker.is_valid(root, schema_id):
        errors.append(MetadataErrorCode.SCHEMA_MISMATCH)
    elif etree.QName(root).localname != "EntityDescriptor":
        errors.append(MetadataErrorCode.NO_ENTITY_DESCRIPTOR)
    elif len(root.findall(f"{{{NS_MD}}}SPSSODescriptor")) != 1:
        errors.append(MetadataErrorCode.ONLY_ONE_SPSSO_DESCRIPTOR_ALLOWED)
    else:
        expire_time = get_expire_time(
            root.get("cacheDuration"), root.get("validUntil"), now
        )
        if expire_time != 0 and current_timestamp(now) > expire_time:
            errors.append(MetadataErrorCode.EXPIRED)

    for error in errors:
        logger.error(f"Metadata validation error: {error.value}")
    return errors
