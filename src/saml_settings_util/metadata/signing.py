"""SP metadata signing using signxml library.

``get_sp_metadata`` renders SP metadata and signs it when the settings ask
for signed metadata. The outcome is always explicit: a caller receives the
XML together with a ``MetadataSigningStatus`` and never gets unsigned metadata
silently in place of signed metadata.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from cryptography import x509
from lxml import etree
from signxml import CanonicalizationMethod, DigestAlgorithm, SignatureMethod, XMLSigner
from signxml.exceptions import InvalidInput

from ..settings.certificates import certificate_pem, private_key_pem
from ..settings.constants import NS_DS
from ..settings.model import Saml2Settings
from ..utils.exceptions import MetadataSigningError
from ..validation.rules import check_sp_certs
from .builder import SPMetadataBuilder

logger = logging.getLogger(__name__)


class MetadataSigningStatus(Enum):
    """Outcome of SP metadata signing.

    Attributes:
        UNSIGNED: Signing was not requested
        SIGNED: Metadata carries an enveloped signature
        NOT_SUPPORTED: Signing was requested with key material other than the
            in-process SP private key (HSM); metadata is unsigned
        SIGNING_FAILED: Signing was requested and failed; metadata is unsigned
    """

    UNSIGNED = "unsigned"
    SIGNED = "signed"
    NOT_SUPPORTED = "not_supported"
    SIGNING_FAILED = "signing_failed"


@dataclass(frozen=True)
class SPMetadataResult:
    """SP metadata with its signing outcome.

    Attributes:
        xml: Metadata document text (signed only when status is SIGNED)
        status: Signing outcome
        error: Reason when status is NOT_SUPPORTED or SIGNING_FAILED
    """

    xml: str
    status: MetadataSigningStatus
    error: Optional[str] = None

    @property
    def is_signed(self) -> bool:
        return self.status is MetadataSigningStatus.SIGNED


def sign_metadata(
    metadata_xml: str,
    private_key: Any,
    certificate: x509.Certificate,
    signature_algorithm: str,
    digest_algorithm: str,
) -> str:
    """Sign a metadata document with an enveloped XML signature.

    The signature is placed as the first child of the root element and
    references the root ``ID``.

    Args:
        metadata_xml: Unsigned metadata document
        private_key: SP private key
        certificate: SP certificate embedded in KeyInfo
        signature_algorithm: Signature algorithm URI
        digest_algorithm: Digest algorithm URI

    Returns:
        Signed metadata document text

    Raises:
        MetadataSigningError: If the algorithms are unsupported, the key
            material is invalid, or the document cannot be parsed
    """
    try:
        signer = XMLSigner(
            signature_algorithm=SignatureMethod(signature_algorithm),
            digest_algorithm=DigestAlgorithm(digest_algorithm),
            c14n_algorithm=CanonicalizationMethod.EXCLUSIVE_XML_CANONICALIZATION_1_0,
        )

        root = etree.fromstring(metadata_xml.encode("utf-8"))
        entity_id = root.get("ID")
        if not entity_id:
            raise MetadataSigningError(
                "Metadata root has no ID attribute to reference from the signature."
            )

        placeholder = etree.Element(f"{{{NS_DS}}}Signature", nsmap={"ds": NS_DS})
        placeholder.set("Id", "placeholder")
        root.insert(0, placeholder)

        signed_root = signer.sign(
            root,
            key=private_key_pem(private_key),
            cert=certificate_pem(certificate),
            reference_uri=f"#{entity_id}",
            id_attribute="ID",
        )
    except MetadataSigningError:
        raise
    except (ValueError, InvalidInput, etree.XMLSyntaxError) as e:
        raise MetadataSigningError(
            f"Failed to sign SP metadata: {e}. "
            f"Fix: Check that the key matches the certificate and that the "
            f"signature and digest algorithms are supported (SHA-256 or stronger)."
        ) from e

    logger.info("SP metadata signed")
    return etree.tostring(signed_root, xml_declaration=True, encoding="UTF-8").decode(
        "utf-8"
    )


def get_sp_metadata(
    settings: Saml2Settings,
    valid_until: Optional[datetime] = None,
    cache_duration: Optional[int] = None,
) -> SPMetadataResult:
    """Render SP metadata and sign it when ``settings.sign_metadata`` is set.

    Only the in-process SP private key and certificate can sign. With an HSM
    configured the result is NOT_SUPPORTED; a missing key/certificate pair or
    a signing error gives SIGNING_FAILED. Both carry the unsigned XML and the
    reason.

    Args:
        settings: Settings record describing the SP
        valid_until: Override for the validUntil attribute
        cache_duration: Override for the cacheDuration attribute (seconds)

    Returns:
        SPMetadataResult with XML and signing status
    """
    xml = SPMetadataBuilder(
        settings, valid_until=valid_until, cache_duration=cache_duration
    ).build()

    if not settings.sign_metadata:
        return SPMetadataResult(xml=xml, status=MetadataSigningStatus.UNSIGNED)

    if settings.hsm is not None:
        reason = (
            "Metadata signing with an HSM is not supported; only the SP private "
            "key and certificate can sign metadata."
        )
        logger.warning(reason)
        return SPMetadataResult(
            xml=xml, status=MetadataSigningStatus.NOT_SUPPORTED, error=reason
        )

    if not check_sp_certs(settings):
        reason = "Metadata signing requires both the SP certificate and private key."
        logger.warning(reason)
        return SPMetadataResult(
            xml=xml, status=MetadataSigningStatus.SIGNING_FAILED, error=reason
        )

    try:
        signed_xml = sign_metadata(
            xml,
            settings.sp_private_key,
            settings.sp_x509cert,
            settings.signature_algorithm,
            settings.digest_algorithm,
        )
    except MetadataSigningError as e:
        logger.warning(f"Returning unsigned SP metadata: {e}")
        return SPMetadataResult(
            xml=xml, status=MetadataSigningStatus.SIGNING_FAILED, error=str(e)
        )

    return SPMetadataResult(xml=signed_xml, status=MetadataSigningStatus.SIGNED)
