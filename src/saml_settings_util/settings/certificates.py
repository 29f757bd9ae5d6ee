"""Certificate and key loading for settings documents.

Settings documents carry certificates and keys as PEM text, either armored
(``-----BEGIN CERTIFICATE-----``) or as the bare base64 body commonly pasted
into SAML settings. This module normalizes both forms and loads them with
the cryptography library.
"""

import base64
import logging
import re
from typing import Any, Optional

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from ..utils.exceptions import CertificateLoadError

logger = logging.getLogger(__name__)

_ARMOR_RE = re.compile(r"-----(BEGIN|END)[A-Z ]+-----")
_WHITESPACE_RE = re.compile(r"\s+")


def _pem_body(text: str) -> str:
    """Strip armor lines and whitespace, leaving the base64 body."""
    return _WHITESPACE_RE.sub("", _ARMOR_RE.sub("", text))


def _wrap_pem(body: str, label: str) -> str:
    lines = [body[i:i + 64] for i in range(0, len(body), 64)]
    return "\n".join([f"-----BEGIN {label}-----", *lines, f"-----END {label}-----", ""])


def format_cert(cert_text: str) -> str:
    """Return the certificate as armored PEM text.

    Args:
        cert_text: Certificate with or without BEGIN/END lines

    Returns:
        PEM text with 64-column body
    """
    return _wrap_pem(_pem_body(cert_text), "CERTIFICATE")


def format_private_key(key_text: str) -> str:
    """Return the private key as armored PEM text.

    Armored keys are returned unchanged so the original label (``RSA PRIVATE
    KEY``, ``PRIVATE KEY``, ``ENCRYPTED PRIVATE KEY``) is preserved. Bare
    bodies are assumed to be PKCS#8.
    """
    if _ARMOR_RE.search(key_text):
        return key_text.strip() + "\n"
    return _wrap_pem(_pem_body(key_text), "PRIVATE KEY")


def load_certificate_text(cert_text: str) -> x509.Certificate:
    """Load an X.509 certificate from PEM text.

    Args:
        cert_text: Certificate with or without BEGIN/END lines

    Returns:
        Loaded X.509 certificate

    Raises:
        CertificateLoadError: If the certificate cannot be parsed

    Example:
        >>> cert = load_certificate_text("MIIC...")
        >>> print(cert.subject.rfc4514_string())
    """
    try:
        cert = x509.load_pem_x509_certificate(format_cert(cert_text).encode("ascii"))
    except (ValueError, UnicodeEncodeError) as e:
        raise CertificateLoadError(
            f"Failed to load certificate from settings: {e}. "
            f"Fix: Provide a PEM certificate (armored or base64 body only)."
        ) from e

    logger.debug(f"Loaded certificate: {cert.subject.rfc4514_string()}")
    return cert


def load_private_key_text(key_text: str, password: Optional[bytes] = None) -> Any:
    """Load a private key from PEM text.

    Args:
        key_text: Private key with or without BEGIN/END lines
        password: Optional password for encrypted keys

    Returns:
        Loaded private key object

    Raises:
        CertificateLoadError: If the key cannot be parsed or decrypted
    """
    try:
        key = serialization.load_pem_private_key(
            format_private_key(key_text).encode("ascii"), password=password
        )
    except (ValueError, TypeError, UnicodeEncodeError) as e:
        raise CertificateLoadError(
            f"Failed to load private key from settings: {e}. "
            f"Fix: Provide an unencrypted PEM private key or the key password."
        ) from e

    logger.debug("Loaded SP private key")
    return key


def certificate_base64(cert: x509.Certificate) -> str:
    """Return the base64 DER body of a certificate for ds:X509Certificate."""
    der = cert.public_bytes(serialization.Encoding.DER)
    return base64.b64encode(der).decode("ascii")


def certificate_pem(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)


def private_key_pem(private_key: Any) -> bytes:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
