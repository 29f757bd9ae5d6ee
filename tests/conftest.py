"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests).
"""

import copy
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from lxml import etree


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.
    
    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture
def tests_dir(project_root: Path) -> Path:
    """
    Return the tests directory path.
    
    Args:
        project_root: Project root directory fixture.
    
    Returns:
        Path: Absolute path to the tests directory.
    """
    return project_root / "tests"


@pytest.fixture
def fixtures_dir(tests_dir: Path) -> Path:
    """
    Return the test fixtures directory path.
    
    Args:
        tests_dir: Tests directory fixture.
    
    Returns:
        Path: Absolute path to the test fixtures directory.
    """
    return tests_dir / "fixtures"


@pytest.fixture
def schema_dir(fixtures_dir: Path) -> Path:
    """Directory holding the test copy of saml-schema-metadata-2.0.xsd."""
    return fixtures_dir / "schemas"


@pytest.fixture(scope="session")
def rsa_key_pair() -> tuple[Any, x509.Certificate]:
    """
    Generate a self-signed RSA key pair for signing tests.
    
    Generated once per session; RSA key generation is slow.
    
    Returns:
        Tuple of (private_key, certificate)
    """
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    
    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "TestOrg"),
        x509.NameAttribute(NameOID.COMMON_NAME, "sp.example.com"),
    ])
    
    now = datetime.now(timezone.utc)
    cert = x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        issuer
    ).public_key(
        private_key.public_key()
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_before(
        now - timedelta(days=1)
    ).not_valid_after(
        now + timedelta(days=365)
    ).add_extension(
        x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
        critical=False,
    ).sign(private_key, hashes.SHA256())
    
    return private_key, cert


@pytest.fixture(scope="session")
def cert_pem(rsa_key_pair) -> str:
    """Armored PEM text of the test certificate."""
    _, cert = rsa_key_pair
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


@pytest.fixture(scope="session")
def key_pem(rsa_key_pair) -> str:
    """Armored unencrypted PKCS#8 PEM text of the test private key."""
    private_key, _ = rsa_key_pair
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def minimal_settings_dict() -> dict[str, Any]:
    """Settings document with every required SP and IdP value and nothing else."""
    return {
        "sp": {
            "entityId": "https://sp.example.com/metadata",
            "assertionConsumerService": {
                "url": "https://sp.example.com/acs",
            },
        },
        "idp": {
            "entityId": "https://idp.example.com/metadata",
            "singleSignOnService": {
                "url": "https://idp.example.com/sso",
            },
            "certFingerprint": "4b:6f:c4:a6:27:03:09:d4:43:61:bd:1d:6b:5a:31:9f:5d:3e:40:c1",
        },
    }


@pytest.fixture
def full_settings_dict(
    minimal_settings_dict: dict[str, Any], cert_pem: str, key_pem: str
) -> dict[str, Any]:
    """Settings document with SP credentials, IdP certificate, contacts and organization."""
    settings = copy.deepcopy(minimal_settings_dict)
    settings["sp"].update({
        "singleLogoutService": {"url": "https://sp.example.com/sls"},
        "NameIDFormat": "urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress",
        "x509cert": cert_pem,
        "privateKey": key_pem,
    })
    settings["idp"]["x509cert"] = cert_pem
    settings["security"] = {
        "authnRequestsSigned": True,
        "wantAssertionsSigned": True,
    }
    settings["contactPerson"] = {
        "technical": {"givenName": "Tech Team", "emailAddress": "tech@example.com"},
        "support": {"givenName": "Support", "emailAddress": "support@example.com"},
    }
    settings["organization"] = {
        "en-US": {
            "name": "example",
            "displayname": "Example Inc.",
            "url": "https://example.com",
        },
    }
    return settings


class FakeSchemaChecker:
    """Schema checker returning a fixed answer and recording its calls."""

    def __init__(self, valid: bool = True) -> None:
        self.valid = valid
        self.calls: list[tuple[str, str]] = []

    def is_valid(self, document: etree._Element, schema_id: str) -> bool:
        self.calls.append((etree.QName(document).localname, schema_id))
        return self.valid


@pytest.fixture
def accepting_schema_checker() -> FakeSchemaChecker:
    """Schema checker that accepts every document."""
    return FakeSchemaChecker(valid=True)


@pytest.fixture
def rejecting_schema_checker() -> FakeSchemaChecker:
    """Schema checker that rejects every document."""
    return FakeSchemaChecker(valid=False)
