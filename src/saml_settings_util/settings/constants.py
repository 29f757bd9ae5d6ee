"""SAML 2.0 constants used by settings, validators and metadata generation."""

# Namespaces
NS_MD = "urn:oasis:names:tc:SAML:2.0:metadata"
NS_DS = "http://www.w3.org/2000/09/xmldsig#"
NS_XML = "http://www.w3.org/XML/1998/namespace"
NS_PROTOCOL = "urn:oasis:names:tc:SAML:2.0:protocol"

NSMAP = {
    "md": NS_MD,
    "ds": NS_DS,
}

# Bindings
BINDING_HTTP_POST = "urn:oasis:names:tc:SAML:2.0:bindings:HTTP-POST"
BINDING_HTTP_REDIRECT = "urn:oasis:names:tc:SAML:2.0:bindings:HTTP-Redirect"
BINDING_HTTP_ARTIFACT = "urn:oasis:names:tc:SAML:2.0:bindings:HTTP-Artifact"
BINDING_SOAP = "urn:oasis:names:tc:SAML:2.0:bindings:SOAP"
BINDING_DEFLATE = "urn:oasis:names:tc:SAML:2.0:bindings:URL-Encoding:DEFLATE"

# NameID formats
NAMEID_EMAIL_ADDRESS = "urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress"
NAMEID_X509_SUBJECT_NAME = "urn:oasis:names:tc:SAML:1.1:nameid-format:X509SubjectName"
NAMEID_WINDOWS_DOMAIN_QUALIFIED_NAME = (
    "urn:oasis:names:tc:SAML:1.1:nameid-format:WindowsDomainQualifiedName"
)
NAMEID_UNSPECIFIED = "urn:oasis:names:tc:SAML:1.1:nameid-format:unspecified"
NAMEID_KERBEROS = "urn:oasis:names:tc:SAML:2.0:nameid-format:kerberos"
NAMEID_ENTITY = "urn:oasis:names:tc:SAML:2.0:nameid-format:entity"
NAMEID_TRANSIENT = "urn:oasis:names:tc:SAML:2.0:nameid-format:transient"
NAMEID_PERSISTENT = "urn:oasis:names:tc:SAML:2.0:nameid-format:persistent"
NAMEID_ENCRYPTED = "urn:oasis:names:tc:SAML:2.0:nameid-format:encrypted"

# Authentication context
AC_PASSWORD_PROTECTED = (
    "urn:oasis:names:tc:SAML:2.0:ac:classes:PasswordProtectedTransport"
)

# Contact types
CONTACT_TYPE_TECHNICAL = "technical"
CONTACT_TYPE_SUPPORT = "support"
CONTACT_TYPE_ADMINISTRATIVE = "administrative"
CONTACT_TYPE_BILLING = "billing"
CONTACT_TYPE_OTHER = "other"

VALID_CONTACT_TYPES = frozenset(
    {
        CONTACT_TYPE_TECHNICAL,
        CONTACT_TYPE_SUPPORT,
        CONTACT_TYPE_ADMINISTRATIVE,
        CONTACT_TYPE_BILLING,
        CONTACT_TYPE_OTHER,
    }
)

# Signature algorithms
RSA_SHA1 = "http://www.w3.org/2000/09/xmldsig#rsa-sha1"
RSA_SHA256 = "http://www.w3.org/2001/04/xmldsig-more#rsa-sha256"
RSA_SHA384 = "http://www.w3.org/2001/04/xmldsig-more#rsa-sha384"
RSA_SHA512 = "http://www.w3.org/2001/04/xmldsig-more#rsa-sha512"

# Digest algorithms
SHA1 = "http://www.w3.org/2000/09/xmldsig#sha1"
SHA256 = "http://www.w3.org/2001/04/xmlenc#sha256"
SHA384 = "http://www.w3.org/2001/04/xmldsig-more#sha384"
SHA512 = "http://www.w3.org/2001/04/xmlenc#sha512"

# Schema identifiers
SAML_SCHEMA_METADATA_2_0 = "saml-schema-metadata-2.0.xsd"
