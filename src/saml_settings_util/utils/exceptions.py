"""Custom exception classes for the SAML Settings Utility.

All exceptions inherit from SAMLSettingsError to allow catching all custom exceptions.

Expected configuration gaps are never raised; validators report them as error
codes. The exceptions below cover construction failures and conditions that
make a validation call impossible (malformed input, broken schema files).
"""


class SAMLSettingsError(Exception):
    """Base exception for all SAML Settings Utility custom exceptions."""

    pass


class ConfigurationError(SAMLSettingsError):
    """Raised when tool configuration loading or validation fails.
    
    Examples:
        - Invalid configuration file format
        - Configuration value out of range
    """

    pass


class ValidationError(SAMLSettingsError):
    """Raised when input data cannot be interpreted at all.
    
    Examples:
        - Settings document with wrongly typed values
    """

    pass


class SettingsDocumentError(ValidationError):
    """Raised when a settings document does not match the settings document model.
    
    Examples:
        - A boolean security flag given as a list
        - ``sp`` section that is not a mapping
    """

    pass


class CertificateLoadError(SAMLSettingsError):
    """Raised when certificate or key material cannot be loaded.
    
    Examples:
        - Invalid PEM data
        - Encrypted private key without password
    """

    pass


class MetadataError(SAMLSettingsError):
    """Base exception for metadata processing errors."""

    pass


class MalformedXMLError(MetadataError):
    """Raised when a metadata document is not well-formed XML.
    
    Examples:
        - Unclosed tags
        - Invalid characters
        - Empty document
    """

    pass


class SchemaLoadError(MetadataError):
    """Raised when an XML schema cannot be located or compiled.
    
    Examples:
        - Schema directory not configured
        - Schema file missing
        - Schema imports that cannot be resolved
    """

    pass


class InvalidTimestampError(MetadataError):
    """Raised when a validUntil or cacheDuration value cannot be interpreted.
    
    Examples:
        - validUntil="tomorrow"
        - cacheDuration="1 week"
    """

    pass


class MetadataSigningError(MetadataError):
    """Raised when signing SP metadata fails.
    
    Examples:
        - Key does not match certificate
        - Unsupported signature algorithm
    """

    pass
