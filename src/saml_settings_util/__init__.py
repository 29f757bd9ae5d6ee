"""SAML Settings Utility.

Validation of SAML 2.0 Service Provider settings and SP metadata documents,
plus SP metadata generation and signing.
"""

__version__ = "0.1.0"
