"""Command-line interface for the SAML Settings Utility."""
