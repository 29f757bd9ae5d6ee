"""Utility helpers shared across the SAML Settings Utility."""
