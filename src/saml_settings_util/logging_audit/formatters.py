"""Custom log formatters for the SAML Settings Utility.

This module provides specialized formatters for logging, including redaction
of key and certificate material.
"""

import logging
import re
from typing import List, Tuple


class SecretRedactingFormatter(logging.Formatter):
    """Formatter that masks PEM key material and certificate bodies in log messages.
    
    Settings documents and metadata carry private keys and certificates. When
    those end up in a debug log (for example a settings dump) this formatter
    replaces them before the record is written.
    
    Attributes:
        redact_secrets: Whether to enable redaction
        patterns: List of (regex_pattern, replacement_text) tuples for redaction
        
    Example:
        >>> formatter = SecretRedactingFormatter(
        ...     fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        ...     redact_secrets=True
        ... )
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """
    
    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_secrets: bool = True,
    ) -> None:
        """Initialize the SecretRedactingFormatter.
        
        Args:
            fmt: Log message format string
            datefmt: Date format string (optional)
            redact_secrets: Whether to enable redaction
        """
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_secrets = redact_secrets
        
        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            # Armored private keys: RSA PRIVATE KEY, PRIVATE KEY, ENCRYPTED PRIVATE KEY
            (re.compile(
                r'-----BEGIN ([A-Z ]*)PRIVATE KEY-----.*?-----END \1PRIVATE KEY-----',
                re.DOTALL,
            ), '[PRIVATE-KEY-REDACTED]'),
            
            # Armored certificates
            (re.compile(
                r'-----BEGIN CERTIFICATE-----.*?-----END CERTIFICATE-----',
                re.DOTALL,
            ), '[CERTIFICATE-REDACTED]'),
            
            # Settings document keys with bare base64 values
            # Matches: "privateKey": "MIIE...", privateKey='MIIE...'
            (re.compile(r'(["\']?privateKey["\']?\s*[:=]\s*)["\']?[A-Za-z0-9+/=\s]{40,}["\']?'),
             r'\1[PRIVATE-KEY-REDACTED]'),
        ]
    
    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional redaction.
        
        Args:
            record: Log record to format
            
        Returns:
            Formatted log message with secrets masked if enabled
        """
        original = super().format(record)
        
        if self.redact_secrets:
            for pattern, replacement in self.patterns:
                original = pattern.sub(replacement, original)
        
        return original
