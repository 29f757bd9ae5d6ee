"""Configuration schema models using pydantic.

This module defines the tool configuration structure and validation rules.
It configures the utility itself (logging, schema location, defaults for
metadata generation); SAML settings records are built separately.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from saml_settings_util.config.defaults import (
    DEFAULT_CACHE_DURATION_SECONDS,
    DEFAULT_VALID_UNTIL_DAYS,
)


class LoggingConfig(BaseModel):
    """Configuration for logging.
    
    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_secrets: Whether to mask key and certificate material in logs
    """
    
    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/saml-settings-util.log"),
        description="Log file path"
    )
    redact_secrets: bool = Field(
        default=True,
        description="Mask PEM key and certificate material in logs"
    )
    
    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.
        
        Args:
            v: Log level string
            
        Returns:
            Validated log level (uppercase)
            
        Raises:
            ValueError: If log level is not valid
        """
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return v_upper


class SchemaConfig(BaseModel):
    """Configuration for XML schema files.
    
    Attributes:
        schema_dir: Directory holding saml-schema-metadata-2.0.xsd and its imports
        metadata_schema: File name of the SAML metadata schema
    """
    
    schema_dir: Optional[Path] = Field(
        default=None,
        description="Directory containing SAML XSD files"
    )
    metadata_schema: str = Field(
        default="saml-schema-metadata-2.0.xsd",
        description="SAML 2.0 metadata schema file name"
    )
    
    @field_validator("metadata_schema")
    @classmethod
    def validate_schema_name(cls, v: str) -> str:
        """Validate schema file name.
        
        Raises:
            ValueError: If the name is not an .xsd file name
        """
        if not v.endswith(".xsd") or "/" in v or "\\" in v:
            raise ValueError(
                f"Invalid metadata_schema: {v}. Must be an .xsd file name without directories"
            )
        return v


class ValidationConfig(BaseModel):
    """Defaults for settings validation.
    
    Attributes:
        sp_validation_only: Skip IdP checks unless a command overrides it
    """
    
    sp_validation_only: bool = False


class MetadataConfig(BaseModel):
    """Defaults for SP metadata generation.
    
    Attributes:
        valid_until_days: Days until the generated validUntil
        cache_duration_seconds: Seconds written to cacheDuration
    """
    
    valid_until_days: int = Field(
        default=DEFAULT_VALID_UNTIL_DAYS,
        ge=1,
        description="Days until validUntil of generated metadata"
    )
    cache_duration_seconds: int = Field(
        default=DEFAULT_CACHE_DURATION_SECONDS,
        ge=0,
        description="cacheDuration of generated metadata in seconds"
    )


class Config(BaseModel):
    """Root configuration model.
    
    Attributes:
        logging: Logging configuration
        schemas: XML schema configuration
        validation: Settings validation defaults
        metadata: SP metadata generation defaults
        
    Example:
        >>> config = Config(schemas=SchemaConfig(schema_dir=Path("schemas")))
        >>> config.schemas.metadata_schema
        'saml-schema-metadata-2.0.xsd'
    """
    
    logging: LoggingConfig = LoggingConfig()
    schemas: SchemaConfig = SchemaConfig()
    validation: ValidationConfig = ValidationConfig()
    metadata: MetadataConfig = MetadataConfig()
