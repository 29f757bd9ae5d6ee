"""XML schema conformance checking.

The metadata validator consumes schema checking as a capability: "is this
document valid against schema X". ``LxmlSchemaChecker`` provides it with
``lxml.etree.XMLSchema`` over XSD files kept in a schema directory (the
SAML 2.0 metadata schema and the schemas it imports).
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from lxml import etree

from ..utils.exceptions import SchemaLoadError

logger = logging.getLogger(__name__)


class SchemaChecker(Protocol):
    """Capability to validate a parsed document against a named schema."""

    def is_valid(self, document: etree._Element, schema_id: str) -> bool:
        """Return True when ``document`` conforms to schema ``schema_id``."""
        ...


class LxmlSchemaChecker:
    """Validate documents with XSD files from a schema directory.

    Compiled schemas are cached per checker instance, keyed by schema file
    path. Validation itself keeps no state between calls.

    Attributes:
        schema_dir: Directory containing the XSD files

    Example:
        >>> checker = LxmlSchemaChecker(Path("schemas"))
        >>> checker.is_valid(root, "saml-schema-metadata-2.0.xsd")
        True
    """

    def __init__(self, schema_dir: Optional[Union[str, Path]]) -> None:
        self.schema_dir = Path(schema_dir) if schema_dir is not None else None
        self._schemas: Dict[Path, etree.XMLSchema] = {}

    def load_schema(self, schema_id: str) -> etree.XMLSchema:
        """Load and compile a schema from the schema directory.

        Args:
            schema_id: Schema file name, e.g. ``saml-schema-metadata-2.0.xsd``

        Returns:
            Compiled XMLSchema

        Raises:
            SchemaLoadError: If no schema directory is configured, the file is
                missing, or the schema does not compile
        """
        if self.schema_dir is None:
            raise SchemaLoadError(
                f"No schema directory configured for {schema_id}. "
                f"Fix: Set schemas.schema_dir in the configuration or the "
                f"SAML_SETTINGS_SCHEMA_DIR environment variable."
            )

        schema_path = self.schema_dir / schema_id
        if schema_path in self._schemas:
            return self._schemas[schema_path]

        if not schema_path.is_file():
            raise SchemaLoadError(
                f"Schema file not found: {schema_path}. "
                f"Fix: Place {schema_id} and the schemas it imports in {self.schema_dir}."
            )

        try:
            schema_doc = etree.parse(str(schema_path))
            schema = etree.XMLSchema(schema_doc)
        except (etree.XMLSyntaxError, etree.XMLSchemaParseError) as e:
            raise SchemaLoadError(
                f"Failed to load schema {schema_path}: {e}. "
                f"Fix: Check that imported schemas are present next to {schema_id}."
            ) from e

        logger.debug(f"Loaded XML schema: {schema_path}")
        self._schemas[schema_path] = schema
        return schema

    def is_valid(self, document: etree._Element, schema_id: str) -> bool:
        """Validate a parsed document against a schema.

        Args:
            document: Root element of the parsed document
            schema_id: Schema file name inside the schema directory

        Returns:
            True if the document conforms to the schema

        Raises:
            SchemaLoadError: If the schema cannot be loaded
        """
        schema = self.load_schema(schema_id)
        if schema.validate(document):
            return True

        for error in schema.error_log:
            logger.warning(f"Schema violation at line {error.line}: {error.message}")
        return False


def default_schema_checker() -> LxmlSchemaChecker:
    """Create a schema checker for the configured schema directory.

    Returns:
        LxmlSchemaChecker over ``schemas.schema_dir`` from the loaded configuration
    """
    from ..config import load_config

    config = load_config()
    return LxmlSchemaChecker(config.schemas.schema_dir)
