"""Metadata CLI commands.

This module provides CLI commands for SAML SP metadata:
- metadata validate: Check a metadata document (schema, structure, expiry)
- metadata build: Generate SP metadata from a settings document
"""

import logging
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import click

from saml_settings_util.cli.settings_commands import load_settings_file
from saml_settings_util.config import Config
from saml_settings_util.logging_audit import log_audit_event
from saml_settings_util.metadata import (
    LxmlSchemaChecker,
    MetadataSigningStatus,
    get_sp_metadata,
    validate_metadata,
)
from saml_settings_util.utils.exceptions import MetadataError

logger = logging.getLogger(__name__)


def _get_config(ctx: click.Context) -> Config:
    if ctx.obj and "config" in ctx.obj:
        return ctx.obj["config"]
    return Config()


@click.group(name="metadata")
def metadata_group() -> None:
    """SAML SP metadata commands."""
    pass


@metadata_group.command(name="validate")
@click.argument("metadata_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--schema-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory containing saml-schema-metadata-2.0.xsd (overrides config)",
)
@click.pass_context
def validate(ctx: click.Context, metadata_file: Path, schema_dir: Optional[Path]) -> None:
    """Validate an SP metadata document.

    Exits with status 1 when errors are reported and 2 when the document or
    schema cannot be read.

    Example:
        saml-settings-util metadata validate sp-metadata.xml --schema-dir schemas/
    """
    config = _get_config(ctx)
    checker = LxmlSchemaChecker(schema_dir or config.schemas.schema_dir)

    start_time = time.time()
    try:
        # Raw bytes so the declared encoding of the document is honored
        errors = validate_metadata(
            metadata_file.read_bytes(),
            schema_checker=checker,
            schema_id=config.schemas.metadata_schema,
        )
    except (MetadataError, OSError) as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Cannot validate metadata")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(2)

    log_audit_event(
        "METADATA_VALIDATED",
        {
            "input_file": str(metadata_file),
            "status": "failure" if errors else "success",
            "error_count": len(errors),
            "errors": [e.value for e in errors],
            "duration": time.time() - start_time,
        },
    )

    if errors:
        click.echo(
            click.style("✗", fg="red", bold=True)
            + f" Metadata validation failed ({len(errors)} error(s))"
        )
        for error in errors:
            click.echo(f"  - {error.value}")
        raise click.exceptions.Exit(1)

    click.echo(click.style("✓", fg="green", bold=True) + " Metadata is valid")


@metadata_group.command(name="build")
@click.argument("settings_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Write metadata to file (default: stdout)",
)
@click.option(
    "--key-password",
    type=str,
    envvar="SAML_SETTINGS_KEY_PASSWORD",
    help="Password for an encrypted SP private key",
)
@click.pass_context
def build(
    ctx: click.Context,
    settings_file: Path,
    output: Optional[Path],
    key_password: Optional[str],
) -> None:
    """Generate SP metadata from a settings document.

    The metadata is signed when the settings document sets
    security.signMetadata. If signing was requested but could not be done,
    the unsigned metadata is still written and the command exits with
    status 1.

    Examples:

        # Print metadata
        saml-settings-util metadata build settings.json

        # Save to file
        saml-settings-util metadata build settings.json --output sp-metadata.xml
    """
    config = _get_config(ctx)
    settings = load_settings_file(settings_file, key_password)

    result = get_sp_metadata(
        settings,
        valid_until=datetime.now(timezone.utc)
        + timedelta(days=config.metadata.valid_until_days),
        cache_duration=config.metadata.cache_duration_seconds,
    )

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.xml, encoding="utf-8")
        click.echo(
            click.style("✓", fg="green", bold=True) + f" SP metadata saved to: {output}",
            err=True,
        )
    else:
        click.echo(result.xml)

    log_audit_event(
        "METADATA_GENERATED",
        {
            "input_file": str(settings_file),
            "status": "success" if result.error is None else "failure",
            "signing": result.status.value,
            "output_file": str(output) if output else "stdout",
        },
    )

    click.echo(f"Signing status: {result.status.value}", err=True)
    if result.status in (
        MetadataSigningStatus.NOT_SUPPORTED,
        MetadataSigningStatus.SIGNING_FAILED,
    ):
        click.echo(
            click.style("✗", fg="red", bold=True) + f" Metadata not signed: {result.error}",
            err=True,
        )
        raise click.exceptions.Exit(1)
