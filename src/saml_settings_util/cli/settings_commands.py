"""Settings CLI commands.

This module provides CLI commands for SAML settings documents:
- settings check: Build a settings record and report validation errors
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Optional

import click

from saml_settings_util.logging_audit import log_audit_event
from saml_settings_util.settings import Saml2Settings, SettingsBuilder
from saml_settings_util.utils.exceptions import SAMLSettingsError
from saml_settings_util.validation import validate_settings

logger = logging.getLogger(__name__)


def load_settings_file(
    settings_file: Path, key_password: Optional[str] = None
) -> Saml2Settings:
    """Read a JSON settings document and build the settings record.

    Args:
        settings_file: Path to the settings JSON document
        key_password: Password for an encrypted SP private key

    Returns:
        Saml2Settings record

    Raises:
        click.ClickException: If the file is not valid JSON or the record
            cannot be built
    """
    try:
        with open(settings_file, "r", encoding="utf-8") as f:
            data: Any = json.load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(
            f"Invalid JSON in settings file: {settings_file}\n"
            f"Error: {e}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e

    if not isinstance(data, dict):
        raise click.ClickException(
            f"Settings file {settings_file} must contain a JSON object at top level."
        )

    try:
        settings = SettingsBuilder.from_dict(
            data,
            key_password=key_password.encode("utf-8") if key_password else None,
        )
    except SAMLSettingsError as e:
        raise click.ClickException(str(e)) from e

    logger.debug(f"Settings record: {settings.describe()}")
    return settings


@click.group(name="settings")
def settings_group() -> None:
    """SAML settings document commands."""
    pass


@settings_group.command(name="check")
@click.argument("settings_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--sp-only",
    is_flag=True,
    help="Validate only the SP section (skip IdP checks)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
@click.option(
    "--key-password",
    type=str,
    envvar="SAML_SETTINGS_KEY_PASSWORD",
    help="Password for an encrypted SP private key",
)
@click.pass_context
def check(
    ctx: click.Context,
    settings_file: Path,
    sp_only: bool,
    output_format: str,
    key_password: Optional[str],
) -> None:
    """Validate a SAML settings document.

    Reports every problem found, in check order. Exits with status 1 when
    any error is reported and 2 when the document cannot be read.

    Examples:

        # Validate SP and IdP sections
        saml-settings-util settings check settings.json

        # SP only, machine-readable output
        saml-settings-util settings check settings.json --sp-only --format json
    """
    start_time = time.time()
    try:
        settings = load_settings_file(settings_file, key_password)
    except click.ClickException as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Cannot read settings")
        click.echo(f"\n{e.format_message()}", err=True)
        raise click.exceptions.Exit(2)

    config = ctx.obj["config"] if ctx.obj else None
    if sp_only or (config is not None and config.validation.sp_validation_only):
        sp_validation_only: Optional[bool] = True
    else:
        # Fall back to the flag carried by the settings document
        sp_validation_only = None

    errors = validate_settings(settings, sp_validation_only=sp_validation_only)

    log_audit_event(
        "SETTINGS_VALIDATED",
        {
            "input_file": str(settings_file),
            "status": "failure" if errors else "success",
            "error_count": len(errors),
            "errors": [e.value for e in errors],
            "duration": time.time() - start_time,
        },
    )

    if output_format == "json":
        click.echo(
            json.dumps(
                {
                    "settings_file": str(settings_file),
                    "valid": not errors,
                    "errors": [e.value for e in errors],
                },
                indent=2,
            )
        )
    elif errors:
        click.echo(
            click.style("✗", fg="red", bold=True)
            + f" Settings validation failed ({len(errors)} error(s))"
        )
        for error in errors:
            click.echo(f"  - {error.value}")
    else:
        click.echo(click.style("✓", fg="green", bold=True) + " Settings are valid")

    if errors:
        raise click.exceptions.Exit(1)
