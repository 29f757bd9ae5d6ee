"""Main CLI entry point for the SAML Settings Utility.

This module provides the main Click command group for the saml-settings-util CLI.
"""

from pathlib import Path
from typing import Optional

import click

from saml_settings_util import __version__
from saml_settings_util.cli.metadata_commands import metadata_group
from saml_settings_util.cli.settings_commands import settings_group
from saml_settings_util.config import load_config
from saml_settings_util.logging_audit import configure_logging_from_config
from saml_settings_util.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="saml-settings-util")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-secrets",
    is_flag=True,
    help="Mask private keys and certificates in logs",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_secrets: bool,
) -> None:
    """SAML Settings Utility - validation of SAML 2.0 SP settings and metadata.
    
    Common usage:
    
        # Validate a settings document
        saml-settings-util settings check settings.json
        
        # Validate SP metadata against the SAML metadata schema
        saml-settings-util metadata validate sp-metadata.xml --schema-dir schemas/
        
        # Generate (and sign, if configured) SP metadata
        saml-settings-util metadata build settings.json --output sp-metadata.xml
        
        # Enable verbose logging for debugging
        saml-settings-util --verbose settings check settings.json
    
    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)
    
    try:
        config_obj = load_config(config)
        ctx.obj["config"] = config_obj
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)
    
    ctx.obj["verbose"] = verbose
    ctx.obj["redact_secrets"] = redact_secrets
    ctx.obj["log_file"] = log_file
    
    configure_logging_from_config(
        config_obj.logging,
        verbose=verbose,
        log_file=log_file,
        redact_secrets=redact_secrets,
    )


cli.add_command(settings_group)
cli.add_command(metadata_group)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.
    
    Args:
        config_file: Path to configuration file to validate
        
    Example:
        saml-settings-util config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)
    
    click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
    click.echo(f"\nConfiguration file: {config_file}")
    
    click.echo("\nSchemas:")
    click.echo(f"  Schema dir:      {config_obj.schemas.schema_dir or 'Not configured'}")
    click.echo(f"  Metadata schema: {config_obj.schemas.metadata_schema}")
    
    click.echo("\nValidation:")
    click.echo(f"  SP only:         {config_obj.validation.sp_validation_only}")
    
    click.echo("\nMetadata:")
    click.echo(f"  Valid until:     {config_obj.metadata.valid_until_days} day(s)")
    click.echo(f"  Cache duration:  {config_obj.metadata.cache_duration_seconds}s")
    
    click.echo("\nLogging:")
    click.echo(f"  Level:           {config_obj.logging.level}")
    click.echo(f"  Log file:        {config_obj.logging.log_file}")
    click.echo(f"  Redact secrets:  {config_obj.logging.redact_secrets}")


cli.add_command(config)


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"saml-settings-util version {__version__}")


if __name__ == "__main__":
    cli()
