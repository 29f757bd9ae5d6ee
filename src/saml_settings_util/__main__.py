"""Entry point for running saml_settings_util as a module.

This allows the package to be executed as:
    python -m saml_settings_util
"""

from saml_settings_util.cli.main import cli

if __name__ == "__main__":
    cli()
