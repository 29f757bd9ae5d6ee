"""Root logger setup for saml-settings-util.

Two handlers are installed on the root logger: a console handler at the
requested level and a size-rotated log file that always records DEBUG.
Both pass through ``SecretRedactingFormatter`` so key and certificate
material from settings documents stays out of the output.

``configure_logging_from_config`` is the entry point used by the CLI; it
applies command-line overrides on top of a ``LoggingConfig``.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .formatters import SecretRedactingFormatter

if TYPE_CHECKING:
    from saml_settings_util.config.schema import LoggingConfig

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path("logs") / "saml-settings-util.log"
LOG_FILE_ENV_VAR = "SAML_SETTINGS_LOG_FILE"
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

_installed_handlers: list[logging.Handler] = []


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Use DEBUG, INFO, WARNING, ERROR or CRITICAL."
        )
    return number


def _log_file_path(log_file: Optional[Path]) -> Path:
    if log_file is not None:
        return Path(log_file)
    from_env = os.environ.get(LOG_FILE_ENV_VAR)
    return Path(from_env) if from_env else DEFAULT_LOG_FILE


def _remove_installed_handlers(root: logging.Logger) -> None:
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root.removeHandler(handler)
        handler.close()


def _install(root: logging.Logger, handler: logging.Handler) -> None:
    root.addHandler(handler)
    _installed_handlers.append(handler)


def _rotating_file_handler(
    path: Path, formatter: logging.Formatter
) -> Optional[logging.Handler]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(
            f"Cannot create log directory {path.parent}: {e}. "
            f"Fix: Choose a writable location with --log-file or {LOG_FILE_ENV_VAR}."
        ) from e

    try:
        handler = RotatingFileHandler(
            filename=str(path),
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        logging.getLogger(__name__).warning(
            f"Cannot open log file {path} ({e}); logging to the console only."
        )
        return None

    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    redact_secrets: bool = True,
) -> None:
    """Install console and rotating file handlers on the root logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL). The
            file handler records DEBUG regardless.
        log_file: Log file path. Falls back to SAML_SETTINGS_LOG_FILE, then
            ``logs/saml-settings-util.log``.
        redact_secrets: Mask private keys and certificate bodies

    Raises:
        ValueError: If the level name is unknown
        RuntimeError: If the log directory cannot be created

    Example:
        >>> configure_logging(level="DEBUG", log_file=Path("logs/debug.log"))
    """
    console_level = _level_number(level)
    path = _log_file_path(log_file)
    formatter = SecretRedactingFormatter(
        fmt=DEFAULT_LOG_FORMAT, redact_secrets=redact_secrets
    )

    root = logging.getLogger()
    _remove_installed_handlers(root)
    root.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(formatter)
    _install(root, console)

    file_handler = _rotating_file_handler(path, formatter)
    if file_handler is not None:
        _install(root, file_handler)


def configure_logging_from_config(
    config: "LoggingConfig",
    verbose: bool = False,
    log_file: Optional[Path] = None,
    redact_secrets: bool = False,
) -> None:
    """Configure logging from the tool configuration.

    Command-line values win over the configuration: ``verbose`` forces DEBUG
    on the console, ``log_file`` replaces the configured path and
    ``redact_secrets`` can only switch redaction on.

    Args:
        config: Logging section of the loaded configuration
        verbose: Console at DEBUG
        log_file: Log file path from the command line
        redact_secrets: Redaction requested on the command line
    """
    configure_logging(
        level="DEBUG" if verbose else config.level,
        log_file=log_file or config.log_file,
        redact_secrets=redact_secrets or config.redact_secrets,
    )


def get_logger(module_name: str) -> logging.Logger:
    """Return the logger for ``module_name`` (usually ``__name__``)."""
    return logging.getLogger(module_name)
