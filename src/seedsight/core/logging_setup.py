"""Apply LoggingConfig to the root logger."""

import logging
from logging.handlers import RotatingFileHandler

from seedsight.core.config import LoggingConfig


def configure_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """
    Configure root logging from config.

    Args:
        config: Level, format and optional rotating log file
        verbose: Force DEBUG regardless of the configured level
    """
    level = logging.DEBUG if verbose else getattr(logging, str(config.level).upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        handlers.append(
            RotatingFileHandler(
                config.file,
                maxBytes=config.file_max_bytes,
                backupCount=config.file_backup_count,
            )
        )

    logging.basicConfig(level=level, format=config.format, handlers=handlers, force=True)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING if not verbose else logging.DEBUG)
