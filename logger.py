"""Logging setup for the exporter: colored console output, rotating log file, run counters."""

import logging
import logging.handlers
import time
from typing import Any, Dict, Optional

import colorlog

LOGGER_NAME = 'gdocs_markdown_exporter'

LEVELS_BY_VERBOSITY = {0: logging.WARNING, 1: logging.INFO}
LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}
REDACTED = '***REDACTED***'
SECRET_KEY_PARTS = ('secret', 'password', 'access_token', 'refresh_token', 'api_key')


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Configure the exporter's logger.

    Args:
        verbosity: Count of -v flags (0=WARNING, 1=INFO, 2+=DEBUG)
        log_file: Optional path of a rotating log file
        log_format: Optional record format
        date_format: Optional timestamp format
        level: Explicit level name, overrides verbosity

    Returns:
        The `gdocs_markdown_exporter` logger
    """
    if level:
        log_level = logging.getLevelName(level.upper())
        if not isinstance(log_level, int):
            raise ValueError(
                f"Invalid log level '{level}'. Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )
    else:
        log_level = LEVELS_BY_VERBOSITY.get(verbosity, logging.DEBUG)

    log_format = log_format or '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format = date_format or '%Y-%m-%d %H:%M:%S'

    # Root stays at WARNING so google-auth and urllib3 do not flood the console
    logging.basicConfig(level=logging.WARNING, format=log_format, datefmt=date_format)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + log_format,
        datefmt=date_format,
        log_colors=LOG_COLORS
    ))
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=10 * 1024 * 1024, backupCount=5, encoding='utf-8'
            )
        except OSError as e:
            logger.warning(f"Cannot write log file {log_file}: {e}")
        else:
            file_handler.setFormatter(logging.Formatter(fmt=log_format, datefmt=date_format))
            logger.addHandler(file_handler)
            logger.info(f"Logging to {log_file} at {logging.getLevelName(log_level)}")

    return logger


class ProgressTracker:
    """Counts exported documents and logs a one-line summary when the block exits."""

    def __init__(self, total_items: int, item_type: str = "documents"):
        self.total_items = total_items
        self.item_type = item_type
        self.processed = 0
        self.successful = 0
        self.failed = 0
        self.started_at: Optional[float] = None
        self.logger = logging.getLogger(LOGGER_NAME)

    def __enter__(self) -> 'ProgressTracker':
        self.started_at = time.time()
        self.logger.info(f"Exporting {self.total_items} {self.item_type}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # The item in flight when an exception escapes did not make it
        if exc_type is not None and self.processed < self.total_items:
            self.increment(success=False)

        stats = self.get_stats()
        if self.failed == 0:
            log = self.logger.info
        elif self.successful == 0:
            log = self.logger.error
        else:
            log = self.logger.warning
        log(
            f"{stats['successful']}/{stats['total']} {self.item_type} exported, "
            f"{stats['failed']} failed, in {stats['elapsed_time']:.1f}s"
        )

    def increment(self, success: bool = True) -> None:
        """Record one finished item."""
        self.processed += 1
        if success:
            self.successful += 1
        else:
            self.failed += 1
            self.logger.info(f"{self.item_type.capitalize()} {self.processed}/{self.total_items} failed")

    def get_stats(self) -> Dict[str, Any]:
        elapsed = time.time() - self.started_at if self.started_at is not None else 0.0
        return {
            'total': self.total_items,
            'processed': self.processed,
            'successful': self.successful,
            'failed': self.failed,
            'elapsed_time': elapsed,
        }


def log_section(title: str) -> None:
    """Log a banner line marking a phase of the run."""
    logging.getLogger(LOGGER_NAME).info(f"----- {title.upper()} -----")


def log_config(config: Dict[str, Any]) -> None:
    """Log the effective settings, secrets masked, one section per line."""
    logger = logging.getLogger(LOGGER_NAME)
    log_section("Configuration")
    for section, values in _sanitize_config(config).items():
        if isinstance(values, dict):
            settings = ', '.join(f"{key}={value}" for key, value in values.items())
            logger.info(f"{section}: {settings}")


def _sanitize_config(value: Any, key: str = '') -> Any:
    """Return a copy of `value` with string secrets replaced by a placeholder."""
    if isinstance(value, dict):
        return {k: _sanitize_config(v, k) for k, v in value.items()}
    if isinstance(value, list):
        return [_sanitize_config(item, key) for item in value]
    if isinstance(value, str) and any(part in str(key).lower() for part in SECRET_KEY_PARTS):
        return REDACTED
    return value


__all__ = ['LOGGER_NAME', 'setup_logging', 'ProgressTracker', 'log_section', 'log_config']
