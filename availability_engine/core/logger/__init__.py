"""
Engine logger: console plus optional rotating JSON file.

Usage:
    from availability_engine.core.logger import configure, LoggerConfig

    # Once at startup (the API lifespan does this)
    configure()                                   # LOG_* env vars
    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/availability"))

    # In modules
    logger = logging.getLogger(__name__)
    logger.info("Slot blocked", extra={"date": "2026-11-02", "slot_label": "7:00 PM"})
"""
from availability_engine.core.logger.config import LoggerConfig
from availability_engine.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from availability_engine.core.logger.setup import (
    build_console_handler,
    build_rotating_file_handler,
    configure,
    get_logger,
)

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
    "build_rotating_file_handler",
    "build_console_handler",
]
