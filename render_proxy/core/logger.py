"""
Centralized logging setup for the render proxy.

`setup_logging()` configures the root logger from the `logging` section of the
active configuration (console and rotating file handlers) and is called once
at application startup. `get_logger(name)` hands out module loggers and makes
sure some logging configuration exists even if startup has not run yet.
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from render_proxy.core.config import ConfigurationManager

# Relative log file paths are resolved against the repository root.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_logging_initialized = False


def setup_logging(config: Optional['ConfigurationManager'] = None) -> None:
    """
    Configures the root logger from the 'logging' configuration section.

    Falls back to `logging.basicConfig` when no configuration (or no logging
    section) is available. Calling it again after a successful setup is a no-op.

    Args:
        config (Optional[ConfigurationManager]): Configuration to read. If None,
            the global `config_manager` is used.
    """
    global _logging_initialized
    if _logging_initialized:
        logging.getLogger(__name__).debug("setup_logging: already initialized.")
        return

    if config is None:
        from render_proxy.core.config import config_manager
        config = config_manager

    log_settings: Optional[Dict[str, Any]] = config.get("logging")
    if not log_settings:
        logging.basicConfig(level=logging.INFO, format=DEFAULT_FORMAT)
        logging.warning("Logging setup: 'logging' section not found in configuration. Using basicConfig.")
        _logging_initialized = True
        return

    log_level_str = str(log_settings.get("level", "INFO")).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    log_format = log_settings.get("format", DEFAULT_FORMAT)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)
    formatter = logging.Formatter(log_format)
    handlers = log_settings.get("handlers", {}) or {}

    console_settings = handlers.get("console", {}) or {}
    if console_settings.get("enabled", False):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    file_settings = handlers.get("file", {}) or {}
    if file_settings.get("enabled", False):
        log_path = file_settings.get("path", "logs/render_proxy.log")
        if not os.path.isabs(log_path):
            log_path = os.path.join(PROJECT_ROOT, log_path)
        try:
            os.makedirs(os.path.dirname(log_path), exist_ok=True)
            file_handler = RotatingFileHandler(
                filename=log_path,
                maxBytes=int(file_settings.get("max_bytes", 10 * 1024 * 1024)),
                backupCount=int(file_settings.get("backup_count", 5)),
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            logging.error(f"Logging setup: failed to configure file logging at '{log_path}': {e}. File logging disabled.")

    _logging_initialized = True
    logging.info(f"Logging system initialized. Level: {log_level_str}.")


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger for `name`, typically the caller's `__name__`.

    If `setup_logging()` has not run yet, a plain `basicConfig` is applied so
    early messages are not lost; the later `setup_logging()` call replaces it.
    """
    if not _logging_initialized and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format=DEFAULT_FORMAT)
    return logging.getLogger(name)
