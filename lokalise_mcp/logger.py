import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Cache for log mode to avoid repeated environment reads
_log_mode_cache = None

# Loggers configured by get_logger, so mode changes can be re-applied
_managed_loggers = set()

# Set by configure_logging; until then the log file comes from the environment
_configured_log_file: Optional[Path] = None
_log_file_configured = False


def _get_log_mode() -> str:
    """Get log mode from configuration."""
    global _log_mode_cache
    if _log_mode_cache is not None:
        return _log_mode_cache

    try:
        from lokalise_mcp.config import get_log_mode
        _log_mode_cache = get_log_mode()
        return _log_mode_cache
    except Exception:
        # If config loading fails, default to 'info'
        return 'info'


def _get_log_file() -> Optional[Path]:
    if _log_file_configured:
        return _configured_log_file
    from lokalise_mcp.config import ENV_LOG_FILE
    raw = os.environ.get(ENV_LOG_FILE)
    return Path(raw) if raw else None


def _levels_for(log_mode: str):
    """Return (logger_level, console_level) for a log mode."""
    if log_mode == 'debug':
        return logging.DEBUG, logging.DEBUG
    if log_mode == 'off':
        # Off mode: a level higher than CRITICAL disables everything
        return logging.CRITICAL + 1, logging.CRITICAL + 1
    return logging.INFO, logging.INFO


def _apply_mode(logger: logging.Logger, log_mode: str):
    logger_level, console_level = _levels_for(log_mode)
    logger.setLevel(logger_level)
    log_format = logging.Formatter(LOG_FORMAT)

    log_file = _get_log_file()
    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]

    # File handler only when a log file is configured and logging is on
    if log_mode != 'off' and log_file and not file_handlers:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        f_handler = logging.FileHandler(log_file)
        f_handler.setLevel(logging.DEBUG)
        f_handler.setFormatter(log_format)
        logger.addHandler(f_handler)
    elif (log_mode == 'off' or not log_file) and file_handlers:
        for handler in file_handlers:
            handler.close()
            logger.removeHandler(handler)

    console_handlers = [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]
    if not console_handlers:
        # stderr: stdout carries the MCP stdio protocol
        c_handler = logging.StreamHandler(sys.stderr)
        c_handler.setFormatter(log_format)
        logger.addHandler(c_handler)
        console_handlers = [c_handler]
    for handler in console_handlers:
        handler.setLevel(console_level)


def _clear_log_mode_cache():
    """Clear the log mode cache and update all existing loggers (call this when the environment changes)."""
    global _log_mode_cache, _configured_log_file, _log_file_configured
    _log_mode_cache = None
    _configured_log_file = None
    _log_file_configured = False

    log_mode = _get_log_mode()
    for logger_name in list(_managed_loggers):
        _apply_mode(logging.getLogger(logger_name), log_mode)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    _apply_mode(logger, _get_log_mode())
    _managed_loggers.add(name)
    return logger


def configure_logging(config) -> None:
    """Apply an AppConfig's log mode and log file to every managed logger."""
    global _log_mode_cache, _configured_log_file, _log_file_configured
    _log_mode_cache = config.log_mode
    _configured_log_file = Path(config.log_file) if config.log_file else None
    _log_file_configured = True

    for logger_name in list(_managed_loggers):
        _apply_mode(logging.getLogger(logger_name), config.log_mode)
