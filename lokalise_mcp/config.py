import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# Remote API configuration constants
DEFAULT_API_URL = "https://api.lokalise.com/api2"
DEFAULT_TIMEOUT = 30.0  # seconds, hard cutoff per request
API_TOKEN_HEADER = "X-Api-Token"

# Pagination constants
PAGE_SIZE = 100  # Server-enforced maximum per page
DEFAULT_SEARCH_LIMIT = 50
MAX_SEARCH_LIMIT = 200

# Key configuration constants
ALLOWED_PLATFORMS = ("web", "ios", "android", "other")
TRANSLATION_STATUSES = ("translated", "untranslated", "fuzzy", "reviewed", "any")

# HTTP surface
DEFAULT_PORT = 3000

LOG_MODES = ("off", "info", "debug")
DEFAULT_LOG_MODE = "info"

ENV_API_KEY = "LOKALISE_API_KEY"
ENV_API_URL = "LOKALISE_API_URL"
ENV_TIMEOUT = "LOKALISE_TIMEOUT"
ENV_PORT = "PORT"
ENV_LOG_MODE = "LOKALISE_LOG_MODE"
ENV_LOG_FILE = "LOKALISE_LOG_FILE"


@dataclass(frozen=True)
class AppConfig:
    """Process-wide configuration, built once and passed to every operation."""
    api_key: str = ""
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    port: int = DEFAULT_PORT
    log_mode: str = DEFAULT_LOG_MODE
    log_file: Optional[str] = None

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


def _warn(message: str):
    # Imported lazily, the logger reads its mode from this module.
    from lokalise_mcp.logger import get_logger
    get_logger(__name__).warning(message)


def _parse_port(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        _warn(f"Invalid {ENV_PORT} value ignored: {raw!r}. Using {DEFAULT_PORT}")
        return DEFAULT_PORT
    if not 0 < port < 65536:
        _warn(f"Out of range {ENV_PORT} value ignored: {port}. Using {DEFAULT_PORT}")
        return DEFAULT_PORT
    return port


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        _warn(f"Invalid {ENV_TIMEOUT} value ignored: {raw!r}. Using {DEFAULT_TIMEOUT}")
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        _warn(f"Non-positive {ENV_TIMEOUT} value ignored: {timeout}. Using {DEFAULT_TIMEOUT}")
        return DEFAULT_TIMEOUT
    return timeout


def get_log_mode(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the configured log mode, falling back to the default for unknown values."""
    environ = os.environ if environ is None else environ
    mode = (environ.get(ENV_LOG_MODE) or DEFAULT_LOG_MODE).strip().lower()
    return mode if mode in LOG_MODES else DEFAULT_LOG_MODE


def load_config(environ: Optional[Mapping[str, str]] = None, use_dotenv: bool = True) -> AppConfig:
    """
    Build the application configuration from the environment.

    Args:
        environ: Mapping to read instead of os.environ (tests)
        use_dotenv: Load a .env file into os.environ first

    Returns:
        AppConfig. A missing API key is not an error here; operations
        reject it before talking to the remote API.
    """
    if use_dotenv and environ is None:
        load_dotenv()
    environ = os.environ if environ is None else environ

    return AppConfig(
        api_key=(environ.get(ENV_API_KEY) or "").strip(),
        api_url=(environ.get(ENV_API_URL) or DEFAULT_API_URL).rstrip("/"),
        timeout=_parse_timeout(environ.get(ENV_TIMEOUT)),
        port=_parse_port(environ.get(ENV_PORT)),
        log_mode=get_log_mode(environ),
        log_file=environ.get(ENV_LOG_FILE) or None,
    )
