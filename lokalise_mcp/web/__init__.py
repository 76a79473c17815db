"""Web application package for the Lokalise key API."""

from typing import Optional

from flask import Flask

from lokalise_mcp.config import AppConfig, load_config
from lokalise_mcp.logger import configure_logging


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """Application factory for the HTTP interface."""
    if config is None:
        config = load_config()
        configure_logging(config)

    from .app import build_app  # Import here to avoid circular imports

    return build_app(config)


__all__ = ["create_app"]
