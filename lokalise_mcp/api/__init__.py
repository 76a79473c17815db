"""
API module - Lokalise REST API gateway

This module provides:
- LokaliseClient: async client for projects, keys and translations
- Typed views over API payloads (Project, Key, KeyName, Translation, Page)
- The exception hierarchy shared by all layers
"""

from lokalise_mcp.api.exceptions import (
    LokaliseError,
    InvalidInputError,
    NotFoundError,
    ApiError,
)
from lokalise_mcp.api.models import (
    KeyName,
    PlainKeyName,
    PerPlatformKeyName,
    Project,
    Key,
    Translation,
    Page,
    parse_timestamp,
    count_words,
)
from lokalise_mcp.api.client import LokaliseClient, create_lokalise_client

__all__ = [
    'LokaliseError',
    'InvalidInputError',
    'NotFoundError',
    'ApiError',
    'KeyName',
    'PlainKeyName',
    'PerPlatformKeyName',
    'Project',
    'Key',
    'Translation',
    'Page',
    'parse_timestamp',
    'count_words',
    'LokaliseClient',
    'create_lokalise_client',
]
