"""
Core module - Key, translation and search operations

This module provides:
- resolver: project/key name resolution over paginated listings
- criteria: search criteria and their normalization
- search: the key search engine
- operations: add/update/delete keys, manage translations, search
- command: natural-language "add a key" command parsing
"""

from lokalise_mcp.core.command import ParsedCommand, parse_command
from lokalise_mcp.core.criteria import SearchCriteria, TranslationStatus, normalize_criteria
from lokalise_mcp.core.resolver import find_key_by_name, find_project_by_name, list_all_projects
from lokalise_mcp.core.search import (
    MatchResult,
    SearchResult,
    check_translation_status,
    evaluate_key_match,
    search_keys,
)
from lokalise_mcp.core.operations import (
    NewKey,
    KeyUpdate,
    KeyTranslations,
    add_keys_to_project,
    update_keys_in_project,
    delete_keys_from_project,
    manage_translations,
    search_keys_in_project,
    search_available_projects,
    find_project_id_by_name,
)
