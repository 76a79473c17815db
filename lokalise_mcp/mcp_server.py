"""
Lokalise MCP Server

Exposes Lokalise key and translation management as MCP tools over stdio:
add/update/delete keys, manage translations, search keys and list
projects. Every tool answers with a single text payload; failures are
returned as text starting with "Error: " instead of protocol errors.
"""

from typing import Dict, List, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, ConfigDict, Field

from lokalise_mcp.api.exceptions import LokaliseError
from lokalise_mcp.config import DEFAULT_SEARCH_LIMIT, AppConfig, load_config
from lokalise_mcp.core import operations as ops
from lokalise_mcp.formatting import format_projects, format_search_response, to_json
from lokalise_mcp.logger import configure_logging, get_logger

logger = get_logger(__name__)

MISSING_API_KEY = "Error: LOKALISE_API_KEY environment variable is required."

_config: Optional[AppConfig] = None


def configure(config: AppConfig):
    """Set the configuration used by every tool call."""
    global _config
    _config = config


def get_config() -> AppConfig:
    """The process configuration, loaded from the environment on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _error(e: Exception) -> str:
    if isinstance(e, LokaliseError):
        logger.warning(f"Tool call failed: {e}")
    else:
        logger.exception(f"Unexpected tool failure: {e}")
    return f"Error: {e}" if str(e) else "Error: Unknown error occurred"


# ---------------------------------------------------------------------------
# Tool input schemas
# ---------------------------------------------------------------------------

class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class KeyInput(_WireModel):
    key_name: str = Field(alias="keyName", description="Key to add")
    default_value: Optional[str] = Field(None, alias="defaultValue", description="Default value for the key (optional)")
    platforms: Optional[List[str]] = Field(None, description="Platforms (web, ios, android, other). Optional.")
    description: Optional[str] = Field(None, description="Description for the key (optional)")
    tags: Optional[List[str]] = Field(None, description="Tags for the key (optional)")

    def to_operation(self) -> ops.NewKey:
        return ops.NewKey(
            key_name=self.key_name,
            default_value=self.default_value,
            platforms=self.platforms,
            description=self.description,
            tags=self.tags,
        )


class KeyUpdateInput(_WireModel):
    key_name: str = Field(alias="keyName", description="Name of the existing key to update")
    platforms: Optional[List[str]] = Field(None, description="New platforms (web, ios, android, other). Optional.")
    description: Optional[str] = Field(None, description="New description for the key (optional)")
    tags: Optional[List[str]] = Field(None, description="New tags for the key (optional)")
    translations: Optional[Dict[str, str]] = Field(
        None, description="Translations for different languages (en, de supported)"
    )

    def to_operation(self) -> ops.KeyUpdate:
        return ops.KeyUpdate(
            key_name=self.key_name,
            platforms=self.platforms,
            description=self.description,
            tags=self.tags,
            translations=self.translations,
        )


class KeyReferenceInput(_WireModel):
    key_name: str = Field(alias="keyName", description="Name of the key to delete")


class TranslationInput(_WireModel):
    key_name: str = Field(alias="keyName", description="Name of the existing key")
    translations: Dict[str, str] = Field(description="Translations for different languages (en, de supported)")
    mark_as_reviewed: bool = Field(False, alias="markAsReviewed", description="Mark translations as reviewed (optional)")

    def to_operation(self) -> ops.KeyTranslations:
        return ops.KeyTranslations(
            key_name=self.key_name,
            translations=self.translations,
            mark_as_reviewed=self.mark_as_reviewed,
        )


class SearchCriteriaInput(_WireModel):
    key_name_pattern: Optional[str] = Field(
        None, alias="keyNamePattern",
        description='Partial match in key name (e.g., "error" finds "error_message", "user_error")',
    )
    key_name_exact: Optional[str] = Field(None, alias="keyNameExact", description="Exact key name match")
    tags: Optional[List[str]] = Field(None, description='Must have all these tags (e.g., ["urgent", "frontend"])')
    platforms: Optional[List[str]] = Field(
        None, description="Must be available on these platforms (web, ios, android, other)"
    )
    translation_status: Optional[str] = Field(
        None, alias="translationStatus",
        description="Filter by translation status: translated=has text, untranslated=missing text, "
                    "fuzzy=needs review, reviewed=approved, any=all",
    )
    languages: Optional[List[str]] = Field(
        None, description="Check translation status for these languages (en, de supported)"
    )
    has_description: Optional[bool] = Field(
        None, alias="hasDescription",
        description="Filter keys that have (true) or don't have (false) descriptions",
    )
    description_pattern: Optional[str] = Field(
        None, alias="descriptionPattern", description="Partial match in key description"
    )
    created_after: Optional[str] = Field(
        None, alias="createdAfter", description="Find keys created after this date (ISO format: 2024-01-01)"
    )
    created_before: Optional[str] = Field(
        None, alias="createdBefore", description="Find keys created before this date (ISO format: 2024-12-31)"
    )
    modified_after: Optional[str] = Field(
        None, alias="modifiedAfter", description="Find keys modified after this date (ISO format: 2024-01-01)"
    )
    modified_before: Optional[str] = Field(
        None, alias="modifiedBefore", description="Find keys modified before this date (ISO format: 2024-12-31)"
    )

    def to_wire(self) -> Dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# MCP Server
# ---------------------------------------------------------------------------

mcp = FastMCP(
    "lokalise-mcp-server",
    instructions=(
        "Manage translation keys in Lokalise projects. Projects and keys are "
        "addressed by name. Use search_available_projects to find project names "
        "and search_lokalise_keys before updating or deleting keys."
    ),
)


@mcp.tool()
async def add_lokalise_keys(projectName: str, keys: List[KeyInput]) -> str:  # noqa: N803
    """Add multiple translation keys to a Lokalise project using structured input.

    Args:
        projectName: Lokalise project name
        keys: Array of keys to add
    """
    config = get_config()
    if not config.has_api_key:
        return MISSING_API_KEY
    if not projectName or not keys:
        return "Error: projectName and at least one key are required."

    try:
        result = await ops.add_keys_to_project(
            config, projectName, [key.to_operation() for key in keys]
        )
    except Exception as e:
        return _error(e)
    return f'Successfully added {len(keys)} key(s) to project "{projectName}". Result: {to_json(result)}'


@mcp.tool()
async def update_lokalise_keys(projectName: str, keys: List[KeyUpdateInput]) -> str:  # noqa: N803
    """Update existing translation keys in a Lokalise project with new properties and translations.

    Args:
        projectName: Lokalise project name
        keys: Array of keys to update
    """
    config = get_config()
    if not config.has_api_key:
        return MISSING_API_KEY
    if not projectName or not keys:
        return "Error: projectName and at least one key are required."

    try:
        result = await ops.update_keys_in_project(
            config, projectName, [key.to_operation() for key in keys]
        )
    except Exception as e:
        return _error(e)
    return f'Successfully updated {len(keys)} key(s) in project "{projectName}". Result: {to_json(result)}'


@mcp.tool()
async def delete_lokalise_keys(projectName: str, keys: List[KeyReferenceInput]) -> str:  # noqa: N803
    """Delete translation keys from a Lokalise project.

    Args:
        projectName: Lokalise project name
        keys: Array of keys to delete
    """
    config = get_config()
    if not config.has_api_key:
        return MISSING_API_KEY
    if not projectName or not keys:
        return "Error: projectName and at least one key are required."

    try:
        result = await ops.delete_keys_from_project(
            config, projectName, [key.key_name for key in keys]
        )
    except Exception as e:
        return _error(e)
    # keys_removed is a boolean flag, not a count
    return (
        f'Successfully deleted {len(keys)} key(s) from project "{projectName}". '
        f"Keys removed: {str(bool(result.get('keys_removed'))).lower()}. Result: {to_json(result)}"
    )


@mcp.tool()
async def manage_lokalise_translations(projectName: str, translations: List[TranslationInput]) -> str:  # noqa: N803
    """Manage translations for existing keys in multiple languages (German and English focus).

    Args:
        projectName: Lokalise project name
        translations: Array of translation updates
    """
    config = get_config()
    if not config.has_api_key:
        return MISSING_API_KEY
    if not projectName or not translations:
        return "Error: projectName and at least one translation item are required."

    try:
        result = await ops.manage_translations(
            config, projectName, [item.to_operation() for item in translations]
        )
    except Exception as e:
        return _error(e)
    return (
        f"Successfully managed translations for {len(translations)} key(s) in project "
        f'"{projectName}". Processed {result["summary"]["translationsProcessed"]} translation(s). '
        f"Result: {to_json(result)}"
    )


@mcp.tool()
async def search_lokalise_keys(
    projectName: str,  # noqa: N803
    criteria: SearchCriteriaInput,
    limit: Optional[int] = None,
) -> str:
    """Search for translation keys in a Lokalise project based on various criteria like name patterns, tags, platforms, translation status, etc.

    Args:
        projectName: Lokalise project name
        criteria: Search criteria to filter keys
        limit: Maximum number of results to return (default: 50, max: 200)
    """
    config = get_config()
    if not config.has_api_key:
        return MISSING_API_KEY
    if not projectName or criteria is None:
        return "Error: projectName and search criteria are required."

    try:
        result = await ops.search_keys_in_project(
            config,
            projectName,
            criteria.to_wire(),
            limit if limit is not None else DEFAULT_SEARCH_LIMIT,
        )
    except Exception as e:
        return _error(e)
    return format_search_response(projectName, result)


@mcp.tool()
async def search_available_projects(searchTerm: Optional[str] = None) -> str:  # noqa: N803
    """Search for available Lokalise projects that you have access to.

    Args:
        searchTerm: Optional search term to filter projects by name or description
    """
    config = get_config()
    if not config.has_api_key:
        return MISSING_API_KEY

    try:
        projects = await ops.search_available_projects(config, searchTerm)
    except Exception as e:
        return _error(e)
    return format_projects(projects, searchTerm)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    config = load_config()
    configure_logging(config)
    configure(config)
    logger.info("Lokalise MCP server started")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
