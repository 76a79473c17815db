"""
Key and translation operations.

Each operation:
1. checks its preconditions (credential, project name, non-empty input)
   before any remote call,
2. resolves the project (and keys) by name,
3. issues the corresponding writes, one request at a time.

Operations take the AppConfig explicitly. Tests and long-lived callers may
pass an already open LokaliseClient; otherwise one is opened and closed
around the operation.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence

from lokalise_mcp.api.client import LokaliseClient, create_lokalise_client
from lokalise_mcp.api.exceptions import ApiError, InvalidInputError, NotFoundError
from lokalise_mcp.api.models import Key, Project, Translation
from lokalise_mcp.config import ALLOWED_PLATFORMS, DEFAULT_SEARCH_LIMIT, PAGE_SIZE, AppConfig
from lokalise_mcp.core.criteria import normalize_criteria
from lokalise_mcp.core.resolver import find_key_by_name, find_project_by_name, list_all_projects
from lokalise_mcp.core.search import clamp_limit, search_keys
from lokalise_mcp import language_codes as lc
from lokalise_mcp.logger import get_logger

logger = get_logger(__name__)


# ============================================================
# Operation inputs
# ============================================================

def _optional_list(data: Mapping[str, Any], name: str) -> Optional[List[str]]:
    value = data.get(name)
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise InvalidInputError(
            f"{name} must be a list of strings.",
            details={name: value},
        )
    return list(value)


def _key_name(data: Mapping[str, Any]) -> str:
    value = data.get("keyName")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidInputError("keyName must be a string.", details={"keyName": value})
    return value


@dataclass
class NewKey:
    """A key to create."""
    key_name: str
    default_value: Optional[str] = None
    platforms: Optional[List[str]] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NewKey":
        return cls(
            key_name=_key_name(data),
            default_value=data.get("defaultValue"),
            platforms=_optional_list(data, "platforms"),
            description=data.get("description"),
            tags=_optional_list(data, "tags"),
        )


@dataclass
class KeyUpdate:
    """Changes to an existing key; None fields are left untouched."""
    key_name: str
    platforms: Optional[List[str]] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    translations: Optional[Dict[str, str]] = None


@dataclass
class KeyTranslations:
    """New translation texts for one key, by language code."""
    key_name: str
    translations: Dict[str, str] = field(default_factory=dict)
    mark_as_reviewed: bool = False


# ============================================================
# Helpers
# ============================================================

def _require_api_key(config: AppConfig):
    if not config.has_api_key:
        raise InvalidInputError("LOKALISE_API_KEY not set in .env file or input.")


def _require(project_name: Optional[str], items: Any, what: str):
    if not isinstance(project_name, str) or not project_name.strip() or not isinstance(items, (list, tuple)) or not items:
        raise InvalidInputError(f"Missing projectName or {what}.")


@asynccontextmanager
async def _client_scope(config: AppConfig, client: Optional[LokaliseClient]) -> AsyncIterator[LokaliseClient]:
    """Yield the given client, or open (and later close) one from config."""
    if client is not None:
        yield client
        return
    async with create_lokalise_client(config) as owned:
        yield owned


async def _resolve_project(client: LokaliseClient, project_name: str) -> Project:
    project = await find_project_by_name(client, project_name)
    if not project:
        raise NotFoundError(
            f'Project named "{project_name}" not found.',
            details={"projectName": project_name},
        )
    return project


async def _resolve_key(client: LokaliseClient, project: Project, key_name: str) -> Key:
    key = await find_key_by_name(client, project.project_id, key_name)
    if not key:
        raise NotFoundError(
            f'Key named "{key_name}" not found in project "{project.name}".',
            details={"projectName": project.name, "keyName": key_name},
        )
    return key


def _valid_platforms(platforms: Sequence[str]) -> List[str]:
    return [p for p in platforms if p in ALLOWED_PLATFORMS]


def _supported_translations(translations: Mapping[str, Optional[str]]) -> List[Dict[str, str]]:
    """Translation entries for supported languages, in the caller's order."""
    entries = []
    for language_iso, text in translations.items():
        if text is None:
            continue
        if not lc.is_supported(language_iso):
            logger.warning(
                f"Unsupported language ignored: {language_iso}. "
                f"Supported languages: {', '.join(lc.SUPPORTED_LANGUAGES)}"
            )
            continue
        entries.append({"language_iso": language_iso, "translation": text})
    return entries


def _build_create_payload(key: NewKey) -> Dict[str, Any]:
    if key.platforms:
        platforms = _valid_platforms(key.platforms)
    else:
        platforms = list(ALLOWED_PLATFORMS)

    if not platforms:
        raise InvalidInputError(
            f"No valid platforms specified for key: {key.key_name}. "
            f"Valid platforms are: {', '.join(ALLOWED_PLATFORMS)}",
            details={"keyName": key.key_name, "platforms": key.platforms},
        )

    payload: Dict[str, Any] = {
        "key_name": key.key_name,
        "platforms": platforms,
    }
    if key.default_value:
        payload["translations"] = [
            {"language_iso": lc.DEFAULT_LANGUAGE, "translation": key.default_value}
        ]
    if key.description:
        payload["description"] = key.description
    if key.tags:
        payload["tags"] = list(key.tags)
    return payload


def _build_update_payload(key_id: int, update: KeyUpdate) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"key_id": key_id}

    if update.platforms:
        platforms = _valid_platforms(update.platforms)
        if not platforms:
            raise InvalidInputError(
                f"No valid platforms specified for key: {update.key_name}",
                details={"keyName": update.key_name, "platforms": update.platforms},
            )
        payload["platforms"] = platforms

    if update.description is not None:
        payload["description"] = update.description

    if update.tags is not None:
        payload["tags"] = list(update.tags)

    if update.translations:
        entries = _supported_translations(update.translations)
        if entries:
            payload["translations"] = entries

    return payload


# ============================================================
# Mutation operations
# ============================================================

async def add_keys_to_project(
    config: AppConfig,
    project_name: str,
    keys: Sequence[NewKey],
    client: Optional[LokaliseClient] = None,
) -> Dict[str, Any]:
    """
    Create keys in a project with one batched request.

    Returns:
        The remote create response ({"project_id", "keys", "errors"?})

    Raises:
        InvalidInputError: missing input, blank key name, no valid platforms
        NotFoundError: the project does not exist
        ApiError: remote failure; a 400 is reported as invalid key data
    """
    _require_api_key(config)
    _require(project_name, keys, "keys")

    for key in keys:
        if not isinstance(key.key_name, str) or not key.key_name.strip():
            raise InvalidInputError("Key name cannot be empty or contain only whitespace.")

    payloads = [_build_create_payload(key) for key in keys]

    async with _client_scope(config, client) as api:
        project = await _resolve_project(api, project_name)
        logger.info(f"Adding {len(payloads)} key(s) to project '{project.name}' ({project.project_id})")
        try:
            return await api.create_keys(project.project_id, payloads)
        except ApiError as e:
            if e.status_code == 400:
                raise ApiError(
                    f"Invalid key data: {e.remote_message or e}",
                    status_code=e.status_code,
                    body=e.body,
                ) from e
            raise


async def update_keys_in_project(
    config: AppConfig,
    project_name: str,
    keys: Sequence[KeyUpdate],
    client: Optional[LokaliseClient] = None,
) -> Dict[str, Any]:
    """Update existing keys (resolved by name) with one batched request."""
    _require_api_key(config)
    _require(project_name, keys, "keys")

    async with _client_scope(config, client) as api:
        project = await _resolve_project(api, project_name)

        payloads = []
        for update in keys:
            existing = await _resolve_key(api, project, update.key_name)
            payloads.append(_build_update_payload(existing.key_id, update))

        logger.info(f"Updating {len(payloads)} key(s) in project '{project.name}'")
        return await api.update_keys(project.project_id, payloads)


async def delete_keys_from_project(
    config: AppConfig,
    project_name: str,
    key_names: Sequence[str],
    client: Optional[LokaliseClient] = None,
) -> Dict[str, Any]:
    """
    Delete keys (resolved by name) with one batched request.

    Every name is resolved before anything is deleted. The response's
    `keys_removed` is a boolean.
    """
    _require_api_key(config)
    _require(project_name, key_names, "keys")

    async with _client_scope(config, client) as api:
        project = await _resolve_project(api, project_name)

        key_ids = []
        for key_name in key_names:
            existing = await _resolve_key(api, project, key_name)
            key_ids.append(existing.key_id)

        logger.info(f"Deleting {len(key_ids)} key(s) from project '{project.name}'")
        return await api.delete_keys(project.project_id, key_ids)


async def _key_translations(api: LokaliseClient, project_id: str, key_id: int) -> List[Translation]:
    translations: List[Translation] = []
    async for page in api.iter_pages(
        api.list_translations, project_id, limit=PAGE_SIZE, filter_key_id=key_id
    ):
        translations.extend(page.items)
    return translations


async def manage_translations(
    config: AppConfig,
    project_name: str,
    items: Sequence[KeyTranslations],
    client: Optional[LokaliseClient] = None,
) -> Dict[str, Any]:
    """
    Create or update translations for existing keys.

    An existing translation row for a language is updated in place; when
    there is none, the key itself is updated with the new translation (the
    only way the API creates a first translation for a language).
    """
    _require_api_key(config)
    _require(project_name, items, "translations")

    results: List[Dict[str, Any]] = []

    async with _client_scope(config, client) as api:
        project = await _resolve_project(api, project_name)

        for item in items:
            key = await _resolve_key(api, project, item.key_name)
            existing = await _key_translations(api, project.project_id, key.key_id)
            by_language = {}
            for translation in existing:
                by_language.setdefault(translation.language_iso, translation)

            for entry in _supported_translations(item.translations):
                language = entry["language_iso"]
                text = entry["translation"]
                current = by_language.get(language)

                if current and current.translation_id is not None:
                    update_result = await api.update_translation(
                        project.project_id,
                        current.translation_id,
                        {"translation": text, "is_reviewed": item.mark_as_reviewed},
                    )
                    results.append({
                        "keyName": item.key_name,
                        "language": language,
                        "action": "updated",
                        "translationId": current.translation_id,
                        "result": update_result,
                    })
                else:
                    await api.update_keys(
                        project.project_id,
                        [{"key_id": key.key_id, "translations": [entry]}],
                    )
                    results.append({
                        "keyName": item.key_name,
                        "language": language,
                        "action": "created",
                        "keyId": key.key_id,
                    })

    logger.info(f"Processed {len(results)} translation(s) for {len(items)} key(s) in '{project_name}'")
    return {
        "project_id": project.project_id,
        "results": results,
        "summary": {
            "keysProcessed": len(items),
            "translationsProcessed": len(results),
        },
    }


# ============================================================
# Read operations
# ============================================================

async def search_keys_in_project(
    config: AppConfig,
    project_name: str,
    criteria: Any,
    limit: Any = DEFAULT_SEARCH_LIMIT,
    client: Optional[LokaliseClient] = None,
) -> Dict[str, Any]:
    """
    Search a project's keys.

    Args:
        criteria: SearchCriteria or a camelCase mapping
        limit: Result cap, default 50, clamped to 200

    Returns:
        {"results", "total_found", "criteria_used", "project_id", "project_name"}
    """
    _require_api_key(config)
    if not isinstance(project_name, str) or not project_name.strip() or criteria is None:
        raise InvalidInputError("Missing projectName or search criteria.")
    limit = clamp_limit(limit)

    normalized = normalize_criteria(criteria)

    async with _client_scope(config, client) as api:
        project = await _resolve_project(api, project_name)
        results = await search_keys(api, project.project_id, normalized, limit)

    return {
        "results": [result.to_dict() for result in results],
        "total_found": len(results),
        "criteria_used": normalized.to_dict(),
        "project_id": project.project_id,
        "project_name": project.name,
    }


async def search_available_projects(
    config: AppConfig,
    search_term: Optional[str] = None,
    client: Optional[LokaliseClient] = None,
) -> List[Project]:
    """All projects, optionally filtered by a term in the name or description."""
    _require_api_key(config)

    async with _client_scope(config, client) as api:
        projects = await list_all_projects(api)

    if search_term and search_term.strip():
        term = search_term.strip().lower()
        projects = [
            project for project in projects
            if term in project.name.lower()
            or (project.description and term in project.description.lower())
        ]
    return projects


async def find_project_id_by_name(
    config: AppConfig,
    project_name: str,
    client: Optional[LokaliseClient] = None,
) -> Optional[str]:
    """Resolve a project name to its ID, or None."""
    _require_api_key(config)
    if not project_name:
        raise InvalidInputError("Missing projectName.")

    async with _client_scope(config, client) as api:
        project = await find_project_by_name(api, project_name)
    return project.project_id if project else None
