"""
Search criteria for the key search engine.

SearchCriteria is an immutable set of optional, independent predicates.
Tool and HTTP payloads use camelCase names (keyNamePattern, createdAfter,
...); from_dict/to_dict translate between those and the dataclass.

normalize_criteria never raises: anything invalid is logged and the
criterion is treated as absent.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from lokalise_mcp.api.models import parse_timestamp
from lokalise_mcp.config import ALLOWED_PLATFORMS, TRANSLATION_STATUSES
from lokalise_mcp import language_codes as lc
from lokalise_mcp.logger import get_logger

logger = get_logger(__name__)


class TranslationStatus(str, Enum):
    TRANSLATED = "translated"
    UNTRANSLATED = "untranslated"
    FUZZY = "fuzzy"
    REVIEWED = "reviewed"
    ANY = "any"


@dataclass(frozen=True)
class SearchCriteria:
    """Composite key filter; every supplied field must hold (logical AND)."""
    key_name_pattern: Optional[str] = None
    key_name_exact: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    platforms: Optional[Tuple[str, ...]] = None
    translation_status: Optional[str] = None
    languages: Optional[Tuple[str, ...]] = None
    has_description: Optional[bool] = None
    description_pattern: Optional[str] = None
    created_after: Optional[str] = None
    created_before: Optional[str] = None
    modified_after: Optional[str] = None
    modified_before: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SearchCriteria":
        """
        Build criteria from a camelCase (or snake_case) mapping.

        Values of the wrong type are coerced when unambiguous (a single
        string where a list is expected, "true"/"false" for booleans) and
        dropped with a warning otherwise.
        """
        if data is None:
            return cls()
        if isinstance(data, SearchCriteria):
            return data
        if not isinstance(data, Mapping):
            logger.warning(f"Search criteria must be an object, got {type(data).__name__}; ignoring")
            return cls()

        values: Dict[str, Any] = {}
        for name, value in data.items():
            attr = _WIRE_TO_ATTR.get(name, name if name in _ATTRS else None)
            if attr is None:
                logger.warning(f"Unknown search criterion ignored: {name}")
                continue
            if value is None:
                continue
            coerced = _COERCERS[attr](name, value)
            if coerced is not None:
                values[attr] = coerced
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """camelCase mapping of the criteria that are set."""
        result: Dict[str, Any] = {}
        for attr, wire in _ATTR_TO_WIRE.items():
            value = getattr(self, attr)
            if value is None:
                continue
            result[wire] = list(value) if isinstance(value, tuple) else value
        return result

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


_ATTR_TO_WIRE = {
    "key_name_pattern": "keyNamePattern",
    "key_name_exact": "keyNameExact",
    "tags": "tags",
    "platforms": "platforms",
    "translation_status": "translationStatus",
    "languages": "languages",
    "has_description": "hasDescription",
    "description_pattern": "descriptionPattern",
    "created_after": "createdAfter",
    "created_before": "createdBefore",
    "modified_after": "modifiedAfter",
    "modified_before": "modifiedBefore",
}
_WIRE_TO_ATTR = {wire: attr for attr, wire in _ATTR_TO_WIRE.items()}
_ATTRS = set(_ATTR_TO_WIRE)


def _as_string(name: str, value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    logger.warning(f"Invalid {name} ignored: expected a string, got {value!r}")
    return None


def _as_string_tuple(name: str, value: Any) -> Optional[Tuple[str, ...]]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple, set)):
        logger.warning(f"Invalid {name} ignored: expected a list of strings, got {value!r}")
        return None
    items = tuple(item for item in value if isinstance(item, str))
    if len(items) != len(value):
        logger.warning(f"Non-string {name} entries ignored: {[v for v in value if not isinstance(v, str)]}")
    return items


def _as_bool(name: str, value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    logger.warning(f"Invalid {name} ignored: expected true or false, got {value!r}")
    return None


_COERCERS = {
    "key_name_pattern": _as_string,
    "key_name_exact": _as_string,
    "tags": _as_string_tuple,
    "platforms": _as_string_tuple,
    "translation_status": _as_string,
    "languages": _as_string_tuple,
    "has_description": _as_bool,
    "description_pattern": _as_string,
    "created_after": _as_string,
    "created_before": _as_string,
    "modified_after": _as_string,
    "modified_before": _as_string,
}


def _valid_date(name: str, value: Optional[str], example: str) -> Optional[str]:
    if value is None:
        return None
    if parse_timestamp(value) is None:
        logger.warning(f"Invalid {name} date ignored: {value}. Use ISO format like: {example}")
        return None
    return value


def _split_platforms(platforms: Iterable[str]) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    valid = tuple(p for p in platforms if p in ALLOWED_PLATFORMS)
    invalid = tuple(p for p in platforms if p not in ALLOWED_PLATFORMS)
    return valid, invalid


def normalize_criteria(criteria: Any) -> SearchCriteria:
    """
    Validate and normalize search criteria.

    - platforms outside the allowed set are dropped
    - languages are restricted to the supported set and default to all of it
    - an unknown translationStatus is dropped
    - unparsable date bounds are dropped

    Args:
        criteria: SearchCriteria or a camelCase mapping

    Returns:
        The criteria that will actually be applied
    """
    validated = SearchCriteria.from_dict(criteria)
    changes: Dict[str, Any] = {}

    if validated.platforms:
        valid, invalid = _split_platforms(validated.platforms)
        if invalid:
            logger.warning(
                f"Invalid platforms ignored: {', '.join(invalid)}. "
                f"Valid platforms: {', '.join(ALLOWED_PLATFORMS)}"
            )
        changes["platforms"] = valid

    if validated.languages:
        supported, unsupported = lc.split_supported(validated.languages)
        if unsupported:
            logger.warning(
                f"Invalid languages ignored: {', '.join(unsupported)}. "
                f"Supported languages: {', '.join(lc.SUPPORTED_LANGUAGES)}"
            )
        changes["languages"] = tuple(supported) or tuple(lc.SUPPORTED_LANGUAGES)
    else:
        # Default to supported languages if none specified
        changes["languages"] = tuple(lc.SUPPORTED_LANGUAGES)

    if validated.translation_status is not None and validated.translation_status not in TRANSLATION_STATUSES:
        logger.warning(
            f"Invalid translation status ignored: {validated.translation_status}. "
            f"Valid values: {', '.join(TRANSLATION_STATUSES)}"
        )
        changes["translation_status"] = None

    changes["created_after"] = _valid_date("createdAfter", validated.created_after, "2024-01-01")
    changes["created_before"] = _valid_date("createdBefore", validated.created_before, "2024-12-31")
    changes["modified_after"] = _valid_date("modifiedAfter", validated.modified_after, "2024-01-01")
    changes["modified_before"] = _valid_date("modifiedBefore", validated.modified_before, "2024-12-31")

    return replace(validated, **changes)
