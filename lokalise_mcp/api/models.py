"""
Typed views over Lokalise API payloads.

The remote API is loosely typed: `key_name` is either a plain string or a
per-platform mapping, optional fields may be missing or null, and timestamps
come as '2018-12-31 12:00:00 (Etc/UTC)' strings next to epoch seconds. The
dataclasses here normalize that once, at the gateway boundary.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")

_ZONE_SUFFIX = re.compile(r"\s*\([^)]*\)\s*$")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a Lokalise or ISO-8601 timestamp into an aware UTC datetime.

    Accepts epoch seconds, '2018-12-31 12:00:00 (Etc/UTC)', '2024-01-01',
    '2024-01-01T10:00:00Z'. Naive values are taken as UTC.

    Returns:
        datetime, or None when the value cannot be parsed
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str) or not value.strip():
        return None

    text = _ZONE_SUFFIX.sub("", value.strip())
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def count_words(text: Optional[str]) -> int:
    """Whitespace-delimited token count; 0 for empty or missing text."""
    return len(text.split()) if text else 0


# ============================================================
# Key names
# ============================================================

class KeyName:
    """
    A key's name as returned by the remote API.

    Comparison rule shared by key resolution and search: a name matches a
    target when ANY of its values does. `display` is the plain string, or the
    first platform value for per-platform names.
    """

    def values(self) -> List[str]:
        raise NotImplementedError

    @property
    def raw(self) -> Union[str, Dict[str, str]]:
        raise NotImplementedError

    @property
    def display(self) -> str:
        values = self.values()
        return values[0] if values else ""

    def matches(self, name: str) -> bool:
        """Exact, case-sensitive equality against any value."""
        return any(value == name for value in self.values())

    def contains(self, pattern: str) -> bool:
        """Case-insensitive substring match against any value."""
        needle = pattern.lower()
        return any(needle in value.lower() for value in self.values())

    @staticmethod
    def from_raw(raw: Any) -> "KeyName":
        if isinstance(raw, dict):
            return PerPlatformKeyName({
                str(platform): str(value)
                for platform, value in raw.items()
                if value is not None
            })
        if raw is None:
            return PlainKeyName("")
        return PlainKeyName(str(raw))

    def __str__(self):
        return self.display


@dataclass(frozen=True)
class PlainKeyName(KeyName):
    value: str

    def values(self) -> List[str]:
        return [self.value]

    @property
    def raw(self) -> str:
        return self.value


@dataclass(frozen=True)
class PerPlatformKeyName(KeyName):
    names: Dict[str, str]

    def values(self) -> List[str]:
        return list(self.names.values())

    @property
    def raw(self) -> Dict[str, str]:
        return dict(self.names)

    def __hash__(self):
        return hash(tuple(self.names.items()))


# ============================================================
# Remote entities
# ============================================================

@dataclass
class Project:
    """A Lokalise project (read only)."""
    project_id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None
    created_by: Optional[int] = None
    created_by_email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            project_id=str(data.get("project_id", "")),
            name=data.get("name") or "",
            description=data.get("description") or None,
            created_at=data.get("created_at"),
            created_by=data.get("created_by"),
            created_by_email=data.get("created_by_email"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at,
            "created_by": self.created_by,
            "created_by_email": self.created_by_email,
        }


@dataclass
class Translation:
    """One language's text for a key."""
    translation_id: Optional[int]
    key_id: Optional[int]
    language_iso: str
    translation: str = ""
    is_fuzzy: bool = False
    is_reviewed: bool = False

    @property
    def word_count(self) -> int:
        return count_words(self.translation)

    @property
    def is_blank(self) -> bool:
        return not self.translation or not self.translation.strip()

    @classmethod
    def from_dict(cls, data: Dict[str, Any], key_id: Optional[int] = None) -> "Translation":
        return cls(
            translation_id=data.get("translation_id"),
            key_id=data.get("key_id", key_id),
            language_iso=data.get("language_iso") or "",
            translation=data.get("translation") or "",
            is_fuzzy=bool(data.get("is_fuzzy")),
            is_reviewed=bool(data.get("is_reviewed")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "language_iso": self.language_iso,
            "translation": self.translation,
            "is_fuzzy": self.is_fuzzy,
            "is_reviewed": self.is_reviewed,
            "words": self.word_count,
        }


@dataclass
class Key:
    """A translation key with its platforms, tags and (optionally) translations."""
    key_id: int
    key_name: KeyName
    platforms: List[str] = field(default_factory=list)
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    modified_at: Optional[str] = None
    created_at_timestamp: Optional[int] = None
    modified_at_timestamp: Optional[int] = None
    translations: List[Translation] = field(default_factory=list)

    @property
    def created(self) -> Optional[datetime]:
        if self.created_at_timestamp is not None:
            return parse_timestamp(self.created_at_timestamp)
        return parse_timestamp(self.created_at)

    @property
    def modified(self) -> Optional[datetime]:
        """Last modification time, falling back to creation when the remote omits it."""
        if self.modified_at_timestamp is not None:
            return parse_timestamp(self.modified_at_timestamp)
        return parse_timestamp(self.modified_at) or self.created

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Key":
        key_id = data.get("key_id")
        return cls(
            key_id=key_id,
            key_name=KeyName.from_raw(data.get("key_name")),
            platforms=list(data.get("platforms") or []),
            description=data.get("description"),
            tags=list(data.get("tags") or []),
            created_at=data.get("created_at"),
            modified_at=data.get("modified_at"),
            created_at_timestamp=data.get("created_at_timestamp"),
            modified_at_timestamp=data.get("modified_at_timestamp"),
            translations=[
                Translation.from_dict(item, key_id=key_id)
                for item in (data.get("translations") or [])
            ],
        )


@dataclass
class Page(Generic[T]):
    """One page of a paginated listing."""
    items: List[T]
    page: int
    limit: int
    page_count: Optional[int] = None
    total_count: Optional[int] = None

    @property
    def has_more(self) -> bool:
        """
        A short page is the last page. A full page is the last page only when
        the remote says so through the page-count header.
        """
        if len(self.items) < self.limit:
            return False
        if self.page_count is not None:
            return self.page < self.page_count
        return True

    def __len__(self):
        return len(self.items)
