"""
Key search engine.

Pages through a project's keys (with translations) and evaluates each key
against every supplied criterion in a fixed order:

    keyNamePattern -> keyNameExact -> tags -> platforms -> hasDescription
    -> descriptionPattern -> translationStatus -> createdAfter
    -> createdBefore -> modifiedAfter -> modifiedBefore

Each criterion can veto a key on its own. Evaluation continues after a veto
so the reasons list is built the same way for every key, but a vetoed key
is never returned.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from lokalise_mcp.api.client import LokaliseClient
from lokalise_mcp.api.exceptions import InvalidInputError
from lokalise_mcp.api.models import Key, Translation, parse_timestamp
from lokalise_mcp.config import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT, PAGE_SIZE
from lokalise_mcp.core.criteria import SearchCriteria, TranslationStatus
from lokalise_mcp.logger import get_logger

logger = get_logger(__name__)


@dataclass
class MatchResult:
    """Outcome of evaluating one key against a criteria set."""
    matches: bool = True
    reasons: List[str] = field(default_factory=list)

    def check(self, passed: bool, reason: str):
        if passed:
            if reason:
                self.reasons.append(reason)
        else:
            self.matches = False


@dataclass
class SearchResult:
    """A matched key plus the reasons it matched."""
    key: Key
    match_reasons: List[str]

    def to_dict(self) -> Dict[str, Any]:
        key = self.key
        return {
            "key_id": key.key_id,
            "key_name": key.key_name.raw,
            "platforms": list(key.platforms),
            "description": key.description,
            "tags": list(key.tags),
            "created_at": key.created_at,
            # Lokalise doesn't always provide modified_at
            "modified_at": key.modified_at or key.created_at,
            "translations": [t.to_dict() for t in key.translations],
            "matchReasons": list(self.match_reasons),
        }


def clamp_limit(limit: Any) -> int:
    """
    Validate the result cap.

    Raises:
        InvalidInputError: limit is not a positive number
    """
    if limit is None:
        return DEFAULT_SEARCH_LIMIT
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        raise InvalidInputError(f"Limit must be a number, got {limit!r}.")
    if limit <= 0:
        raise InvalidInputError("Limit must be a positive number greater than 0.")
    # Fractions round up
    return min(math.ceil(limit), MAX_SEARCH_LIMIT)


def check_translation_status(
    translations: Sequence[Translation],
    status: TranslationStatus,
    languages: Sequence[str],
) -> Tuple[bool, str]:
    """
    Check translation status for specific languages.

    Returns:
        Tuple of (matches, reason). The reason is empty when there is no match
        and for the 'any' status.
    """
    relevant = [t for t in translations if t.language_iso in languages]
    language_list = ", ".join(languages)

    if status == TranslationStatus.TRANSLATED:
        passed = all(not t.is_blank for t in relevant)
        return passed, f"Fully translated in {language_list}" if passed else ""
    if status == TranslationStatus.UNTRANSLATED:
        passed = any(t.is_blank for t in relevant)
        return passed, f"Has untranslated content in {language_list}" if passed else ""
    if status == TranslationStatus.FUZZY:
        passed = any(t.is_fuzzy for t in relevant)
        return passed, f"Has fuzzy translations in {language_list}" if passed else ""
    if status == TranslationStatus.REVIEWED:
        passed = all(t.is_reviewed for t in relevant)
        return passed, f"All translations reviewed in {language_list}" if passed else ""
    return True, ""


def evaluate_key_match(key: Key, criteria: SearchCriteria) -> MatchResult:
    """Evaluate a key against normalized criteria. The key is only read."""
    result = MatchResult()

    if criteria.key_name_pattern:
        result.check(
            key.key_name.contains(criteria.key_name_pattern),
            f'Key name contains "{criteria.key_name_pattern}"',
        )

    if criteria.key_name_exact:
        result.check(
            key.key_name.matches(criteria.key_name_exact),
            f'Key name exactly matches "{criteria.key_name_exact}"',
        )

    if criteria.tags:
        key_tags = set(key.tags)
        result.check(
            all(tag in key_tags for tag in criteria.tags),
            f"Has tags: {', '.join(criteria.tags)}",
        )

    if criteria.platforms:
        key_platforms = set(key.platforms)
        result.check(
            all(platform in key_platforms for platform in criteria.platforms),
            f"Available on platforms: {', '.join(criteria.platforms)}",
        )

    if criteria.has_description is not None:
        has_desc = bool(key.description and key.description.strip())
        result.check(
            criteria.has_description == has_desc,
            "Has description" if has_desc else "No description",
        )

    if criteria.description_pattern:
        description = key.description or ""
        result.check(
            criteria.description_pattern.lower() in description.lower(),
            f'Description contains "{criteria.description_pattern}"',
        )

    if criteria.translation_status and criteria.translation_status != TranslationStatus.ANY:
        passed, reason = check_translation_status(
            key.translations,
            TranslationStatus(criteria.translation_status),
            criteria.languages or (),
        )
        result.check(passed, reason)

    # Date bounds are inclusive; a key without a timestamp fails them
    created = key.created
    if criteria.created_after:
        bound = parse_timestamp(criteria.created_after)
        result.check(
            created is not None and bound is not None and created >= bound,
            f"Created after {criteria.created_after}",
        )
    if criteria.created_before:
        bound = parse_timestamp(criteria.created_before)
        result.check(
            created is not None and bound is not None and created <= bound,
            f"Created before {criteria.created_before}",
        )

    modified = key.modified
    if criteria.modified_after:
        bound = parse_timestamp(criteria.modified_after)
        result.check(
            modified is not None and bound is not None and modified >= bound,
            f"Modified after {criteria.modified_after}",
        )
    if criteria.modified_before:
        bound = parse_timestamp(criteria.modified_before)
        result.check(
            modified is not None and bound is not None and modified <= bound,
            f"Modified before {criteria.modified_before}",
        )

    return result


async def search_keys(
    client: LokaliseClient,
    project_id: str,
    criteria: SearchCriteria,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> List[SearchResult]:
    """
    Search a project's keys.

    Args:
        client: Open Lokalise client
        project_id: Project to search
        criteria: Normalized criteria (see normalize_criteria)
        limit: Maximum number of results, clamped to MAX_SEARCH_LIMIT

    Returns:
        Matching keys in page order, at most `limit` of them
    """
    limit = clamp_limit(limit)
    results: List[SearchResult] = []
    scanned = 0

    async for page in client.iter_pages(
        client.list_keys, project_id, limit=PAGE_SIZE, include_translations=True
    ):
        for key in page.items:
            scanned += 1
            match = evaluate_key_match(key, criteria)
            if match.matches:
                results.append(SearchResult(key=key, match_reasons=match.reasons))
                if len(results) >= limit:
                    break
        if len(results) >= limit:
            logger.debug(f"Search result cap {limit} reached on page {page.page}")
            break

    logger.info(f"Search in project {project_id}: {len(results)} match(es) out of {scanned} key(s) scanned")
    return results
