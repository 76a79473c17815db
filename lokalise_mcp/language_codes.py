"""
Language codes handled by the key and translation tools.

Lokalise identifies languages by ISO code in the `language_iso` field
(e.g. 'en', 'de', 'en_US'). Only the languages in SUPPORTED_LANGUAGES are
written by update/upsert operations and checked by default in searches;
every other code is passed through untouched when reading.
"""

from typing import Dict, Iterable, List, Optional, Tuple

SUPPORTED_LANGUAGES = ('en', 'de')

LANGUAGE_NAMES: Dict[str, str] = {
    'en': 'English',
    'de': 'German',
}

DEFAULT_LANGUAGE = 'en'


def is_supported(code: str) -> bool:
    """
    Check whether a language code is one of the supported languages.

    Examples:
        >>> is_supported('de')
        True
        >>> is_supported('fr')
        False
    """
    return isinstance(code, str) and code in SUPPORTED_LANGUAGES


def get_language_name(code: str) -> Optional[str]:
    """
    Get the human-readable name for a supported language code.

    Examples:
        >>> get_language_name('en')
        'English'
        >>> get_language_name('xx') is None
        True
    """
    return LANGUAGE_NAMES.get(code)


def extract_base_language(code: str) -> str:
    """
    Extract base language from code (remove region).

    Lokalise uses underscores ('en_US'), BCP 47 uses dashes ('en-US').

    Examples:
        >>> extract_base_language('en_US')
        'en'
        >>> extract_base_language('de-AT')
        'de'
    """
    return code.replace('_', '-').split('-')[0]


def split_supported(codes: Iterable[str]) -> Tuple[List[str], List[str]]:
    """
    Partition language codes into (supported, unsupported), keeping order
    and dropping duplicates.

    Examples:
        >>> split_supported(['de', 'fr', 'de', 'en'])
        (['de', 'en'], ['fr'])
    """
    supported: List[str] = []
    unsupported: List[str] = []
    for code in codes:
        target = supported if is_supported(code) else unsupported
        if code not in target:
            target.append(code)
    return supported, unsupported
