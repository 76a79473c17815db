"""Natural-language "add a key" command parsing."""

import re
from dataclasses import dataclass
from typing import List, Optional

PROJECT_PATTERN = re.compile(r"project name is ['\"]?([\w\s-]+)['\"]?", re.IGNORECASE)
KEY_PATTERN = re.compile(r"key named ['\"]?([\w-]+)['\"]?", re.IGNORECASE)
VALUE_PATTERN = re.compile(r"default value is ['\"]?([\w\s-]+)['\"]?", re.IGNORECASE)
PLATFORMS_PATTERN = re.compile(r"platforms? (are|is) ([\w,\s-]+)", re.IGNORECASE)

COMMAND_EXAMPLE = (
    'my project name is "Watt". I want to add a key named hello and '
    'default value is "sdfs". platforms are web, ios. add it'
)


@dataclass
class ParsedCommand:
    """Fields extracted from a command; None when the phrase is absent."""
    project_name: Optional[str] = None
    key_name: Optional[str] = None
    default_value: Optional[str] = None
    platforms: Optional[List[str]] = None

    @property
    def is_complete(self) -> bool:
        """Project, key and default value are required to add a key."""
        return bool(self.project_name and self.key_name and self.default_value)


def _group(pattern: re.Pattern, text: str, index: int = 1) -> Optional[str]:
    match = pattern.search(text)
    return match.group(index).strip() if match else None


def parse_command(command: str) -> ParsedCommand:
    """
    Parse a natural language command into structured data.

    Example:
        >>> parse_command('project name is "Watt", key named hello, platforms are web, ios')
        ParsedCommand(project_name='Watt', key_name='hello', default_value=None, platforms=['web', 'ios'])
    """
    platforms = None
    platforms_text = _group(PLATFORMS_PATTERN, command, 2)
    if platforms_text:
        platforms = [p.strip().lower() for p in platforms_text.split(",") if p.strip()]

    return ParsedCommand(
        project_name=_group(PROJECT_PATTERN, command),
        key_name=_group(KEY_PATTERN, command),
        default_value=_group(VALUE_PATTERN, command),
        platforms=platforms,
    )
