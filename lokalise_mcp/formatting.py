"""Plain-text rendering of operation results for the MCP and CLI surfaces."""

import json
from typing import Any, Dict, List, Optional

from lokalise_mcp.api.models import KeyName, Project


def to_json(data: Any) -> str:
    """Pretty-print JSON for LLM consumption."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def format_translation(translation: Dict[str, Any]) -> str:
    text = f'{translation["language_iso"]}: "{translation["translation"]}"'
    if translation.get("is_reviewed"):
        text += " (reviewed)"
    if translation.get("is_fuzzy"):
        text += " (fuzzy)"
    return text


def format_search_result(result: Dict[str, Any]) -> str:
    """Render one entry of search_keys_in_project()['results']."""
    key_name = KeyName.from_raw(result["key_name"]).display
    translations = ", ".join(format_translation(t) for t in result.get("translations", []))
    tags = ", ".join(result.get("tags") or []) or "none"
    return "\n".join([
        f"Key: {key_name}",
        f"Description: {result.get('description') or 'No description'}",
        f"Tags: [{tags}]",
        f"Platforms: [{', '.join(result.get('platforms') or [])}]",
        f"Translations: {translations or 'none'}",
        f"Match reasons: {', '.join(result.get('matchReasons') or [])}",
        f"Created: {result.get('created_at')}",
    ])


def format_search_response(project_name: str, response: Dict[str, Any]) -> str:
    """Render the full search response."""
    header = "\n".join([
        f'Search Results for "{project_name}"',
        f"Found {response['total_found']} key(s) matching criteria",
        f"Criteria used: {to_json(response['criteria_used'])}",
    ])
    entries = [format_search_result(result) for result in response["results"]]
    return "\n\n".join([header] + entries)


def format_project(project: Project) -> str:
    return "\n".join([
        f"Project: {project.name}",
        f"Description: {project.description or 'No description'}",
        f"ID: {project.project_id}",
        f"Created by: {project.created_by_email or 'unknown'}",
        f"Created: {project.created_at}",
    ])


def format_projects(projects: List[Project], search_term: Optional[str] = None) -> str:
    title = "Available Projects"
    if search_term:
        title += f' (filtered by: "{search_term}")'
    header = f"{title}\nFound {len(projects)} project(s)"
    return "\n\n".join([header] + [format_project(project) for project in projects])
