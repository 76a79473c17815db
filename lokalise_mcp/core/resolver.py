"""
Name-to-identifier resolution for projects and keys.

Both lookups page through the full listing and stop at the first match.
The remote API does not guarantee unique names, so with duplicates the
first one in page order wins. Nothing is cached; every call hits the API.
"""

from typing import List, Optional

from lokalise_mcp.api.client import LokaliseClient
from lokalise_mcp.api.models import Key, Project
from lokalise_mcp.config import PAGE_SIZE
from lokalise_mcp.logger import get_logger

logger = get_logger(__name__)


async def find_project_by_name(client: LokaliseClient, project_name: str) -> Optional[Project]:
    """
    Find a project by name (case-insensitive exact match).

    Args:
        client: Open Lokalise client
        project_name: Project name to look for

    Returns:
        The first matching Project, or None when no page contains it
    """
    target = project_name.lower()
    async for page in client.iter_pages(client.list_projects, limit=PAGE_SIZE):
        for project in page.items:
            if project.name.lower() == target:
                logger.debug(f"Resolved project '{project_name}' to {project.project_id} (page {page.page})")
                return project

    logger.info(f"Project '{project_name}' not found")
    return None


async def find_key_by_name(client: LokaliseClient, project_id: str, key_name: str) -> Optional[Key]:
    """
    Find a key by exact name in a project.

    Per-platform names match when any platform's name equals key_name.
    Keys are fetched without translations.

    Returns:
        The first matching Key, or None
    """
    async for page in client.iter_pages(
        client.list_keys, project_id, limit=PAGE_SIZE, include_translations=False
    ):
        for key in page.items:
            if key.key_name.matches(key_name):
                logger.debug(f"Resolved key '{key_name}' to {key.key_id} in project {project_id}")
                return key

    logger.info(f"Key '{key_name}' not found in project {project_id}")
    return None


async def list_all_projects(client: LokaliseClient) -> List[Project]:
    """Collect every project visible to the token across all pages."""
    projects: List[Project] = []
    async for page in client.iter_pages(client.list_projects, limit=PAGE_SIZE):
        projects.extend(page.items)
    logger.debug(f"Listed {len(projects)} projects")
    return projects
