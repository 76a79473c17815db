"""
Lokalise API Client

Thin async wrapper around the Lokalise REST API (api2):
- Projects: list, get
- Keys: list, create, update, delete (bulk)
- Translations: list, update

Every call is one request: no retries, no caching. Non-2xx responses,
timeouts and transport failures surface as ApiError.
"""

from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Tuple

import httpx

from lokalise_mcp.config import (
    API_TOKEN_HEADER,
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    PAGE_SIZE,
    AppConfig,
)
from lokalise_mcp.logger import get_logger
from lokalise_mcp.api.exceptions import ApiError, InvalidInputError
from lokalise_mcp.api.models import Key, Page, Project, Translation

logger = get_logger(__name__)

PAGE_COUNT_HEADER = "X-Pagination-Page-Count"
TOTAL_COUNT_HEADER = "X-Pagination-Total-Count"


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (overall cutoff in seconds) or a dict
            with connect, write, read, pool keys

    Returns:
        httpx.Timeout object
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', DEFAULT_TIMEOUT),
            read=timeout_config.get('read', DEFAULT_TIMEOUT),
            pool=timeout_config.get('pool', 10.0),
        )
    timeout_value = float(timeout_config) if timeout_config else DEFAULT_TIMEOUT
    return httpx.Timeout(timeout_value)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:500] if response.text else None


def handle_http_error(e: httpx.HTTPStatusError, method: str, path: str):
    """Turn an HTTP status error into an ApiError carrying status and body."""
    status_code = e.response.status_code
    body = _response_body(e.response)
    error = ApiError(f"Lokalise API error ({status_code})", status_code=status_code, body=body)

    remote_message = error.remote_message
    if remote_message:
        error = ApiError(
            f"Lokalise API error ({status_code}): {remote_message}",
            status_code=status_code,
            body=body,
        )
    logger.error(f"[Lokalise API] {method} {path} failed: {status_code} {body}")
    raise error


def _header_int(headers: httpx.Headers, name: str) -> Optional[int]:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class LokaliseClient:
    """Async client for the Lokalise API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_URL,
        timeout: Any = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key or not api_key.strip():
            raise InvalidInputError("Lokalise API key is required")

        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                API_TOKEN_HEADER: api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=get_httpx_timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "LokaliseClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Any] = None,
    ) -> Tuple[Any, httpx.Headers]:
        logger.debug(f"[Lokalise API] {method} {path}")
        try:
            response = await self._http.request(method, path, params=params, json=json_body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            handle_http_error(e, method, path)
        except httpx.TimeoutException:
            logger.error(f"[Lokalise API] {method} {path} timed out")
            raise ApiError("Lokalise API request timeout")
        except httpx.HTTPError as e:
            logger.error(f"[Lokalise API] {method} {path} request error: {e}")
            raise ApiError(f"Lokalise API request failed: {e}")

        logger.debug(f"[Lokalise API] {response.status_code} {path}")
        if not response.content:
            return {}, response.headers
        return _response_body(response), response.headers

    def _page(self, items: List[Any], headers: httpx.Headers, page: int, limit: int) -> Page:
        return Page(
            items=items,
            page=page,
            limit=limit,
            page_count=_header_int(headers, PAGE_COUNT_HEADER),
            total_count=_header_int(headers, TOTAL_COUNT_HEADER),
        )

    # -- Projects -----------------------------------------------------------

    async def list_projects(self, page: int = 1, limit: int = PAGE_SIZE) -> Page[Project]:
        """Get one page of the projects visible to the token."""
        data, headers = await self._request(
            "GET", "/projects", params={"page": page, "limit": limit}
        )
        projects = [Project.from_dict(item) for item in data.get("projects", [])]
        return self._page(projects, headers, page, limit)

    async def get_project(self, project_id: str) -> Project:
        """Get project details by ID."""
        data, _ = await self._request("GET", f"/projects/{project_id}")
        return Project.from_dict(data.get("project", data))

    # -- Keys ---------------------------------------------------------------

    async def list_keys(
        self,
        project_id: str,
        page: int = 1,
        limit: int = PAGE_SIZE,
        include_translations: bool = True,
    ) -> Page[Key]:
        """Get one page of a project's keys."""
        data, headers = await self._request(
            "GET",
            f"/projects/{project_id}/keys",
            params={
                "page": page,
                "limit": limit,
                "include_translations": 1 if include_translations else 0,
            },
        )
        keys = [Key.from_dict(item) for item in data.get("keys", [])]
        return self._page(keys, headers, page, limit)

    async def create_keys(self, project_id: str, keys: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Create keys in a project (bulk)."""
        data, _ = await self._request(
            "POST", f"/projects/{project_id}/keys", json_body={"keys": keys}
        )
        return data

    async def update_keys(self, project_id: str, keys: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Update multiple keys in a project (bulk). Each payload carries its key_id."""
        data, _ = await self._request(
            "PUT", f"/projects/{project_id}/keys", json_body={"keys": keys}
        )
        return data

    async def delete_keys(self, project_id: str, key_ids: List[int]) -> Dict[str, Any]:
        """
        Delete multiple keys from a project (bulk).

        The response's `keys_removed` is a boolean, not a count.
        """
        data, _ = await self._request(
            "DELETE", f"/projects/{project_id}/keys", json_body={"keys": key_ids}
        )
        return data

    # -- Translations -------------------------------------------------------

    async def list_translations(
        self,
        project_id: str,
        page: int = 1,
        limit: int = PAGE_SIZE,
        filter_key_id: Optional[int] = None,
    ) -> Page[Translation]:
        """Get one page of a project's translations, optionally for a single key."""
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if filter_key_id is not None:
            params["filter_key_id"] = filter_key_id
        data, headers = await self._request(
            "GET", f"/projects/{project_id}/translations", params=params
        )
        translations = [Translation.from_dict(item) for item in data.get("translations", [])]
        return self._page(translations, headers, page, limit)

    async def update_translation(
        self, project_id: str, translation_id: int, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Update a specific translation."""
        data, _ = await self._request(
            "PUT", f"/projects/{project_id}/translations/{translation_id}", json_body=payload
        )
        return data

    # -- Pagination ---------------------------------------------------------

    async def iter_pages(
        self,
        fetch: Callable[..., Awaitable[Page]],
        *args: Any,
        limit: int = PAGE_SIZE,
        **kwargs: Any,
    ) -> AsyncIterator[Page]:
        """
        Lazily yield pages from a paginated listing, starting at page 1.

        Stops on an empty page, a short page, or when the page-count header
        says the last page was reached. Each call starts a fresh sequence.

        Example:
            >>> async for page in client.iter_pages(client.list_projects):
            ...     for project in page.items:
            ...         print(project.name)
        """
        page_number = 1
        while True:
            page = await fetch(*args, page=page_number, limit=limit, **kwargs)
            if not page.items:
                return
            yield page
            if not page.has_more:
                return
            page_number += 1

    # -- Misc ---------------------------------------------------------------

    async def test_connection(self) -> bool:
        """Check the token against the API with the smallest possible request."""
        try:
            await self.list_projects(page=1, limit=1)
            return True
        except ApiError as e:
            logger.warning(f"Lokalise connection test failed: {e}")
            return False

    def masked_api_key(self) -> str:
        """The configured API token, masked for display."""
        token = self._api_key
        if len(token) <= 12:
            return "*" * len(token)
        return f"{token[:8]}...{token[-4:]}"


def create_lokalise_client(
    config: AppConfig, transport: Optional[httpx.AsyncBaseTransport] = None
) -> LokaliseClient:
    """Create a configured Lokalise API client."""
    if not config.has_api_key:
        raise InvalidInputError(
            "Lokalise API key is required. Set LOKALISE_API_KEY environment variable."
        )
    return LokaliseClient(
        config.api_key,
        base_url=config.api_url,
        timeout=config.timeout,
        transport=transport,
    )
