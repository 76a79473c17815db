"""Shared fixtures: an in-memory Lokalise API served through httpx.MockTransport."""

import json
import math
import re
from typing import Any, Dict, List, Optional

import httpx
import pytest

from lokalise_mcp import logger as logger_module
from lokalise_mcp.api.client import LokaliseClient
from lokalise_mcp.config import AppConfig
from lokalise_mcp.core import operations

API_URL = "https://api.lokalise.test/api2"

_PROJECTS = re.compile(r"^/projects$")
_PROJECT = re.compile(r"^/projects/([^/]+)$")
_KEYS = re.compile(r"^/projects/([^/]+)/keys$")
_TRANSLATIONS = re.compile(r"^/projects/([^/]+)/translations$")
_TRANSLATION = re.compile(r"^/projects/([^/]+)/translations/(\d+)$")


def _error(status: int, message: str) -> httpx.Response:
    return httpx.Response(status, json={"error": {"message": message, "code": status}})


class FakeLokalise:
    """Minimal stateful stand-in for the Lokalise REST API."""

    def __init__(self):
        self.projects: List[Dict[str, Any]] = []
        self.keys: Dict[str, List[Dict[str, Any]]] = {}
        self.requests: List[httpx.Request] = []
        self.fail_next: Optional[httpx.Response] = None
        self.create_error: Optional[httpx.Response] = None
        self._next_key_id = 1000
        self._next_translation_id = 5000

    # -- seeding ------------------------------------------------------------

    def add_project(self, project_id: str, name: str, description: str = "") -> Dict[str, Any]:
        project = {
            "project_id": project_id,
            "name": name,
            "description": description,
            "created_at": "2024-01-01 10:00:00 (Etc/UTC)",
            "created_by": 1,
            "created_by_email": "owner@example.com",
        }
        self.projects.append(project)
        self.keys.setdefault(project_id, [])
        return project

    def add_key(
        self,
        project_id: str,
        key_name: Any,
        translations: Optional[Dict[str, Any]] = None,
        platforms: Optional[List[str]] = None,
        description: str = "",
        tags: Optional[List[str]] = None,
        created_at: str = "2024-06-01 12:00:00 (Etc/UTC)",
        modified_at: Optional[str] = None,
    ) -> Dict[str, Any]:
        key_id = self._next_key_id
        self._next_key_id += 1
        key = {
            "key_id": key_id,
            "key_name": key_name,
            "platforms": platforms or ["web"],
            "description": description,
            "tags": tags or [],
            "created_at": created_at,
            "translations": [],
        }
        if modified_at:
            key["modified_at"] = modified_at
        for language, value in (translations or {}).items():
            if isinstance(value, dict):
                self._add_translation(key, language, **value)
            else:
                self._add_translation(key, language, translation=value)
        self.keys.setdefault(project_id, []).append(key)
        return key

    def _add_translation(self, key, language, translation="", is_fuzzy=False, is_reviewed=False):
        entry = {
            "translation_id": self._next_translation_id,
            "key_id": key["key_id"],
            "language_iso": language,
            "translation": translation,
            "is_fuzzy": is_fuzzy,
            "is_reviewed": is_reviewed,
        }
        self._next_translation_id += 1
        key["translations"].append(entry)
        return entry

    def find_key(self, project_id: str, key_id: int) -> Optional[Dict[str, Any]]:
        for key in self.keys.get(project_id, []):
            if key["key_id"] == key_id:
                return key
        return None

    # -- request inspection -------------------------------------------------

    def calls(self, method: str, suffix: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path.endswith(suffix)
        ]

    # -- transport ----------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_next is not None:
            response, self.fail_next = self.fail_next, None
            return response

        path = request.url.path
        if path.startswith("/api2"):
            path = path[len("/api2"):]
        body = json.loads(request.content) if request.content else None

        if _PROJECTS.match(path) and request.method == "GET":
            return self._paginate(request, "projects", self.projects)

        match = _PROJECT.match(path)
        if match and request.method == "GET":
            for project in self.projects:
                if project["project_id"] == match.group(1):
                    return httpx.Response(200, json=project)
            return _error(404, "Not Found")

        match = _KEYS.match(path)
        if match:
            project_id = match.group(1)
            if project_id not in self.keys:
                return _error(404, "Not Found")
            if request.method == "GET":
                return self._list_keys(request, project_id)
            if request.method == "POST":
                if self.create_error is not None:
                    return self.create_error
                return self._create_keys(project_id, body["keys"])
            if request.method == "PUT":
                return self._update_keys(project_id, body["keys"])
            if request.method == "DELETE":
                return self._delete_keys(project_id, body["keys"])

        match = _TRANSLATIONS.match(path)
        if match and request.method == "GET":
            project_id = match.group(1)
            rows = [t for key in self.keys.get(project_id, []) for t in key["translations"]]
            key_filter = request.url.params.get("filter_key_id")
            if key_filter is not None:
                rows = [t for t in rows if t["key_id"] == int(key_filter)]
            return self._paginate(request, "translations", rows)

        match = _TRANSLATION.match(path)
        if match and request.method == "PUT":
            translation_id = int(match.group(2))
            for key in self.keys.get(match.group(1), []):
                for translation in key["translations"]:
                    if translation["translation_id"] == translation_id:
                        translation.update(body)
                        return httpx.Response(
                            200, json={"project_id": match.group(1), "translation": translation}
                        )
            return _error(404, "Not Found")

        return _error(404, "Not Found")

    def _paginate(self, request: httpx.Request, field: str, rows: List[Any]) -> httpx.Response:
        page = int(request.url.params.get("page", 1))
        limit = int(request.url.params.get("limit", 100))
        start = (page - 1) * limit
        chunk = rows[start:start + limit]
        page_count = max(1, math.ceil(len(rows) / limit))
        return httpx.Response(
            200,
            json={field: chunk},
            headers={
                "X-Pagination-Page-Count": str(page_count),
                "X-Pagination-Total-Count": str(len(rows)),
            },
        )

    def _list_keys(self, request: httpx.Request, project_id: str) -> httpx.Response:
        include = request.url.params.get("include_translations") == "1"
        rows = []
        for key in self.keys[project_id]:
            row = dict(key)
            if not include:
                row.pop("translations")
            rows.append(row)
        return self._paginate(request, "keys", rows)

    def _create_keys(self, project_id: str, payloads: List[Dict[str, Any]]) -> httpx.Response:
        created = []
        for payload in payloads:
            translations = {
                t["language_iso"]: t["translation"] for t in payload.get("translations", [])
            }
            created.append(self.add_key(
                project_id,
                payload["key_name"],
                translations=translations,
                platforms=payload.get("platforms"),
                description=payload.get("description", ""),
                tags=payload.get("tags"),
            ))
        return httpx.Response(200, json={"project_id": project_id, "keys": created, "errors": []})

    def _update_keys(self, project_id: str, payloads: List[Dict[str, Any]]) -> httpx.Response:
        updated = []
        for payload in payloads:
            key = self.find_key(project_id, payload["key_id"])
            if key is None:
                return _error(400, f"Key {payload['key_id']} does not exist")
            for name in ("platforms", "description", "tags"):
                if name in payload:
                    key[name] = payload[name]
            for entry in payload.get("translations", []):
                existing = [t for t in key["translations"] if t["language_iso"] == entry["language_iso"]]
                if existing:
                    existing[0]["translation"] = entry["translation"]
                else:
                    self._add_translation(key, entry["language_iso"], translation=entry["translation"])
            key["modified_at"] = "2025-01-01 00:00:00 (Etc/UTC)"
            updated.append(key)
        return httpx.Response(200, json={"project_id": project_id, "keys": updated, "errors": []})

    def _delete_keys(self, project_id: str, key_ids: List[int]) -> httpx.Response:
        before = len(self.keys[project_id])
        self.keys[project_id] = [k for k in self.keys[project_id] if k["key_id"] not in key_ids]
        removed = before != len(self.keys[project_id])
        return httpx.Response(
            200, json={"project_id": project_id, "keys_removed": removed, "keys_locked": 0}
        )


@pytest.fixture
def fake():
    lokalise = FakeLokalise()
    lokalise.add_project("p-watt", "Watt", "Energy dashboard")
    lokalise.add_project("p-demo", "Demo Project", "Sandbox for demos")
    return lokalise


@pytest.fixture
def config():
    return AppConfig(api_key="test-token-1234567890", api_url=API_URL)


@pytest.fixture
def client(fake, config):
    return LokaliseClient(
        config.api_key, base_url=config.api_url, transport=httpx.MockTransport(fake.handler)
    )


@pytest.fixture
def patched_client(fake, monkeypatch):
    """Route every operation-opened client to the fake API."""

    def _create(cfg, transport=None):
        return LokaliseClient(
            cfg.api_key, base_url=API_URL, transport=httpx.MockTransport(fake.handler)
        )

    monkeypatch.setattr(operations, "create_lokalise_client", _create)
    return fake


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger_module._clear_log_mode_cache()
