"""
Lokalise Exceptions

This module contains the exception classes shared by the API client,
the key/translation operations and the MCP/HTTP/CLI front-ends.
Separated to avoid circular imports between api/ and core/.
"""

from typing import Any, Optional


class LokaliseError(Exception):
    """Lokalise integration error with optional code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class InvalidInputError(LokaliseError):
    """A precondition failed before any remote call was made."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="invalid_input", details=details)


class NotFoundError(LokaliseError):
    """A project or key name did not resolve to an identifier."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="not_found", details=details)


class ApiError(LokaliseError):
    """The remote API answered with a non-2xx status, timed out or was unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(
            message,
            code="api_error",
            details={"status_code": status_code, "body": body},
        )
        self.status_code = status_code
        self.body = body

    @property
    def remote_message(self) -> Optional[str]:
        """Best-effort message extracted from the remote error body."""
        body = self.body
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str):
                return error
            if body.get("message"):
                return str(body["message"])
        elif isinstance(body, str) and body:
            return body[:500]
        return None
