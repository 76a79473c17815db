"""Key creation API routes."""

from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify, request

from lokalise_mcp.api.exceptions import ApiError, InvalidInputError, LokaliseError, NotFoundError
from lokalise_mcp.config import AppConfig
from lokalise_mcp.core.operations import NewKey, add_keys_to_project
from lokalise_mcp.logger import get_logger

keys_bp = Blueprint("keys", __name__)
logger = get_logger(__name__)

CONFIG_KEY = "LOKALISE_CONFIG"

MISSING_API_KEY = "LOKALISE_API_KEY environment variable is required."

ADD_KEYS_EXAMPLE = {
    "projectName": "My Project",
    "keys": [
        {
            "keyName": "hello_world",
            "defaultValue": "Hello World",
            "platforms": ["web"],
            "description": "Greeting message",
            "tags": ["greeting"],
        }
    ],
}


def _get_config() -> AppConfig:
    return current_app.config[CONFIG_KEY]


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _error_response(e: Exception):
    """Render an operation failure as {error, details?} with a matching status."""
    if isinstance(e, InvalidInputError):
        logger.warning(f"Invalid key request: {e}")
        return jsonify({"error": str(e), "details": e.details or None}), 400
    if isinstance(e, NotFoundError):
        logger.warning(f"Lookup failed: {e}")
        return jsonify({"error": str(e)}), 404
    if isinstance(e, ApiError):
        logger.error(f"Lokalise API failure: {e}")
        response: Dict[str, Any] = {"error": str(e)}
        if e.body is not None:
            response["details"] = e.body
        return jsonify(response), 500
    if isinstance(e, LokaliseError):
        logger.error(f"Key operation failed: {e}")
        return jsonify({"error": str(e)}), 500

    logger.exception(f"Unexpected failure while adding keys: {e}")
    return jsonify({"error": str(e) or "Unknown error occurred"}), 500


@keys_bp.post("/add-key")
async def add_key():
    """Add a single translation key."""
    data = _json_body()
    project_name = data.get("projectName")
    key_name = data.get("keyName")
    default_value = data.get("defaultValue")

    if not project_name or not key_name or not default_value:
        return jsonify({
            "error": "Missing required fields. projectName, keyName, and defaultValue are required.",
            "required": ["projectName", "keyName", "defaultValue"],
            "optional": ["platforms", "description", "tags"],
        }), 400

    config = _get_config()
    if not config.has_api_key:
        logger.error("Add key requested without a configured API key")
        return jsonify({"error": MISSING_API_KEY}), 500

    try:
        key = NewKey.from_dict(data)
        result = await add_keys_to_project(config, project_name, [key])
    except Exception as e:
        return _error_response(e)

    logger.info(f"Added key '{key_name}' to project '{project_name}'")
    return jsonify({"success": True, "result": result})


@keys_bp.post("/add-keys")
async def add_keys():
    """Add multiple translation keys."""
    data = _json_body()
    project_name = data.get("projectName")
    keys = data.get("keys")

    if not project_name or not isinstance(keys, list) or not keys:
        return jsonify({
            "error": "Missing required fields. projectName and keys array are required.",
            "required": ["projectName", "keys"],
            "example": ADD_KEYS_EXAMPLE,
        }), 400

    # Validate each key
    for index, key in enumerate(keys):
        if not isinstance(key, dict) or not key.get("keyName") or not key.get("defaultValue"):
            return jsonify({
                "error": f"Invalid key at index {index}. keyName and defaultValue are required.",
                "keyIndex": index,
                "key": key,
            }), 400

    config = _get_config()
    if not config.has_api_key:
        logger.error("Bulk add requested without a configured API key")
        return jsonify({"error": MISSING_API_KEY}), 500

    try:
        new_keys: List[NewKey] = [NewKey.from_dict(key) for key in keys]
        result = await add_keys_to_project(config, project_name, new_keys)
    except Exception as e:
        return _error_response(e)

    logger.info(f"Added {len(new_keys)} key(s) to project '{project_name}'")
    return jsonify({
        "success": True,
        "result": result,
        "summary": {
            "projectName": project_name,
            "keysAdded": len(keys),
            "keys": [key["keyName"] for key in keys],
        },
    })
