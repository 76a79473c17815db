import httpx
import pytest

from lokalise_mcp.config import AppConfig
from lokalise_mcp.web import create_app


@pytest.fixture
def http(config, patched_client):
    app = create_app(config)
    app.config["TESTING"] = True
    return app.test_client()


def test_health(http):
    response = http.get("/health")
    assert response.status_code == 200
    data = response.get_json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert "POST /add-key - Add a single translation key" in data["endpoints"]


def test_unknown_route_is_json(http):
    response = http.get("/nope")
    assert response.status_code == 404
    assert response.get_json()["error"] == "Not found"


def test_add_key(http, patched_client):
    response = http.post("/add-key", json={
        "projectName": "Watt",
        "keyName": "hello",
        "defaultValue": "Hallo Welt",
        "platforms": ["web"],
        "tags": ["greeting"],
    })
    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["result"]["keys"][0]["key_name"] == "hello"
    stored = patched_client.keys["p-watt"][0]
    assert stored["tags"] == ["greeting"]
    assert stored["translations"][0]["translation"] == "Hallo Welt"


def test_add_key_missing_fields(http, patched_client):
    response = http.post("/add-key", json={"projectName": "Watt", "keyName": "hello"})
    assert response.status_code == 400
    data = response.get_json()
    assert data["required"] == ["projectName", "keyName", "defaultValue"]
    assert data["optional"] == ["platforms", "description", "tags"]
    assert patched_client.requests == []


def test_add_key_without_body(http):
    response = http.post("/add-key", data="not json", content_type="text/plain")
    assert response.status_code == 400


def test_add_key_unknown_project(http, patched_client):
    response = http.post("/add-key", json={"projectName": "Nowhere", "keyName": "k", "defaultValue": "v"})
    assert response.status_code == 404
    assert response.get_json()["error"] == 'Project named "Nowhere" not found.'
    assert patched_client.calls("POST", "/keys") == []


def test_add_key_remote_rejection(http, patched_client):
    patched_client.create_error = httpx.Response(400, json={"error": {"message": "Bad key", "code": 400}})
    response = http.post("/add-key", json={"projectName": "Watt", "keyName": "k", "defaultValue": "v"})
    assert response.status_code == 500
    data = response.get_json()
    assert data["error"] == "Invalid key data: Bad key"
    assert data["details"] == {"error": {"message": "Bad key", "code": 400}}


def test_add_key_invalid_platforms(http):
    response = http.post("/add-key", json={
        "projectName": "Watt", "keyName": "k", "defaultValue": "v", "platforms": ["desktop"],
    })
    assert response.status_code == 400
    assert "No valid platforms" in response.get_json()["error"]


def test_add_key_without_server_credential(patched_client):
    app = create_app(AppConfig(api_key=""))
    response = app.test_client().post(
        "/add-key", json={"projectName": "Watt", "keyName": "k", "defaultValue": "v"}
    )
    assert response.status_code == 500
    assert "LOKALISE_API_KEY" in response.get_json()["error"]
    assert patched_client.requests == []


def test_add_keys(http, patched_client):
    response = http.post("/add-keys", json={
        "projectName": "Watt",
        "keys": [
            {"keyName": "one", "defaultValue": "One"},
            {"keyName": "two", "defaultValue": "Two", "platforms": ["ios"]},
        ],
    })
    assert response.status_code == 200
    data = response.get_json()
    assert data["summary"] == {"projectName": "Watt", "keysAdded": 2, "keys": ["one", "two"]}
    assert len(patched_client.calls("POST", "/keys")) == 1
    assert [k["key_name"] for k in patched_client.keys["p-watt"]] == ["one", "two"]


def test_add_keys_requires_key_list(http):
    response = http.post("/add-keys", json={"projectName": "Watt", "keys": []})
    assert response.status_code == 400
    assert response.get_json()["example"]["projectName"] == "My Project"


def test_add_keys_reports_invalid_index(http, patched_client):
    response = http.post("/add-keys", json={
        "projectName": "Watt",
        "keys": [{"keyName": "one", "defaultValue": "One"}, {"keyName": "two"}],
    })
    assert response.status_code == 400
    data = response.get_json()
    assert data["error"] == "Invalid key at index 1. keyName and defaultValue are required."
    assert data["keyIndex"] == 1
    assert data["key"] == {"keyName": "two"}
    assert patched_client.requests == []


@pytest.mark.parametrize("overrides, message", [
    ({"platforms": 5}, "platforms must be a list of strings."),
    ({"tags": {"a": 1}}, "tags must be a list of strings."),
    ({"keyName": 123}, "keyName must be a string."),
])
def test_add_key_wrong_field_types(http, patched_client, overrides, message):
    payload = {"projectName": "Watt", "keyName": "k", "defaultValue": "v"}
    payload.update(overrides)
    response = http.post("/add-key", json=payload)
    assert response.status_code == 400
    assert response.get_json()["error"] == message
    assert patched_client.requests == []


def test_add_keys_wrong_field_type(http, patched_client):
    response = http.post("/add-keys", json={
        "projectName": "Watt",
        "keys": [{"keyName": "one", "defaultValue": "One", "tags": 7}],
    })
    assert response.status_code == 400
    assert response.get_json()["error"] == "tags must be a list of strings."
    assert patched_client.calls("POST", "/keys") == []


def test_add_key_non_string_project_name(http, patched_client):
    response = http.post("/add-key", json={"projectName": 7, "keyName": "k", "defaultValue": "v"})
    assert response.status_code == 400
    assert patched_client.requests == []
