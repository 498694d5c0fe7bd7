from __future__ import annotations

import json
from typing import Any, Callable
from urllib.parse import parse_qs, urlparse

import pytest

from landscape_cli.client import ApiRequest, RawResponse

BASE_URL = "https://landscape.example.test"

Handler = Callable[[ApiRequest, dict[str, list[str]]], RawResponse]


def json_response(status: int, obj: Any) -> RawResponse:
    return RawResponse(
        status_code=status,
        headers={"content-type": "application/json"},
        body=(json.dumps(obj) + "\n").encode("utf-8"),
    )


def empty_response(status: int) -> RawResponse:
    return RawResponse(status_code=status, headers={}, body=b"")


def _first(query: dict[str, list[str]], key: str) -> str:
    vals = query.get(key) or [""]
    return vals[0]


def legacy_handler(request: ApiRequest, query: dict[str, list[str]]) -> RawResponse:
    assert request.method == "POST"
    if not _first(query, "version") or not _first(query, "action"):
        return empty_response(400)
    action = _first(query, "action")
    if action in ("CreateScript", "EditScript"):
        return json_response(200, {"id": 42, "title": _first(query, "title")})
    if action == "CopyScript":
        return json_response(200, {"id": 99, "title": _first(query, "destination_title")})
    if action == "CreateScriptAttachment":
        return json_response(200, "note.txt")
    if action in ("RemoveScript", "RemoveScriptAttachment"):
        return empty_response(204)
    return empty_response(400)


class FakeLandscapeServer:
    """Transport double that routes on method and path and records requests."""

    def __init__(self) -> None:
        self.requests: list[ApiRequest] = []
        self.routes: dict[tuple[str, str], Handler] = {
            ("POST", "/api"): legacy_handler,
            ("POST", "/api/"): legacy_handler,
        }

    def route(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method.upper(), path)] = handler

    def send(self, request: ApiRequest) -> RawResponse:
        self.requests.append(request)
        parsed = urlparse(request.url)
        query = parse_qs(parsed.query, keep_blank_values=True)
        handler = self.routes.get((request.method.upper(), parsed.path))
        if handler is None:
            return json_response(404, {"message": "not found"})
        return handler(request, query)

    @property
    def last(self) -> ApiRequest:
        return self.requests[-1]

    def last_query(self) -> dict[str, list[str]]:
        return parse_qs(urlparse(self.last.url).query, keep_blank_values=True)


def auth_editor(request: ApiRequest) -> None:
    request.headers["authorization"] = "Bearer test-token"


@pytest.fixture
def server() -> FakeLandscapeServer:
    srv = FakeLandscapeServer()
    srv.route("GET", "/api/scripts/1", lambda _r, _q: json_response(200, {"id": 1, "title": "diagnostic script"}))
    srv.route("POST", "/api/scripts/1:archive", lambda _r, _q: empty_response(204))
    srv.route("POST", "/api/scripts/1:redact", lambda _r, _q: empty_response(204))
    srv.route("GET", "/api/scripts/1/attachments/1", lambda _r, _q: json_response(200, "file contents"))
    srv.route("POST", "/api/v2/login/access-key", _login_handler)
    return srv


def _login_handler(request: ApiRequest, _query: dict[str, list[str]]) -> RawResponse:
    body = json.loads((request.body or b"{}").decode("utf-8"))
    if body.get("access_key") == "ak" and body.get("secret_key") == "sk":
        return json_response(200, {"token": "login-token"})
    return json_response(401, {"message": "invalid credentials"})
