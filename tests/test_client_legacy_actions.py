from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest

from conftest import BASE_URL, auth_editor
from landscape_cli.client import (
    LEGACY_API_VERSION,
    ApiRequest,
    Client,
    ClientWithResponses,
    InvokeLegacyActionParams,
    LegacyAction,
    encode_query_request_editor,
    legacy_action_params,
)


def _client(server) -> Client:
    return Client(BASE_URL, transport=server, editors=[auth_editor])


def _typed(server) -> ClientWithResponses:
    return ClientWithResponses(BASE_URL, transport=server, editors=[auth_editor])


def test_invoke_sends_version_action_and_params_once(server):
    values = {"title": "new script", "code": "ZWNobyAiSGVsbG8i", "script_type": "V1"}
    resp = _client(server).invoke_legacy_action(
        legacy_action_params("CreateScript"),
        encode_query_request_editor(values),
    )

    assert resp.status_code == 200
    assert len(server.requests) == 1
    req = server.last
    assert req.method == "POST"
    assert urlparse(req.url).path == "/api/"
    assert req.headers["authorization"] == "Bearer test-token"
    query = server.last_query()
    assert query == {
        "action": ["CreateScript"],
        "version": [LEGACY_API_VERSION],
        "title": ["new script"],
        "code": ["ZWNobyAiSGVsbG8i"],
        "script_type": ["V1"],
    }
    assert req.body is None


def test_missing_version_surfaces_server_400(server):
    params = InvokeLegacyActionParams(action="CreateScript", version="")
    resp = _client(server).invoke_legacy_action(
        params,
        encode_query_request_editor({"title": "example", "code": "ZWNobyAiSGVsbG8i"}),
    )
    assert resp.status_code == 400
    assert server.last_query()["version"] == [""]


def test_missing_action_surfaces_server_400(server):
    params = InvokeLegacyActionParams(action="", version="2011-08-01")
    resp = _client(server).invoke_legacy_action(
        params,
        encode_query_request_editor({"title": "example"}),
    )
    assert resp.status_code == 400


def test_create_script_raw_response_contains_title(server):
    resp = _client(server).invoke_legacy_action(
        legacy_action_params(LegacyAction.CREATE_SCRIPT),
        encode_query_request_editor({"title": "new script", "code": "ZWNobyAiSGVsbG8i"}),
    )
    assert resp.status_code == 200
    assert "new script" in resp.text()


def test_create_script_typed_response_decodes_v1(server):
    resp = _typed(server).invoke_legacy_action_with_response(
        legacy_action_params("CreateScript"),
        encode_query_request_editor({"title": "new script", "code": "ZWNobyAiSGVsbG8i"}),
    )
    assert resp.status_code() == 200
    assert resp.json200 is not None
    script = resp.json200.as_script_result().as_v1()
    assert script.id == 42
    assert script.title == "new script"


def test_edit_script_typed_response(server):
    resp = _typed(server).invoke_legacy_action_with_response(
        legacy_action_params("EditScript"),
        encode_query_request_editor({"script_id": "42", "title": "edited title"}),
    )
    script = resp.json200.as_script_result().as_v1()
    assert script.title == "edited title"


def test_copy_script_typed_response(server):
    resp = _typed(server).invoke_legacy_action_with_response(
        legacy_action_params("CopyScript"),
        encode_query_request_editor({"script_id": "42", "destination_title": "copy title"}),
    )
    script = resp.json200.as_script_result().as_v1()
    assert (script.id, script.title) == (99, "copy title")


def test_remove_script_raw_response_is_204(server):
    resp = _client(server).invoke_legacy_action(
        legacy_action_params("RemoveScript"),
        encode_query_request_editor({"script_id": "42"}),
    )
    assert resp.status_code == 204
    assert resp.body == b""


def test_remove_attachment_typed_response_has_no_payload(server):
    resp = _typed(server).invoke_legacy_action_with_response(
        legacy_action_params("RemoveScriptAttachment"),
        encode_query_request_editor({"script_id": "42", "filename": "note.txt"}),
    )
    assert resp.status_code() == 204
    assert resp.json200 is None
    assert resp.json404 is None


def test_create_attachment_typed_response_is_filename(server):
    resp = _typed(server).invoke_legacy_action_with_response(
        legacy_action_params("CreateScriptAttachment"),
        encode_query_request_editor({"script_id": "42", "file": "note.txt$$Zm9v"}),
    )
    assert resp.status_code() == 200
    assert resp.json200.as_legacy_script_attachment() == "note.txt"
    assert server.last_query()["file"] == ["note.txt$$Zm9v"]


def test_query_values_round_trip_through_server_echo(server):
    title = "diag & cleanup: 100% = ok? / ünïcode +plus"
    resp = _typed(server).invoke_legacy_action_with_response(
        legacy_action_params("CreateScript"),
        encode_query_request_editor({"title": title}),
    )
    assert resp.json200.as_script_result().as_v1().title == title


def test_unknown_action_name_rejected_at_boundary():
    with pytest.raises(ValueError, match="unknown legacy action 'CreateScirpt'"):
        legacy_action_params("CreateScirpt")


def test_editor_does_not_drop_existing_query():
    req_url = f"{BASE_URL}/api/?action=EditScript&version=2011-08-01"
    req = ApiRequest(method="POST", url=req_url)
    encode_query_request_editor({"script_id": ["1", "2"]})(req)
    assert parse_qs(urlparse(req.url).query) == {
        "action": ["EditScript"],
        "version": ["2011-08-01"],
        "script_id": ["1", "2"],
    }


def test_caller_values_never_duplicate_action_or_version(server):
    _client(server).invoke_legacy_action(
        legacy_action_params(LegacyAction.REMOVE_SCRIPT),
        encode_query_request_editor({"script_id": "42", "version": LEGACY_API_VERSION}),
    )
    query = server.last_query()
    assert query["action"] == ["RemoveScript"]
    assert query["version"] == [LEGACY_API_VERSION]
