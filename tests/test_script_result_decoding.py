import json

import pytest

from landscape_cli.client import (
    DecodeError,
    ErrorEnvelope,
    LegacyActionResult,
    ScriptAttachment,
    ScriptCreatedBy,
    ScriptResult,
)


def _raw(obj) -> bytes:
    return json.dumps(obj).encode("utf-8")


def test_as_v1_minimal_payload():
    script = ScriptResult(_raw({"id": 1, "title": "diagnostic script"})).as_v1()
    assert script.id == 1
    assert script.title == "diagnostic script"
    assert script.creator is None
    assert script.attachments is None


def test_as_v1_reads_creator_and_attachment_names():
    payload = {
        "id": 3,
        "title": "cleanup",
        "creator": {"id": 7, "name": "jim", "email": "jim@example.com"},
        "attachments": ["note.txt", "data.csv"],
        "status": "ACTIVE",
        "time_limit": 300,
    }
    script = ScriptResult(_raw(payload)).as_v1()
    assert script.creator.email == "jim@example.com"
    assert script.creator.id == 7
    assert script.attachments == ["note.txt", "data.csv"]
    assert script.status == "ACTIVE"
    assert script.time_limit == 300


def test_as_v2_reads_created_by():
    payload = {"id": 8, "title": "v2", "created_by": {"id": 5, "name": "jim"}}
    script = ScriptResult(_raw(payload)).as_v2()
    assert script.created_by == ScriptCreatedBy(id=5, name="jim")


def test_as_v2_accepts_camel_case_created_by():
    payload = {"id": 8, "title": "v2", "createdBy": {"id": 5, "name": "jim"}}
    assert ScriptResult(_raw(payload)).as_v2().created_by.id == 5


def test_as_v2_reads_attachment_objects():
    payload = {"id": 8, "title": "v2", "attachments": [{"id": 1, "filename": "note.txt"}]}
    script = ScriptResult(_raw(payload)).as_v2()
    assert script.attachments == [ScriptAttachment(id=1, filename="note.txt")]


def test_ambiguous_payload_decodes_under_both_accessors():
    result = ScriptResult(_raw({"id": 2, "title": "shared", "created_by": {"id": 5, "name": "jim"}}))
    v1 = result.as_v1()
    v2 = result.as_v2()
    assert (v1.id, v1.title, v1.creator) == (2, "shared", None)
    assert v2.created_by.id == 5


def test_attachment_shape_mismatch_is_a_decode_error():
    v2_shaped = ScriptResult(_raw({"id": 1, "title": "t", "attachments": [{"id": 1, "filename": "a"}]}))
    with pytest.raises(DecodeError, match="V1 script attachment"):
        v2_shaped.as_v1()

    v1_shaped = ScriptResult(_raw({"id": 1, "title": "t", "attachments": ["a"]}))
    with pytest.raises(DecodeError, match="V2 script attachment"):
        v1_shaped.as_v2()


@pytest.mark.parametrize(
    "payload, match",
    [
        ({"title": "no id"}, "missing required field 'id'"),
        ({"id": 1}, "missing required field 'title'"),
        ({"id": "1", "title": "t"}, "field 'id' must be an integer"),
        ({"id": True, "title": "t"}, "field 'id' must be an integer"),
        ({"id": 1.5, "title": "t"}, "field 'id' must be an integer"),
        ({"id": 1.0, "title": "t"}, "field 'id' must be an integer"),
        ({"id": 1, "title": 5}, "field 'title' must be a string"),
        ({"id": 1, "title": "t", "creator": "jim"}, "expected JSON object"),
        ([1, 2], "expected JSON object, got array"),
    ],
)
def test_as_v1_rejects_mismatched_shapes(payload, match):
    with pytest.raises(DecodeError, match=match) as exc:
        ScriptResult(_raw(payload)).as_v1()
    assert exc.value.raw == _raw(payload)


def test_invalid_json_is_a_decode_error():
    with pytest.raises(DecodeError, match="invalid JSON"):
        ScriptResult(b"{not json").as_v2()
    with pytest.raises(DecodeError, match="empty body"):
        ScriptResult(b"").as_v1()


def test_legacy_result_attachment_accessor():
    assert LegacyActionResult(b'"note.txt"\n').as_legacy_script_attachment() == "note.txt"
    with pytest.raises(DecodeError, match="expected JSON string, got object"):
        LegacyActionResult(_raw({"id": 1})).as_legacy_script_attachment()
    with pytest.raises(DecodeError, match="got array"):
        LegacyActionResult(_raw(["note.txt"])).as_legacy_script_attachment()


def test_legacy_result_script_accessor_requires_object():
    result = LegacyActionResult(_raw({"id": 4, "title": "x"}))
    assert result.as_script_result().as_v1().id == 4
    with pytest.raises(DecodeError, match="expected JSON object, got string"):
        LegacyActionResult(b'"note.txt"').as_script_result()


def test_error_envelope_message():
    assert ErrorEnvelope.from_raw(_raw({"message": "not found"})).message == "not found"
    assert ErrorEnvelope.from_raw(_raw({})).message is None
    with pytest.raises(DecodeError):
        ErrorEnvelope.from_raw(b'"nope"')


def test_error_envelope_rejects_non_string_message():
    raw = _raw({"message": {"detail": "nope"}})
    with pytest.raises(DecodeError, match="field 'message' must be a string") as exc:
        ErrorEnvelope.from_raw(raw)
    assert exc.value.raw == raw
