"""Script payload shapes and the untagged unions that carry them.

The legacy endpoint answers with bare JSON: a script object for the
script actions, a bare JSON string for attachment creation. Nothing on the
wire says which script format came back, so the caller picks the accessor
that matches the action it invoked. A payload that satisfies both script
shapes decodes under either one, leaving the other shape's optional fields
as ``None``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from .errors import DecodeError

T = TypeVar("T")


def _load_json(raw: bytes | str, *, label: str) -> Any:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, (bytes, bytearray)) else str(raw)
    if not text.strip():
        raise DecodeError(f"invalid JSON for {label}: empty body", raw=_as_bytes(raw))
    try:
        return json.loads(text)
    except ValueError as e:
        raise DecodeError(f"invalid JSON for {label}: {e}", raw=_as_bytes(raw)) from e


def _as_bytes(raw: bytes | str) -> bytes:
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw)
    return str(raw).encode("utf-8")


def _object(val: Any, *, label: str) -> dict[str, Any]:
    if not isinstance(val, dict):
        raise DecodeError(f"cannot decode {label}: expected JSON object, got {_json_type(val)}")
    return val


def _json_type(val: Any) -> str:
    if val is None:
        return "null"
    if isinstance(val, bool):
        return "boolean"
    if isinstance(val, (int, float)):
        return "number"
    if isinstance(val, str):
        return "string"
    if isinstance(val, list):
        return "array"
    return "object"


def _int(obj: dict[str, Any], key: str, *, label: str, required: bool = False) -> int | None:
    val = obj.get(key)
    if val is None:
        if required:
            raise DecodeError(f"cannot decode {label}: missing required field {key!r}")
        return None
    if isinstance(val, bool) or not isinstance(val, int):
        raise DecodeError(f"cannot decode {label}: field {key!r} must be an integer, got {val!r}")
    return val


def _str(obj: dict[str, Any], key: str, *, label: str, required: bool = False) -> str | None:
    val = obj.get(key)
    if val is None:
        if required:
            raise DecodeError(f"cannot decode {label}: missing required field {key!r}")
        return None
    if not isinstance(val, str):
        raise DecodeError(f"cannot decode {label}: field {key!r} must be a string, got {_json_type(val)}")
    return val


def _nested(obj: dict[str, Any], key: str, decode: Callable[[dict[str, Any]], T], *, label: str) -> T | None:
    val = obj.get(key)
    if val is None:
        return None
    return decode(_object(val, label=f"{label}.{key}"))


def _list(obj: dict[str, Any], key: str, decode: Callable[[Any], T], *, label: str) -> list[T] | None:
    val = obj.get(key)
    if val is None:
        return None
    if not isinstance(val, list):
        raise DecodeError(f"cannot decode {label}: field {key!r} must be an array, got {_json_type(val)}")
    return [decode(item) for item in val]


@dataclass(frozen=True)
class ScriptCreator:
    id: int | None = None
    name: str | None = None
    email: str | None = None

    @classmethod
    def from_obj(cls, obj: dict[str, Any]) -> ScriptCreator:
        label = "script creator"
        return cls(
            id=_int(obj, "id", label=label),
            name=_str(obj, "name", label=label),
            email=_str(obj, "email", label=label),
        )


@dataclass(frozen=True)
class ScriptCreatedBy:
    id: int | None = None
    name: str | None = None

    @classmethod
    def from_obj(cls, obj: dict[str, Any]) -> ScriptCreatedBy:
        label = "script created_by"
        return cls(id=_int(obj, "id", label=label), name=_str(obj, "name", label=label))


@dataclass(frozen=True)
class ScriptAttachment:
    id: int | None = None
    filename: str | None = None

    @classmethod
    def from_value(cls, val: Any) -> ScriptAttachment:
        label = "V2 script attachment"
        obj = _object(val, label=label)
        return cls(id=_int(obj, "id", label=label), filename=_str(obj, "filename", label=label))


def _v1_attachment(val: Any) -> str:
    if not isinstance(val, str):
        raise DecodeError(f"cannot decode V1 script attachment: expected string, got {_json_type(val)}")
    return val


@dataclass(frozen=True)
class ScriptV1:
    id: int
    title: str
    creator: ScriptCreator | None = None
    attachments: list[str] | None = None
    status: str | None = None
    time_limit: int | None = None
    username: str | None = None
    created_at: str | None = None
    last_edited_at: str | None = None
    code: str | None = None

    @classmethod
    def from_obj(cls, obj: dict[str, Any]) -> ScriptV1:
        label = "V1 script"
        return cls(
            id=int(_int(obj, "id", label=label, required=True)),
            title=str(_str(obj, "title", label=label, required=True)),
            creator=_nested(obj, "creator", ScriptCreator.from_obj, label=label),
            attachments=_list(obj, "attachments", _v1_attachment, label=label),
            **_common_optional(obj, label=label),
        )


@dataclass(frozen=True)
class ScriptV2:
    id: int
    title: str
    created_by: ScriptCreatedBy | None = None
    attachments: list[ScriptAttachment] | None = None
    status: str | None = None
    time_limit: int | None = None
    username: str | None = None
    created_at: str | None = None
    last_edited_at: str | None = None
    code: str | None = None

    @classmethod
    def from_obj(cls, obj: dict[str, Any]) -> ScriptV2:
        label = "V2 script"
        created_key = "created_by" if obj.get("created_by") is not None else "createdBy"
        return cls(
            id=int(_int(obj, "id", label=label, required=True)),
            title=str(_str(obj, "title", label=label, required=True)),
            created_by=_nested(obj, created_key, ScriptCreatedBy.from_obj, label=label),
            attachments=_list(obj, "attachments", ScriptAttachment.from_value, label=label),
            **_common_optional(obj, label=label),
        )


def _common_optional(obj: dict[str, Any], *, label: str) -> dict[str, Any]:
    return {
        "status": _str(obj, "status", label=label),
        "time_limit": _int(obj, "time_limit", label=label),
        "username": _str(obj, "username", label=label),
        "created_at": _str(obj, "created_at", label=label),
        "last_edited_at": _str(obj, "last_edited_at", label=label),
        "code": _str(obj, "code", label=label),
    }


class ScriptResult:
    """A script payload whose format version is not known yet."""

    def __init__(self, raw: bytes | str) -> None:
        self.raw = _as_bytes(raw)

    def __repr__(self) -> str:
        return f"ScriptResult({self.raw!r})"

    def _decode(self, decode: Callable[[dict[str, Any]], T], *, label: str) -> T:
        obj = _load_json(self.raw, label=label)
        try:
            return decode(_object(obj, label=label))
        except DecodeError as e:
            raise DecodeError(str(e), raw=self.raw) from None

    def as_v1(self) -> ScriptV1:
        return self._decode(ScriptV1.from_obj, label="V1 script")

    def as_v2(self) -> ScriptV2:
        return self._decode(ScriptV2.from_obj, label="V2 script")


class LegacyActionResult:
    """Success payload of a legacy action: a script object or an attachment name."""

    def __init__(self, raw: bytes | str) -> None:
        self.raw = _as_bytes(raw)

    def __repr__(self) -> str:
        return f"LegacyActionResult({self.raw!r})"

    def as_script_result(self) -> ScriptResult:
        obj = _load_json(self.raw, label="script result")
        if not isinstance(obj, dict):
            raise DecodeError(
                f"cannot decode script result: expected JSON object, got {_json_type(obj)}",
                raw=self.raw,
            )
        return ScriptResult(self.raw)

    def as_legacy_script_attachment(self) -> str:
        return decode_json_string(self.raw, label="script attachment")


@dataclass(frozen=True)
class ErrorEnvelope:
    message: str | None = None

    @classmethod
    def from_raw(cls, raw: bytes | str) -> ErrorEnvelope:
        obj = _load_json(raw, label="error envelope")
        if not isinstance(obj, dict):
            raise DecodeError(
                f"cannot decode error envelope: expected JSON object, got {_json_type(obj)}",
                raw=_as_bytes(raw),
            )
        try:
            message = _str(obj, "message", label="error envelope")
        except DecodeError as e:
            raise DecodeError(str(e), raw=_as_bytes(raw)) from None
        return cls(message=message)


def decode_json_string(raw: bytes | str, *, label: str) -> str:
    obj = _load_json(raw, label=label)
    if not isinstance(obj, str):
        raise DecodeError(f"cannot decode {label}: expected JSON string, got {_json_type(obj)}", raw=_as_bytes(raw))
    return obj
