from __future__ import annotations

from dataclasses import dataclass

from .errors import DecodeError
from .models import ErrorEnvelope, LegacyActionResult, ScriptResult, decode_json_string
from .transport import RawResponse


@dataclass(frozen=True)
class TypedResponse:
    """Raw response plus the structured fields decoded for its status code.

    Fields are only decoded from JSON bodies; anything else stays on ``raw``.
    """

    raw: RawResponse

    @property
    def body(self) -> bytes:
        return self.raw.body

    @property
    def headers(self) -> dict[str, str]:
        return self.raw.headers

    def status_code(self) -> int:
        return self.raw.status_code

    def status(self) -> str:
        return self.raw.status


def _is_json(raw: RawResponse) -> bool:
    return "json" in raw.headers.get("content-type", "").lower()


def _json404(raw: RawResponse) -> ErrorEnvelope | None:
    if raw.status_code != 404 or not _is_json(raw) or not raw.body.strip():
        return None
    try:
        return ErrorEnvelope.from_raw(raw.body)
    except DecodeError as e:
        raise DecodeError(str(e), raw=raw.body, response=raw) from None


def _has_payload(raw: RawResponse) -> bool:
    return raw.status_code == 200 and _is_json(raw) and bool(raw.body.strip())


@dataclass(frozen=True)
class InvokeLegacyActionResponse(TypedResponse):
    json200: LegacyActionResult | None = None
    json404: ErrorEnvelope | None = None

    @classmethod
    def parse(cls, raw: RawResponse) -> InvokeLegacyActionResponse:
        return cls(
            raw=raw,
            json200=LegacyActionResult(raw.body) if _has_payload(raw) else None,
            json404=_json404(raw),
        )


@dataclass(frozen=True)
class GetScriptResponse(TypedResponse):
    json200: ScriptResult | None = None
    json404: ErrorEnvelope | None = None

    @classmethod
    def parse(cls, raw: RawResponse) -> GetScriptResponse:
        return cls(
            raw=raw,
            json200=ScriptResult(raw.body) if _has_payload(raw) else None,
            json404=_json404(raw),
        )


@dataclass(frozen=True)
class GetScriptAttachmentResponse(TypedResponse):
    json200: str | None = None
    json404: ErrorEnvelope | None = None

    @classmethod
    def parse(cls, raw: RawResponse) -> GetScriptAttachmentResponse:
        json200 = None
        if _has_payload(raw):
            try:
                json200 = decode_json_string(raw.body, label="script attachment")
            except DecodeError as e:
                raise DecodeError(str(e), raw=raw.body, response=raw) from None
        return cls(raw=raw, json200=json200, json404=_json404(raw))


@dataclass(frozen=True)
class EmptyResponse(TypedResponse):
    """Archive/redact: success is a 204 with no payload to decode."""

    json404: ErrorEnvelope | None = None

    @classmethod
    def parse(cls, raw: RawResponse) -> EmptyResponse:
        return cls(raw=raw, json404=_json404(raw))
