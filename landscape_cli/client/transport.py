from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .errors import TransportError

DEFAULT_TIMEOUT_SECONDS = 30


@dataclass
class ApiRequest:
    """Outgoing request, mutable so request editors can decorate it."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    headers: dict[str, str]
    body: bytes

    @property
    def status(self) -> str:
        return f"{self.status_code}"

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    def send(self, request: ApiRequest) -> RawResponse: ...


class UrllibTransport:
    """Default transport; any HTTP status comes back as a response."""

    def __init__(self, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS, context=None) -> None:
        self.timeout_seconds = timeout_seconds
        self.context = context

    def send(self, request: ApiRequest) -> RawResponse:
        req = Request(request.url, data=request.body, method=str(request.method).upper())
        for k, v in request.headers.items():
            req.add_header(k, v)
        try:
            with urlopen(req, timeout=self.timeout_seconds, context=self.context) as resp:
                status = getattr(resp, "status", 200)
                hdrs = {k.lower(): v for k, v in dict(resp.headers).items()}
                data = resp.read()
                return RawResponse(status_code=int(status), headers=hdrs, body=data)
        except HTTPError as e:
            hdrs = {k.lower(): v for k, v in dict(e.headers or {}).items()}
            data = e.read() if hasattr(e, "read") else b""
            return RawResponse(status_code=int(getattr(e, "code", 0) or 0), headers=hdrs, body=data or b"")
        except URLError as e:
            raise TransportError(f"http request failed: {e}") from e
        except (TimeoutError, OSError) as e:
            raise TransportError(f"http request failed: {e}") from e
