from __future__ import annotations

import json
import threading
from typing import Callable

from .errors import AuthError
from .transport import ApiRequest, Transport, UrllibTransport

RequestEditor = Callable[[ApiRequest], None]

ACCESS_KEY_LOGIN_PATH = "/api/v2/login/access-key"


def bearer_token_editor(token: str) -> RequestEditor:
    tok = str(token or "").strip()
    if not tok:
        raise AuthError("missing bearer token")

    def edit(request: ApiRequest) -> None:
        request.headers["authorization"] = f"Bearer {tok}"

    return edit


class AccessKeyProvider:
    """Exchange an access/secret key pair for a bearer token.

    The token is fetched on first use and reused for the lifetime of the
    provider. Call ``reset()`` to force a new login.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        *,
        base_url: str = "",
        transport: Transport | None = None,
    ) -> None:
        self.access_key = access_key
        self.secret_key = secret_key
        self.base_url = str(base_url or "").rstrip("/")
        self.transport = transport or UrllibTransport()
        self._token = ""
        self._lock = threading.Lock()

    def bind(self, *, base_url: str, transport: Transport) -> None:
        if not self.base_url:
            self.base_url = str(base_url or "").rstrip("/")
        self.transport = transport

    def reset(self) -> None:
        with self._lock:
            self._token = ""

    def token(self) -> str:
        with self._lock:
            if not self._token:
                self._token = self._login()
            return self._token

    def _login(self) -> str:
        if not self.base_url:
            raise AuthError("access key login requires a base URL")
        body = json.dumps(
            {"access_key": self.access_key, "secret_key": self.secret_key},
            separators=(",", ":"),
        ).encode("utf-8")
        resp = self.transport.send(
            ApiRequest(
                method="POST",
                url=f"{self.base_url}{ACCESS_KEY_LOGIN_PATH}",
                headers={"content-type": "application/json", "accept": "application/json"},
                body=body,
            )
        )
        if resp.status_code < 200 or resp.status_code >= 300:
            raise AuthError(f"access key login failed: status={resp.status_code} body={resp.text()}")
        try:
            parsed = json.loads(resp.text())
        except ValueError as e:
            raise AuthError(f"invalid JSON from access key login: {e}") from e
        tok = str(parsed.get("token") or "").strip() if isinstance(parsed, dict) else ""
        if not tok:
            raise AuthError("access key login response missing token")
        return tok

    def __call__(self, request: ApiRequest) -> None:
        request.headers["authorization"] = f"Bearer {self.token()}"
