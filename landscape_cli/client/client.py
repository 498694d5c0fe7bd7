from __future__ import annotations

from typing import Iterable
from urllib.parse import quote

from .actions import InvokeLegacyActionParams
from .auth import AccessKeyProvider, RequestEditor
from .query import merge_query
from .responses import (
    EmptyResponse,
    GetScriptAttachmentResponse,
    GetScriptResponse,
    InvokeLegacyActionResponse,
)
from .transport import ApiRequest, RawResponse, Transport, UrllibTransport

LEGACY_ACTION_PATH = "/api/"


def _path_id(value: int) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"path identifiers must be integers, got {type(value).__name__}")
    return quote(str(value), safe="")


class Client:
    """One request per call; HTTP status codes are returned, never raised.

    ``editors`` run in order on every outgoing request (for example to add an
    ``Authorization`` header) before any per-call editors.
    """

    def __init__(
        self,
        base_url: str,
        *,
        transport: Transport | None = None,
        editors: Iterable[RequestEditor] = (),
    ) -> None:
        base = str(base_url or "").strip().rstrip("/")
        if not base:
            raise ValueError("base_url is required")
        self.base_url = base
        self.transport: Transport = transport or UrllibTransport()
        self.editors: list[RequestEditor] = list(editors)
        for editor in self.editors:
            if isinstance(editor, AccessKeyProvider):
                editor.bind(base_url=self.base_url, transport=self.transport)

    def _send(self, request: ApiRequest, editors: Iterable[RequestEditor]) -> RawResponse:
        request.headers.setdefault("accept", "application/json")
        for editor in (*self.editors, *editors):
            editor(request)
        return self.transport.send(request)

    def _url(self, path: str) -> str:
        p = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{p}"

    def invoke_legacy_action(self, params: InvokeLegacyActionParams, *editors: RequestEditor) -> RawResponse:
        url = merge_query(self._url(LEGACY_ACTION_PATH), params.query())
        return self._send(ApiRequest(method="POST", url=url), editors)

    def get_script(self, script_id: int, *editors: RequestEditor) -> RawResponse:
        return self._send(ApiRequest(method="GET", url=self._url(f"/api/scripts/{_path_id(script_id)}")), editors)

    def get_script_attachment(self, script_id: int, attachment_id: int, *editors: RequestEditor) -> RawResponse:
        path = f"/api/scripts/{_path_id(script_id)}/attachments/{_path_id(attachment_id)}"
        return self._send(ApiRequest(method="GET", url=self._url(path)), editors)

    def archive_script(self, script_id: int, *editors: RequestEditor) -> RawResponse:
        return self._send(ApiRequest(method="POST", url=self._url(f"/api/scripts/{_path_id(script_id)}:archive")), editors)

    def redact_script(self, script_id: int, *editors: RequestEditor) -> RawResponse:
        return self._send(ApiRequest(method="POST", url=self._url(f"/api/scripts/{_path_id(script_id)}:redact")), editors)


class ClientWithResponses(Client):
    """Same calls as :class:`Client`, with bodies decoded by status code."""

    def invoke_legacy_action_with_response(
        self, params: InvokeLegacyActionParams, *editors: RequestEditor
    ) -> InvokeLegacyActionResponse:
        return InvokeLegacyActionResponse.parse(self.invoke_legacy_action(params, *editors))

    def get_script_with_response(self, script_id: int, *editors: RequestEditor) -> GetScriptResponse:
        return GetScriptResponse.parse(self.get_script(script_id, *editors))

    def get_script_attachment_with_response(
        self, script_id: int, attachment_id: int, *editors: RequestEditor
    ) -> GetScriptAttachmentResponse:
        return GetScriptAttachmentResponse.parse(self.get_script_attachment(script_id, attachment_id, *editors))

    def archive_script_with_response(self, script_id: int, *editors: RequestEditor) -> EmptyResponse:
        return EmptyResponse.parse(self.archive_script(script_id, *editors))

    def redact_script_with_response(self, script_id: int, *editors: RequestEditor) -> EmptyResponse:
        return EmptyResponse.parse(self.redact_script(script_id, *editors))
