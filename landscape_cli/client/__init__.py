from .actions import (
    LEGACY_API_VERSION,
    InvokeLegacyActionParams,
    LegacyAction,
    encode_query_request_editor,
    legacy_action_params,
)
from .auth import AccessKeyProvider, RequestEditor, bearer_token_editor
from .client import Client, ClientWithResponses
from .errors import AuthError, DecodeError, LandscapeClientError, TransportError
from .models import (
    ErrorEnvelope,
    LegacyActionResult,
    ScriptAttachment,
    ScriptCreatedBy,
    ScriptCreator,
    ScriptResult,
    ScriptV1,
    ScriptV2,
)
from .query import encode_query
from .responses import (
    EmptyResponse,
    GetScriptAttachmentResponse,
    GetScriptResponse,
    InvokeLegacyActionResponse,
)
from .transport import ApiRequest, RawResponse, Transport, UrllibTransport

__all__ = [
    "LEGACY_API_VERSION",
    "AccessKeyProvider",
    "ApiRequest",
    "AuthError",
    "Client",
    "ClientWithResponses",
    "DecodeError",
    "EmptyResponse",
    "ErrorEnvelope",
    "GetScriptAttachmentResponse",
    "GetScriptResponse",
    "InvokeLegacyActionParams",
    "InvokeLegacyActionResponse",
    "LandscapeClientError",
    "LegacyAction",
    "LegacyActionResult",
    "RawResponse",
    "RequestEditor",
    "ScriptAttachment",
    "ScriptCreatedBy",
    "ScriptCreator",
    "ScriptResult",
    "ScriptV1",
    "ScriptV2",
    "Transport",
    "TransportError",
    "UrllibTransport",
    "bearer_token_editor",
    "encode_query",
    "encode_query_request_editor",
    "legacy_action_params",
]
