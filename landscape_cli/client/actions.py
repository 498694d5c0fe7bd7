from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Mapping

from .auth import RequestEditor
from .query import QueryValue, merge_query
from .transport import ApiRequest

LEGACY_API_VERSION = "2011-08-01"


class LegacyAction(str, enum.Enum):
    CREATE_SCRIPT = "CreateScript"
    EDIT_SCRIPT = "EditScript"
    COPY_SCRIPT = "CopyScript"
    REMOVE_SCRIPT = "RemoveScript"
    CREATE_SCRIPT_ATTACHMENT = "CreateScriptAttachment"
    REMOVE_SCRIPT_ATTACHMENT = "RemoveScriptAttachment"

    @classmethod
    def parse(cls, raw: LegacyAction | str) -> LegacyAction:
        if isinstance(raw, cls):
            return raw
        name = str(raw or "").strip()
        for action in cls:
            if action.value == name:
                return action
        known = ", ".join(a.value for a in cls)
        raise ValueError(f"unknown legacy action {name!r} (expected one of: {known})")


@dataclass(frozen=True)
class InvokeLegacyActionParams:
    """Mandatory query parameters of every legacy action call.

    Values are sent as given; the server rejects empty ones with a 400.
    """

    action: str
    version: str = LEGACY_API_VERSION

    def query(self) -> dict[str, str]:
        return {"action": str(self.action), "version": str(self.version)}


def legacy_action_params(action: LegacyAction | str) -> InvokeLegacyActionParams:
    return InvokeLegacyActionParams(action=LegacyAction.parse(action).value)


def encode_query_request_editor(values: Mapping[str, QueryValue]) -> RequestEditor:
    """Request editor that adds action-specific parameters to the query string."""
    snapshot = dict(values)

    def edit(request: ApiRequest) -> None:
        request.url = merge_query(request.url, snapshot)

    return edit
