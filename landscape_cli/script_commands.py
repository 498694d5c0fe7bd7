from __future__ import annotations

import argparse
import base64
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from . import auth_inputs
from .cli_shared import GlobalOpts, OpError, UsageError, _eprint, _env_or_none, _print_json
from .client import (
    AccessKeyProvider,
    ClientWithResponses,
    DecodeError,
    LegacyAction,
    RequestEditor,
    Transport,
    UrllibTransport,
    bearer_token_editor,
    encode_query_request_editor,
    legacy_action_params,
)
from .client.responses import TypedResponse

ATTACHMENT_FILE_SEPARATOR = "$$"
SCRIPT_TYPES = ("V1", "V2")


def _transport(g: GlobalOpts) -> Transport:
    return UrllibTransport(timeout_seconds=g.timeout_seconds)


def _auth_editor(auth: auth_inputs.ApiRequestAuth) -> RequestEditor:
    if auth.api_token:
        return bearer_token_editor(auth.api_token)
    keys = auth.access_keys
    if keys is None:
        raise UsageError("missing credentials")
    return AccessKeyProvider(keys.access_key, keys.secret_key)


def _client(g: GlobalOpts) -> ClientWithResponses:
    try:
        auth = auth_inputs.resolve_api_request_auth(
            base_url=g.base_url,
            access_key=g.access_key,
            secret_key=g.secret_key,
            api_token=g.api_token,
            env_or_none=_env_or_none,
        )
    except auth_inputs.AuthInputError as e:
        raise UsageError(str(e)) from e
    return ClientWithResponses(auth.base_url, transport=_transport(g), editors=[_auth_editor(auth)])


def _script_id(raw: Any, *, name: str = "script ID") -> int:
    text = str(raw if raw is not None else "").strip()
    if not text:
        raise UsageError(f"{name} must be provided")
    try:
        val = int(text)
    except ValueError as e:
        raise UsageError(f"{name} must be an integer; got {text!r}") from e
    if val <= 0:
        raise UsageError(f"{name} must be a positive integer; got {val}")
    return val


def _encode_code(code: str) -> str:
    return base64.b64encode(str(code).encode("utf-8")).decode("ascii")


def _attachment_file_value(*, file_value: str | None, path: str | None) -> str:
    file_value = str(file_value or "").strip()
    path = str(path or "").strip()
    if bool(file_value) == bool(path):
        raise UsageError("provide exactly one of --file or --path")
    if file_value:
        name, sep, payload = file_value.partition(ATTACHMENT_FILE_SEPARATOR)
        if not sep or not name.strip() or not payload:
            raise UsageError(
                f"invalid --file value: expected <filename>{ATTACHMENT_FILE_SEPARATOR}<base64 encoded file contents>"
            )
        return file_value
    src = Path(path).expanduser()
    try:
        raw = src.read_bytes()
    except OSError as e:
        raise UsageError(f"failed to read --path {src}: {e}") from e
    encoded = base64.b64encode(raw).decode("ascii")
    return f"{src.name}{ATTACHMENT_FILE_SEPARATOR}{encoded}"


def _write_response(res: TypedResponse, g: GlobalOpts) -> int:
    """Print the body to stdout and report the status; non-2xx exits 1."""
    code = res.status_code()
    if not g.quiet:
        _eprint(f"status: {code}")
    text = res.body.decode("utf-8", errors="replace")
    if text.strip():
        try:
            parsed = json.loads(text)
        except ValueError:
            sys.stdout.write(text if text.endswith("\n") else text + "\n")
        else:
            _print_json(parsed, pretty=g.pretty)
    if 200 <= code < 300:
        return 0
    json404 = getattr(res, "json404", None)
    if json404 is not None and json404.message and not g.quiet:
        _eprint(f"not found: {json404.message}")
    return 1


def _invoke_action(g: GlobalOpts, action: LegacyAction, values: dict[str, str]) -> int:
    api = _client(g)
    res = api.invoke_legacy_action_with_response(
        legacy_action_params(action),
        encode_query_request_editor(values),
    )
    return _write_response(res, g)


def cmd_script_create(args: argparse.Namespace, g: GlobalOpts) -> int:
    title = str(args.title or "").strip()
    if not title:
        raise UsageError("missing --title")
    script_type = str(getattr(args, "script_type", None) or "V1").strip().upper()
    if script_type not in SCRIPT_TYPES:
        raise UsageError(f"invalid --script-type {script_type!r} (expected one of: {', '.join(SCRIPT_TYPES)})")
    values = {
        "title": title,
        "code": _encode_code(args.code),
        "script_type": script_type,
    }
    return _invoke_action(g, LegacyAction.CREATE_SCRIPT, values)


def cmd_script_edit(args: argparse.Namespace, g: GlobalOpts) -> int:
    script_id = _script_id(args.script_id)
    values = {
        "script_id": str(script_id),
        "code": _encode_code(args.code),
    }
    title = str(getattr(args, "title", None) or "").strip()
    if title:
        values["title"] = title
    return _invoke_action(g, LegacyAction.EDIT_SCRIPT, values)


def cmd_script_copy(args: argparse.Namespace, g: GlobalOpts) -> int:
    script_id = _script_id(args.script_id)
    destination_title = str(args.destination_title or "").strip()
    if not destination_title:
        raise UsageError("missing --destination-title")
    values = {
        "script_id": str(script_id),
        "destination_title": destination_title,
    }
    access_group = str(getattr(args, "access_group", None) or "").strip()
    if access_group:
        values["access_group"] = access_group
    return _invoke_action(g, LegacyAction.COPY_SCRIPT, values)


def cmd_script_remove(args: argparse.Namespace, g: GlobalOpts) -> int:
    script_id = _script_id(args.script_id)
    return _invoke_action(g, LegacyAction.REMOVE_SCRIPT, {"script_id": str(script_id)})


def cmd_script_get(args: argparse.Namespace, g: GlobalOpts) -> int:
    script_id = _script_id(args.script_id)
    return _write_response(_client(g).get_script_with_response(script_id), g)


def cmd_script_archive(args: argparse.Namespace, g: GlobalOpts) -> int:
    script_id = _script_id(args.script_id)
    return _write_response(_client(g).archive_script_with_response(script_id), g)


def cmd_script_redact(args: argparse.Namespace, g: GlobalOpts) -> int:
    script_id = _script_id(args.script_id)
    return _write_response(_client(g).redact_script_with_response(script_id), g)


def cmd_attachment_create(args: argparse.Namespace, g: GlobalOpts) -> int:
    script_id = _script_id(args.script_id)
    file_value = _attachment_file_value(file_value=getattr(args, "file", None), path=getattr(args, "path", None))
    values = {"script_id": str(script_id), "file": file_value}
    return _invoke_action(g, LegacyAction.CREATE_SCRIPT_ATTACHMENT, values)


def cmd_attachment_get(args: argparse.Namespace, g: GlobalOpts) -> int:
    script_id = _script_id(args.script_id)
    attachment_id = _script_id(args.attachment_id, name="script attachment ID")
    res = _client(g).get_script_attachment_with_response(script_id, attachment_id)
    return _write_response(res, g)


def cmd_attachment_remove(args: argparse.Namespace, g: GlobalOpts) -> int:
    script_id = _script_id(args.script_id)
    filename = str(args.filename or "").strip()
    if not filename:
        raise UsageError("missing --filename")
    values = {"script_id": str(script_id), "filename": filename}
    return _invoke_action(g, LegacyAction.REMOVE_SCRIPT_ATTACHMENT, values)


def cmd_script_show(args: argparse.Namespace, g: GlobalOpts) -> int:
    """Fetch a script and print it decoded as the requested format version."""
    script_id = _script_id(args.script_id)
    script_type = str(getattr(args, "script_type", None) or "V1").strip().upper()
    if script_type not in SCRIPT_TYPES:
        raise UsageError(f"invalid --script-type {script_type!r} (expected one of: {', '.join(SCRIPT_TYPES)})")
    res = _client(g).get_script_with_response(script_id)
    if res.json200 is None:
        return _write_response(res, g)
    try:
        script = res.json200.as_v1() if script_type == "V1" else res.json200.as_v2()
    except DecodeError as e:
        text = e.raw.decode("utf-8", errors="replace")
        raise OpError(f"{e}; body={text}") from e
    _print_json(_script_summary(script), pretty=g.pretty)
    return 0


def _script_summary(script: Any) -> dict[str, Any]:
    out = {k: v for k, v in asdict(script).items() if v is not None}
    out.pop("code", None)
    return out
