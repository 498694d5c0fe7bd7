from __future__ import annotations

import argparse
import contextlib
import io
import sys
from typing import Any

import click
import typer
from dotenv import load_dotenv
from rich.console import Console

from .. import __version__
from .. import script_commands
from ..cli_shared import (
    LANDSCAPE_ACCESS_KEY,
    LANDSCAPE_API_TOKEN,
    LANDSCAPE_BASE_URL,
    LANDSCAPE_SECRET_KEY,
    LANDSCAPE_TIMEOUT_SECONDS,
    GlobalOpts,
    OpError,
    UsageError,
    _eprint,
    _env_or_none,
    _parse_timeout,
)
from ..client import LandscapeClientError

_ERROR_CONSOLE = Console(stderr=True)


def _bootstrap_env() -> None:
    # Use python-dotenv package defaults: discover and load .env without
    # overriding already-exported process environment values.
    load_dotenv()


def _rich_error(msg: str) -> None:
    _ERROR_CONSOLE.print(f"[bold red]error:[/bold red] {msg}")


def _root_help_text(*, root_app: typer.Typer, prog_name: str) -> str:
    buf = io.StringIO()
    try:
        with contextlib.redirect_stdout(buf):
            try:
                root_app(args=["--help"], prog_name=prog_name, standalone_mode=False)
            except (typer.Exit, click.ClickException):
                pass
    except Exception:
        return ""
    return str(buf.getvalue() or "").strip()


def _render_usage_error_with_help(
    *,
    message: str,
    ctx: click.Context | None = None,
    fallback_help: str = "",
) -> None:
    _rich_error(message)
    help_text = ""
    if isinstance(ctx, click.Context):
        try:
            help_text = str(ctx.get_help() or "").strip()
        except Exception:
            help_text = ""
    if not help_text:
        help_text = str(fallback_help or "").strip()
    if help_text:
        _eprint("")
        _eprint(help_text)


def _namespace(**kwargs: Any) -> argparse.Namespace:
    return argparse.Namespace(**kwargs)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"landscape-api {__version__}")
        raise typer.Exit(code=0)


def _apply_global_env(args: argparse.Namespace) -> GlobalOpts:
    return GlobalOpts(
        base_url=str(getattr(args, "base_url", None) or _env_or_none(LANDSCAPE_BASE_URL) or "").strip(),
        access_key=str(getattr(args, "access_key", None) or _env_or_none(LANDSCAPE_ACCESS_KEY) or "").strip(),
        secret_key=str(getattr(args, "secret_key", None) or _env_or_none(LANDSCAPE_SECRET_KEY) or "").strip(),
        api_token=str(getattr(args, "api_token", None) or _env_or_none(LANDSCAPE_API_TOKEN) or "").strip(),
        timeout_seconds=_parse_timeout(getattr(args, "timeout", None) or _env_or_none(LANDSCAPE_TIMEOUT_SECONDS)),
        pretty=not bool(getattr(args, "plain_json", False)),
        quiet=bool(getattr(args, "quiet", False)),
    )


app = typer.Typer(
    name="landscape-api",
    help="Landscape API client: manage scripts and script attachments.",
    no_args_is_help=True,
    add_completion=False,
)

script_app = typer.Typer(help="Manage and create Landscape scripts.", no_args_is_help=True)
attachment_app = typer.Typer(help="Create or manage script attachments.", no_args_is_help=True)

app.add_typer(script_app, name="script")
script_app.add_typer(attachment_app, name="attachment")


@app.callback()
def app_callback(
    ctx: typer.Context,
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        help=f"Landscape server root URL (env override: {LANDSCAPE_BASE_URL})",
    ),
    access_key: str | None = typer.Option(
        None,
        "--access-key",
        help=f"API access key (env override: {LANDSCAPE_ACCESS_KEY})",
    ),
    secret_key: str | None = typer.Option(
        None,
        "--secret-key",
        help=f"API secret key (env override: {LANDSCAPE_SECRET_KEY})",
    ),
    api_token: str | None = typer.Option(
        None,
        "--api-token",
        help=f"Bearer token used instead of an access key pair (env override: {LANDSCAPE_API_TOKEN})",
    ),
    timeout: str | None = typer.Option(
        None,
        "--timeout",
        help=f"Request timeout in seconds (env override: {LANDSCAPE_TIMEOUT_SECONDS})",
    ),
    plain_json: bool = typer.Option(False, "--plain-json", help="Emit compact JSON output"),
    quiet: bool = typer.Option(False, "--quiet", help="Reduce stderr logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    del version
    ns = _namespace(
        base_url=base_url,
        access_key=access_key,
        secret_key=secret_key,
        api_token=api_token,
        timeout=timeout,
        plain_json=plain_json,
        quiet=quiet,
    )
    try:
        g = _apply_global_env(ns)
    except UsageError as e:
        _render_usage_error_with_help(message=str(e), ctx=ctx)
        raise typer.Exit(code=2)
    ctx.obj = {"g": g}


def _ctx_global(ctx: typer.Context) -> GlobalOpts:
    root = ctx.find_root()
    for obj in (ctx.obj, root.obj):
        if isinstance(obj, dict) and isinstance(obj.get("g"), GlobalOpts):
            return obj["g"]
    try:
        return _apply_global_env(_namespace())
    except UsageError as e:
        _render_usage_error_with_help(message=str(e), ctx=ctx)
        raise typer.Exit(code=2)


def _invoke(ctx: typer.Context, func: Any, **kwargs: Any) -> None:
    g = _ctx_global(ctx)
    args = _namespace(**kwargs)
    try:
        code = int(func(args, g))
    except UsageError as e:
        _render_usage_error_with_help(message=str(e), ctx=ctx)
        raise typer.Exit(code=2)
    except (OpError, LandscapeClientError) as e:
        _rich_error(str(e))
        raise typer.Exit(code=1)

    if code:
        raise typer.Exit(code=code)


@script_app.command("create", help="Create a new script.")
def script_create(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", "-t", help="Script title"),
    code: str = typer.Option(..., "--code", "-c", help="Script source; base64-encoded before sending"),
    script_type: str = typer.Option("V1", "--script-type", "-s", help="Script format version (V1 or V2)"),
) -> None:
    _invoke(ctx, script_commands.cmd_script_create, title=title, code=code, script_type=script_type)


@script_app.command("edit", help="Edit an existing script.")
def script_edit(
    ctx: typer.Context,
    script_id: str | None = typer.Argument(None, help="Script ID"),
    title: str | None = typer.Option(None, "--title", "-t", help="New script title"),
    code: str = typer.Option(..., "--code", "-c", help="New script source; base64-encoded before sending"),
) -> None:
    _invoke(ctx, script_commands.cmd_script_edit, script_id=script_id, title=title, code=code)


@script_app.command("copy", help="Copy an existing script under a new title.")
def script_copy(
    ctx: typer.Context,
    script_id: str | None = typer.Argument(None, help="Script ID"),
    destination_title: str = typer.Option(..., "--destination-title", help="Title of the copy"),
    access_group: str | None = typer.Option(None, "--access-group", help="Access group for the copy"),
) -> None:
    _invoke(
        ctx,
        script_commands.cmd_script_copy,
        script_id=script_id,
        destination_title=destination_title,
        access_group=access_group,
    )


@script_app.command("remove", help="Remove a script.")
def script_remove(
    ctx: typer.Context,
    script_id: str | None = typer.Argument(None, help="Script ID"),
) -> None:
    _invoke(ctx, script_commands.cmd_script_remove, script_id=script_id)


@script_app.command("get", help="Get an existing script.")
def script_get(
    ctx: typer.Context,
    script_id: str | None = typer.Argument(None, help="Script ID"),
) -> None:
    _invoke(ctx, script_commands.cmd_script_get, script_id=script_id)


@script_app.command("show", help="Get a script and print it decoded as a V1 or V2 script.")
def script_show(
    ctx: typer.Context,
    script_id: str | None = typer.Argument(None, help="Script ID"),
    script_type: str = typer.Option("V1", "--script-type", "-s", help="Script format version (V1 or V2)"),
) -> None:
    _invoke(ctx, script_commands.cmd_script_show, script_id=script_id, script_type=script_type)


@script_app.command("archive", help="Archive a script.")
def script_archive(
    ctx: typer.Context,
    script_id: str | None = typer.Argument(None, help="Script ID"),
) -> None:
    _invoke(ctx, script_commands.cmd_script_archive, script_id=script_id)


@script_app.command("redact", help="Redact a script.")
def script_redact(
    ctx: typer.Context,
    script_id: str | None = typer.Argument(None, help="Script ID"),
) -> None:
    _invoke(ctx, script_commands.cmd_script_redact, script_id=script_id)


@attachment_app.command("create", help="Create a script attachment.")
def attachment_create(
    ctx: typer.Context,
    script_id: str = typer.Option(..., "--script-id", "-s", help="The ID of the script you want to make attachment for."),
    file: str | None = typer.Option(
        None,
        "--file",
        "-f",
        help="The file you wish to use as an attachment. The format for this parameter is: <filename>$$<base64 encoded file contents>.",
    ),
    path: str | None = typer.Option(None, "--path", help="Local file to attach (alternative to --file)"),
) -> None:
    _invoke(ctx, script_commands.cmd_attachment_create, script_id=script_id, file=file, path=path)


@attachment_app.command("get", help="Get a script attachment by the script ID and the attachment ID.")
def attachment_get(
    ctx: typer.Context,
    script_id: str = typer.Option(..., "--script-id", "-s", help="The ID of the script the attachment belongs to."),
    attachment_id: str = typer.Option(..., "--script-attachment-id", "-i", help="The ID of the script attachment to get."),
) -> None:
    _invoke(ctx, script_commands.cmd_attachment_get, script_id=script_id, attachment_id=attachment_id)


@attachment_app.command("remove", help="Remove a script attachment by filename.")
def attachment_remove(
    ctx: typer.Context,
    script_id: str = typer.Option(..., "--script-id", "-s", help="The ID of the script the attachment belongs to."),
    filename: str = typer.Option(..., "--filename", help="Attachment filename"),
) -> None:
    _invoke(ctx, script_commands.cmd_attachment_remove, script_id=script_id, filename=filename)


def _run_cli(*, root_app: typer.Typer, prog_name: str, argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    _bootstrap_env()
    try:
        result = root_app(args=argv, prog_name=prog_name, standalone_mode=False)
        if result is None:
            return 0
        return int(result)
    except typer.Exit as e:
        return int(e.exit_code)
    except click.ClickException as e:
        if isinstance(e, click.UsageError):
            _render_usage_error_with_help(message=e.format_message(), ctx=getattr(e, "ctx", None))
            return int(e.exit_code)
        _rich_error(e.format_message())
        return int(e.exit_code)
    except UsageError as e:
        _render_usage_error_with_help(
            message=str(e),
            fallback_help=_root_help_text(root_app=root_app, prog_name=prog_name),
        )
        return 2
    except (OpError, LandscapeClientError) as e:
        _rich_error(str(e))
        return 1


def main(argv: list[str] | None = None) -> int:
    return _run_cli(root_app=app, prog_name="landscape-api", argv=argv)


if __name__ == "__main__":
    raise SystemExit(main())
