from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence
from urllib.parse import urlparse

from .cli_shared import LANDSCAPE_ACCESS_KEY, LANDSCAPE_API_TOKEN, LANDSCAPE_BASE_URL, LANDSCAPE_SECRET_KEY


class AuthInputError(ValueError):
    """Raised when CLI auth inputs are missing or conflicting."""


class MissingEndpointError(AuthInputError):
    """Raised when the API base URL is required but missing."""


class PreflightValidationError(AuthInputError):
    """Raised when strict client-side preflight validation fails."""


@dataclass(frozen=True)
class AccessKeyCredentials:
    access_key: str
    secret_key: str


@dataclass(frozen=True)
class ApiRequestAuth:
    base_url: str
    api_token: str = ""
    access_keys: AccessKeyCredentials | None = None


def _require_non_empty(val: str | None, *, name: str, hint: str) -> str:
    out = (val or "").strip()
    if not out:
        raise AuthInputError(f"missing {name} ({hint})")
    return out


def preflight_base_url(raw: str | None, *, env_names: Sequence[str] = (LANDSCAPE_BASE_URL,)) -> str:
    hint_env = str(env_names[0]).strip() if env_names else LANDSCAPE_BASE_URL
    value = (raw or "").strip().rstrip("/")
    if not value:
        raise MissingEndpointError(f"missing base URL (--base-url or env {hint_env})")
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise PreflightValidationError(f"base URL must be an http(s) URL with a host; got {value!r}")
    return value


def resolve_access_key_credentials(
    *,
    access_key: str | None,
    secret_key: str | None,
    env_or_none: Callable[..., str | None],
    access_key_env_names: Sequence[str] = (LANDSCAPE_ACCESS_KEY,),
    secret_key_env_names: Sequence[str] = (LANDSCAPE_SECRET_KEY,),
) -> AccessKeyCredentials:
    access_hint_env = str(access_key_env_names[0]).strip() if access_key_env_names else LANDSCAPE_ACCESS_KEY
    secret_hint_env = str(secret_key_env_names[0]).strip() if secret_key_env_names else LANDSCAPE_SECRET_KEY
    resolved_access = _require_non_empty(
        access_key or env_or_none(*access_key_env_names),
        name="access key",
        hint=f"--access-key or env {access_hint_env}",
    )
    resolved_secret = _require_non_empty(
        secret_key or env_or_none(*secret_key_env_names),
        name="secret key",
        hint=f"--secret-key or env {secret_hint_env}",
    )
    return AccessKeyCredentials(access_key=resolved_access, secret_key=resolved_secret)


def resolve_api_request_auth(
    *,
    base_url: str | None,
    access_key: str | None,
    secret_key: str | None,
    api_token: str | None,
    env_or_none: Callable[..., str | None],
) -> ApiRequestAuth:
    """Resolve base URL plus either a bearer token or an access/secret key pair.

    Flags win over env. A token (flag or env) wins over key pairs.
    """

    resolved_base = preflight_base_url(base_url or env_or_none(LANDSCAPE_BASE_URL))
    token = (api_token or env_or_none(LANDSCAPE_API_TOKEN) or "").strip()
    if token:
        return ApiRequestAuth(base_url=resolved_base, api_token=token)
    if not (access_key or secret_key or env_or_none(LANDSCAPE_ACCESS_KEY, LANDSCAPE_SECRET_KEY)):
        raise AuthInputError(
            f"missing credentials (pass --api-token or env {LANDSCAPE_API_TOKEN}, "
            f"or --access-key/--secret-key or env {LANDSCAPE_ACCESS_KEY}/{LANDSCAPE_SECRET_KEY})"
        )
    keys = resolve_access_key_credentials(
        access_key=access_key,
        secret_key=secret_key,
        env_or_none=env_or_none,
    )
    return ApiRequestAuth(base_url=resolved_base, access_keys=keys)
