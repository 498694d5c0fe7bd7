from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from typing import Any


class LandscapeOpsError(Exception):
    pass


class UsageError(LandscapeOpsError):
    pass


class OpError(LandscapeOpsError):
    pass


LANDSCAPE_BASE_URL = "LANDSCAPE_BASE_URL"
LANDSCAPE_ACCESS_KEY = "LANDSCAPE_ACCESS_KEY"
LANDSCAPE_SECRET_KEY = "LANDSCAPE_SECRET_KEY"
LANDSCAPE_API_TOKEN = "LANDSCAPE_API_TOKEN"
LANDSCAPE_TIMEOUT_SECONDS = "LANDSCAPE_TIMEOUT_SECONDS"

DEFAULT_TIMEOUT_SECONDS = 30.0


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


@dataclass(frozen=True)
class GlobalOpts:
    base_url: str
    pretty: bool
    quiet: bool
    access_key: str = ""
    secret_key: str = ""
    api_token: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def _env_or_none(*names: str) -> str | None:
    for n in names:
        v = (os.environ.get(n) or "").strip()
        if v:
            return v
    return None


def _parse_timeout(raw: str | float | None) -> float:
    if raw is None or str(raw).strip() == "":
        return DEFAULT_TIMEOUT_SECONDS
    try:
        val = float(raw)
    except (TypeError, ValueError) as e:
        raise UsageError(f"invalid timeout {raw!r}: expected seconds as a number") from e
    if val <= 0:
        raise UsageError(f"invalid timeout {raw!r}: must be greater than zero")
    return val


def _print_json(obj: Any, *, pretty: bool) -> None:
    if pretty:
        sys.stdout.write(json.dumps(obj, indent=2, sort_keys=True) + "\n")
    else:
        sys.stdout.write(json.dumps(obj, separators=(",", ":"), sort_keys=True) + "\n")
