from __future__ import annotations

from typing import Mapping, Sequence, Union
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

QueryValue = Union[str, Sequence[str]]


def _as_list(value: QueryValue) -> list[str]:
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def query_pairs(values: Mapping[str, QueryValue] | None) -> list[tuple[str, str]]:
    """Flatten a name -> value(s) mapping into ordered pairs.

    Names are sorted so the same input always yields the same encoding;
    repeated values keep the caller's order.
    """
    pairs: list[tuple[str, str]] = []
    for name in sorted((values or {}).keys()):
        for v in _as_list(values[name]):
            pairs.append((str(name), v))
    return pairs


def encode_query(values: Mapping[str, QueryValue] | None) -> str:
    return urlencode(query_pairs(values))


def merge_query(url: str, values: Mapping[str, QueryValue] | None) -> str:
    """Add encoded values to the query string already present on ``url``.

    A name given in ``values`` replaces every existing pair with that name.
    """
    extra = query_pairs(values)
    if not extra:
        return url
    parsed = urlparse(url)
    names = {name for name, _ in extra}
    existing = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k not in names]
    return urlunparse(parsed._replace(query=urlencode(existing + extra)))
