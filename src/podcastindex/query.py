"""
PodcastIndex query clauses - pure string builders for request paths.

Every builder returns either a complete clause with its leading ``&`` or an
empty string, so clauses can be concatenated onto a path in a fixed order
without ever emitting an empty ``key=`` pair.
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from urllib.parse import quote

# Characters left untouched when encoding values into a query clause
_VALUE_SAFE = ""
_URL_SAFE = ":/"

LANGUAGE_FILTER = "lang"
CATEGORY_FILTER = "cat"
NOT_CATEGORY_FILTER = "notcat"


def encode_value(value: object, safe: str = _VALUE_SAFE) -> str:
    """Percent-encode a single query value."""
    return quote(str(value), safe=safe)


def encode_url(url: str) -> str:
    """Percent-encode a feed URL used as a query value, keeping scheme and path separators."""
    return quote(url, safe=_URL_SAFE)


def quote_term(term: str) -> str:
    """Wrap a free-text term in literal double quotes."""
    return f'"{encode_value(term)}"'


def to_epoch(value: datetime | int | None) -> int:
    """
    Convert a time bound to epoch seconds.

    Naive datetimes are treated as UTC. ``None`` maps to 0 (unset).
    """
    if value is None:
        return 0
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp())
    return int(value)


def add_max(max_results: int) -> str:
    if max_results and max_results > 0:
        return f"&max={int(max_results)}"
    return ""


def add_time(since: datetime | int | None) -> str:
    epoch = to_epoch(since)
    if epoch <= 0:
        return ""
    return f"&since={epoch}"


def add_before(before: int) -> str:
    if before and before > 0:
        return f"&before={int(before)}"
    return ""


def add_clean(clean: bool) -> str:
    return "&clean" if clean else ""


def add_exclude(exclude: str | None) -> str:
    if not exclude:
        return ""
    return f"&excludeString={encode_value(exclude)}"


def add_filter(key: str, values: Iterable[str] | None) -> str:
    """Render ``&key=v1,v2`` for a non-empty filter list, in the caller's order."""
    values = [str(v) for v in values or ()]
    if not values:
        return ""
    return f"&{key}={','.join(encode_value(v) for v in values)}"


def add_filters(
    languages: Iterable[str] | None,
    categories: Iterable[str] | None,
    not_categories: Iterable[str] | None,
) -> str:
    """Language, category-include and category-exclude clauses, in that order."""
    return (
        add_filter(LANGUAGE_FILTER, languages)
        + add_filter(CATEGORY_FILTER, categories)
        + add_filter(NOT_CATEGORY_FILTER, not_categories)
    )
