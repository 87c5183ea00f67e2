from __future__ import annotations

from typing import Any, Dict, Optional

from .config import (
    OPENALEX_AUTHORS_BASE,
    OPENALEX_PROFILE_BASE,
    OPENALEX_SEARCH_SORT,
    SUMMARY_STATS_KEY,
)
from .exceptions import NUMERIC_ERRORS
from .text_utils import build_url, join_url, collapse_doubled_scheme


def author_lookup_url(author_id: str, base: str = OPENALEX_AUTHORS_BASE, mailto: Optional[str] = None) -> str:
    """
    Build the direct lookup URL for a known OpenAlex author id.
    """
    url = join_url(base, author_id)
    if mailto:
        url = build_url(url, {"mailto": mailto})
    return url


def author_search_url(name: str, base: str = OPENALEX_AUTHORS_BASE, mailto: Optional[str] = None) -> str:
    """
    Build the author search URL for a free-text name, sorted by descending work
    count so the first result is the most prolific match.
    """
    params: Dict[str, Any] = {"search": name, "sort": OPENALEX_SEARCH_SORT}
    if mailto:
        params["mailto"] = mailto
    return build_url(base, params)


def profile_url_for(author_id: str, base: str = OPENALEX_PROFILE_BASE) -> str:
    """
    Canonical profile URL for an id given by the caller: the base with the id
    appended verbatim.
    """
    return f"{base}{author_id}"


def profile_url_from_result(result_id: str, base: str = OPENALEX_PROFILE_BASE) -> str:
    """
    Profile URL for an id read from a search result. Result ids are usually
    already absolute, so the doubled prefix produced by concatenation is
    collapsed.
    """
    return collapse_doubled_scheme(f"{base}{result_id}")


def _as_int(value: Any) -> Optional[int]:
    """
    Interpret a JSON value as an integer metric, returning None for booleans,
    non-integral numbers, and anything that does not read as a number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip().strip('"').strip()
        try:
            return int(text)
        except NUMERIC_ERRORS:
            try:
                f = float(text)
            except NUMERIC_ERRORS:
                return None
            return int(f) if f.is_integer() else None
    return None


def lookup_metric(record: Any, key: str) -> Optional[int]:
    """
    Look up one metric on an author record, checking the record itself first
    and then its summary_stats object. Each key is resolved independently, so
    a missing key never affects its siblings.
    """
    if not isinstance(record, dict):
        return None
    if key in record:
        value = _as_int(record.get(key))
        if value is not None:
            return value
    stats = record.get(SUMMARY_STATS_KEY)
    if isinstance(stats, dict) and key in stats:
        return _as_int(stats.get(key))
    return None


def first_search_result(payload: Any) -> Optional[Dict[str, Any]]:
    """
    Return the first element of a search response's results list, if any.
    """
    if not isinstance(payload, dict):
        return None
    results = payload.get("results")
    if isinstance(results, list) and results and isinstance(results[0], dict):
        return results[0]
    return None


def search_result_count(payload: Any) -> int:
    """
    Number of authors matching a search: the top-level count, then meta.count
    as the live API reports it, and 0 when neither is present.
    """
    if not isinstance(payload, dict):
        return 0
    count = _as_int(payload.get("count"))
    if count is None:
        meta = payload.get("meta")
        if isinstance(meta, dict):
            count = _as_int(meta.get("count"))
    return count if count is not None else 0


def result_id(record: Any) -> Optional[str]:
    """
    The id field of a search result, or None when it is absent or blank.
    """
    if not isinstance(record, dict):
        return None
    rid = record.get("id")
    if rid is None:
        return None
    rid = str(rid).strip()
    return rid or None
