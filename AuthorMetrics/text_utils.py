from __future__ import annotations

import re
import urllib.parse
from typing import Any, Dict


def build_url(base: str, params: Dict[str, Any]) -> str:
    """
    Attach query parameters to a base URL. Spaces are percent-encoded as %20
    rather than '+', and colons stay literal so sort expressions such as
    "works_count:desc" read the same in logs as in the API docs.
    """
    q = urllib.parse.urlencode(params, safe=":", quote_via=urllib.parse.quote)
    return f"{base}?{q}"


def join_url(base: str, tail: str) -> str:
    """
    Append a path segment to a base URL, percent-encoding anything outside the
    URL-safe set.
    """
    return f"{base.rstrip('/')}/{urllib.parse.quote(tail, safe=':/')}"


_DOUBLED_SCHEME = re.compile(r"^https?://[^/]+/+(?=https?://)", re.IGNORECASE)


def collapse_doubled_scheme(url: str) -> str:
    """
    Strip leading host prefixes that were glued onto an already absolute URL,
    so "https://openalex.org/https://openalex.org/A1" becomes
    "https://openalex.org/A1".
    """
    prev = None
    while prev != url:
        prev = url
        url = _DOUBLED_SCHEME.sub("", url, count=1)
    return url


def clean_cell(value: Any) -> str:
    """
    Trim a table cell, treating None as empty and dropping a UTF-8 BOM left
    over from spreadsheet exports.
    """
    if value is None:
        return ""
    return str(value).replace("\ufeff", "").strip()
