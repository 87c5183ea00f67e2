from __future__ import annotations

import json
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import (
    HTTP_TIMEOUT_DEFAULT,
    HTTP_BACKOFF_INITIAL,
    HTTP_MAX_RETRIES,
    HTTP_RETRY_STATUS_CODES,
)

# Standard HTTP headers for API requests
DEFAULT_JSON_HEADERS = {
    "User-Agent": "Mozilla/5.0 (AuthorMetrics Client)",
    "Accept": "application/json"
}

# Global session for connection pooling
_SESSION = requests.Session()


def _build_adapter(retries: int) -> HTTPAdapter:
    """
    Build an adapter whose retry policy re-sends only the configured status
    codes; once retries run out the last response is returned, not raised.
    """
    strategy = Retry(
        total=retries,
        backoff_factor=HTTP_BACKOFF_INITIAL,
        status_forcelist=HTTP_RETRY_STATUS_CODES,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    return HTTPAdapter(max_retries=strategy)


def configure_session(retries: int = HTTP_MAX_RETRIES) -> requests.Session:
    """
    Mount a fresh adapter with the given retry budget on the shared session.
    """
    adapter = _build_adapter(max(0, int(retries)))
    _SESSION.mount("https://", adapter)
    _SESSION.mount("http://", adapter)
    return _SESSION


configure_session()


def http_get(url: str, timeout: Optional[float] = HTTP_TIMEOUT_DEFAULT,
             headers: Optional[Dict[str, str]] = None) -> requests.Response:
    """
    Perform a single GET on the shared session and hand back the response
    whatever its status; transport failures propagate as requests exceptions.
    """
    hdrs = DEFAULT_JSON_HEADERS.copy()
    if headers:
        hdrs.update(headers)
    return _SESSION.get(url, headers=hdrs, timeout=timeout)


def decode_json_bytes(raw: bytes, url: str) -> Dict[str, Any]:
    """
    Decode a UTF-8 JSON response and parse it into a Python object, including a
    short preview of invalid data in error messages.
    """
    try:
        return json.loads(raw.decode("utf-8"))
    except json.JSONDecodeError as ex:
        preview = raw[:256].decode("utf-8", errors="replace")
        raise ValueError(f"Invalid JSON from {url!r}: {ex.msg} at pos {ex.pos}; preview={preview!r}") from ex
