from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import requests

from AuthorMetrics.fetcher import MetricsFetcher, RequestThrottle


# search response for a single well-cited author
MARIE_CURIE_SEARCH = {
    "count": 3,
    "results": [
        {
            "id": "https://openalex.org/A123",
            "h_index": 45,
            "i10_index": 80,
            "cited_by_count": 50000,
            "works_count": 120,
        }
    ],
}

# direct lookup response for the same author
A123_LOOKUP = {
    "h_index": 45,
    "i10_index": 80,
    "cited_by_count": 50000,
    "works_count": 120,
}

EMPTY_SEARCH = {"count": 0, "results": []}

# shape returned by the live API: count under meta, indices under summary_stats
LIVE_SHAPED_SEARCH = {
    "meta": {"count": 17, "db_response_time_ms": 12, "page": 1, "per_page": 25},
    "results": [
        {
            "id": "https://openalex.org/A5000000001",
            "display_name": "Jane Q. Researcher",
            "works_count": 210,
            "cited_by_count": 9876,
            "summary_stats": {"2yr_mean_citedness": 3.1, "h_index": 38, "i10_index": 95},
            "counts_by_year": [{"year": 2024, "works_count": 12, "cited_by_count": 800}],
        },
        {
            "id": "https://openalex.org/A5000000002",
            "works_count": 3,
            "cited_by_count": 10,
            "summary_stats": {"h_index": 1, "i10_index": 0},
        },
    ],
}


def make_response(body: Any = None, status: int = 200, raw: Optional[bytes] = None) -> requests.Response:
    """
    Build a requests.Response carrying a JSON body (or raw bytes) and a status.
    """
    resp = requests.Response()
    resp.status_code = status
    if raw is not None:
        resp._content = raw
    else:
        resp._content = json.dumps(body if body is not None else {}).encode("utf-8")
    resp.headers["Content-Type"] = "application/json"
    return resp


class RecordingGet:
    """
    Stand-in for http_utils.http_get that replays queued responses and keeps
    the requested URLs.
    """

    def __init__(self, *responses: Any):
        self.responses: List[Any] = list(responses)
        self.urls: List[str] = []

    def __call__(self, url: str, timeout: Optional[float] = None, headers: Optional[Dict[str, str]] = None):
        self.urls.append(url)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return item(url)
        return item


def quiet_fetcher(**kwargs) -> MetricsFetcher:
    """
    MetricsFetcher with the pause disabled, for tests that do not look at timing.
    """
    kwargs.setdefault("throttle", RequestThrottle(0))
    return MetricsFetcher(**kwargs)
