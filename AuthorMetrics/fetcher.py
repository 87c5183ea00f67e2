from __future__ import annotations

import time
from typing import Callable, Iterable, List, Optional

from . import api_clients as api
from . import http_utils
from .config import (
    OPENALEX_AUTHORS_BASE,
    OPENALEX_PROFILE_BASE,
    REQUEST_DELAY_BETWEEN_ROWS,
    HTTP_TIMEOUT_DEFAULT,
    HTTP_SUCCESS_STATUS,
    METRIC_KEYS,
    NETWORK_ERROR_ABORT,
    NETWORK_ERROR_POLICIES,
    DEFAULT_NETWORK_ERROR_POLICY,
)
from .exceptions import DECODE_ERRORS, JSON_ERRORS, TRANSPORT_ERRORS
from .log_utils import logger, LogSource, LogCategory
from .models import AuthorRow, FetchOutcome, MetricsResult


class RequestThrottle:
    """
    Minimum interval between consecutive requests. The first call to wait()
    returns immediately; later calls block until `interval` seconds have passed
    since the previous request finished.
    """

    def __init__(self, interval: float = REQUEST_DELAY_BETWEEN_ROWS,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.interval = max(0.0, float(interval))
        self._sleep = sleep
        self._clock = clock
        self._last: Optional[float] = None

    def wait(self):
        if self._last is None or self.interval <= 0:
            return
        remaining = self.interval - (self._clock() - self._last)
        if remaining > 0:
            self._sleep(remaining)

    def mark(self):
        self._last = self._clock()


class MetricsFetcher:
    """
    Resolve author rows against the OpenAlex authors endpoint one at a time.

    Rows with an author id are looked up directly; rows with only a name are
    searched, sorted by descending work count, and the first hit is taken.
    Any status other than 200 turns the whole row into an error result, while
    a missing field only affects that field. Transport failures either abort
    the batch (the default) or mark the row and continue, depending on
    `on_network_error`.
    """

    def __init__(
        self,
        delay: float = REQUEST_DELAY_BETWEEN_ROWS,
        timeout: Optional[float] = HTTP_TIMEOUT_DEFAULT,
        on_network_error: str = DEFAULT_NETWORK_ERROR_POLICY,
        mailto: Optional[str] = None,
        api_base: str = OPENALEX_AUTHORS_BASE,
        profile_base: str = OPENALEX_PROFILE_BASE,
        throttle: Optional[RequestThrottle] = None,
    ):
        if on_network_error not in NETWORK_ERROR_POLICIES:
            raise ValueError(
                f"Unknown network error policy {on_network_error!r}; "
                f"expected one of {', '.join(NETWORK_ERROR_POLICIES)}"
            )
        self.timeout = timeout
        self.on_network_error = on_network_error
        self.mailto = mailto or None
        self.api_base = api_base
        self.profile_base = profile_base
        self.throttle = throttle or RequestThrottle(delay)

    def build_request_url(self, row: AuthorRow) -> str:
        if row.has_id:
            return api.author_lookup_url(row.author_id, base=self.api_base, mailto=self.mailto)
        return api.author_search_url(row.name, base=self.api_base, mailto=self.mailto)

    def parse_response(self, row: AuthorRow, payload: dict) -> MetricsResult:
        """
        Turn a successful response body into a result for the given row. The
        row decides where the author record sits (the body itself for a lookup,
        the first search result otherwise) and how the profile URL and count
        are derived.
        """
        if row.has_id:
            record = payload
            profile_url = api.profile_url_for(row.author_id, base=self.profile_base)
            count = 1
        else:
            record = api.first_search_result(payload)
            rid = api.result_id(record)
            profile_url = api.profile_url_from_result(rid, base=self.profile_base) if rid else None
            count = api.search_result_count(payload)

        h_index, i10_index, cited_by_count, works_count = (api.lookup_metric(record, k) for k in METRIC_KEYS)
        return MetricsResult(
            outcome=FetchOutcome.SUCCESS,
            h_index=h_index,
            i10_index=i10_index,
            cited_by_count=cited_by_count,
            works_count=works_count,
            profile_url=profile_url,
            search_result_count=count,
            status_code=HTTP_SUCCESS_STATUS,
        )

    def fetch_row(self, row: AuthorRow) -> MetricsResult:
        """
        Issue the single request for one row and build its result. Transport
        errors are not caught here.
        """
        if row.is_empty:
            return MetricsResult.skipped("no name or id")

        url = self.build_request_url(row)
        category = LogCategory.LOOKUP if row.has_id else LogCategory.SEARCH
        logger.info(f"GET {url}", source=LogSource.OPENALEX, category=category)

        resp = http_utils.http_get(url, timeout=self.timeout)
        if resp.status_code != HTTP_SUCCESS_STATUS:
            logger.warn(f"HTTP {resp.status_code} for line {row.line}", source=LogSource.OPENALEX,
                        category=LogCategory.ERROR)
            return MetricsResult.http_error(resp.status_code)

        try:
            payload = http_utils.decode_json_bytes(resp.content, url)
        except JSON_ERRORS + DECODE_ERRORS as e:
            logger.warn(f"Unreadable response body: {e}", source=LogSource.OPENALEX, category=LogCategory.ERROR)
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        return self.parse_response(row, payload)

    def resolve(self, row: AuthorRow) -> MetricsResult:
        """
        fetch_row with the network error policy applied.
        """
        try:
            return self.fetch_row(row)
        except TRANSPORT_ERRORS as e:
            if self.on_network_error == NETWORK_ERROR_ABORT:
                logger.error(f"Network error on line {row.line}; aborting batch: {e}",
                             source=LogSource.OPENALEX, category=LogCategory.ERROR)
                raise
            logger.error(f"Network error on line {row.line}: {e}",
                         source=LogSource.OPENALEX, category=LogCategory.ERROR)
            return MetricsResult.network_error(e)

    def run(self, rows: Iterable[AuthorRow],
            on_result: Optional[Callable[[AuthorRow, MetricsResult], None]] = None) -> List[MetricsResult]:
        """
        Process rows strictly in order, handing each result to `on_result` as
        soon as it is known and pausing between requests.
        """
        results: List[MetricsResult] = []
        for row in rows:
            label = row.name or row.author_id
            if row.is_empty:
                logger.info(f"Line {row.line}: no name or id; skipped", source=LogSource.SYSTEM,
                            category=LogCategory.SKIP)
                result = MetricsResult.skipped("no name or id")
            else:
                logger.step(f"Line {row.line}: {label} (id={row.author_id or 'N/A'})",
                            source=LogSource.SYSTEM, category=LogCategory.AUTHOR)
                self.throttle.wait()
                try:
                    result = self.resolve(row)
                finally:
                    self.throttle.mark()
                if result.ok:
                    logger.success(
                        f"h={_show(result.h_index)} i10={_show(result.i10_index)} "
                        f"cited={_show(result.cited_by_count)} works={_show(result.works_count)} "
                        f"matches={result.search_result_count}",
                        source=LogSource.OPENALEX, category=LogCategory.FETCH,
                    )

            results.append(result)
            if on_result is not None:
                on_result(row, result)
        return results


def _show(value: Optional[int]) -> str:
    return "N/A" if value is None else str(value)
