from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .config import SENTINEL_ERROR, SENTINEL_MISSING, SENTINEL_NETWORK_ERROR


@dataclass
class AuthorRow:
    """
    One input line of the author table: a free-text name, an optional OpenAlex
    author id, and the 1-based line number the row came from so results can be
    written back to the same position.
    """
    name: str
    author_id: str = ""  # OpenAlex author ID (optional)
    line: int = 0

    @property
    def has_id(self) -> bool:
        return bool(self.author_id)

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.author_id


class FetchOutcome(str, Enum):
    """
    How a row was resolved.
    """

    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    SKIPPED = "skipped"


@dataclass
class MetricsResult:
    """
    Metrics fetched for a single author row, tagged with the outcome of the
    request. Values stay typed here; sentinels such as "Error" and "N/A" only
    appear when the result is rendered for the output table by as_row().
    """
    outcome: FetchOutcome
    h_index: Optional[int] = None
    i10_index: Optional[int] = None
    cited_by_count: Optional[int] = None
    works_count: Optional[int] = None
    profile_url: Optional[str] = None
    search_result_count: Optional[int] = None
    status_code: Optional[int] = None
    error: str = ""

    @classmethod
    def http_error(cls, status_code: int) -> "MetricsResult":
        return cls(outcome=FetchOutcome.HTTP_ERROR, status_code=status_code, error=f"HTTP {status_code}")

    @classmethod
    def network_error(cls, error: Exception) -> "MetricsResult":
        return cls(outcome=FetchOutcome.NETWORK_ERROR, error=str(error))

    @classmethod
    def skipped(cls, reason: str) -> "MetricsResult":
        return cls(outcome=FetchOutcome.SKIPPED, error=reason)

    @property
    def ok(self) -> bool:
        return self.outcome is FetchOutcome.SUCCESS

    def as_row(self) -> List[str]:
        """
        Render the six output fields in column order: H-index, i10-index,
        citation count, work count, profile URL, and search result count.
        """
        if self.outcome is FetchOutcome.HTTP_ERROR:
            return [SENTINEL_ERROR] * 6
        if self.outcome is FetchOutcome.NETWORK_ERROR:
            return [SENTINEL_NETWORK_ERROR] * 6
        if self.outcome is FetchOutcome.SKIPPED:
            return [""] * 6
        metrics = [self.h_index, self.i10_index, self.cited_by_count, self.works_count]
        row = [SENTINEL_MISSING if v is None else str(v) for v in metrics]
        row.append(self.profile_url or SENTINEL_MISSING)
        row.append(str(self.search_result_count or 0))
        return row
