from __future__ import annotations

OPENALEX_API_BASE = "https://api.openalex.org"
OPENALEX_AUTHORS_BASE = f"{OPENALEX_API_BASE}/authors"

# canonical web address prefix for an author record; the author id is appended
OPENALEX_PROFILE_BASE = "https://openalex.org/"

# search results are sorted so that the first hit is the most prolific match
OPENALEX_SEARCH_SORT = "works_count:desc"

DEFAULT_INPUT = "data/authors.csv"
DEFAULT_LOG_FILE = "output/run.log"

# wait between rows to stay polite with the API
# a static delay is the whole rate-limit policy; no backoff, no adaptive throttling
REQUEST_DELAY_BETWEEN_ROWS = 1.0

# HTTP request configuration
# None keeps the requests default, which waits indefinitely for a response
HTTP_TIMEOUT_DEFAULT = None

# Retry configuration for the shared session
# Zero keeps the single-request behavior; raise it to retry the status codes below
HTTP_MAX_RETRIES = 0
HTTP_BACKOFF_INITIAL = 0.25
HTTP_RETRY_STATUS_CODES = (408, 429, 500, 502, 503, 504)

# the only status code treated as success
HTTP_SUCCESS_STATUS = 200

# what to do when a request fails below HTTP (DNS, refused connection, bad URL)
# "abort" stops the whole batch, "continue" marks the row and moves on
NETWORK_ERROR_ABORT = "abort"
NETWORK_ERROR_CONTINUE = "continue"
NETWORK_ERROR_POLICIES = (NETWORK_ERROR_ABORT, NETWORK_ERROR_CONTINUE)
DEFAULT_NETWORK_ERROR_POLICY = NETWORK_ERROR_ABORT

# sentinels written to the output table when a value is unavailable
SENTINEL_ERROR = "Error"
SENTINEL_MISSING = "N/A"
SENTINEL_NETWORK_ERROR = "Network Error"

# metric keys as they appear in an OpenAlex author record
METRIC_KEYS = ("h_index", "i10_index", "cited_by_count", "works_count")

# the live API nests h_index and i10_index under this object
SUMMARY_STATS_KEY = "summary_stats"

# output column labels, in the order they are written
OUTPUT_COLUMNS = [
    "H-index",
    "i10-index",
    "Citation Count",
    "Work Count",
    "OpenAlex URL",
    "Search Results Count",
]

# header aliases for the input columns (compared case-insensitively)
# when no header matches, the name is read from the first column and the id from the second
NAME_COLUMN_ALIASES = ("name", "author", "author name", "authorname")
ID_COLUMN_ALIASES = ("openalex id", "author id", "id", "authorid", "openalex")
