from AuthorMetrics.config import (
    REQUEST_DELAY_BETWEEN_ROWS,
    HTTP_MAX_RETRIES,
    HTTP_TIMEOUT_DEFAULT,
    OPENALEX_PROFILE_BASE,
    OUTPUT_COLUMNS,
    METRIC_KEYS,
    NETWORK_ERROR_POLICIES,
    DEFAULT_NETWORK_ERROR_POLICY,
    SENTINEL_ERROR,
    SENTINEL_MISSING,
    SENTINEL_NETWORK_ERROR,
)

def test_request_delay_reasonable():
    """
    Test that the pause between rows is the one-second default.
    """
    assert REQUEST_DELAY_BETWEEN_ROWS == 1.0, \
        f"REQUEST_DELAY_BETWEEN_ROWS changed to {REQUEST_DELAY_BETWEEN_ROWS}"

def test_single_request_per_row_by_default():
    """
    Test that no retries and no timeout override are configured out of the box.
    """
    assert HTTP_MAX_RETRIES == 0
    assert HTTP_TIMEOUT_DEFAULT is None

def test_profile_base_ends_with_slash():
    assert OPENALEX_PROFILE_BASE.endswith("/"), "profile URLs are built by plain concatenation"

def test_output_columns():
    """
    Test that the six output labels match the metric fields one to one.
    """
    assert len(OUTPUT_COLUMNS) == 6
    assert len(set(OUTPUT_COLUMNS)) == 6
    assert len(METRIC_KEYS) == 4

def test_network_policy_default_aborts():
    assert DEFAULT_NETWORK_ERROR_POLICY in NETWORK_ERROR_POLICIES
    assert DEFAULT_NETWORK_ERROR_POLICY == "abort"

def test_sentinels_are_distinct():
    assert len({SENTINEL_ERROR, SENTINEL_MISSING, SENTINEL_NETWORK_ERROR}) == 3

def test_decode_errors_cover_unicode_failures():
    from AuthorMetrics.exceptions import DECODE_ERRORS, FILE_READ_ERRORS

    assert DECODE_ERRORS == (UnicodeError,)
    assert issubclass(UnicodeDecodeError, DECODE_ERRORS)
    assert issubclass(UnicodeDecodeError, FILE_READ_ERRORS)
