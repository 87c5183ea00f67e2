from __future__ import annotations

import argparse
from collections import Counter
from typing import List, Optional

from . import http_utils
from .config import (
    DEFAULT_INPUT,
    DEFAULT_LOG_FILE,
    REQUEST_DELAY_BETWEEN_ROWS,
    HTTP_TIMEOUT_DEFAULT,
    HTTP_MAX_RETRIES,
    NETWORK_ERROR_POLICIES,
    DEFAULT_NETWORK_ERROR_POLICY,
)
from .exceptions import CSV_ERRORS, FILE_READ_ERRORS, FILE_WRITE_ERRORS, TRANSPORT_ERRORS
from .fetcher import MetricsFetcher
from .io_utils import read_author_rows, resolve_input_path, CsvResultSink
from .log_utils import logger, LogSource, LogCategory
from .models import FetchOutcome


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="authormetrics",
        description=(
            "Look up H-index, i10-index, citation and work counts on OpenAlex for each "
            "author in a CSV table and write the results back as extra columns."
        ),
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=DEFAULT_INPUT,
        help=f"CSV with a header row, author names and optional OpenAlex ids (default: {DEFAULT_INPUT}).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Where to write the updated table (default: update the input file in place).",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=REQUEST_DELAY_BETWEEN_ROWS,
        help=f"Seconds to wait between requests (default: {REQUEST_DELAY_BETWEEN_ROWS}).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=HTTP_TIMEOUT_DEFAULT,
        help="Per-request timeout in seconds (default: none, wait indefinitely).",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=HTTP_MAX_RETRIES,
        help=f"Retries for 408/429/5xx responses (default: {HTTP_MAX_RETRIES}).",
    )
    parser.add_argument(
        "--mailto",
        default=None,
        help="Contact e-mail sent to OpenAlex to join its polite pool.",
    )
    parser.add_argument(
        "--on-network-error",
        choices=NETWORK_ERROR_POLICIES,
        default=DEFAULT_NETWORK_ERROR_POLICY,
        help=(
            "What to do when a request fails before any HTTP response arrives (DNS failure, "
            "refused connection, timeout). 'abort' stops the batch; rows already processed "
            "stay written. 'continue' writes 'Network Error' into that row and moves on. "
            f"(default: {DEFAULT_NETWORK_ERROR_POLICY})"
        ),
    )
    parser.add_argument(
        "--log-file",
        default=DEFAULT_LOG_FILE,
        help=f"Mirror the log to this file (default: {DEFAULT_LOG_FILE}; empty to disable).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Load the author table, resolve every row against OpenAlex, and write the
    metric columns back as each row completes.

    Returns 0 when the batch ran to the end, 1 when a network error aborted it,
    and 2 when the input could not be read or the output could not be written.
    """
    args = _parse_args(argv)

    if args.log_file:
        logger.set_log_file(args.log_file)
    logger.step("AuthorMetrics run started", category=LogCategory.PLAN)

    try:
        input_path = resolve_input_path(args.input)
        _header, rows, table = read_author_rows(input_path)
        logger.success(f"Input loaded: {len(rows)} row(s) from {input_path}", source=LogSource.CSV,
                       category=LogCategory.PLAN)
    except FILE_READ_ERRORS + CSV_ERRORS as e:
        logger.error(f"Error reading input file: {e}", source=LogSource.CSV, category=LogCategory.ERROR)
        logger.close()
        return 2

    output_path = args.output or input_path
    sink = CsvResultSink(output_path, table)
    try:
        sink.flush()
    except FILE_WRITE_ERRORS as e:
        logger.error(f"Cannot write output file '{output_path}': {e}", source=LogSource.CSV,
                     category=LogCategory.ERROR)
        logger.close()
        return 2
    logger.info(f"Writing results to {output_path}", source=LogSource.CSV, category=LogCategory.SAVE)

    http_utils.configure_session(args.retries)
    fetcher = MetricsFetcher(
        delay=args.delay,
        timeout=args.timeout,
        on_network_error=args.on_network_error,
        mailto=args.mailto,
    )

    logger.step(
        f"Processing {len(rows)} row(s), {args.delay:g}s between requests, "
        f"network errors: {args.on_network_error}",
        category=LogCategory.PLAN,
    )

    results = []

    def record(row, result):
        sink.write(row, result)
        results.append(result)

    exit_code = 0
    try:
        fetcher.run(rows, on_result=record)
    except TRANSPORT_ERRORS as e:
        logger.error(f"Batch aborted by network error: {e}", category=LogCategory.ERROR)
        exit_code = 1
    except FILE_WRITE_ERRORS as e:
        logger.error(f"Cannot write output file '{output_path}': {e}", source=LogSource.CSV,
                     category=LogCategory.ERROR)
        exit_code = 2
    except KeyboardInterrupt:
        logger.warn("Interrupted; rows finished so far are saved", category=LogCategory.PLAN)
        exit_code = 1

    tally = Counter(r.outcome for r in results)
    logger.step("Run complete" if exit_code == 0 else "Run stopped", category=LogCategory.PLAN)
    logger.info(f"Rows fetched: {tally[FetchOutcome.SUCCESS]}", category=LogCategory.PLAN)
    logger.info(f"HTTP errors: {tally[FetchOutcome.HTTP_ERROR]}", category=LogCategory.PLAN)
    if tally[FetchOutcome.NETWORK_ERROR]:
        logger.info(f"Network errors: {tally[FetchOutcome.NETWORK_ERROR]}", category=LogCategory.PLAN)
    if tally[FetchOutcome.SKIPPED]:
        logger.info(f"Rows skipped: {tally[FetchOutcome.SKIPPED]}", category=LogCategory.PLAN)
    logger.info(f"Output: {output_path}", category=LogCategory.PLAN)
    logger.info(f"Log file: {logger.log_file_path or 'n/a'}", category=LogCategory.PLAN)

    logger.close()
    return exit_code
