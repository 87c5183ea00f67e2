from __future__ import annotations

import csv
import json

import requests

__all__ = [
    "TRANSPORT_ERRORS",
    "DECODE_ERRORS",
    "JSON_ERRORS",
    "NUMERIC_ERRORS",
    "FILE_IO_ERRORS",
    "FILE_READ_ERRORS",
    "FILE_WRITE_ERRORS",
    "CSV_ERRORS",
]

# errors raised by requests when a request never produced an HTTP response:
# refused connections, DNS failures, malformed URLs, and timeouts
TRANSPORT_ERRORS = (requests.exceptions.RequestException,)

# errors that occur when converting response bytes into text
# Note: UnicodeError is the base of UnicodeDecodeError, so it covers both
DECODE_ERRORS = (UnicodeError,)

# JSON parsing errors when processing API responses
JSON_ERRORS = (json.JSONDecodeError, ValueError, TypeError)

# numeric conversion errors raised while reading metric values and counts
NUMERIC_ERRORS = (TypeError, ValueError, OverflowError)

# file system errors when reading the input table
# Note: FileNotFoundError is a subclass of OSError, both are listed for clarity
FILE_IO_ERRORS = (FileNotFoundError, OSError)

# combined file read errors including I/O failures, encoding issues, and malformed data
FILE_READ_ERRORS = FILE_IO_ERRORS + DECODE_ERRORS + (ValueError,)

# file write errors including permissions, disk full, and encoding issues
FILE_WRITE_ERRORS = (OSError, TypeError, UnicodeEncodeError)

# CSV errors when reading author rows or rewriting the result table
CSV_ERRORS = (csv.Error, OSError, UnicodeDecodeError)
