from __future__ import annotations

import csv
import os
import re
from typing import List, Optional, Sequence, Tuple

from .config import DEFAULT_INPUT, OUTPUT_COLUMNS, NAME_COLUMN_ALIASES, ID_COLUMN_ALIASES
from .models import AuthorRow, MetricsResult
from .text_utils import clean_cell


def _project_root() -> str:
    """
    Return the absolute path to the project root directory, inferred from the location of this module on disk.
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def _candidate_paths(primary: str) -> List[str]:
    """
    Paths to try for an input file: as given, then relative to the project root.
    """
    candidates: List[str] = [primary]
    if not os.path.isabs(primary):
        rooted = os.path.join(_project_root(), primary)
        if rooted != primary:
            candidates.append(rooted)
    return candidates


def resolve_input_path(path: str = DEFAULT_INPUT) -> str:
    """
    Return the first existing location for the input table.
    """
    candidates = _candidate_paths(path)
    for p in candidates:
        if os.path.isfile(p):
            return p
    raise FileNotFoundError(f"Input file not found (tried: {', '.join(candidates)})")


def _header_key(value: str) -> str:
    # "OpenAlex ID", "openalex_id" and "OpenAlexID" all compare equal
    return re.sub(r"[\s_\-]+", "", clean_cell(value)).lower()


def _find_column(header: Sequence[str], aliases: Sequence[str], fallback: int) -> int:
    """
    Index of the first header cell matching one of the aliases, or the fallback
    position when none does. Case, spaces, underscores and hyphens are ignored.
    """
    normalized = [_header_key(h) for h in header]
    for alias in aliases:
        key = _header_key(alias)
        if key in normalized:
            return normalized.index(key)
    return fallback


def _positional_id_column(header: Sequence[str], name_idx: int) -> int:
    """
    The id sits in the second column unless that column holds the name or one
    of the result columns written by a previous run.
    """
    if name_idx == 1 or len(header) < 2 or header[1] in OUTPUT_COLUMNS:
        return -1
    return 1


def _cell(row: Sequence[str], idx: int) -> str:
    return clean_cell(row[idx]) if 0 <= idx < len(row) else ""


def read_author_rows(path: str = DEFAULT_INPUT) -> Tuple[List[str], List[AuthorRow], List[List[str]]]:
    """
    Load the author table. The first line is the header; data starts on line 2
    and ends at the last line carrying a name or an id. Returns the header, the
    parsed rows, and the raw table so results can be written back in place.
    """
    p = resolve_input_path(path)
    with open(p, newline="", encoding="utf-8-sig") as csvfile:
        table = [list(r) for r in csv.reader(csvfile)]

    if not table:
        raise ValueError(f"Input file {p} is empty")

    header = [clean_cell(h) for h in table[0]]
    name_idx = _find_column(header, NAME_COLUMN_ALIASES, -1)
    id_idx = _find_column(header, ID_COLUMN_ALIASES, -1)
    if name_idx < 0:
        # no recognizable name header: name in the first column, id in the second
        name_idx = 1 if id_idx == 0 else 0
    if id_idx < 0:
        id_idx = _positional_id_column(header, name_idx)

    body = table[1:]
    rows = [
        AuthorRow(name=_cell(r, name_idx), author_id=_cell(r, id_idx), line=n)
        for n, r in enumerate(body, start=2)
    ]

    # the data ends at the last row with a name or an id; trailing lines with
    # other content stay in the table, fully blank ones are dropped
    while rows and rows[-1].is_empty:
        rows.pop()
    while body and not any(clean_cell(c) for c in body[-1]):
        body.pop()

    if not any(not r.is_empty for r in rows):
        raise ValueError(f"No author names or ids found in {p}")

    return header, rows, [header] + body


class CsvResultSink:
    """
    Write result columns back into the author table. Output columns that
    already exist in the header are overwritten in place, the rest are appended
    once. The file is rewritten after every row so progress survives an
    aborted batch.
    """

    def __init__(self, path: str, table: List[List[str]], columns: Sequence[str] = OUTPUT_COLUMNS):
        self.path = path
        self.table = [list(r) for r in table] or [[]]
        header = self.table[0]
        self.positions: List[int] = []
        for label in columns:
            if label in header:
                self.positions.append(header.index(label))
            else:
                header.append(label)
                self.positions.append(len(header) - 1)
        self.width = len(header)
        for row in self.table[1:]:
            if len(row) < self.width:
                row.extend([""] * (self.width - len(row)))

    def write(self, row: AuthorRow, result: MetricsResult) -> None:
        """
        Store the rendered result in the table line the row came from and flush.
        """
        self.put(row.line, result.as_row())
        self.flush()

    def put(self, line: int, values: Sequence[str]) -> None:
        idx = line - 1
        while len(self.table) <= idx:
            self.table.append([])
        target = self.table[idx]
        if len(target) < self.width:
            target.extend([""] * (self.width - len(target)))
        for pos, value in zip(self.positions, values):
            target[pos] = value

    def flush(self) -> None:
        parent_dir = os.path.dirname(self.path)
        if parent_dir:
            os.makedirs(parent_dir, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", newline="", encoding="utf-8") as csvfile:
                writer = csv.writer(csvfile)
                writer.writerows(self.table)
            os.replace(tmp_path, self.path)
        finally:
            # no partial copy survives a failed write
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def cell(self, line: int, label: str) -> Optional[str]:
        """
        Read back one cell of the table by line number and column label.
        """
        header = self.table[0]
        if label not in header or line - 1 >= len(self.table):
            return None
        row = self.table[line - 1]
        pos = header.index(label)
        return row[pos] if pos < len(row) else ""
