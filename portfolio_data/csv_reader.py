"""
Permissive CSV reading for hand-edited content tables.

Rows are parsed one line at a time so a single malformed row (for example an
unterminated quote) is reported and skipped instead of aborting the build.
Problems are collected as `Diagnostic` entries on the returned
`TableReadResult` and mirrored to the module logger.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

LOGGER = logging.getLogger(__name__)

PREVIEW_CHARS = 80
_LINE_SPLIT = re.compile(r"\r?\n")


class CSVParseError(ValueError):
    """Raised when a CSV line cannot be tokenized."""

    def __init__(self, message: str, line_number: int, preview: str) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.preview = preview


@dataclass(frozen=True)
class Diagnostic:
    severity: str  # "warning" or "error"
    file: str
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        location = f"{self.file}:{self.line}" if self.line is not None else self.file
        return f"{self.severity.upper()} {location}: {self.message}"


@dataclass
class TableReadResult:
    name: str
    columns: List[str] = field(default_factory=list)
    records: List[Dict[str, str]] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "warning"]

    def __len__(self) -> int:
        return len(self.records)


def _preview(line: str) -> str:
    if len(line) <= PREVIEW_CHARS:
        return line
    return line[:PREVIEW_CHARS] + "…"


def parse_csv_line(line: str, line_number: int = 1) -> List[str]:
    """
    Split one CSV line into trimmed fields.

    Handles quoted fields ("a,b") and doubled quotes inside quoted fields
    ("" -> "). Raises CSVParseError when the line ends inside a quoted field.
    """

    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < length and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    if in_quotes:
        preview = _preview(line)
        raise CSVParseError(
            f"Unterminated quote in CSV line {line_number}: {preview}",
            line_number=line_number,
            preview=preview,
        )

    fields.append("".join(current).strip())
    return fields


def _record(diagnostics: List[Diagnostic], diagnostic: Diagnostic) -> None:
    diagnostics.append(diagnostic)
    level = logging.ERROR if diagnostic.severity == "error" else logging.WARNING
    LOGGER.log(level, "%s", diagnostic)


def parse_csv(text: str, filename: str) -> TableReadResult:
    """
    Parse CSV text into header-keyed records.

    - Blank lines are ignored; line numbers refer to physical lines in the text.
    - Missing trailing fields become empty strings.
    - Fields beyond the header are dropped.
    - Rows that fail to tokenize are reported and skipped.
    """

    result = TableReadResult(name=filename)
    lines = [
        (number, line.strip())
        for number, line in enumerate(_LINE_SPLIT.split(text), start=1)
        if line.strip()
    ]

    if not lines:
        _record(result.diagnostics, Diagnostic("warning", filename, "table is empty; using no rows"))
        return result

    header_number, header_line = lines[0]
    try:
        headers = parse_csv_line(header_line, header_number)
    except CSVParseError as exc:
        _record(
            result.diagnostics,
            Diagnostic("error", filename, f"cannot parse header row: {exc}", line=header_number),
        )
        return result

    result.columns = headers
    for line_number, line in lines[1:]:
        try:
            values = parse_csv_line(line, line_number)
        except CSVParseError as exc:
            _record(
                result.diagnostics,
                Diagnostic("error", filename, f"{exc}; skipping this row", line=line_number),
            )
            continue

        record: Dict[str, str] = {}
        for index, header in enumerate(headers):
            record[header] = values[index] if index < len(values) else ""
        result.records.append(record)

    LOGGER.debug("Parsed %s: %d columns, %d rows", filename, len(headers), len(result.records))
    return result


def read_table(path: Path, name: Optional[str] = None) -> TableReadResult:
    """
    Read and parse a CSV file.

    A missing file is not fatal: it produces an empty table and a warning.
    An unreadable file gives an empty table and an error. Bytes that are not
    valid UTF-8 are replaced with U+FFFD and reported as a warning.
    """

    path = Path(path)
    label = name or path.name
    if not path.exists():
        result = TableReadResult(name=label)
        _record(result.diagnostics, Diagnostic("warning", label, f"not found at {path}; using no rows"))
        return result

    try:
        raw = path.read_bytes()
    except OSError as exc:
        result = TableReadResult(name=label)
        _record(
            result.diagnostics,
            Diagnostic("error", label, f"could not be read ({exc.strerror or exc}); using no rows"),
        )
        return result

    # utf-8-sig drops the byte order mark spreadsheet exports like to prepend.
    decode_warning = None
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        text = raw.decode("utf-8-sig", errors="replace")
        decode_warning = Diagnostic(
            "warning",
            label,
            f"invalid UTF-8 at byte {exc.start}; undecodable bytes replaced with U+FFFD",
        )

    result = parse_csv(text, label)
    if decode_warning is not None:
        _record(result.diagnostics, decode_warning)
    return result
