from __future__ import annotations
import re
from pathlib import Path
from typing import Iterator, Iterable

from ..errors import TraceFormatError, TraceIOError
from .record import AccessRecord, Operation

MAX_ADDRESS = (1 << 64) - 1

_LINE_RE = re.compile(r"^(?P<op>\S+) (?P<addr>[^,\s]*)(?P<comma>,?)(?P<size>\S*)$")
_HEX_RE = re.compile(r"^(?:0[xX])?[0-9a-fA-F]+$")
_DEC_RE = re.compile(r"^[0-9]+$")


def parse_line(line: str, line_no: int | None = None) -> AccessRecord:
    """
    Parses a single trace line of the form `<op> <hex-address>,<decimal-size>`.

    Leading and trailing whitespace is ignored. Raises TraceFormatError on
    anything else.
    """
    text = line.strip()
    m = _LINE_RE.match(text)
    if not m:
        raise TraceFormatError("expected '<op> <hex-address>,<size>'", line_no, text)

    op = m.group("op")
    if op not in (Operation.LOAD.value, Operation.STORE.value):
        raise TraceFormatError(f"unknown operation {op!r} (expected L or S)", line_no, text)
    if not m.group("comma"):
        raise TraceFormatError("missing ',' between address and size", line_no, text)

    addr_str, size_str = m.group("addr"), m.group("size")
    if not _HEX_RE.match(addr_str):
        raise TraceFormatError(f"address {addr_str!r} is not hexadecimal", line_no, text)
    if not _DEC_RE.match(size_str):
        raise TraceFormatError(f"size {size_str!r} is not a decimal integer", line_no, text)

    address = int(addr_str, 16)
    if address > MAX_ADDRESS:
        raise TraceFormatError("address does not fit in 64 bits", line_no, text)

    return AccessRecord(operation=Operation(op), address=address, size=int(size_str))


def parse_lines(lines: Iterable[str]) -> Iterator[AccessRecord]:
    """Parses trace lines in order, skipping blank ones."""
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        yield parse_line(line, line_no)


def read_trace(path: str | Path) -> Iterator[AccessRecord]:
    """
    Streams the records of a trace file.

    The file is opened eagerly so a missing or unreadable trace is reported
    before any record is handed out.
    """
    try:
        f = open(path, "r")
    except OSError as e:
        raise TraceIOError(f"Failed to open trace file {path}: {e.strerror or e}") from e
    return _iter_file(f, path)


def _iter_file(f, path) -> Iterator[AccessRecord]:
    with f:
        try:
            yield from parse_lines(f)
        except UnicodeDecodeError as e:
            raise TraceIOError(f"Failed to read trace file {path}: {e}") from e
