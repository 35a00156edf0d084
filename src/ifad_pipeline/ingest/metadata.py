"""Split raw input lines into metadata preamble, header row and data rows.

Both the gene list and GAF files may open with a block of ``!``-prefixed
metadata lines (``!gaf-version: 2.1``, release notes, ...). That block is kept
verbatim so it can be written back at the top of the filtered output.
"""

import gzip
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterable, Iterator

from ifad_pipeline.errors import MalformedRecordError
from ifad_pipeline.ingest.models import COMMENT_PREFIX


@dataclass(frozen=True)
class SplitLines:
    """Input lines separated by role.

    Attributes:
        preamble: Leading metadata lines, verbatim
        header: Column header row, if the file has one
        rows: (line_number, line) for every data line, blank and comment lines removed
    """

    preamble: tuple[str, ...] = ()
    header: str | None = None
    rows: list[tuple[int, str]] = field(default_factory=list)


def split_lines(lines: Iterable[str], has_header: bool = False) -> SplitLines:
    """Separate preamble, optional header and data rows.

    Line terminators are stripped; everything else on the line is preserved.
    ``!`` lines after the preamble are comments and dropped.

    Args:
        lines: Raw text lines (with or without trailing newlines)
        has_header: Treat the first non-comment, non-blank line as a header row

    Returns:
        SplitLines with 1-based line numbers on each data row
    """
    preamble: list[str] = []
    header = None
    rows: list[tuple[int, str]] = []
    in_preamble = True
    need_header = has_header

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")

        if line.startswith(COMMENT_PREFIX):
            if in_preamble:
                preamble.append(line)
            continue
        in_preamble = False

        if not line.strip():
            continue

        if need_header:
            header = line
            need_header = False
            continue

        rows.append((line_number, line))

    return SplitLines(preamble=tuple(preamble), header=header, rows=rows)


def open_input(path: Path | str) -> IO[bytes]:
    """Open a plain or gzip-compressed input file for binary reading."""
    path = Path(path)
    if path.suffix == ".gz":
        return gzip.open(path, "rb")
    return open(path, "rb")


def decode_lines(raw_lines: Iterable[bytes], source: str = "") -> Iterator[str]:
    """Decode input lines as UTF-8 one at a time.

    Raises:
        MalformedRecordError: On the first line that is not valid UTF-8
    """
    for line_number, raw in enumerate(raw_lines, start=1):
        try:
            yield raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedRecordError(
                f"invalid UTF-8 at byte {e.start}",
                line_number=line_number,
                line=raw.rstrip(b"\r\n").decode("utf-8", errors="replace"),
                source=source,
            ) from None
