"""
Input line sources.

Yields the text lines of each input in command-line order, transparently
decompressing gzip, bzip2, xz/lzma and zstd files. ``-`` (or no inputs at
all) reads standard input. Compression is inferred from the filename
suffix only.

Lines are decoded as strict UTF-8 one at a time, so an undecodable record
is reported with its exact line number instead of being silently mangled.
"""

from __future__ import annotations

import bz2
import gzip
import io
import lzma
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Generator, Iterable, Iterator, Literal, Optional, Sequence, Tuple, Union

import zstandard  # type: ignore

from snrwatch.util.errors import RecordError, SourceError
from snrwatch.util.logging import get_logger

logger = get_logger(__name__)

STDIN_NAME = "-"
STDIN_SOURCE = "<stdin>"
ENCODING = "utf-8"

Compressor = Literal["gzip", "bz2", "lzma", "zstd", "none"]

COMP_SUFFIXES: Tuple[Tuple[str, Compressor], ...] = (
    (".gz", "gzip"),
    (".bz2", "bz2"),
    (".xz", "lzma"),
    (".lzma", "lzma"),
    (".zst", "zstd"),
)


def infer_compressor(name: str) -> Compressor:
    lower = name.lower()
    for suffix, comp in COMP_SUFFIXES:
        if lower.endswith(suffix):
            return comp
    return "none"


@contextmanager
def open_binary(path: Path, compressor: Compressor) -> Generator[IO[bytes], None, None]:
    """Open ``path`` for line-wise binary reading through the right decompressor."""

    if compressor == "gzip":
        fh: IO[bytes] = gzip.open(path, "rb")
    elif compressor == "bz2":
        fh = bz2.open(path, "rb")
    elif compressor == "lzma":
        fh = lzma.open(path, "rb")
    elif compressor == "zstd":
        raw = open(path, "rb")
        stream = zstandard.ZstdDecompressor().stream_reader(raw, closefd=True)
        # The decompression reader has no readline; buffering adds line iteration.
        fh = io.BufferedReader(stream)
    else:
        fh = open(path, "rb")
    try:
        yield fh
    finally:
        fh.close()


def decode_lines(lines: Iterable[Union[bytes, str]], source: str) -> Iterator[Tuple[str, int, str]]:
    """Number ``lines`` from 1 and decode byte lines as strict UTF-8."""

    for line_no, raw in enumerate(lines, start=1):
        if isinstance(raw, str):
            yield source, line_no, raw
            continue
        try:
            text = raw.decode(ENCODING)
        except UnicodeDecodeError as exc:
            raise RecordError(
                f"invalid UTF-8 at byte {exc.start}",
                source=source,
                line_no=line_no,
                line=raw.decode(ENCODING, errors="backslashreplace"),
            ) from exc
        yield source, line_no, text


def iter_lines(paths: Optional[Sequence[str]] = None, *, stdin: Optional[IO] = None) -> Iterator[Tuple[str, int, str]]:
    """Yield ``(source_name, line_no, text)`` for every line of every input."""

    names = list(paths or [STDIN_NAME])
    for name in names:
        if name == STDIN_NAME:
            stream = stdin if stdin is not None else sys.stdin.buffer
            logger.info("Reading standard input")
            yield from decode_lines(stream, STDIN_SOURCE)
            continue

        path = Path(name).expanduser()
        if not path.is_file():
            raise SourceError(f"input file not found: {name}")
        compressor = infer_compressor(path.name)
        logger.info("Reading %s (%s)", path, compressor)
        try:
            with open_binary(path, compressor) as fh:
                yield from decode_lines(fh, name)
        except (OSError, EOFError, lzma.LZMAError, zstandard.ZstdError) as exc:
            raise SourceError(f"cannot read {name}: {exc}") from exc
