"""Exception types raised by the ingestion stages."""

from __future__ import annotations

from typing import Optional


class SnrwatchError(Exception):
    """Base class for fatal snrwatch errors."""


class RecordError(SnrwatchError):
    """An input record could not be turned into a packet.

    Carries the origin of the offending line so the diagnostic can name it.
    """

    def __init__(self, message: str, *, source: Optional[str] = None, line_no: Optional[int] = None, line: Optional[str] = None):
        super().__init__(message)
        self.reason = message
        self.source = source
        self.line_no = line_no
        self.line = line

    def locate(self, *, source: Optional[str], line_no: Optional[int], line: Optional[str]) -> "RecordError":
        if self.source is None:
            self.source = source
        if self.line_no is None:
            self.line_no = line_no
        if self.line is None:
            self.line = line
        return self

    def __str__(self) -> str:
        where = []
        if self.source is not None:
            where.append(str(self.source))
        if self.line_no is not None:
            where.append(f"line {self.line_no}")
        prefix = f"{':'.join(where)}: " if where else ""
        text = f"{prefix}{self.reason}"
        if self.line is not None:
            text += f"\n  offending input: {self.line.rstrip()}"
        return text


class TimestampError(RecordError):
    """A timestamp token matched neither the ISO nor the epoch form."""


class SourceError(SnrwatchError):
    """An input file could not be opened or read."""
