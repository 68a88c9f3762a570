"""rtl_433 JSON record parsing and pre-catalog filtering."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from snrwatch.catalog.model import DeviceKey, Packet, StatsConfig
from snrwatch.util.errors import RecordError
from snrwatch.util.logging import get_logger
from snrwatch.util.time import normalize_timestamp

logger = get_logger(__name__)

TPMS_TYPE = "TPMS"


@dataclass
class SkipCounts:
    blank: int = 0
    no_model: int = 0
    tpms: int = 0

    @property
    def total(self) -> int:
        return self.blank + self.no_model + self.tpms


def parse_line(line: str, *, line_no: Optional[int] = None, source: Optional[str] = None) -> Optional[Packet]:
    """Parse one line of rtl_433 ``-F json`` output.

    Returns None for blank lines and for records that name no device model.
    Anything else that cannot be turned into a packet raises ``RecordError``.
    """

    text = line.strip()
    if not text:
        return None
    try:
        record = json.loads(text)
    except ValueError as exc:
        raise RecordError(f"malformed JSON: {exc}", source=source, line_no=line_no, line=line) from exc
    if not isinstance(record, dict):
        raise RecordError("record is not a JSON object", source=source, line_no=line_no, line=line)
    try:
        return parse_record(record, line_no=line_no, source=source)
    except RecordError as exc:
        raise exc.locate(source=source, line_no=line_no, line=line)


def parse_record(record: Dict[str, Any], *, line_no: Optional[int] = None, source: Optional[str] = None) -> Optional[Packet]:
    model = record.get("model")
    if model is None or model == "":
        return None
    if "time" not in record:
        raise RecordError("record has no 'time' field")
    epoch, display = normalize_timestamp(record["time"])
    key = DeviceKey.from_fields(model, record.get("channel"), record.get("id"))
    rtype = record.get("type")
    return Packet(
        key=key,
        epoch=epoch,
        display_time=display,
        snr=_number(record, "snr"),
        freq=_number(record, "freq"),
        battery=record.get("battery_ok"),
        status=record.get("status"),
        type=None if rtype is None else str(rtype),
        source=source,
        line_no=line_no,
    )


def _number(record: Dict[str, Any], name: str) -> float:
    value = record.get(name)
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise RecordError(f"field '{name}' is not numeric: {value!r}")
    try:
        if isinstance(value, (int, float)):
            return float(value)
        return float(str(value).strip())
    except OverflowError as exc:
        raise RecordError(f"field '{name}' is out of range: {str(value)[:32]}...") from exc
    except ValueError as exc:
        raise RecordError(f"field '{name}' is not numeric: {value!r}") from exc


def is_tpms(packet: Packet) -> bool:
    return packet.type == TPMS_TYPE


def iter_packets(
    lines: Iterable[Tuple[str, int, str]],
    config: StatsConfig,
    skips: Optional[SkipCounts] = None,
) -> Iterator[Packet]:
    """Yield catalog-ready packets from ``(source, line_no, text)`` triples.

    Records without a model and, unless ``config.include_tpms`` is set,
    TPMS records are dropped here and only tallied in ``skips``.
    """

    counts = skips if skips is not None else SkipCounts()
    for source, line_no, text in lines:
        if not text.strip():
            counts.blank += 1
            continue
        packet = parse_line(text, line_no=line_no, source=source)
        if packet is None:
            counts.no_model += 1
            logger.debug("%s:%d: no model, skipped", source, line_no)
            continue
        if not config.include_tpms and is_tpms(packet):
            counts.tpms += 1
            continue
        yield packet
