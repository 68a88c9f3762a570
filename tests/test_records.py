import json

import pytest

from snrwatch.catalog.model import DeviceKey, StatsConfig
from snrwatch.io.records import SkipCounts, iter_packets, parse_line
from snrwatch.util.errors import RecordError, TimestampError


def _line(**fields) -> str:
    record = {"time": "2022-05-16 10:11:12", "model": "Acurite-Tower", "id": 1234, "channel": "A"}
    record.update(fields)
    return json.dumps({k: v for k, v in record.items() if v is not None}) + "\n"


def _triples(*lines):
    return [("capture.json", i, text) for i, text in enumerate(lines, start=1)]


def test_parse_line_builds_packet() -> None:
    packet = parse_line(_line(snr=18.25, freq=433.951, battery_ok=1, status=3), line_no=7, source="capture.json")
    assert packet.key == DeviceKey("Acurite-Tower", "A", "1234")
    assert packet.snr == 18.25
    assert packet.freq == 433.951
    assert packet.battery == 1
    assert packet.status == 3
    assert packet.display_time == "2022-05-16 10:11:12"
    assert packet.line_no == 7
    assert packet.source == "capture.json"


def test_missing_snr_and_freq_default_to_zero() -> None:
    packet = parse_line(_line())
    assert packet.snr == 0.0
    assert packet.freq == 0.0
    assert packet.battery is None


def test_numeric_model_is_stringified() -> None:
    packet = parse_line(_line(model=42, channel=None, id=None))
    assert packet.key == DeviceKey("42")
    assert str(packet.key) == "42"


def test_string_numbers_are_accepted() -> None:
    packet = parse_line(_line(snr="12.5"))
    assert packet.snr == 12.5


def test_record_without_model_is_skipped() -> None:
    assert parse_line(_line(model=None)) is None
    assert parse_line(_line(model="")) is None


def test_blank_line_is_skipped() -> None:
    assert parse_line("   \n") is None


def test_malformed_json_names_the_line() -> None:
    with pytest.raises(RecordError) as excinfo:
        parse_line('{"model": "X", "time": ', line_no=12, source="capture.json")
    message = str(excinfo.value)
    assert "capture.json:line 12" in message
    assert '{"model": "X", "time":' in message


def test_non_object_json_is_malformed() -> None:
    with pytest.raises(RecordError):
        parse_line("[1, 2, 3]")


def test_missing_time_is_fatal() -> None:
    with pytest.raises(RecordError, match="no 'time'"):
        parse_line(json.dumps({"model": "X"}))


def test_bad_time_raises_located_timestamp_error() -> None:
    with pytest.raises(TimestampError) as excinfo:
        parse_line(_line(time="soon"), line_no=3, source="a.json")
    assert excinfo.value.line_no == 3
    assert excinfo.value.source == "a.json"


def test_non_numeric_snr_is_fatal() -> None:
    with pytest.raises(RecordError, match="snr"):
        parse_line(_line(snr="loud"))


def test_iter_packets_filters_tpms_and_anonymous_records() -> None:
    lines = _triples(
        _line(snr=10.0),
        _line(model=None),
        _line(model="Schrader", type="TPMS", id=777),
        "\n",
        _line(snr=11.0),
    )
    skips = SkipCounts()
    packets = list(iter_packets(lines, StatsConfig(), skips))
    assert [p.snr for p in packets] == [10.0, 11.0]
    assert [p.line_no for p in packets] == [1, 5]
    assert skips.no_model == 1
    assert skips.tpms == 1
    assert skips.blank == 1
    assert skips.total == 3


def test_iter_packets_keeps_tpms_when_configured() -> None:
    lines = _triples(_line(model="Schrader", type="TPMS", id=777))
    packets = list(iter_packets(lines, StatsConfig(include_tpms=True)))
    assert len(packets) == 1
    assert packets[0].type == "TPMS"


def test_iter_packets_stops_on_malformed_record() -> None:
    lines = _triples(_line(), "garbage\n", _line())
    seen = []
    with pytest.raises(RecordError) as excinfo:
        for packet in iter_packets(lines, StatsConfig()):
            seen.append(packet)
    assert len(seen) == 1
    assert excinfo.value.line_no == 2


def test_huge_numeric_field_is_fatal() -> None:
    line = '{"time": "1652710272", "model": "X", "snr": ' + "9" * 400 + "}"
    with pytest.raises(RecordError, match="snr") as excinfo:
        parse_line(line, line_no=4, source="capture.json")
    assert excinfo.value.line_no == 4


def test_huge_time_number_is_located_timestamp_error() -> None:
    line = '{"model": "X", "time": ' + "9" * 400 + "}"
    with pytest.raises(TimestampError) as excinfo:
        parse_line(line, line_no=9, source="capture.json")
    assert excinfo.value.line_no == 9
