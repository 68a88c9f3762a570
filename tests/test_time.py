from datetime import datetime

import pytest

from snrwatch.util.errors import RecordError, TimestampError
from snrwatch.util.time import normalize_timestamp


def test_epoch_text_is_parsed_as_seconds() -> None:
    epoch, display = normalize_timestamp("1652710272.250000")
    assert epoch == 1652710272.25
    assert display == datetime.fromtimestamp(1652710272.25).strftime("%Y-%m-%d %H:%M:%S")


def test_integer_epoch_text() -> None:
    epoch, _ = normalize_timestamp("1652710272")
    assert epoch == 1652710272.0


def test_json_number_is_epoch() -> None:
    epoch, _ = normalize_timestamp(1652710272.5)
    assert epoch == 1652710272.5


def test_iso_utc() -> None:
    epoch, display = normalize_timestamp("2022-05-16T14:11:12Z")
    assert epoch == 1652710272.0
    assert display == "2022-05-16T14:11:12Z"


def test_iso_with_offset_and_fraction() -> None:
    epoch, _ = normalize_timestamp("2022-05-16T10:11:12.5-04:00")
    assert epoch == 1652710272.5


def test_naive_iso_is_local_time() -> None:
    epoch, display = normalize_timestamp("2022-05-16 10:11:12")
    assert epoch == datetime(2022, 5, 16, 10, 11, 12).timestamp()
    assert display == "2022-05-16 10:11:12"


def test_microsecond_fraction_orders_packets() -> None:
    first, _ = normalize_timestamp("2022-05-16 10:11:12.000001")
    second, _ = normalize_timestamp("2022-05-16 10:11:12.999999")
    assert 0.99 < second - first < 1.0


@pytest.mark.parametrize(
    "token",
    ["", "yesterday", "2022-05-16", "16/05/2022 10:11:12", "2022-13-01 00:00:00", "12:00:00", None, True, [1]],
)
def test_unrecognized_tokens_raise(token) -> None:
    with pytest.raises(TimestampError):
        normalize_timestamp(token)


def test_timestamp_error_is_a_record_error() -> None:
    with pytest.raises(RecordError):
        normalize_timestamp("not-a-time")


@pytest.mark.parametrize("token", ["2022-05-16 10:00:00+25:00", "2022-05-16T10:00:00-24:30"])
def test_impossible_utc_offset_raises(token) -> None:
    with pytest.raises(TimestampError, match="offset"):
        normalize_timestamp(token)


def test_huge_epoch_number_raises() -> None:
    with pytest.raises(TimestampError, match="out of range"):
        normalize_timestamp(int("9" * 400))


def test_huge_epoch_text_raises() -> None:
    with pytest.raises(TimestampError):
        normalize_timestamp("9" * 400)
