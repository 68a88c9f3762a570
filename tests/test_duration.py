import argparse

import pytest

from snrwatch.util.duration import parse_duration_to_seconds


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("2", 2.0),
        ("1.5s", 1.5),
        ("500ms", 0.5),
        ("1m", 60.0),
        ("1h", 3600.0),
        (3, 3.0),
        (0.25, 0.25),
    ],
)
def test_durations_convert_to_seconds(spec, expected) -> None:
    assert parse_duration_to_seconds(spec) == pytest.approx(expected)


def test_empty_duration_is_none() -> None:
    assert parse_duration_to_seconds(None) is None
    assert parse_duration_to_seconds("  ") is None


def test_bad_number_is_rejected() -> None:
    with pytest.raises(argparse.ArgumentTypeError, match="Invalid duration"):
        parse_duration_to_seconds("fast")


def test_unknown_suffix_is_rejected() -> None:
    with pytest.raises(argparse.ArgumentTypeError, match="Unsupported duration suffix"):
        parse_duration_to_seconds("5d")
