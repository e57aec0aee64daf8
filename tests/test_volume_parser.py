from __future__ import annotations

import pytest

from workout_timer.workout.errors import DurationError, InvalidDuration, WorkoutError
from workout_timer.workout.model import Volume
from workout_timer.workout.volume import ACCEPTED_FORMATS, parse_volume


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("10", Volume(10, "reps")),
        ("10 reps", Volume(10, "reps")),
        ("1 rep", Volume(1, "reps")),
        ("30s", Volume(30, "seconds")),
        ("30 sec", Volume(30, "seconds")),
        ("45 seconds", Volume(45, "seconds")),
        ("2m", Volume(120, "seconds")),
        ("2 min", Volume(120, "seconds")),
        ("3 minutes", Volume(180, "seconds")),
        ("1m30s", Volume(90, "seconds")),
        ("1m 30s", Volume(90, "seconds")),
        ("1 minute, 30 seconds", Volume(90, "seconds")),
        ("  20s  ", Volume(20, "seconds")),
    ],
)
def test_parse_volume_accepted_formats(token: str, expected: Volume) -> None:
    assert parse_volume(token) == expected


def test_parse_volume_rejects_unknown_token_with_format_list() -> None:
    with pytest.raises(InvalidDuration) as info:
        parse_volume("fast")

    err = info.value
    assert err.token == "fast"
    assert err.accepted_formats == ACCEPTED_FORMATS
    assert str(err).startswith('Invalid duration or reps: "fast". Expected formats:')
    assert isinstance(err, DurationError)
    assert isinstance(err, WorkoutError)
    assert err.kind == "duration"


def test_parse_volume_rejects_empty_comma_fragment() -> None:
    with pytest.raises(InvalidDuration, match="Invalid nested commas"):
        parse_volume("1m,,30s")


def test_parse_volume_rejects_reps_mixed_with_time() -> None:
    with pytest.raises(InvalidDuration, match="Cannot combine reps with time"):
        parse_volume("10, 30s")


def test_parse_volume_bad_fragment_reports_whole_token() -> None:
    with pytest.raises(InvalidDuration) as info:
        parse_volume("30s, xyz")

    assert info.value.token == "30s, xyz"
    assert "xyz" in str(info.value)
    assert isinstance(info.value.__cause__, InvalidDuration)
