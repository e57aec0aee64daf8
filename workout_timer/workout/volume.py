"""Duration and rep-count token parser."""

from __future__ import annotations

import re

from workout_timer.workout.errors import InvalidDuration
from workout_timer.workout.model import Volume


ACCEPTED_FORMATS: tuple[str, ...] = (
    '"10" (reps)',
    '"10 reps"',
    '"30s"',
    '"30 sec"',
    '"2m"',
    '"2 min"',
    '"1m30s"',
    '"1 minute, 30 seconds"',
)

_BARE_REPS = re.compile(r"^([0-9]+)$")
_REPS = re.compile(r"^([0-9]+)\s*reps?$")
_COMBINED = re.compile(
    r"^([0-9]+)\s*m(?:in(?:ute)?s?)?\s*([0-9]+)\s*s(?:ec(?:ond)?s?)?$"
)
_SIMPLE_TIME = re.compile(r"^([0-9]+)\s*(s(?:ec(?:ond)?s?)?|m(?:in(?:ute)?s?)?)$")


def parse_volume(token: str) -> Volume:
    raw = token.strip()

    match = _BARE_REPS.match(raw) or _REPS.match(raw)
    if match:
        return Volume(int(match.group(1)), "reps")

    match = _COMBINED.match(raw)
    if match:
        return Volume(int(match.group(1)) * 60 + int(match.group(2)), "seconds")

    if "," in raw:
        return _parse_time_list(raw)

    match = _SIMPLE_TIME.match(raw)
    if match:
        value = int(match.group(1))
        if match.group(2).startswith("m"):
            return Volume(value * 60, "seconds")
        return Volume(value, "seconds")

    raise _invalid(raw, f'Invalid duration or reps: "{raw}". Expected formats: '
                   + ", ".join(ACCEPTED_FORMATS))


def _parse_time_list(raw: str) -> Volume:
    parts = [item.strip() for item in raw.split(",")]
    # An empty fragment means two commas met ("1,,2") or a dangling comma.
    if not all(parts):
        raise _invalid(raw, f'Invalid nested commas in duration: "{raw}"')

    total = 0
    for part in parts:
        try:
            parsed = parse_volume(part)
        except InvalidDuration as exc:
            raise _invalid(raw, str(exc)) from exc
        if parsed.unit != "seconds":
            raise _invalid(raw, f'Cannot combine reps with time in: "{raw}"')
        total += parsed.value
    return Volume(total, "seconds")


def _invalid(raw: str, message: str) -> InvalidDuration:
    return InvalidDuration(message, token=raw, accepted_formats=ACCEPTED_FORMATS)
