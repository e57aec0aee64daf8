from __future__ import annotations

import sys
from pathlib import Path

import pytest

from workout_timer.cli import main as cli_main
from workout_timer.cli.main import (
    TerminalDisplay,
    build_parser,
    config_from_args,
    describe_step,
    main,
    run_check,
)
from workout_timer.core.config import DEFAULT_CONFIG
from workout_timer.core.display import project
from workout_timer.core.state import SessionState, Status
from workout_timer.workout.compiler import compile_workout
from workout_timer.workout.model import Exercise, Rest, Transition, Volume


def test_check_prints_expanded_steps(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    workout_file = tmp_path / "legs.txt"
    workout_file.write_text("# Legs\n## Main\nLunges | 20s | each side\nRest | 30s", encoding="utf-8")

    assert run_check(workout_file, DEFAULT_CONFIG) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "[WORKOUT] Legs: 5 steps"
    assert out[1] == "  ## Main"
    assert out[2] == "    1. [Get ready] 10s"
    assert out[3] == "    2. Lunges (left side) | 20s"
    assert out[-1] == "    5. Rest | 30s"


def test_check_reports_line_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    workout_file = tmp_path / "bad.txt"
    workout_file.write_text("Lunges | 20s | sideways\nRest | 30s", encoding="utf-8")

    assert run_check(workout_file, DEFAULT_CONFIG) == 1

    out = capsys.readouterr().out
    assert '[ERROR] Line 1: Invalid modifier: "sideways"' in out


def test_check_rejects_workout_without_steps(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    workout_file = tmp_path / "empty.txt"
    workout_file.write_text("# Nothing\n", encoding="utf-8")

    assert run_check(workout_file, DEFAULT_CONFIG) == 1
    assert "No valid workout steps" in capsys.readouterr().out


def test_config_flags() -> None:
    args = build_parser().parse_args(
        [
            "--check",
            "w.txt",
            "--change-exercise-sec",
            "6",
            "--change-sides-sec",
            "6",
            "--split-reps-each-side",
            "--tappable-transitions",
        ]
    )

    config = config_from_args(args)

    assert config.change_exercise_sec == 6
    assert config.change_sides_sec == 6
    assert config.split_reps_each_side
    assert config.transitions_tappable
    assert not config.transition_before_reps


def test_describe_step() -> None:
    assert describe_step(Exercise("Squats", Volume(12, "reps"), side="each", notes="deep")) == (
        "Squats (each side) | 12 reps // deep"
    )
    assert describe_step(Rest(45)) == "Rest | 45s"
    assert describe_step(Transition("changeSides", 7)) == "[Switch sides] 7s"


def test_terminal_display_prints_on_step_change() -> None:
    lines: list[str] = []
    display = TerminalDisplay(echo=lines.append)
    workout = compile_workout("Push-ups | 10")
    state = SessionState(status=Status.IN_PROGRESS, workout_data=workout, workout_start_time=1)

    display(project(state, 1_000))
    display(project(state, 2_000))
    state.status = Status.DONE
    display(project(state, 61_001))

    assert lines == [
        "[STEP] Push-ups | tap when done | Next: Finish",
        "[DONE] Workout Complete! in 01:01",
    ]


def test_zero_second_transition_flag_is_rejected(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        sys, "argv", ["workout-timer", "--check", "w.txt", "--change-exercise-sec", "0"]
    )
    monkeypatch.setattr(cli_main, "_configure_logging", lambda debug: None)

    with pytest.raises(SystemExit) as info:
        main()

    assert info.value.code == 2
    assert "Transition durations must be >= 1 second" in capsys.readouterr().err
