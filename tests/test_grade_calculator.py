from types import SimpleNamespace

import pytest

from src.lms_grades.models.student_grade import SubmissionState
from src.lms_grades.utils.grade_calculator import (
    attendance_rate,
    category_average,
    compute_grade,
    effective_score,
    session_credit,
)


def _course(weights=(20, 50, 30), counts=(2, 1, 1)):
    return SimpleNamespace(
        attendance_weight=weights[0],
        assignment_weight=weights[1],
        exam_weight=weights[2],
        weeks_count=counts[0],
        assignment_count=counts[1],
        exam_count=counts[2],
    )


def _session(attended, total):
    return SimpleNamespace(duration_seconds=attended, total_duration_seconds=total)


def _graded(score):
    return SimpleNamespace(score=score, state=SubmissionState.GRADED)


def _pending(score=0.0, state=SubmissionState.NOT_SUBMITTED):
    return SimpleNamespace(score=score, state=state)


def test_weighted_total_for_partially_completed_course():
    result = compute_grade(
        _course(),
        [_session(3600, 3600), _session(0, 3600)],
        [_graded(80)],
        [_pending()],
    )

    assert result.attendance_rate == pytest.approx(50.0)
    assert result.assignment_avg == pytest.approx(80.0)
    assert result.exam_avg == pytest.approx(0.0)
    assert result.weighted_total == pytest.approx(50.0)


def test_weighted_total_is_not_renormalized():
    result = compute_grade(_course(weights=(10, 10, 10)), [_session(10, 10)], [_graded(100)], [_graded(100)])
    assert result.weighted_total == pytest.approx(30.0)


def test_empty_course_yields_zeroes():
    result = compute_grade(_course(counts=(0, 0, 0)), [], [], [])

    assert result.attendance_rate == 0
    assert result.assignment_avg == 0
    assert result.exam_avg == 0
    assert result.weighted_total == 0
    assert result.progress_percentage == 0
    assert result.completion_rates.attendance == 0


def test_attendance_rate_ignores_zero_length_sessions_in_denominator():
    assert attendance_rate([_session(0, 0)]) == 0.0
    assert attendance_rate([_session(30, 60), _session(0, 0)]) == pytest.approx(50.0)


def test_attendance_rate_is_clamped():
    assert attendance_rate([_session(120, 60)]) == 100.0


def test_ungraded_rows_count_as_zero():
    submitted = _pending(score=90, state=SubmissionState.SUBMITTED)

    assert effective_score(submitted) == 0.0
    assert category_average([_graded(100), submitted]) == pytest.approx(50.0)


def test_session_credit_full_above_threshold():
    assert session_credit(_session(80, 100)) == 100.0
    assert session_credit(_session(79, 100)) == pytest.approx(79.0)
    assert session_credit(_session(10, 0)) == 0.0


def test_progress_is_earned_over_possible_points():
    # possible = 2*100 + 1*100 + 1*100 = 400
    # earned = 100 (one full session) + 80 + 0 = 180
    result = compute_grade(
        _course(),
        [_session(3600, 3600), _session(0, 3600)],
        [_graded(80)],
        [_pending()],
    )

    assert result.possible_points == 400
    assert result.earned_points == pytest.approx(180)
    assert result.progress_percentage == pytest.approx(45.0)
    assert result.completion_rates.attendance == pytest.approx(50.0)
    assert result.completion_rates.assignment == pytest.approx(80.0)
    assert result.completion_rates.exam == 0


def test_attendance_credit_capped_by_weeks():
    result = compute_grade(
        _course(counts=(1, 0, 0)),
        [_session(100, 100), _session(100, 100), _session(100, 100)],
        [],
        [],
    )

    assert result.earned_points == 100
    assert result.progress_percentage == 100
