from datetime import date

import pytest

from errors import StoreQueryError
from reports.builder import ReportBuilder, select_relevant_teachers, split_cohorts
from reports.models import Lesson, NoLessonResult, WeeklyReport
from conftest import LESSON_DAY, FakeStore, make_teacher


def test_scenario_a_both_groups(scenario_a_store):
    report = ReportBuilder(scenario_a_store, max_workers=4).build(LESSON_DAY)

    assert isinstance(report, WeeklyReport)
    s = report.statistics
    assert (s.total_teachers, s.completed_both, s.completed_attendance,
            s.completed_evaluation, s.completed_neither) == (5, 4, 5, 4, 0)
    assert s.completion_rate == 80
    assert s.attendance_rate == 100
    assert s.evaluation_rate == 80
    assert [p.teacher.id for p in report.junior_progress] == ["j1", "j2", "j3"]
    assert [p.teacher.id for p in report.senior_progress] == ["s1", "s2"]
    assert len(report.teacher_progress) == 5
    j3 = report.junior_progress[2]
    assert j3.has_attendance and not j3.has_evaluation and not j3.is_complete
    assert j3.attendance_count == 1
    assert j3.attendance_submitted_at == "2026-10-18T10:00:00+00:00"


def test_scenario_b_no_lesson_short_circuits(scenario_a_store):
    result = ReportBuilder(scenario_a_store).build(date(2026, 10, 25))

    assert isinstance(result, NoLessonResult)
    assert result.to_dict()["message"] == "No lesson found for today"
    assert scenario_a_store.calls == ["lesson"]


def test_scenario_c_junior_lesson_without_junior_teachers():
    lesson = Lesson(lesson_date=LESSON_DAY, group_type="Junior")
    store = FakeStore(lessons=[lesson], teachers=[make_teacher("s1", "Dan Eady", 9)])

    report = ReportBuilder(store).build(LESSON_DAY)

    assert isinstance(report, WeeklyReport)
    assert report.statistics.total_teachers == 0
    assert report.statistics.completion_rate == 0
    assert report.junior_progress == [] and report.senior_progress == []
    assert "attendance" not in store.calls


@pytest.mark.parametrize("group, expected", [
    ("Both", ["j1", "j2", "s1"]),
    ("Junior", ["j1", "j2"]),
    ("Senior", ["s1"]),
    ("Everyone", []),
    ("", []),
])
def test_relevant_teacher_selection(group, expected):
    junior = [make_teacher("j1", "A", 1), make_teacher("j2", "B", 4)]
    senior = [make_teacher("s1", "C", 6)]
    assert [t.id for t in select_relevant_teachers(group, junior, senior)] == expected


def test_both_never_double_counts_a_teacher():
    dup = make_teacher("x", "Dup", 3)
    picked = select_relevant_teachers("Both", [dup], [dup, make_teacher("y", "Y", 6)])
    assert [t.id for t in picked] == ["x", "y"]


def test_unclassified_teachers_are_left_out():
    teachers = [make_teacher("a", "A", 2), make_teacher("b", "B", None), make_teacher("c", "C", 11)]
    junior, senior = split_cohorts(teachers)
    assert [t.id for t in junior] == ["a"]
    assert [t.id for t in senior] == ["c"]


def test_lookup_failure_counts_as_not_submitted(scenario_a_store):
    scenario_a_store.failing_lookups.add(("evaluation", "s1"))

    report = ReportBuilder(scenario_a_store).build(LESSON_DAY)

    s1 = next(p for p in report.teacher_progress if p.teacher.id == "s1")
    assert s1.has_attendance and not s1.has_evaluation
    assert report.statistics.completed_both == 3
    assert report.statistics.total_teachers == 5


def test_roster_failure_propagates(lesson):
    class BrokenStore(FakeStore):
        def list_active_teachers(self):
            raise StoreQueryError("teachers query failed: 503")

    with pytest.raises(StoreQueryError):
        ReportBuilder(BrokenStore(lessons=[lesson])).build(LESSON_DAY)


def test_every_teacher_checked_once_per_category(scenario_a_store):
    ReportBuilder(scenario_a_store, max_workers=2).build(LESSON_DAY)
    assert scenario_a_store.calls.count("attendance") == 5
    assert scenario_a_store.calls.count("evaluation") == 5
