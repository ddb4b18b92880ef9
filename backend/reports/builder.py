# backend/reports/builder.py
# Builds the weekly completion report for one lesson date:
# lesson lookup -> teacher roster by cohort -> per-teacher submission
# checks (fan-out) -> statistics -> WeeklyReport.

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

from .models import (
    COHORT_JUNIOR,
    COHORT_SENIOR,
    GROUP_BOTH,
    NoLessonResult,
    SubmissionCheck,
    TeacherProfile,
    TeacherProgress,
    WeeklyReport,
    compute_statistics,
)


def split_cohorts(teachers) -> Tuple[List[TeacherProfile], List[TeacherProfile]]:
    """Return (junior, senior). Teachers without a class or year level are left out."""
    junior, senior = [], []
    for t in teachers:
        if t.cohort == COHORT_JUNIOR:
            junior.append(t)
        elif t.cohort == COHORT_SENIOR:
            senior.append(t)
        else:
            print(f"[WARN] teacher {t.id} has no classified class; skipped")
    return junior, senior


def select_relevant_teachers(group_type, junior, senior) -> List[TeacherProfile]:
    if group_type == GROUP_BOTH:
        picked, seen = [], set()
        for t in list(junior) + list(senior):
            if t.id in seen:
                continue
            seen.add(t.id)
            picked.append(t)
        return picked
    if group_type == COHORT_JUNIOR:
        return list(junior)
    if group_type == COHORT_SENIOR:
        return list(senior)
    return []


class ReportBuilder:
    def __init__(self, store, max_workers=8):
        self.store = store
        self.max_workers = max(1, int(max_workers or 1))

    def build(self, target_date):
        """
        Return a WeeklyReport for target_date, or NoLessonResult when no lesson
        was logged that day. Lesson and roster query failures propagate;
        per-teacher lookup failures count as "not submitted".
        """
        lesson = self.store.get_lesson_by_date(target_date)
        if lesson is None:
            print(f"[WEEKLY] no lesson found for {target_date.isoformat()}")
            return NoLessonResult(lesson_date=target_date)

        junior, senior = split_cohorts(self.store.list_active_teachers())
        relevant = select_relevant_teachers(lesson.group_type, junior, senior)
        if not relevant:
            print(f"[WEEKLY] no teachers for group {lesson.group_type!r} on {target_date.isoformat()}")

        progress = self._collect_progress(relevant, target_date)
        report = WeeklyReport(
            lesson=lesson,
            statistics=compute_statistics(progress),
            teacher_progress=progress,
            junior_progress=[p for p in progress if p.cohort == COHORT_JUNIOR],
            senior_progress=[p for p in progress if p.cohort == COHORT_SENIOR],
        )
        s = report.statistics
        print(
            f"[WEEKLY] built {target_date.isoformat()} group={lesson.group_type} "
            f"total={s.total_teachers} complete={s.completed_both} rate={s.completion_rate}%"
        )
        return report

    def _check(self, kind, teacher, target_date) -> SubmissionCheck:
        lookup = self.store.attendance_for if kind == "attendance" else self.store.evaluation_for
        try:
            return lookup(teacher.id, target_date)
        except Exception as ex:
            print(f"[WARN] {kind} lookup failed for teacher {teacher.id}: {ex}")
            return SubmissionCheck()

    def _collect_progress(self, teachers, target_date) -> List[TeacherProgress]:
        if not teachers:
            return []
        workers = min(self.max_workers, len(teachers) * 2)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            pending = [
                (
                    t,
                    pool.submit(self._check, "attendance", t, target_date),
                    pool.submit(self._check, "evaluation", t, target_date),
                )
                for t in teachers
            ]
            return [
                TeacherProgress.from_checks(t, att.result(), ev.result())
                for t, att, ev in pending
            ]
