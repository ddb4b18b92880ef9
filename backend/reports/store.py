# backend/reports/store.py
# Read-only Supabase queries used by the weekly report:
# - get_lesson_by_date / list_recent_lessons: catechism_lesson_logs
# - list_active_teachers: active teacher profiles with their default class
# - attendance_for / evaluation_for: submission rows for (teacher, date)
# - list_active_admins: report recipients

from __future__ import annotations
from typing import List, Optional

from utils.sb import sb_rows
from .models import AdminRecipient, Lesson, SubmissionCheck, TeacherProfile

TEACHER_SELECT = "id,full_name,email,classes:default_class_id(id,name,year_level)"


class ReportStore:
    def __init__(self, client):
        self.client = client

    def get_lesson_by_date(self, lesson_date) -> Optional[Lesson]:
        rows = sb_rows(
            "lesson",
            self.client.table("catechism_lesson_logs")
              .select("*")
              .eq("lesson_date", lesson_date.isoformat())
              .limit(1)
        )
        return Lesson.from_row(rows[0]) if rows else None

    def list_recent_lessons(self, limit=8) -> List[Lesson]:
        rows = sb_rows(
            "recent lessons",
            self.client.table("catechism_lesson_logs")
              .select("*")
              .order("lesson_date", desc=True)
              .limit(limit)
        )
        return [Lesson.from_row(r) for r in rows]

    def list_active_teachers(self) -> List[TeacherProfile]:
        rows = sb_rows(
            "teachers",
            self.client.table("profiles")
              .select(TEACHER_SELECT)
              .eq("role", "teacher")
              .eq("status", "active")
              .not_.is_("default_class_id", "null")
        )
        return [TeacherProfile.from_row(r) for r in rows if isinstance(r, dict)]

    def _submissions(self, table, date_column, teacher_id, lesson_date) -> SubmissionCheck:
        rows = sb_rows(
            table,
            self.client.table(table)
              .select("id,created_at")
              .eq("teacher_id", teacher_id)
              .eq(date_column, lesson_date.isoformat())
              .order("created_at")
        )
        return SubmissionCheck(
            count=len(rows),
            first_submitted_at=rows[0].get("created_at") if rows else None,
        )

    def attendance_for(self, teacher_id, lesson_date) -> SubmissionCheck:
        return self._submissions("attendance_records", "attendance_date", teacher_id, lesson_date)

    def evaluation_for(self, teacher_id, lesson_date) -> SubmissionCheck:
        return self._submissions("lesson_evaluations", "evaluation_date", teacher_id, lesson_date)

    def list_active_admins(self) -> List[AdminRecipient]:
        rows = sb_rows(
            "admins",
            self.client.table("profiles")
              .select("email,full_name")
              .eq("role", "admin")
              .eq("status", "active")
        )
        return [AdminRecipient.from_row(r) for r in rows if isinstance(r, dict) and r.get("email")]
