"""
Shared fakes for the weekly report tests.

FakeStore mirrors ReportStore's read queries over in-memory data and
FakeMailer records EmailJS template params instead of posting them.
"""

import threading
from datetime import date

import jwt
import pytest

from app import create_app
from errors import StoreQueryError
from reports.models import AdminRecipient, ClassInfo, Lesson, SubmissionCheck, TeacherProfile

LESSON_DAY = date(2026, 10, 18)


def make_teacher(tid, name, year_level, class_name=None):
    cls = None
    if year_level is not None or class_name is not None:
        cls = ClassInfo(id=f"c-{tid}", name=class_name or f"Year {year_level}", year_level=year_level)
    return TeacherProfile(id=tid, full_name=name, email=f"{tid}@school.test", assigned_class=cls)


class FakeStore:
    def __init__(self, lessons=None, teachers=None, attendance=None, evaluations=None, admins=None):
        self.lessons = {l.lesson_date: l for l in (lessons or [])}
        self.teachers = list(teachers or [])
        self.attendance = set(attendance or [])
        self.evaluations = set(evaluations or [])
        self.admins = list(admins or [])
        self.failing_lookups = set()
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, name):
        with self._lock:
            self.calls.append(name)

    def get_lesson_by_date(self, lesson_date):
        self._record("lesson")
        return self.lessons.get(lesson_date)

    def list_recent_lessons(self, limit=8):
        self._record("recent")
        ordered = sorted(self.lessons.values(), key=lambda l: l.lesson_date, reverse=True)
        return ordered[:limit]

    def list_active_teachers(self):
        self._record("teachers")
        return list(self.teachers)

    def _check(self, kind, rows, teacher_id, lesson_date):
        self._record(kind)
        if (kind, teacher_id) in self.failing_lookups:
            raise StoreQueryError(f"{kind} query failed: timeout")
        if (teacher_id, lesson_date) in rows:
            return SubmissionCheck(count=1, first_submitted_at="2026-10-18T10:00:00+00:00")
        return SubmissionCheck()

    def attendance_for(self, teacher_id, lesson_date):
        return self._check("attendance", self.attendance, teacher_id, lesson_date)

    def evaluation_for(self, teacher_id, lesson_date):
        return self._check("evaluation", self.evaluations, teacher_id, lesson_date)

    def list_active_admins(self):
        self._record("admins")
        return list(self.admins)


class FakeMailer:
    def __init__(self, configured=True, failing=None):
        self.configured = configured
        self.failing = set(failing or [])
        self.sent = []
        self._lock = threading.Lock()

    def missing_settings(self):
        return [] if self.configured else ["EMAILJS_SERVICE_ID"]

    def send(self, template_params):
        if template_params["to_email"] in self.failing:
            raise RuntimeError("The Public Key is invalid")
        with self._lock:
            self.sent.append(template_params)
        return "OK"


class FakeConfig:
    TESTING = True
    JWT_SECRET = "test-jwt-secret-0123456789abcdef0123"
    CRON_SECRET = "test-cron-secret"
    REPORT_TIMEZONE = "UTC"
    REPORT_MAX_WORKERS = 4
    RECENT_LESSONS_LIMIT = 8
    EXPOSE_ERROR_DETAILS = False
    ALLOW_ORIGIN = "http://localhost:5173"


@pytest.fixture
def lesson():
    return Lesson(id=1, lesson_date=LESSON_DAY, group_type="Both", notes="Chapter 4")


@pytest.fixture
def admins():
    return [
        AdminRecipient(email="head@school.test", full_name="Head Teacher"),
        AdminRecipient(email="office@school.test", full_name=None),
        AdminRecipient(email="dre@school.test", full_name="Director of RE"),
    ]


@pytest.fixture
def scenario_a_store(lesson, admins):
    """3 junior + 2 senior teachers; j3 only took attendance."""
    teachers = [
        make_teacher("j1", "Anna Bell", 1, "Year 1 Blue"),
        make_teacher("j2", "Ben Carr", 3, "Year 3 Green"),
        make_teacher("j3", "Cara Dunn", 5, "Year 5 Red"),
        make_teacher("s1", "Dan Eady", 6, "Year 6 Gold"),
        make_teacher("s2", "Eve Ford", 8, "Year 8 Silver"),
    ]
    attendance = {(t.id, LESSON_DAY) for t in teachers}
    evaluations = {(tid, LESSON_DAY) for tid in ("j1", "j2", "s1", "s2")}
    return FakeStore(
        lessons=[lesson], teachers=teachers,
        attendance=attendance, evaluations=evaluations, admins=admins,
    )


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def make_client():
    def _make(store, mailer, **overrides):
        config = type("Cfg", (FakeConfig,), overrides)
        app = create_app(config, store=store, mailer=mailer)
        return app.test_client()
    return _make


def admin_token(role="admin"):
    return jwt.encode({"sub": "u-1", "role": role}, FakeConfig.JWT_SECRET, algorithm="HS256")


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
