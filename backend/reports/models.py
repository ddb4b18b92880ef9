# backend/reports/models.py
# Typed records for the weekly completion report.
# Rows from Supabase arrive as plain dicts; every record here has a
# from_row/from_dict constructor that tolerates missing keys, and a to_dict
# that produces the camelCase payload the portal and the send endpoint use.

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from errors import InvalidPayloadError
from utils.time import parse_report_date

COHORT_JUNIOR = "Junior"
COHORT_SENIOR = "Senior"
GROUP_BOTH = "Both"

# Reception - Year 5 are Junior, Year 6+ are Senior
JUNIOR_MAX_YEAR_LEVEL = 5

STATUS_COMPLETE = "Complete"
STATUS_ATTENDANCE_ONLY = "Attendance only"
STATUS_EVALUATION_ONLY = "Evaluation only"
STATUS_NOT_SUBMITTED = "Not submitted"


def classify_cohort(year_level: Optional[int]) -> Optional[str]:
    """Junior for year level <= 5, Senior above; None when the level is unknown."""
    if year_level is None:
        return None
    return COHORT_JUNIOR if year_level <= JUNIOR_MAX_YEAR_LEVEL else COHORT_SENIOR


def _int_or_none(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _text(row, key) -> str:
    """String field of a row or posted payload; None counts as empty."""
    value = row.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidPayloadError(f"{key} must be a string")
    return value


def rate(count: int, total: int) -> int:
    """Percentage rounded half-up; 0 when there is nothing to divide by."""
    if total <= 0:
        return 0
    return int(math.floor(count * 100 / total + 0.5))


@dataclass
class Lesson:
    lesson_date: date
    group_type: str
    id: Any = None
    notes: str = ""
    created_by: Optional[str] = None
    created_by_email: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Lesson":
        return cls(
            id=row.get("id"),
            lesson_date=parse_report_date(row.get("lesson_date")),
            group_type=_text(row, "group_type").strip(),
            notes=_text(row, "notes"),
            created_by=row.get("created_by"),
            created_by_email=row.get("created_by_email"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lesson_date": self.lesson_date.isoformat(),
            "group_type": self.group_type,
            "notes": self.notes,
            "created_by": self.created_by,
            "created_by_email": self.created_by_email,
        }


@dataclass
class ClassInfo:
    id: Any = None
    name: str = ""
    year_level: Optional[int] = None

    @classmethod
    def from_row(cls, row) -> Optional["ClassInfo"]:
        # The embedded relation can come back as a dict, a one-item list, or null
        if isinstance(row, list):
            row = row[0] if row else None
        if not isinstance(row, dict):
            return None
        return cls(
            id=row.get("id"),
            name=_text(row, "name"),
            year_level=_int_or_none(row.get("year_level")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "year_level": self.year_level}


@dataclass
class TeacherProfile:
    id: Any
    full_name: str = ""
    email: Optional[str] = None
    assigned_class: Optional[ClassInfo] = None

    @property
    def cohort(self) -> Optional[str]:
        if self.assigned_class is None:
            return None
        return classify_cohort(self.assigned_class.year_level)

    @property
    def class_name(self) -> str:
        return self.assigned_class.name if self.assigned_class else ""

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TeacherProfile":
        return cls(
            id=row.get("id"),
            full_name=_text(row, "full_name"),
            email=row.get("email"),
            assigned_class=ClassInfo.from_row(row.get("classes")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "classes": self.assigned_class.to_dict() if self.assigned_class else None,
        }


@dataclass
class SubmissionCheck:
    """Rows found for one (teacher, date) pair in attendance or evaluations."""
    count: int = 0
    first_submitted_at: Optional[str] = None

    @property
    def submitted(self) -> bool:
        return self.count > 0


@dataclass
class TeacherProgress:
    teacher: TeacherProfile
    has_attendance: bool = False
    has_evaluation: bool = False
    attendance_count: int = 0
    evaluation_count: int = 0
    attendance_submitted_at: Optional[str] = None
    evaluation_submitted_at: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.has_attendance and self.has_evaluation

    @property
    def cohort(self) -> Optional[str]:
        return self.teacher.cohort

    @classmethod
    def from_checks(cls, teacher, attendance: SubmissionCheck, evaluation: SubmissionCheck):
        return cls(
            teacher=teacher,
            has_attendance=attendance.submitted,
            has_evaluation=evaluation.submitted,
            attendance_count=attendance.count,
            evaluation_count=evaluation.count,
            attendance_submitted_at=attendance.first_submitted_at,
            evaluation_submitted_at=evaluation.first_submitted_at,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeacherProgress":
        if not isinstance(data, dict) or not isinstance(data.get("teacher"), dict):
            raise InvalidPayloadError("Invalid teacher progress entry")
        return cls(
            teacher=TeacherProfile.from_row(data["teacher"]),
            has_attendance=bool(data.get("hasAttendance")),
            has_evaluation=bool(data.get("hasEvaluation")),
            attendance_count=_int_or_none(data.get("attendanceCount")) or 0,
            evaluation_count=_int_or_none(data.get("evaluationCount")) or 0,
            attendance_submitted_at=data.get("attendanceSubmittedAt"),
            evaluation_submitted_at=data.get("evaluationSubmittedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "teacher": self.teacher.to_dict(),
            "hasAttendance": self.has_attendance,
            "hasEvaluation": self.has_evaluation,
            "isComplete": self.is_complete,
            "attendanceCount": self.attendance_count,
            "evaluationCount": self.evaluation_count,
            "attendanceSubmittedAt": self.attendance_submitted_at,
            "evaluationSubmittedAt": self.evaluation_submitted_at,
            "group": self.cohort,
        }


@dataclass
class ReportStatistics:
    total_teachers: int = 0
    completed_both: int = 0
    completed_attendance: int = 0
    completed_evaluation: int = 0
    completed_neither: int = 0

    @property
    def completion_rate(self) -> int:
        return rate(self.completed_both, self.total_teachers)

    @property
    def attendance_rate(self) -> int:
        return rate(self.completed_attendance, self.total_teachers)

    @property
    def evaluation_rate(self) -> int:
        return rate(self.completed_evaluation, self.total_teachers)

    @property
    def attendance_only(self) -> int:
        return self.completed_attendance - self.completed_both

    @property
    def evaluation_only(self) -> int:
        return self.completed_evaluation - self.completed_both

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportStatistics":
        data = data if isinstance(data, dict) else {}
        return cls(
            total_teachers=_int_or_none(data.get("totalTeachers")) or 0,
            completed_both=_int_or_none(data.get("completedBoth")) or 0,
            completed_attendance=_int_or_none(data.get("completedAttendance")) or 0,
            completed_evaluation=_int_or_none(data.get("completedEvaluation")) or 0,
            completed_neither=_int_or_none(data.get("completedNeither")) or 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalTeachers": self.total_teachers,
            "completedBoth": self.completed_both,
            "completedAttendance": self.completed_attendance,
            "completedEvaluation": self.completed_evaluation,
            "completedNeither": self.completed_neither,
            "completionRate": self.completion_rate,
            "attendanceRate": self.attendance_rate,
            "evaluationRate": self.evaluation_rate,
        }


def compute_statistics(progress: List[TeacherProgress]) -> ReportStatistics:
    return ReportStatistics(
        total_teachers=len(progress),
        completed_both=sum(1 for p in progress if p.is_complete),
        completed_attendance=sum(1 for p in progress if p.has_attendance),
        completed_evaluation=sum(1 for p in progress if p.has_evaluation),
        completed_neither=sum(1 for p in progress if not p.has_attendance and not p.has_evaluation),
    )


@dataclass
class WeeklyReport:
    lesson: Lesson
    statistics: ReportStatistics
    teacher_progress: List[TeacherProgress] = field(default_factory=list)
    junior_progress: List[TeacherProgress] = field(default_factory=list)
    senior_progress: List[TeacherProgress] = field(default_factory=list)

    @property
    def lesson_date(self) -> date:
        return self.lesson.lesson_date

    @classmethod
    def from_dict(cls, data: Dict[str, Any], lesson_date=None) -> "WeeklyReport":
        """
        Rebuild a report posted as reportData. Statistics are recomputed from the
        flat progress list when it is present so the email never disagrees with it.
        """
        if not isinstance(data, dict) or not isinstance(data.get("lesson"), dict):
            raise InvalidPayloadError("reportData.lesson is required")
        lesson_row = dict(data["lesson"])
        if lesson_date is not None:
            lesson_row["lesson_date"] = parse_report_date(lesson_date)
        lesson = Lesson.from_row(lesson_row)

        def _list(key):
            value = data.get(key) or []
            if not isinstance(value, list):
                raise InvalidPayloadError(f"reportData.{key} must be a list")
            return [TeacherProgress.from_dict(item) for item in value]

        juniors = _list("juniorTeachers")
        seniors = _list("seniorTeachers")
        flat = _list("teacherProgress") if "teacherProgress" in data else juniors + seniors
        # Partitions left out of the payload are derived from the flat list
        if "juniorTeachers" not in data:
            juniors = [p for p in flat if p.cohort == COHORT_JUNIOR]
        if "seniorTeachers" not in data:
            seniors = [p for p in flat if p.cohort == COHORT_SENIOR]
        stats = compute_statistics(flat) if flat else ReportStatistics.from_dict(data.get("stats"))
        return cls(
            lesson=lesson,
            statistics=stats,
            teacher_progress=flat,
            junior_progress=juniors,
            senior_progress=seniors,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lesson": self.lesson.to_dict(),
            "teacherProgress": [p.to_dict() for p in self.teacher_progress],
            "stats": self.statistics.to_dict(),
            "juniorTeachers": [p.to_dict() for p in self.junior_progress],
            "seniorTeachers": [p.to_dict() for p in self.senior_progress],
        }


@dataclass
class NoLessonResult:
    lesson_date: date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": "No lesson found for today",
            "date": self.lesson_date.isoformat(),
        }


@dataclass
class AdminRecipient:
    email: str
    full_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or "Admin"

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AdminRecipient":
        return cls(email=row.get("email") or "", full_name=row.get("full_name"))


@dataclass
class DeliveryResult:
    email: str
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {"success": self.success, "email": self.email}
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class DispatchSummary:
    results: List[DeliveryResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def fail_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def ok(self) -> bool:
        return self.success_count >= 1

    @property
    def failures(self) -> List[DeliveryResult]:
        return [r for r in self.results if not r.success]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "successCount": self.success_count,
            "failCount": self.fail_count,
            "results": [r.to_dict() for r in self.results],
        }
