# backend/reports/formatting.py
# Pure formatting for the weekly report email (no I/O).

from html import escape

from utils.time import format_long_date, format_short_date
from .models import (
    STATUS_ATTENDANCE_ONLY,
    STATUS_COMPLETE,
    STATUS_EVALUATION_ONLY,
    STATUS_NOT_SUBMITTED,
)

EMPTY_GROUP_TEXT = "No teachers in this group"

STATUS_ICONS = {
    STATUS_COMPLETE: "✅",
    STATUS_ATTENDANCE_ONLY: "⚠️",
    STATUS_EVALUATION_ONLY: "⚠️",
    STATUS_NOT_SUBMITTED: "❌",
}

GREEN = "#10b981"
AMBER = "#f59e0b"
RED = "#ef4444"
BLUE = "#3b82f6"
VIOLET = "#8b5cf6"
MUTED = "#64748b"
HEADING = "#1e293b"

# (title, heading color, background for incomplete cards)
COHORT_SECTIONS = {
    "junior": ("👥 Junior Teachers (Reception - Year 5)", "#92400e", "#fff3cd"),
    "senior": ("🏆 Senior Teachers (Year 6+)", "#6d28d9", "#f5f3ff"),
}
COMPLETE_BG = "#d4edda"


def status_label(progress) -> str:
    if progress.is_complete:
        return STATUS_COMPLETE
    if progress.has_attendance:
        return STATUS_ATTENDANCE_ONLY
    if progress.has_evaluation:
        return STATUS_EVALUATION_ONLY
    return STATUS_NOT_SUBMITTED


def status_color(progress) -> str:
    if progress.is_complete:
        return GREEN
    if progress.has_attendance or progress.has_evaluation:
        return AMBER
    return RED


def format_teachers_summary(progress_list) -> str:
    if not progress_list:
        return EMPTY_GROUP_TEXT
    return "\n".join(
        f"{p.teacher.full_name} ({p.teacher.class_name}): {status_label(p)}"
        for p in progress_list
    )


def _stat_row(label, value, color=None):
    weight = "font-weight: bold;" + (f" color: {color};" if color else "")
    return (
        f'<tr><td style="padding: 8px; color: {MUTED};">{label}:</td>'
        f'<td style="padding: 8px; {weight}">{value}</td></tr>'
    )


def _teacher_card(p, incomplete_bg):
    label = status_label(p)
    bg = COMPLETE_BG if p.is_complete else incomplete_bg
    return (
        f'<div style="padding: 12px; margin: 8px 0; background: {bg}; border-radius: 6px;">'
        f"<strong>{escape(p.teacher.full_name)}</strong> ({escape(p.teacher.class_name)})<br/>"
        f'<span style="color: {status_color(p)}; font-size: 12px;">'
        f"{STATUS_ICONS[label]} {label}</span></div>"
    )


def _cohort_section(key, progress_list):
    if not progress_list:
        return ""
    title, color, incomplete_bg = COHORT_SECTIONS[key]
    cards = "".join(_teacher_card(p, incomplete_bg) for p in progress_list)
    return (
        '<div style="margin: 20px 0;">'
        f'<h3 style="color: {color};">{title}</h3>{cards}</div>'
    )


def render_report_html(report) -> str:
    """
    Render the report body: statistics table, then the Junior and Senior
    sections (each omitted when that cohort is empty).
    """
    stats = report.statistics
    group = escape(report.lesson.group_type or "")
    rows = "".join([
        _stat_row("Completion Rate", f"{stats.completion_rate}%", GREEN),
        _stat_row("Total Teachers", stats.total_teachers),
        _stat_row("Complete (Both)", stats.completed_both, GREEN),
        _stat_row("Attendance Only", stats.attendance_only, BLUE),
        _stat_row("Evaluation Only", stats.evaluation_only, VIOLET),
        _stat_row("Not Submitted", stats.completed_neither, RED),
    ])
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h2 style="color: {HEADING};">Weekly Teacher Progress Report</h2>'
        f'<p style="color: {MUTED}; font-size: 14px;">'
        f"{format_long_date(report.lesson_date)} - {group} Group</p>"
        '<div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">'
        f'<h3 style="color: {HEADING}; margin-top: 0;">📊 Overall Statistics</h3>'
        f'<table style="width: 100%; border-collapse: collapse;">{rows}</table>'
        "</div>"
        f'{_cohort_section("junior", report.junior_progress)}'
        f'{_cohort_section("senior", report.senior_progress)}'
        '<div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #e5e7eb; '
        f'color: {MUTED}; font-size: 12px;">'
        "<p>This is an automated report from the Teachers Portal System.</p>"
        "</div></div>"
    )


def build_report_content(report) -> dict:
    """Fields shared by every recipient's message; rendered once per dispatch."""
    stats = report.statistics
    return {
        "subject": f"Weekly Report - {format_short_date(report.lesson_date)}",
        "lesson_date": format_long_date(report.lesson_date),
        "group_type": report.lesson.group_type,
        "completion_rate": stats.completion_rate,
        "total_teachers": stats.total_teachers,
        "completed_both": stats.completed_both,
        "completed_attendance": stats.completed_attendance,
        "completed_evaluation": stats.completed_evaluation,
        "completed_neither": stats.completed_neither,
        "junior_summary": format_teachers_summary(report.junior_progress),
        "senior_summary": format_teachers_summary(report.senior_progress),
        "report_html": render_report_html(report),
    }


def build_template_params(content: dict, recipient) -> dict:
    params = dict(content)
    params["to_email"] = recipient.email
    params["to_name"] = recipient.display_name
    return params
