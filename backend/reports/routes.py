# backend/reports/routes.py
# Weekly report endpoints (all prefixed with /api/reports):
#   POST|GET /cron-weekly     scheduler: build today's report and email it
#   POST     /send-weekly     email a pre-built {lessonDate, reportData} payload
#   GET      /lessons         recent lessons for the admin report picker
#   GET      /weekly/<date>   build a report without sending it (admin preview)

from flask import Blueprint, current_app, jsonify, request

from auth.jwt_utils import require_admin, require_cron_or_admin, require_cron_secret
from errors import InvalidPayloadError
from utils.time import parse_report_date, today_in
from .builder import ReportBuilder
from .dispatcher import ReportDispatcher
from .models import NoLessonResult, WeeklyReport

reports_bp = Blueprint("reports", __name__)


def _store():
    return current_app.extensions["report_store"]


def _mailer():
    return current_app.extensions["report_mailer"]


def _workers():
    return current_app.config.get("REPORT_MAX_WORKERS", 8)


def _builder():
    return ReportBuilder(_store(), max_workers=_workers())


def _dispatcher():
    return ReportDispatcher(_store(), _mailer(), max_workers=_workers())


def _requested_date():
    """Optional ?date= / {"date": ...} override, else today in REPORT_TIMEZONE."""
    body = request.get_json(silent=True) or {}
    raw = request.args.get("date") or (body.get("date") if isinstance(body, dict) else None)
    if raw:
        return parse_report_date(raw)
    return today_in(current_app.config.get("REPORT_TIMEZONE", "UTC"))


@reports_bp.route("/cron-weekly", methods=["GET", "POST"])
@require_cron_secret
def cron_weekly():
    target = _requested_date()
    print(f"[WEEKLY] cron run for {target.isoformat()}")

    result = _builder().build(target)
    if isinstance(result, NoLessonResult):
        return jsonify(result.to_dict()), 200

    summary = _dispatcher().send(result)
    return jsonify({
        "success": True,
        "message": "Weekly report sent successfully",
        "date": target.isoformat(),
        "stats": result.statistics.to_dict(),
        **summary.to_dict(),
    }), 200


@reports_bp.post("/send-weekly")
@require_cron_or_admin
def send_weekly():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InvalidPayloadError()
    lesson_date = body.get("lessonDate")
    report_data = body.get("reportData")
    if not lesson_date or not report_data:
        raise InvalidPayloadError()

    report = WeeklyReport.from_dict(report_data, lesson_date=lesson_date)
    summary = _dispatcher().send(report)
    return jsonify({
        "success": True,
        "message": f"Report sent to {summary.success_count} admin(s)",
        "date": report.lesson_date.isoformat(),
        **summary.to_dict(),
    }), 200


@reports_bp.get("/lessons")
@require_admin
def recent_lessons():
    limit = request.args.get("limit", type=int) or current_app.config.get("RECENT_LESSONS_LIMIT", 8)
    lessons = _store().list_recent_lessons(limit=max(1, min(limit, 52)))
    return jsonify({"success": True, "lessons": [l.to_dict() for l in lessons]}), 200


@reports_bp.get("/weekly/<lesson_date>")
@require_admin
def weekly_preview(lesson_date):
    target = parse_report_date(lesson_date)
    result = _builder().build(target)
    if isinstance(result, NoLessonResult):
        body = result.to_dict()
        body["message"] = "No lesson found for this date"
        return jsonify(body), 200
    return jsonify({
        "success": True,
        "lessonDate": target.isoformat(),
        "reportData": result.to_dict(),
    }), 200
