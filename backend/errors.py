# backend/errors.py
# this file is for the report error taxonomy and centralized error handling


from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException


class ReportError(Exception):
    """Base for failures that are surfaced to the caller as a distinct outcome."""
    status_code = 500
    message = "Report failed"

    def __init__(self, message=None, details=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    def to_dict(self):
        body = {"success": False, "error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ConfigurationError(ReportError):
    """Required credentials (Supabase, EmailJS) are missing."""
    status_code = 500
    message = "Service is not configured"


class InvalidPayloadError(ReportError):
    status_code = 400
    message = "Missing required data"


class StoreQueryError(ReportError):
    status_code = 500
    message = "Database query failed"


class NoRecipientsError(ReportError):
    status_code = 400
    message = "No admin users found"


class DispatchFailedError(ReportError):
    """Every recipient failed; ``summary`` keeps the per-recipient detail."""
    status_code = 500
    message = "Failed to send any emails"

    def __init__(self, summary, message=None):
        super().__init__(message, details=summary.to_dict()["results"])
        self.summary = summary


def register_error_handlers(app):
    @app.errorhandler(ReportError)
    def handle_report_error(e):
        print(f"[ERROR] {type(e).__name__}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def handle_any_error(e):
        # Preserve HTTP status codes for known HTTP errors (e.g., 404, 405)
        if isinstance(e, HTTPException):
            code = e.code or 500
            # For API paths, return JSON; otherwise, let Flask render default page
            if request.path.startswith("/api/"):
                return jsonify({"success": False, "error": e.name}), code
            return e  # non-API: default HTML error page

        # Non-HTTPException → 500
        print(f"[ERROR] unhandled {request.method} {request.path}: {e!r}")
        if request.path.startswith("/api/"):
            body = {"success": False, "error": "Internal Server Error"}
            if current_app.config.get("EXPOSE_ERROR_DETAILS"):
                body["details"] = f"{type(e).__name__}: {e}"
            return jsonify(body), 500
        return "Internal Server Error", 500
