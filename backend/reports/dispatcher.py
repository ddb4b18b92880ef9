# backend/reports/dispatcher.py
# Sends a built WeeklyReport to every active admin, one EmailJS message each.
# A failed recipient is recorded in the summary and never stops the others.

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from errors import ConfigurationError, DispatchFailedError, NoRecipientsError
from .formatting import build_report_content, build_template_params
from .models import DeliveryResult, DispatchSummary


class ReportDispatcher:
    def __init__(self, store, mailer, max_workers=8):
        self.store = store
        self.mailer = mailer
        self.max_workers = max(1, int(max_workers or 1))

    def send(self, report) -> DispatchSummary:
        """
        Deliver the report. Raises ConfigurationError (mailer credentials
        missing), NoRecipientsError (no active admins) or DispatchFailedError
        (every send failed); partial failures are returned in the summary.
        """
        if not self.mailer.configured:
            missing = getattr(self.mailer, "missing_settings", lambda: [])()
            print(f"[ERROR] EmailJS not configured, missing: {', '.join(missing) or 'credentials'}")
            raise ConfigurationError(
                "EmailJS not configured. Please set up environment variables.",
                details="Missing EmailJS credentials in environment variables",
            )

        admins = self.store.list_active_admins()
        if not admins:
            raise NoRecipientsError()
        print(f"[WEEKLY] sending {report.lesson_date.isoformat()} report to {len(admins)} admin(s)")

        content = build_report_content(report)
        workers = min(self.max_workers, len(admins))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._deliver, admin, build_template_params(content, admin))
                for admin in admins
            ]
            summary = DispatchSummary(results=[f.result() for f in futures])

        print(f"[WEEKLY] email results: {summary.success_count} success, {summary.fail_count} failed")
        if not summary.ok:
            raise DispatchFailedError(summary)
        return summary

    def _deliver(self, admin, params) -> DeliveryResult:
        try:
            self.mailer.send(params)
        except Exception as ex:
            print(f"[WARN] failed to send to {admin.email}: {ex}")
            return DeliveryResult(email=admin.email, success=False, error=str(ex))
        return DeliveryResult(email=admin.email, success=True)
