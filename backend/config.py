# backend/config.py
# this file is for environment variables and configuration settings

import os
from dotenv import load_dotenv
load_dotenv()


def _env_flag(name, default="0"):
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


class Config:
    SUPABASE_URL  = os.getenv("SUPABASE_URL")
    SUPABASE_KEY  = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")
    JWT_SECRET    = os.getenv("JWT_SECRET", "dev-secret-change")
    ALLOW_ORIGIN  = os.getenv("ALLOW_ORIGIN", "http://localhost:5173")

    # Scheduler trigger (sent as "Authorization: Bearer <secret>")
    CRON_SECRET   = os.getenv("CRON_SECRET")

    # EmailJS template delivery
    EMAILJS_SERVICE_ID  = os.getenv("EMAILJS_SERVICE_ID")
    EMAILJS_TEMPLATE_ID = os.getenv("EMAILJS_TEMPLATE_ID")
    EMAILJS_PUBLIC_KEY  = os.getenv("EMAILJS_PUBLIC_KEY")
    EMAILJS_PRIVATE_KEY = os.getenv("EMAILJS_PRIVATE_KEY")
    EMAILJS_TIMEOUT_SEC = int(os.getenv("EMAILJS_TIMEOUT_SEC", 15))

    # Weekly report
    REPORT_TIMEZONE      = os.getenv("REPORT_TIMEZONE", "UTC")
    REPORT_MAX_WORKERS   = int(os.getenv("REPORT_MAX_WORKERS", 8))
    RECENT_LESSONS_LIMIT = int(os.getenv("RECENT_LESSONS_LIMIT", 8))

    # Only for non-production diagnostics
    EXPOSE_ERROR_DETAILS = _env_flag("EXPOSE_ERROR_DETAILS")
