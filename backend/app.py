from flask import Flask
from config import Config
from extensions import supabase_client
from errors import register_error_handlers
from flask_cors import CORS

from reports.routes import reports_bp
from reports.store import ReportStore
from utils.emailer import EmailJSSender


def create_app(config_object=Config, store=None, mailer=None):
    """
    Build the Flask app. ``store`` and ``mailer`` replace the Supabase-backed
    ReportStore and the EmailJS sender (tests pass in-memory fakes).
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    if store is None:
        supabase_client.init_app(app)
        store = ReportStore(supabase_client.client)
    app.extensions["report_store"] = store
    app.extensions["report_mailer"] = mailer or EmailJSSender.from_config(app.config)

    # CORS (allow dev + production)
    origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
    if app.config.get("ALLOW_ORIGIN") and app.config["ALLOW_ORIGIN"] not in origins:
        origins.append(app.config["ALLOW_ORIGIN"])
    CORS(
        app,
        resources={r"/api/*": {
            "origins": origins,
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }}
    )

    @app.get("/")
    def root():
        return {"ok": True, "service": "teachers-portal-reports"}

    @app.get("/health")
    def health():
        return {"ok": True}

    app.register_blueprint(reports_bp, url_prefix="/api/reports")

    register_error_handlers(app)
    return app


# Gunicorn: gunicorn "app:create_app()"
