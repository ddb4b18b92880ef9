# backend/auth/jwt_utils.py
# Request guards for the report endpoints:
#   - require_admin: portal JWT with role "admin"
#   - require_cron_secret: scheduler bearer secret
#   - require_cron_or_admin: either of the above

import hmac
import jwt
from functools import wraps
from flask import request, jsonify, current_app


# ---------- Decode a JWT ----------
def decode_jwt(token: str) -> dict:
    return jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=["HS256"])


def _bearer_token():
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.split(" ", 1)[1].strip()


def _is_cron_request(token) -> bool:
    secret = current_app.config.get("CRON_SECRET")
    # No secret configured means the scheduler cannot be authenticated at all
    if not secret or not token:
        return False
    return hmac.compare_digest(token.encode(), secret.encode())


def _check_role(token, role):
    """Return an error response tuple, or None after attaching request.user."""
    if not token:
        return jsonify({"success": False, "error": "Missing token"}), 401
    try:
        payload = decode_jwt(token)
    except jwt.PyJWTError:
        return jsonify({"success": False, "error": "Invalid token"}), 401

    if payload.get("role") != role:
        return jsonify({"success": False, "error": f"{role.title()} only"}), 403

    request.user = payload
    request.user_id = payload.get("sub")
    return None


# ---------- Role-based protection ----------
def require_role(role):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            denied = _check_role(_bearer_token(), role)
            if denied:
                return denied
            return fn(*args, **kwargs)
        return wrapper
    return deco


def require_cron_secret(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not _is_cron_request(_bearer_token()):
            print(f"[WARN] unauthorized {request.method} {request.path}")
            return jsonify({"success": False, "error": "Unauthorized"}), 401
        return fn(*args, **kwargs)
    return wrapper


def require_cron_or_admin(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not _is_cron_request(token):
            denied = _check_role(token, "admin")
            if denied:
                return denied
        return fn(*args, **kwargs)
    return wrapper


# Convenience wrappers
require_admin = require_role("admin")
