"""Shared helpers for the JSON controllers: role guard, request parsing, error mapping."""
from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    BusinessRuleError,
    DataAccessError,
    NotFoundError,
    RecapUnavailableError,
    ValidationError,
)
from ..core.period import PeriodScope
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

PERIOD_YEAR_KEY = "academic_year"
PERIOD_SEMESTER_KEY = "semester"


def roles_required(*roles: Role):
    """Allow the view only when ``session["role"]`` (set by the auth layer) is one of ``roles``."""
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            role = session.get("role")
            if not role:
                return jsonify({"success": False, "message": "Please sign in"}), 401
            if role not in allowed:
                raise AuthorizationError("You do not have permission")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_role() -> Role:
    return Role(session["role"])


def current_profile_id() -> Optional[int]:
    value = session.get("profile_id")
    return int(value) if value is not None else None


def session_period(default: PeriodScope) -> PeriodScope:
    """Academic period chosen for this session, else the configured default."""
    year = session.get(PERIOD_YEAR_KEY)
    semester = session.get(PERIOD_SEMESTER_KEY)
    if not year or semester is None:
        return default
    return PeriodScope.parse(year, semester)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def arg_date(name: str) -> Optional[date]:
    value = request.args.get(name)
    return parse_iso_date(value) if value else None


def arg_int(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be a whole number")


def ok(data=None, status: int = 200, **extra):
    payload = {"success": True, **extra}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int):
        return jsonify({"success": False, "message": message}), status

    @app.errorhandler(ValidationError)
    @app.errorhandler(BusinessRuleError)
    def _bad_request(e):
        return _error(str(e), 400)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e):
        return _error(str(e), 403)

    @app.errorhandler(NotFoundError)
    def _not_found(e):
        return _error(str(e), 404)

    @app.errorhandler(RecapUnavailableError)
    def _unavailable(e):
        return jsonify({"success": False, "message": str(e), "failed": sorted(e.failures)}), 503

    @app.errorhandler(DataAccessError)
    def _bad_gateway(e):
        logger.warning("Backend call failed: %s", e.message)
        return _error("Backend request failed", 502)

    @app.errorhandler(Exception)
    def _unexpected(e):
        # Let Flask render its own HTTP errors (404 for unknown routes, 405...)
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = str(e) if current_app.config.get("DEBUG") else "Internal server error"
        return _error(message, 500)
