from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AttendanceEventError,
    AuthorizationError,
    ConfigurationError,
    DuplicateCheckInError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def json_error(message: str, status: int, **extra):
    return jsonify({"success": False, "message": message, **extra}), status


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        return Role.STAFF


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Authentication required", 401)
        if session.get("role") != Role.ADMIN.value:
            return json_error("Admin access required", 403)
        return view(*args, **kwargs)

    return wrapper


def api_errors(view):
    """Map domain errors raised by a view onto JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DuplicateCheckInError as e:
            return json_error(str(e), 409, error=type(e).__name__, context=e.context())
        except AttendanceEventError as e:
            return json_error(str(e), 400, error=type(e).__name__, context=e.context())
        except NotFoundError as e:
            return json_error(str(e), 404)
        except (ValidationError, ConfigurationError) as e:
            return json_error(str(e), 400, error=type(e).__name__)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return json_error("Internal server error", 500)

    return wrapper
