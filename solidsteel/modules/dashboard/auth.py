"""
Admin session guard.

The session is Flask's signed cookie; the only state kept in it is the
`is_logged_in` flag. Every admin operation shares the same binary check.
"""

from functools import wraps
from flask import session, jsonify

SESSION_FLAG = 'is_logged_in'


class AdminAuthError(Exception):
    """Raised when an admin-only operation runs without a logged-in session."""
    status_code = 401


def is_logged_in():
    return bool(session.get(SESSION_FLAG))


def require_auth():
    """Return the session if the admin is logged in, raise AdminAuthError otherwise"""
    if not is_logged_in():
        raise AdminAuthError('Unauthorized')
    return session


def admin_required(f):
    """Decorator: 401 JSON for requests without an admin session"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            require_auth()
        except AdminAuthError:
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function
