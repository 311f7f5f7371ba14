"""
Admin Auth Routes
=================

- POST /login   -- {username, password} checked against ADMIN_USERNAME / ADMIN_PASSWORD
- POST /logout  -- destroys the session
- GET  /session -- {isLoggedIn}
"""

import hmac
import logging

from flask import request, session, jsonify

from solidsteel.core.config import get_config_value
from solidsteel.core.logging_service import LoggingService
from . import dashboard_bp
from .auth import SESSION_FLAG, is_logged_in

logger = logging.getLogger(__name__)


def _matches(supplied, expected):
    """Exact string equality, compared in constant time"""
    if not isinstance(supplied, str):
        return False
    return hmac.compare_digest(supplied.encode('utf-8'), expected.encode('utf-8'))


@dashboard_bp.route('/login', methods=['POST'])
def login():
    """Admin login route"""
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')

    admin_username = get_config_value('ADMIN_USERNAME')
    admin_password = get_config_value('ADMIN_PASSWORD')

    if not admin_username or not admin_password:
        logger.error("Admin login attempted but ADMIN_USERNAME/ADMIN_PASSWORD are not set")
        return jsonify({'error': 'Admin credentials not configured'}), 500

    # Both comparisons always run
    username_ok = _matches(username, admin_username)
    password_ok = _matches(password, admin_password)

    if username_ok and password_ok:
        session[SESSION_FLAG] = True
        logger.info("Admin logged in")
        return jsonify({'success': True})

    LoggingService.log_security_event('Failed admin login', {
        'username': username if isinstance(username, str) else None,
    })
    return jsonify({'error': 'Invalid username or password'}), 401


@dashboard_bp.route('/logout', methods=['POST'])
def logout():
    """Admin logout route"""
    session.clear()
    return jsonify({'success': True})


@dashboard_bp.route('/session', methods=['GET'])
def session_status():
    """Report whether the current browser holds an admin session"""
    return jsonify({'isLoggedIn': is_logged_in()})
