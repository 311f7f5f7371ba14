"""
Dashboard Module
================

Admin authentication for the Solid Steel backend.

Provides:
- Admin login against environment-configured credentials
- Logout
- Session status check
- require_auth() / admin_required guard used by every admin module

This is the foundation module that other admin features plug into.
"""

from flask import Blueprint

# Blueprint name is 'admin' so other modules can refer to admin.* endpoints
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/api/admin/auth'
)

from . import routes
from .auth import AdminAuthError, admin_required, require_auth

__all__ = ['dashboard_bp', 'AdminAuthError', 'admin_required', 'require_auth']
