"""
Projects Admin Module
=====================

Admin JSON API for the project portfolio.
Plugs into the dashboard module's session guard.

Provides:
- Project listing and lookup by id
- Project creation (id, slug and timestamps assigned server-side)
- Field-level updates with slug recomputed from the title
- Deletion
"""

from flask import Blueprint

projects_bp = Blueprint(
    'projects_admin',
    __name__,
    url_prefix='/api/admin/projects'
)

from . import routes

__all__ = ['projects_bp']
