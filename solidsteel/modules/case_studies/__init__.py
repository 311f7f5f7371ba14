"""
Case Studies Admin Module
=========================

Admin JSON API for case studies, forked from the projects module.
"""

from flask import Blueprint

case_studies_bp = Blueprint(
    'case_studies_admin',
    __name__,
    url_prefix='/api/admin/case-studies'
)

from . import routes

__all__ = ['case_studies_bp']
