"""
Uploads Module
==============

Provides:
- POST /api/upload        -- public image upload into an allow-listed folder
- POST /api/upload/video  -- admin-only hero video replacement

Files go straight to blob storage; nothing is written to local disk.
"""

from flask import Blueprint

uploads_bp = Blueprint(
    'uploads',
    __name__,
    url_prefix='/api/upload'
)

from . import routes

__all__ = ['uploads_bp']
