"""
Blob Module
===========

Project imagery served from blob storage.

Provides:
- GET  /api/blob/projects/<slug>/images         -- resolve a project's images
- POST /api/blob/projects/<slug>/ensure-folder  -- create the folder placeholder (admin)
- GET  /api/blob-proxy?url=                     -- same-origin proxy for blob images
"""

from flask import Blueprint

blob_bp = Blueprint(
    'blob',
    __name__,
    url_prefix='/api'
)

from . import routes
from .resolver import find_project_images, organize_project_images

__all__ = ['blob_bp', 'find_project_images', 'organize_project_images']
