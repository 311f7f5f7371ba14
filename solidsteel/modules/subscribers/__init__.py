"""
Subscribers Module
==================

Provides:
- Public API for newsletter sign-ups, stored in the subscribers JSON file
- Helper for other modules (get_subscriber_count)
"""

from flask import Blueprint

subscribers_bp = Blueprint(
    'subscribers',
    __name__,
    url_prefix='/api/newsletter'
)

from . import routes
