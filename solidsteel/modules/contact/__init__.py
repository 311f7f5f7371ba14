"""
Contact Module
==============

Public lead capture forwarded to the Groundhogg CRM.

Provides:
- POST /api/contact          -- contact form (JSON or native form post)
- POST /api/quote-request    -- project quote request
- POST /api/proforma-budget  -- proforma budget consultation request

All endpoints drop honeypot submissions with a fake success, verify an
optional reCAPTCHA token, and report success even when the CRM is down.
"""

from flask import Blueprint

contact_bp = Blueprint(
    'contact',
    __name__,
    url_prefix='/api'
)

from . import routes

__all__ = ['contact_bp']
