"""
Subscribers Routes
==================

Provides:
- POST /api/newsletter -- subscribe an email address

Exported helpers:
- validate_email(email)
- get_subscriber_count()
"""

import logging
import re
from datetime import datetime, timezone

from flask import request, jsonify

from solidsteel.core.entities import get_store
from solidsteel.core.json_store import StoreError
from solidsteel.core.logging_service import db_log
from . import subscribers_bp

# anything@anything.tld
EMAIL_REGEX = re.compile(r'^\S+@\S+\.\S+$')

HONEYPOT_FIELDS = ('company_url', 'website')

logger = logging.getLogger(__name__)


def validate_email(email):
    return isinstance(email, str) and bool(EMAIL_REGEX.match(email))


def get_client_ip():
    """Client IP, honouring the first X-Forwarded-For hop"""
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr or ''


def get_subscriber_count():
    try:
        return len(get_store('subscribers').read_entities())
    except StoreError as e:
        logger.error(f"Error counting subscribers: {e}")
        return 0


def add_subscriber(email, ip_address=None, source='website'):
    """Store email once. Returns True if it was new."""
    store = get_store('subscribers')
    with store.transaction() as records:
        if any(r.get('email') == email for r in records):
            return False
        records.append({
            'email': email,
            'subscribedAt': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'source': source,
            'ipAddress': ip_address,
        })
    return True


# ===================
# PUBLIC API ROUTES
# ===================

@subscribers_bp.route('', methods=['POST'])
def subscribe():
    """Handle newsletter sign-up requests"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form.to_dict()

    email = data.get('email')
    if not validate_email(email):
        return jsonify({'error': 'Valid email is required'}), 400

    email = email.strip().lower()
    ip_address = get_client_ip()

    # Bots get a fake success
    if any(data.get(field) for field in HONEYPOT_FIELDS):
        logger.info(f"Bot signup blocked: {email} (ip: {ip_address})")
        db_log('warning', 'subscribers', 'Bot signup blocked: honeypot', {'email': email, 'ip': ip_address})
        return jsonify({'success': True, 'message': 'Successfully subscribed to newsletter'}), 200

    try:
        is_new = add_subscriber(email, ip_address)
    except StoreError as e:
        logger.error(f"Error saving subscriber: {e}")
        db_log('error', 'subscribers', 'Failed saving subscriber', {'error': str(e)})
        return jsonify({'error': 'Failed to subscribe to newsletter'}), 500

    if is_new:
        logger.info(f"New newsletter subscriber: {email}")
    return jsonify({'success': True, 'message': 'Successfully subscribed to newsletter'}), 200
