"""
reCAPTCHA v3 verification against Google's siteverify endpoint.
"""

import logging

import requests

from .config import get_config_value
from .logging_service import db_log

VERIFY_URL = 'https://www.google.com/recaptcha/api/siteverify'
VERIFY_TIMEOUT = 10

logger = logging.getLogger(__name__)


def verify_recaptcha(token):
    """
    Verify a client token.

    Returns:
        dict with {success, score}. success requires Google's success flag
        and a score at or above RECAPTCHA_MIN_SCORE.
    """
    secret_key = get_config_value('RECAPTCHA_SECRET_KEY')
    if not secret_key:
        logger.error("RECAPTCHA_SECRET_KEY is not configured")
        db_log('error', 'recaptcha', 'RECAPTCHA_SECRET_KEY is not configured')
        return {'success': False, 'score': 0}

    try:
        resp = requests.post(
            VERIFY_URL,
            data={'secret': secret_key, 'response': token},
            timeout=VERIFY_TIMEOUT,
        )
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"reCAPTCHA verification request failed: {e}")
        db_log('error', 'recaptcha', 'reCAPTCHA verification request failed', {'error': str(e)})
        return {'success': False, 'score': 0}

    score = data.get('score') or 0
    min_score = float(get_config_value('RECAPTCHA_MIN_SCORE', 0.5))
    return {'success': bool(data.get('success')) and score >= min_score, 'score': score}
