"""
Groundhogg CRM Webhook
======================

Posts lead payloads to a CRM webhook listener.
Failures are reported back to the caller, never raised: form submissions
succeed for the visitor even when the CRM is down.
"""

import requests

USER_AGENT = 'SolidSteelWebsite/1.0'
WEBHOOK_TIMEOUT = 10


def send_to_crm(webhook_url, payload):
    """
    Send a lead to the CRM.

    Args:
        webhook_url: Webhook listener URL (None/empty when not configured)
        payload: JSON-serialisable dict

    Returns:
        dict with {success, error}
    """
    if not webhook_url:
        return {'success': False, 'error': 'Webhook URL is not configured'}

    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
    }

    try:
        resp = requests.post(webhook_url, json=payload, headers=headers, timeout=WEBHOOK_TIMEOUT)
    except requests.RequestException as e:
        return {'success': False, 'error': f'CRM webhook error: {e}'}

    if not resp.ok:
        return {'success': False, 'error': f'HTTP {resp.status_code}: {resp.text[:500]}'}
    return {'success': True, 'error': ''}
