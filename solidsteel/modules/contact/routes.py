"""
Contact Routes
==============

Lead capture endpoints. The CRM payload shapes match the Groundhogg webhook
listeners configured for each form.
"""

import logging
import re
import time
from datetime import datetime, timezone

from flask import current_app, jsonify, redirect, request

from solidsteel.core.config import get_config_value
from solidsteel.core.crm import send_to_crm
from solidsteel.core.logging_service import db_log
from solidsteel.core.recaptcha import verify_recaptcha
from . import contact_bp

logger = logging.getLogger(__name__)

EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$')

HONEYPOT_FIELDS = ('company_url', 'website')

# (field, kind, min_length, required)
QUOTE_REQUEST_RULES = [
    ('projectName', 'str', 2, True),
    ('projectDescription', 'str', 50, True),
    ('clientName', 'str', 2, True),
    ('clientEmail', 'email', 0, True),
    ('clientPhone', 'str', 10, True),
    ('projectType', 'str', 1, True),
    ('startDate', 'str', 0, False),
    ('estimatedDuration', 'str', 0, False),
    ('budgetRange', 'str', 1, True),
    ('projectLocation', 'str', 2, True),
    ('urgency', 'str', 1, True),
    ('additionalRequirements', 'str', 0, False),
    ('attachments', 'list', 0, False),
    ('submittedAt', 'str', 0, True),
]

PROFORMA_BUDGET_RULES = [
    ('projectName', 'str', 2, True),
    ('projectType', 'str', 1, True),
    ('projectLocation', 'str', 2, True),
    ('projectDescription', 'str', 100, True),
    ('buildingSize', 'str', 1, True),
    ('siteSize', 'str', 0, False),
    ('numberOfFloors', 'str', 1, True),
    ('occupancyType', 'str', 1, True),
    ('constructionType', 'str', 1, True),
    ('estimatedBudget', 'str', 1, True),
    ('budgetFlexibility', 'str', 1, True),
    ('fundingSource', 'str', 1, True),
    ('financingNeeded', 'str', 1, True),
    ('projectStartDate', 'str', 0, False),
    ('desiredCompletionDate', 'str', 0, False),
    ('budgetDeadline', 'str', 1, True),
    ('consultationPurpose', 'list', 1, True),
    ('specificConcerns', 'str', 0, False),
    ('previousEstimates', 'str', 1, True),
    ('clientName', 'str', 2, True),
    ('clientTitle', 'str', 0, False),
    ('companyName', 'str', 2, True),
    ('clientEmail', 'email', 0, True),
    ('clientPhone', 'str', 10, True),
    ('siteVisitRequired', 'str', 1, True),
    ('presentationRequired', 'str', 1, True),
    ('additionalServices', 'list', 0, False),
    ('specialRequirements', 'str', 0, False),
    ('attachments', 'list', 0, False),
    ('submittedAt', 'str', 0, True),
]


# ===== Helpers =====

def is_honeypot_filled(data):
    """Hidden inputs that only bots fill"""
    return any(data.get(field) for field in HONEYPOT_FIELDS)


def validate_form(data, rules):
    """Check data against (field, kind, min_length, required) rules.

    Returns a list of {field, message} errors; empty when valid.
    """
    errors = []
    for field, kind, min_length, required in rules:
        value = data.get(field)
        if value is None:
            if required:
                errors.append({'field': field, 'message': 'Required'})
            continue

        if kind == 'list':
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                errors.append({'field': field, 'message': 'Expected a list of strings'})
            elif len(value) < min_length:
                errors.append({'field': field, 'message': f'Select at least {min_length}'})
            continue

        if not isinstance(value, str):
            errors.append({'field': field, 'message': 'Expected a string'})
        elif kind == 'email' and not EMAIL_REGEX.match(value.strip()):
            errors.append({'field': field, 'message': 'Invalid email'})
        elif len(value) < min_length:
            errors.append({'field': field, 'message': f'Must be at least {min_length} characters'})
    return errors


def _recaptcha_failed(data):
    """True when a token was supplied and did not verify"""
    token = data.get('recaptchaToken')
    if not token:
        return False
    result = verify_recaptcha(token)
    if not result['success']:
        logger.warning(f"reCAPTCHA rejected submission (score {result['score']})")
        return True
    return False


def _forward_to_crm(source, webhook_key, payload, summary):
    """Send to the CRM; log the outcome either way"""
    result = send_to_crm(get_config_value(webhook_key), payload)
    if result['success']:
        logger.info(f"{source}: CRM accepted submission")
    else:
        logger.error(f"{source}: CRM webhook failed: {result['error']}")
        db_log('error', source, 'CRM webhook failed', {'error': result['error'], **summary})
    return result


def _debug_info(result):
    if current_app.debug:
        return {'crmSuccess': result['success'], 'crmError': result['error'] or None}
    return None


def _text_field(data, field):
    """Stripped string value; anything that is not a string counts as missing"""
    value = data.get(field)
    return value.strip() if isinstance(value, str) else ''


def _timestamp_ms():
    return int(time.time() * 1000)


# ===== Contact form =====

@contact_bp.route('/contact', methods=['POST'])
def contact():
    """Handle contact form posts from fetch() (JSON) or a plain HTML form"""
    is_native_form = not request.is_json

    if is_native_form:
        data = request.form.to_dict()
    else:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'success': False, 'message': 'Invalid request body'}), 400

    if is_honeypot_filled(data):
        logger.info("Contact form honeypot triggered")
        if is_native_form:
            return redirect('/contact/thank-you', code=303)
        return jsonify({'success': True, 'message': 'Contact form submitted successfully'}), 200

    if _recaptcha_failed(data):
        if is_native_form:
            return redirect('/contact?error=recaptcha', code=303)
        return jsonify({'success': False, 'message': 'reCAPTCHA verification failed'}), 403

    name = _text_field(data, 'name')
    email = _text_field(data, 'email')
    phone = _text_field(data, 'phone')
    project_type = _text_field(data, 'projectType')
    message = _text_field(data, 'message')

    if not name or not email or not phone or not message:
        if is_native_form:
            return redirect('/contact?error=missing-fields', code=303)
        return jsonify({'success': False, 'message': 'Missing required fields'}), 400

    crm_data = {
        'name': name,
        'email': email,
        'phone': phone,
        'project_type': project_type or 'General Inquiry',
        'message': f"Project Type: {project_type}\n\nMessage: {message}" if project_type else message,
        'source': 'Website Contact Form API',
        'form_type': 'contact_form',
        'submitted_at': datetime.now(timezone.utc).isoformat(),
    }

    _forward_to_crm('contact', 'GROUNDHOGG_WEBHOOK_CONTACT_URL', crm_data, {'email': email})

    if is_native_form:
        return redirect('/contact/thank-you', code=303)
    return jsonify({'success': True, 'message': 'Contact form submitted successfully'}), 200


# ===== Quote request =====

def build_quote_message(data):
    lines = [
        f"Project: {data['projectName']}",
        f"Description: {data['projectDescription']}",
        f"Location: {data['projectLocation']}",
        f"Budget: {data['budgetRange']}",
        f"Urgency: {data['urgency']}",
    ]
    if data.get('startDate'):
        lines.append(f"Preferred Start: {data['startDate']}")
    if data.get('estimatedDuration'):
        lines.append(f"Duration: {data['estimatedDuration']}")
    if data.get('additionalRequirements'):
        lines.append(f"Additional Requirements: {data['additionalRequirements']}")
    return '\n\n'.join(lines)


@contact_bp.route('/quote-request', methods=['POST'])
def quote_request():
    """Project quote request form"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'message': 'Invalid request body'}), 400

    if is_honeypot_filled(data):
        return jsonify({'success': True, 'message': 'Quote request submitted successfully'}), 200

    if _recaptcha_failed(data):
        return jsonify({'success': False, 'message': 'reCAPTCHA verification failed'}), 403

    errors = validate_form(data, QUOTE_REQUEST_RULES)
    if errors:
        return jsonify({'success': False, 'message': 'Invalid form data', 'errors': errors}), 400

    crm_data = {
        'name': data['clientName'],
        'email': data['clientEmail'],
        'phone': data['clientPhone'],
        'project_name': data['projectName'],
        'project_type': data['projectType'],
        'project_location': data['projectLocation'],
        'budget_range': data['budgetRange'],
        'urgency': data['urgency'],
        'message': build_quote_message(data),
        'source': 'Website Quote Request',
        'form_type': 'quote_request',
    }

    summary = {
        'projectName': data['projectName'],
        'clientEmail': data['clientEmail'],
        'attachments': len(data.get('attachments') or []),
        'submittedAt': data['submittedAt'],
    }
    result = _forward_to_crm('quote_request', 'GROUNDHOGG_WEBHOOK_QUOTE_URL', crm_data, summary)

    body = {
        'success': True,
        'message': 'Quote request submitted successfully',
        'requestId': f'QR-{_timestamp_ms()}',
    }
    debug = _debug_info(result)
    if debug:
        body['debug'] = debug
    return jsonify(body), 200


# ===== Proforma budget consultation =====

def build_proforma_message(data):
    """Plain-text summary the CRM stores as the lead note"""
    purposes = ', '.join(data['consultationPurpose'])
    sections = [
        "PROFORMA BUDGET CONSULTATION REQUEST",
        '\n'.join([
            f"Project: {data['projectName']}",
            f"Type: {data['projectType']}",
            f"Location: {data['projectLocation']}",
        ]),
    ]

    specs = ["PROJECT SPECIFICATIONS:", f"- Building Size: {data['buildingSize']}"]
    if data.get('siteSize'):
        specs.append(f"- Site Size: {data['siteSize']}")
    specs += [
        f"- Floors: {data['numberOfFloors']}",
        f"- Occupancy: {data['occupancyType']}",
        f"- Construction Type: {data['constructionType']}",
    ]
    sections.append('\n'.join(specs))

    sections.append('\n'.join([
        "BUDGET PARAMETERS:",
        f"- Estimated Budget: {data['estimatedBudget']}",
        f"- Budget Flexibility: {data['budgetFlexibility']}",
        f"- Funding Source: {data['fundingSource']}",
        f"- Financing Needed: {data['financingNeeded']}",
    ]))

    timeline = ["TIMELINE:"]
    if data.get('projectStartDate'):
        timeline.append(f"- Desired Start: {data['projectStartDate']}")
    if data.get('desiredCompletionDate'):
        timeline.append(f"- Desired Completion: {data['desiredCompletionDate']}")
    timeline.append(f"- Budget Needed By: {data['budgetDeadline']}")
    sections.append('\n'.join(timeline))

    sections.append(f"CONSULTATION PURPOSE:\n{purposes}")

    requirements = [
        "REQUIREMENTS:",
        f"- Site Visit: {data['siteVisitRequired']}",
        f"- Presentation: {data['presentationRequired']}",
    ]
    if data.get('additionalServices'):
        requirements.append(f"- Additional Services: {', '.join(data['additionalServices'])}")
    sections.append('\n'.join(requirements))

    sections.append(f"PROJECT DESCRIPTION:\n{data['projectDescription']}")
    if data.get('specificConcerns'):
        sections.append(f"SPECIFIC CONCERNS:\n{data['specificConcerns']}")
    if data.get('specialRequirements'):
        sections.append(f"SPECIAL REQUIREMENTS:\n{data['specialRequirements']}")

    sections.append(
        f"Previous Estimates: {data['previousEstimates']}\n"
        f"Attachments: {len(data.get('attachments') or [])} files uploaded"
    )
    return '\n\n'.join(sections)


@contact_bp.route('/proforma-budget', methods=['POST'])
def proforma_budget():
    """Proforma budget consultation form"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'message': 'Invalid request body'}), 400

    if is_honeypot_filled(data):
        return jsonify({'success': True, 'message': 'Consultation request submitted successfully'}), 200

    if _recaptcha_failed(data):
        return jsonify({'success': False, 'message': 'reCAPTCHA verification failed'}), 403

    errors = validate_form(data, PROFORMA_BUDGET_RULES)
    if errors:
        return jsonify({'success': False, 'message': 'Invalid form data', 'errors': errors}), 400

    crm_data = {
        'name': data['clientName'],
        'email': data['clientEmail'],
        'phone': data['clientPhone'],
        'company': data['companyName'],
        'title': data.get('clientTitle') or '',
        'project_name': data['projectName'],
        'project_type': data['projectType'],
        'project_location': data['projectLocation'],
        'building_size': data['buildingSize'],
        'estimated_budget': data['estimatedBudget'],
        'budget_deadline': data['budgetDeadline'],
        'consultation_purposes': ', '.join(data['consultationPurpose']),
        'funding_source': data['fundingSource'],
        'financing_needed': data['financingNeeded'],
        'message': build_proforma_message(data),
        'source': 'Website Proforma Budget Consultation',
        'form_type': 'proforma_budget_consultation',
        'priority': 'urgent' if data['budgetDeadline'] == 'asap' else 'normal',
    }

    summary = {
        'projectName': data['projectName'],
        'clientEmail': data['clientEmail'],
        'companyName': data['companyName'],
        'submittedAt': data['submittedAt'],
    }
    result = _forward_to_crm('proforma_budget', 'GROUNDHOGG_WEBHOOK_PROFORMA_URL', crm_data, summary)

    body = {
        'success': True,
        'message': 'Proforma budget consultation request submitted successfully',
        'requestId': f'PBC-{_timestamp_ms()}',
    }
    debug = _debug_info(result)
    if debug:
        body['debug'] = debug
    return jsonify(body), 200
