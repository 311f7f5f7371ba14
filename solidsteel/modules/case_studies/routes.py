"""
Case Studies Admin Routes
=========================

Same contract as the projects admin API, backed by the case studies file.
"""

import logging

from flask import request, jsonify

from solidsteel.core.entities import (
    CASE_STUDY_SCHEMA,
    EntityNotFound,
    EntityValidationError,
    create_entity,
    delete_entity,
    get_entity,
    list_entities,
    update_entity,
)
from solidsteel.core.json_store import StoreError
from solidsteel.core.logging_service import db_log
from solidsteel.modules.dashboard.auth import admin_required
from . import case_studies_bp

logger = logging.getLogger(__name__)


def _json_body():
    return request.get_json(silent=True)


@case_studies_bp.route('', methods=['GET'])
@admin_required
def get_case_studies():
    """Get all case studies"""
    try:
        return jsonify(list_entities(CASE_STUDY_SCHEMA))
    except StoreError as e:
        logger.error(f"Error fetching case studies: {e}")
        return jsonify({'error': 'Failed to fetch case studies'}), 500


@case_studies_bp.route('', methods=['POST'])
@admin_required
def create_case_study():
    """Create new case study"""
    data = _json_body()
    if data is None:
        return jsonify({'error': 'Request body must be JSON'}), 400

    try:
        case_study = create_entity(CASE_STUDY_SCHEMA, data)
        return jsonify(case_study), 201
    except EntityValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        logger.error(f"Error creating case study: {e}")
        db_log('error', 'case_studies', 'Failed creating case study', {'error': str(e)})
        return jsonify({'error': 'Failed to create case study'}), 500


@case_studies_bp.route('/<entity_id>', methods=['GET'])
@admin_required
def get_case_study(entity_id):
    """Get single case study"""
    try:
        return jsonify(get_entity(CASE_STUDY_SCHEMA, entity_id))
    except EntityNotFound:
        return jsonify({'error': 'Case study not found'}), 404
    except StoreError as e:
        logger.error(f"Error fetching case study: {e}")
        return jsonify({'error': 'Failed to fetch case study'}), 500


@case_studies_bp.route('/<entity_id>', methods=['PUT'])
@admin_required
def update_case_study(entity_id):
    """Update case study"""
    data = _json_body()
    if data is None:
        return jsonify({'error': 'Request body must be JSON'}), 400

    try:
        return jsonify(update_entity(CASE_STUDY_SCHEMA, entity_id, data))
    except EntityNotFound:
        return jsonify({'error': 'Case study not found'}), 404
    except EntityValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        logger.error(f"Error updating case study: {e}")
        db_log('error', 'case_studies', 'Failed updating case study', {'error': str(e)})
        return jsonify({'error': 'Failed to update case study'}), 500


@case_studies_bp.route('/<entity_id>', methods=['DELETE'])
@admin_required
def delete_case_study(entity_id):
    """Delete case study"""
    try:
        delete_entity(CASE_STUDY_SCHEMA, entity_id)
        return jsonify({'success': True})
    except EntityNotFound:
        return jsonify({'error': 'Case study not found'}), 404
    except StoreError as e:
        logger.error(f"Error deleting case study: {e}")
        db_log('error', 'case_studies', 'Failed deleting case study', {'error': str(e)})
        return jsonify({'error': 'Failed to delete case study'}), 500
