"""
Projects Admin Routes
=====================

JSON CRUD over the projects file. Every route requires an admin session.

- GET    /api/admin/projects        -- all projects
- POST   /api/admin/projects        -- create
- GET    /api/admin/projects/<id>   -- single project
- PUT    /api/admin/projects/<id>   -- update
- DELETE /api/admin/projects/<id>   -- delete
"""

import logging

from flask import request, jsonify

from solidsteel.core.entities import (
    PROJECT_SCHEMA,
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
from . import projects_bp

logger = logging.getLogger(__name__)


def _store_failure(action, error):
    logger.error(f"Error {action} project: {error}")
    db_log('error', 'projects', f'Failed {action} project', {'error': str(error)})


@projects_bp.route('', methods=['GET'])
@admin_required
def get_projects():
    """Get all projects"""
    try:
        return jsonify(list_entities(PROJECT_SCHEMA))
    except StoreError as e:
        _store_failure('fetching', e)
        return jsonify({'error': 'Failed to fetch projects'}), 500


@projects_bp.route('', methods=['POST'])
@admin_required
def create_project():
    """Create new project"""
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({'error': 'Request body must be JSON'}), 400

    try:
        project = create_entity(PROJECT_SCHEMA, data)
        logger.info(f"Created project {project['id']} ({project['slug']})")
        return jsonify(project), 201
    except EntityValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        _store_failure('creating', e)
        return jsonify({'error': 'Failed to create project'}), 500


@projects_bp.route('/<entity_id>', methods=['GET'])
@admin_required
def get_project(entity_id):
    """Get single project"""
    try:
        return jsonify(get_entity(PROJECT_SCHEMA, entity_id))
    except EntityNotFound:
        return jsonify({'error': 'Project not found'}), 404
    except StoreError as e:
        _store_failure('fetching', e)
        return jsonify({'error': 'Failed to fetch project'}), 500


@projects_bp.route('/<entity_id>', methods=['PUT'])
@admin_required
def update_project(entity_id):
    """Update project"""
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({'error': 'Request body must be JSON'}), 400

    try:
        return jsonify(update_entity(PROJECT_SCHEMA, entity_id, data))
    except EntityNotFound:
        return jsonify({'error': 'Project not found'}), 404
    except EntityValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        _store_failure('updating', e)
        return jsonify({'error': 'Failed to update project'}), 500


@projects_bp.route('/<entity_id>', methods=['DELETE'])
@admin_required
def delete_project(entity_id):
    """Delete project"""
    try:
        delete_entity(PROJECT_SCHEMA, entity_id)
        return jsonify({'success': True})
    except EntityNotFound:
        return jsonify({'error': 'Project not found'}), 404
    except StoreError as e:
        _store_failure('deleting', e)
        return jsonify({'error': 'Failed to delete project'}), 500
