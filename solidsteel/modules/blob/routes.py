import base64
import logging

import requests
from flask import Response, request, jsonify
from flask_cors import cross_origin

from solidsteel.core.logging_service import db_log
from solidsteel.core.storage import StorageError, fetch_blob, is_blob_url, upload_file
from solidsteel.modules.dashboard.auth import admin_required
from . import blob_bp
from .resolver import PLACEHOLDER_NAME, SLUG_REGEX, find_project_images, organize_project_images

logger = logging.getLogger(__name__)

TRANSPARENT_GIF = base64.b64decode('R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7')
PROXY_CACHE_SECONDS = 60 * 60 * 24 * 7
IMAGES_CACHE_CONTROL = 'public, s-maxage=3600, stale-while-revalidate=86400'


def _pixel_response():
    return Response(TRANSPARENT_GIF, status=200, headers={
        'Content-Type': 'image/gif',
        'Cache-Control': 'no-cache',
    })


@blob_bp.route('/blob/projects/<slug>/images', methods=['GET'])
def project_images(slug):
    """Images for a project folder with hero/gallery split"""
    images = find_project_images(slug)
    hero, gallery = organize_project_images(images)

    response = jsonify({
        'success': True,
        'images': images,
        'count': len(images),
        'heroImage': hero,
        'galleryImages': gallery,
    })
    response.headers['Cache-Control'] = IMAGES_CACHE_CONTROL
    return response


@blob_bp.route('/blob/projects/<slug>/ensure-folder', methods=['POST'])
@admin_required
def ensure_project_folder(slug):
    if not SLUG_REGEX.match(slug):
        return jsonify({'error': 'Invalid project slug'}), 400

    try:
        upload_file(b'', f"Projects/{slug}/{PLACEHOLDER_NAME}")
    except StorageError as e:
        logger.error(f"Error ensuring project folder: {e}")
        db_log('error', 'blob', 'Failed creating project folder', {'slug': slug, 'error': str(e)})
        return jsonify({'error': 'Failed to create project folder'}), 500

    return jsonify({
        'success': True,
        'message': f'Folder created for project: {slug}',
    })


@blob_bp.route('/blob-proxy', methods=['GET'])
@cross_origin(origins='*', methods=['GET'], supports_credentials=False)
def blob_proxy():
    """Fetch a blob server-side; a transparent pixel stands in on failure"""
    image_url = request.args.get('url')
    if not image_url:
        return jsonify({'error': 'URL parameter is required'}), 400

    if not is_blob_url(image_url):
        return jsonify({'error': 'Invalid blob URL'}), 400

    try:
        upstream = fetch_blob(image_url)
    except requests.RequestException as e:
        logger.error(f"Blob proxy error: {e}")
        return _pixel_response()

    if not upstream.ok:
        logger.error(f"Blob fetch failed: {upstream.status_code} for {image_url}")
        return _pixel_response()

    return Response(upstream.content, status=200, headers={
        'Content-Type': upstream.headers.get('content-type') or 'application/octet-stream',
        'Cache-Control': f'public, max-age={PROXY_CACHE_SECONDS}, s-maxage={PROXY_CACHE_SECONDS}',
    })
