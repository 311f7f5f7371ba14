import logging
import re
import time

from flask import request, jsonify

from solidsteel.core.config import get_config_value
from solidsteel.core.logging_service import db_log
from solidsteel.core.storage import StorageError, upload_file
from solidsteel.modules.dashboard.auth import admin_required
from . import uploads_bp

logger = logging.getLogger(__name__)

ALLOWED_FOLDERS = ('general', 'quote-requests', 'proforma-consultations', 'projects')
ALLOWED_IMAGE_TYPES = ('image/jpeg', 'image/jpg', 'image/png', 'image/webp', 'image/avif')
ALLOWED_IMAGE_EXTENSIONS = ('jpg', 'jpeg', 'png', 'webp', 'avif')
MAX_IMAGE_SIZE = 10 * 1024 * 1024

ALLOWED_VIDEO_TYPES = ('video/mp4', 'video/webm', 'video/ogg', 'video/quicktime')
MAX_VIDEO_SIZE = 100 * 1024 * 1024


def resolve_folder(requested):
    """Allow-listed folder name, 'general' for anything else"""
    return requested if requested in ALLOWED_FOLDERS else 'general'


def safe_extension(filename):
    """Lowercased alphanumeric extension from the allow-list, else 'jpg'"""
    raw = (filename or '').rsplit('.', 1)[-1] if '.' in (filename or '') else ''
    ext = re.sub(r'[^a-z0-9]', '', raw.lower())
    return ext if ext in ALLOWED_IMAGE_EXTENSIONS else 'jpg'


def _read_upload():
    """Returns (FileStorage, bytes) or (None, None) when no file was sent"""
    file = request.files.get('file')
    if file is None or file.filename == '':
        return None, None
    return file, file.read()


@uploads_bp.route('', methods=['POST'])
def upload_image():
    """Upload an image for a form or project gallery"""
    file, content = _read_upload()
    if file is None:
        return jsonify({'error': 'No file provided'}), 400

    if file.mimetype not in ALLOWED_IMAGE_TYPES:
        return jsonify({'error': 'Invalid file type'}), 400

    if len(content) > MAX_IMAGE_SIZE:
        return jsonify({'error': 'File too large'}), 400

    folder = resolve_folder(request.form.get('folder') or 'general')
    pathname = f"{folder}/{int(time.time() * 1000)}.{safe_extension(file.filename)}"

    try:
        result = upload_file(content, pathname, content_type=file.mimetype)
    except StorageError as e:
        logger.error(f"Upload error: {e}")
        db_log('error', 'uploads', 'Image upload failed', {'pathname': pathname, 'error': str(e)})
        return jsonify({'error': 'Failed to upload file'}), 500

    return jsonify({
        'success': True,
        'url': result['url'],
        'pathname': result['pathname'],
    })


@uploads_bp.route('/video', methods=['POST'])
@admin_required
def upload_video():
    """Replace the homepage hero video"""
    file, content = _read_upload()
    if file is None:
        return jsonify({'error': 'No file provided'}), 400

    if file.mimetype not in ALLOWED_VIDEO_TYPES:
        return jsonify({
            'error': f"Invalid file type. Allowed types: {', '.join(ALLOWED_VIDEO_TYPES)}"
        }), 400

    if len(content) > MAX_VIDEO_SIZE:
        return jsonify({
            'error': f"File too large. Maximum size is {MAX_VIDEO_SIZE // (1024 * 1024)}MB"
        }), 400

    pathname = get_config_value('HERO_VIDEO_PATHNAME')

    try:
        result = upload_file(content, pathname, content_type=file.mimetype)
    except StorageError as e:
        logger.error(f"Video upload error: {e}")
        db_log('error', 'uploads', 'Video upload failed', {'error': str(e)})
        return jsonify({'error': 'Failed to upload video'}), 500

    logger.info(f"Hero video replaced: {result['pathname']}")
    return jsonify({
        'success': True,
        'url': result['url'],
        'pathname': result['pathname'],
    })
