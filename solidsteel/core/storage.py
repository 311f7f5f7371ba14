"""
Storage Utility
===============

Thin client for the Vercel Blob HTTP API (upload, list, delete, fetch).
Requires BLOB_READ_WRITE_TOKEN; every call carries an explicit timeout and
raises StorageError on failure.
"""

from urllib.parse import quote, urlparse

import requests

from .config import get_config_value

BLOB_API_VERSION = '7'
BLOB_HOST_SUFFIX = 'blob.vercel-storage.com'
DEFAULT_TIMEOUT = 30


class StorageError(Exception):
    """Blob storage request failed or storage is not configured."""


def _api_url():
    return get_config_value('BLOB_API_URL', 'https://blob.vercel-storage.com').rstrip('/')


def _headers(extra=None):
    token = get_config_value('BLOB_READ_WRITE_TOKEN')
    if not token:
        raise StorageError('BLOB_READ_WRITE_TOKEN is not configured')
    headers = {
        'Authorization': f'Bearer {token}',
        'x-api-version': BLOB_API_VERSION,
    }
    if extra:
        headers.update(extra)
    return headers


def _parse_json(resp, action):
    if not resp.ok:
        raise StorageError(f'Blob {action} failed: HTTP {resp.status_code} {resp.text[:200]}')
    try:
        return resp.json()
    except ValueError as e:
        raise StorageError(f'Blob {action} returned invalid JSON') from e


def upload_file(file_bytes, pathname, content_type=None, add_random_suffix=False):
    """Upload bytes to blob storage under *pathname*.

    Args:
        file_bytes: Raw bytes to store.
        pathname: Target path, e.g. "projects/abc/hero-1700000000.jpg".
        content_type: MIME type recorded on the blob.
        add_random_suffix: Let the store append a random suffix to the name.

    Returns:
        dict with url, pathname, contentType, contentDisposition.
    """
    extra = {'x-add-random-suffix': '1' if add_random_suffix else '0'}
    if content_type:
        extra['x-content-type'] = content_type

    try:
        resp = requests.put(
            f"{_api_url()}/{quote(pathname)}",
            data=file_bytes,
            headers=_headers(extra),
            timeout=DEFAULT_TIMEOUT,
        )
    except requests.RequestException as e:
        raise StorageError(f'Blob upload failed: {e}') from e

    data = _parse_json(resp, 'upload')
    return {
        'url': data.get('url', ''),
        'pathname': data.get('pathname', pathname),
        'contentType': data.get('contentType', content_type or ''),
        'contentDisposition': data.get('contentDisposition', ''),
    }


def list_files(prefix=None, limit=None, cursor=None):
    """List blobs, optionally under a prefix.

    Returns:
        dict with blobs (list of {url, pathname, size, uploadedAt}),
        hasMore and cursor.
    """
    params = {}
    if prefix:
        params['prefix'] = prefix
    if limit:
        params['limit'] = limit
    if cursor:
        params['cursor'] = cursor

    try:
        resp = requests.get(_api_url(), params=params, headers=_headers(), timeout=DEFAULT_TIMEOUT)
    except requests.RequestException as e:
        raise StorageError(f'Blob list failed: {e}') from e

    data = _parse_json(resp, 'list')
    blobs = [
        {
            'url': blob.get('url', ''),
            'pathname': blob.get('pathname', ''),
            'size': blob.get('size', 0),
            'uploadedAt': blob.get('uploadedAt'),
        }
        for blob in data.get('blobs', [])
    ]
    return {
        'blobs': blobs,
        'hasMore': bool(data.get('hasMore')),
        'cursor': data.get('cursor'),
    }


def delete_file(file_url):
    """Delete a blob by its URL. Returns True on success, raises on failure."""
    if not file_url:
        return False

    try:
        resp = requests.post(
            f"{_api_url()}/delete",
            json={'urls': [file_url]},
            headers=_headers(),
            timeout=DEFAULT_TIMEOUT,
        )
    except requests.RequestException as e:
        raise StorageError(f'Blob delete failed: {e}') from e

    if not resp.ok:
        raise StorageError(f'Blob delete failed: HTTP {resp.status_code}')
    return True


def is_blob_url(url):
    """True for https URLs served by the blob store"""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    host = (parsed.hostname or '').lower()
    return parsed.scheme == 'https' and (host == BLOB_HOST_SUFFIX or host.endswith('.' + BLOB_HOST_SUFFIX))


def fetch_blob(url, timeout=DEFAULT_TIMEOUT):
    """GET a public blob. Returns the requests.Response; network errors propagate."""
    return requests.get(
        url,
        headers={'User-Agent': 'Mozilla/5.0 (compatible; SolidSteel-Proxy/1.0)'},
        timeout=timeout,
    )
