"""
Project image resolver.

Project folders in the blob store were uploaded over time under several
naming conventions (lower/upper-case root, capitalised slug, first word of
the slug only). Prefixes are tried in a fixed order and the first one that
yields images wins.
"""

import logging
import re

from solidsteel.core.logging_service import db_log
from solidsteel.core.storage import StorageError, list_files

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.webp', '.avif')
PROJECT_ROOTS = ('projects', 'Projects')
HERO_KEYWORDS = ('hero', 'main', 'primary', 'cover', 'featured')
PLACEHOLDER_NAME = '.placeholder'

PAGE_SIZE = 100
MAX_PAGES = 10

SLUG_REGEX = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_-]*$')


def folder_variants(slug):
    """slug, Slug, first word of slug (duplicates removed, order kept)"""
    variants = [slug, slug[:1].upper() + slug[1:], slug.split('-')[0]]
    seen = []
    for variant in variants:
        if variant and variant not in seen:
            seen.append(variant)
    return seen


def candidate_prefixes(slug):
    return [f"{root}/{folder}/" for folder in folder_variants(slug) for root in PROJECT_ROOTS]


def is_image(pathname):
    filename = pathname.rsplit('/', 1)[-1]
    if not filename or filename == PLACEHOLDER_NAME:
        return False
    return filename.lower().endswith(IMAGE_EXTENSIONS)


def _list_prefix(prefix):
    """All blobs under prefix, following the listing cursor"""
    blobs = []
    cursor = None
    for _ in range(MAX_PAGES):
        page = list_files(prefix=prefix, limit=PAGE_SIZE, cursor=cursor)
        blobs.extend(page['blobs'])
        cursor = page.get('cursor')
        if not page.get('hasMore') or not cursor:
            break
    return blobs


def _to_image(blob):
    return {
        'url': blob['url'],
        'pathname': blob['pathname'],
        'filename': blob['pathname'].rsplit('/', 1)[-1],
        'size': blob.get('size', 0),
        'uploadedAt': blob.get('uploadedAt'),
    }


def find_project_images(slug):
    """Images for a project, or [] when nothing matches.

    Listing failures on one prefix are logged and the next prefix is tried.
    """
    if not slug or not SLUG_REGEX.match(slug):
        return []

    for prefix in candidate_prefixes(slug):
        try:
            blobs = _list_prefix(prefix)
        except StorageError as e:
            logger.warning(f"Blob listing failed for {prefix}: {e}")
            db_log('warning', 'blob', 'Blob listing failed', {'prefix': prefix, 'error': str(e)})
            continue

        images = [_to_image(blob) for blob in blobs if is_image(blob['pathname'])]
        if images:
            logger.debug(f"Resolved {len(images)} images for {slug} under {prefix}")
            return images

    return []


def organize_project_images(images):
    """Split images into (hero_url, gallery_urls).

    Hero is the first filename containing a hero keyword (keywords checked in
    order), else the newest upload. Gallery is everything else, newest first.
    """
    if not images:
        return None, []

    hero = None
    for keyword in HERO_KEYWORDS:
        hero = next((img for img in images if keyword in img['filename'].lower()), None)
        if hero:
            break

    if hero is None:
        hero = max(images, key=lambda img: img.get('uploadedAt') or '')

    gallery = sorted(
        (img for img in images if img['url'] != hero['url']),
        key=lambda img: img.get('uploadedAt') or '',
        reverse=True,
    )
    return hero['url'], [img['url'] for img in gallery]
