"""
Entities
========

Projects and case studies are plain dict records kept in JSON files.
Each type has an explicit field schema; payloads are checked against it and
merged field by field, so unknown keys never reach the file.

System fields (id, slug, createdAt, updatedAt) are always assigned here and
ignored when they appear in a payload.
"""

import re
import time
from datetime import datetime, timezone

from .config import get_config_value
from .json_store import JSONStore

SYSTEM_FIELDS = ('id', 'slug', 'createdAt', 'updatedAt')


class EntityError(Exception):
    status_code = 500


class EntityValidationError(EntityError):
    status_code = 400


class EntityNotFound(EntityError):
    status_code = 404


class EntitySchema:
    """Field definitions for one entity type.

    fields: {name: python type}; `list`/`dict` accept any JSON array/object.
    choices: {name: allowed values} for enum-like string fields.
    """

    def __init__(self, name, label, fields, required=('title',), choices=None):
        self.name = name
        self.label = label
        self.fields = fields
        self.required = required
        self.choices = choices or {}

    def __repr__(self):
        return f"EntitySchema({self.name!r})"


PROJECT_SCHEMA = EntitySchema(
    name='projects',
    label='Project',
    fields={
        'title': str,
        'category': str,
        'description': str,
        'location': str,
        'completionDate': str,
        'client': str,
        'squareFootage': str,
        'image': str,
        'gallery': list,
        'challenge': str,
        'solution': str,
        'results': str,
        'features': list,
        'technologies': list,
        'projectValue': str,
        'duration': str,
        'status': str,
        'tags': list,
        'year': int,
        'featured': bool,
        'hasCaseStudy': bool,
    },
    choices={
        'category': ('commercial', 'industrial', 'warehouse', 'garage', 'takeover'),
        'status': ('completed', 'in-progress', 'planned'),
    },
)

CASE_STUDY_SCHEMA = EntitySchema(
    name='case_studies',
    label='Case study',
    fields={
        'title': str,
        'subtitle': str,
        'projectSlug': str,
        'projectOverview': str,
        'challengesFaced': list,
        'solutionsImplemented': dict,
        'technologiesUtilized': list,
        'resultsAchieved': list,
        'lessonsLearned': list,
        'keyMetrics': list,
        'testimonials': list,
        'timeline': list,
        'distressedDetails': dict,
        'commercialDetails': dict,
        'industrialDetails': dict,
        'heroImage': str,
        'galleryImages': list,
        'featured': bool,
        'publishedDate': str,
        'lastUpdated': str,
        'conclusion': str,
        'metaDescription': str,
        'keywords': list,
    },
)

_STORE_CONFIG_KEYS = {
    'projects': 'PROJECTS_JSON',
    'case_studies': 'CASE_STUDIES_JSON',
    'subscribers': 'SUBSCRIBERS_JSON',
}


def get_store(name):
    """Store for an entity type, path resolved from config on every call"""
    return JSONStore(get_config_value(_STORE_CONFIG_KEYS[name]))


# ===== Identifiers =====

def generate_slug(title):
    """URL-safe slug: "Greystone Village" -> "greystone-village" """
    slug = re.sub(r'[^a-z0-9]+', '-', (title or '').lower())
    return slug.strip('-')


def generate_id(existing_ids):
    """Millisecond timestamp string, bumped until it is not already taken"""
    candidate = int(time.time() * 1000)
    taken = set(existing_ids)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def _now_iso():
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


# ===== Validation =====

def _type_name(expected):
    return {str: 'a string', int: 'an integer', bool: 'a boolean',
            list: 'a list', dict: 'an object'}[expected]


def clean_payload(schema, data, partial=False):
    """Validate a request payload against the schema.

    Returns a new dict holding only schema fields. Raises
    EntityValidationError on unknown fields, wrong types, bad choices or a
    missing/blank title.
    """
    if not isinstance(data, dict):
        raise EntityValidationError('Request body must be a JSON object')

    unknown = sorted(k for k in data if k not in schema.fields and k not in SYSTEM_FIELDS)
    if unknown:
        raise EntityValidationError(f"Unknown field(s): {', '.join(unknown)}")

    cleaned = {}
    for key, value in data.items():
        if key in SYSTEM_FIELDS:
            continue

        expected = schema.fields[key]
        if value is None:
            if key in schema.required:
                raise EntityValidationError(f"{key} is required")
            cleaned[key] = None
            continue

        # bool is a subclass of int; keep them apart
        if (expected is int and isinstance(value, bool)) or not isinstance(value, expected):
            raise EntityValidationError(f"{key} must be {_type_name(expected)}")

        allowed = schema.choices.get(key)
        if allowed and value not in allowed:
            raise EntityValidationError(f"{key} must be one of: {', '.join(allowed)}")

        cleaned[key] = value.strip() if key == 'title' else value

    for key in schema.required:
        if partial and key not in data:
            continue
        if not cleaned.get(key):
            raise EntityValidationError(f"{key.capitalize()} is required")

    return cleaned


def build_entity(schema, data, existing_ids):
    """New record from a payload with id, slug and timestamps assigned"""
    cleaned = clean_payload(schema, data)
    now = _now_iso()
    return {
        **cleaned,
        'id': generate_id(existing_ids),
        'slug': generate_slug(cleaned['title']),
        'createdAt': now,
        'updatedAt': now,
    }


def merge_entity(schema, existing, data):
    """Field-level merge of a payload over a stored record.

    id and createdAt are preserved, slug follows the (possibly new) title,
    updatedAt is refreshed.
    """
    cleaned = clean_payload(schema, data, partial=True)
    merged = {**existing, **cleaned}
    merged['id'] = existing['id']
    merged['slug'] = generate_slug(merged.get('title'))
    merged['updatedAt'] = _now_iso()
    if 'createdAt' in existing:
        merged['createdAt'] = existing['createdAt']
    return merged


# ===== CRUD over a store =====

def _find_index(records, entity_id):
    for index, record in enumerate(records):
        if str(record.get('id')) == str(entity_id):
            return index
    return -1


def list_entities(schema):
    return get_store(schema.name).read_entities()


def get_entity(schema, entity_id):
    records = get_store(schema.name).read_entities()
    index = _find_index(records, entity_id)
    if index == -1:
        raise EntityNotFound(f"{schema.label} not found")
    return records[index]


def get_entity_by_slug(schema, slug):
    for record in get_store(schema.name).read_entities():
        if record.get('slug') == slug:
            return record
    return None


def create_entity(schema, data):
    with get_store(schema.name).transaction() as records:
        entity = build_entity(schema, data, [str(r.get('id')) for r in records])
        records.append(entity)
    return entity


def update_entity(schema, entity_id, data):
    with get_store(schema.name).transaction() as records:
        index = _find_index(records, entity_id)
        if index == -1:
            raise EntityNotFound(f"{schema.label} not found")
        records[index] = merge_entity(schema, records[index], data)
        updated = records[index]
    return updated


def delete_entity(schema, entity_id):
    with get_store(schema.name).transaction() as records:
        index = _find_index(records, entity_id)
        if index == -1:
            raise EntityNotFound(f"{schema.label} not found")
        removed = records.pop(index)
    return removed
