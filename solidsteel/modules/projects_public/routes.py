"""
Projects Public Routes
======================

Public read-only API for projects and case studies, used by the site's pages.
"""

import re

from flask import Blueprint, jsonify, request

from solidsteel.core.entities import (
    CASE_STUDY_SCHEMA,
    PROJECT_SCHEMA,
    get_entity_by_slug,
    list_entities,
)
from solidsteel.core.json_store import StoreError

projects_public_bp = Blueprint('projects', __name__, url_prefix='/api')


# ===== Project queries =====

def search_projects(projects, term):
    """Match term against title, description, tags and technologies"""
    term = term.lower()
    results = []
    for project in projects:
        haystack = [project.get('title') or '', project.get('description') or '']
        haystack.extend(project.get('tags') or [])
        haystack.extend(project.get('technologies') or [])
        if any(term in str(value).lower() for value in haystack):
            results.append(project)
    return results


def filter_projects(projects, category=None, status=None, featured=False, technology=None, term=None):
    if category:
        projects = [p for p in projects if p.get('category') == category]
    if status:
        projects = [p for p in projects if p.get('status') == status]
    if featured:
        projects = [p for p in projects if p.get('featured')]
    if technology:
        projects = [p for p in projects if technology in (p.get('technologies') or [])]
    if term:
        projects = search_projects(projects, term)
    return projects


def related_projects(projects, slug, limit=3):
    """Same category as the given project, excluding it"""
    current = next((p for p in projects if p.get('slug') == slug), None)
    if not current:
        return []
    return [
        p for p in projects
        if p.get('category') == current.get('category') and p.get('slug') != slug
    ][:limit]


def _project_value(project):
    digits = re.sub(r'[^\d.]', '', project.get('projectValue') or '')
    try:
        return float(digits) if digits else 0.0
    except ValueError:
        return 0.0


def project_statistics(projects):
    technologies = set()
    for project in projects:
        technologies.update(project.get('technologies') or [])

    return {
        'totalProjects': len(projects),
        'completedProjects': sum(1 for p in projects if p.get('status') == 'completed'),
        'inProgressProjects': sum(1 for p in projects if p.get('status') == 'in-progress'),
        'featuredProjects': sum(1 for p in projects if p.get('featured')),
        'totalValue': sum(_project_value(p) for p in projects),
        'categories': len({p.get('category') for p in projects if p.get('category')}),
        'technologies': len(technologies),
    }


# ===== Case study queries =====

def sort_case_studies(case_studies):
    """Newest publishedDate first (ISO strings sort chronologically)"""
    return sorted(case_studies, key=lambda cs: cs.get('publishedDate') or '', reverse=True)


def related_case_studies(case_studies, projects, slug, limit=3):
    """Case studies whose project shares the category of this one's project"""
    current = next((cs for cs in case_studies if cs.get('slug') == slug), None)
    if not current:
        return []

    category_by_slug = {p.get('slug'): p.get('category') for p in projects}
    category = category_by_slug.get(current.get('projectSlug'))
    if not category:
        return []

    related = [
        cs for cs in case_studies
        if cs.get('slug') != slug and category_by_slug.get(cs.get('projectSlug')) == category
    ]
    return sort_case_studies(related)[:limit]


def case_study_statistics(case_studies, projects):
    category_by_slug = {p.get('slug'): p.get('category') for p in projects}
    categories = set()
    technologies = set()
    lessons = 0
    for cs in case_studies:
        category = category_by_slug.get(cs.get('projectSlug'))
        if category:
            categories.add(category)
        for tech in cs.get('technologiesUtilized') or []:
            if isinstance(tech, dict) and tech.get('name'):
                technologies.add(tech['name'])
        lessons += len(cs.get('lessonsLearned') or [])

    total = len(case_studies)
    return {
        'totalCaseStudies': total,
        'featuredCaseStudies': sum(1 for cs in case_studies if cs.get('featured')),
        'categoriesCount': len(categories),
        'technologiesCount': len(technologies),
        'averageLessonsPerCase': round(lessons / total) if total else 0,
    }


def _limit_arg(default=None):
    value = request.args.get('limit', type=int)
    if value is None or value < 1:
        return default
    return value


def _truthy_arg(name):
    return request.args.get(name, '').lower() in ('1', 'true', 'yes')


# ===== API Routes =====

@projects_public_bp.route('/projects', methods=['GET'])
def get_projects():
    """Get projects - public endpoint with optional filters."""
    try:
        projects = filter_projects(
            list_entities(PROJECT_SCHEMA),
            category=request.args.get('category'),
            status=request.args.get('status'),
            featured=_truthy_arg('featured'),
            technology=request.args.get('technology'),
            term=request.args.get('q', '').strip(),
        )
    except StoreError as e:
        print(f"Error loading projects: {e}")
        return jsonify({'error': 'Failed to fetch projects'}), 500

    limit = _limit_arg()
    return jsonify(projects[:limit] if limit else projects)


@projects_public_bp.route('/projects/stats', methods=['GET'])
def get_project_stats():
    try:
        return jsonify(project_statistics(list_entities(PROJECT_SCHEMA)))
    except StoreError as e:
        print(f"Error loading projects: {e}")
        return jsonify({'error': 'Failed to fetch project statistics'}), 500


@projects_public_bp.route('/projects/<slug>', methods=['GET'])
def get_project(slug):
    try:
        project = get_entity_by_slug(PROJECT_SCHEMA, slug)
    except StoreError as e:
        print(f"Error loading projects: {e}")
        return jsonify({'error': 'Failed to fetch project'}), 500

    if not project:
        return jsonify({'error': 'Project not found'}), 404
    return jsonify(project)


@projects_public_bp.route('/projects/<slug>/related', methods=['GET'])
def get_related_projects(slug):
    try:
        projects = list_entities(PROJECT_SCHEMA)
    except StoreError as e:
        print(f"Error loading projects: {e}")
        return jsonify({'error': 'Failed to fetch related projects'}), 500
    return jsonify(related_projects(projects, slug, _limit_arg(3)))


@projects_public_bp.route('/projects/<slug>/case-study', methods=['GET'])
def get_project_case_study(slug):
    """Case study written for a given project, if any"""
    try:
        case_studies = list_entities(CASE_STUDY_SCHEMA)
    except StoreError as e:
        print(f"Error loading case studies: {e}")
        return jsonify({'error': 'Failed to fetch case study'}), 500

    case_study = next((cs for cs in case_studies if cs.get('projectSlug') == slug), None)
    if not case_study:
        return jsonify({'error': 'Case study not found'}), 404
    return jsonify(case_study)


@projects_public_bp.route('/case-studies', methods=['GET'])
def get_case_studies():
    try:
        case_studies = sort_case_studies(list_entities(CASE_STUDY_SCHEMA))
    except StoreError as e:
        print(f"Error loading case studies: {e}")
        return jsonify({'error': 'Failed to fetch case studies'}), 500

    if _truthy_arg('featured'):
        case_studies = [cs for cs in case_studies if cs.get('featured')]
    limit = _limit_arg()
    return jsonify(case_studies[:limit] if limit else case_studies)


@projects_public_bp.route('/case-studies/stats', methods=['GET'])
def get_case_study_stats():
    try:
        stats = case_study_statistics(list_entities(CASE_STUDY_SCHEMA), list_entities(PROJECT_SCHEMA))
    except StoreError as e:
        print(f"Error loading case studies: {e}")
        return jsonify({'error': 'Failed to fetch case study statistics'}), 500
    return jsonify(stats)


@projects_public_bp.route('/case-studies/<slug>', methods=['GET'])
def get_case_study(slug):
    try:
        case_study = get_entity_by_slug(CASE_STUDY_SCHEMA, slug)
    except StoreError as e:
        print(f"Error loading case studies: {e}")
        return jsonify({'error': 'Failed to fetch case study'}), 500

    if not case_study:
        return jsonify({'error': 'Case study not found'}), 404
    return jsonify(case_study)


@projects_public_bp.route('/case-studies/<slug>/related', methods=['GET'])
def get_related_case_studies(slug):
    try:
        related = related_case_studies(
            list_entities(CASE_STUDY_SCHEMA), list_entities(PROJECT_SCHEMA), slug, _limit_arg(3)
        )
    except StoreError as e:
        print(f"Error loading case studies: {e}")
        return jsonify({'error': 'Failed to fetch related case studies'}), 500
    return jsonify(related)
