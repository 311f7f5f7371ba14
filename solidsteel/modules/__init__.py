"""
Solid Steel Modules
===================

One Flask blueprint per feature. SolidSteel(app) registers them in this order.
"""

# module name -> blueprint attribute exported by the module package
MODULE_BLUEPRINTS = {
    'dashboard': 'dashboard_bp',
    'projects': 'projects_bp',
    'case_studies': 'case_studies_bp',
    'projects_public': 'projects_public_bp',
    'contact': 'contact_bp',
    'subscribers': 'subscribers_bp',
    'uploads': 'uploads_bp',
    'blob': 'blob_bp',
}

__all__ = list(MODULE_BLUEPRINTS)
