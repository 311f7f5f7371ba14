"""
Solid Steel - Flask backend for the Solid Steel Management website
==================================================================

Admin content editing, lead capture and blob image handling as a set of
Flask blueprints.

Usage:
    from flask import Flask
    from solidsteel import SolidSteel

    app = Flask(__name__)
    SolidSteel(app)

Individual modules can be switched off:

    SolidSteel(app, {'features': {'uploads': False}})
"""

import importlib
import logging
import os

from .core.config import Config, IS_PRODUCTION
from .modules import MODULE_BLUEPRINTS

__version__ = '0.1.0'
__author__ = 'Solid Steel Management'

logger = logging.getLogger(__name__)

# Keys copied from Config into app.config when the app does not set them
_CONFIG_DEFAULTS = (
    'DATA_DIR',
    'PROJECTS_JSON',
    'CASE_STUDIES_JSON',
    'SUBSCRIBERS_JSON',
    'LOGS_DB',
    'ADMIN_USERNAME',
    'ADMIN_PASSWORD',
    'BLOB_READ_WRITE_TOKEN',
    'BLOB_API_URL',
    'HERO_VIDEO_PATHNAME',
    'RECAPTCHA_SECRET_KEY',
    'RECAPTCHA_MIN_SCORE',
    'GROUNDHOGG_WEBHOOK_CONTACT_URL',
    'GROUNDHOGG_WEBHOOK_QUOTE_URL',
    'GROUNDHOGG_WEBHOOK_PROFORMA_URL',
)


class SolidSteel:
    """Flask extension that wires every Solid Steel module into an app."""

    def __init__(self, app=None, config=None):
        self._config = config or {}
        self._registered = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_defaults(app)
        self._setup_data_dir(app)
        self._register_modules(app)

        app.extensions['solidsteel'] = self
        logger.info(f"Solid Steel initialised with modules: {', '.join(self._registered)}")

    def _apply_defaults(self, app):
        if not app.config.get('SECRET_KEY'):
            if Config.SECRET_KEY:
                app.config['SECRET_KEY'] = Config.SECRET_KEY
            else:
                logger.warning("SECRET_COOKIE_PASSWORD is not set; admin sessions will not work")

        app.config['SESSION_COOKIE_NAME'] = Config.SESSION_COOKIE_NAME
        app.config['SESSION_COOKIE_HTTPONLY'] = True
        app.config['SESSION_COOKIE_SAMESITE'] = 'Strict'
        app.config.setdefault('SESSION_COOKIE_SECURE', IS_PRODUCTION)
        app.config['SESSION_PERMANENT'] = False

        if not app.config.get('MAX_CONTENT_LENGTH'):
            app.config['MAX_CONTENT_LENGTH'] = Config.MAX_CONTENT_LENGTH

        # Data files follow DATA_DIR when only the directory is overridden
        data_dir = app.config.get('DATA_DIR')
        if data_dir:
            app.config.setdefault('PROJECTS_JSON', os.path.join(data_dir, 'projects.json'))
            app.config.setdefault('CASE_STUDIES_JSON', os.path.join(data_dir, 'case-studies.json'))
            app.config.setdefault('SUBSCRIBERS_JSON', os.path.join(data_dir, 'subscribers.json'))
            app.config.setdefault('LOGS_DB', os.path.join(data_dir, 'app_logs.db'))

        for key in _CONFIG_DEFAULTS:
            app.config.setdefault(key, getattr(Config, key, None))

    def _setup_data_dir(self, app):
        data_dir = app.config.get('DATA_DIR')
        if data_dir:
            os.makedirs(data_dir, exist_ok=True)

    def _is_enabled(self, name):
        return self._config.get('features', {}).get(name, True)

    def _register_modules(self, app):
        for name, attr in MODULE_BLUEPRINTS.items():
            if not self._is_enabled(name):
                continue
            module = importlib.import_module(f'{__name__}.modules.{name}')
            app.register_blueprint(getattr(module, attr))
            self._registered.append(name)

    def get_registered_modules(self):
        """Names of the modules registered on the app"""
        return list(self._registered)


__all__ = ['SolidSteel', '__version__']
