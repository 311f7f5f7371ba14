"""
Shared fixtures: a fully initialised app against a temporary data directory.

Outbound HTTP (CRM, reCAPTCHA, blob storage) is never configured here;
tests patch the module-level functions they exercise.
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from solidsteel import SolidSteel

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse"


@pytest.fixture
def tmp_data_dir():
    """Create a temporary data directory, cleaned up after."""
    d = tempfile.mkdtemp(prefix="solidsteel-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


def make_app(data_dir, features=None, **overrides):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DATA_DIR"] = data_dir
    app.config["PROJECTS_JSON"] = os.path.join(data_dir, "projects.json")
    app.config["CASE_STUDIES_JSON"] = os.path.join(data_dir, "case-studies.json")
    app.config["SUBSCRIBERS_JSON"] = os.path.join(data_dir, "subscribers.json")
    app.config["LOGS_DB"] = os.path.join(data_dir, "app_logs.db")
    app.config["ADMIN_USERNAME"] = ADMIN_USERNAME
    app.config["ADMIN_PASSWORD"] = ADMIN_PASSWORD
    # Empty strings read as "not configured"
    app.config["BLOB_READ_WRITE_TOKEN"] = "blob-test-token"
    app.config["RECAPTCHA_SECRET_KEY"] = ""
    app.config["GROUNDHOGG_WEBHOOK_CONTACT_URL"] = "https://crm.example.com/contact"
    app.config["GROUNDHOGG_WEBHOOK_QUOTE_URL"] = "https://crm.example.com/quote"
    app.config["GROUNDHOGG_WEBHOOK_PROFORMA_URL"] = "https://crm.example.com/proforma"
    app.config.update(overrides)
    SolidSteel(app, {"features": features or {}})
    return app


@pytest.fixture
def app(tmp_data_dir):
    """Fully initialised Flask app with all Solid Steel modules registered."""
    return make_app(tmp_data_dir)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client holding a logged-in admin session."""
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["is_logged_in"] = True
    return client
