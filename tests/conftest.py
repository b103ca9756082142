"""
Shared fixtures: every app gets its own in-memory store, so no MongoDB
server is needed to run the suite.

Run with: pytest tests/ -v
Install with: pip install -e ".[dev]"
"""

import pytest

from mailwave import create_app
from mailwave.core import InMemoryDatabase


@pytest.fixture
def store():
    return InMemoryDatabase()


@pytest.fixture
def app(store):
    """Fully initialised Flask app with all MailWave modules registered."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'ENVIRONMENT': 'test',
        'API_URL': 'http://api.test/api',
    }, store=store)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
