"""
Shared fixtures. The email API and the verification API are replaced with
mocks; everything else (Flask app, forms, templates, retry) is the real code.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from formmail import create_app
from formmail.environ import Environ
from formmail.services import contact_service
from formmail.services.contact_service import ContactService

THANK_YOU_PAGE = 'https://example.com/thank-you.html'
ERROR_PAGE = 'https://example.com/error.html'

VALID_FORM = {
    'name': 'Ana Novak',
    'email': 'ana@example.org',
    'subject': 'Hello there',
    'message': 'I would like to know more.',
}


@pytest.fixture
def env_values():
    return {
        'NOREPLY_EMAIL': 'noreply@example.com',
        'NOREPLY_NAME': 'Example Website',
        'RECIPIENT_EMAIL': 'owner@example.com',
        'RECIPIENT_NAME': 'Site Owner',
        'THANK_YOU_PAGE': THANK_YOU_PAGE,
        'ERROR_PAGE': ERROR_PAGE,
    }


@pytest.fixture
def email_client():
    client = MagicMock()
    client.send.return_value = 'message-id'
    return client


@pytest.fixture
def verifier():
    return MagicMock()


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    delays = []
    monkeypatch.setattr('formmail.utils.retry.time.sleep', delays.append)
    return delays


@pytest.fixture
def make_service(env_values, email_client, verifier, sleeps):
    def _make(**overrides):
        values = dict(env_values, **overrides)
        env = Environ.from_mapping(values)
        return ContactService(env, email_client, verifier if env.recaptcha_enabled() else None)
    return _make


@pytest.fixture
def service_factory(email_client, verifier, sleeps):
    def _factory(env):
        return ContactService(env, email_client, verifier if env.recaptcha_enabled() else None)
    return _factory


@pytest.fixture
def app(env_values, service_factory):
    contact_service.reset()
    app = create_app('testing', env_loader=lambda: env_values, service_factory=service_factory)
    yield app
    contact_service.reset()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
