"""
Shared pytest fixtures.
"""
import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from contact.models import ContactMessage


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test so rate limit counters never leak."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def email_settings(settings):
    """SMTP credentials present, so notifications go to the locmem outbox."""
    settings.EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
    settings.EMAIL_HOST_USER = 'owner@example.com'
    settings.EMAIL_HOST_PASSWORD = 'app-password'
    settings.CONTACT_EMAIL_TO = 'owner@example.com'
    settings.CONTACT_EMAIL_FROM = 'owner@example.com'
    settings.CONTACT_OWNER_NAME = 'Jane Owner'
    return settings


@pytest.fixture
def no_email_settings(settings):
    settings.EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
    settings.EMAIL_HOST_USER = ''
    settings.EMAIL_HOST_PASSWORD = ''
    return settings


@pytest.fixture
def valid_payload():
    return {
        'name': 'Asha Verma',
        'email': 'Asha.Verma@Example.com',
        'phone': '+91 98765 43210',
        'linkedinProfile': 'https://www.linkedin.com/in/asha-verma',
        'message': 'Hello, I would like to discuss a freelance project with you.',
    }


@pytest.fixture
def sample_contact_message(db):
    return ContactMessage.objects.create(
        name='John Doe',
        email='john@example.com',
        message='This is a test message about a portfolio project.',
        ip_address='192.168.1.1',
        user_agent='pytest'
    )
