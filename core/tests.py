"""
Tests for service-level endpoints and error handling.
"""
from unittest.mock import patch

import pytest
from rest_framework import status

from contact.store import ContactStore


class TestApiRoot:

    def test_lists_endpoints(self, api_client, settings):
        settings.CONTACT_OWNER_NAME = 'Jane Owner'

        response = api_client.get('/')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert body['message'] == 'Jane Owner - Portfolio Backend API'
        assert body['version'] == '1.0.0'
        assert body['endpoints'] == {
            'health': '/api/health',
            'test': '/api/test',
            'contact': '/api/contact',
        }


@pytest.mark.django_db
class TestHealthCheck:

    def test_reports_connected_database(self, api_client, no_email_settings):
        response = api_client.get('/api/health')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['status'] == 'OK'
        assert body['database'] == 'connected'
        assert body['email'] == 'not configured'
        assert body['uptime'] >= 0
        assert body['memory']['maxRss'] > 0
        assert body['version'] == '1.0.0'
        assert 'environment' in body and 'port' in body

    def test_reports_disconnected_database(self, api_client):
        with patch.object(ContactStore, 'is_available', return_value=False):
            response = api_client.get('/api/health')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['database'] == 'disconnected'

    def test_reports_email_configured(self, api_client, email_settings):
        response = api_client.get('/api/health')

        assert response.json()['email'] == 'configured'


class TestCorsTest:

    def test_echoes_origin(self, api_client):
        response = api_client.get('/api/test', HTTP_ORIGIN='http://localhost:3000')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['message'] == 'CORS test successful'
        assert body['origin'] == 'http://localhost:3000'
        assert body['headers']['Origin'] == 'http://localhost:3000'

    def test_local_origin_is_allowed(self, api_client):
        response = api_client.get('/api/test', HTTP_ORIGIN='http://127.0.0.1:5173')

        assert response['Access-Control-Allow-Origin'] == 'http://127.0.0.1:5173'


class TestErrorHandling:

    def test_unknown_route_returns_json_404(self, api_client):
        response = api_client.get('/api/nothing-here')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        body = response.json()
        assert body['success'] is False
        assert body['error'] == 'Route not found'
        assert body['message'] == 'Cannot GET /api/nothing-here'
        assert '/api/contact' in body['availableRoutes']

    def test_framework_errors_use_envelope(self, api_client):
        response = api_client.delete('/api/health')

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        body = response.json()
        assert body['success'] is False
        assert body['error'] == 'Method "DELETE" not allowed.'
        assert 'timestamp' in body
