"""
Comprehensive Tests for Contact Management System
"""
import logging
from datetime import timedelta
from io import BytesIO
from unittest.mock import patch

import openpyxl
import pytest
from django.core import mail
from rest_framework import status

from contact.exceptions import PersistenceValidationError
from contact.models import ContactMessage
from contact.reports import XLSX_CONTENT_TYPE
from contact.store import ContactStore

SUBMIT_URL = '/api/contact'


@pytest.mark.django_db
class TestContactFormSubmission:
    """Test public contact form submission."""

    def test_submit_valid_contact_form(self, api_client, email_settings, valid_payload):
        """Test successful contact form submission."""
        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body['success'] is True
        assert body['message'].startswith('Thank you for reaching out!')
        assert body['data']['emailSent'] is True
        assert body['data']['submittedAt'].endswith('Z')

        contact = ContactMessage.objects.get()
        assert str(contact.id) == body['data']['id']
        assert contact.email == 'asha.verma@example.com'
        assert contact.linkedin_profile == 'https://www.linkedin.com/in/asha-verma'
        assert contact.status == ContactMessage.STATUS_NEW

    def test_trailing_slash_is_accepted(self, api_client, no_email_settings, valid_payload):
        response = api_client.post(SUBMIT_URL + '/', valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED

    def test_admin_email_carries_spreadsheet(self, api_client, email_settings, valid_payload):
        api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert len(mail.outbox) == 2
        admin_email = mail.outbox[0]
        filename, content, mimetype = admin_email.attachments[0]
        assert mimetype == XLSX_CONTENT_TYPE

        ws = openpyxl.load_workbook(BytesIO(content))['Contact Submissions']
        assert ws.cell(row=2, column=3).value == 'Asha Verma'

    def test_provenance_is_recorded(self, api_client, no_email_settings, valid_payload):
        api_client.post(
            SUBMIT_URL, valid_payload, format='json',
            HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1',
            HTTP_USER_AGENT='x' * 600,
        )

        contact = ContactMessage.objects.get()
        assert contact.ip_address == '203.0.113.7'
        assert len(contact.user_agent) == 500

    def test_unconfigured_email_still_succeeds(self, api_client, no_email_settings, valid_payload):
        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()['data']['emailSent'] is False
        assert ContactMessage.objects.count() == 1
        assert mail.outbox == []

    def test_broken_mail_setup_still_saves(self, api_client, email_settings, valid_payload):
        email_settings.EMAIL_BACKEND = 'no.such.Backend'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()['data']['emailSent'] is False
        assert ContactMessage.objects.count() == 1

    def test_broken_renderer_and_time_zone_still_save(self, api_client, email_settings, valid_payload):
        email_settings.CONTACT_ADMIN_EMAIL_RENDERER = 'contact.renderers.NoSuchRenderer'
        email_settings.CONTACT_REPORT_TIME_ZONE = 'Mars/Olympus_Mons'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()['data']['emailSent'] is False
        assert ContactMessage.objects.count() == 1
        assert mail.outbox == []

    def test_submit_missing_required_fields(self, api_client):
        """Test submission with missing fields."""
        response = api_client.post(SUBMIT_URL, {'phone': '+919876543210'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body['success'] is False
        assert body['error'] == 'Validation failed'
        assert sorted(d['field'] for d in body['details']) == ['email', 'message', 'name']
        assert 'timestamp' in body
        assert ContactMessage.objects.count() == 0

    def test_short_name_and_message(self, api_client):
        response = api_client.post(
            SUBMIT_URL, {'name': 'J', 'email': 'a@b.com', 'message': 'short'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        details = response.json()['details']
        assert [d['field'] for d in details] == ['name', 'message']
        assert details[1] == {
            'field': 'message',
            'message': 'Message must be between 10 and 1000 characters',
            'value': 'short',
        }

    def test_submit_invalid_email(self, api_client, valid_payload):
        """Test submission with invalid email."""
        response = api_client.post(SUBMIT_URL, {**valid_payload, 'email': 'invalid-email'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['details'][0]['field'] == 'email'

    def test_malformed_json(self, api_client):
        response = api_client.post(SUBMIT_URL, data='{"name": ', content_type='application/json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body['success'] is False
        assert 'JSON parse error' in body['error']

    def test_get_not_allowed(self, api_client):
        response = api_client.get(SUBMIT_URL)

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.json()['success'] is False


@pytest.mark.django_db
class TestDatabaseUnavailable:
    """Submissions are still accepted when the database is down."""

    def test_responds_with_temporary_identifier(self, api_client, email_settings, valid_payload):
        with patch.object(ContactStore, 'is_available', return_value=False), \
                patch('contact.reports.ContactReportBuilder.build') as build:
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert body['data']['id'].startswith('temp-')
        assert body['data']['emailSent'] is True
        assert body['message'] == (
            'Message received! Email sent successfully. (Database temporarily unavailable)'
        )
        build.assert_not_called()
        assert ContactMessage.objects.count() == 0

        admin_email = mail.outbox[0]
        assert admin_email.attachments == []
        assert body['data']['id'] in admin_email.alternatives[0][0]

    def test_database_and_email_down(self, api_client, no_email_settings, valid_payload):
        with patch.object(ContactStore, 'is_available', return_value=False):
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['data']['emailSent'] is False
        assert '(Database and email temporarily unavailable)' in body['message']

    def test_validation_still_applies(self, api_client):
        with patch.object(ContactStore, 'is_available', return_value=False):
            response = api_client.post(SUBMIT_URL, {'name': 'J'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestRateLimiting:
    """Test rate limiting for contact form."""

    def test_rate_limit_per_ip(self, api_client, no_email_settings, settings, valid_payload):
        """Test IP-based rate limiting."""
        settings.CONTACT_FORM_RATE_LIMIT = 3

        for _ in range(3):
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')
            assert response.status_code == status.HTTP_201_CREATED

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json() == {
            'success': False,
            'error': 'Too many requests, please try again later.',
        }
        assert int(response['Retry-After']) > 0

    def test_failed_attempts_count(self, api_client, settings):
        settings.CONTACT_FORM_RATE_LIMIT = 1

        api_client.post(SUBMIT_URL, {}, format='json')
        response = api_client.post(SUBMIT_URL, {}, format='json')

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_limits_are_per_ip(self, api_client, no_email_settings, settings, valid_payload):
        settings.CONTACT_FORM_RATE_LIMIT = 1

        first = api_client.post(SUBMIT_URL, valid_payload, format='json', HTTP_X_FORWARDED_FOR='198.51.100.1')
        second = api_client.post(SUBMIT_URL, valid_payload, format='json', HTTP_X_FORWARDED_FOR='198.51.100.2')

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_201_CREATED


class TestContactSmokeEndpoints:

    def test_health(self, api_client):
        response = api_client.get('/api/contact/health')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['message'] == 'Contact API is healthy'

    def test_test_route(self, api_client):
        response = api_client.get('/api/contact/test')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['message'] == 'Contact routes are working!'


@pytest.mark.django_db
class TestContactStore:

    def test_is_available(self):
        assert ContactStore().is_available() is True

    def test_create_sets_provenance_defaults(self):
        contact = ContactStore().create({
            'name': 'Ann Lee',
            'email': 'ann@example.com',
            'message': 'Hello there, nice work.',
        })

        assert contact.ip_address == 'unknown'
        assert contact.user_agent == 'unknown'
        assert contact.phone is None
        assert ContactMessage.objects.filter(pk=contact.pk).exists()

    def test_model_validation_runs_independently(self):
        with pytest.raises(PersistenceValidationError) as exc_info:
            ContactStore().create({
                'name': 'Ann Lee',
                'email': 'ann@example.com',
                'linkedin_profile': 'not a url',
                'message': 'x' * 6001,
            })

        fields = sorted(d['field'] for d in exc_info.value.details)
        assert fields == ['linkedinProfile', 'message']
        assert ContactMessage.objects.count() == 0

    def test_list_all_by_recency(self):
        store = ContactStore()
        first = store.create({'name': 'Ann Lee', 'email': 'a@example.com', 'message': 'First message here'})
        second = store.create({'name': 'Bob Ray', 'email': 'b@example.com', 'message': 'Second message here'})
        ContactMessage.objects.filter(pk=first.pk).update(created_at=second.created_at - timedelta(minutes=1))

        assert [m.id for m in store.list_all_by_recency()] == [second.id, first.id]


@pytest.mark.django_db
class TestContactMessageModel:

    def test_status_transitions(self, sample_contact_message):
        sample_contact_message.mark_read()
        sample_contact_message.refresh_from_db()
        assert sample_contact_message.status == ContactMessage.STATUS_READ

        sample_contact_message.mark_replied()
        sample_contact_message.refresh_from_db()
        assert sample_contact_message.status == ContactMessage.STATUS_REPLIED

        sample_contact_message.archive()
        sample_contact_message.refresh_from_db()
        assert sample_contact_message.status == ContactMessage.STATUS_ARCHIVED

    def test_new_message_is_logged(self, caplog):
        caplog.set_level(logging.INFO, logger='contact.signals')

        contact = ContactMessage.objects.create(
            name='Ann Lee', email='ann@example.com', message='Logged message content'
        )

        assert f"New contact message: {contact.id} from ann@example.com" in caplog.text


@pytest.mark.django_db
class TestContactAdmin:

    changelist = '/admin/contact/contactmessage/'

    def test_mark_as_read_action(self, admin_client, sample_contact_message):
        response = admin_client.post(self.changelist, {
            'action': 'mark_as_read',
            '_selected_action': [str(sample_contact_message.pk)],
        })

        assert response.status_code == 302
        sample_contact_message.refresh_from_db()
        assert sample_contact_message.status == ContactMessage.STATUS_READ

    def test_archive_action(self, admin_client, sample_contact_message):
        admin_client.post(self.changelist, {
            'action': 'archive_messages',
            '_selected_action': [str(sample_contact_message.pk)],
        })

        sample_contact_message.refresh_from_db()
        assert sample_contact_message.status == ContactMessage.STATUS_ARCHIVED

    def test_export_to_excel_action(self, admin_client, sample_contact_message):
        response = admin_client.post(self.changelist, {
            'action': 'export_to_excel',
            '_selected_action': [str(sample_contact_message.pk)],
        })

        assert response.status_code == 200
        assert response['Content-Type'] == XLSX_CONTENT_TYPE
        assert 'contact-database-' in response['Content-Disposition']
        wb = openpyxl.load_workbook(BytesIO(response.content))
        assert wb['Contact Submissions'].cell(row=2, column=3).value == 'John Doe'

    def test_changelist_renders(self, admin_client, sample_contact_message):
        response = admin_client.get(self.changelist)

        assert response.status_code == 200
        assert b'John Doe' in response.content
