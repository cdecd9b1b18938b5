"""
Tests for the submission flow with stand-in collaborators.
"""
from datetime import datetime, timezone as dt_timezone
from unittest.mock import MagicMock

import pytest
from rest_framework import status

from contact.exceptions import PersistenceError, PersistenceValidationError, ReportError
from contact.models import ContactMessage
from contact.services import ContactSubmissionService


def make_store(available=True, created=None, error=None):
    store = MagicMock()
    store.is_available.return_value = available
    if error is not None:
        store.create.side_effect = error
    else:
        store.create.side_effect = lambda data, ip_address=None, user_agent=None: created or ContactMessage(
            created_at=datetime(2024, 1, 1, tzinfo=dt_timezone.utc), **data
        )
    return store


def make_notifier(delivered=True, error=None):
    notifier = MagicMock()
    notifier.send.return_value = {'delivered': delivered, 'error': error}
    return notifier


def make_report_builder(content=b'xlsx-bytes', error=None):
    builder = MagicMock()
    if error is not None:
        builder.build.side_effect = error
    else:
        builder.build.return_value = content
    return builder


@pytest.fixture
def payload(valid_payload):
    return valid_payload


class TestSuccessfulSubmission:

    def test_returns_created_with_store_identifier(self, payload):
        stored = ContactMessage(
            id='abc123',
            name='Asha Verma',
            email='asha.verma@example.com',
            message='Hello there, project talk.',
            created_at=datetime(2024, 1, 1, tzinfo=dt_timezone.utc),
        )
        service = ContactSubmissionService(
            store=make_store(created=stored),
            report_builder=make_report_builder(),
            notifier=make_notifier(delivered=True),
        )

        body, status_code = service.submit(payload, '10.0.0.1', 'pytest')

        assert status_code == status.HTTP_201_CREATED
        assert body['success'] is True
        assert body['data'] == {
            'id': 'abc123',
            'submittedAt': datetime(2024, 1, 1, tzinfo=dt_timezone.utc),
            'emailSent': True,
        }

    def test_passes_provenance_and_attachment(self, payload):
        store = make_store()
        notifier = make_notifier()
        service = ContactSubmissionService(
            store=store, report_builder=make_report_builder(b'report'), notifier=notifier
        )

        service.submit(payload, '10.0.0.1', 'Mozilla/5.0')

        _, kwargs = store.create.call_args
        assert kwargs == {'ip_address': '10.0.0.1', 'user_agent': 'Mozilla/5.0'}
        assert store.create.call_args[0][0]['email'] == 'asha.verma@example.com'
        assert notifier.send.call_args.kwargs['attachment'] == b'report'

    def test_report_failure_still_notifies_without_attachment(self, payload):
        notifier = make_notifier()
        service = ContactSubmissionService(
            store=make_store(),
            report_builder=make_report_builder(error=ReportError('disk on fire')),
            notifier=notifier,
        )

        body, status_code = service.submit(payload)

        assert status_code == status.HTTP_201_CREATED
        assert body['data']['emailSent'] is True
        notifier.send.assert_called_once()
        assert notifier.send.call_args.kwargs['attachment'] is None

    def test_undelivered_email_still_succeeds(self, payload):
        service = ContactSubmissionService(
            store=make_store(),
            report_builder=make_report_builder(),
            notifier=make_notifier(delivered=False, error='Email not configured'),
        )

        body, status_code = service.submit(payload)

        assert status_code == status.HTTP_201_CREATED
        assert body['success'] is True
        assert body['data']['emailSent'] is False

    def test_notifier_crash_is_reported_as_undelivered(self, payload):
        notifier = MagicMock()
        notifier.send.side_effect = RuntimeError('backend import failed')
        service = ContactSubmissionService(
            store=make_store(), report_builder=make_report_builder(), notifier=notifier
        )

        body, status_code = service.submit(payload)

        assert status_code == status.HTTP_201_CREATED
        assert body['success'] is True
        assert body['data']['emailSent'] is False

    def test_unexpected_report_error_sends_without_attachment(self, payload):
        notifier = make_notifier()
        service = ContactSubmissionService(
            store=make_store(),
            report_builder=make_report_builder(error=RuntimeError('bad time zone')),
            notifier=notifier,
        )

        body, status_code = service.submit(payload)

        assert status_code == status.HTTP_201_CREATED
        assert body['data']['emailSent'] is True
        assert notifier.send.call_args.kwargs['attachment'] is None


class TestValidationFailure:

    def test_returns_400_and_touches_nothing(self):
        store = make_store()
        notifier = make_notifier()
        builder = make_report_builder()
        service = ContactSubmissionService(store=store, report_builder=builder, notifier=notifier)

        body, status_code = service.submit({'name': 'J', 'email': 'a@b.com', 'message': 'short'})

        assert status_code == status.HTTP_400_BAD_REQUEST
        assert body['success'] is False
        assert body['error'] == 'Validation failed'
        assert [d['field'] for d in body['details']] == ['name', 'message']
        assert 'timestamp' in body
        store.is_available.assert_not_called()
        store.create.assert_not_called()
        builder.build.assert_not_called()
        notifier.send.assert_not_called()


class TestStoreUnavailable:

    def test_skips_report_and_returns_temporary_identifier(self, payload):
        store = make_store(available=False)
        builder = make_report_builder()
        notifier = make_notifier(delivered=True)
        service = ContactSubmissionService(store=store, report_builder=builder, notifier=notifier)

        body, status_code = service.submit(payload, '10.0.0.1', 'pytest')

        assert status_code == status.HTTP_200_OK
        assert body['success'] is True
        assert body['data']['id'].startswith('temp-')
        assert body['data']['emailSent'] is True
        assert 'Database temporarily unavailable' in body['message']
        store.create.assert_not_called()
        builder.build.assert_not_called()

        kwargs = notifier.send.call_args.kwargs
        assert kwargs['attachment'] is None
        assert kwargs['reference'] == body['data']['id']

    def test_email_failure_changes_message_only(self, payload):
        service = ContactSubmissionService(
            store=make_store(available=False),
            report_builder=make_report_builder(),
            notifier=make_notifier(delivered=False, error='Connection refused'),
        )

        body, status_code = service.submit(payload)

        assert status_code == status.HTTP_200_OK
        assert body['data']['emailSent'] is False
        assert 'Database and email temporarily unavailable' in body['message']


class TestStoreFailures:

    def test_store_validation_error_is_client_error(self, payload):
        details = [{'field': 'message', 'message': 'Too long', 'value': 'x'}]
        notifier = make_notifier()
        service = ContactSubmissionService(
            store=make_store(error=PersistenceValidationError('invalid', details=details)),
            report_builder=make_report_builder(),
            notifier=notifier,
        )

        body, status_code = service.submit(payload)

        assert status_code == status.HTTP_400_BAD_REQUEST
        assert body['error'] == 'Validation failed'
        assert body['details'] == details
        notifier.send.assert_not_called()

    def test_store_write_failure_is_server_error(self, payload, settings):
        settings.DEBUG = False
        service = ContactSubmissionService(
            store=make_store(error=PersistenceError('connection reset')),
            report_builder=make_report_builder(),
            notifier=make_notifier(),
        )

        body, status_code = service.submit(payload)

        assert status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert body == {
            'success': False,
            'error': 'Failed to submit contact form',
            'message': 'An unexpected error occurred. Please try again later.',
            'timestamp': body['timestamp'],
        }

    def test_unexpected_error_includes_detail_in_debug(self, payload, settings):
        settings.DEBUG = True
        service = ContactSubmissionService(
            store=make_store(error=RuntimeError('boom')),
            report_builder=make_report_builder(),
            notifier=make_notifier(),
        )

        body, status_code = service.submit(payload)

        assert status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert body['message'] == 'boom'
        assert 'RuntimeError' in body['stack']
