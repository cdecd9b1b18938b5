"""
Contact Submission Service

Runs one contact form submission end to end:

    validate -> persist (or degrade) -> build report -> notify -> respond

Only validation and store-side validation failures reach the client with
field detail. The report and the emails are best-effort and never change
the outcome of a submission that has been received.
"""
import logging
import time
import traceback

from django.conf import settings
from django.utils import timezone
from rest_framework import status

from .exceptions import (
    PersistenceError,
    PersistenceValidationError,
    ReportError,
    SubmissionValidationError,
)
from .models import ContactMessage
from .notifications import ContactNotifier
from .reports import ContactReportBuilder
from .serializers import validate_submission
from .store import ContactStore

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = (
    "Thank you for reaching out! I have received your message "
    "and will get back to you soon."
)
DEGRADED_EMAIL_SENT_MESSAGE = (
    "Message received! Email sent successfully. (Database temporarily unavailable)"
)
DEGRADED_EMAIL_FAILED_MESSAGE = (
    "Message received! I'll get back to you soon. "
    "(Database and email temporarily unavailable)"
)
FAILURE_ERROR = 'Failed to submit contact form'
FAILURE_MESSAGE = 'An unexpected error occurred. Please try again later.'


class ContactSubmissionService:
    """
    Submission handler with injectable collaborators.

    Usage:
        service = ContactSubmissionService()
        body, status_code = service.submit(request.data, ip_address, user_agent)
    """

    def __init__(self, store=None, report_builder=None, notifier=None):
        self.store = store or ContactStore()
        self.report_builder = report_builder or ContactReportBuilder(store=self.store)
        self.notifier = notifier or ContactNotifier()

    def submit(self, payload, ip_address=None, user_agent=None):
        """
        Handle one submission.

        Returns:
            tuple: (response body dict, HTTP status code)
        """
        try:
            data = self.validate(payload)
        except SubmissionValidationError as e:
            logger.info("Contact submission rejected: %d invalid field(s)", len(e.details))
            return self.validation_failed(e.details), status.HTTP_400_BAD_REQUEST

        try:
            if not self.store.is_available():
                return self.submit_without_store(data, ip_address, user_agent)

            message = self.store.create(data, ip_address=ip_address, user_agent=user_agent)
            logger.info("Contact message %s saved", message.id)
        except PersistenceValidationError as e:
            logger.warning(f"Stored contact message failed validation: {e.message}")
            return self.validation_failed(e.details), status.HTTP_400_BAD_REQUEST
        except PersistenceError as e:
            logger.error(f"Failed to save contact message: {e.message}")
            return self.server_error(e), status.HTTP_500_INTERNAL_SERVER_ERROR
        except Exception as e:
            logger.exception("Unexpected error while submitting contact form")
            return self.server_error(e), status.HTTP_500_INTERNAL_SERVER_ERROR

        attachment = self.build_report()
        result = self.notify(message, attachment)

        return {
            'success': True,
            'message': SUCCESS_MESSAGE,
            'data': {
                'id': str(message.id),
                'submittedAt': message.created_at,
                'emailSent': result['delivered'],
            },
        }, status.HTTP_201_CREATED

    def validate(self, payload):
        data, violations = validate_submission(payload)
        if violations:
            raise SubmissionValidationError('Validation failed', details=violations)
        return data

    def submit_without_store(self, data, ip_address, user_agent):
        """Database is down: notify with a temporary reference and skip the report."""
        logger.warning("Database unavailable, contact submission will not be persisted")

        message = ContactMessage(
            name=data['name'],
            email=data['email'],
            phone=data.get('phone') or None,
            linkedin_profile=data.get('linkedin_profile') or None,
            message=data['message'],
            ip_address=ip_address or 'unknown',
            user_agent=user_agent or 'unknown',
            created_at=timezone.now(),
        )
        reference = f"temp-{int(time.time() * 1000)}"

        result = self.notify(message, None, reference=reference)

        return {
            'success': True,
            'message': (
                DEGRADED_EMAIL_SENT_MESSAGE if result['delivered']
                else DEGRADED_EMAIL_FAILED_MESSAGE
            ),
            'data': {
                'id': reference,
                'submittedAt': message.created_at,
                'emailSent': result['delivered'],
            },
        }, status.HTTP_200_OK

    def build_report(self):
        """Spreadsheet bytes, or None when the export could not be built."""
        try:
            content = self.report_builder.build()
        except ReportError as e:
            logger.warning(f"Contact export failed, sending notification without it: {e.message}")
            return None
        except Exception:
            logger.exception("Unexpected error building contact export")
            return None
        logger.info("Contact export built (%d bytes)", len(content))
        return content

    def notify(self, message, attachment, reference=None):
        try:
            result = self.notifier.send(message, attachment=attachment, reference=reference)
        except Exception as e:
            logger.exception("Unexpected error sending contact notifications")
            result = {'delivered': False, 'error': str(e)}
        if result['delivered']:
            logger.info("Contact notifications delivered for %s", reference or message.id)
        else:
            logger.warning("Contact notifications not delivered: %s", result.get('error'))
        return result

    def validation_failed(self, details):
        return {
            'success': False,
            'error': 'Validation failed',
            'details': details,
            'timestamp': timezone.now(),
        }

    def server_error(self, exc):
        body = {
            'success': False,
            'error': FAILURE_ERROR,
            'message': FAILURE_MESSAGE,
            'timestamp': timezone.now(),
        }
        if settings.DEBUG:
            body['message'] = str(exc)
            body['stack'] = ''.join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        return body
