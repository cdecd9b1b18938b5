"""
Contact Notification Service

Sends the two emails that follow a submission:
- Admin notification (with the contact database spreadsheet when available)
- Acknowledgment to the submitter
"""
from email.utils import formataddr
from html import unescape
import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.utils.html import strip_tags

from .exceptions import NotificationError
from .renderers import get_renderer
from .reports import XLSX_CONTENT_TYPE, get_report_filename

logger = logging.getLogger(__name__)

ADMIN_SENDER_NAME = 'Portfolio Contact Form'
USER_SUBJECT = 'Thank you for reaching out!'


def is_email_configured():
    """Email is usable only when SMTP credentials are present."""
    return bool(
        getattr(settings, 'EMAIL_HOST_USER', '') and getattr(settings, 'EMAIL_HOST_PASSWORD', '')
    )


def plain_text(html):
    """Text alternative for an HTML body, with entities decoded for the reader."""
    return unescape(strip_tags(html))


class ContactNotifier:
    """
    Deliver contact notifications over the configured mail backend.

    send() never raises; it reports the outcome as
    ``{'delivered': bool, 'error': str or None}``.
    """

    def __init__(self, admin_renderer=None, user_renderer=None):
        self._admin_renderer = admin_renderer
        self._user_renderer = user_renderer

    @property
    def admin_renderer(self):
        # Resolved on first send, inside the delivery error handling
        if self._admin_renderer is None:
            self._admin_renderer = get_renderer(
                'CONTACT_ADMIN_EMAIL_RENDERER', 'contact.renderers.AdminNotificationRenderer'
            )
        return self._admin_renderer

    @property
    def user_renderer(self):
        if self._user_renderer is None:
            self._user_renderer = get_renderer(
                'CONTACT_USER_EMAIL_RENDERER', 'contact.renderers.UserConfirmationRenderer'
            )
        return self._user_renderer

    @property
    def sender_address(self):
        return getattr(settings, 'CONTACT_EMAIL_FROM', '') or settings.EMAIL_HOST_USER

    @property
    def admin_address(self):
        return getattr(settings, 'CONTACT_EMAIL_TO', '')

    def send(self, message, attachment=None, reference=None):
        """
        Send the admin notification then the submitter acknowledgment.

        Args:
            message: ContactMessage, saved or not
            attachment: spreadsheet bytes to attach to the admin email
            reference: identifier shown to the admin (defaults to message.id)

        Returns:
            dict: {'delivered': bool, 'error': str or None}
        """
        if not is_email_configured():
            logger.warning("Email credentials not configured, skipping contact notifications")
            return {'delivered': False, 'error': 'Email not configured'}

        reference = reference or str(message.id)
        connection = None

        try:
            connection = get_connection(
                fail_silently=False,
                timeout=getattr(settings, 'EMAIL_TIMEOUT', None),
            )
            # Fail fast when the transport is unreachable
            connection.open()

            self.build_admin_email(message, attachment, reference, connection).send()
            logger.info("Admin notification sent for contact %s", reference)

            self.build_user_email(message, connection).send()
            logger.info("Confirmation sent to %s for contact %s", message.email, reference)
        except Exception as e:
            logger.error(f"Failed to send contact notifications for {reference}: {str(e)}")
            return {'delivered': False, 'error': str(e)}
        finally:
            if connection is not None:
                connection.close()

        return {'delivered': True, 'error': None}

    def build_admin_email(self, message, attachment, reference, connection=None):
        if not self.admin_address:
            raise NotificationError('No admin address configured for contact notifications')

        html = self.admin_renderer.render(
            message,
            reference=reference,
            attachment_included=attachment is not None,
        )
        email = EmailMultiAlternatives(
            subject=f"New Contact: {message.name} wants to connect!",
            body=plain_text(html),
            from_email=formataddr((ADMIN_SENDER_NAME, self.sender_address)),
            to=[self.admin_address],
            reply_to=[message.email],
            connection=connection,
        )
        email.attach_alternative(html, 'text/html')
        if attachment is not None:
            email.attach(get_report_filename(), attachment, XLSX_CONTENT_TYPE)
        return email

    def build_user_email(self, message, connection=None):
        html = self.user_renderer.render(message)
        email = EmailMultiAlternatives(
            subject=USER_SUBJECT,
            body=plain_text(html),
            from_email=formataddr((settings.CONTACT_OWNER_NAME, self.sender_address)),
            to=[message.email],
            connection=connection,
        )
        email.attach_alternative(html, 'text/html')
        return email
