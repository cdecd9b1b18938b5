"""
Email body renderers for contact notifications.

A renderer is any object with ``render(message, **context) -> str``
returning HTML. The notifier loads them from the
CONTACT_ADMIN_EMAIL_RENDERER / CONTACT_USER_EMAIL_RENDERER settings.
"""
from django.conf import settings
from django.template.loader import render_to_string
from django.utils.module_loading import import_string


class TemplateRenderer:
    """Render a Django template with the submission as ``contact``."""

    template_name = None

    def get_context(self, message, **context):
        return {
            'contact': message,
            'submitted_at': message.created_at,
            **context,
        }

    def render(self, message, **context) -> str:
        return render_to_string(self.template_name, self.get_context(message, **context))


class AdminNotificationRenderer(TemplateRenderer):
    """Notification for the site owner. Expects ``reference`` and ``attachment_included``."""

    template_name = 'contact/emails/admin_notification.html'

    def get_context(self, message, **context):
        context.setdefault('reference', str(message.id))
        context.setdefault('attachment_included', False)
        return super().get_context(message, **context)


class UserConfirmationRenderer(TemplateRenderer):
    """Acknowledgment sent back to the submitter."""

    template_name = 'contact/emails/user_confirmation.html'

    def get_context(self, message, **context):
        context.setdefault('owner_name', settings.CONTACT_OWNER_NAME)
        context.setdefault('owner_title', getattr(settings, 'CONTACT_OWNER_TITLE', ''))
        context.setdefault('social_links', getattr(settings, 'CONTACT_SOCIAL_LINKS', []))
        context.setdefault('frontend_url', settings.FRONTEND_URL)
        return super().get_context(message, **context)


def get_renderer(setting_name, default):
    """Instantiate the renderer class named by a dotted-path setting."""
    return import_string(getattr(settings, setting_name, default))()
