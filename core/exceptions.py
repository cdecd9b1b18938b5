"""
API exception handling.

Wraps DRF's default handler so framework errors (malformed JSON, wrong
method, throttling) come back in the same envelope as the contact API:
``{success: false, error, timestamp}``.
"""
import logging

from django.utils import timezone
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _error_text(detail):
    if isinstance(detail, dict):
        detail = detail.get('detail', next(iter(detail.values()), ''))
    if isinstance(detail, list):
        detail = detail[0] if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER returning the contact API error envelope."""
    response = exception_handler(exc, context)
    if response is None:
        # Unhandled: Django turns it into a 500 via handler500
        return None

    view = context.get('view')
    logger.warning(
        f"API error in {view.__class__.__name__ if view else 'unknown view'}: "
        f"{response.status_code} {exc}"
    )

    response.data = {
        'success': False,
        'error': _error_text(response.data),
        'timestamp': timezone.now(),
    }
    return response
