"""
Rate Limiting Utilities for Contact Form

Prevents spam and abuse of the contact form. Counters live in the Django
cache so the limiter keeps working while the database is down.
"""
from functools import wraps
import time

from django.conf import settings
from django.core.cache import cache
from rest_framework.response import Response
from rest_framework import status

CACHE_KEY_PREFIX = 'contact_form_rate'


def get_client_ip(request):
    """Get client IP address from request."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or 'unknown'


def check_rate_limit(identifier, max_count, window_seconds):
    """
    Count one attempt for identifier inside its fixed window.

    Args:
        identifier: IP address
        max_count: Maximum allowed attempts per window
        window_seconds: Window length in seconds

    Returns:
        tuple: (is_allowed, retry_after_seconds)
    """
    now = time.time()
    key = f"{CACHE_KEY_PREFIX}:{identifier}"

    window = cache.get(key)
    if window is None or window['start'] + window_seconds <= now:
        window = {'start': now, 'count': 0}

    window['count'] += 1
    remaining = max(int(window['start'] + window_seconds - now), 1)
    cache.set(key, window, timeout=remaining)

    if window['count'] > max_count:
        return False, remaining

    return True, 0


def rate_limit_contact_form(max_requests=None, window_seconds=None):
    """
    Decorator for rate limiting contact form submissions per client IP.

    Every attempt counts, whatever its outcome.

    Args:
        max_requests: Maximum attempts per window (default CONTACT_FORM_RATE_LIMIT)
        window_seconds: Window length (default CONTACT_FORM_RATE_LIMIT_WINDOW)
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapped_view(self, request, *args, **kwargs):
            limit = max_requests or getattr(settings, 'CONTACT_FORM_RATE_LIMIT', 1000)
            window = window_seconds or getattr(settings, 'CONTACT_FORM_RATE_LIMIT_WINDOW', 15 * 60)

            allowed, retry_after = check_rate_limit(get_client_ip(request), limit, window)
            if not allowed:
                return Response(
                    {
                        'success': False,
                        'error': 'Too many requests, please try again later.',
                    },
                    status=status.HTTP_429_TOO_MANY_REQUESTS,
                    headers={'Retry-After': str(retry_after)}
                )

            return view_func(self, request, *args, **kwargs)

        return wrapped_view
    return decorator
