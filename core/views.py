"""
Service-level endpoints: API index, health check, CORS test and JSON
error pages.
"""
import logging
import resource
import time

from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from contact.notifications import is_email_configured
from contact.store import ContactStore

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

AVAILABLE_ROUTES = ['/', '/api/health', '/api/test', '/api/contact']


class ApiRootView(APIView):
    """
    GET /
    """

    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            'success': True,
            'message': f"{settings.CONTACT_OWNER_NAME} - Portfolio Backend API",
            'version': settings.API_VERSION,
            'timestamp': timezone.now(),
            'endpoints': {
                'health': '/api/health',
                'test': '/api/test',
                'contact': '/api/contact',
            },
        })


class HealthCheckView(APIView):
    """
    GET /api/health

    Process and dependency status. Always 200 so load balancers can tell
    a degraded service from a dead one.
    """

    permission_classes = [AllowAny]

    def get(self, request):
        usage = resource.getrusage(resource.RUSAGE_SELF)
        database = 'connected' if ContactStore().is_available() else 'disconnected'

        data = {
            'success': True,
            'status': 'OK',
            'message': 'Portfolio Backend API is running',
            'timestamp': timezone.now(),
            'environment': settings.ENVIRONMENT,
            'port': settings.PORT,
            'database': database,
            'email': 'configured' if is_email_configured() else 'not configured',
            'uptime': round(time.monotonic() - STARTED_AT, 3),
            'memory': {
                # kilobytes on Linux
                'maxRss': usage.ru_maxrss,
            },
            'version': settings.API_VERSION,
        }
        logger.info(f"Health check: database {database}")
        return Response(data, status=status.HTTP_200_OK)


class CorsTestView(APIView):
    """
    GET /api/test

    Echoes the request origin and headers for CORS debugging.
    """

    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            'success': True,
            'message': 'CORS test successful',
            'timestamp': timezone.now(),
            'headers': dict(request.headers),
            'origin': request.headers.get('Origin'),
        })


def not_found(request, exception=None):
    """JSON 404 for unmatched routes."""
    logger.info(f"404 - Route not found: {request.method} {request.path}")
    return JsonResponse({
        'success': False,
        'error': 'Route not found',
        'message': f"Cannot {request.method} {request.path}",
        'availableRoutes': AVAILABLE_ROUTES,
    }, status=404)


def server_error(request):
    """JSON 500 for errors that escaped the API views."""
    return JsonResponse({
        'success': False,
        'error': 'Internal server error',
        'timestamp': timezone.now(),
    }, status=500)
