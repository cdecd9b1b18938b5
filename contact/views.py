"""
Contact Management Views

Public API endpoints for contact form submission.
"""
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from django.utils import timezone

from .rate_limiting import rate_limit_contact_form, get_client_ip
from .services import ContactSubmissionService


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact

    No authentication required. Rate limited per client IP.
    """

    permission_classes = [AllowAny]

    def get_service(self):
        return ContactSubmissionService()

    @rate_limit_contact_form()
    def post(self, request):
        """Submit a contact form."""
        # Malformed JSON raises ParseError here and is handled by DRF
        payload = request.data

        body, status_code = self.get_service().submit(
            payload,
            ip_address=get_client_ip(request),
            user_agent=request.META.get('HTTP_USER_AGENT', 'unknown')[:500],
        )
        return Response(body, status=status_code)


class ContactHealthView(APIView):
    """
    GET /api/contact/health
    """

    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            'success': True,
            'message': 'Contact API is healthy',
            'timestamp': timezone.now(),
        }, status=status.HTTP_200_OK)


class ContactTestView(APIView):
    """
    GET /api/contact/test
    """

    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            'success': True,
            'message': 'Contact routes are working!',
            'timestamp': timezone.now(),
        }, status=status.HTTP_200_OK)
