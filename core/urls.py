"""
URL configuration for core project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include

from contact.views import ContactFormSubmitView
from core.views import ApiRootView, CorsTestView, HealthCheckView

urlpatterns = [
    path('', ApiRootView.as_view(), name='api-root'),
    path('admin/', admin.site.urls),
    path('api/health', HealthCheckView.as_view(), name='health'),
    path('api/test', CorsTestView.as_view(), name='cors-test'),
    path('api/contact', ContactFormSubmitView.as_view(), name='contact-submit'),  # No trailing slash
    path('api/contact/', include('contact.urls')),  # Public contact form
]

handler404 = 'core.views.not_found'
handler500 = 'core.views.server_error'
