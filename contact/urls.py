"""
Contact Management URL Configuration

Mounted at /api/contact/ by core.urls.
"""
from django.urls import path
from .views import ContactFormSubmitView, ContactHealthView, ContactTestView

app_name = 'contact'

urlpatterns = [
    path('', ContactFormSubmitView.as_view(), name='submit'),
    path('health', ContactHealthView.as_view(), name='health'),
    path('test', ContactTestView.as_view(), name='test'),
]
