"""
Contact Management Signals

Django signals for contact-related events.
"""
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver
from .models import ContactMessage

logger = logging.getLogger(__name__)


@receiver(post_save, sender=ContactMessage)
def contact_message_post_save(sender, instance, created, **kwargs):
    """Log new contact submissions."""
    if created:
        logger.info(f"New contact message: {instance.id} from {instance.email}")
