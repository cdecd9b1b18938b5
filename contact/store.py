"""
Contact Message Store

Thin persistence layer over the ContactMessage model. The submission
service asks it for liveness before deciding whether to persist at all.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, connections

from .exceptions import PersistenceError, PersistenceValidationError
from .models import ContactMessage

logger = logging.getLogger(__name__)

# API field names for model validation errors
FIELD_ALIASES = {
    'linkedin_profile': 'linkedinProfile',
}


class ContactStore:
    """
    Durable record of contact submissions.

    Usage:
        store = ContactStore()
        if store.is_available():
            message = store.create(validated_data, ip_address='1.2.3.4', user_agent='curl')
    """

    def __init__(self, using='default'):
        self.using = using

    def is_available(self) -> bool:
        """Liveness check: open (or reuse) a connection without writing anything."""
        try:
            connections[self.using].ensure_connection()
        except DatabaseError as exc:
            logger.warning("Database unavailable: %s", exc)
            return False
        return True

    def create(self, data: dict, ip_address: str = None, user_agent: str = None) -> ContactMessage:
        """
        Persist a validated submission.

        Runs the model's own validation before saving, independent of the
        serializer rules.

        Raises:
            PersistenceValidationError: model validation rejected the data
            PersistenceError: the database failed the write
        """
        message = ContactMessage(
            name=data['name'],
            email=data['email'],
            phone=data.get('phone') or None,
            linkedin_profile=data.get('linkedin_profile') or None,
            message=data['message'],
            status=ContactMessage.STATUS_NEW,
            ip_address=(ip_address or 'unknown')[:64],
            user_agent=(user_agent or 'unknown')[:500],
        )

        try:
            message.full_clean(validate_unique=False, validate_constraints=False)
        except ValidationError as exc:
            details = [
                {
                    'field': FIELD_ALIASES.get(field, field),
                    'message': str(errors[0]),
                    'value': getattr(message, field, None),
                }
                for field, errors in exc.message_dict.items()
            ]
            raise PersistenceValidationError('Stored submission failed validation', details=details)

        try:
            message.save(using=self.using, force_insert=True)
        except DatabaseError as exc:
            raise PersistenceError(f"Failed to save contact message: {exc}") from exc

        return message

    def list_all_by_recency(self) -> list:
        """Every stored submission, newest first."""
        try:
            return list(
                ContactMessage.objects.using(self.using).order_by('-created_at')
            )
        except DatabaseError as exc:
            raise PersistenceError(f"Failed to read contact messages: {exc}") from exc
