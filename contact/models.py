"""
Contact Management Models

Database schema for portfolio contact form submissions.
"""
import uuid
from django.db import models
from django.core.validators import MinLengthValidator, MaxLengthValidator, EmailValidator


class ContactMessage(models.Model):
    """
    Contact form submissions from the portfolio website.

    Rows are created only by the public submission endpoint; the status
    is moved along afterwards from the Django admin.
    """

    STATUS_NEW = 'new'
    STATUS_READ = 'read'
    STATUS_REPLIED = 'replied'
    STATUS_ARCHIVED = 'archived'

    STATUS_CHOICES = [
        (STATUS_NEW, 'New'),
        (STATUS_READ, 'Read'),
        (STATUS_REPLIED, 'Replied'),
        (STATUS_ARCHIVED, 'Archived'),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # Contact Information
    name = models.CharField(
        max_length=100,
        validators=[MinLengthValidator(2)],
        help_text="Name of the person getting in touch"
    )

    email = models.EmailField(
        max_length=254,
        validators=[EmailValidator()],
        help_text="Lowercased email address for follow-up"
    )

    phone = models.CharField(
        max_length=20,
        null=True,
        blank=True,
        help_text="Optional phone number"
    )

    linkedin_profile = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Optional LinkedIn/Naukri profile URL"
    )

    # Message Details
    message = models.TextField(
        validators=[MinLengthValidator(10), MaxLengthValidator(6000)],
        help_text="HTML-escaped message content (10-1000 characters before escaping)"
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_NEW,
        db_index=True,
        help_text="Current status of the message"
    )

    # Provenance
    ip_address = models.CharField(
        max_length=64,
        default='unknown',
        help_text="IP address of the submitter"
    )

    user_agent = models.TextField(
        default='unknown',
        help_text="Browser user agent of the submitter"
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the message was submitted"
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the message was last updated"
    )

    class Meta:
        db_table = 'contact_messages'
        ordering = ['-created_at']
        verbose_name = 'Contact Message'
        verbose_name_plural = 'Contact Messages'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='contact_mes_status_0c4a7e_idx'),
            models.Index(fields=['email'], name='contact_mes_email_5f2b1d_idx'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}> ({self.status})"

    def _set_status(self, status):
        self.status = status
        self.save(update_fields=['status', 'updated_at'])

    def mark_read(self):
        """Mark message as read."""
        self._set_status(self.STATUS_READ)

    def mark_replied(self):
        """Mark message as replied."""
        self._set_status(self.STATUS_REPLIED)

    def archive(self):
        """Move message to the archive."""
        self._set_status(self.STATUS_ARCHIVED)
