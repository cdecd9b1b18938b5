"""
Contact Management Serializers

Validation and normalization for public contact form submissions.
"""
import unicodedata

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import RegexValidator, URLValidator
from django.utils.html import escape
from phonenumber_field.phonenumber import PhoneNumber
from phonenumbers import NumberParseException
from rest_framework import serializers
from rest_framework.settings import api_settings


NAME_LENGTH_MESSAGE = 'Name must be between 2 and 100 characters'
MESSAGE_LENGTH_MESSAGE = 'Message must be between 10 and 1000 characters'

# Letters from any script, separated by whitespace
name_validator = RegexValidator(
    regex=r'^(?:[^\W\d_]|\s)+$',
    message='Name can only contain letters and spaces',
)

profile_url_validator = URLValidator(schemes=['http', 'https'])


class NameField(serializers.CharField):
    """CharField that composes accents (NFC) before the length and letter checks."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return unicodedata.normalize('NFC', value)


class ContactFormSubmitSerializer(serializers.Serializer):
    """
    Public contact form submission serializer.

    Trims every field, lowercases the email and HTML-escapes the message.
    Optional fields submitted blank come back as None.
    """

    name = NameField(
        min_length=2,
        max_length=100,
        validators=[name_validator],
        error_messages={
            'required': 'Name is required',
            'blank': 'Name is required',
            'null': 'Name is required',
            'min_length': NAME_LENGTH_MESSAGE,
            'max_length': NAME_LENGTH_MESSAGE,
        },
        help_text="Name of the person getting in touch"
    )

    email = serializers.EmailField(
        max_length=254,
        error_messages={
            'required': 'Email is required',
            'blank': 'Email is required',
            'null': 'Email is required',
            'invalid': 'Please provide a valid email address',
            'max_length': 'Email address is too long',
        },
        help_text="Valid email address for follow-up"
    )

    phone = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        max_length=20,
        error_messages={'max_length': 'Phone number is too long'},
        help_text="Optional phone number"
    )

    linkedinProfile = serializers.CharField(
        source='linkedin_profile',
        required=False,
        allow_blank=True,
        allow_null=True,
        max_length=500,
        error_messages={'max_length': 'URL is too long'},
        help_text="Optional LinkedIn/Naukri profile URL"
    )

    message = serializers.CharField(
        min_length=10,
        max_length=1000,
        error_messages={
            'required': 'Message is required',
            'blank': 'Message is required',
            'null': 'Message is required',
            'min_length': MESSAGE_LENGTH_MESSAGE,
            'max_length': MESSAGE_LENGTH_MESSAGE,
        },
        help_text="Message content (10-1000 characters)"
    )

    def validate_email(self, value):
        """Normalize email to lowercase."""
        return value.lower()

    def validate_phone(self, value):
        """Accept anything the phone number parser recognizes."""
        if not value:
            return None
        try:
            number = PhoneNumber.from_string(
                value, region=getattr(settings, 'PHONENUMBER_DEFAULT_REGION', None)
            )
        except NumberParseException:
            number = None
        if number is None or not number.is_valid():
            raise serializers.ValidationError('Please provide a valid phone number')
        return value

    def validate_linkedinProfile(self, value):
        """Require an absolute http(s) URL."""
        if not value:
            return None
        try:
            profile_url_validator(value)
        except DjangoValidationError:
            raise serializers.ValidationError(
                'Please provide a valid URL for LinkedIn/Naukri profile'
            )
        return value

    def validate_message(self, value):
        """Escape HTML once the length rules have passed."""
        return str(escape(value))


def collect_violations(serializer):
    """
    Flatten serializer errors into violation records.

    One record per failing field, carrying the first message for that
    field and the raw value that was submitted.
    """
    initial = serializer.initial_data if hasattr(serializer.initial_data, 'get') else {}

    violations = []
    for field, messages in serializer.errors.items():
        if isinstance(messages, dict):
            messages = list(messages.values())
        violations.append({
            'field': field,
            'message': str(messages[0]) if messages else 'Invalid value',
            'value': None if field == api_settings.NON_FIELD_ERRORS_KEY else initial.get(field),
        })
    return violations


def validate_submission(payload):
    """
    Run the contact form rules against a raw payload.

    Returns ``(validated_data, [])`` on success or ``(None, violations)``.
    Never raises for malformed input.
    """
    serializer = ContactFormSubmitSerializer(data=payload)
    if serializer.is_valid():
        return dict(serializer.validated_data), []
    return None, collect_violations(serializer)
