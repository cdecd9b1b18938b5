"""
Contact Submission Errors

Failures raised by the store, report builder and notifier. Only
validation-flavoured errors ever reach the client with field detail.
"""


class ContactError(Exception):
    """Base exception for contact submission errors"""
    def __init__(self, message: str, details: list = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class SubmissionValidationError(ContactError):
    """Raised when a submission breaks the contact form rules."""
    pass


class PersistenceError(ContactError):
    """Raised when the store cannot persist or read submissions."""
    pass


class PersistenceValidationError(PersistenceError):
    """Raised when the store's own model validation rejects a submission."""
    pass


class ReportError(ContactError):
    """Raised when the spreadsheet export cannot be built."""
    pass


class NotificationError(ContactError):
    """Raised when an outbound email cannot be rendered or sent."""
    pass
