"""
Contact Management App

Handles contact form submissions from the portfolio website:
- Public contact form submission with rate limiting
- Persistence with graceful degradation when the database is down
- Excel export of all submissions
- Email notifications (owner alert with export, submitter acknowledgment)
"""
